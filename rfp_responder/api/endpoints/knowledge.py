"""
지식 베이스 API입니다.
답변 근거가 되는 회사 지식 항목을 추가/검색/삭제합니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from rfp_responder.api.dependencies import company_id_header, pipeline_dependency
from rfp_responder.models import KnowledgeEntry, RetrievalResult
from rfp_responder.services.orchestrator import ProposalPipeline

router = APIRouter()


class KnowledgeCreate(BaseModel):
    """지식 항목 추가 요청"""
    title: str = Field(..., min_length=1)
    content: str = ""
    category: str = "general"
    tags: list[str] = Field(default_factory=list)


@router.post("")
async def create_entry(
    request: KnowledgeCreate,
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    entry = await pipeline.add_knowledge_entry(
        KnowledgeEntry(
            title=request.title,
            content=request.content,
            category=request.category,
            tags=set(request.tags),
            company_id=company_id,
        )
    )
    return entry.model_dump(mode="json")


@router.get("/search")
async def search_entries(
    q: str = Query(..., min_length=1),
    top_k: Optional[int] = Query(None, ge=1, le=50),
    category: Optional[str] = None,
    tags: Optional[List[str]] = Query(None),
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """
    지식 베이스 검색.
    제목 일치 +5, 본문 일치 +2 점수로 순위를 매기고 본문 하이라이트를 함께 반환합니다.
    """
    retrieval = RetrievalResult(
        query=q,
        results=await pipeline.search_knowledge(q, company_id, top_k=top_k, category=category, tags=tags),
    )
    return {
        "query": retrieval.query,
        "total": len(retrieval.results),
        "results": [
            {
                "id": item.entry.id,
                "title": item.entry.title,
                "category": item.entry.category,
                "score": item.score,
                "highlights": item.highlights,
            }
            for item in retrieval.results
        ],
    }


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: str,
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    await pipeline.delete_knowledge_entry(company_id, entry_id)
    return {"message": "지식 항목이 삭제되었습니다", "entry_id": entry_id}
