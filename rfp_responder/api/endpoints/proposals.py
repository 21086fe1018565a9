"""
제안서 API입니다.
RFP 파일을 업로드해 질문을 추출하고, 제안서와 질문 답변을 조회/수정합니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel

from rfp_responder.api.dependencies import company_id_header, pipeline_dependency, user_id_header
from rfp_responder.models import ProposalStatus, QuestionStatus
from rfp_responder.services.orchestrator import ProposalPipeline, UploadedFile

router = APIRouter()


class ProposalUpdate(BaseModel):
    """제안서 메타데이터 수정 요청"""
    title: Optional[str] = None
    client_name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProposalStatus] = None


class AnswerUpdate(BaseModel):
    """질문 답변 수정/승인 요청"""
    final_answer: Optional[str] = None
    draft_answer: Optional[str] = None
    status: Optional[QuestionStatus] = None


async def _read_uploads(files: List[UploadFile]) -> list[UploadedFile]:
    uploads = []
    for file in files:
        content = await file.read()
        uploads.append(UploadedFile(file.filename or "", content, file.content_type))
    return uploads


@router.post("/upload")
async def upload_proposal(
    files: List[UploadFile] = File(...),
    title: str = Form(...),
    client_name: str = Form(""),
    description: str = Form(""),
    company_id: str = Depends(company_id_header),
    user_id: str = Depends(user_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """
    RFP 파일 업로드 API.
    파일에서 질문을 추출해 새 제안서를 만듭니다.

    지원 형식: PDF, 워드(docx, doc), 텍스트(txt, md)
    """
    proposal = await pipeline.create_proposal_from_upload(
        user_id=user_id,
        company_id=company_id,
        title=title,
        files=await _read_uploads(files),
        client_name=client_name,
        description=description,
    )
    return {
        "message": f"질문 {len(proposal.questions)}개 추출 완료",
        "proposal": proposal.model_dump(mode="json"),
    }


@router.post("/extract")
async def extract_questions(
    files: List[UploadFile] = File(...),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """저장 없이 파일별 추출 결과만 확인하는 API"""
    results = await pipeline.ingest_many(await _read_uploads(files))
    return {
        "total": len(results),
        "succeeded": sum(1 for r in results if r.success),
        "results": [r.model_dump(mode="json") for r in results],
    }


@router.get("")
async def list_proposals(
    status: Optional[ProposalStatus] = None,
    limit: int = Query(50, ge=1, le=200),
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """회사의 제안서 목록 (최신 수정 순, 질문 본문은 제외)"""
    proposals = await pipeline.list_proposals(
        company_id, status=status.value if status else None, limit=limit
    )
    return {
        "total": len(proposals),
        "proposals": [
            {
                "id": p.id,
                "title": p.title,
                "client_name": p.client_name,
                "status": p.status.value,
                "question_count": len(p.questions),
                "answered_count": len(p.answered_questions()),
                "updated_at": p.updated_at.isoformat(),
            }
            for p in proposals
        ],
    }


@router.get("/{proposal_id}")
async def get_proposal(
    proposal_id: str,
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """제안서 상세 조회 (질문 포함)"""
    proposal = await pipeline.get_proposal(proposal_id, company_id)
    return proposal.model_dump(mode="json")


@router.get("/{proposal_id}/source-questions")
async def source_questions(
    proposal_id: str,
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """보관된 원본 파일에서 질문을 다시 추출해 보여줍니다. (제안서는 변경하지 않음)"""
    questions = await pipeline.extract_source_questions(proposal_id, company_id=company_id)
    return {
        "proposal_id": proposal_id,
        "total": len(questions),
        "questions": [q.model_dump(mode="json") for q in questions],
    }


@router.patch("/{proposal_id}")
async def update_proposal(
    proposal_id: str,
    update: ProposalUpdate,
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """제안서 메타데이터 수정"""
    proposal = await pipeline.update_proposal(
        proposal_id, update.model_dump(exclude_none=True), company_id=company_id
    )
    return proposal.model_dump(mode="json")


@router.delete("/{proposal_id}")
async def delete_proposal(
    proposal_id: str,
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """제안서 삭제 (소프트 삭제: 상태만 deleted로 변경)"""
    await pipeline.soft_delete_proposal(proposal_id, company_id=company_id)
    return {"message": "제안서가 삭제되었습니다", "proposal_id": proposal_id}


@router.patch("/{proposal_id}/questions/{question_id}")
async def update_answer(
    proposal_id: str,
    question_id: str,
    update: AnswerUpdate,
    company_id: str = Depends(company_id_header),
    user_id: str = Depends(user_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """
    질문 답변 수정/승인.

    - final_answer만 보내면 초안과 비교해 approved 또는 edited
    - status=approved만 보내면 초안을 그대로 승인
    """
    question = await pipeline.update_question_answer(
        proposal_id,
        question_id,
        final_answer=update.final_answer,
        draft_answer=update.draft_answer,
        status=update.status,
        user_id=user_id,
        company_id=company_id,
    )
    return question.model_dump(mode="json")
