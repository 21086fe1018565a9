"""
AI 답변 API입니다.
질문별 답변 생성/개선, 제안서 요약, 일괄 생성을 제공합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from rfp_responder.api.dependencies import company_id_header, pipeline_dependency
from rfp_responder.exceptions import InputValidationError
from rfp_responder.layers.layer4_generation import analyze_complexity
from rfp_responder.services.orchestrator import ProposalPipeline

router = APIRouter()


class GenerateAnswerRequest(BaseModel):
    """답변 생성 요청. question_id가 없으면 질문 텍스트로 초안만 만들어 반환 (저장 안 함)"""
    proposal_id: Optional[str] = None
    question_id: Optional[str] = None
    question: Optional[str] = None
    top_k: Optional[int] = Field(default=None, ge=1, le=50)


class ImproveAnswerRequest(BaseModel):
    proposal_id: str
    question_id: str
    feedback: str = Field(..., min_length=1)


class ProposalRequest(BaseModel):
    proposal_id: str


@router.post("/generate-answer")
async def generate_answer(
    request: GenerateAnswerRequest,
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """
    답변 생성 API.

    - proposal_id + question_id: 제안서 질문에 초안을 생성하고 저장
    - question: 저장 없이 초안만 생성
    """
    if request.proposal_id and request.question_id:
        question = await pipeline.generate_for_question(
            request.proposal_id, request.question_id, company_id=company_id, top_k=request.top_k
        )
        return {"question": question.model_dump(mode="json")}

    if not request.question or not request.question.strip():
        raise InputValidationError("proposal_id와 question_id, 또는 question이 필요합니다")

    context = await pipeline.retrieve_context(request.question, company_id, top_k=request.top_k)
    answer = await pipeline.generate_draft(request.question, context)
    return {
        "answer": answer.model_dump(mode="json"),
        "category": pipeline.classify(request.question).value,
        "complexity": analyze_complexity(request.question).model_dump(mode="json"),
    }


@router.post("/improve-answer")
async def improve_answer(
    request: ImproveAnswerRequest,
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """피드백으로 답변을 개선합니다. 결과는 초안으로 저장됩니다."""
    question = await pipeline.improve_question_answer(
        request.proposal_id, request.question_id, request.feedback, company_id=company_id
    )
    return {"question": question.model_dump(mode="json")}


@router.post("/generate-summary")
async def generate_summary(
    request: ProposalRequest,
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """답변된 질문들로 제안서 요약(Executive Summary)을 생성합니다."""
    summary = await pipeline.generate_summary(request.proposal_id, company_id=company_id)
    return {"proposal_id": request.proposal_id, "summary": summary}


@router.post("/bulk-generate")
async def bulk_generate(
    request: ProposalRequest,
    company_id: str = Depends(company_id_header),
    pipeline: ProposalPipeline = Depends(pipeline_dependency),
) -> dict:
    """pending 상태 질문 전체에 초안을 생성합니다. 질문별 실패는 결과에 포함됩니다."""
    proposal = await pipeline.get_proposal(request.proposal_id, company_id)
    result = await pipeline.bulk_generate(proposal)
    return result.model_dump(mode="json")
