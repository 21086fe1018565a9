"""
Layer 5: 질문 검토 상태 머신

상태 전이:
    pending ──(생성/개선)──▶ drafted ──(사람)──▶ approved | edited

- 생성기는 final_answer를 절대 건드리지 않음
- 사람이 지정한 final_answer가 초안과 같으면 approved, 다르면 edited
- 어떤 연산도 질문을 pending으로 되돌리지 않음

각 함수는 갱신된 사본을 반환하며 입력 질문은 변경하지 않습니다.
"""

import logging
from datetime import datetime
from typing import Optional, Union

from rfp_responder.exceptions import InvalidTransitionError
from rfp_responder.models import GeneratedAnswer, Question, QuestionStatus

logger = logging.getLogger(__name__)

REVIEWED_STATUSES = (QuestionStatus.APPROVED, QuestionStatus.EDITED)


def can_generate(question: Question) -> bool:
    """일괄 생성 대상인지 (pending만 대상)"""
    return question.status == QuestionStatus.PENDING


def _review_status(final_answer: str, draft_answer: Optional[str]) -> QuestionStatus:
    return QuestionStatus.APPROVED if final_answer == draft_answer else QuestionStatus.EDITED


def _status_after_redraft(question: Question, new_draft: str) -> QuestionStatus:
    """새 초안이 들어온 뒤의 상태. 검토된 질문은 final_answer와 비교해 approved/edited를 다시 판정."""
    if question.status in REVIEWED_STATUSES and question.final_answer is not None:
        return _review_status(question.final_answer, new_draft)
    return QuestionStatus.DRAFTED


def apply_generated_answer(
    question: Question,
    answer: GeneratedAnswer,
    sources: Optional[list[str]] = None,
) -> Question:
    """
    생성된 초안을 질문에 반영합니다.

    pending/drafted → drafted. 이미 검토된 질문은 final_answer를 그대로 두고
    새 초안과 비교해 approved 또는 edited로 다시 판정합니다. (apply_improvement와 동일)

    Args:
        question: 대상 질문
        answer: 생성 결과
        sources: 질문에 기록할 출처 목록 (None이면 answer.sources)
    """
    status = _status_after_redraft(question, answer.answer)
    return question.model_copy(
        update={
            "draft_answer": answer.answer,
            "confidence": answer.confidence,
            "sources": list(sources if sources is not None else answer.sources),
            "generated_at": answer.generated_at,
            "status": status,
            "updated_at": datetime.now(),
        }
    )


def apply_human_update(
    question: Question,
    final_answer: Optional[str] = None,
    draft_answer: Optional[str] = None,
    status: Optional[Union[QuestionStatus, str]] = None,
    user_id: Optional[str] = None,
) -> Question:
    """
    사람이 요청한 답변/상태 변경을 반영합니다.

    Raises:
        InvalidTransitionError: 허용되지 않는 상태 요청
    """
    requested = QuestionStatus(status) if status is not None else None
    new_draft = draft_answer if draft_answer is not None else question.draft_answer
    new_final = question.final_answer
    new_status = question.status

    if requested in (QuestionStatus.PENDING, QuestionStatus.DRAFTED):
        raise InvalidTransitionError(
            f"'{requested.value}' 상태는 직접 지정할 수 없습니다",
            details={"question_id": question.id, "current": question.status.value},
        )

    if final_answer is not None:
        new_final = final_answer
        new_status = _review_status(final_answer, new_draft)
        if requested is not None and requested != new_status:
            raise InvalidTransitionError(
                f"최종 답변과 초안 비교 결과({new_status.value})가 요청 상태와 다릅니다",
                details={"question_id": question.id, "requested": requested.value},
            )
    elif requested == QuestionStatus.APPROVED:
        if not new_draft:
            raise InvalidTransitionError(
                "승인할 초안이 없습니다",
                details={"question_id": question.id, "current": question.status.value},
            )
        new_final = new_draft
        new_status = QuestionStatus.APPROVED
    elif requested == QuestionStatus.EDITED:
        if not new_final or new_final == new_draft:
            raise InvalidTransitionError(
                "edited 상태는 초안과 다른 최종 답변이 필요합니다",
                details={"question_id": question.id},
            )
        new_status = QuestionStatus.EDITED
    elif draft_answer is not None:
        if question.status in REVIEWED_STATUSES and new_final is not None:
            new_status = _review_status(new_final, new_draft)
        elif question.status == QuestionStatus.PENDING:
            new_status = QuestionStatus.DRAFTED

    logger.info(
        f"[Review] {question.id}: {question.status.value} → {new_status.value}"
        f"{f' (by {user_id})' if user_id else ''}"
    )
    return question.model_copy(
        update={
            "draft_answer": new_draft,
            "final_answer": new_final,
            "status": new_status,
            "updated_at": datetime.now(),
            "updated_by": user_id if user_id is not None else question.updated_by,
        }
    )


def apply_improvement(question: Question, improved_text: str) -> Question:
    """개선된 초안 반영. pending → drafted, 검토된 질문은 approved/edited를 다시 판정."""
    status = _status_after_redraft(question, improved_text)
    return question.model_copy(
        update={
            "draft_answer": improved_text,
            "status": status,
            "generated_at": datetime.now(),
            "updated_at": datetime.now(),
        }
    )
