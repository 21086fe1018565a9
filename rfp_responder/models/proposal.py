"""
제안서(Proposal)와 질문(Question) 데이터 모델입니다.
질문은 별도 집합체가 아니라 제안서 안에 순서대로 포함됩니다.
"""

from enum import Enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
import uuid


class Category(str, Enum):
    """질문 분류 체계입니다. (키워드 기반으로 자동 분류)"""

    PRICING = "pricing"
    TECHNICAL = "technical"
    TIMELINE = "timeline"
    EXPERIENCE = "experience"
    SECURITY = "security"
    SUPPORT = "support"
    GENERAL = "general"


class QuestionStatus(str, Enum):
    """
    질문 하나의 답변 진행 상태입니다.

    pending -> drafted -> approved | edited
    """

    PENDING = "pending"   # 추출 직후, 답변 없음
    DRAFTED = "drafted"   # AI 초안 생성됨
    APPROVED = "approved" # 사람이 초안을 그대로 승인
    EDITED = "edited"     # 사람이 초안과 다른 최종 답변을 작성


class ProposalStatus(str, Enum):
    """제안서 상태입니다. 삭제는 상태값만 바꾸는 소프트 삭제입니다."""

    DRAFT = "draft"
    ACTIVE = "active"
    DELETED = "deleted"


class Question(BaseModel):
    """
    제안서 안의 개별 질문입니다.

    final_answer는 사람의 명시적인 조작으로만 설정되며, 생성기는 절대 덮어쓰지 않습니다.
    """

    id: str = Field(..., description="제안서 내 고유 ID (q1, q2, ...)")
    question: str = Field(..., description="정리된 질문 텍스트")
    section: str = Field(default="General", description="질문이 속한 섹션 제목")
    category: Category = Category.GENERAL
    status: QuestionStatus = QuestionStatus.PENDING
    draft_answer: Optional[str] = None
    final_answer: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    sources: list[str] = Field(default_factory=list, description="답변 근거 식별자 목록")
    generated_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    @property
    def ordinal(self) -> int:
        """ID에서 순번을 꺼냅니다. (q12 -> 12)"""
        digits = self.id.lstrip("q")
        return int(digits) if digits.isdigit() else 0


class Proposal(BaseModel):
    """
    RFP 하나에 대한 응답 작업 단위입니다.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="제안서 고유 ID")
    user_id: str
    company_id: str
    title: str
    client_name: str = ""
    description: str = ""
    file_key: Optional[str] = None  # 원본 파일 참조 (Blob 저장소 키)
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    extracted_text: str = ""  # 추출 텍스트 앞부분 (미리보기용)
    questions: list[Question] = Field(default_factory=list)
    status: ProposalStatus = ProposalStatus.DRAFT
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def find_question(self, question_id: str) -> Optional[Question]:
        """ID로 질문을 찾습니다. 없으면 None."""
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def answered_questions(self) -> list[Question]:
        """최종 답변 또는 초안이 있는 질문들"""
        return [q for q in self.questions if q.final_answer or q.draft_answer]
