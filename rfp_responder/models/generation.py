"""
답변 생성 및 일괄 처리 결과 모델입니다.
모두 일시적인 값이며 질문을 갱신하는 데 바로 사용됩니다.
"""

from enum import Enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class GeneratedAnswer(BaseModel):
    """생성기가 만든 답변 초안"""

    answer: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    sources: list[str] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.now)
    fallback: bool = False  # 모델을 쓸 수 없어 정해진 대체 답변을 사용한 경우


class ComplexityLevel(str, Enum):
    """질문 복잡도"""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


class QuestionComplexity(BaseModel):
    """질문 복잡도 분석 결과"""

    complexity: ComplexityLevel
    word_count: int
    has_multiple_parts: bool
    is_technical: bool
    estimated_answer_length: str  # short, medium, long


class QuestionGenerationOutcome(BaseModel):
    """일괄 생성에서 질문 하나의 처리 결과"""

    question_id: str
    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None


class BulkGenerationResult(BaseModel):
    """일괄 생성 결과 집계"""

    proposal_id: str
    total_questions: int = 0
    processed_count: int = 0
    failed_count: int = 0
    results: list[QuestionGenerationOutcome] = Field(default_factory=list)


class IngestFileResult(BaseModel):
    """여러 파일 업로드 시 파일별 추출 결과"""

    filename: str
    success: bool
    question_count: int = 0
    error: Optional[str] = None
    error_code: Optional[str] = None
