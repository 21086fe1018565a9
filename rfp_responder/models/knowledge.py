"""
지식 베이스 관련 데이터 모델입니다.
지식 항목 자체의 수명은 파이프라인 밖에서 관리되고, 검색기는 읽기만 합니다.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
import uuid


class KnowledgeEntry(BaseModel):
    """회사가 보유한 참고 문서 조각입니다."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    content: str = ""
    category: str = "general"
    tags: set[str] = Field(default_factory=set)
    company_id: str
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None


class ScoredEntry(BaseModel):
    """검색 결과 한 건: 지식 항목 + 점수 + 하이라이트 조각"""

    entry: KnowledgeEntry
    score: int
    highlights: list[str] = Field(default_factory=list)


class RetrievalResult(BaseModel):
    """질문 하나에 대한 검색 결과 (저장하지 않음)"""

    query: str
    results: list[ScoredEntry] = Field(default_factory=list)
