"""API 에러 응답 본문."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from rfp_responder.exceptions import ProposalPipelineError


class ErrorResponse(BaseModel):
    """
    파이프라인 예외를 그대로 옮긴 JSON 에러 본문.

    {"error_code": "ERR_NOTFOUND_001", "message": "...", "details": {...}, "timestamp": "..."}
    """

    error_code: str
    message: str
    details: Optional[Any] = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_exception(cls, exc: ProposalPipelineError) -> "ErrorResponse":
        return cls(error_code=exc.error_code, message=exc.message, details=exc.details)
