"""
제안서 응답 파이프라인 커스텀 예외 계층입니다.
각 레이어/서비스별 구조화된 에러 코드와 메시지를 제공합니다.
"""

from typing import Optional, Any


class ProposalPipelineError(Exception):
    """파이프라인 기본 예외 클래스."""

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class UnsupportedMediaTypeError(ProposalPipelineError):
    """Layer 1: 지원하지 않는 미디어 타입."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_MEDIA_001", details=details)


class ExtractionError(ProposalPipelineError):
    """Layer 1: 파서가 텍스트 추출에 실패한 경우 (원인 예외는 __cause__로 연결)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_EXTRACT_001", details=details)


class GenerationError(ProposalPipelineError):
    """Layer 4: 모델 호출이 실패했고 대체 응답도 적용되지 않는 경우."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_GEN_001", details=details)


class ModelInvocationError(ProposalPipelineError):
    """생성 모델 호출 실패 (타임아웃, 비정상 종료, 잘못된 응답 등)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_MODEL_001", details=details)


class ServiceUnavailableError(ModelInvocationError):
    """모델/서비스를 찾을 수 없음. 답변 생성기는 이 경우 대체 응답을 사용합니다."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.error_code = "ERR_MODEL_503"


class NotFoundError(ProposalPipelineError):
    """참조한 제안서 또는 질문이 존재하지 않음."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_NOTFOUND_001", details=details)


class InvalidTransitionError(ProposalPipelineError):
    """Layer 5: 질문 상태 머신이 허용하지 않는 전이 요청."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_STATE_001", details=details)


class StorageError(ProposalPipelineError):
    """파일 저장소 관련 에러."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_STORE_001", details=details)


class InputValidationError(ProposalPipelineError):
    """입력 유효성 검증 에러 (400 응답)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_INPUT_001", details=details)
