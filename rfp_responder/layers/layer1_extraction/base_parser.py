"""모든 추출 파서(Parser)들이 상속받는 기본 클래스입니다.
업로드된 바이트 버퍼를 평문 텍스트로 바꾸는 공통 인터페이스를 정의합니다.
"""

from abc import ABC, abstractmethod

from rfp_responder.exceptions import ExtractionError


class BaseParser(ABC):
    """
    모든 파서의 부모(Base) 클래스입니다.

    모든 파서는 이 클래스를 상속받아 `_extract` 메서드를 구현해야 합니다.
    파서는 저장소에 아무것도 쓰지 않고 텍스트만 반환합니다.
    """

    @property
    @abstractmethod
    def supported_media_types(self) -> list[str]:
        """이 파서가 처리할 수 있는 미디어 타입 목록 (예: ['application/pdf'])"""
        pass

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """이 파서가 처리할 수 있는 파일 확장자 목록 (예: ['.pdf'])"""
        pass

    @abstractmethod
    def _extract(self, data: bytes, media_type: str) -> str:
        """
        실제 추출 로직. (자식 클래스에서 반드시 구현해야 함)

        라이브러리 예외는 그대로 던지면 `parse`에서 ExtractionError로 감쌉니다.
        """
        pass

    async def parse(self, data: bytes, media_type: str) -> str:
        """
        바이트 데이터를 텍스트로 변환합니다.

        Raises:
            ExtractionError: 파서가 실패한 경우 (원인 예외가 __cause__로 연결됨)
        """
        try:
            return self._extract(data, media_type)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(
                f"텍스트 추출에 실패했습니다: {type(e).__name__}",
                details={"media_type": media_type, "cause": str(e)},
            ) from e

    def can_parse(self, media_type: str) -> bool:
        """주어진 미디어 타입을 이 파서가 처리할 수 있는지 확인하는 함수"""
        return media_type in self.supported_media_types
