"""
파이프라인이 사용하는 외부 협력자 인터페이스입니다.

구체적인 저장소/전송 방식은 파이프라인 범위 밖이며, 여기서는 계약만 정의합니다.
저장소는 읽기-수정-쓰기 방식이고 트랜잭션을 보장하지 않습니다. (마지막 쓰기가 이김)
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from rfp_responder.models import Proposal, Question, KnowledgeEntry


class BlobStore(ABC):
    """업로드된 원본 파일 저장소"""

    @abstractmethod
    async def get_bytes(self, reference: str) -> bytes:
        """참조 키로 파일 내용을 읽습니다. 없으면 NotFoundError."""
        pass

    @abstractmethod
    async def put_bytes(self, reference: str, data: bytes) -> str:
        """파일 내용을 저장하고 참조 키를 반환합니다."""
        pass


class KnowledgeRepository(ABC):
    """회사별 지식 베이스 항목 저장소"""

    @abstractmethod
    async def list_entries(self, company_id: str) -> list[KnowledgeEntry]:
        """회사의 전체 지식 항목 (검색기의 입력 풀)"""
        pass

    @abstractmethod
    async def save_entry(self, entry: KnowledgeEntry) -> str:
        pass

    @abstractmethod
    async def delete_entry(self, company_id: str, entry_id: str) -> bool:
        pass


class ProposalRepository(ABC):
    """제안서 저장소"""

    @abstractmethod
    async def get(self, proposal_id: str) -> Optional[Proposal]:
        pass

    @abstractmethod
    async def save(self, proposal: Proposal) -> str:
        pass

    @abstractmethod
    async def put_questions(self, proposal_id: str, questions: list[Question]) -> None:
        """질문 목록 전체를 한 번에 덮어씁니다."""
        pass

    @abstractmethod
    async def update_fields(self, proposal_id: str, fields: dict[str, Any]) -> Proposal:
        """메타데이터 필드 부분 수정. 없으면 NotFoundError."""
        pass

    @abstractmethod
    async def list_for_company(
        self, company_id: str, status: Optional[str] = None, limit: int = 50
    ) -> list[Proposal]:
        pass


class ModelInvoker(ABC):
    """
    생성 모델 호출 인터페이스.

    구현체는 모델/서비스를 찾을 수 없으면 ServiceUnavailableError,
    그 밖의 실패는 ModelInvocationError를 던져야 합니다.
    """

    @abstractmethod
    async def invoke(
        self,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        top_p: float = 0.9,
        timeout: Optional[float] = None,
    ) -> str:
        pass
