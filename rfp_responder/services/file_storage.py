"""
파일 기반 저장소 서비스입니다.
데이터베이스 대신 파일 시스템(폴더와 파일)을 사용하여 데이터를 저장하고 관리합니다.

관리하는 데이터:
1. 제안서 (proposals/<id>.json, 질문 목록 포함)
2. 지식 베이스 항목 (knowledge/<company_id>/<entry_id>.json)
3. 업로드된 원본 파일들 (uploads/<reference>)

쓰기는 읽기-수정-쓰기 방식이며 잠금이 없습니다. (마지막 쓰기가 이김)
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TypeVar, Type

import aiofiles
from pydantic import BaseModel

from rfp_responder.config import get_settings
from rfp_responder.exceptions import InputValidationError, NotFoundError, StorageError
from rfp_responder.models import KnowledgeEntry, Proposal, ProposalStatus, Question
from .interfaces import BlobStore, KnowledgeRepository, ProposalRepository

logger = logging.getLogger(__name__)


T = TypeVar("T", bound=BaseModel)

# 직접 수정할 수 없는 제안서 필드
_PROTECTED_FIELDS = {"id", "user_id", "company_id", "questions", "created_at"}


class FileStorage(BlobStore, KnowledgeRepository, ProposalRepository):
    """JSON 파일 기반의 단순 저장소 클래스입니다."""

    def __init__(self, base_path: Optional[str] = None):
        # 기본 저장 경로 설정 (기본값: 설정의 storage_path)
        self.base_path = Path(base_path or get_settings().storage_path)
        self.proposals_path = self.base_path / "proposals"
        self.knowledge_path = self.base_path / "knowledge"
        self.uploads_path = self.base_path / "uploads"

        # 필요한 폴더들이 없으면 만듭니다.
        self._ensure_directories()

    def _ensure_directories(self):
        """저장소 폴더 생성 함수"""
        for path in [self.proposals_path, self.knowledge_path, self.uploads_path]:
            path.mkdir(parents=True, exist_ok=True)

    # ==================== 제안서 관련 기능 ====================

    async def save(self, proposal: Proposal) -> str:
        """제안서를 파일로 저장합니다."""
        file_path = self.proposals_path / f"{self._safe_id(proposal.id)}.json"
        await self._save_model(file_path, proposal)
        return proposal.id

    async def get(self, proposal_id: str) -> Optional[Proposal]:
        """ID로 제안서를 불러옵니다. 없으면 None."""
        file_path = self.proposals_path / f"{self._safe_id(proposal_id)}.json"
        return await self._load_model(file_path, Proposal)

    async def put_questions(self, proposal_id: str, questions: list[Question]) -> None:
        """
        질문 목록 전체를 덮어씁니다.

        Raises:
            NotFoundError: 제안서가 없음
        """
        proposal = await self._require(proposal_id)
        proposal.questions = list(questions)
        proposal.updated_at = datetime.now()
        await self.save(proposal)

    async def update_fields(self, proposal_id: str, fields: dict[str, Any]) -> Proposal:
        """
        제안서 메타데이터 필드를 부분 수정합니다. (title, client_name, description, status 등)

        Raises:
            NotFoundError: 제안서가 없음
            InputValidationError: 수정할 수 없는 필드
        """
        proposal = await self._require(proposal_id)

        protected = _PROTECTED_FIELDS.intersection(fields)
        if protected:
            raise InputValidationError(
                "수정할 수 없는 필드가 포함되어 있습니다",
                details={"fields": sorted(protected)},
            )

        data = proposal.model_dump()
        data.update(fields)
        data["updated_at"] = datetime.now()
        updated = Proposal.model_validate(data)
        await self.save(updated)
        return updated

    async def list_for_company(
        self,
        company_id: str,
        status: Optional[str] = None,
        limit: int = 50,
    ) -> list[Proposal]:
        """
        회사의 제안서 목록을 최신 수정 순으로 가져옵니다.
        상태 필터가 없으면 삭제된 제안서는 제외합니다.
        """
        proposals = []
        for file_path in self.proposals_path.glob("*.json"):
            proposal = await self._load_model(file_path, Proposal)
            if proposal is None or proposal.company_id != company_id:
                continue
            if status is None:
                if proposal.status == ProposalStatus.DELETED:
                    continue
            elif proposal.status.value != status:
                continue
            proposals.append(proposal)

        proposals.sort(key=lambda p: p.updated_at, reverse=True)
        return proposals[:limit]

    async def _require(self, proposal_id: str) -> Proposal:
        proposal = await self.get(proposal_id)
        if proposal is None:
            raise NotFoundError(
                f"제안서를 찾을 수 없습니다: {proposal_id}",
                details={"proposal_id": proposal_id},
            )
        return proposal

    # ==================== 지식 베이스 관련 기능 ====================

    async def list_entries(self, company_id: str) -> list[KnowledgeEntry]:
        """회사의 지식 항목 전체 (생성 순서)"""
        company_dir = self.knowledge_path / self._safe_id(company_id)
        if not company_dir.exists():
            return []

        entries = []
        for file_path in company_dir.glob("*.json"):
            entry = await self._load_model(file_path, KnowledgeEntry)
            if entry:
                entries.append(entry)

        entries.sort(key=lambda e: (e.created_at, e.id))
        return entries

    async def save_entry(self, entry: KnowledgeEntry) -> str:
        """지식 항목을 저장합니다."""
        company_dir = self.knowledge_path / self._safe_id(entry.company_id)
        company_dir.mkdir(parents=True, exist_ok=True)
        await self._save_model(company_dir / f"{self._safe_id(entry.id)}.json", entry)
        return entry.id

    async def delete_entry(self, company_id: str, entry_id: str) -> bool:
        """지식 항목을 삭제합니다."""
        file_path = self.knowledge_path / self._safe_id(company_id) / f"{self._safe_id(entry_id)}.json"
        return self._delete_file(file_path)

    # ==================== 파일 업로드 관련 기능 ====================

    async def put_bytes(self, reference: str, data: bytes) -> str:
        """
        업로드된 파일을 디스크에 저장합니다.
        reference는 "<proposal_id>/<filename>" 형태의 상대 경로입니다.
        """
        file_path = self._upload_path(reference)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error(f"[Storage] 업로드 저장 실패 {file_path}: {e}", exc_info=True)
            raise StorageError(
                f"파일 저장에 실패했습니다: {file_path.name}",
                details={"reference": reference, "error": str(e)},
            ) from e
        return reference

    async def get_bytes(self, reference: str) -> bytes:
        """
        저장된 파일의 내용을 읽어옵니다.

        Raises:
            NotFoundError: 파일이 없음
        """
        file_path = self._upload_path(reference)
        if not file_path.exists():
            raise NotFoundError(
                f"파일을 찾을 수 없습니다: {reference}",
                details={"reference": reference},
            )

        async with aiofiles.open(file_path, "rb") as f:
            return await f.read()

    def _upload_path(self, reference: str) -> Path:
        """업로드 참조 키를 uploads 폴더 안의 경로로 변환 (폴더 밖은 거부)"""
        root = self.uploads_path.resolve()
        file_path = (self.uploads_path / reference).resolve()
        if root not in file_path.parents:
            raise InputValidationError(
                "잘못된 파일 참조입니다",
                details={"reference": reference},
            )
        return file_path

    # ==================== 내부 도우미 함수들 ====================

    @staticmethod
    def _safe_id(identifier: str) -> str:
        """ID가 파일명으로 안전한지 확인"""
        if not identifier or "/" in identifier or "\\" in identifier or identifier in (".", ".."):
            raise InputValidationError(
                f"잘못된 식별자입니다: {identifier!r}",
                details={"id": identifier},
            )
        return identifier

    async def _save_model(self, file_path: Path, model: BaseModel):
        """데이터 모델을 JSON 파일로 저장하는 공통 함수"""
        try:
            async with aiofiles.open(file_path, "w", encoding="utf-8") as f:
                await f.write(model.model_dump_json(indent=2))
        except OSError as e:
            logger.error(f"[Storage] 파일 저장 실패 {file_path}: {e}", exc_info=True)
            raise StorageError(
                f"파일 저장에 실패했습니다: {file_path.name}",
                details={"path": str(file_path), "error": str(e)},
            ) from e

    async def _load_model(self, file_path: Path, model_class: Type[T]) -> Optional[T]:
        """JSON 파일을 읽어서 데이터 모델로 변환하는 공통 함수"""
        if not file_path.exists():
            return None

        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
                content = await f.read()
            return model_class.model_validate_json(content)
        except (OSError, ValueError) as e:
            logger.error(f"[Storage] 파일 로딩 에러 {file_path}: {e}", exc_info=True)
            return None

    def _delete_file(self, file_path: Path) -> bool:
        """파일 삭제 공통 함수"""
        if file_path.exists():
            file_path.unlink()
            return True
        return False


# 싱글톤 인스턴스 (프로그램 전체에서 공유)
_file_storage: Optional[FileStorage] = None


def get_file_storage() -> FileStorage:
    """FileStorage 인스턴스를 반환합니다."""
    global _file_storage
    if _file_storage is None:
        _file_storage = FileStorage()
    return _file_storage
