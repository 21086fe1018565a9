"""
제안서 응답 파이프라인의 전체 흐름을 관리하는 오케스트레이터입니다.

처리 단계(파이프라인):
1. 추출 (Extraction): 업로드된 파일에서 평문 텍스트를 뽑고 정리합니다.
2. 분할 (Segmentation): 섹션 제목과 질문 후보를 찾고 카테고리를 붙입니다.
3. 검색 (Retrieval): 질문마다 회사 지식 베이스에서 관련 항목을 고릅니다.
4. 생성 (Generation): 질문 + 컨텍스트로 답변 초안을 만듭니다.
5. 검토 (Review): 질문 상태(pending → drafted → approved | edited)를 갱신합니다.

제안서 레코드는 읽기-수정-쓰기로 갱신하며, 질문 목록은 요청당 한 번 통째로 씁니다.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any, NamedTuple, Optional, Union

from rfp_responder.config import get_settings
from rfp_responder.exceptions import (
    InputValidationError,
    InvalidTransitionError,
    NotFoundError,
    ProposalPipelineError,
)
from rfp_responder.models import (
    BulkGenerationResult,
    Category,
    GeneratedAnswer,
    IngestFileResult,
    KnowledgeEntry,
    Proposal,
    ProposalStatus,
    Question,
    QuestionGenerationOutcome,
    QuestionStatus,
    ScoredEntry,
)
from rfp_responder.layers.layer1_extraction import TextExtractor, get_text_extractor, normalize
from rfp_responder.layers.layer2_segmentation import QuestionExtractor, classify, segment
from rfp_responder.layers.layer3_retrieval import render_context, retrieve
from rfp_responder.layers.layer4_generation import KNOWLEDGE_BASE_SOURCE, AnswerGenerator
from rfp_responder.layers.layer5_review import (
    apply_generated_answer,
    apply_human_update,
    apply_improvement,
    can_generate,
)
from rfp_responder.utils.validation import validate_document_count, validate_upload
from .interfaces import BlobStore, KnowledgeRepository, ModelInvoker, ProposalRepository

logger = logging.getLogger(__name__)


class UploadedFile(NamedTuple):
    """업로드된 파일 한 개 (파일명, 내용, 클라이언트가 보낸 컨텐츠 타입)"""

    filename: str
    data: bytes
    content_type: Optional[str] = None


class _IngestedFile(NamedTuple):
    result: IngestFileResult
    questions: list[Question]
    text: str
    media_type: Optional[str]
    error: Optional[ProposalPipelineError] = None


class ProposalPipeline:
    """
    추출 → 분할 → 검색 → 생성 → 검토 단계를 조율하는 클래스입니다.
    단계별 처리기는 설정만 보관하므로 인스턴스를 공유해도 안전합니다.
    """

    def __init__(
        self,
        model: Optional[ModelInvoker] = None,
        proposals: Optional[ProposalRepository] = None,
        knowledge: Optional[KnowledgeRepository] = None,
        blobs: Optional[BlobStore] = None,
        extractor: Optional[TextExtractor] = None,
    ):
        self.settings = get_settings()

        if model is None:
            from rfp_responder.services.model_factory import get_model_invoker
            model = get_model_invoker()
        if proposals is None or knowledge is None or blobs is None:
            from rfp_responder.services.file_storage import get_file_storage
            storage = get_file_storage()
            proposals = proposals or storage
            knowledge = knowledge or storage
            blobs = blobs or storage

        self.model = model
        self.proposals = proposals
        self.knowledge = knowledge
        self.blobs = blobs

        # 각 단계별 처리기 초기화
        self.extractor = extractor or get_text_extractor()
        self.question_extractor = QuestionExtractor(model, timeout=self.settings.generation_timeout)
        self.generator = AnswerGenerator(model)

    # ==================== 1~2단계: 추출 + 분할 ====================

    async def ingest(self, data: bytes, media_type: str) -> list[Question]:
        """
        파일 바이트를 질문 목록으로 변환합니다.

        Raises:
            UnsupportedMediaTypeError: 지원하지 않는 미디어 타입
            ExtractionError: 텍스트 추출 실패
        """
        questions, _ = await self._extract_questions(data, media_type)
        return questions

    async def ingest_reference(self, reference: str, media_type: Optional[str] = None) -> list[Question]:
        """
        Blob 저장소에 보관된 파일을 읽어 질문 목록으로 변환합니다.
        media_type이 없으면 참조 키의 파일명 확장자로 추측합니다.

        Raises:
            NotFoundError: 참조한 파일이 없음
            UnsupportedMediaTypeError: 지원하지 않는 미디어 타입
            ExtractionError: 텍스트 추출 실패
        """
        data = await self.blobs.get_bytes(reference)
        media_type = self.extractor.detect_media_type(PurePosixPath(reference).name, media_type)
        return await self.ingest(data, media_type)

    async def extract_source_questions(self, proposal_id: str, company_id: Optional[str] = None) -> list[Question]:
        """
        제안서의 대표 원본 파일에서 질문을 다시 추출합니다. (제안서는 변경하지 않음)

        Raises:
            NotFoundError: 제안서가 없거나 원본 파일 참조가 없음
        """
        proposal = await self._load_proposal(proposal_id, company_id)
        if not proposal.file_key:
            raise NotFoundError(
                f"원본 파일이 없는 제안서입니다: {proposal_id}",
                details={"proposal_id": proposal_id},
            )
        return await self.ingest_reference(proposal.file_key, proposal.mime_type)

    async def _extract_questions(self, data: bytes, media_type: str) -> tuple[list[Question], str]:
        text = normalize(await self.extractor.extract(data, media_type))

        if self.settings.enable_ai_question_extraction:
            questions = await self.question_extractor.extract(text)
        else:
            questions = segment(text)

        logger.info(f"[Pipeline] 추출 완료: {len(text)} chars, 질문 {len(questions)}개")
        return questions, text

    async def ingest_many(self, files: list[UploadedFile]) -> list[IngestFileResult]:
        """
        여러 파일을 각각 추출합니다. 한 파일의 실패가 다른 파일 처리를 막지 않습니다.

        Raises:
            InputValidationError: 파일 개수 제한 위반
        """
        validate_document_count(len(files))
        return [ingested.result for ingested in await self._ingest_files(files)]

    async def _ingest_files(self, files: list[UploadedFile]) -> list[_IngestedFile]:
        ingested = []
        for upload in files:
            ingested.append(await self._ingest_file(upload))
        return ingested

    async def _ingest_file(self, upload: UploadedFile) -> _IngestedFile:
        """파일 하나를 검증 + 추출. 실패는 결과에 기록하고 예외를 던지지 않습니다."""
        media_type = None
        try:
            filename, _ = validate_upload(upload.filename, upload.data)

            media_type = self.extractor.detect_media_type(filename, upload.content_type)
            questions, text = await self._extract_questions(upload.data, media_type)
        except ProposalPipelineError as e:
            logger.warning(f"[Pipeline] 파일 처리 실패 ({upload.filename}): [{e.error_code}] {e.message}")
            return _IngestedFile(
                result=IngestFileResult(
                    filename=upload.filename,
                    success=False,
                    error=e.message,
                    error_code=e.error_code,
                ),
                questions=[],
                text="",
                media_type=media_type,
                error=e,
            )

        return _IngestedFile(
            result=IngestFileResult(
                filename=filename,
                success=True,
                question_count=len(questions),
            ),
            questions=questions,
            text=text,
            media_type=media_type,
        )

    async def create_proposal_from_upload(
        self,
        user_id: str,
        company_id: str,
        title: str,
        files: list[UploadedFile],
        client_name: str = "",
        description: str = "",
    ) -> Proposal:
        """
        업로드된 파일들로 새 제안서를 만들고 저장합니다.

        여러 파일의 질문은 업로드 순서대로 이어 붙이고 ID를 q1부터 다시 매깁니다.
        일부 파일이 실패해도 나머지로 제안서를 만들고, 모두 실패하면 첫 번째 에러를 던집니다.

        Raises:
            InputValidationError: 제목 누락, 파일 개수 제한 위반
            ProposalPipelineError: 모든 파일이 실패한 경우 첫 파일의 에러
        """
        if not title or not title.strip():
            raise InputValidationError("제안서 제목이 필요합니다")
        validate_document_count(len(files))

        ingested = await self._ingest_files(files)
        succeeded = [item for item in ingested if item.result.success]
        if not succeeded:
            raise ingested[0].error

        proposal = Proposal(
            user_id=user_id,
            company_id=company_id,
            title=title.strip(),
            client_name=client_name,
            description=description,
        )

        questions: list[Question] = []
        for item in succeeded:
            for question in item.questions:
                questions.append(question.model_copy(update={"id": f"q{len(questions) + 1}"}))
        proposal.questions = questions

        preview = "\n\n".join(item.text for item in succeeded)
        proposal.extracted_text = preview[: self.settings.extracted_text_preview_chars]

        # 원본 파일은 "<proposal_id>/<업로드 순번>_<filename>"으로 보관 (같은 이름 파일 공존)
        # 대표 파일은 첫 번째 성공 파일
        proposal.file_name = succeeded[0].result.filename
        proposal.mime_type = succeeded[0].media_type
        for position, (upload, item) in enumerate(zip(files, ingested), start=1):
            if item.result.success:
                reference = await self.blobs.put_bytes(
                    f"{proposal.id}/{position}_{item.result.filename}", upload.data
                )
                if proposal.file_key is None:
                    proposal.file_key = reference

        await self.proposals.save(proposal)
        failed = len(ingested) - len(succeeded)
        logger.info(
            f"[Pipeline] 제안서 생성: {proposal.id} (질문 {len(questions)}개, "
            f"파일 {len(succeeded)}개 성공 / {failed}개 실패)"
        )
        return proposal

    # ==================== 3단계: 검색 ====================

    async def search_knowledge(
        self,
        query: str,
        company_id: str,
        top_k: Optional[int] = None,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> list[ScoredEntry]:
        """회사 지식 베이스 검색 (점수 + 하이라이트 포함)"""
        pool = await self.knowledge.list_entries(company_id)
        return retrieve(
            query,
            pool,
            top_k=top_k if top_k is not None else self.settings.default_top_k,
            category=category,
            tags=tags,
        )

    async def retrieve_context(
        self,
        query: str,
        company_id: str,
        top_k: Optional[int] = None,
    ) -> list[str]:
        """질문에 대한 컨텍스트 문자열 목록 (생성기 입력용)"""
        return render_context(await self.search_knowledge(query, company_id, top_k))

    async def add_knowledge_entry(self, entry: KnowledgeEntry) -> KnowledgeEntry:
        """지식 항목 추가"""
        if not entry.title.strip():
            raise InputValidationError("지식 항목 제목이 필요합니다")
        await self.knowledge.save_entry(entry)
        return entry

    async def delete_knowledge_entry(self, company_id: str, entry_id: str) -> None:
        """지식 항목 삭제. 없으면 NotFoundError."""
        if not await self.knowledge.delete_entry(company_id, entry_id):
            raise NotFoundError(
                f"지식 항목을 찾을 수 없습니다: {entry_id}",
                details={"entry_id": entry_id},
            )

    # ==================== 4단계: 생성 ====================

    async def generate_draft(
        self,
        question: str,
        context: list[str],
        timeout: Optional[float] = None,
    ) -> GeneratedAnswer:
        """질문 텍스트 + 컨텍스트로 답변 초안 생성 (저장하지 않음)"""
        return await self.generator.generate_answer(question, context, timeout=timeout)

    async def _draft_for(
        self,
        question: Question,
        pool: list[KnowledgeEntry],
        timeout: Optional[float] = None,
        top_k: Optional[int] = None,
    ) -> Question:
        """질문 하나에 대해 검색 + 생성 + 상태 반영"""
        scored = retrieve(
            question.question,
            pool,
            top_k=top_k if top_k is not None else self.settings.default_top_k,
        )
        answer = await self.generate_draft(question.question, render_context(scored), timeout=timeout)

        sources = list(answer.sources)
        if sources == [KNOWLEDGE_BASE_SOURCE]:
            sources.extend(item.entry.id for item in scored)
        return apply_generated_answer(question, answer, sources=sources)

    async def generate_for_question(
        self,
        proposal_id: str,
        question_id: str,
        company_id: Optional[str] = None,
        timeout: Optional[float] = None,
        top_k: Optional[int] = None,
    ) -> Question:
        """
        제안서의 질문 하나에 답변 초안을 생성하고 저장합니다.
        top_k가 없으면 default_top_k개의 지식 항목을 컨텍스트로 사용합니다.

        Raises:
            NotFoundError: 제안서 또는 질문이 없음
            GenerationError: 모델 호출 실패 (대체 응답이 적용되지 않는 경우)
        """
        proposal = await self._load_proposal(proposal_id, company_id)
        question = self._find_question(proposal, question_id)

        pool = await self.knowledge.list_entries(proposal.company_id)
        updated = await self._draft_for(question, pool, timeout=timeout, top_k=top_k)

        await self._replace_question(proposal, updated)
        logger.info(f"[Pipeline] {proposal_id}/{question_id} 답변 생성 완료 ({updated.status.value})")
        return updated

    async def bulk_generate(
        self,
        proposal: Union[Proposal, str],
        timeout: Optional[float] = None,
    ) -> BulkGenerationResult:
        """
        pending 상태의 질문 전체에 답변 초안을 생성합니다.

        - 질문별 실패는 결과에 기록하고 나머지는 계속 처리
        - 동시 실행 수는 bulk_generation_concurrency 설정 (기본 1 = 순차)
        - 질문 목록은 마지막에 한 번만 저장
        """
        if isinstance(proposal, str):
            proposal = await self._load_proposal(proposal)

        targets = [q for q in proposal.questions if can_generate(q)]
        result = BulkGenerationResult(proposal_id=proposal.id, total_questions=len(targets))
        if not targets:
            logger.info(f"[Pipeline] {proposal.id}: 생성할 pending 질문 없음")
            return result

        logger.info(f"[Pipeline] ===== 일괄 생성 시작: {proposal.id} ({len(targets)}개) =====")
        start_time = datetime.now()

        pool = await self.knowledge.list_entries(proposal.company_id)
        semaphore = asyncio.Semaphore(max(1, self.settings.bulk_generation_concurrency))

        async def process_question(question: Question) -> Union[Question, QuestionGenerationOutcome]:
            """개별 질문 처리 (세마포어 적용)"""
            async with semaphore:
                try:
                    return await self._draft_for(question, pool, timeout=timeout)
                except ProposalPipelineError as e:
                    logger.error(f"[Pipeline] {question.id} 생성 실패: [{e.error_code}] {e.message}")
                    return QuestionGenerationOutcome(
                        question_id=question.id,
                        success=False,
                        error=e.message,
                        error_code=e.error_code,
                    )
                except Exception as e:
                    logger.error(f"[Pipeline] {question.id} 예기치 않은 실패: {e}", exc_info=True)
                    return QuestionGenerationOutcome(
                        question_id=question.id,
                        success=False,
                        error=str(e),
                    )

        # 입력 순서대로 결과가 모임
        outcomes = await asyncio.gather(*[process_question(q) for q in targets])

        updated_by_id: dict[str, Question] = {}
        for question, outcome in zip(targets, outcomes):
            if isinstance(outcome, Question):
                updated_by_id[question.id] = outcome
                result.results.append(QuestionGenerationOutcome(question_id=question.id, success=True))
                result.processed_count += 1
            else:
                result.results.append(outcome)
                result.failed_count += 1

        if updated_by_id:
            questions = [updated_by_id.get(q.id, q) for q in proposal.questions]
            await self.proposals.put_questions(proposal.id, questions)

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"[Pipeline] ===== 일괄 생성 완료: 성공 {result.processed_count}, "
            f"실패 {result.failed_count} ({elapsed:.1f}초) ====="
        )
        return result

    async def improve_question_answer(
        self,
        proposal_id: str,
        question_id: str,
        feedback: str,
        company_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Question:
        """
        피드백으로 기존 답변을 개선합니다. 개선 결과는 초안으로 저장됩니다.

        Raises:
            InvalidTransitionError: 개선할 답변이 없음
            GenerationError: 모델 호출 실패
        """
        if not feedback or not feedback.strip():
            raise InputValidationError("피드백 내용이 필요합니다")

        proposal = await self._load_proposal(proposal_id, company_id)
        question = self._find_question(proposal, question_id)

        current = question.final_answer or question.draft_answer
        if not current:
            raise InvalidTransitionError(
                "개선할 답변이 없습니다. 먼저 답변을 생성하세요",
                details={"question_id": question_id, "status": question.status.value},
            )

        improved = await self.generator.improve_answer(
            current, feedback, question.question, timeout=timeout
        )
        updated = apply_improvement(question, improved)
        await self._replace_question(proposal, updated)
        return updated

    # ==================== 5단계: 검토 ====================

    async def update_question_answer(
        self,
        proposal_id: str,
        question_id: str,
        final_answer: Optional[str] = None,
        draft_answer: Optional[str] = None,
        status: Optional[Union[QuestionStatus, str]] = None,
        user_id: Optional[str] = None,
        company_id: Optional[str] = None,
    ) -> Question:
        """
        사람이 답변을 수정하거나 승인합니다.

        Raises:
            NotFoundError: 제안서 또는 질문이 없음
            InvalidTransitionError: 허용되지 않는 상태 요청
        """
        proposal = await self._load_proposal(proposal_id, company_id)
        question = self._find_question(proposal, question_id)

        updated = apply_human_update(
            question,
            final_answer=final_answer,
            draft_answer=draft_answer,
            status=status,
            user_id=user_id,
        )
        await self._replace_question(proposal, updated)
        return updated

    async def generate_summary(
        self,
        proposal_id: str,
        company_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """답변된 질문들로 요약을 생성합니다. (저장하지 않음)"""
        proposal = await self._load_proposal(proposal_id, company_id)
        return await self.generator.generate_summary(proposal.questions, timeout=timeout)

    # ==================== 제안서 관리 ====================

    async def get_proposal(self, proposal_id: str, company_id: Optional[str] = None) -> Proposal:
        return await self._load_proposal(proposal_id, company_id)

    async def list_proposals(
        self,
        company_id: str,
        status: Optional[str] = None,
        limit: int = 50,
    ) -> list[Proposal]:
        return await self.proposals.list_for_company(company_id, status=status, limit=limit)

    async def update_proposal(
        self,
        proposal_id: str,
        fields: dict[str, Any],
        company_id: Optional[str] = None,
    ) -> Proposal:
        """제안서 메타데이터 수정 (title, client_name, description, status)"""
        await self._load_proposal(proposal_id, company_id)
        return await self.proposals.update_fields(proposal_id, fields)

    async def soft_delete_proposal(self, proposal_id: str, company_id: Optional[str] = None) -> Proposal:
        """상태만 deleted로 바꾸는 소프트 삭제"""
        await self._load_proposal(proposal_id, company_id)
        proposal = await self.proposals.update_fields(proposal_id, {"status": ProposalStatus.DELETED})
        logger.info(f"[Pipeline] 제안서 삭제(소프트): {proposal_id}")
        return proposal

    def classify(self, text: str) -> Category:
        return classify(text)

    # ==================== 내부 도우미 함수들 ====================

    async def _load_proposal(self, proposal_id: str, company_id: Optional[str] = None) -> Proposal:
        """제안서 조회. 없거나, 삭제됐거나, 다른 회사 소유면 NotFoundError."""
        proposal = await self.proposals.get(proposal_id)
        if (
            proposal is None
            or proposal.status == ProposalStatus.DELETED
            or (company_id is not None and proposal.company_id != company_id)
        ):
            raise NotFoundError(
                f"제안서를 찾을 수 없습니다: {proposal_id}",
                details={"proposal_id": proposal_id},
            )
        return proposal

    @staticmethod
    def _find_question(proposal: Proposal, question_id: str) -> Question:
        question = proposal.find_question(question_id)
        if question is None:
            raise NotFoundError(
                f"질문을 찾을 수 없습니다: {question_id}",
                details={"proposal_id": proposal.id, "question_id": question_id},
            )
        return question

    async def _replace_question(self, proposal: Proposal, updated: Question) -> None:
        """질문 하나를 바꾼 전체 목록을 저장 (마지막 쓰기가 이김)"""
        questions = [updated if q.id == updated.id else q for q in proposal.questions]
        await self.proposals.put_questions(proposal.id, questions)


# 싱글톤 인스턴스 (프로그램 전체에서 공유)
_pipeline: Optional[ProposalPipeline] = None


def get_pipeline() -> ProposalPipeline:
    """ProposalPipeline 인스턴스를 반환합니다."""
    global _pipeline
    if _pipeline is None:
        _pipeline = ProposalPipeline()
    return _pipeline
