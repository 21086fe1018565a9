"""공유 pytest fixture 모음."""

import pytest
from unittest.mock import AsyncMock

from rfp_responder.models import (
    Category,
    KnowledgeEntry,
    Proposal,
    Question,
    QuestionStatus,
)
from rfp_responder.services.file_storage import FileStorage
from rfp_responder.services.interfaces import ModelInvoker
from rfp_responder.services.orchestrator import ProposalPipeline


@pytest.fixture
def mock_model():
    """ModelInvoker mock fixture. 기본 응답은 고정 답변 텍스트."""
    model = AsyncMock(spec=ModelInvoker)
    model.invoke = AsyncMock(return_value="We offer a transparent subscription pricing model.")
    return model


@pytest.fixture
def storage(tmp_path):
    """임시 폴더를 쓰는 FileStorage fixture."""
    return FileStorage(base_path=str(tmp_path / "data"))


@pytest.fixture
def pipeline(mock_model, storage):
    """mock 모델 + 임시 저장소로 구성한 파이프라인."""
    return ProposalPipeline(
        model=mock_model,
        proposals=storage,
        knowledge=storage,
        blobs=storage,
    )


@pytest.fixture
def knowledge_entries():
    """회사 지식 항목 2건 (보안 정책, 가격 정책)."""
    return [
        KnowledgeEntry(
            id="kb-security",
            title="Security Policy",
            content="All customer data is protected with AES-256 encryption at rest and TLS in transit.",
            category="security",
            tags={"security", "encryption"},
            company_id="acme",
        ),
        KnowledgeEntry(
            id="kb-pricing",
            title="Pricing",
            content="Annual subscription billed per seat with volume discounts.",
            category="pricing",
            tags={"pricing"},
            company_id="acme",
        ),
    ]


def make_question(qid: str = "q1", text: str = "What is your pricing model?", **kwargs) -> Question:
    """Helper to create a minimal Question."""
    kwargs.setdefault("category", Category.PRICING)
    return Question(id=qid, question=text, **kwargs)


@pytest.fixture
def pending_proposal():
    """pending 질문 3개를 가진 제안서."""
    return Proposal(
        id="prop-001",
        user_id="user-1",
        company_id="acme",
        title="City RFP",
        questions=[
            make_question("q1", "What is your pricing model?"),
            make_question("q2", "Describe your security practices?", category=Category.SECURITY),
            make_question("q3", "What is your delivery timeline?", category=Category.TIMELINE),
        ],
    )


@pytest.fixture
def drafted_question():
    return make_question(
        status=QuestionStatus.DRAFTED,
        draft_answer="Draft answer text",
        confidence=0.85,
        sources=["AI Generated"],
    )
