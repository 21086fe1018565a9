"""
AI 답변 API 통합 테스트.
답변 생성/개선, 요약, 일괄 생성과 모델 실패 시 응답을 확인합니다.
"""

from unittest.mock import AsyncMock

from httpx import AsyncClient

from rfp_responder.exceptions import ModelInvocationError, ServiceUnavailableError

RFP = (
    b"SECTION 1: GENERAL\n"
    b"1. What is your pricing model?\n"
    b"2. Describe your security practices?\n"
    b"3. What is your delivery timeline?\n"
)


async def _upload(client: AsyncClient, headers: dict) -> str:
    response = await client.post(
        "/api/v1/proposals/upload",
        files=[("files", ("rfp.txt", RFP, "text/plain"))],
        data={"title": "City RFP"},
        headers=headers,
    )
    return response.json()["proposal"]["id"]


async def test_generate_for_question(client: AsyncClient, headers):
    proposal_id = await _upload(client, headers)

    response = await client.post(
        "/api/v1/ai/generate-answer",
        json={"proposal_id": proposal_id, "question_id": "q1"},
        headers=headers,
    )

    assert response.status_code == 200
    question = response.json()["question"]
    assert question["status"] == "drafted"
    assert question["confidence"] == 0.85
    assert question["sources"] == ["AI Generated"]


async def test_generate_for_question_with_top_k(client: AsyncClient, headers):
    for title in ("Security Policy", "Security Audits"):
        await client.post(
            "/api/v1/knowledge",
            json={"title": title, "content": "Reviewed yearly", "category": "security"},
            headers=headers,
        )
    proposal_id = await _upload(client, headers)

    response = await client.post(
        "/api/v1/ai/generate-answer",
        json={"proposal_id": proposal_id, "question_id": "q2", "top_k": 1},
        headers=headers,
    )

    assert response.status_code == 200
    sources = response.json()["question"]["sources"]
    assert sources[0] == "Knowledge Base"
    assert len(sources) == 2


async def test_generate_for_free_text_question(client: AsyncClient, headers):
    await client.post(
        "/api/v1/knowledge",
        json={"title": "Pricing", "content": "Per seat subscription", "category": "pricing"},
        headers=headers,
    )
    response = await client.post(
        "/api/v1/ai/generate-answer",
        json={"question": "What is your pricing model?"},
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["answer"]["sources"] == ["Knowledge Base"]
    assert data["category"] == "pricing"
    assert data["complexity"]["complexity"] == "simple"


async def test_generate_requires_question(client: AsyncClient, headers):
    response = await client.post("/api/v1/ai/generate-answer", json={}, headers=headers)
    assert response.status_code == 400


async def test_model_failure_returns_502(client: AsyncClient, headers, mock_model):
    proposal_id = await _upload(client, headers)
    mock_model.invoke = AsyncMock(side_effect=ModelInvocationError("exit 1"))

    response = await client.post(
        "/api/v1/ai/generate-answer",
        json={"proposal_id": proposal_id, "question_id": "q1"},
        headers=headers,
    )
    assert response.status_code == 502
    assert response.json()["error_code"] == "ERR_GEN_001"


async def test_service_unavailable_returns_fallback(client: AsyncClient, headers, mock_model):
    proposal_id = await _upload(client, headers)
    mock_model.invoke = AsyncMock(side_effect=ServiceUnavailableError("model not found"))

    response = await client.post(
        "/api/v1/ai/generate-answer",
        json={"proposal_id": proposal_id, "question_id": "q2"},
        headers=headers,
    )
    assert response.status_code == 200
    assert "security" in response.json()["question"]["draft_answer"]


async def test_bulk_generate_partial_failure(client: AsyncClient, headers, mock_model):
    proposal_id = await _upload(client, headers)
    mock_model.invoke = AsyncMock(side_effect=["one", ModelInvocationError("exit 1"), "three"])

    response = await client.post("/api/v1/ai/bulk-generate", json={"proposal_id": proposal_id}, headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["processed_count"] == 2
    assert data["failed_count"] == 1
    failed = data["results"][1]
    assert failed["question_id"] == "q2"
    assert failed["success"] is False
    assert failed["error_code"] == "ERR_GEN_001"


async def test_improve_and_summary(client: AsyncClient, headers, mock_model):
    proposal_id = await _upload(client, headers)
    await client.post(
        "/api/v1/ai/generate-answer",
        json={"proposal_id": proposal_id, "question_id": "q1"},
        headers=headers,
    )

    mock_model.invoke = AsyncMock(return_value="Sharper answer")
    response = await client.post(
        "/api/v1/ai/improve-answer",
        json={"proposal_id": proposal_id, "question_id": "q1", "feedback": "Be concise"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["question"]["draft_answer"] == "Sharper answer"

    mock_model.invoke = AsyncMock(return_value="Executive summary")
    response = await client.post("/api/v1/ai/generate-summary", json={"proposal_id": proposal_id}, headers=headers)
    assert response.status_code == 200
    assert response.json()["summary"] == "Executive summary"


async def test_summary_without_answers_is_502(client: AsyncClient, headers):
    proposal_id = await _upload(client, headers)
    response = await client.post("/api/v1/ai/generate-summary", json={"proposal_id": proposal_id}, headers=headers)
    assert response.status_code == 502
