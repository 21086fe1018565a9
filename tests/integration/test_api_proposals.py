"""
제안서 API 통합 테스트.
업로드, 조회, 수정, 삭제, 답변 검토와 에러 응답 형식을 확인합니다.
"""

from httpx import AsyncClient

RFP = (
    b"SECTION 1: GENERAL\n"
    b"1. What is your pricing model?\n"
    b"Some filler.\n"
    b"2. Describe your security practices?\n"
)


async def _upload(client: AsyncClient, headers: dict) -> dict:
    response = await client.post(
        "/api/v1/proposals/upload",
        files=[("files", ("rfp.txt", RFP, "text/plain"))],
        data={"title": "City RFP", "client_name": "City"},
        headers=headers,
    )
    assert response.status_code == 200
    return response.json()["proposal"]


async def test_upload_extracts_questions(client: AsyncClient, headers):
    proposal = await _upload(client, headers)

    assert proposal["title"] == "City RFP"
    assert proposal["company_id"] == "acme"
    assert [q["category"] for q in proposal["questions"]] == ["pricing", "security"]
    assert all(q["status"] == "pending" for q in proposal["questions"])


async def test_upload_requires_company_header(client: AsyncClient):
    response = await client.post(
        "/api/v1/proposals/upload",
        files=[("files", ("rfp.txt", RFP, "text/plain"))],
        data={"title": "City RFP"},
    )
    assert response.status_code == 422


async def test_upload_unsupported_format(client: AsyncClient, headers):
    """지원하지 않는 형식(.exe)을 업로드하면 415와 구조화된 에러를 반환해야 한다."""
    response = await client.post(
        "/api/v1/proposals/upload",
        files=[("files", ("malware.exe", b"MZ\x90\x00", "application/octet-stream"))],
        data={"title": "Bad"},
        headers=headers,
    )

    assert response.status_code == 415
    body = response.json()
    assert body["error_code"] == "ERR_MEDIA_001"
    assert "message" in body
    assert "timestamp" in body


async def test_upload_corrupt_pdf(client: AsyncClient, headers):
    response = await client.post(
        "/api/v1/proposals/upload",
        files=[("files", ("rfp.pdf", b"%PDF-1.4 garbage", "application/pdf"))],
        data={"title": "Broken"},
        headers=headers,
    )
    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_EXTRACT_001"


async def test_extract_preview(client: AsyncClient):
    response = await client.post(
        "/api/v1/proposals/extract",
        files=[
            ("files", ("rfp.txt", RFP, "text/plain")),
            ("files", ("notes.md", b"- Do you provide onsite support?", "text/markdown")),
        ],
    )
    assert response.status_code == 200
    data = response.json()
    assert data["succeeded"] == 2
    assert [r["question_count"] for r in data["results"]] == [2, 1]


async def test_list_get_patch_delete(client: AsyncClient, headers):
    proposal = await _upload(client, headers)
    proposal_id = proposal["id"]

    listed = (await client.get("/api/v1/proposals", headers=headers)).json()
    assert listed["total"] == 1
    assert listed["proposals"][0]["question_count"] == 2

    response = await client.get(f"/api/v1/proposals/{proposal_id}", headers=headers)
    assert response.status_code == 200

    response = await client.patch(
        f"/api/v1/proposals/{proposal_id}",
        json={"description": "Updated", "status": "active"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "active"

    response = await client.delete(f"/api/v1/proposals/{proposal_id}", headers=headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/proposals/{proposal_id}", headers=headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOTFOUND_001"


async def test_other_company_gets_404(client: AsyncClient, headers):
    proposal = await _upload(client, headers)
    response = await client.get(
        f"/api/v1/proposals/{proposal['id']}",
        headers={"X-Company-Id": "other", "X-User-Id": "x"},
    )
    assert response.status_code == 404


async def test_answer_review_flow(client: AsyncClient, headers):
    proposal = await _upload(client, headers)
    proposal_id = proposal["id"]

    # 초안 없이 승인하면 409
    response = await client.patch(
        f"/api/v1/proposals/{proposal_id}/questions/q1",
        json={"status": "approved"},
        headers=headers,
    )
    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_STATE_001"

    await client.post(
        "/api/v1/ai/generate-answer",
        json={"proposal_id": proposal_id, "question_id": "q1"},
        headers=headers,
    )
    response = await client.patch(
        f"/api/v1/proposals/{proposal_id}/questions/q1",
        json={"status": "approved"},
        headers=headers,
    )
    assert response.status_code == 200
    question = response.json()
    assert question["status"] == "approved"
    assert question["final_answer"] == question["draft_answer"]
    assert question["updated_by"] == "user-1"


async def test_source_questions_from_stored_file(client: AsyncClient, headers):
    proposal = await _upload(client, headers)

    response = await client.get(
        f"/api/v1/proposals/{proposal['id']}/source-questions", headers=headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [q["question"] for q in data["questions"]] == [q["question"] for q in proposal["questions"]]

    # 원본을 다시 읽어도 제안서의 질문 상태는 그대로
    stored = (await client.get(f"/api/v1/proposals/{proposal['id']}", headers=headers)).json()
    assert all(q["status"] == "pending" for q in stored["questions"])


async def test_source_questions_other_company(client: AsyncClient, headers):
    proposal = await _upload(client, headers)
    response = await client.get(
        f"/api/v1/proposals/{proposal['id']}/source-questions",
        headers={"X-Company-Id": "other", "X-User-Id": "x"},
    )
    assert response.status_code == 404
