"""
지식 베이스 API 통합 테스트.
"""

from httpx import AsyncClient


async def _add(client: AsyncClient, headers: dict, **payload) -> dict:
    response = await client.post("/api/v1/knowledge", json=payload, headers=headers)
    assert response.status_code == 200
    return response.json()


async def test_create_search_delete(client: AsyncClient, headers):
    security = await _add(
        client, headers,
        title="Security Policy",
        content="All data is protected with AES-256 encryption at rest.",
        category="security",
        tags=["security"],
    )
    await _add(client, headers, title="Pricing", content="Per seat subscription.", category="pricing")

    response = await client.get(
        "/api/v1/knowledge/search", params={"q": "data encryption security"}, headers=headers
    )
    assert response.status_code == 200
    data = response.json()
    assert [r["title"] for r in data["results"]] == ["Security Policy"]
    assert data["results"][0]["score"] == 9
    assert data["results"][0]["highlights"]

    response = await client.delete(f"/api/v1/knowledge/{security['id']}", headers=headers)
    assert response.status_code == 200

    response = await client.delete(f"/api/v1/knowledge/{security['id']}", headers=headers)
    assert response.status_code == 404


async def test_search_is_scoped_to_company(client: AsyncClient, headers):
    await _add(client, headers, title="Security Policy", content="encryption")
    response = await client.get(
        "/api/v1/knowledge/search",
        params={"q": "security"},
        headers={"X-Company-Id": "other", "X-User-Id": "u"},
    )
    assert response.json()["total"] == 0


async def test_search_filters(client: AsyncClient, headers):
    await _add(client, headers, title="Security Policy", content="x", category="security", tags=["iso"])
    await _add(client, headers, title="Security Pricing", content="x", category="pricing")

    by_category = await client.get(
        "/api/v1/knowledge/search", params={"q": "security", "category": "pricing"}, headers=headers
    )
    assert [r["title"] for r in by_category.json()["results"]] == ["Security Pricing"]

    by_tag = await client.get(
        "/api/v1/knowledge/search", params={"q": "security", "tags": ["iso"]}, headers=headers
    )
    assert [r["title"] for r in by_tag.json()["results"]] == ["Security Policy"]


async def test_empty_title_rejected(client: AsyncClient, headers):
    response = await client.post("/api/v1/knowledge", json={"title": ""}, headers=headers)
    assert response.status_code == 422
