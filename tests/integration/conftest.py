"""API 통합 테스트 fixture."""

import pytest
from httpx import AsyncClient, ASGITransport

from rfp_responder.api.dependencies import pipeline_dependency
from rfp_responder.main import app


@pytest.fixture
async def client(pipeline):
    """mock 모델 + 임시 저장소 파이프라인을 주입한 테스트 클라이언트."""
    app.dependency_overrides[pipeline_dependency] = lambda: pipeline
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def headers():
    return {"X-Company-Id": "acme", "X-User-Id": "user-1"}
