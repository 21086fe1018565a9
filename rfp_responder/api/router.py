"""
API 라우터 설정 파일입니다.
각 기능별로 나누어진 API 주소들을 하나로 모으는 역할을 합니다.
"""

from fastapi import APIRouter

from rfp_responder.api.endpoints import health, proposals, ai, knowledge

# 메인 API 라우터 생성
api_router = APIRouter()

# 헬스 체크 엔드포인트: 서버 상태 확인용 (/health)
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)

# 제안서 엔드포인트: RFP 업로드, 조회, 수정, 답변 검토 (/proposals)
api_router.include_router(
    proposals.router,
    prefix="/proposals",
    tags=["proposals"]
)

# AI 엔드포인트: 답변 생성/개선, 요약, 일괄 생성 (/ai)
api_router.include_router(
    ai.router,
    prefix="/ai",
    tags=["ai"]
)

# 지식 베이스 엔드포인트: 항목 추가, 검색, 삭제 (/knowledge)
api_router.include_router(
    knowledge.router,
    prefix="/knowledge",
    tags=["knowledge"]
)
