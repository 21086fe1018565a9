"""
엔드포인트 공통 의존성입니다.

인증은 범위 밖이므로 회사/사용자 식별자는 요청 헤더에서 그대로 받습니다.
"""

from fastapi import Header

from rfp_responder.services.orchestrator import ProposalPipeline, get_pipeline


async def company_id_header(x_company_id: str = Header(..., min_length=1)) -> str:
    """X-Company-Id 헤더 (필수)"""
    return x_company_id


async def user_id_header(x_user_id: str = Header(..., min_length=1)) -> str:
    """X-User-Id 헤더 (필수)"""
    return x_user_id


def pipeline_dependency() -> ProposalPipeline:
    """파이프라인 인스턴스 (테스트에서는 dependency_overrides로 교체)"""
    return get_pipeline()
