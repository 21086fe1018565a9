"""
헬스 체크 API.

/health        프로세스 생존 확인
/health/detail 파이프라인 구성(모델 백엔드, 검색/생성 설정, 지원 형식)
"""

from fastapi import APIRouter

from rfp_responder.config import get_settings
from rfp_responder.layers.layer1_extraction import get_text_extractor

router = APIRouter()


@router.get("")
async def health_check() -> dict:
    return {"status": "healthy"}


@router.get("/detail")
async def health_check_detail() -> dict:
    """운영 중인 파이프라인 설정 요약"""
    settings = get_settings()
    pipeline_config = {
        "model_backend": settings.model_backend,
        "default_top_k": settings.default_top_k,
        "bulk_generation_concurrency": settings.bulk_generation_concurrency,
        "ai_question_extraction": settings.enable_ai_question_extraction,
        "supported_media_types": get_text_extractor().supported_media_types,
    }
    return {"status": "healthy", "config": pipeline_config}
