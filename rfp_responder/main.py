"""
RFP 제안서 응답 시스템의 메인 진입점 파일입니다.
웹 서버 애플리케이션을 생성하고 설정하는 역할을 담당합니다.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rfp_responder.config import get_settings
from rfp_responder.api.router import api_router
from rfp_responder.exceptions import (
    ProposalPipelineError,
    InputValidationError,
    UnsupportedMediaTypeError,
    ExtractionError,
    NotFoundError,
    InvalidTransitionError,
    ModelInvocationError,
    GenerationError,
)
from rfp_responder.models import ErrorResponse

logger = logging.getLogger(__name__)

# 커스텀 예외 → HTTP 상태 코드 (먼저 매칭된 항목이 이김)
ERROR_STATUS_CODES: tuple[tuple[type[ProposalPipelineError], int], ...] = (
    (InputValidationError, 400),
    (NotFoundError, 404),
    (InvalidTransitionError, 409),
    (UnsupportedMediaTypeError, 415),
    (ExtractionError, 422),
    (GenerationError, 502),
    (ModelInvocationError, 502),
)


def status_code_for(exc: ProposalPipelineError) -> int:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션의 생명주기(시작과 종료)를 관리하는 함수입니다.
    """
    settings = get_settings()
    logger.info(f"RFP 응답 시스템이 다음 주소에서 시작됩니다: {settings.host}:{settings.port}")
    logger.info(f"모델 백엔드: {settings.model_backend}")

    yield

    logger.info("RFP 응답 시스템이 종료됩니다")


def create_app() -> FastAPI:
    """
    FastAPI 웹 애플리케이션을 생성하고 설정하는 함수입니다.

    주요 기능:
    1. 기본 앱 정보 설정 (제목, 설명 등)
    2. CORS 설정 (프론트엔드와의 통신 허용 설정)
    3. API 라우터 연결 (기능별 주소 연결)
    """
    settings = get_settings()

    app = FastAPI(
        title="RFP 제안서 응답 시스템",
        description="RFP 문서에서 질문을 추출하고 지식 베이스 기반 답변 초안을 만드는 5단계 파이프라인",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS 미들웨어 설정: 프론트엔드 웹페이지가 이 서버에 접속할 수 있도록 허용
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 글로벌 예외 핸들러: 커스텀 예외를 구조화된 JSON 응답으로 변환
    @app.exception_handler(ProposalPipelineError)
    async def pipeline_error_handler(request: Request, exc: ProposalPipelineError):
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.error(f"[API] {request.url.path}: [{exc.error_code}] {exc.message}", exc_info=exc)
        body = ErrorResponse.from_exception(exc)
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.error(f"처리되지 않은 예외: {exc}", exc_info=True)
        body = ErrorResponse(error_code="ERR_INTERNAL", message="내부 서버 오류가 발생했습니다")
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))

    # API 라우터 포함: /api/v1 주소 아래에 모든 기능을 연결합니다.
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """루트 엔드포인트: 서버의 기본 정보를 반환합니다."""
        return {
            "name": "RFP 제안서 응답 시스템",
            "version": "1.0.0",
            "docs": "/docs",
            "api": "/api/v1",
        }

    return app


# 애플리케이션 인스턴스 생성
app = create_app()


# 이 파일을 직접 실행했을 때 서버를 구동시키는 코드입니다.
if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "rfp_responder.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
