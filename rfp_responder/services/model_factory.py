"""설정에 따라 생성 모델 호출기를 고르는 팩토리입니다."""

import logging
from typing import Optional

from rfp_responder.config import get_settings
from .interfaces import ModelInvoker

logger = logging.getLogger(__name__)

# 싱글톤 인스턴스 (호출기는 설정값만 보관)
_model_invoker: Optional[ModelInvoker] = None


def get_model_invoker() -> ModelInvoker:
    """model_backend 설정에 맞는 ModelInvoker를 반환합니다."""
    global _model_invoker
    if _model_invoker is None:
        backend = get_settings().model_backend.lower()
        if backend == "bedrock":
            from .bedrock_client import BedrockClient
            _model_invoker = BedrockClient()
        elif backend == "cli":
            from .claude_client import ClaudeClient
            _model_invoker = ClaudeClient()
        else:
            raise ValueError(f"알 수 없는 model_backend 설정입니다: {backend}")
        logger.info(f"[ModelFactory] 모델 백엔드: {backend}")
    return _model_invoker
