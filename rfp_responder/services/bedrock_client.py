"""AWS Bedrock client service for answer generation.

boto3 bedrock-runtime으로 Anthropic 모델을 호출합니다.

에러 매핑:
- ResourceNotFoundException, AccessDeniedException(모델 미활성화), 엔드포인트 연결 실패
  → ServiceUnavailableError (답변 생성기가 대체 응답 사용)
- 그 밖의 ClientError / 응답 형식 오류 / 마감 시간 초과 → ModelInvocationError
"""

import asyncio
import json
import logging
import time
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError

from rfp_responder.config import get_settings
from rfp_responder.exceptions import ModelInvocationError, ServiceUnavailableError
from .interfaces import ModelInvoker

logger = logging.getLogger(__name__)

_UNAVAILABLE_CODES = {"ResourceNotFoundException", "AccessDeniedException"}


class BedrockClient(ModelInvoker):
    """AWS Bedrock 모델 호출기."""

    def __init__(self, model_id: Optional[str] = None, region: Optional[str] = None, client=None):
        settings = get_settings()
        self._model_id = model_id or settings.bedrock_model_id
        self._region = region or settings.aws_region
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client("bedrock-runtime", region_name=self._region)
        return self._client

    async def invoke(
        self,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        top_p: float = 0.9,
        timeout: Optional[float] = None,
    ) -> str:
        """Invoke the Bedrock model with a single user message."""
        body = {
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": max_tokens,
            "temperature": temperature,
            "top_p": top_p,
            "messages": [
                {"role": "user", "content": [{"type": "text", "text": prompt}]},
            ],
        }

        loop = asyncio.get_running_loop()
        call = loop.run_in_executor(None, self._invoke_sync, body)
        try:
            if timeout is None:
                return await call
            return await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"[Bedrock] 호출 마감 시간 초과: {timeout}초")
            raise ModelInvocationError(
                f"모델 호출이 마감 시간({timeout}초)을 넘겼습니다",
                details={"timeout": timeout},
            ) from e

    def _invoke_sync(self, body: dict) -> str:
        start = time.time()
        try:
            response = self._get_client().invoke_model(
                modelId=self._model_id,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(body),
            )
        except EndpointConnectionError as e:
            logger.warning(f"[Bedrock] 엔드포인트 연결 실패: {e}")
            raise ServiceUnavailableError(
                "Bedrock 엔드포인트에 연결할 수 없습니다",
                details={"region": self._region},
            ) from e
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            logger.error(f"[Bedrock] 호출 실패: {code}")
            if code in _UNAVAILABLE_CODES:
                raise ServiceUnavailableError(
                    f"Bedrock 모델을 사용할 수 없습니다: {code}",
                    details={"model_id": self._model_id, "code": code},
                ) from e
            raise ModelInvocationError(
                f"Bedrock 호출 실패: {code}",
                details={"model_id": self._model_id, "code": code},
            ) from e
        except BotoCoreError as e:
            raise ModelInvocationError(
                f"Bedrock 호출 실패: {type(e).__name__}",
                details={"model_id": self._model_id},
            ) from e

        try:
            result = json.loads(response["body"].read())
        except (KeyError, ValueError) as e:
            raise ModelInvocationError("Bedrock 응답을 해석할 수 없습니다") from e

        text = "".join(
            block.get("text", "")
            for block in result.get("content", [])
            if block.get("type") == "text"
        )
        elapsed_ms = int((time.time() - start) * 1000)
        logger.info(f"[Bedrock] 완료: {elapsed_ms}ms, 응답 길이 {len(text)} chars")
        return text
