"""모델의 자유 텍스트 응답에서 JSON을 복구하는 유틸리티.

구조화 출력 모드가 없는 백엔드(Claude CLI)에서만 사용합니다.
"""

import json
import logging
from typing import Any

from rfp_responder.exceptions import ModelInvocationError

logger = logging.getLogger(__name__)


def parse_json_response(response: str) -> Any:
    """
    응답에서 JSON 파싱 (포맷팅 문제 처리 포함).

    파싱 전략 3단계:
    ┌─────────────────────────────────────────────────────────────┐
    │ 단계     │ 방법                     │ 성공 시               │
    ├─────────────────────────────────────────────────────────────┤
    │ 1. 직접  │ 마크다운 제거 후 파싱    │ 바로 반환             │
    │ 2. 추출  │ 첫 번째 괄호 구간 파싱   │ 추출된 JSON 반환      │
    │ 3. 실패  │ -                        │ ModelInvocationError  │
    └─────────────────────────────────────────────────────────────┘

    2단계에서는 문자열 리터럴 안의 괄호를 무시하면서 깊이를 추적하여
    처음 등장하는 `{` 또는 `[`의 짝이 맞는 구간만 잘라냅니다.

    Args:
        response: 모델의 원시 응답 텍스트

    Returns:
        파싱된 JSON 객체 또는 배열

    Raises:
        ModelInvocationError: JSON을 찾지 못했거나 파싱 실패
    """
    if not response or not response.strip():
        raise ModelInvocationError("모델 응답이 비어 있습니다")

    # ========== 1단계: 마크다운 코드 블록 제거 ==========
    cleaned = response.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    cleaned = cleaned.strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"[JSON] 직접 파싱 실패: {e}")
        first_error = e

    # ========== 2단계: 괄호 구간 추출 ==========
    span = _first_balanced_span(cleaned)
    if span is not None:
        try:
            return json.loads(span)
        except json.JSONDecodeError as e:
            logger.error(f"[JSON] 추출 파싱 실패: {e}")

    # ========== 3단계: 최종 실패 ==========
    raise ModelInvocationError(
        "모델 응답에서 JSON을 찾지 못했습니다",
        details={"error": str(first_error), "preview": cleaned[:200]},
    )


def _first_balanced_span(text: str):
    """처음 등장하는 { 또는 [ 부터 짝이 맞는 닫는 괄호까지의 문자열. 없으면 None."""
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return None

    start_idx = min(starts)
    opening = text[start_idx]
    closing = "}" if opening == "{" else "]"

    depth = 0
    in_string = False
    escaped = False
    for i in range(start_idx, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == opening:
            depth += 1
        elif char == closing:
            depth -= 1
            if depth == 0:
                return text[start_idx:i + 1]

    return None
