"""Claude Code CLI client service for answer generation.

Uses Claude CLI (claude -p) as the generative model backend.

이 모듈은 Claude CLI를 래핑하여 비동기 모델 호출을 제공합니다.

주요 기능:
- invoke(): 프롬프트 한 건을 보내고 텍스트 응답을 받음

실행 환경:
- Claude CLI가 PATH에 설치되어 있어야 함
- 동기 subprocess 호출을 이벤트 루프 기본 executor에서 실행

에러 매핑:
- CLI 실행 파일 없음 / 모델 없음 → ServiceUnavailableError (답변 생성기가 대체 응답 사용)
- 비정상 종료, 타임아웃 → ModelInvocationError

재시도는 하지 않습니다. (필요하면 호출자가 정책으로 추가)
"""

import asyncio
import logging
import os
import subprocess
import sys
from datetime import datetime
from typing import Optional

from rfp_responder.config import get_settings
from rfp_responder.exceptions import ModelInvocationError, ServiceUnavailableError
from .interfaces import ModelInvoker

logger = logging.getLogger(__name__)

# stderr에 이 문구가 있으면 모델/서비스 부재로 취급
_NOT_FOUND_MARKERS = ("not_found_error", "model not found", "no such model")


class ClaudeClient(ModelInvoker):
    """
    Claude Code CLI 래퍼 클래스.

    Attributes:
        _cli_path: 실행할 CLI 명령 (기본값: claude)
        _process_timeout: CLI 프로세스 최대 실행 시간(초)
    """

    def __init__(self, cli_path: Optional[str] = None, process_timeout: Optional[int] = None):
        settings = get_settings()
        self._cli_path = cli_path or settings.claude_cli_path
        self._process_timeout = process_timeout or settings.claude_cli_timeout

        logger.info(f"[ClaudeClient] CLI 모드 초기화 완료 (cli={self._cli_path})")

    async def invoke(
        self,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        top_p: float = 0.9,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Send a prompt to Claude via CLI.

        Args:
            prompt: Full prompt text
            max_tokens: Maximum tokens in response (not used in CLI mode)
            temperature: Sampling temperature (not used in CLI mode)
            top_p: Nucleus sampling (not used in CLI mode)
            timeout: Caller deadline in seconds for this single call

        Returns:
            Claude's response text

        Raises:
            ServiceUnavailableError: CLI 또는 모델을 찾을 수 없음
            ModelInvocationError: 그 밖의 실패 (마감 시간 초과 포함)
        """
        loop = asyncio.get_running_loop()
        call = loop.run_in_executor(None, self._run_claude_sync, prompt)

        try:
            if timeout is None:
                return await call
            return await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"[CLI] 호출 마감 시간 초과: {timeout}초")
            raise ModelInvocationError(
                f"모델 호출이 마감 시간({timeout}초)을 넘겼습니다",
                details={"timeout": timeout},
            ) from e

    def _get_env(self) -> dict:
        """Get environment with proper PATH for Claude CLI."""
        env = os.environ.copy()

        if sys.platform == "win32":
            extra_paths = [
                os.path.expanduser("~\\AppData\\Roaming\\npm"),
            ]
            path_separator = ";"
        else:
            extra_paths = [
                os.path.expanduser("~/.npm-global/bin"),
                "/usr/local/bin",
                "/opt/homebrew/bin",
            ]
            path_separator = ":"

        env["PATH"] = path_separator.join(extra_paths) + path_separator + env.get("PATH", "")
        return env

    def _run_claude_sync(self, prompt: str) -> str:
        """Run Claude CLI synchronously."""
        logger.info(f"[CLI] 프롬프트 길이: {len(prompt)} chars")
        start_time = datetime.now()

        try:
            result = subprocess.run(
                [self._cli_path, "-p", prompt, "--output-format", "text"],
                capture_output=True,
                text=True,
                timeout=self._process_timeout,
                env=self._get_env(),
                shell=sys.platform == "win32",
                encoding="utf-8",
            )
        except FileNotFoundError as e:
            logger.warning(f"[CLI] 실행 파일을 찾을 수 없습니다: {self._cli_path}")
            raise ServiceUnavailableError(
                "Claude CLI를 찾을 수 없습니다",
                details={"cli_path": self._cli_path},
            ) from e
        except subprocess.TimeoutExpired as e:
            elapsed = (datetime.now() - start_time).total_seconds()
            logger.error(f"[CLI] 타임아웃! {elapsed:.1f}초")
            raise ModelInvocationError(
                f"Claude CLI가 {self._process_timeout}초 안에 응답하지 않았습니다",
                details={"timeout": self._process_timeout},
            ) from e

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(f"[CLI] 완료: {elapsed:.1f}초, returncode={result.returncode}")

        if result.returncode != 0:
            error_msg = result.stderr or "Unknown error"
            logger.error(f"[CLI] 에러: {error_msg}")
            if any(marker in error_msg.lower() for marker in _NOT_FOUND_MARKERS):
                raise ServiceUnavailableError(
                    "요청한 모델을 찾을 수 없습니다",
                    details={"stderr": error_msg[:500]},
                )
            raise ModelInvocationError(
                f"Claude CLI error: {error_msg[:200]}",
                details={"returncode": result.returncode, "stderr": error_msg[:500]},
            )

        logger.info(f"[CLI] 응답 길이: {len(result.stdout)} chars")
        return result.stdout.strip()
