"""Answer generator for Layer 4.

Layer 4: 답변 생성 서비스
질문과 검색된 컨텍스트로 프롬프트를 구성하고 생성 모델을 호출합니다.

신뢰도 정책:
- 신뢰도는 상수(기본 0.85)이며 모델 logprob 등 정량 신호로 계산하지 않음
- 컨텍스트가 있으면 sources=["Knowledge Base"], 없으면 ["AI Generated"]

대체 응답 정책:
┌──────────────────────────────┬───────────────────────────────────────┐
│ 모델 호출 결과               │ 처리                                  │
├──────────────────────────────┼───────────────────────────────────────┤
│ 성공                         │ 응답 텍스트 사용                      │
│ ServiceUnavailableError      │ 질문 키워드 기반 고정 답변 (예외 없음)│
│ 그 밖의 모든 실패            │ GenerationError로 전파                │
└──────────────────────────────┴───────────────────────────────────────┘
"""

import logging
import re
from datetime import datetime
from typing import Optional

from rfp_responder.config import get_settings
from rfp_responder.exceptions import GenerationError, ServiceUnavailableError
from rfp_responder.models import (
    ComplexityLevel,
    GeneratedAnswer,
    Question,
    QuestionComplexity,
)
from rfp_responder.services.interfaces import ModelInvoker
from .prompts.answer_prompts import (
    ANSWER_PROMPT,
    CONTEXT_BLOCK,
    FALLBACK_ANSWERS,
    GENERIC_FALLBACK_ANSWER,
    IMPROVE_PROMPT,
    SUMMARY_PROMPT,
)

logger = logging.getLogger(__name__)

KNOWLEDGE_BASE_SOURCE = "Knowledge Base"
AI_GENERATED_SOURCE = "AI Generated"

_MULTI_PART = re.compile(r"\b(?:and|or)\b", re.IGNORECASE)
_TECHNICAL = re.compile(r"technical|architecture|integration|api|database|security", re.IGNORECASE)


def build_answer_prompt(question: str, context: list[str]) -> str:
    """답변 프롬프트 구성. 컨텍스트가 비어 있으면 컨텍스트 블록 자체를 생략합니다."""
    context_block = CONTEXT_BLOCK.format(context="\n\n".join(context)) if context else ""
    return ANSWER_PROMPT.format(context_block=context_block, question=question)


def fallback_answer(question: str) -> str:
    """모델을 사용할 수 없을 때 질문 키워드로 고른 고정 답변."""
    lowered = question.lower()
    for keywords, answer in FALLBACK_ANSWERS:
        if any(keyword in lowered for keyword in keywords):
            return answer
    return GENERIC_FALLBACK_ANSWER


def analyze_complexity(question: str) -> QuestionComplexity:
    """
    질문 복잡도 분석.

    - 20단어 초과, 여러 부분(and/or), 기술 키워드 중 하나라도 해당 → complex
    - 10단어 초과 → moderate
    - 나머지 → simple
    """
    word_count = len(question.split())
    has_multiple_parts = bool(_MULTI_PART.search(question))
    is_technical = bool(_TECHNICAL.search(question))

    if word_count > 20 or has_multiple_parts or is_technical:
        complexity = ComplexityLevel.COMPLEX
    elif word_count > 10:
        complexity = ComplexityLevel.MODERATE
    else:
        complexity = ComplexityLevel.SIMPLE

    estimated = {
        ComplexityLevel.COMPLEX: "long",
        ComplexityLevel.MODERATE: "medium",
        ComplexityLevel.SIMPLE: "short",
    }[complexity]

    return QuestionComplexity(
        complexity=complexity,
        word_count=word_count,
        has_multiple_parts=has_multiple_parts,
        is_technical=is_technical,
        estimated_answer_length=estimated,
    )


class AnswerGenerator:
    """
    Layer 4: 질문 + 컨텍스트 → 답변 초안.

    생성기는 설정값과 모델 호출기만 보관하고 호출 간에 바뀌는 상태는 없습니다.
    """

    def __init__(self, model: Optional[ModelInvoker] = None):
        if model is None:
            from rfp_responder.services.model_factory import get_model_invoker
            model = get_model_invoker()
        self.model = model
        self.settings = get_settings()

    async def generate_answer(
        self,
        question: str,
        context: list[str],
        timeout: Optional[float] = None,
    ) -> GeneratedAnswer:
        """
        질문에 대한 답변 초안을 생성합니다.

        Args:
            question: 질문 텍스트
            context: 검색기가 렌더링한 컨텍스트 문자열 목록 (비어 있을 수 있음)
            timeout: 모델 호출 마감 시간(초). None이면 설정값 사용

        Returns:
            GeneratedAnswer

        Raises:
            GenerationError: 모델 호출 실패 (서비스 부재는 제외)
        """
        prompt = build_answer_prompt(question, context)
        sources = [KNOWLEDGE_BASE_SOURCE] if context else [AI_GENERATED_SOURCE]
        is_fallback = False

        start = datetime.now()
        try:
            text = await self.model.invoke(
                prompt,
                max_tokens=self.settings.answer_max_tokens,
                temperature=self.settings.answer_temperature,
                top_p=self.settings.top_p,
                timeout=timeout if timeout is not None else self.settings.generation_timeout,
            )
        except ServiceUnavailableError as e:
            logger.warning(f"[AnswerGenerator] 모델 사용 불가, 대체 답변 사용: {e.message}")
            text = fallback_answer(question)
            is_fallback = True
        except Exception as e:
            logger.error(f"[AnswerGenerator] 답변 생성 실패: {type(e).__name__}: {e}")
            raise GenerationError(
                "답변 생성에 실패했습니다",
                details={"cause": str(e), "cause_type": type(e).__name__},
            ) from e

        answer = text.strip()
        if not answer:
            raise GenerationError("모델이 빈 답변을 반환했습니다")

        elapsed = (datetime.now() - start).total_seconds()
        logger.info(
            f"[AnswerGenerator] 답변 생성 완료: {len(answer)} chars, {elapsed:.1f}초"
            f"{' (fallback)' if is_fallback else ''}"
        )

        return GeneratedAnswer(
            answer=answer,
            confidence=self.settings.answer_confidence,
            sources=sources,
            generated_at=datetime.now(),
            fallback=is_fallback,
        )

    async def improve_answer(
        self,
        current_answer: str,
        feedback: str,
        question: str,
        timeout: Optional[float] = None,
    ) -> str:
        """
        피드백을 반영해 기존 답변을 다듬습니다. 대체 응답 없이 실패는 그대로 전파됩니다.

        Raises:
            GenerationError: 모델 호출 실패 (서비스 부재 포함)
        """
        prompt = IMPROVE_PROMPT.format(
            question=question,
            current_answer=current_answer,
            feedback=feedback,
        )
        text = await self._invoke_or_raise(
            prompt,
            max_tokens=self.settings.answer_max_tokens,
            temperature=self.settings.improve_temperature,
            timeout=timeout,
            action="답변 개선",
        )
        return text

    async def generate_summary(
        self,
        questions: list[Question],
        timeout: Optional[float] = None,
    ) -> str:
        """
        답변된 질문들로 제안서 요약(Executive Summary)을 생성합니다.
        최종 답변이 있으면 최종 답변을, 없으면 초안을 사용합니다.

        Raises:
            GenerationError: 답변된 질문이 없거나 모델 호출 실패
        """
        answered = [q for q in questions if q.final_answer or q.draft_answer]
        if not answered:
            raise GenerationError("요약할 답변이 없습니다")

        questions_text = "\n\n".join(
            f"Q: {q.question}\nA: {q.final_answer or q.draft_answer}" for q in answered
        )
        return await self._invoke_or_raise(
            SUMMARY_PROMPT.format(questions_text=questions_text),
            max_tokens=self.settings.summary_max_tokens,
            temperature=self.settings.answer_temperature,
            timeout=timeout,
            action="요약 생성",
        )

    async def _invoke_or_raise(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float,
        timeout: Optional[float],
        action: str,
    ) -> str:
        """대체 응답이 없는 호출 공통 처리"""
        try:
            text = await self.model.invoke(
                prompt,
                max_tokens=max_tokens,
                temperature=temperature,
                top_p=self.settings.top_p,
                timeout=timeout if timeout is not None else self.settings.generation_timeout,
            )
        except Exception as e:
            logger.error(f"[AnswerGenerator] {action} 실패: {type(e).__name__}: {e}")
            raise GenerationError(
                f"{action}에 실패했습니다",
                details={"cause": str(e), "cause_type": type(e).__name__},
            ) from e

        result = text.strip()
        if not result:
            raise GenerationError(f"{action}: 모델이 빈 응답을 반환했습니다")
        return result
