"""
모델 기반 질문 추출기입니다.

휴리스틱 분할기가 놓치는 질문(문장 중간의 요구사항 등)을 모델에게 JSON 배열로 뽑아달라고 요청합니다.
모델 호출이나 JSON 복구에 실패하면 휴리스틱 분할 결과를 그대로 사용합니다.
"""

import logging
from typing import Optional

from rfp_responder.exceptions import ModelInvocationError
from rfp_responder.models import Question, QuestionStatus
from rfp_responder.services.interfaces import ModelInvoker
from rfp_responder.utils.json_response import parse_json_response
from .classifier import classify
from .segmenter import DEFAULT_SECTION, MAX_QUESTION_LENGTH, MIN_QUESTION_LENGTH, segment

logger = logging.getLogger(__name__)

# 프롬프트에 넣을 문서 최대 길이
MAX_PROMPT_TEXT_CHARS = 12000

QUESTION_EXTRACTION_PROMPT = """You are an expert RFP analyst. Extract every question or requirement the responding vendor must answer from the RFP text below.

Return ONLY a JSON array. Each element must be an object with:
- "question": the question or requirement, rewritten as a single self-contained sentence
- "section": the heading of the RFP section it appears under

Keep the order in which the questions appear in the document. Return [] if there are none.

RFP text:
{text}

JSON:"""


class QuestionExtractor:
    """
    모델을 사용한 질문 추출기.

    Attributes:
        model: ModelInvoker 구현체
        timeout: 모델 호출 1회 마감 시간(초)
    """

    def __init__(self, model: ModelInvoker, timeout: Optional[float] = None):
        self.model = model
        self.timeout = timeout

    async def extract(self, text: str) -> list[Question]:
        """
        텍스트에서 질문을 추출합니다.

        모델 결과도 휴리스틱 결과와 같은 길이 필터(10~500자)를 거치고,
        ID는 q1부터 다시 매기며 카테고리는 로컬 분류기로 정합니다.
        """
        try:
            response = await self.model.invoke(
                QUESTION_EXTRACTION_PROMPT.format(text=text[:MAX_PROMPT_TEXT_CHARS]),
                max_tokens=4000,
                temperature=0.2,
                timeout=self.timeout,
            )
            raw_items = parse_json_response(response)
        except ModelInvocationError as e:
            logger.warning(f"[QuestionExtractor] 모델 추출 실패, 휴리스틱 분할 사용: {e.message}")
            return segment(text)

        questions = self._to_questions(raw_items)
        if not questions:
            logger.info("[QuestionExtractor] 모델이 질문을 찾지 못해 휴리스틱 분할 사용")
            return segment(text)

        logger.info(f"[QuestionExtractor] 모델 기반 질문 {len(questions)}개 추출")
        return questions

    def _to_questions(self, raw_items) -> list[Question]:
        # {"questions": [...]} 형태로 감싸서 돌려주는 경우도 허용
        if isinstance(raw_items, dict):
            raw_items = raw_items.get("questions", [])
        if not isinstance(raw_items, list):
            return []

        questions = []
        for item in raw_items:
            if isinstance(item, str):
                text, section = item, DEFAULT_SECTION
            elif isinstance(item, dict):
                text = str(item.get("question") or "")
                section = str(item.get("section") or DEFAULT_SECTION)
            else:
                continue

            text = text.strip()
            if not MIN_QUESTION_LENGTH <= len(text) <= MAX_QUESTION_LENGTH:
                continue

            questions.append(
                Question(
                    id=f"q{len(questions) + 1}",
                    question=text,
                    section=section.strip() or DEFAULT_SECTION,
                    category=classify(text),
                    status=QuestionStatus.PENDING,
                )
            )
        return questions
