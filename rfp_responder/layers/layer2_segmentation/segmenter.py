"""
섹션/질문 분할기(Segmenter)입니다.

텍스트를 한 줄씩 읽으면서 "현재 섹션"과 본문 버퍼를 유지합니다.

줄 분류 규칙:
┌──────────────┬────────────────────────────────────────────────────────┐
│ 섹션 헤더    │ ?로 끝나지 않으면서 다음 중 하나                      │
│              │ - 전부 대문자인 짧은 줄 (4~49자)                        │
│              │ - 번호/문자 열거자 + 대문자로 시작하는 제목형 문구      │
│              │ - Section / Part + 라벨                                 │
├──────────────┼────────────────────────────────────────────────────────┤
│ 질문 후보    │ 1. / 1) / a. / a) / 글머리표(•, -, *)로 시작하거나     │
│              │ ?로 끝나는 줄. 접두어 제거 후 10~500자만 채택           │
├──────────────┼────────────────────────────────────────────────────────┤
│ 그 외        │ 섹션 본문 버퍼에 누적                                   │
└──────────────┴────────────────────────────────────────────────────────┘
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from rfp_responder.models import Question, QuestionStatus
from .classifier import classify

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "General"
MIN_QUESTION_LENGTH = 10
MAX_QUESTION_LENGTH = 500
MIN_CAPS_HEADER_LENGTH = 4
MAX_CAPS_HEADER_LENGTH = 49

# 헤더용 열거자: "1.", "1)", "1.2", "2.3.1.", "A.", "b)"
_HEADER_ENUMERATOR = re.compile(r"^(?:\d+(?:\.\d+)*[.)]?|[A-Za-z][.)])\s+(?P<title>[A-Z].*)$")
_SECTION_KEYWORD = re.compile(r"^(?i:section|part)\s+(?:\d+(?:\.\d+)*|[IVXLC]+|[A-Z])\b")

# 질문 후보용 접두어
_NUMERIC_ENUMERATOR = re.compile(r"^\(?\d+(?:\.\d+)*[.)]\s+")
_ALPHA_ENUMERATOR = re.compile(r"^\(?[A-Za-z][.)]\s+")
_BULLET = re.compile(r"^[•*\-]\s*")


@dataclass
class _ScanState:
    """분할 1회 동안만 쓰는 상태 (호출 간에 공유하지 않음)"""

    section: str = DEFAULT_SECTION
    buffer: list[str] = field(default_factory=list)
    sections: dict[str, str] = field(default_factory=dict)
    questions: list[Question] = field(default_factory=list)

    def flush(self):
        body = "\n".join(self.buffer).strip()
        if body:
            existing = self.sections.get(self.section)
            self.sections[self.section] = f"{existing}\n{body}" if existing else body
        self.buffer = []


def is_section_header(line: str) -> bool:
    """줄이 섹션 헤더인지 판단합니다. (앞뒤 공백은 제거된 상태라고 가정)"""
    if not line or line.endswith("?"):
        return False

    if line.isupper() and MIN_CAPS_HEADER_LENGTH <= len(line) <= MAX_CAPS_HEADER_LENGTH:
        return True

    if _SECTION_KEYWORD.match(line):
        return True

    match = _HEADER_ENUMERATOR.match(line)
    if match and not line.endswith("."):
        return _is_title_case(match.group("title"))

    return False


def _is_title_case(title: str) -> bool:
    """4글자 이상 단어가 모두 대문자로 시작하면 제목으로 봅니다. ("Scope of Work" 허용)"""
    for word in title.split():
        if len(word) > 3 and word[0].isalpha() and not word[0].isupper():
            return False
    return True


def strip_question_prefix(line: str) -> Optional[str]:
    """
    질문 후보라면 열거자/글머리표를 제거한 텍스트를, 아니면 None을 반환합니다.
    """
    for pattern in (_NUMERIC_ENUMERATOR, _ALPHA_ENUMERATOR, _BULLET):
        match = pattern.match(line)
        if match:
            return line[match.end():].strip()

    if line.endswith("?"):
        return line
    return None


def _scan(text: str) -> _ScanState:
    state = _ScanState()

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        if is_section_header(line):
            # 헤더 이전까지 누적된 버퍼는 질문 소스로 쓰지 않고 섹션 본문으로만 기록
            state.flush()
            state.section = line
            continue

        candidate = strip_question_prefix(line)
        if candidate is None:
            state.buffer.append(line)
            continue

        if not MIN_QUESTION_LENGTH <= len(candidate) <= MAX_QUESTION_LENGTH:
            # 너무 짧거나 긴 후보는 노이즈로 간주
            continue

        ordinal = len(state.questions) + 1
        state.questions.append(
            Question(
                id=f"q{ordinal}",
                question=candidate,
                section=state.section,
                category=classify(candidate),
                status=QuestionStatus.PENDING,
            )
        )

    state.flush()
    return state


def segment(text: str) -> list[Question]:
    """
    텍스트를 질문 목록으로 분할합니다.

    질문 ID는 분할 1회 범위의 순번(q1, q2, ...)이며 이 순서가 곧 제안서의 질문 순서입니다.
    """
    state = _scan(text)
    logger.info(
        f"[Segmenter] 질문 {len(state.questions)}개 추출 "
        f"(섹션 {len(state.sections)}개)"
    )
    return state.questions


def split_sections(text: str) -> dict[str, str]:
    """섹션 제목별 본문(질문 후보가 아닌 줄들)을 반환합니다."""
    return _scan(text).sections
