"""
추출된 텍스트 정리 함수입니다.

줄 구조는 유지합니다. (질문 분할기가 줄 단위로 동작하기 때문)
"""

import re

# 줄바꿈을 제외한 공백 문자 연속 구간 (탭, 세로탭, NBSP 등 포함)
_INLINE_WHITESPACE = re.compile(r"[^\S\n]+")
_SPACE_AROUND_NEWLINE = re.compile(r" *\n *")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def normalize(text: str) -> str:
    """
    텍스트 정규화.

    처리 순서:
    1. \\r\\n, \\r, 폼피드(\\f)를 줄바꿈으로 변환
    2. 줄바꿈 이외의 공백 연속 구간을 공백 한 칸으로 축소
    3. 줄바꿈 앞뒤 공백 제거
    4. 3개 이상 연속 줄바꿈을 정확히 2개로 축소
    5. 앞뒤 공백 제거

    normalize(normalize(t)) == normalize(t) 가 항상 성립합니다.
    """
    cleaned = text.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n")
    cleaned = _INLINE_WHITESPACE.sub(" ", cleaned)
    cleaned = _SPACE_AROUND_NEWLINE.sub("\n", cleaned)
    cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned)
    return cleaned.strip()
