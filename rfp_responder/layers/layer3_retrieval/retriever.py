"""
지식 검색기(Knowledge Retriever)입니다.

임베딩 없이 키워드 가중치 점수로 지식 항목의 순위를 매깁니다.

점수 계산:
- 질의를 공백 기준으로 나누고 소문자로 변환
- 토큰이 본문(content)에 부분 문자열로 있으면 +2
- 토큰이 제목(title)에 부분 문자열로 있으면 +5
- 질의에 같은 토큰이 여러 번 있으면 매번 더함

0점 항목은 제외하고, 점수 내림차순으로 정렬하되 동점이면 입력 순서를 유지합니다. (안정 정렬)
"""

import logging
from typing import Iterable, Optional

from rfp_responder.exceptions import InputValidationError
from rfp_responder.models import KnowledgeEntry, ScoredEntry

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5
CONTENT_WEIGHT = 2
TITLE_WEIGHT = 5

# 하이라이트 조각 설정
FRAGMENT_SIZE = 150
MAX_FRAGMENTS = 3
# 하이라이트가 없을 때 본문을 자르는 길이
CONTENT_PREVIEW_CHARS = 500


def tokenize(query: str) -> list[str]:
    """질의를 소문자 토큰 목록으로 변환합니다."""
    return query.lower().split()


def score_entry(tokens: list[str], entry: KnowledgeEntry) -> int:
    """지식 항목 하나의 점수를 계산합니다."""
    content = (entry.content or "").lower()
    title = (entry.title or "").lower()

    score = 0
    for token in tokens:
        if token in content:
            score += CONTENT_WEIGHT
        if token in title:
            score += TITLE_WEIGHT
    return score


def highlight(tokens: list[str], content: str) -> list[str]:
    """
    본문에서 토큰이 처음 등장하는 위치 주변을 잘라 하이라이트 조각을 만듭니다.

    - 토큰별 첫 등장 위치를 중심으로 FRAGMENT_SIZE 길이의 조각
    - 겹치는 조각은 하나로 취급, 본문 순서대로 최대 MAX_FRAGMENTS개
    """
    lowered = content.lower()
    positions = sorted({lowered.find(token) for token in tokens if token and token in lowered})

    fragments = []
    covered_until = -1
    for pos in positions:
        if pos < covered_until:
            continue
        start = max(0, pos - FRAGMENT_SIZE // 3)
        end = min(len(content), start + FRAGMENT_SIZE)
        fragments.append(content[start:end].strip())
        covered_until = end
        if len(fragments) == MAX_FRAGMENTS:
            break
    return fragments


def retrieve(
    query: str,
    pool: Iterable[KnowledgeEntry],
    top_k: int = DEFAULT_TOP_K,
    category: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
) -> list[ScoredEntry]:
    """
    질의와 관련된 지식 항목을 점수 순으로 반환합니다.

    Args:
        query: 질문 텍스트
        pool: 회사의 전체 지식 항목 (순서가 동점 처리 기준)
        top_k: 최대 반환 개수 (양의 정수)
        category: 지정하면 해당 카테고리 항목만 검색
        tags: 지정하면 태그가 하나라도 겹치는 항목만 검색

    Returns:
        ScoredEntry 목록 (점수 내림차순, 최대 top_k개, 0점 없음)

    Raises:
        InputValidationError: top_k가 양의 정수가 아닌 경우
    """
    if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 1:
        raise InputValidationError(
            "top_k는 1 이상의 정수여야 합니다",
            details={"top_k": top_k},
        )

    tokens = tokenize(query)
    wanted_tags = set(tags) if tags else None

    scored = []
    for entry in pool:
        if category and entry.category != category:
            continue
        if wanted_tags and not (entry.tags & wanted_tags):
            continue
        score = score_entry(tokens, entry)
        if score > 0:
            scored.append((entry, score))

    # sorted()는 안정 정렬이므로 동점이면 풀 순서가 유지됨
    ranked = sorted(scored, key=lambda item: item[1], reverse=True)[:top_k]

    results = [
        ScoredEntry(entry=entry, score=score, highlights=highlight(tokens, entry.content or ""))
        for entry, score in ranked
    ]
    logger.info(f"[Retriever] 후보 {len(scored)}건 중 {len(results)}건 선택 (top_k={top_k})")
    return results


def render_context(results: Iterable[ScoredEntry]) -> list[str]:
    """
    답변 생성기에 넘길 컨텍스트 문자열 목록을 만듭니다.
    생성기는 지식 항목 객체가 아니라 이 문자열만 받습니다.
    """
    rendered = []
    for item in results:
        body = "... ".join(item.highlights) if item.highlights else (item.entry.content or "")[:CONTENT_PREVIEW_CHARS]
        rendered.append(f"Title: {item.entry.title}\nContent: {body}")
    return rendered
