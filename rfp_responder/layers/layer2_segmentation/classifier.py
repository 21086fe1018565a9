"""
질문 카테고리 분류기입니다.
고정된 키워드 표를 우선순위 순서대로 검사하는 순수 함수입니다.
"""

from rfp_responder.models import Category

# 검사 순서가 곧 우선순위 (먼저 매칭된 카테고리가 이김)
# "pricing"은 "price"의 부분 문자열이 아니므로 따로 둔다
CATEGORY_KEYWORDS: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.PRICING, ("price", "cost", "budget", "payment", "pricing")),
    (Category.TECHNICAL, ("technical", "technology", "architecture", "integration")),
    (Category.TIMELINE, ("timeline", "schedule", "delivery", "deadline")),
    (Category.EXPERIENCE, ("experience", "qualification", "reference", "portfolio")),
    (Category.SECURITY, ("security", "compliance", "privacy", "gdpr")),
    (Category.SUPPORT, ("support", "maintenance", "warranty", "sla")),
)


def classify(text: str) -> Category:
    """
    질문 텍스트를 카테고리로 분류합니다.

    대소문자 구분 없이 부분 문자열 포함 여부만 봅니다.
    예: "cost"와 "security"가 모두 있으면 pricing이 먼저 검사되므로 PRICING.
    """
    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return Category.GENERAL
