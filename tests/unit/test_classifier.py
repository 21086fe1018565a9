"""classify() unit tests."""

import pytest

from rfp_responder.layers.layer2_segmentation import classify
from rfp_responder.models import Category


@pytest.mark.parametrize(
    "text, expected",
    [
        ("What is your pricing model?", Category.PRICING),
        ("Provide a budget breakdown", Category.PRICING),
        ("Describe your system architecture", Category.TECHNICAL),
        ("What is the delivery schedule?", Category.TIMELINE),
        ("List client references", Category.EXPERIENCE),
        ("Are you GDPR compliant?", Category.SECURITY),
        ("What SLA do you offer?", Category.SUPPORT),
        ("Tell us about your company", Category.GENERAL),
    ],
)
def test_keyword_categories(text, expected):
    assert classify(text) == expected


def test_case_insensitive():
    assert classify("SECURITY CONTROLS") == Category.SECURITY


def test_priority_pricing_before_security():
    assert classify("What does security monitoring cost?") == Category.PRICING


def test_priority_technical_before_support():
    assert classify("Describe integration support") == Category.TECHNICAL


def test_is_pure():
    text = "What is the payment schedule?"
    assert classify(text) == classify(text) == Category.PRICING
