"""Segmenter unit tests.

섹션 헤더 판정, 질문 후보 판정, 길이 필터, ID 순번을 확인합니다.
"""

import pytest

from rfp_responder.layers.layer2_segmentation import (
    is_section_header,
    segment,
    split_sections,
    strip_question_prefix,
)
from rfp_responder.models import Category, QuestionStatus


class TestSectionHeader:
    @pytest.mark.parametrize(
        "line",
        [
            "SECTION 1: GENERAL",
            "TECHNICAL REQUIREMENTS",
            "Section 3",
            "Part IV - Pricing",
            "2. Scope of Work",
            "3.1 Technical Approach",
            "A. Company Background",
        ],
    )
    def test_headers(self, line):
        assert is_section_header(line)

    @pytest.mark.parametrize(
        "line",
        [
            "1. What is your pricing model?",
            "DO YOU SUPPORT SSO?",
            "ABC",
            "2. Describe your security practices.",
            "1. describe the onboarding process",
            "Some filler.",
            "",
        ],
    )
    def test_non_headers(self, line):
        assert not is_section_header(line)

    def test_caps_header_length_bounds(self):
        assert is_section_header("A" * 49)
        assert not is_section_header("A" * 50)


class TestQuestionPrefix:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("1. Provide references", "Provide references"),
            ("2) Provide references", "Provide references"),
            ("(3) Provide references", "Provide references"),
            ("1.2. Provide references", "Provide references"),
            ("a. Provide references", "Provide references"),
            ("B) Provide references", "Provide references"),
            ("• Provide references", "Provide references"),
            ("- Provide references", "Provide references"),
            ("* Provide references", "Provide references"),
            ("Do you offer support?", "Do you offer support?"),
        ],
    )
    def test_candidates(self, line, expected):
        assert strip_question_prefix(line) == expected

    def test_plain_sentence_is_not_candidate(self):
        assert strip_question_prefix("This paragraph describes the project.") is None


class TestSegment:
    def test_section_scenario(self):
        text = (
            "SECTION 1: GENERAL\n"
            "1. What is your pricing model?\n"
            "Some filler.\n"
            "2. Describe your security practices?"
        )
        questions = segment(text)

        assert [q.question for q in questions] == [
            "What is your pricing model?",
            "Describe your security practices?",
        ]
        assert [q.section for q in questions] == ["SECTION 1: GENERAL"] * 2
        assert [q.category for q in questions] == [Category.PRICING, Category.SECURITY]
        assert [q.id for q in questions] == ["q1", "q2"]
        assert all(q.status == QuestionStatus.PENDING for q in questions)
        assert all(q.draft_answer is None and q.final_answer is None for q in questions)

    def test_questions_before_any_header_use_default_section(self):
        questions = segment("Do you provide 24/7 support?")
        assert questions[0].section == "General"
        assert questions[0].category == Category.SUPPORT

    def test_section_changes_apply_to_following_questions(self):
        text = (
            "PRICING\n"
            "1. What is the total cost?\n"
            "TECHNICAL\n"
            "1. Describe your integration approach\n"
        )
        questions = segment(text)
        assert [(q.section, q.id) for q in questions] == [("PRICING", "q1"), ("TECHNICAL", "q2")]

    def test_length_filter(self):
        text = "1. Too short\n- Why?\n2. " + "x" * 501 + "\n3. " + "y" * 500 + "\n4. abcdefghij"
        questions = segment(text)
        lengths = [len(q.question) for q in questions]
        assert all(10 <= n <= 500 for n in lengths)
        assert lengths == [500, 10]

    def test_ids_are_strictly_increasing(self):
        text = "\n".join(f"{i}. Please describe requirement number {i}" for i in range(1, 13))
        questions = segment(text)
        ordinals = [q.ordinal for q in questions]
        assert ordinals == list(range(1, 13))

    def test_duplicates_are_kept(self):
        questions = segment("- What is your price?\n- What is your price?")
        assert len(questions) == 2

    def test_empty_text(self):
        assert segment("") == []

    def test_each_call_starts_fresh(self):
        segment("PRICING\n1. What is the total cost?")
        questions = segment("Do you offer warranty coverage?")
        assert questions[0].id == "q1"
        assert questions[0].section == "General"


class TestSplitSections:
    def test_non_question_lines_become_section_body(self):
        text = (
            "INTRODUCTION\n"
            "The city seeks a vendor.\n"
            "Responses are due in May.\n"
            "PRICING\n"
            "1. What is the total cost?\n"
            "All prices in USD.\n"
        )
        sections = split_sections(text)
        assert sections["INTRODUCTION"] == "The city seeks a vendor.\nResponses are due in May."
        assert sections["PRICING"] == "All prices in USD."
