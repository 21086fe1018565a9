"""
답변 생성용 프롬프트 템플릿입니다.
"""

ANSWER_PROMPT = """You are an expert RFP response writer. Generate a professional, detailed answer to the following question.

{context_block}Question: {question}

Provide a comprehensive answer that:
1. Directly addresses the question
2. Demonstrates expertise and capability
3. Includes specific details and examples when appropriate
4. Maintains a professional tone
5. Is concise but thorough (200-400 words)

Answer:"""

CONTEXT_BLOCK = """Context from knowledge base:
{context}

"""

IMPROVE_PROMPT = """You are an expert RFP response editor. Improve the following answer based on the feedback provided.

Original Question: {question}

Current Answer:
{current_answer}

Feedback for improvement:
{feedback}

Please provide an improved version that:
1. Addresses the feedback
2. Maintains the professional tone
3. Keeps the same overall structure
4. Enhances clarity and impact

Improved Answer:"""

SUMMARY_PROMPT = """You are an expert at writing executive summaries for RFP responses.

Create a compelling executive summary (300-500 words) for this proposal based on the following questions and answers:

{questions_text}

The summary should:
1. Highlight key capabilities and strengths
2. Address main client concerns
3. Demonstrate value proposition
4. Be persuasive and professional
5. Follow a clear structure (Introduction, Key Highlights, Conclusion)

Executive Summary:"""

# 모델을 쓸 수 없을 때의 대체 답변 (질문 키워드 순서대로 검사)
FALLBACK_ANSWERS = (
    (
        ("security",),
        "We implement industry-standard security measures including encryption, access controls, "
        "and regular security audits to protect your data.",
    ),
    (
        ("experience",),
        "Our team has extensive experience in delivering similar projects with proven track records of success.",
    ),
    (
        ("timeline",),
        "We can deliver the project within the specified timeline with proper resource allocation "
        "and project management.",
    ),
    (
        ("cost", "price"),
        "Our pricing is competitive and transparent, with no hidden costs. We offer flexible payment terms.",
    ),
)

GENERIC_FALLBACK_ANSWER = (
    "Thank you for your question. Our team will provide detailed information addressing "
    "all aspects of your inquiry."
)
