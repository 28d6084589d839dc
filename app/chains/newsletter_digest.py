"""LLM chain for the weekly newsletter digest, plus its plain-text rendering."""

from typing import Any

from app.core.book_context import format_idea_lines, format_voice_block
from app.core.library_aggregator import BookIdeas
from app.core.llm import complete_chat
from app.core.logging import get_logger
from app.core.output_normalizer import normalize_digest
from app.core.schemas_books import BrandProfile
from app.core.schemas_synthesis import Digest

logger = get_logger(__name__)

TEMPERATURE = 0.75
MAX_TOKENS = 1800
IDEA_BODY_CHARS = 200

IDEAS_HEADER = "━━━ THIS WEEK'S IDEAS ━━━"
ARTICLE_HEADER = "━━━ ARTICLE PICK ━━━"
CLOSING_HEADER = "━━━ CLOSING THOUGHT ━━━"

# ruff: noqa: E501
SYSTEM_PROMPT = """You write a weekly reading newsletter for a curious, busy audience. From the idea cards the author distilled this week, write one digest issue:
- "subject_line": under 60 characters, specific and intriguing, no clickbait
- "opening_hook": 2-3 sentences that connect this week's reading into one tension or question
- "key_ideas": 3-5 entries, each { "book": book title, "title": short idea title, "insight": 1-2 sentences in plain language }
- "article_pick": 1-2 sentences recommending the supplied article and why it is worth the click (empty string if no article is supplied)
- "closing_thought": one memorable sentence to end the issue

Return ONLY valid JSON: { "subject_line": string, "opening_hook": string, "key_ideas": [{ "book": string, "title": string, "insight": string }], "article_pick": string, "closing_thought": string }"""


def build_digest_prompt(books: list[BookIdeas], top_article: dict[str, Any] | None) -> str:
    sections = [
        f"### {entry.title} by {entry.author}\n{format_idea_lines(entry.ideas, IDEA_BODY_CHARS)}"
        for entry in books
    ]
    prompt = "This week's idea cards:\n\n" + "\n\n".join(sections)

    if top_article:
        prompt += (
            f"\n\nArticle to recommend: \"{top_article.get('title') or ''}\" "
            f"({top_article.get('domain') or ''}) {top_article.get('url') or ''}"
        )
    else:
        prompt += "\n\nNo article this week."
    return prompt + "\n\nWrite this week's digest."


def generate_digest(
    books: list[BookIdeas],
    top_article: dict[str, Any] | None = None,
    voice: BrandProfile | None = None,
) -> Digest:
    """
    Write a newsletter digest from a week of idea cards.

    Args:
        books: Books with their recent idea cards
        top_article: Most recently saved article, if any
        voice: Optional brand voice

    Returns:
        Digest with all five keys present

    Raises:
        openai.OpenAIError: If the generation request fails
    """
    logger.info(
        f"Generating digest from {sum(len(b.ideas) for b in books)} ideas, article={bool(top_article)}",
        extra={"operation": "digest"},
    )

    system_prompt = SYSTEM_PROMPT
    voice_block = format_voice_block(voice)
    if voice_block:
        system_prompt = f"{system_prompt}\n\n{voice_block}"

    raw = complete_chat(
        [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": build_digest_prompt(books, top_article)},
        ],
        temperature=TEMPERATURE,
        max_tokens=MAX_TOKENS,
        json_mode=True,
    )
    return normalize_digest(raw)


def render_plain_text(digest: Digest, top_article: dict[str, Any] | None) -> str:
    """Assemble the copy-ready plain-text issue from the digest fields."""
    ideas_text = "\n\n".join(
        f"📚 {k.book}\n{k.title}: {k.insight}" for k in digest.key_ideas
    )
    article_section = (
        f"{ARTICLE_HEADER}\n\n{digest.article_pick}\n{top_article.get('url') or ''}"
        if top_article
        else ""
    )

    return "\n".join(
        [
            f"SUBJECT: {digest.subject_line}",
            "",
            digest.opening_hook,
            "",
            IDEAS_HEADER,
            "",
            ideas_text,
            "",
            article_section,
            "",
            CLOSING_HEADER,
            "",
            digest.closing_thought,
        ]
    )
