"""LLM chain for classifying articles against a book's thesis."""

from app.core.llm import complete_chat
from app.core.logging import get_logger
from app.core.output_normalizer import normalize_stances
from app.core.schemas_synthesis import Article, Stance

logger = get_logger(__name__)

TEMPERATURE = 0.2
MAX_TOKENS = 300
SNIPPET_CHARS = 200

# ruff: noqa: E501
SYSTEM_PROMPT = """You classify articles as supporting, opposing, or neutral relative to a book's thesis.
- "supporting": the article argues for, validates, or extends the thesis
- "opposing": the article argues against, critiques, or contradicts the thesis
- "neutral": the article discusses the topic without taking a clear stance

Return ONLY valid JSON: { "stances": ["supporting"|"opposing"|"neutral", ...] } with one entry per article, in the same order."""


def build_thesis(book_title: str, author: str, concept_query: str | None = None) -> str:
    return f'"{book_title}" by {author}: {concept_query or "key arguments"}'


def classify_article_stances(articles: list[Article], thesis: str) -> list[Stance]:
    """
    Classify each article's stance toward a thesis.

    Args:
        articles: Articles in display order
        thesis: Thesis statement to classify against

    Returns:
        One stance per article, aligned by index

    Raises:
        openai.OpenAIError: If the generation request fails; the caller
            substitutes neutral stances
    """
    if not articles:
        return []

    article_list = "\n".join(
        f'{i}. Title: "{a.title}" | Snippet: "{a.snippet[:SNIPPET_CHARS]}"'
        for i, a in enumerate(articles, start=1)
    )
    user_prompt = (
        f'Book thesis: "{thesis}"\n\nArticles:\n{article_list}\n\n'
        "Classify each article's stance toward the thesis."
    )

    logger.info(f"Classifying {len(articles)} article stances", extra={"operation": "stance"})

    raw = complete_chat(
        [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt},
        ],
        temperature=TEMPERATURE,
        max_tokens=MAX_TOKENS,
        json_mode=True,
    )
    return normalize_stances(raw, len(articles))
