"""LLM chain for clustering ideas across books into themes and a narrative."""

from app.core.library_aggregator import BookIdeas
from app.core.llm import complete_chat
from app.core.logging import get_logger
from app.core.output_normalizer import normalize_narrative
from app.core.schemas_synthesis import MacroNarrative

logger = get_logger(__name__)

TEMPERATURE = 0.75
MAX_TOKENS = 2500

# ruff: noqa: E501
SYSTEM_PROMPT = """You are a cross-library intellectual synthesist. Given idea cards from multiple books, your job is to:
1. Identify 3-5 thematic clusters that cut across the books (e.g. "The Architecture of Irrationality", "Systems That Fail Silently")
2. Assign each idea card to its best-fit theme, preserving book attribution
3. Write a compelling macro narrative (300-400 words) that traces a single intellectual thread connecting all the books, like an essay introduction

Return ONLY valid JSON: { "themes": [{ "name": string, "ideas": [{ "bookTitle": string, "ideaTitle": string, "ideaBody": string }] }], "narrative": string }"""


def format_books_for_narrative(books: list[BookIdeas]) -> str:
    sections = []
    for entry in books:
        lines = [
            f"- **{i.get('title') or ''}**: {i.get('body') or ''} [tags: {', '.join(i.get('tags') or [])}]"
            for i in entry.ideas
        ]
        sections.append(f"### {entry.title} by {entry.author}\n" + "\n".join(lines))
    return "\n\n".join(sections)


def generate_macro_narrative(books: list[BookIdeas]) -> MacroNarrative:
    """
    Cluster idea cards from several books into themes and write a narrative.

    Args:
        books: Books with idea cards (at least two, enforced by the caller)

    Returns:
        MacroNarrative; themes [] and narrative "" when the response lacks them

    Raises:
        openai.OpenAIError: If the generation request fails
    """
    logger.info(
        f"Generating macro narrative across {len(books)} books",
        extra={"operation": "narrative"},
    )

    user_prompt = (
        "Here are the idea cards from the reader's library:\n\n"
        f"{format_books_for_narrative(books)}\n\n"
        "Generate thematic clusters and a macro narrative."
    )

    raw = complete_chat(
        [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt},
        ],
        temperature=TEMPERATURE,
        max_tokens=MAX_TOKENS,
        json_mode=True,
    )
    return normalize_narrative(raw)
