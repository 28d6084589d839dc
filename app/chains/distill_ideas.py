"""LLM chain for distilling raw chapter notes into idea cards."""

from app.core.llm import complete_chat
from app.core.logging import get_logger
from app.core.output_normalizer import normalize_ideas
from app.core.schemas_synthesis import IdeaCardDraft

logger = get_logger(__name__)

TEMPERATURE = 0.7
MAX_TOKENS = 1500

# ruff: noqa: E501
SYSTEM_PROMPT = """You are an intellectual thinking partner helping a serious reader distil rough book notes into polished, insight-rich idea cards. You think like a combination of a philosopher, a scientist, and a great writer.

Your job is to:
1. Identify the core insights buried in the raw notes
2. Synthesise each insight into a clear, compelling 2-4 sentence articulation
3. Surface the deeper implication: what does this mean beyond the book?
4. Suggest 2-3 short tags per insight (UPPERCASE)
5. Return valid JSON only

Return an object: { "ideas": [{ "title": string, "body": string, "tags": string[], "number": number }] }"""


def build_distill_prompt(
    book_title: str,
    author: str,
    chapter_name: str,
    raw_notes: str,
    existing_titles: list[str],
) -> str:
    prompt = f'''Book: "{book_title}" by {author}
Chapter: {chapter_name}

Raw notes:
"""
{raw_notes}
"""
'''
    if existing_titles:
        prompt += f"\nExisting insights to avoid duplicating: {', '.join(existing_titles)}\n"
    prompt += "\nReturn 3-5 insight cards as JSON. Each card: { title: string, body: string, tags: string[], number: number }"
    return prompt


def distill_ideas(
    *,
    book_title: str,
    author: str,
    chapter_name: str,
    raw_notes: str,
    existing_titles: list[str],
) -> list[IdeaCardDraft]:
    """
    Distil raw notes into 3-5 idea cards.

    Args:
        book_title: Book title
        author: Book author
        chapter_name: Chapter label for the notes
        raw_notes: Raw note text
        existing_titles: Titles of the book's saved cards, to avoid repeats

    Returns:
        Idea card drafts; [] when the response has no usable cards

    Raises:
        openai.OpenAIError: If the generation request fails
    """
    logger.info(
        f"Distilling notes for chapter '{chapter_name}' ({len(raw_notes)} chars)",
        extra={"operation": "distill"},
    )

    raw = complete_chat(
        [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": build_distill_prompt(
                    book_title, author, chapter_name, raw_notes, existing_titles
                ),
            },
        ],
        temperature=TEMPERATURE,
        max_tokens=MAX_TOKENS,
        json_mode=True,
    )

    return normalize_ideas(raw)
