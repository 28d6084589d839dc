"""LLM chains for the reading partner: chat replies and writing suggestions."""

from typing import Any

from app.core.book_context import format_idea_lines
from app.core.library_aggregator import BookIdeas
from app.core.llm import complete_chat
from app.core.logging import get_logger

logger = get_logger(__name__)

CHAT_TEMPERATURE = 0.82
CHAT_MAX_TOKENS = 400
CHAT_IDEA_BODY_CHARS = 130

LIBRARY_IDEAS_PER_BOOK = 5
LIBRARY_IDEA_BODY_CHARS = 120

SUGGEST_TEMPERATURE = 0.75
SUGGEST_MAX_TOKENS = 200
SUGGEST_DRAFT_CHARS = 600

# ruff: noqa: E501
CHAT_SYSTEM_PROMPT = """You are an insightful reading partner helping someone master ideas from the books they read. You have access to their raw notes and distilled idea cards.

Your personality:
- Intellectually curious and deeply engaged
- You ask probing questions that push thinking further
- You make unexpected connections across ideas
- You're direct but warm, like a brilliant friend who loves books
- You never give generic answers; everything is grounded in the specific book and notes

Current book: "{book_title}" by {author}

Their notes summary:
{notes}

Their distilled ideas:
{ideas}

Guidelines:
- Reference specific things from their notes and ideas
- Push them to go deeper, not just summarise
- Highlight implications they may not have considered
- Use italics (*word*) for key concepts
- Keep responses under 200 words but make every word count"""

LIBRARY_HEADER = """

### Your Library
You also have context from the reader's other books. Draw explicit cross-book connections when relevant, and name the book and author:
"""

SUGGEST_SYSTEM_PROMPT = """You are a brilliant essayist helping someone write a synthesis of ideas from "{book_title}" by {author}. Given their current draft and idea cards, suggest a compelling next paragraph or sentence. Write in their voice: thoughtful, precise, unhurried. Return only the suggested text, no preamble."""


def format_library_block(library: list[BookIdeas] | None) -> str:
    """Render other books' idea cards; "" when library mode found nothing."""
    if not library:
        return ""

    block = LIBRARY_HEADER
    for entry in library:
        block += f"\n**{entry.title}** by {entry.author}:\n"
        lines = format_idea_lines(entry.ideas[:LIBRARY_IDEAS_PER_BOOK], LIBRARY_IDEA_BODY_CHARS, bullet="  -")
        block += lines + "\n"
    return block


def build_chat_system_prompt(
    book_title: str,
    author: str,
    notes: str,
    ideas: list[dict[str, Any]],
    library: list[BookIdeas] | None,
) -> str:
    prompt = CHAT_SYSTEM_PROMPT.format(
        book_title=book_title,
        author=author,
        notes=notes or "No notes yet",
        ideas=format_idea_lines(ideas, CHAT_IDEA_BODY_CHARS) if ideas else "None yet",
    )
    return prompt + format_library_block(library)


def chat_with_partner(
    *,
    user_message: str,
    book_title: str,
    author: str,
    notes: str,
    ideas: list[dict[str, Any]],
    history: list[dict[str, str]],
    library: list[BookIdeas] | None = None,
) -> str:
    """
    Generate the reading partner's reply to a user message.

    Args:
        user_message: The new message
        book_title: Active book title
        author: Active book author
        notes: Joined notes, already truncated to the context budget
        ideas: Active book's idea cards
        history: Prior turns, already cut to the context window
        library: Other books' idea cards when library mode found any

    Returns:
        Reply text

    Raises:
        openai.OpenAIError: If the generation request fails
    """
    system_prompt = build_chat_system_prompt(book_title, author, notes, ideas, library)

    logger.info(
        f"Chat reply: {len(history)} prior turns, library_books={len(library or [])}",
        extra={"operation": "chat"},
    )

    messages = [
        {"role": "system", "content": system_prompt},
        *history,
        {"role": "user", "content": user_message},
    ]

    return complete_chat(messages, temperature=CHAT_TEMPERATURE, max_tokens=CHAT_MAX_TOKENS)


def suggest_writing(
    *,
    book_title: str,
    author: str,
    current_text: str,
    ideas: list[dict[str, Any]],
) -> str:
    """
    Suggest a continuation for the user's draft.

    Only the tail of the draft is sent.

    Raises:
        openai.OpenAIError: If the generation request fails
    """
    idea_titles = "\n".join(f"• {i.get('title') or ''}" for i in ideas)
    user_prompt = (
        f"Current draft:\n{current_text[-SUGGEST_DRAFT_CHARS:]}\n\n"
        f"Key ideas:\n{idea_titles}\n\n"
        "Suggest a continuation (1-2 sentences or a paragraph):"
    )

    raw = complete_chat(
        [
            {"role": "system", "content": SUGGEST_SYSTEM_PROMPT.format(book_title=book_title, author=author)},
            {"role": "user", "content": user_prompt},
        ],
        temperature=SUGGEST_TEMPERATURE,
        max_tokens=SUGGEST_MAX_TOKENS,
    )
    return raw.strip()
