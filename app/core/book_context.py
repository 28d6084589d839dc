"""Gather and shape per-book records into bounded prompt context.

Reads for a request run concurrently. The book lookup is required: if the
book is missing, BookNotFoundError is raised before any generation call.
Notes, idea cards and conversation history are optional: a failed read is
logged and treated as empty.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable

from app.core.errors import BookNotFoundError
from app.core.logging import get_logger
from app.core.schemas_books import BrandProfile
from app.db import books as books_db
from app.db import conversations as conversations_db
from app.db import ideas as ideas_db
from app.db import notes as notes_db
from app.db import profiles as profiles_db
from app.db.books import BOOK_SUMMARY_COLUMNS
from app.db.ideas import IDEA_PROMPT_COLUMNS

logger = get_logger(__name__)

NOTES_SEPARATOR = "\n\n"


@dataclass
class BookContext:
    """Records gathered for one book, before prompt shaping."""

    book: dict[str, Any]
    notes: list[dict[str, Any]] = field(default_factory=list)
    ideas: list[dict[str, Any]] = field(default_factory=list)
    history: list[dict[str, str]] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.book.get("title") or ""

    @property
    def author(self) -> str:
        return self.book.get("author") or ""

    @property
    def notes_text(self) -> str:
        return join_notes(self.notes)


async def require_book(book_id: str, columns: str = BOOK_SUMMARY_COLUMNS) -> dict[str, Any]:
    """
    Look up a book, failing fast when it does not exist.

    Raises:
        BookNotFoundError: If no book has this id
    """
    book = await asyncio.to_thread(books_db.get_book, book_id, columns)
    if not book:
        logger.info(f"Book {book_id} not found", extra={"book_id": book_id})
        raise BookNotFoundError(book_id)
    return book


async def _optional_read(what: str, book_id: str, fn: Callable[..., Any], *args: Any) -> Any:
    try:
        return await asyncio.to_thread(fn, *args)
    except Exception as e:
        logger.warning(f"Optional {what} read failed, continuing without it: {e}", extra={"book_id": book_id})
        return []


async def _no_records() -> list:
    return []


async def load_book_context(
    book_id: str,
    *,
    include_notes: bool = False,
    include_ideas: bool = False,
    idea_limit: int | None = None,
    history_turns: int = 0,
) -> BookContext:
    """
    Fetch a book and the records an operation needs, concurrently.

    Args:
        book_id: Book id
        include_notes: Also fetch the book's chapter notes
        include_ideas: Also fetch the book's idea cards
        idea_limit: Cap on idea cards (None fetches all)
        history_turns: Number of most recent conversation turns to fetch (0 skips)

    Returns:
        BookContext with whatever optional records could be read

    Raises:
        BookNotFoundError: If the book does not exist
    """
    book, notes, ideas, history = await asyncio.gather(
        require_book(book_id),
        _optional_read("notes", book_id, notes_db.list_notes, book_id, "content")
        if include_notes
        else _no_records(),
        _optional_read("ideas", book_id, ideas_db.list_ideas, book_id, IDEA_PROMPT_COLUMNS, idea_limit)
        if include_ideas
        else _no_records(),
        _optional_read("history", book_id, conversations_db.list_recent_turns, book_id, history_turns)
        if history_turns > 0
        else _no_records(),
    )

    logger.debug(
        f"Loaded context: notes={len(notes)}, ideas={len(ideas)}, turns={len(history)}",
        extra={"book_id": book_id},
    )
    return BookContext(book=book, notes=notes, ideas=ideas, history=history)


async def resolve_brand_profile(requested: BrandProfile | None) -> BrandProfile:
    """
    Pick the voice profile for a request.

    A profile supplied with the request wins; otherwise the stored singleton
    is read once. A failed read means no voice constraints.
    """
    if requested is not None:
        return requested
    try:
        return await asyncio.to_thread(profiles_db.get_brand_profile)
    except Exception as e:
        logger.warning(f"Brand profile read failed, using no voice: {e}")
        return BrandProfile()


# ============================================================================
# Shaping
# ============================================================================


def join_notes(notes: list[dict[str, Any]]) -> str:
    """Concatenate note contents with a blank line between them."""
    return NOTES_SEPARATOR.join(n.get("content") or "" for n in notes)


def truncate(text: str | None, limit: int) -> str:
    """Keep the first ``limit`` characters; the rest is dropped."""
    return (text or "")[:limit]


def format_idea_lines(ideas: list[dict[str, Any]], body_chars: int, bullet: str = "-") -> str:
    """Render idea cards as one line each with a truncated body."""
    return "\n".join(
        f"{bullet} {idea.get('title') or ''}: {truncate(idea.get('body'), body_chars)}"
        for idea in ideas
    )


def last_turns(history: list[dict[str, str]], count: int) -> list[dict[str, str]]:
    """Keep the most recent ``count`` turns; older turns are invisible."""
    return history[-count:] if count > 0 else []


def format_voice_block(profile: BrandProfile | None) -> str:
    """
    Render the voice profile as a prompt block.

    Returns "" when every field is empty.
    """
    if profile is None or profile.is_empty:
        return ""

    lines = ["Write in this author's brand voice:"]
    if profile.positioning.strip():
        lines.append(f"- Positioning: {profile.positioning.strip()}")
    if profile.audience.strip():
        lines.append(f"- Audience: {profile.audience.strip()}")
    if profile.tone.strip():
        lines.append(f"- Tone: {profile.tone.strip()}")
    return "\n".join(lines)
