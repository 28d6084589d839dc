"""Library-wide view of idea cards grouped by book.

Used by chat's library mode, the macro narrative and the weekly digest.
Books that contribute no idea cards are always dropped from the synthesis
views; only the browse view keeps them.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from app.core.errors import EmptyLibraryError, InsufficientBooksError, NothingToDigestError
from app.core.logging import get_logger
from app.db import books as books_db
from app.db import ideas as ideas_db
from app.db.books import BOOK_SUMMARY_COLUMNS

logger = get_logger(__name__)

MIN_NARRATIVE_BOOKS = 2
LIBRARY_CONTEXT_IDEA_LIMIT = 50
DIGEST_IDEAS_PER_BOOK = 5

UNKNOWN_BOOK = {"title": "Unknown", "author": ""}


@dataclass
class BookIdeas:
    """One book paired with its idea cards."""

    book: dict[str, Any]
    ideas: list[dict[str, Any]] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.book.get("title") or ""

    @property
    def author(self) -> str:
        return self.book.get("author") or ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.book.get("id"),
            "title": self.book.get("title"),
            "author": self.book.get("author"),
            "ideas": [
                {"title": i.get("title"), "body": i.get("body"), "tags": i.get("tags") or []}
                for i in self.ideas
            ],
        }


def group_ideas_by_book(ideas: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Map book id to its idea cards, keeping store order within each book."""
    grouped: dict[str, list[dict[str, Any]]] = {}
    for idea in ideas:
        grouped.setdefault(idea["book_id"], []).append(idea)
    return grouped


def pair_books_with_ideas(
    books: list[dict[str, Any]],
    ideas_by_book: dict[str, list[dict[str, Any]]],
    keep_empty: bool = False,
) -> list[BookIdeas]:
    """
    Pair each book with its idea cards, in book order.

    Args:
        books: Book dicts with an id
        ideas_by_book: Output of group_ideas_by_book
        keep_empty: Keep books with no idea cards (browse view only)

    Returns:
        List of BookIdeas
    """
    pairs = [BookIdeas(book=b, ideas=ideas_by_book.get(b["id"], [])) for b in books]
    if keep_empty:
        return pairs
    return [p for p in pairs if p.ideas]


async def browse_library() -> list[BookIdeas]:
    """Every book, oldest first, with its idea cards (possibly none)."""
    books = await asyncio.to_thread(
        books_db.list_books, None, BOOK_SUMMARY_COLUMNS, False
    )
    if not books:
        return []

    ideas = await asyncio.to_thread(ideas_db.list_library_ideas)
    return pair_books_with_ideas(books, group_ideas_by_book(ideas), keep_empty=True)


async def collect_narrative_books(book_ids: list[str] | None = None) -> list[BookIdeas]:
    """
    Books with idea cards for a cross-book narrative.

    Args:
        book_ids: Optional subset; the same subset filters books and ideas

    Returns:
        At least two BookIdeas

    Raises:
        InsufficientBooksError: If fewer than two books qualify
    """
    books, ideas = await asyncio.gather(
        asyncio.to_thread(books_db.list_books, book_ids, BOOK_SUMMARY_COLUMNS, False),
        asyncio.to_thread(ideas_db.list_library_ideas, book_ids),
    )

    qualifying = pair_books_with_ideas(books, group_ideas_by_book(ideas))
    logger.info(
        f"Narrative candidates: {len(books)} books, {len(qualifying)} with ideas",
        extra={"operation": "narrative"},
    )

    if len(qualifying) < MIN_NARRATIVE_BOOKS:
        raise InsufficientBooksError()
    return qualifying


async def collect_library_context(active_book_id: str) -> list[BookIdeas] | None:
    """
    Idea cards from the reader's other books for chat library mode.

    The active book is excluded; its cards are already in the chat prompt.
    Any read failure disables library context for the turn.

    Returns:
        Qualifying books, or None when there are none
    """
    try:
        books = await asyncio.to_thread(books_db.list_books, None, BOOK_SUMMARY_COLUMNS)
        others = [b for b in books if b["id"] != active_book_id]
        if not others:
            return None

        ideas = await asyncio.to_thread(
            ideas_db.list_library_ideas,
            [b["id"] for b in others],
            ideas_db.IDEA_LIBRARY_COLUMNS,
            LIBRARY_CONTEXT_IDEA_LIMIT,
        )
    except Exception as e:
        logger.warning(f"Library context read failed, chatting without it: {e}", extra={"book_id": active_book_id})
        return None

    qualifying = pair_books_with_ideas(others, group_ideas_by_book(ideas))
    return qualifying or None


def digest_cutoff(window_days: int, now: datetime | None = None) -> datetime:
    """Start of the digest window, measured from the wall clock at call time."""
    return (now or datetime.now(timezone.utc)) - timedelta(days=window_days)


async def collect_digest_books(window_days: int, now: datetime | None = None) -> list[BookIdeas]:
    """
    Idea cards created inside the trailing window, grouped by book.

    Books are ordered by their newest recent card; each keeps at most
    DIGEST_IDEAS_PER_BOOK cards.

    Raises:
        EmptyLibraryError: If the library has no books at all
        NothingToDigestError: If no card was created inside the window
    """
    cutoff = digest_cutoff(window_days, now).isoformat()

    books, recent = await asyncio.gather(
        asyncio.to_thread(books_db.list_books, None, BOOK_SUMMARY_COLUMNS),
        asyncio.to_thread(
            ideas_db.list_library_ideas,
            None,
            "id, book_id, title, body, tags, created_at",
            None,
            cutoff,
        ),
    )

    if not books:
        raise EmptyLibraryError()
    if not recent:
        raise NothingToDigestError(window_days)

    ideas_by_book = group_ideas_by_book(recent)
    books_by_id = {b["id"]: b for b in books}

    digest_books = [
        BookIdeas(
            book=books_by_id.get(book_id, {"id": book_id, **UNKNOWN_BOOK}),
            ideas=ideas[:DIGEST_IDEAS_PER_BOOK],
        )
        for book_id, ideas in ideas_by_book.items()
    ]

    logger.info(
        f"Digest window since {cutoff}: {len(recent)} ideas across {len(digest_books)} books",
        extra={"operation": "digest"},
    )
    return digest_books
