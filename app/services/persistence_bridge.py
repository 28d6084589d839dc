"""Durable side effects that follow a successful generation.

None of these writes can discard a generation: each returns a
PersistenceOutcome instead of raising, and the caller returns the generated
output either way.
"""

from typing import Any

from app.core.logging import get_logger
from app.core.schemas_synthesis import Article, IdeaCardDraft, PersistenceOutcome, PersistenceStatus
from app.db import articles as articles_db
from app.db import conversations as conversations_db
from app.db import ideas as ideas_db

logger = get_logger(__name__)


def number_idea_cards(
    book_id: str,
    chapter_name: str | None,
    drafts: list[IdeaCardDraft],
    existing_count: int,
) -> list[dict[str, Any]]:
    """
    Build idea card rows numbered after the book's existing cards.

    Numbers are ``existing_count + position``, starting at 1 for an empty
    book. Two concurrent distillations for one book can assign the same
    numbers.
    """
    return [
        {
            "book_id": book_id,
            "chapter_name": chapter_name,
            "title": draft.title,
            "body": draft.body,
            "tags": draft.tags,
            "number": existing_count + position,
        }
        for position, draft in enumerate(drafts, start=1)
    ]


def save_idea_cards(rows: list[dict[str, Any]]) -> PersistenceOutcome:
    if not rows:
        return PersistenceOutcome.skipped()

    try:
        saved = ideas_db.insert_ideas(rows)
    except Exception as e:
        logger.error(f"Idea cards not saved, returning them unsaved: {e}", extra={"book_id": rows[0]["book_id"]})
        return PersistenceOutcome.failed(e)

    return PersistenceOutcome(status=PersistenceStatus.SAVED, rows=saved)


def save_exchange(book_id: str, user_message: str, reply: str) -> PersistenceOutcome:
    """Append the user message and reply; the reply is already delivered if this fails."""
    try:
        rows = conversations_db.insert_exchange(book_id, user_message, reply)
    except Exception as e:
        logger.error(f"Conversation turns not saved: {e}", extra={"book_id": book_id})
        return PersistenceOutcome.failed(e)

    return PersistenceOutcome(status=PersistenceStatus.SAVED, rows=rows)


def save_articles(book_id: str, articles: list[Article]) -> PersistenceOutcome:
    """Save search results, leaving any already-saved (book, url) row untouched."""
    if not articles:
        return PersistenceOutcome.skipped()

    try:
        rows = articles_db.upsert_articles(book_id, [a.model_dump(mode="json") for a in articles])
    except Exception as e:
        logger.warning(f"Search results not saved: {e}", extra={"book_id": book_id})
        return PersistenceOutcome.failed(e)

    return PersistenceOutcome(status=PersistenceStatus.SAVED, rows=rows)
