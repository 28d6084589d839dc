"""Idea card database operations."""

from typing import Any

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)

IDEA_PROMPT_COLUMNS = "title, body"
IDEA_LIBRARY_COLUMNS = "book_id, title, body, tags"


def list_ideas(
    book_id: str,
    columns: str = "*",
    limit: int | None = None,
    by_number: bool = False,
) -> list[dict[str, Any]]:
    """
    List idea cards for one book.

    Args:
        book_id: Book id
        columns: Columns to select
        limit: Optional cap on the number of cards
        by_number: Order by sequence number; otherwise natural store order

    Returns:
        List of idea card dicts
    """
    supabase = get_supabase()

    query = supabase.table("ideas").select(columns).eq("book_id", book_id)
    if by_number:
        query = query.order("number")
    if limit is not None:
        query = query.limit(limit)

    return query.execute().data or []


def list_library_ideas(
    book_ids: list[str] | None = None,
    columns: str = IDEA_LIBRARY_COLUMNS,
    limit: int | None = None,
    created_since: str | None = None,
) -> list[dict[str, Any]]:
    """
    List idea cards across the library.

    Args:
        book_ids: Optional book id subset (an empty list means the whole library)
        columns: Columns to select
        limit: Optional cap on the number of cards
        created_since: ISO timestamp; when set, only cards created at or after
            it are returned, newest first

    Returns:
        List of idea card dicts
    """
    supabase = get_supabase()

    query = supabase.table("ideas").select(columns)
    if book_ids:
        query = query.in_("book_id", book_ids)
    if created_since is not None:
        query = query.gte("created_at", created_since).order("created_at", desc=True)
    if limit is not None:
        query = query.limit(limit)

    return query.execute().data or []


def insert_ideas(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Insert a batch of idea cards.

    Args:
        rows: Idea card rows, each carrying book_id and number

    Returns:
        Inserted rows as stored

    Raises:
        ValueError: If the store returned no rows
    """
    if not rows:
        return []

    supabase = get_supabase()

    try:
        response = supabase.table("ideas").insert(rows).execute()

        if not response.data:
            raise ValueError("No data returned from insert_ideas")

        logger.info(f"Inserted {len(response.data)} idea cards", extra={"book_id": rows[0]["book_id"]})
        return response.data

    except Exception as e:
        logger.error(f"Failed to insert idea cards: {e}", extra={"book_id": rows[0]["book_id"]})
        raise


def delete_idea(idea_id: str) -> None:
    supabase = get_supabase()
    supabase.table("ideas").delete().eq("id", idea_id).execute()
