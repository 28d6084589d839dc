"""Book database operations."""

from typing import Any

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)

BOOK_SUMMARY_COLUMNS = "id, title, author"


def list_books(
    book_ids: list[str] | None = None,
    columns: str = "*",
    newest_first: bool = True,
) -> list[dict[str, Any]]:
    """
    List books, optionally restricted to an explicit id subset.

    Args:
        book_ids: Optional ids to restrict to (an empty list means no filter)
        columns: Columns to select
        newest_first: Order by created_at descending when True

    Returns:
        List of book dicts
    """
    supabase = get_supabase()

    query = supabase.table("books").select(columns)
    if book_ids:
        query = query.in_("id", book_ids)
    response = query.order("created_at", desc=newest_first).execute()

    return response.data or []


def get_book(book_id: str, columns: str = "*") -> dict[str, Any] | None:
    """
    Get a single book by id.

    Args:
        book_id: Book id
        columns: Columns to select

    Returns:
        Book dict or None if not found
    """
    supabase = get_supabase()

    response = supabase.table("books").select(columns).eq("id", book_id).limit(1).execute()

    return response.data[0] if response.data else None


def create_book(data: dict[str, Any]) -> dict[str, Any]:
    """
    Insert a new book with zero reading progress.

    Args:
        data: Book fields (title required)

    Returns:
        Inserted book dict

    Raises:
        ValueError: If the store returned no row
    """
    supabase = get_supabase()

    response = supabase.table("books").insert({**data, "progress": 0}).execute()

    if not response.data:
        raise ValueError("No data returned from create_book")

    book = response.data[0]
    logger.info(f"Created book {book.get('id')}: {book.get('title')}", extra={"book_id": book.get("id")})
    return book


def update_book(book_id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
    """
    Apply a partial update to a book.

    Returns:
        Updated book dict or None if no row matched
    """
    supabase = get_supabase()

    response = supabase.table("books").update(updates).eq("id", book_id).execute()

    return response.data[0] if response.data else None


def delete_book(book_id: str) -> None:
    supabase = get_supabase()
    supabase.table("books").delete().eq("id", book_id).execute()
    logger.info(f"Deleted book {book_id}", extra={"book_id": book_id})
