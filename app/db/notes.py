"""Chapter note database operations."""

from typing import Any

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)


def list_notes(book_id: str, columns: str = "*") -> list[dict[str, Any]]:
    """
    List notes for a book in chapter order.

    Args:
        book_id: Book id
        columns: Columns to select

    Returns:
        List of note dicts ordered by chapter_order
    """
    supabase = get_supabase()

    response = (
        supabase.table("notes")
        .select(columns)
        .eq("book_id", book_id)
        .order("chapter_order")
        .execute()
    )

    return response.data or []


def upsert_note(
    book_id: str,
    chapter_name: str,
    content: str,
    chapter_order: int | None = None,
) -> dict[str, Any]:
    """
    Create or overwrite the note for a (book, chapter) pair.

    Args:
        book_id: Book id
        chapter_name: Chapter label; with book_id forms the note's key
        content: Note text
        chapter_order: Display ordering value

    Returns:
        Stored note dict

    Raises:
        ValueError: If the store returned no row
    """
    supabase = get_supabase()

    response = (
        supabase.table("notes")
        .upsert(
            {
                "book_id": book_id,
                "chapter_name": chapter_name,
                "chapter_order": chapter_order,
                "content": content,
            },
            on_conflict="book_id,chapter_name",
        )
        .execute()
    )

    if not response.data:
        raise ValueError("No data returned from upsert_note")

    logger.info(f"Upserted note '{chapter_name}'", extra={"book_id": book_id})
    return response.data[0]


def update_note_content(note_id: str, content: str) -> dict[str, Any] | None:
    supabase = get_supabase()
    response = supabase.table("notes").update({"content": content}).eq("id", note_id).execute()
    return response.data[0] if response.data else None


def delete_note(note_id: str) -> None:
    supabase = get_supabase()
    supabase.table("notes").delete().eq("id", note_id).execute()
