"""Conversation turn database operations.

Turns are append-only and read back in creation order.
"""

from typing import Any

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)


def list_turns(book_id: str, limit: int = 40) -> list[dict[str, Any]]:
    """
    List the earliest turns of a book's conversation, oldest first.

    Args:
        book_id: Book id
        limit: Maximum number of turns (default 40)

    Returns:
        List of {role, content, created_at} dicts
    """
    supabase = get_supabase()

    response = (
        supabase.table("conversations")
        .select("role, content, created_at")
        .eq("book_id", book_id)
        .order("created_at")
        .limit(limit)
        .execute()
    )

    return response.data or []


def list_recent_turns(book_id: str, count: int) -> list[dict[str, str]]:
    """
    Get the last ``count`` turns of a conversation as chat messages.

    Returns:
        List of {role, content} dicts, oldest first
    """
    supabase = get_supabase()

    response = (
        supabase.table("conversations")
        .select("role, content, created_at")
        .eq("book_id", book_id)
        .order("created_at", desc=True)
        .limit(count)
        .execute()
    )

    rows = list(reversed(response.data or []))
    return [{"role": row["role"], "content": row["content"]} for row in rows]


def insert_exchange(book_id: str, user_message: str, reply: str) -> list[dict[str, Any]]:
    """
    Append a user message and the assistant reply, in that order.

    Returns:
        Inserted rows
    """
    supabase = get_supabase()

    response = (
        supabase.table("conversations")
        .insert(
            [
                {"book_id": book_id, "role": "user", "content": user_message},
                {"book_id": book_id, "role": "assistant", "content": reply},
            ]
        )
        .execute()
    )

    return response.data or []
