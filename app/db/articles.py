"""Saved article database operations."""

from typing import Any

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)


def upsert_articles(book_id: str, articles: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Save articles for a book, ignoring any (book_id, url) pair already stored.

    An existing row is never overwritten, so a later search cannot refresh
    its snippet or stance.

    Args:
        book_id: Book id
        articles: Article dicts with title, url, domain, snippet, favicon, stance

    Returns:
        Rows actually inserted
    """
    if not articles:
        return []

    supabase = get_supabase()

    rows = [
        {
            "book_id": book_id,
            "title": a.get("title"),
            "url": a["url"],
            "domain": a.get("domain"),
            "snippet": a.get("snippet"),
            "favicon": a.get("favicon"),
            "stance": a.get("stance") or "neutral",
        }
        for a in articles
    ]

    response = (
        supabase.table("articles")
        .upsert(rows, on_conflict="book_id,url", ignore_duplicates=True)
        .execute()
    )

    return response.data or []


def list_saved_articles(book_id: str) -> list[dict[str, Any]]:
    """List saved articles for a book, newest first."""
    supabase = get_supabase()

    response = (
        supabase.table("articles")
        .select("*")
        .eq("book_id", book_id)
        .order("created_at", desc=True)
        .execute()
    )

    return response.data or []


def get_latest_article() -> dict[str, Any] | None:
    """Get the most recently saved article across all books."""
    supabase = get_supabase()

    response = (
        supabase.table("articles")
        .select("title, url, domain")
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )

    return response.data[0] if response.data else None
