"""Cross-book operations: library browse, macro narrative and weekly digest."""

import asyncio
from datetime import datetime
from typing import Any

from app.chains.macro_narrative import generate_macro_narrative
from app.chains.newsletter_digest import generate_digest, render_plain_text
from app.core.book_context import resolve_brand_profile
from app.core.config import get_settings
from app.core.library_aggregator import (
    BookIdeas,
    browse_library,
    collect_digest_books,
    collect_narrative_books,
)
from app.core.logging import get_logger
from app.core.schemas_books import BrandProfile
from app.core.schemas_synthesis import MacroNarrative
from app.db import articles as articles_db

logger = get_logger(__name__)


async def library_ideas() -> list[BookIdeas]:
    return await browse_library()


async def narrative(book_ids: list[str] | None = None) -> MacroNarrative:
    """
    Raises:
        InsufficientBooksError: If fewer than two books have idea cards
    """
    books = await collect_narrative_books(book_ids)
    return await asyncio.to_thread(generate_macro_narrative, books)


async def _latest_article() -> dict[str, Any] | None:
    try:
        return await asyncio.to_thread(articles_db.get_latest_article)
    except Exception as e:
        logger.warning(f"Latest article read failed, digest without article pick: {e}")
        return None


async def digest(
    brand_profile: BrandProfile | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Build the weekly digest from the library's recent idea cards.

    Args:
        brand_profile: Voice supplied with the request, if any
        now: Clock override for the window start

    Returns:
        Digest fields plus a pre-rendered ``plain_text``

    Raises:
        EmptyLibraryError: If the library has no books
        NothingToDigestError: If no idea card falls inside the window
    """
    settings = get_settings()

    books = await collect_digest_books(settings.DIGEST_WINDOW_DAYS, now)
    top_article, voice = await asyncio.gather(
        _latest_article(),
        resolve_brand_profile(brand_profile),
    )

    result = await asyncio.to_thread(generate_digest, books, top_article, voice)

    return {**result.model_dump(), "plain_text": render_plain_text(result, top_article)}
