"""Serper service for web and scholarly search."""

import logging
from typing import Any
from urllib.parse import urlparse

import httpx

from app.core.config import get_settings
from app.core.errors import SearchConfigError
from app.core.schemas_synthesis import Article, ScholarResult

logger = logging.getLogger(__name__)

SERPER_BASE_URL = "https://google.serper.dev"

# Reference and retail sites; the search wants real commentary
BLOCKED_DOMAINS = ("amazon.com", "goodreads.com", "wikipedia.org", "youtube.com")

FAVICON_URL = "https://www.google.com/s2/favicons?domain={link}&sz=32"


def build_article_query(book_title: str, author: str, concept_query: str | None = None) -> str:
    if concept_query:
        return f"{concept_query} {book_title} insights analysis"
    return f"{book_title} {author} key ideas summary analysis blog"


def is_blocked(link: str) -> bool:
    return any(domain in link for domain in BLOCKED_DOMAINS)


def domain_of(link: str) -> str:
    """Hostname without a leading ``www.``."""
    host = urlparse(link).hostname or ""
    return host[4:] if host.startswith("www.") else host


def to_article(result: dict[str, Any]) -> Article:
    link = result["link"]
    return Article(
        title=result.get("title"),
        url=link,
        snippet=result.get("snippet"),
        domain=domain_of(link),
        favicon=FAVICON_URL.format(link=link),
    )


async def _post(endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
    settings = get_settings()

    if not settings.SERPER_API_KEY:
        raise SearchConfigError()

    async with httpx.AsyncClient(timeout=settings.SERPER_TIMEOUT) as client:
        response = await client.post(
            f"{SERPER_BASE_URL}/{endpoint}",
            headers={
                "X-API-KEY": settings.SERPER_API_KEY,
                "Content-Type": "application/json",
            },
            json=payload,
        )
        response.raise_for_status()
        return response.json()


async def find_blog_articles(
    book_title: str,
    author: str,
    concept_query: str | None = None,
    count: int = 6,
) -> list[Article]:
    """
    Search the web for articles discussing a book or one of its concepts.

    Args:
        book_title: Book title
        author: Book author
        concept_query: Optional concept to focus the search on
        count: Maximum number of articles to return

    Returns:
        Up to ``count`` articles in search rank order, blocked domains removed

    Raises:
        SearchConfigError: If SERPER_API_KEY not configured
        httpx.HTTPStatusError: If the API request fails
    """
    query = build_article_query(book_title, author, concept_query)
    logger.info(f"Searching articles: {query}")

    # Over-fetch a little so filtering still leaves a full page
    data = await _post("search", {"q": query, "num": count + 2, "gl": "us", "hl": "en"})

    organic = [r for r in data.get("organic") or [] if r.get("link")]
    kept = [r for r in organic if not is_blocked(r["link"])]

    logger.info(f"Search returned {len(organic)} results, {len(kept)} after filtering")
    return [to_article(r) for r in kept[:count]]


async def find_scholarly_articles(
    concept: str,
    book_title: str | None = None,
    count: int = 6,
) -> list[ScholarResult]:
    """
    Search scholarly literature for a concept.

    Args:
        concept: Concept to research
        book_title: Optional book title to anchor the query
        count: Maximum number of results

    Returns:
        Scholar results in rank order

    Raises:
        SearchConfigError: If SERPER_API_KEY not configured
        httpx.HTTPStatusError: If the API request fails
    """
    query = f"{concept} {book_title}" if book_title else concept
    logger.info(f"Searching scholar: {query}")

    data = await _post("scholar", {"q": query, "num": count})

    return [
        ScholarResult(
            title=r.get("title"),
            url=r.get("link"),
            snippet=r.get("snippet"),
            publication_info=r.get("publicationInfo"),
            year=r.get("year"),
            cited_by=r.get("citedBy") or 0,
            pdf_url=r.get("pdfUrl"),
        )
        for r in (data.get("organic") or [])[:count]
    ]
