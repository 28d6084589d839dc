"""Article search with stance annotation."""

import asyncio
import logging

from app.chains.classify_stances import build_thesis, classify_article_stances
from app.core.book_context import require_book
from app.core.config import get_settings
from app.core.logging import get_logger, log_with_context
from app.core.output_normalizer import neutral_stances
from app.core.schemas_books import ScholarSearchRequest, SearchRequest
from app.core.schemas_synthesis import Article, GenerationResult, ScholarResult
from app.core.serper_service import find_blog_articles, find_scholarly_articles
from app.services.persistence_bridge import save_articles

logger = get_logger(__name__)


async def search(request: SearchRequest) -> GenerationResult[list[Article]]:
    """
    Find articles about a book, classify their stance and save them.

    Search runs only after the book is found; classification only after the
    search returns. A failed classification leaves every stance neutral and
    a failed save is logged; neither fails the search.

    Raises:
        BookNotFoundError: If the book does not exist
        SearchConfigError: If web search is not configured
        httpx.HTTPError: If the search request fails
    """
    settings = get_settings()
    book = await require_book(request.book_id)

    articles = await find_blog_articles(
        book_title=book.get("title") or "",
        author=book.get("author") or "",
        concept_query=request.concept_query,
        count=settings.SEARCH_RESULT_COUNT,
    )

    fallback_used = False
    if articles:
        thesis = build_thesis(book.get("title") or "", book.get("author") or "", request.concept_query)
        try:
            stances = await asyncio.to_thread(classify_article_stances, articles, thesis)
        except Exception as e:
            logger.warning(
                f"Stance classification failed, defaulting to neutral: {e}",
                extra={"book_id": request.book_id},
            )
            stances = neutral_stances(len(articles))
            fallback_used = True

        articles = [a.model_copy(update={"stance": s}) for a, s in zip(articles, stances)]

    persistence = await asyncio.to_thread(save_articles, request.book_id, articles)

    log_with_context(
        logger,
        logging.INFO,
        "Article search complete",
        book_id=request.book_id,
        operation="search",
        articles=len(articles),
        fallback_used=fallback_used,
        persistence=persistence.status.value,
    )

    return GenerationResult(output=articles, persistence=persistence, fallback_used=fallback_used)


async def scholar(request: ScholarSearchRequest) -> list[ScholarResult]:
    """
    Raises:
        SearchConfigError: If web search is not configured
        httpx.HTTPError: If the search request fails
    """
    return await find_scholarly_articles(request.concept, request.book_title)
