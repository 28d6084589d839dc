"""Content studio operations: tweets, threads and LinkedIn posts."""

import asyncio

from app.chains.social_posts import (
    generate_linkedin_posts,
    generate_thread,
    generate_tweets,
    repurpose_thread,
)
from app.core.book_context import BookContext, load_book_context, resolve_brand_profile
from app.core.logging import get_logger
from app.core.schemas_books import BrandProfile, ChapterContentRequest, RepurposeRequest
from app.core.schemas_synthesis import LinkedInPosts, RepurposedPost, ThreadTweet
from app.db import books as books_db

logger = get_logger(__name__)

TWEETS_IDEA_LIMIT = 5
THREAD_IDEA_LIMIT = 6
LINKEDIN_IDEA_LIMIT = 5


async def _chapter_inputs(
    request: ChapterContentRequest, idea_limit: int
) -> tuple[BookContext, BrandProfile]:
    context = await load_book_context(request.book_id, include_ideas=True, idea_limit=idea_limit)
    voice = await resolve_brand_profile(request.brand_profile)
    return context, voice


async def tweets(request: ChapterContentRequest) -> list[str]:
    """
    Raises:
        BookNotFoundError: If the book does not exist
    """
    context, voice = await _chapter_inputs(request, TWEETS_IDEA_LIMIT)
    return await asyncio.to_thread(
        generate_tweets,
        book_title=context.title,
        author=context.author,
        chapter_name=request.chapter_name,
        notes_content=request.content,
        ideas=context.ideas,
        voice=voice,
    )


async def thread(request: ChapterContentRequest) -> list[ThreadTweet]:
    """
    Raises:
        BookNotFoundError: If the book does not exist
    """
    context, voice = await _chapter_inputs(request, THREAD_IDEA_LIMIT)
    return await asyncio.to_thread(
        generate_thread,
        book_title=context.title,
        author=context.author,
        chapter_name=request.chapter_name,
        notes_content=request.content,
        ideas=context.ideas,
        voice=voice,
    )


async def linkedin_posts(request: ChapterContentRequest) -> LinkedInPosts:
    """
    Raises:
        BookNotFoundError: If the book does not exist
    """
    context, voice = await _chapter_inputs(request, LINKEDIN_IDEA_LIMIT)
    return await asyncio.to_thread(
        generate_linkedin_posts,
        book_title=context.title,
        author=context.author,
        chapter_name=request.chapter_name,
        notes_content=request.content,
        ideas=context.ideas,
        voice=voice,
    )


async def repurpose(request: RepurposeRequest) -> RepurposedPost:
    """
    Rewrite a thread as one LinkedIn post.

    The book is optional attribution: an unknown or unreadable book id
    repurposes without it.
    """
    book_title, author = "", ""
    if request.book_id:
        try:
            book = await asyncio.to_thread(books_db.get_book, request.book_id, books_db.BOOK_SUMMARY_COLUMNS)
        except Exception as e:
            logger.warning(f"Book lookup failed, repurposing without attribution: {e}", extra={"book_id": request.book_id})
            book = None
        if book:
            book_title, author = book.get("title") or "", book.get("author") or ""

    voice = await resolve_brand_profile(request.brand_profile)

    return await asyncio.to_thread(
        repurpose_thread,
        thread=request.thread,
        book_title=book_title,
        author=author,
        voice=voice,
    )
