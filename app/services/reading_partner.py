"""Reading partner operations: distillation, chat and writing suggestions."""

import asyncio
import logging
from typing import Any

from app.chains.distill_ideas import distill_ideas
from app.chains.reading_partner import chat_with_partner, suggest_writing
from app.core.book_context import last_turns, load_book_context, truncate
from app.core.config import get_settings
from app.core.library_aggregator import collect_library_context
from app.core.logging import get_logger, log_with_context
from app.core.schemas_books import ChatRequest, DistillRequest, SuggestRequest
from app.core.schemas_synthesis import GenerationResult
from app.services.persistence_bridge import number_idea_cards, save_exchange, save_idea_cards

logger = get_logger(__name__)

DEFAULT_CHAPTER = "Unknown Chapter"
CHAT_IDEA_LIMIT = 10
SUGGEST_IDEA_LIMIT = 6


async def distill(request: DistillRequest) -> GenerationResult[list[dict[str, Any]]]:
    """
    Distil notes into idea cards and save them.

    The generated cards are returned even when saving fails; the outcome
    says whether they were stored.

    Raises:
        BookNotFoundError: If the book does not exist
    """
    context = await load_book_context(request.book_id, include_ideas=True)

    drafts = await asyncio.to_thread(
        distill_ideas,
        book_title=context.title,
        author=context.author,
        chapter_name=request.chapter_name or DEFAULT_CHAPTER,
        raw_notes=request.raw_notes,
        existing_titles=[i.get("title") or "" for i in context.ideas],
    )

    rows = number_idea_cards(request.book_id, request.chapter_name, drafts, len(context.ideas))
    persistence = await asyncio.to_thread(save_idea_cards, rows)

    log_with_context(
        logger,
        logging.INFO,
        "Distilled idea cards",
        book_id=request.book_id,
        operation="distill",
        cards=len(drafts),
        persistence=persistence.status.value,
    )
    return GenerationResult(output=persistence.rows if persistence.saved else rows, persistence=persistence)


async def chat(request: ChatRequest) -> GenerationResult[str]:
    """
    Reply to a chat message about a book.

    History comes from the request when supplied, otherwise from the stored
    conversation; either way only the last turns are visible. The exchange
    is saved after the reply, and a failed save does not fail the chat.

    Raises:
        BookNotFoundError: If the book does not exist
    """
    settings = get_settings()
    turns = settings.CHAT_HISTORY_TURNS
    use_stored_history = request.conversation_history is None

    context = await load_book_context(
        request.book_id,
        include_notes=True,
        include_ideas=True,
        idea_limit=CHAT_IDEA_LIMIT,
        history_turns=turns if use_stored_history else 0,
    )

    history = (
        context.history
        if use_stored_history
        else [t.model_dump() for t in request.conversation_history]
    )

    library = await collect_library_context(request.book_id) if request.library_mode else None

    reply = await asyncio.to_thread(
        chat_with_partner,
        user_message=request.message,
        book_title=context.title,
        author=context.author,
        notes=truncate(context.notes_text, settings.NOTES_CONTEXT_CHARS),
        ideas=context.ideas,
        history=last_turns(history, turns),
        library=library,
    )

    persistence = await asyncio.to_thread(save_exchange, request.book_id, request.message, reply)
    return GenerationResult(output=reply, persistence=persistence)


async def suggest(request: SuggestRequest) -> str:
    """
    Suggest a continuation for a draft.

    Raises:
        BookNotFoundError: If the book does not exist
    """
    context = await load_book_context(
        request.book_id, include_ideas=True, idea_limit=SUGGEST_IDEA_LIMIT
    )

    return await asyncio.to_thread(
        suggest_writing,
        book_title=context.title,
        author=context.author,
        current_text=request.current_text,
        ideas=context.ideas,
    )
