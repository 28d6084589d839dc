"""API endpoints for the reading partner chat."""

import asyncio

from fastapi import APIRouter, HTTPException, Query

from app.core.errors import WriteFlowError
from app.core.logging import get_logger
from app.core.schemas_books import ChatRequest, SuggestRequest
from app.db import conversations as conversations_db
from app.services import reading_partner

logger = get_logger(__name__)

router = APIRouter(prefix="/chat")


@router.post("")
async def send_message(request: ChatRequest) -> dict:
    """
    Send a message to the reading partner.

    Raises:
        HTTPException 404: If the book does not exist
        HTTPException 500: If generation fails
    """
    try:
        result = await reading_partner.chat(request)
        return {"reply": result.output}
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"Chat error: {e}", extra={"book_id": request.book_id})
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/history")
async def get_history(
    book_id: str = Query(..., description="Book id"),
    limit: int = Query(40, description="Maximum number of turns", ge=1),
) -> list[dict]:
    """Get a book's conversation, oldest turn first."""
    try:
        return await asyncio.to_thread(conversations_db.list_turns, book_id, limit)
    except Exception as e:
        logger.exception(f"Failed to load history for book {book_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("/suggest")
async def suggest_continuation(request: SuggestRequest) -> dict:
    """
    Suggest the next sentence or paragraph of a draft.

    Raises:
        HTTPException 404: If the book does not exist
        HTTPException 500: If generation fails
    """
    try:
        return {"suggestion": await reading_partner.suggest(request)}
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"Suggest error: {e}", extra={"book_id": request.book_id})
        raise HTTPException(status_code=500, detail=str(e)) from e
