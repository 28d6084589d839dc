"""API endpoints for idea card distillation."""

import asyncio

from fastapi import APIRouter, HTTPException, Query

from app.core.errors import WriteFlowError
from app.core.logging import get_logger
from app.core.schemas_books import DistillRequest
from app.db import ideas as ideas_db
from app.services import reading_partner

logger = get_logger(__name__)

router = APIRouter(prefix="/distill")


@router.post("")
async def distill_notes(request: DistillRequest) -> dict:
    """
    Distil raw notes into idea cards.

    Returns:
        ``{"ideas": [...], "saved": bool}``; cards come back even when they
        could not be saved, and ``saved`` is false only when a write failed

    Raises:
        HTTPException 404: If the book does not exist
        HTTPException 500: If generation fails
    """
    try:
        result = await reading_partner.distill(request)
        return {"ideas": result.output, "saved": result.persistence.ok}
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"Distil error: {e}", extra={"book_id": request.book_id})
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("")
async def list_idea_cards(book_id: str = Query(..., description="Book id")) -> list[dict]:
    """List a book's saved idea cards by sequence number."""
    try:
        return await asyncio.to_thread(ideas_db.list_ideas, book_id, "*", None, True)
    except Exception as e:
        logger.exception(f"Failed to list ideas for book {book_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.delete("/{idea_id}")
async def delete_idea_card(idea_id: str) -> dict:
    """Delete one idea card. Remaining cards keep their numbers."""
    try:
        await asyncio.to_thread(ideas_db.delete_idea, idea_id)
        return {"success": True}
    except Exception as e:
        logger.exception(f"Failed to delete idea {idea_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e
