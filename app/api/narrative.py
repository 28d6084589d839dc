"""API endpoints for the cross-book macro narrative."""

from typing import Optional

from fastapi import APIRouter, HTTPException

from app.core.errors import WriteFlowError
from app.core.logging import get_logger
from app.core.schemas_books import NarrativeRequest
from app.services import library_synthesis

logger = get_logger(__name__)

router = APIRouter(prefix="/narrative")


@router.get("/ideas")
async def get_library_ideas() -> dict:
    """Every book with its idea cards, oldest book first."""
    try:
        books = await library_synthesis.library_ideas()
        return {"books": [b.to_dict() for b in books]}
    except Exception as e:
        logger.exception("Failed to load library ideas")
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("")
async def create_narrative(request: Optional[NarrativeRequest] = None) -> dict:
    """
    Cluster ideas across books into themes and a connecting narrative.

    Raises:
        HTTPException 400: If fewer than two books have idea cards
        HTTPException 500: If generation fails
    """
    book_ids = request.book_ids if request else None
    try:
        result = await library_synthesis.narrative(book_ids)
        return result.model_dump(by_alias=True)
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"Narrative generation error: {e}", extra={"operation": "narrative"})
        raise HTTPException(status_code=500, detail=str(e)) from e
