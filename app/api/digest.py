"""API endpoint for the weekly newsletter digest."""

from typing import Optional

from fastapi import APIRouter, HTTPException

from app.core.errors import WriteFlowError
from app.core.logging import get_logger
from app.core.schemas_books import DigestRequest
from app.services import library_synthesis

logger = get_logger(__name__)

router = APIRouter(prefix="/digest")


@router.post("")
async def create_digest(request: Optional[DigestRequest] = None) -> dict:
    """
    Turn the last week of idea cards into a newsletter issue.

    Returns:
        subject_line, opening_hook, key_ideas, article_pick, closing_thought
        and plain_text

    Raises:
        HTTPException 400: If the library is empty or nothing was distilled
            in the window
        HTTPException 500: If generation fails
    """
    try:
        return await library_synthesis.digest(request.brand_profile if request else None)
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"Digest generation error: {e}", extra={"operation": "digest"})
        raise HTTPException(status_code=500, detail=str(e)) from e
