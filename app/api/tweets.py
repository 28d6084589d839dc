"""API endpoints for tweet and thread generation."""

from fastapi import APIRouter, HTTPException

from app.core.errors import WriteFlowError
from app.core.logging import get_logger
from app.core.schemas_books import ChapterContentRequest
from app.services import content_studio

logger = get_logger(__name__)

router = APIRouter(prefix="/tweets")


@router.post("")
async def create_tweets(request: ChapterContentRequest) -> dict:
    """Generate 3-5 standalone tweets from a chapter's notes."""
    try:
        return {"tweets": await content_studio.tweets(request)}
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"Tweet generation error: {e}", extra={"book_id": request.book_id})
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("/thread")
async def create_thread(request: ChapterContentRequest) -> dict:
    """Turn a chapter's notes into one numbered thread."""
    try:
        thread = await content_studio.thread(request)
        return {"thread": [t.model_dump() for t in thread]}
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"Thread generation error: {e}", extra={"book_id": request.book_id})
        raise HTTPException(status_code=500, detail=str(e)) from e
