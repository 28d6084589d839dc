"""API endpoints for LinkedIn post generation."""

from fastapi import APIRouter, HTTPException

from app.core.errors import WriteFlowError
from app.core.logging import get_logger
from app.core.schemas_books import ChapterContentRequest, RepurposeRequest
from app.services import content_studio

logger = get_logger(__name__)

router = APIRouter(prefix="/linkedin")


@router.post("/post")
async def create_linkedin_posts(request: ChapterContentRequest) -> dict:
    """Generate insight, listicle and story variants from a chapter's notes."""
    try:
        posts = await content_studio.linkedin_posts(request)
        return posts.model_dump()
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"LinkedIn post generation error: {e}", extra={"book_id": request.book_id})
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("/repurpose")
async def repurpose_thread(request: RepurposeRequest) -> dict:
    """Reformat a thread into one LinkedIn post."""
    try:
        post = await content_studio.repurpose(request)
        return post.model_dump()
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"Thread repurpose error: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e
