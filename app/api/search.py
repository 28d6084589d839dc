"""API endpoints for article and scholarly search."""

import asyncio

from fastapi import APIRouter, HTTPException, Query

from app.core.errors import WriteFlowError
from app.core.logging import get_logger
from app.core.schemas_books import ScholarSearchRequest, SearchRequest
from app.db import articles as articles_db
from app.services import article_search

logger = get_logger(__name__)

router = APIRouter(prefix="/search")


@router.post("")
async def search_articles(request: SearchRequest) -> list[dict]:
    """
    Find articles about a book, annotated with their stance.

    Raises:
        HTTPException 404: If the book does not exist
        HTTPException 500: If the search fails
    """
    try:
        result = await article_search.search(request)
        return [a.model_dump(mode="json") for a in result.output]
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"Serper search error: {e}", extra={"book_id": request.book_id})
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/saved")
async def get_saved_articles(book_id: str = Query(..., description="Book id")) -> list[dict]:
    """Previously saved articles for a book, newest first."""
    try:
        return await asyncio.to_thread(articles_db.list_saved_articles, book_id)
    except Exception as e:
        logger.exception(f"Failed to list saved articles for book {book_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("/scholar")
async def search_scholar(request: ScholarSearchRequest) -> list[dict]:
    """Search scholarly literature for a concept."""
    try:
        results = await article_search.scholar(request)
        return [r.model_dump() for r in results]
    except WriteFlowError:
        raise
    except Exception as e:
        logger.error(f"Scholar search error: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e
