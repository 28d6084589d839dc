"""API endpoints for the book library."""

import asyncio

from fastapi import APIRouter, HTTPException, status

from app.core.errors import BookNotFoundError, InvalidRequestError, WriteFlowError
from app.core.logging import get_logger
from app.core.schemas_books import BookCreate, BookUpdate
from app.db import books as books_db

logger = get_logger(__name__)

router = APIRouter(prefix="/books")


@router.get("")
async def list_books() -> list[dict]:
    """List all books, newest first."""
    try:
        return await asyncio.to_thread(books_db.list_books)
    except Exception as e:
        logger.exception("Failed to list books")
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_book(request: BookCreate) -> dict:
    """Create a book with zero reading progress."""
    try:
        return await asyncio.to_thread(books_db.create_book, request.model_dump())
    except Exception as e:
        logger.exception("Failed to create book")
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.patch("/{book_id}")
async def update_book(book_id: str, request: BookUpdate) -> dict:
    """
    Update reading progress or metadata.

    Only fields present in the body are written.

    Raises:
        HTTPException 400: If the body sets no field
        HTTPException 404: If the book does not exist
    """
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise InvalidRequestError("No fields to update")

    try:
        book = await asyncio.to_thread(books_db.update_book, book_id, updates)
        if not book:
            raise BookNotFoundError(book_id)
        return book
    except WriteFlowError:
        raise
    except Exception as e:
        logger.exception(f"Failed to update book {book_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.delete("/{book_id}")
async def delete_book(book_id: str) -> dict:
    try:
        await asyncio.to_thread(books_db.delete_book, book_id)
        return {"success": True}
    except Exception as e:
        logger.exception(f"Failed to delete book {book_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e
