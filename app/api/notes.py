"""API endpoints for chapter notes."""

import asyncio

from fastapi import APIRouter, HTTPException, Query, status

from app.core.book_context import require_book
from app.core.errors import WriteFlowError
from app.core.logging import get_logger
from app.core.schemas_books import NoteUpdate, NoteUpsert
from app.db import notes as notes_db

logger = get_logger(__name__)

router = APIRouter(prefix="/notes")


@router.get("")
async def list_notes(book_id: str = Query(..., description="Book id")) -> list[dict]:
    """List a book's notes in chapter order."""
    try:
        return await asyncio.to_thread(notes_db.list_notes, book_id)
    except Exception as e:
        logger.exception(f"Failed to list notes for book {book_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("", status_code=status.HTTP_201_CREATED)
async def upsert_note(request: NoteUpsert) -> dict:
    """
    Create the note for a chapter, or overwrite it if one exists.

    Raises:
        HTTPException 404: If the book does not exist
    """
    try:
        await require_book(request.book_id, "id")
        return await asyncio.to_thread(
            notes_db.upsert_note,
            request.book_id,
            request.chapter_name,
            request.content or "",
            request.chapter_order,
        )
    except WriteFlowError:
        raise
    except Exception as e:
        logger.exception(f"Failed to upsert note for book {request.book_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.patch("/{note_id}")
async def update_note(note_id: str, request: NoteUpdate) -> dict:
    try:
        note = await asyncio.to_thread(notes_db.update_note_content, note_id, request.content)
    except Exception as e:
        logger.exception(f"Failed to update note {note_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e

    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


@router.delete("/{note_id}")
async def delete_note(note_id: str) -> dict:
    try:
        await asyncio.to_thread(notes_db.delete_note, note_id)
        return {"success": True}
    except Exception as e:
        logger.exception(f"Failed to delete note {note_id}")
        raise HTTPException(status_code=500, detail=str(e)) from e
