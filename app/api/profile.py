"""API endpoints for the brand voice profile."""

import asyncio

from fastapi import APIRouter, HTTPException

from app.core.logging import get_logger
from app.core.schemas_books import BrandProfile
from app.db import profiles as profiles_db

logger = get_logger(__name__)

router = APIRouter(prefix="/profile")


@router.get("")
async def get_profile() -> dict:
    """Get the stored profile; {} when none is saved or it cannot be read."""
    try:
        row = await asyncio.to_thread(profiles_db.get_profile_row)
    except Exception as e:
        logger.warning(f"Profile read failed: {e}")
        return {}
    return row or {}


@router.put("")
async def save_profile(request: BrandProfile) -> dict:
    try:
        return await asyncio.to_thread(profiles_db.upsert_brand_profile, request)
    except Exception as e:
        logger.exception("Failed to save brand profile")
        raise HTTPException(status_code=500, detail=str(e)) from e
