"""Database operations for the brand voice profile.

The profile is a single row keyed by DEFAULT_PROFILE_ID with no book
association.
"""

from typing import Any, Optional

from app.core.schemas_books import BrandProfile
from app.db.supabase_client import get_supabase as get_client

DEFAULT_PROFILE_ID = "default"


def get_profile_row() -> Optional[dict[str, Any]]:
    """Get the stored profile row, or None if none was saved."""
    client = get_client()
    result = (
        client.table("user_profile")
        .select("id, positioning, audience, tone")
        .eq("id", DEFAULT_PROFILE_ID)
        .execute()
    )
    return result.data[0] if result.data else None


def get_brand_profile() -> BrandProfile:
    """Get the stored profile; an absent row is an empty profile."""
    row = get_profile_row()
    return BrandProfile(**row) if row else BrandProfile()


def upsert_brand_profile(profile: BrandProfile) -> dict[str, Any]:
    """Create or replace the singleton profile row."""
    client = get_client()
    result = (
        client.table("user_profile")
        .upsert({"id": DEFAULT_PROFILE_ID, **profile.model_dump()}, on_conflict="id")
        .execute()
    )
    return result.data[0]
