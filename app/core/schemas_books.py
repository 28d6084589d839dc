"""Request schemas for books, notes, reading partner and content endpoints."""

from typing import Annotated, Any, Literal, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator

from app.core.schemas_synthesis import ThreadTweet


def _require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be blank")
    return value


NonBlankStr = Annotated[str, AfterValidator(_require_text)]


class BrandProfile(BaseModel):
    """Voice attributes applied to tone-sensitive generation."""

    positioning: str = ""
    audience: str = ""
    tone: str = ""

    @field_validator("positioning", "audience", "tone", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return value or ""

    @property
    def is_empty(self) -> bool:
        return not (self.positioning.strip() or self.audience.strip() or self.tone.strip())


# ============================================================================
# Books & notes
# ============================================================================


class BookCreate(BaseModel):
    title: NonBlankStr
    author: Optional[str] = None
    category: Optional[str] = None
    why_reading: Optional[str] = None
    spine_color: Optional[str] = None


class BookUpdate(BaseModel):
    """Partial update; only fields present in the body are written."""

    title: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    why_reading: Optional[str] = None
    spine_color: Optional[str] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)


class NoteUpsert(BaseModel):
    book_id: str = Field(..., min_length=1)
    chapter_name: str = Field(..., min_length=1)
    chapter_order: Optional[int] = None
    content: Optional[str] = None


class NoteUpdate(BaseModel):
    content: str = ""


# ============================================================================
# Reading partner
# ============================================================================


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class DistillRequest(BaseModel):
    book_id: str = Field(..., min_length=1)
    raw_notes: NonBlankStr
    chapter_name: Optional[str] = None


class ChatRequest(BaseModel):
    book_id: str = Field(..., min_length=1)
    message: NonBlankStr
    conversation_history: Optional[list[ChatTurn]] = None
    library_mode: bool = False


class SuggestRequest(BaseModel):
    book_id: str = Field(..., min_length=1)
    current_text: NonBlankStr


# ============================================================================
# Content studio
# ============================================================================


class ChapterContentRequest(BaseModel):
    """Body shared by tweets, thread and LinkedIn post generation."""

    book_id: str = Field(..., min_length=1)
    content: NonBlankStr
    chapter_name: Optional[str] = None
    brand_profile: Optional[BrandProfile] = None


class RepurposeRequest(BaseModel):
    thread: list[ThreadTweet] = Field(..., min_length=1)
    book_id: Optional[str] = None
    brand_profile: Optional[BrandProfile] = None


# ============================================================================
# Library synthesis & search
# ============================================================================


class NarrativeRequest(BaseModel):
    book_ids: Optional[list[str]] = None


class DigestRequest(BaseModel):
    brand_profile: Optional[BrandProfile] = None


class SearchRequest(BaseModel):
    book_id: str = Field(..., min_length=1)
    concept_query: Optional[str] = None


class ScholarSearchRequest(BaseModel):
    concept: NonBlankStr
    book_title: Optional[str] = None
