"""Committed output shapes for synthesis operations.

Every model here is lenient: missing keys fall back to empty values and
``null`` strings become ``""``, so a partially-obeyed response still reduces
to the documented shape. Items that cannot be coerced at all are dropped by
the normalizer, one at a time.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

T = TypeVar("T")


class Stance(str, Enum):
    SUPPORTING = "supporting"
    OPPOSING = "opposing"
    NEUTRAL = "neutral"


class LenientModel(BaseModel):
    """Base model that reads ``null`` as the empty value for text fields."""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _null_text_to_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and cls.model_fields[info.field_name].annotation is str:
            return ""
        return value


# ============================================================================
# Reading partner
# ============================================================================


class IdeaCardDraft(LenientModel):
    """An idea card as proposed by the model, before persistence."""

    title: str
    body: str = ""
    tags: list[str] = Field(default_factory=list)
    number: Optional[int] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            return [t.strip() for t in value.split(",") if t.strip()]
        if not isinstance(value, list):
            return []
        return [str(t) for t in value if t]

    @field_validator("number", mode="before")
    @classmethod
    def _ignore_bad_number(cls, value: Any) -> Optional[int]:
        # Persistence assigns the real sequence number
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return None

    @field_validator("title")
    @classmethod
    def _require_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value


# ============================================================================
# Content studio
# ============================================================================


class ThreadTweet(LenientModel):
    number: int
    text: str


class LinkedInPosts(LenientModel):
    insight: str = ""
    listicle: str = ""
    story: str = ""


class RepurposedPost(LenientModel):
    post: str = ""


# ============================================================================
# Library synthesis
# ============================================================================


class NarrativeIdea(LenientModel):
    book_title: str = Field(default="", alias="bookTitle")
    idea_title: str = Field(default="", alias="ideaTitle")
    idea_body: str = Field(default="", alias="ideaBody")


class NarrativeTheme(LenientModel):
    name: str = ""
    ideas: list[NarrativeIdea] = Field(default_factory=list)


class MacroNarrative(LenientModel):
    themes: list[NarrativeTheme] = Field(default_factory=list)
    narrative: str = ""


class DigestKeyIdea(LenientModel):
    book: str = ""
    title: str = ""
    insight: str = ""


class Digest(LenientModel):
    subject_line: str = ""
    opening_hook: str = ""
    key_ideas: list[DigestKeyIdea] = Field(default_factory=list)
    article_pick: str = ""
    closing_thought: str = ""


# ============================================================================
# Search
# ============================================================================


class Article(LenientModel):
    title: str = ""
    url: str
    snippet: str = ""
    domain: str = ""
    favicon: str = ""
    stance: Stance = Stance.NEUTRAL


class ScholarResult(LenientModel):
    title: str = ""
    url: str = ""
    snippet: str = ""
    publication_info: str = ""
    year: Optional[int] = None
    cited_by: int = 0
    pdf_url: Optional[str] = None


# ============================================================================
# Two-phase results
# ============================================================================


class PersistenceStatus(str, Enum):
    SAVED = "saved"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class PersistenceOutcome:
    """Result of the durable side effect that follows a generation."""

    status: PersistenceStatus
    rows: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None

    @property
    def saved(self) -> bool:
        return self.status == PersistenceStatus.SAVED

    @property
    def ok(self) -> bool:
        """True unless a write was attempted and failed; an empty batch is ok."""
        return self.status != PersistenceStatus.FAILED

    @classmethod
    def skipped(cls) -> "PersistenceOutcome":
        return cls(status=PersistenceStatus.SKIPPED)

    @classmethod
    def failed(cls, error: Exception) -> "PersistenceOutcome":
        return cls(status=PersistenceStatus.FAILED, error=str(error))


@dataclass
class GenerationResult(Generic[T]):
    """A reduced generation output paired with its persistence outcome.

    The output is always returned to the caller; ``fallback_used`` marks a
    result where a non-critical sub-step failed and a default was applied.
    """

    output: T
    persistence: PersistenceOutcome = field(default_factory=PersistenceOutcome.skipped)
    fallback_used: bool = False
