"""Tests for per-book context assembly and prompt shaping."""

import pytest

from app.core.book_context import (
    format_idea_lines,
    format_voice_block,
    join_notes,
    last_turns,
    load_book_context,
    require_book,
    resolve_brand_profile,
    truncate,
)
from app.core.errors import BookNotFoundError
from app.core.schemas_books import BrandProfile


@pytest.fixture
def seeded(fake_db):
    fake_db.seed("books", {"id": "B1", "title": "Atomic Habits", "author": "James Clear"})
    fake_db.seed(
        "notes",
        {"book_id": "B1", "chapter_name": "Ch 2", "chapter_order": 2, "content": "second"},
        {"book_id": "B1", "chapter_name": "Ch 1", "chapter_order": 1, "content": "first"},
    )
    fake_db.seed(
        "ideas",
        *[{"book_id": "B1", "title": f"Idea {n}", "body": f"Body {n}", "number": n} for n in range(1, 5)],
    )
    fake_db.seed(
        "conversations",
        {"book_id": "B1", "role": "user", "content": "q1", "created_at": "2026-01-01T00:00:01+00:00"},
        {"book_id": "B1", "role": "assistant", "content": "a1", "created_at": "2026-01-01T00:00:02+00:00"},
        {"book_id": "B1", "role": "user", "content": "q2", "created_at": "2026-01-01T00:00:03+00:00"},
    )
    return fake_db


class TestRequireBook:
    @pytest.mark.asyncio
    async def test_found(self, seeded):
        book = await require_book("B1")

        assert book == {"id": "B1", "title": "Atomic Habits", "author": "James Clear"}

    @pytest.mark.asyncio
    async def test_missing_raises(self, seeded):
        with pytest.raises(BookNotFoundError) as exc_info:
            await require_book("nope")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Book not found"


class TestLoadBookContext:
    @pytest.mark.asyncio
    async def test_loads_requested_records(self, seeded):
        context = await load_book_context(
            "B1", include_notes=True, include_ideas=True, idea_limit=2, history_turns=2
        )

        assert context.title == "Atomic Habits"
        assert context.notes_text == "first\n\nsecond"
        assert len(context.ideas) == 2
        assert context.history == [
            {"role": "assistant", "content": "a1"},
            {"role": "user", "content": "q2"},
        ]

    @pytest.mark.asyncio
    async def test_skips_unrequested_records(self, seeded):
        context = await load_book_context("B1")

        assert context.notes == []
        assert context.ideas == []
        assert context.history == []
        assert ("notes", "select") not in seeded.calls

    @pytest.mark.asyncio
    async def test_optional_read_failure_is_empty(self, seeded):
        seeded.failing_tables.add("ideas")

        context = await load_book_context("B1", include_notes=True, include_ideas=True)

        assert context.ideas == []
        assert context.notes_text == "first\n\nsecond"

    @pytest.mark.asyncio
    async def test_missing_book_raises(self, seeded):
        with pytest.raises(BookNotFoundError):
            await load_book_context("B9", include_notes=True)


class TestResolveBrandProfile:
    @pytest.mark.asyncio
    async def test_request_profile_wins(self, fake_db):
        fake_db.seed("user_profile", {"id": "default", "positioning": "stored", "audience": "", "tone": ""})

        profile = await resolve_brand_profile(BrandProfile(tone="dry"))

        assert profile.tone == "dry"
        assert profile.positioning == ""

    @pytest.mark.asyncio
    async def test_falls_back_to_stored(self, fake_db):
        fake_db.seed("user_profile", {"id": "default", "positioning": "stored", "audience": "founders", "tone": None})

        profile = await resolve_brand_profile(None)

        assert profile.positioning == "stored"
        assert profile.tone == ""

    @pytest.mark.asyncio
    async def test_read_failure_means_no_voice(self, fake_db):
        fake_db.failing_tables.add("user_profile")

        profile = await resolve_brand_profile(None)

        assert profile.is_empty


class TestShaping:
    def test_join_notes(self):
        assert join_notes([{"content": "a"}, {"content": None}, {"content": "b"}]) == "a\n\n\n\nb"

    def test_truncate(self):
        assert truncate("abcdef", 3) == "abc"
        assert truncate(None, 3) == ""

    def test_format_idea_lines(self):
        ideas = [{"title": "T1", "body": "x" * 200}, {"title": "T2", "body": None}]

        text = format_idea_lines(ideas, 100, bullet="•")

        assert text.split("\n") == [f"• T1: {'x' * 100}", "• T2: "]

    def test_last_turns(self):
        history = [{"role": "user", "content": str(i)} for i in range(10)]

        assert [t["content"] for t in last_turns(history, 8)] == [str(i) for i in range(2, 10)]
        assert last_turns(history, 0) == []

    def test_voice_block_empty(self):
        assert format_voice_block(BrandProfile()) == ""
        assert format_voice_block(BrandProfile(tone="   ")) == ""
        assert format_voice_block(None) == ""

    def test_voice_block_only_present_fields(self):
        block = format_voice_block(BrandProfile(positioning="Operator", tone="Plain"))

        assert block == "Write in this author's brand voice:\n- Positioning: Operator\n- Tone: Plain"
