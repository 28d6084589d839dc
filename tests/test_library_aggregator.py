"""Tests for grouping idea cards across the library."""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import EmptyLibraryError, InsufficientBooksError, NothingToDigestError
from app.core.library_aggregator import (
    browse_library,
    collect_digest_books,
    collect_library_context,
    collect_narrative_books,
    digest_cutoff,
    group_ideas_by_book,
    pair_books_with_ideas,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _iso(dt: datetime) -> str:
    return dt.isoformat()


@pytest.fixture
def library(fake_db):
    fake_db.seed(
        "books",
        {"id": "B1", "title": "Thinking, Fast and Slow", "author": "Kahneman", "created_at": "2026-01-01T00:00:00+00:00"},
        {"id": "B2", "title": "Deep Work", "author": "Newport", "created_at": "2026-01-02T00:00:00+00:00"},
        {"id": "B3", "title": "Range", "author": "Epstein", "created_at": "2026-01-03T00:00:00+00:00"},
    )
    fake_db.seed(
        "ideas",
        {"book_id": "B1", "title": "System 1", "body": "Fast", "tags": ["cognition"]},
        {"book_id": "B1", "title": "System 2", "body": "Slow", "tags": []},
        {"book_id": "B3", "title": "Wicked domains", "body": "Breadth", "tags": None},
    )
    return fake_db


class TestGrouping:
    def test_group_keeps_order(self):
        ideas = [{"book_id": "a", "title": "1"}, {"book_id": "b", "title": "2"}, {"book_id": "a", "title": "3"}]

        grouped = group_ideas_by_book(ideas)

        assert [i["title"] for i in grouped["a"]] == ["1", "3"]

    def test_pair_drops_empty_books(self):
        books = [{"id": "a"}, {"id": "b"}]

        pairs = pair_books_with_ideas(books, {"a": [{"title": "x"}]})

        assert [p.book["id"] for p in pairs] == ["a"]

    def test_pair_keep_empty(self):
        pairs = pair_books_with_ideas([{"id": "a"}, {"id": "b"}], {}, keep_empty=True)

        assert [p.ideas for p in pairs] == [[], []]


class TestBrowseLibrary:
    @pytest.mark.asyncio
    async def test_oldest_first_with_empty_books(self, library):
        books = await browse_library()

        assert [b.book["id"] for b in books] == ["B1", "B2", "B3"]
        assert books[1].ideas == []
        assert books[0].to_dict()["ideas"][0] == {"title": "System 1", "body": "Fast", "tags": ["cognition"]}
        assert books[2].to_dict()["ideas"][0]["tags"] == []

    @pytest.mark.asyncio
    async def test_empty_library(self, fake_db):
        assert await browse_library() == []


class TestNarrativeBooks:
    @pytest.mark.asyncio
    async def test_only_books_with_ideas(self, library):
        books = await collect_narrative_books()

        assert [b.title for b in books] == ["Thinking, Fast and Slow", "Range"]

    @pytest.mark.asyncio
    async def test_subset_with_one_qualifying_book(self, library):
        with pytest.raises(InsufficientBooksError) as exc_info:
            await collect_narrative_books(["B1", "B2"])

        assert exc_info.value.status_code == 400
        assert "at least 2 books" in exc_info.value.message


class TestLibraryContext:
    @pytest.mark.asyncio
    async def test_excludes_active_book_and_empty_books(self, library):
        context = await collect_library_context("B3")

        assert [b.book["id"] for b in context] == ["B1"]

    @pytest.mark.asyncio
    async def test_none_when_no_other_book_has_ideas(self, library):
        library.tables["ideas"] = [i for i in library.rows("ideas") if i["book_id"] == "B1"]

        assert await collect_library_context("B1") is None

    @pytest.mark.asyncio
    async def test_read_failure_disables_context(self, library):
        library.failing_tables.add("ideas")

        assert await collect_library_context("B1") is None


class TestDigestBooks:
    def test_cutoff(self):
        assert digest_cutoff(7, NOW) == NOW - timedelta(days=7)

    @pytest.mark.asyncio
    async def test_window_excludes_old_cards(self, fake_db):
        fake_db.seed("books", {"id": "B1", "title": "Old and New", "author": "A"})
        eight_days_ago = _iso(NOW - timedelta(days=8))
        fake_db.seed(
            "ideas",
            {"book_id": "B1", "title": "A", "body": "a", "created_at": eight_days_ago},
            {"book_id": "B1", "title": "B", "body": "b", "created_at": eight_days_ago},
            {"book_id": "B1", "title": "C", "body": "c", "created_at": _iso(NOW)},
        )

        books = await collect_digest_books(7, NOW)

        assert len(books) == 1
        assert books[0].book["id"] == "B1"
        assert [i["title"] for i in books[0].ideas] == ["C"]

    @pytest.mark.asyncio
    async def test_ordered_by_newest_card_and_capped(self, fake_db):
        fake_db.seed("books", {"id": "B1", "title": "One", "author": ""}, {"id": "B2", "title": "Two", "author": ""})
        fake_db.seed(
            "ideas",
            *[
                {"book_id": "B1", "title": f"I{n}", "body": "", "created_at": _iso(NOW - timedelta(hours=n + 2))}
                for n in range(7)
            ],
            {"book_id": "B2", "title": "Latest", "body": "", "created_at": _iso(NOW - timedelta(hours=1))},
        )

        books = await collect_digest_books(7, NOW)

        assert [b.book["id"] for b in books] == ["B2", "B1"]
        assert [i["title"] for i in books[1].ideas] == ["I0", "I1", "I2", "I3", "I4"]

    @pytest.mark.asyncio
    async def test_unknown_book(self, fake_db):
        fake_db.seed("books", {"id": "B1", "title": "Known", "author": ""})
        fake_db.seed("ideas", {"book_id": "gone", "title": "Orphan", "body": "", "created_at": _iso(NOW)})

        books = await collect_digest_books(7, NOW)

        assert books[0].title == "Unknown"

    @pytest.mark.asyncio
    async def test_empty_library(self, fake_db):
        with pytest.raises(EmptyLibraryError):
            await collect_digest_books(7, NOW)

    @pytest.mark.asyncio
    async def test_nothing_in_window(self, fake_db):
        fake_db.seed("books", {"id": "B1", "title": "Quiet", "author": ""})
        fake_db.seed("ideas", {"book_id": "B1", "title": "Old", "body": "", "created_at": _iso(NOW - timedelta(days=30))})

        with pytest.raises(NothingToDigestError) as exc_info:
            await collect_digest_books(7, NOW)

        assert exc_info.value.message == "No ideas found in the past 7 days - distil some notes first."
