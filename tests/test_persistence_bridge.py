"""Tests for the write phase that follows a generation."""

from app.core.schemas_synthesis import Article, IdeaCardDraft, PersistenceStatus, Stance
from app.services.persistence_bridge import (
    number_idea_cards,
    save_articles,
    save_exchange,
    save_idea_cards,
)


def _drafts(*titles):
    return [IdeaCardDraft(title=t, body=f"{t} body", tags=["x"]) for t in titles]


class TestNumberIdeaCards:
    def test_numbers_follow_existing_cards(self):
        rows = number_idea_cards("B1", "Ch 3", _drafts("a", "b", "c"), existing_count=3)

        assert [r["number"] for r in rows] == [4, 5, 6]
        assert all(r["book_id"] == "B1" and r["chapter_name"] == "Ch 3" for r in rows)

    def test_first_card_is_one(self):
        rows = number_idea_cards("B1", None, _drafts("a"), existing_count=0)

        assert rows[0]["number"] == 1
        assert rows[0]["chapter_name"] is None


class TestSaveIdeaCards:
    def test_saved(self, fake_db):
        rows = number_idea_cards("B1", "Ch 1", _drafts("a", "b"), 0)

        outcome = save_idea_cards(rows)

        assert outcome.saved
        assert len(outcome.rows) == 2
        assert all("id" in r for r in outcome.rows)
        assert len(fake_db.rows("ideas")) == 2

    def test_empty_is_skipped(self, fake_db):
        outcome = save_idea_cards([])

        assert outcome.status == PersistenceStatus.SKIPPED
        assert fake_db.calls == []

    def test_store_failure_is_reported_not_raised(self, fake_db):
        fake_db.failing_tables.add("ideas")

        outcome = save_idea_cards(number_idea_cards("B1", "Ch 1", _drafts("a"), 0))

        assert outcome.status == PersistenceStatus.FAILED
        assert "ideas unavailable" in outcome.error


class TestSaveExchange:
    def test_user_then_assistant(self, fake_db):
        outcome = save_exchange("B1", "What is habit stacking?", "Pairing habits.")

        assert outcome.saved
        assert [(r["role"], r["content"]) for r in fake_db.rows("conversations")] == [
            ("user", "What is habit stacking?"),
            ("assistant", "Pairing habits."),
        ]

    def test_failure_is_reported(self, fake_db):
        fake_db.failing_tables.add("conversations")

        assert save_exchange("B1", "q", "a").status == PersistenceStatus.FAILED


class TestSaveArticles:
    def test_existing_url_is_left_untouched(self, fake_db):
        fake_db.seed(
            "articles",
            {"book_id": "B1", "url": "https://blog.example.com/a", "title": "Old", "stance": "supporting"},
        )
        articles = [
            Article(title="New", url="https://blog.example.com/a", stance=Stance.OPPOSING),
            Article(title="Fresh", url="https://blog.example.com/b"),
        ]

        outcome = save_articles("B1", articles)

        stored = {r["url"]: r for r in fake_db.rows("articles")}
        assert outcome.saved
        assert len(stored) == 2
        assert stored["https://blog.example.com/a"]["title"] == "Old"
        assert stored["https://blog.example.com/a"]["stance"] == "supporting"
        assert stored["https://blog.example.com/b"]["stance"] == "neutral"

    def test_same_url_other_book_is_new_row(self, fake_db):
        fake_db.seed("articles", {"book_id": "B1", "url": "https://x.com/a", "title": "Old"})

        save_articles("B2", [Article(title="Same", url="https://x.com/a")])

        assert len(fake_db.rows("articles")) == 2

    def test_nothing_to_save(self, fake_db):
        assert save_articles("B1", []).status == PersistenceStatus.SKIPPED


class TestOutcomeOk:
    def test_only_failure_is_not_ok(self, fake_db):
        assert save_idea_cards([]).ok

        fake_db.failing_tables.add("ideas")
        assert not save_idea_cards(number_idea_cards("B1", None, _drafts("a"), 0)).ok
