"""Tests for tweet, thread and LinkedIn generation."""

import json
from unittest.mock import patch

import pytest

from app.core.errors import BookNotFoundError
from app.core.schemas_books import BrandProfile, ChapterContentRequest, RepurposeRequest
from app.core.schemas_synthesis import ThreadTweet
from app.services import content_studio


@pytest.fixture
def book(fake_db):
    fake_db.seed("books", {"id": "B1", "title": "Range", "author": "David Epstein"})
    fake_db.seed(
        "ideas",
        *[{"book_id": "B1", "title": f"Idea {n}", "body": "x" * 300, "number": n} for n in range(1, 9)],
    )
    return fake_db


def _request(**overrides):
    values = {"book_id": "B1", "content": "Generalists triumph in wicked domains.", "chapter_name": "Ch 1"}
    values.update(overrides)
    return ChapterContentRequest(**values)


class TestTweets:
    @pytest.mark.asyncio
    async def test_tweets_from_wrapped_payload(self, book):
        payload = json.dumps({"tweets": ["one", "two", "three"]})

        with patch("app.chains.social_posts.complete_chat", return_value=payload) as mock_llm:
            tweets = await content_studio.tweets(_request())

        assert tweets == ["one", "two", "three"]
        user_prompt = mock_llm.call_args.args[0][1]["content"]
        assert user_prompt.count("• Idea") == 5
        assert "x" * 101 not in user_prompt
        assert mock_llm.call_args.kwargs["temperature"] == 0.82

    @pytest.mark.asyncio
    async def test_notes_truncated(self, book):
        with patch("app.chains.social_posts.complete_chat", return_value="[]") as mock_llm:
            await content_studio.tweets(_request(content="n" * 5000))

        user_prompt = mock_llm.call_args.args[0][1]["content"]
        assert "n" * 2000 in user_prompt
        assert "n" * 2001 not in user_prompt

    @pytest.mark.asyncio
    async def test_stored_voice_applied(self, book):
        book.seed("user_profile", {"id": "default", "positioning": "Ex-athlete", "audience": "", "tone": "Wry"})

        with patch("app.chains.social_posts.complete_chat", return_value="[]") as mock_llm:
            await content_studio.tweets(_request())

        system_prompt = mock_llm.call_args.args[0][0]["content"]
        assert "- Positioning: Ex-athlete" in system_prompt
        assert "- Tone: Wry" in system_prompt
        assert "Audience" not in system_prompt

    @pytest.mark.asyncio
    async def test_missing_book(self, fake_db):
        with patch("app.chains.social_posts.complete_chat") as mock_llm:
            with pytest.raises(BookNotFoundError):
                await content_studio.tweets(_request(book_id="nope"))

        mock_llm.assert_not_called()


class TestThread:
    @pytest.mark.asyncio
    async def test_thread_numbered(self, book):
        payload = json.dumps({"thread": [{"number": 1, "text": "hook"}, {"text": "point"}]})

        with patch("app.chains.social_posts.complete_chat", return_value=payload) as mock_llm:
            thread = await content_studio.thread(_request(chapter_name=None))

        assert [(t.number, t.text) for t in thread] == [(1, "hook"), (2, "point")]
        assert "Chapter: Key Insights" in mock_llm.call_args.args[0][1]["content"]


class TestLinkedIn:
    @pytest.mark.asyncio
    async def test_request_voice_overrides_stored(self, book):
        book.seed("user_profile", {"id": "default", "positioning": "Stored", "audience": "", "tone": ""})
        payload = json.dumps({"insight": "I", "listicle": "L", "story": "S"})

        with patch("app.chains.social_posts.complete_chat", return_value=payload) as mock_llm:
            posts = await content_studio.linkedin_posts(_request(brand_profile=BrandProfile(audience="CTOs")))

        assert posts.model_dump() == {"insight": "I", "listicle": "L", "story": "S"}
        system_prompt = mock_llm.call_args.args[0][0]["content"]
        assert "- Audience: CTOs" in system_prompt
        assert "Stored" not in system_prompt


class TestRepurpose:
    @pytest.mark.asyncio
    async def test_thread_rendered_with_attribution(self, book):
        request = RepurposeRequest(
            book_id="B1",
            thread=[ThreadTweet(number=1, text="Specialists win kind games."), ThreadTweet(number=2, text="Life is wicked.")],
        )

        with patch("app.chains.social_posts.complete_chat", return_value='{"post": "P"}') as mock_llm:
            post = await content_studio.repurpose(request)

        assert post.post == "P"
        user_prompt = mock_llm.call_args.args[0][1]["content"]
        assert 'Source book: "Range" by David Epstein' in user_prompt
        assert "1/ Specialists win kind games.\n\n2/ Life is wicked." in user_prompt

    @pytest.mark.asyncio
    async def test_unknown_book_repurposes_without_attribution(self, fake_db):
        request = RepurposeRequest(book_id="gone", thread=[ThreadTweet(number=1, text="t")])

        with patch("app.chains.social_posts.complete_chat", return_value="{}") as mock_llm:
            post = await content_studio.repurpose(request)

        assert post.post == ""
        assert "Source book" not in mock_llm.call_args.args[0][1]["content"]
