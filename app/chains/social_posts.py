"""LLM chains that repurpose chapter notes into social posts.

Tweets, threads and LinkedIn variants share one user prompt shape: book,
chapter, a capped slice of the notes and the book's idea cards. An optional
brand voice block is appended to the system prompt.
"""

from typing import Any

from app.core.book_context import format_idea_lines, format_voice_block, truncate
from app.core.llm import complete_chat
from app.core.logging import get_logger
from app.core.output_normalizer import (
    normalize_linkedin,
    normalize_repurpose,
    normalize_thread,
    normalize_tweets,
)
from app.core.schemas_books import BrandProfile
from app.core.schemas_synthesis import LinkedInPosts, RepurposedPost, ThreadTweet

logger = get_logger(__name__)

DEFAULT_CHAPTER = "Key Insights"

# ruff: noqa: E501
TWEETS_SYSTEM_PROMPT = """You are an expert at distilling book insights into high-signal, shareable tweets. Each tweet must:
- Be under 280 characters
- Lead with a sharp, counterintuitive or thought-provoking insight
- Feel like it was written by a smart person, not a marketer
- NOT use hashtags or @mentions
- Stand completely alone as a compelling thought

Return ONLY valid JSON: { "tweets": ["tweet1", "tweet2", ...] } with exactly 3 to 5 tweets."""

THREAD_SYSTEM_PROMPT = """You are an expert at transforming book chapter notes into compelling, coherent Twitter threads. The thread is a single narrative, not a list of disconnected points.

Rules:
- Open with a hook tweet: the most counterintuitive or striking insight. Make the reader need to keep reading.
- Each subsequent tweet flows naturally from the one before it, like paragraphs in an essay
- Every tweet starts with its number: "1/" "2/" etc. Do NOT include the number in the "text" field, just the body copy
- Each tweet body must be under 265 characters (the "X/" prefix adds ~3 chars toward the 280 limit)
- The final tweet is a landing: a synthesis that gives the reader something to carry away
- Write in an engaged, first-person-adjacent voice, as if a smart person is sharing a discovery
- No hashtags, no @mentions, no emoji, no filler phrases like "Thread:" or "Let's dive in"

Return ONLY valid JSON: { "thread": [{ "number": 1, "text": "..." }, ...] } with 6 to 10 tweets."""

LINKEDIN_SYSTEM_PROMPT = """You are a LinkedIn ghostwriter for thoughtful professionals who share what they learn from books. Write three distinct post variants from the same chapter notes:
- "insight": one sharp idea unpacked in short paragraphs, ending with a question to the reader
- "listicle": a hook line followed by 4-6 numbered takeaways, each one line
- "story": a first-person micro-story that leads into the book's lesson

Every variant:
- Opens with a first line strong enough to earn the "see more" click
- Names the book and author once
- Stays under 1300 characters
- Uses short paragraphs and plain language; no hashtags beyond two at the end, no emoji walls

Return ONLY valid JSON: { "insight": string, "listicle": string, "story": string }"""

REPURPOSE_SYSTEM_PROMPT = """You turn Twitter threads into a single long-form LinkedIn post. Keep the thread's argument and its best lines, but rewrite for LinkedIn:
- A first line that works as a standalone hook
- Short paragraphs that flow as prose rather than numbered fragments
- 1500-2000 characters in total
- End with a reflection or question that invites comments
- No thread numbering, no "Thread:" references, no emoji walls

Return ONLY valid JSON: { "post": string }"""

TWEETS_POLICY = {"temperature": 0.82, "max_tokens": 800}
THREAD_POLICY = {"temperature": 0.78, "max_tokens": 1800}
LINKEDIN_POLICY = {"temperature": 0.8, "max_tokens": 2000}
REPURPOSE_POLICY = {"temperature": 0.75, "max_tokens": 1200}

TWEETS_NOTES_CHARS, TWEETS_IDEA_BODY_CHARS = 2000, 100
THREAD_NOTES_CHARS, THREAD_IDEA_BODY_CHARS = 2500, 130
LINKEDIN_NOTES_CHARS, LINKEDIN_IDEA_BODY_CHARS = 2500, 130


def with_voice(system_prompt: str, voice: BrandProfile | None) -> str:
    block = format_voice_block(voice)
    return f"{system_prompt}\n\n{block}" if block else system_prompt


def build_chapter_prompt(
    *,
    book_title: str,
    author: str,
    chapter_name: str | None,
    notes_content: str,
    ideas: list[dict[str, Any]],
    notes_chars: int,
    idea_body_chars: int,
    ideas_label: str,
    instruction: str,
) -> str:
    prompt = f'''Book: "{book_title}" by {author}
Chapter: {chapter_name or DEFAULT_CHAPTER}

Notes:
"""
{truncate(notes_content, notes_chars)}
"""
'''
    if ideas:
        prompt += f"\n{ideas_label}:\n{format_idea_lines(ideas, idea_body_chars, bullet='•')}\n"
    return prompt + f"\n{instruction}"


def _generate(system_prompt: str, user_prompt: str, policy: dict[str, Any]) -> str:
    return complete_chat(
        [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        json_mode=True,
        **policy,
    )


def generate_tweets(
    *,
    book_title: str,
    author: str,
    chapter_name: str | None,
    notes_content: str,
    ideas: list[dict[str, Any]],
    voice: BrandProfile | None = None,
) -> list[str]:
    """
    Generate 3-5 standalone tweets from a chapter's notes.

    Returns:
        Tweet strings; [] when the response has none

    Raises:
        openai.OpenAIError: If the generation request fails
    """
    logger.info(f"Generating tweets for '{book_title}'", extra={"operation": "tweets"})
    user_prompt = build_chapter_prompt(
        book_title=book_title,
        author=author,
        chapter_name=chapter_name,
        notes_content=notes_content,
        ideas=ideas,
        notes_chars=TWEETS_NOTES_CHARS,
        idea_body_chars=TWEETS_IDEA_BODY_CHARS,
        ideas_label="Already distilled ideas for context",
        instruction="Generate 3-5 high-signal tweets derived from these notes.",
    )
    raw = _generate(with_voice(TWEETS_SYSTEM_PROMPT, voice), user_prompt, TWEETS_POLICY)
    return normalize_tweets(raw)


def generate_thread(
    *,
    book_title: str,
    author: str,
    chapter_name: str | None,
    notes_content: str,
    ideas: list[dict[str, Any]],
    voice: BrandProfile | None = None,
) -> list[ThreadTweet]:
    """
    Turn a chapter's notes into one numbered 6-10 tweet thread.

    Raises:
        openai.OpenAIError: If the generation request fails
    """
    logger.info(f"Generating thread for '{book_title}'", extra={"operation": "thread"})
    user_prompt = build_chapter_prompt(
        book_title=book_title,
        author=author,
        chapter_name=chapter_name,
        notes_content=notes_content,
        ideas=ideas,
        notes_chars=THREAD_NOTES_CHARS,
        idea_body_chars=THREAD_IDEA_BODY_CHARS,
        ideas_label="Distilled ideas to weave into the thread",
        instruction="Transform these notes into a single, flowing Twitter thread.",
    )
    raw = _generate(with_voice(THREAD_SYSTEM_PROMPT, voice), user_prompt, THREAD_POLICY)
    return normalize_thread(raw)


def generate_linkedin_posts(
    *,
    book_title: str,
    author: str,
    chapter_name: str | None,
    notes_content: str,
    ideas: list[dict[str, Any]],
    voice: BrandProfile | None = None,
) -> LinkedInPosts:
    """
    Write insight, listicle and story variants of a LinkedIn post.

    Raises:
        openai.OpenAIError: If the generation request fails
    """
    logger.info(f"Generating LinkedIn posts for '{book_title}'", extra={"operation": "linkedin"})
    user_prompt = build_chapter_prompt(
        book_title=book_title,
        author=author,
        chapter_name=chapter_name,
        notes_content=notes_content,
        ideas=ideas,
        notes_chars=LINKEDIN_NOTES_CHARS,
        idea_body_chars=LINKEDIN_IDEA_BODY_CHARS,
        ideas_label="Distilled ideas to draw on",
        instruction="Write the three LinkedIn post variants.",
    )
    raw = _generate(with_voice(LINKEDIN_SYSTEM_PROMPT, voice), user_prompt, LINKEDIN_POLICY)
    return normalize_linkedin(raw)


def repurpose_thread(
    *,
    thread: list[ThreadTweet],
    book_title: str = "",
    author: str = "",
    voice: BrandProfile | None = None,
) -> RepurposedPost:
    """
    Rewrite a whole thread as one LinkedIn post.

    Book title and author are optional attribution.

    Raises:
        openai.OpenAIError: If the generation request fails
    """
    logger.info(f"Repurposing {len(thread)}-tweet thread", extra={"operation": "repurpose"})

    thread_text = "\n\n".join(f"{t.number}/ {t.text}" for t in thread)
    source = f'Source book: "{book_title}" by {author}\n\n' if book_title else ""
    user_prompt = f"{source}Thread:\n{thread_text}\n\nRewrite this thread as one LinkedIn post."

    raw = _generate(with_voice(REPURPOSE_SYSTEM_PROMPT, voice), user_prompt, REPURPOSE_POLICY)
    return normalize_repurpose(raw)
