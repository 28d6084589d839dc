"""Reduce raw generation output to each operation's committed shape.

The model is asked for specific keys and counts, but nothing here assumes it
obeyed. Lists may arrive bare or wrapped in an object; scalar fields may be
missing or null; individual items may be malformed. Each case reduces to an
empty value rather than an error.
"""

from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from app.core.llm import parse_llm_json_lenient
from app.core.logging import get_logger
from app.core.schemas_synthesis import (
    Digest,
    DigestKeyIdea,
    IdeaCardDraft,
    LinkedInPosts,
    MacroNarrative,
    NarrativeTheme,
    RepurposedPost,
    Stance,
    ThreadTweet,
)

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

IDEA_LIST_KEYS = ("insights", "ideas", "cards")
TWEET_LIST_KEYS = ("tweets",)
THREAD_LIST_KEYS = ("thread", "tweets")
THEME_LIST_KEYS = ("themes",)
STANCE_LIST_KEYS = ("stances",)


def extract_list(payload: Any, keys: Iterable[str]) -> list[Any]:
    """
    Pull a list out of a bare list or the first recognised key of an object.

    Args:
        payload: Parsed JSON value
        keys: Container keys to try, in order

    Returns:
        The list, or [] when none is found
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


def validate_items(items: list[Any], model: type[M]) -> list[M]:
    """Validate items one by one, dropping those that do not fit the model."""
    valid: list[M] = []
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError as e:
            logger.debug(f"Dropping malformed {model.__name__} item: {e.error_count()} errors")
    if len(valid) < len(items):
        logger.warning(f"Dropped {len(items) - len(valid)} of {len(items)} {model.__name__} items")
    return valid


def _as_object(raw: str) -> dict[str, Any]:
    payload = parse_llm_json_lenient(raw)
    return payload if isinstance(payload, dict) else {}


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def normalize_ideas(raw: str) -> list[IdeaCardDraft]:
    items = extract_list(parse_llm_json_lenient(raw), IDEA_LIST_KEYS)
    return validate_items(items, IdeaCardDraft)


def normalize_tweets(raw: str) -> list[str]:
    items = extract_list(parse_llm_json_lenient(raw), TWEET_LIST_KEYS)
    tweets = []
    for item in items:
        text = item.get("text") if isinstance(item, dict) else item
        if isinstance(text, str) and text.strip():
            tweets.append(text.strip())
    return tweets


def normalize_thread(raw: str) -> list[ThreadTweet]:
    """Thread items may omit their number; position fills the gap. Blank items are dropped."""
    items = extract_list(parse_llm_json_lenient(raw), THREAD_LIST_KEYS)
    shaped: list[Any] = []
    for position, item in enumerate(items, start=1):
        if isinstance(item, str):
            shaped.append({"number": position, "text": item})
        elif isinstance(item, dict) and item.get("number") is None:
            shaped.append({**item, "number": position})
        else:
            shaped.append(item)
    return [t for t in validate_items(shaped, ThreadTweet) if t.text.strip()]


def normalize_linkedin(raw: str) -> LinkedInPosts:
    payload = _as_object(raw)
    return LinkedInPosts(
        insight=_text(payload.get("insight")),
        listicle=_text(payload.get("listicle")),
        story=_text(payload.get("story")),
    )


def normalize_repurpose(raw: str) -> RepurposedPost:
    return RepurposedPost(post=_text(_as_object(raw).get("post")))


def normalize_narrative(raw: str) -> MacroNarrative:
    payload = _as_object(raw)
    return MacroNarrative(
        themes=validate_items(extract_list(payload, THEME_LIST_KEYS), NarrativeTheme),
        narrative=_text(payload.get("narrative")),
    )


def normalize_digest(raw: str) -> Digest:
    """Every digest key is present in the result, empty when the model skipped it."""
    payload = _as_object(raw)
    return Digest(
        subject_line=_text(payload.get("subject_line")),
        opening_hook=_text(payload.get("opening_hook")),
        key_ideas=validate_items(extract_list(payload.get("key_ideas"), ()), DigestKeyIdea),
        article_pick=_text(payload.get("article_pick")),
        closing_thought=_text(payload.get("closing_thought")),
    )


def neutral_stances(count: int) -> list[Stance]:
    return [Stance.NEUTRAL] * count


def normalize_stances(raw: str, expected: int) -> list[Stance]:
    """
    Align classified stances with the input articles.

    Unknown values become neutral; the list is padded with neutral or cut
    so its length always equals ``expected``.
    """
    items = extract_list(parse_llm_json_lenient(raw), STANCE_LIST_KEYS)
    stances: list[Stance] = []
    for item in items[:expected]:
        try:
            stances.append(Stance(str(item).strip().lower()))
        except ValueError:
            stances.append(Stance.NEUTRAL)
    if len(items) != expected:
        logger.warning(f"Stance count mismatch: got {len(items)}, expected {expected}")
    return stances + neutral_stances(expected - len(stances))
