"""OpenAI client utilities shared by every synthesis chain."""

import json
import re
from functools import lru_cache
from typing import Any

from openai import OpenAI

from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_openai_client() -> OpenAI:
    """
    Get OpenAI client instance (cached singleton).

    Returns:
        OpenAI client configured with the API key from settings
    """
    settings = get_settings()
    return OpenAI(api_key=settings.OPENAI_API_KEY)


def complete_chat(
    messages: list[dict[str, str]],
    *,
    temperature: float,
    max_tokens: int,
    json_mode: bool = False,
    model: str | None = None,
) -> str:
    """
    Issue exactly one chat completion request.

    Args:
        messages: Chat messages (system, history, user)
        temperature: Sampling temperature for this operation
        max_tokens: Output length cap for this operation
        json_mode: Ask the model for a JSON object response
        model: Model name override (defaults to OPENAI_MODEL)

    Returns:
        Raw message content ("" when the model returned none)

    Raises:
        openai.OpenAIError: If the request fails. Callers decide whether
            the failure is fatal.
    """
    settings = get_settings()
    client = get_openai_client()

    kwargs: dict[str, Any] = {
        "model": model or settings.OPENAI_MODEL,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}

    response = client.chat.completions.create(**kwargs)
    return response.choices[0].message.content or ""


def _strip_llm_fences(raw_output: str) -> str:
    """Strip markdown code fences from LLM output.

    Handles: ```json ... ```, ``` ... ```, leading/trailing whitespace.
    """
    cleaned = raw_output.strip()

    # Extract JSON from markdown code fences
    fence_match = re.search(r"```(?:json)?\s*\n?(.*?)```", cleaned, re.DOTALL)
    if fence_match:
        return fence_match.group(1).strip()

    # Fallback: strip leading/trailing fences without regex
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_llm_json_lenient(raw_output: str) -> Any:
    """
    Parse LLM output as JSON, returning None instead of raising.

    A malformed payload is a shape problem for the caller's normalizer,
    not a request failure.

    Args:
        raw_output: Raw string from LLM response

    Returns:
        Parsed JSON value, or None if the output is not valid JSON
    """
    try:
        return json.loads(_strip_llm_fences(raw_output))
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Discarding unparseable LLM output: {e}")
        return None
