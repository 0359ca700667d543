"""Completion response handling.

Providers disagree on response shape. OpenAI-compatible endpoints
(OpenRouter included) return ``{"choices": [{"message": {"content": ...}}]}``
while Anthropic-style endpoints return ``{"content": [{"text": ...}]}``, and
message content itself may be a string or a list of segments. This module
reduces every shape to one string and parses batch answers out of it.
"""

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

_USAGE_KEYS = ("completion_tokens", "total_tokens", "output_tokens")
_FALLBACK_SPLIT = re.compile(r"[,\n]")
_FALLBACK_STRIP = re.compile(r"[\"'\[\]]")


class MalformedResponseError(ValueError):
    """Raised when a completion body carries no usable message content."""


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def _segment_text(segment: Any) -> str:
    if not segment:
        return ""
    if isinstance(segment, str):
        return segment

    text = _field(segment, "text")
    if text is None:
        text = _field(segment, "content")
    return text if isinstance(text, str) else ""


def coerce_content(content: Any) -> str:
    """Reduce message content of any accepted shape to a single string.

    Accepts a plain string, a list of segments (strings or objects exposing
    ``text`` / ``content``), or an object exposing ``content``.
    """
    if isinstance(content, str):
        return content

    if isinstance(content, list):
        return " ".join(_segment_text(segment) for segment in content)

    if content is not None:
        value = _field(content, "content")
        return value if isinstance(value, str) else ""

    return ""


def extract_content(body: Any) -> str:
    """Extract the model's text from a completion body.

    Args:
        body: Decoded JSON body from the transport.

    Returns:
        The message content as a single string.

    Raises:
        MalformedResponseError: If the body has neither accepted shape.
    """
    if not isinstance(body, Mapping):
        raise MalformedResponseError(f"Expected a JSON object, got {type(body).__name__}")

    choices = body.get("choices")
    if isinstance(choices, list) and choices:
        message = _field(choices[0], "message")
        if message is None:
            raise MalformedResponseError("First choice has no message")
        return coerce_content(_field(message, "content"))

    content = body.get("content")
    if isinstance(content, list) and content:
        return coerce_content(content)

    if "error" in body:
        raise MalformedResponseError(f"Provider returned an error: {body['error']}")

    raise MalformedResponseError("Response has no choices or content")


def extract_tokens(body: Any, content: str) -> float:
    """Read the completion token count, estimating from length if absent."""
    usage = body.get("usage") if isinstance(body, Mapping) else None
    if isinstance(usage, Mapping):
        for key in _USAGE_KEYS:
            value = usage.get(key)
            if isinstance(value, (int, float)) and value:
                return float(value)
    return len(content) / 4


def find_balanced_array(text: str) -> str | None:
    """Return the first balanced ``[...]`` substring of ``text``.

    Brackets inside JSON string literals are ignored.
    """
    start = text.find("[")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False

        for idx in range(start, len(text)):
            char = text[idx]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
                if depth == 0:
                    return text[start:idx + 1]

        start = text.find("[", start + 1)

    return None


def split_answers(raw: str) -> list[str]:
    """Fallback parser: split on commas and newlines, drop quotes and brackets."""
    parts = (_FALLBACK_STRIP.sub("", part).strip() for part in _FALLBACK_SPLIT.split(raw))
    return [part for part in parts if part]


def parse_answers(raw: str) -> list[str]:
    """Parse a batch completion into one answer per blank.

    The first balanced JSON array is used when it decodes to a list;
    otherwise the raw text is split with :func:`split_answers`.
    """
    candidate = find_balanced_array(raw)
    if candidate is not None:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.warning(f"Batch answer array is not valid JSON: {e}")
            data = None

        if isinstance(data, list):
            return ["" if item is None else str(item) for item in data]

    logger.debug("Falling back to delimiter split for batch answers")
    return split_answers(raw)


def fit_answers(answers: list[str], count: int) -> list[str]:
    """Pad with empty answers or truncate so exactly ``count`` remain."""
    return answers[:count] + [""] * max(0, count - len(answers))
