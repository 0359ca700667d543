"""Model output sanitizer.

Completions from web-search-augmented models tend to arrive wrapped in
explanations, citation brackets and bare links. ``sanitize`` runs an ordered
pipeline of pure stages over the raw text:

1. ``strip_boilerplate``      - leading "according to", "here is", ... phrases
2. ``strip_citations``        - ``[...]`` / ``(...)`` spans that look like sources
3. ``strip_urls``             - bare URLs and ``www.`` references
4. ``normalize_punctuation``  - spacing around ``,.;!?`` and blank lines
5. ``strip_wrappers``         - leading wrapper characters, stray closing brackets

The pipeline is re-applied until the output stops changing, which makes
``sanitize`` idempotent. It never raises.
"""

import re
from collections.abc import Callable
from typing import Any

_BOILERPLATE_PATTERNS = (
    re.compile(
        r"^\s*(?:(?:according to|based on|as per|the answer (?:is|would be)"
        r"|it is|it's|this is|that is|that's|here is|here's|here are)\b|the answer\s*:)[\s,:]*",
        re.IGNORECASE,
    ),
    re.compile(
        r"^\s*(?:search results?|sources?|web search|results? show|i found|looking up)\b[\s,:]*",
        re.IGNORECASE,
    ),
    re.compile(
        r"^\s*the (?:acts?|artists?|bands?|members?|names?) (?:under it )?"
        r"(?:include|are|is|would be)\b[\s,:]*",
        re.IGNORECASE,
    ),
)

_URL = re.compile(r"https?://\S+", re.IGNORECASE)
_WWW = re.compile(r"www\.[^\s)]+", re.IGNORECASE)
_TLD_TOKEN = re.compile(
    r"\b[\w-]+\.\s*(?:com?|net|org|io|ai|app|news|tv|fm|uk|us|au|de|fr|jp|gov|edu|info)\b",
    re.IGNORECASE,
)
_SOURCE_LEAD = re.compile(r"^(?:source|via|according to|reported by)\b", re.IGNORECASE)

_BRACKETED = re.compile(r"\s*\[([^\[\]]*)\]")
_PARENTHESIZED = re.compile(r"\s*\(([^()]*)\)")

_SPACE_BEFORE_PUNCT = re.compile(r"[ \t]+([,.;!?])")
_MISSING_SPACE_AFTER = re.compile(r"([,;!?])(?=[^\s\d,.;!?\"')\]}])")
_MISSING_SPACE_AFTER_PERIOD = re.compile(r"(?<=[a-z])\.(?=[A-Z])")
_SPACE_RUN = re.compile(r"[ \t]{2,}")
_TRAILING_LINE_SPACE = re.compile(r"[ \t]+\n")
_BLANK_LINES = re.compile(r"\n{3,}")

_LEADING_WRAPPERS = re.compile(r"^[\[\](){}<>\-_:,*\"'“”‘’`]+\s*")

_CLOSERS = {")": "(", "]": "[", "}": "{"}
_OPENERS = "([{"


def strip_boilerplate(text: str) -> str:
    """Remove explanation phrases from the start of the text."""
    previous = None
    while previous != text:
        previous = text
        for pattern in _BOILERPLATE_PATTERNS:
            text = pattern.sub("", text, count=1)
    return text


def _looks_like_citation(content: str) -> bool:
    stripped = content.strip()
    return (
        not stripped
        or stripped.isdigit()
        or _URL.search(stripped) is not None
        or "www." in stripped.lower()
        or _TLD_TOKEN.search(stripped) is not None
        or _SOURCE_LEAD.match(stripped) is not None
    )


def _drop_citation(match: re.Match[str]) -> str:
    return "" if _looks_like_citation(match.group(1)) else match.group(0)


def strip_citations(text: str) -> str:
    """Remove bracketed or parenthesized spans that look like citations.

    A span is a citation when its content holds a URL, a ``www.`` prefix, a
    domain-like token, a bare integer, a source lead-in such as "via", or
    nothing at all.
    """
    text = _BRACKETED.sub(_drop_citation, text)
    return _PARENTHESIZED.sub(_drop_citation, text)


def strip_urls(text: str) -> str:
    """Remove bare URLs and ``www.`` references anywhere in the text."""
    text = _URL.sub("", text)
    return _WWW.sub("", text)


def normalize_punctuation(text: str) -> str:
    """Normalize spacing around punctuation and collapse whitespace runs."""
    text = _SPACE_BEFORE_PUNCT.sub(r"\1", text)
    text = _MISSING_SPACE_AFTER.sub(r"\1 ", text)
    text = _MISSING_SPACE_AFTER_PERIOD.sub(". ", text)
    text = _SPACE_RUN.sub(" ", text)
    text = _TRAILING_LINE_SPACE.sub("\n", text)
    return _BLANK_LINES.sub("\n\n", text)


def _strip_unmatched_tail(text: str) -> str:
    while text:
        last = text[-1]
        if last in _CLOSERS and text.count(last) > text.count(_CLOSERS[last]):
            text = text[:-1].rstrip()
        elif last in _OPENERS or last in "*`":
            text = text[:-1].rstrip()
        elif last == '"' and text.count('"') % 2:
            text = text[:-1].rstrip()
        elif last == "”" and text.count("”") > text.count("“"):
            text = text[:-1].rstrip()
        else:
            return text
    return text


def strip_wrappers(text: str) -> str:
    """Trim wrapper characters left around the answer.

    Drops a leading run of brackets, quotes, dashes and colons, and
    unmatched closing brackets or quotes at the end. Sentence punctuation
    at the end is kept.
    """
    text = _LEADING_WRAPPERS.sub("", text.strip())
    return _strip_unmatched_tail(text).strip()


STAGES: tuple[Callable[[str], str], ...] = (
    strip_boilerplate,
    strip_citations,
    strip_urls,
    normalize_punctuation,
    strip_wrappers,
)


def _run_stages(text: str) -> str:
    for stage in STAGES:
        text = stage(text)
    return text


def sanitize(raw: Any) -> str:
    """Clean a model answer for insertion into the document.

    The stages are repeated until the text stops changing. Stages only
    delete characters, except for the single space inserted after
    punctuation, so the sequence of passes reaches a fixed point or
    revisits an earlier text; in the latter case the shortest text of the
    cycle is returned, which is itself reached again when sanitized.

    Args:
        raw: The coerced model output. Anything but a string yields "".

    Returns:
        The cleaned answer, possibly empty.
    """
    if not isinstance(raw, str):
        return ""

    visited = [raw]
    cleaned = raw
    while True:
        following = _run_stages(cleaned)
        if following == cleaned:
            return cleaned
        if following in visited:
            cycle = visited[visited.index(following):]
            return min(cycle, key=lambda text: (len(text), text))
        visited.append(following)
        cleaned = following
