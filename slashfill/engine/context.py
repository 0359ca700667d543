"""Prompt context building.

Inline fills send a window of text around a cursor marker. Batch fills
number every blank (``[FILL_1]``, ``[FILL_2]``, ...) in a single prompt and
keep a marker-free copy of the document together with the offsets the
answers will later be spliced into.
"""

from dataclasses import dataclass

from slashfill.engine.scanner import SLASH, scan

CURSOR_MARKER = "[CURSOR]"
LOADING_GLYPH = "…"


def fill_token(number: int) -> str:
    """Return the prompt token for the ``number``-th blank (1-based)."""
    return f"[FILL_{number}]"


@dataclass(frozen=True)
class InlineContext:
    """Prompt for a single completion at the cursor."""

    prompt: str
    prefix: str
    suffix: str


@dataclass(frozen=True)
class BatchContext:
    """Prompt and splice bookkeeping for a batch fill.

    Attributes:
        prompt: Document text with every blank replaced by a numbered token.
        base_text: Document text with every marker character removed.
        anchors: Offsets into ``base_text`` where each marker used to sit.
        source: Document text with one marker character per blank.
        positions: Offsets of the marker characters in ``source``.
    """

    prompt: str
    base_text: str
    anchors: tuple[int, ...]
    source: str
    positions: tuple[int, ...]

    @property
    def blank_count(self) -> int:
        return len(self.anchors)

    @property
    def loading_text(self) -> str:
        """The base text with a loading glyph at every anchor."""
        text = self.base_text
        for anchor in reversed(self.anchors):
            text = text[:anchor] + LOADING_GLYPH + text[anchor:]
        return text


def build_inline_context(
    prefix: str,
    suffix: str,
    prefix_window: int = 1500,
    suffix_window: int = 500,
) -> InlineContext:
    """Build the bounded cursor context for an inline fill."""
    limited_prefix = prefix[-prefix_window:] if prefix_window > 0 else ""
    limited_suffix = suffix[:suffix_window]
    prompt = limited_prefix + CURSOR_MARKER + limited_suffix
    return InlineContext(prompt=prompt, prefix=limited_prefix, suffix=limited_suffix)


def marked_source(
    prefix: str, suffix: str, include_trigger: bool = True
) -> tuple[str, list[int]]:
    """Collapse the document into text with one marker character per blank.

    The trigger itself becomes a single ``/`` between prefix and suffix so
    every blank, trigger included, occupies exactly one character.

    Args:
        prefix: Text before the trigger.
        suffix: Text after the trigger.
        include_trigger: Whether the trigger position is a blank.

    Returns:
        The marked text and the ascending offsets of its marker characters.
    """
    blanks = scan(prefix + suffix)
    if not include_trigger:
        return prefix + suffix, blanks

    cut = len(prefix)
    shifted = {pos if pos < cut else pos + 1 for pos in blanks}
    shifted.add(cut)
    return prefix + SLASH + suffix, sorted(shifted)


def _bound_prompt(prompt: str, first: int, last_end: int, limit: int) -> str:
    if limit <= 0 or len(prompt) <= limit:
        return prompt

    spare = max(0, limit - (last_end - first))
    start = max(0, first - (spare * 3) // 4)
    end = min(len(prompt), last_end + spare - (first - start))
    return prompt[start:end]


def build_batch_context(
    prefix: str,
    suffix: str,
    include_trigger: bool = True,
    limit: int = 6000,
) -> BatchContext:
    """Build the numbered prompt, base text and anchors for a batch fill.

    Args:
        prefix: Text before the trigger.
        suffix: Text after the trigger.
        include_trigger: Whether the trigger position counts as the last
            blank before any blanks in the suffix.
        limit: Maximum prompt length. Text far from the blanks is dropped
            first; the blanks themselves are always kept.

    Returns:
        A BatchContext snapshot of the document.
    """
    source, positions = marked_source(prefix, suffix, include_trigger)

    prompt_parts: list[str] = []
    base_parts: list[str] = []
    anchors: list[int] = []
    base_length = 0
    last = 0
    first_token = last_token_end = 0
    prompt_length = 0

    for number, pos in enumerate(positions, start=1):
        segment = source[last:pos]
        token = fill_token(number)

        prompt_parts.append(segment)
        prompt_length += len(segment)
        if number == 1:
            first_token = prompt_length
        prompt_parts.append(token)
        prompt_length += len(token)
        last_token_end = prompt_length

        base_parts.append(segment)
        base_length += len(segment)
        anchors.append(base_length)

        last = pos + 1

    prompt_parts.append(source[last:])
    base_parts.append(source[last:])

    prompt = "".join(prompt_parts)
    if positions:
        prompt = _bound_prompt(prompt, first_token, last_token_end, limit)

    return BatchContext(
        prompt=prompt,
        base_text="".join(base_parts),
        anchors=tuple(anchors),
        source=source,
        positions=tuple(positions),
    )
