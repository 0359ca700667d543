"""Placeholder scanning.

A blank is a lone ``/`` that starts a word: it sits at the start of the
text or right after whitespace, and it is not part of ``//`` or ``://``.
Markers are always derived from the text and never cached, since any edit
invalidates them.
"""

SLASH = "/"


def is_placeholder(text: str, index: int) -> bool:
    """Check whether the character at ``index`` is a blank marker.

    A missing neighbour at either end of the text counts as whitespace.

    Args:
        text: The document text.
        index: Offset of the candidate character.

    Returns:
        True if ``text[index]`` is a ``/`` satisfying the boundary rule.
    """
    if text[index] != SLASH:
        return False

    prev_char = text[index - 1] if index > 0 else " "
    next_char = text[index + 1] if index + 1 < len(text) else " "

    if prev_char in (":", SLASH) or next_char == SLASH:
        return False

    return index == 0 or prev_char.isspace()


def scan(text: str) -> list[int]:
    """Return the offsets of every blank marker in ``text``, ascending."""
    return [
        idx
        for idx, char in enumerate(text)
        if char == SLASH and is_placeholder(text, idx)
    ]
