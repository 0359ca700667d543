"""Trigger detection and classification.

A ``//`` that is not part of a ``://`` URL scheme triggers a fill. The text
before the trigger decides whether the fill resolves every outstanding
blank in one request or completes a single phrase at the cursor.
"""

import re
from dataclasses import dataclass

from slashfill.engine.models import FillMode
from slashfill.engine.scanner import scan

TRIGGER = "//"

_TRIGGER_PATTERN = re.compile(r"(?<!:)//")
_SENTENCE_END = (".", "!", "?")


@dataclass(frozen=True)
class Classification:
    """Result of classifying a trigger.

    Attributes:
        mode: How the trigger should be resolved.
        prefix: Text before the trigger.
        suffix: Text after the trigger.
        trigger_index: Offset of the trigger in the original text.
    """

    mode: FillMode
    prefix: str
    suffix: str
    trigger_index: int

    @property
    def raw_text(self) -> str:
        """The text with the trigger put back in place."""
        return self.prefix + TRIGGER + self.suffix


def find_trigger(text: str) -> int | None:
    """Return the offset of the first unescaped ``//``, if any."""
    match = _TRIGGER_PATTERN.search(text)
    return match.start() if match else None


def classify(text: str, trigger_index: int | None = None) -> Classification:
    """Classify a trigger as batch, inline or easter-egg.

    Args:
        text: The document text containing the trigger.
        trigger_index: Offset of the trigger. Located with
            :func:`find_trigger` when omitted.

    Returns:
        The classification with the prefix and suffix around the trigger.

    Raises:
        ValueError: If the text contains no trigger.
    """
    if trigger_index is None:
        trigger_index = find_trigger(text)
    if trigger_index is None or text[trigger_index:trigger_index + 2] != TRIGGER:
        raise ValueError("Text does not contain a fill trigger")

    prefix = text[:trigger_index]
    suffix = text[trigger_index + len(TRIGGER):]

    if prefix.strip() == "":
        return Classification(FillMode.EASTER_EGG, prefix, suffix, trigger_index)

    trimmed = prefix.rstrip()
    is_batch = (
        trimmed.endswith(_SENTENCE_END)
        or prefix.endswith("\n")
        or trimmed == ""
        or bool(scan(prefix))
    )
    mode = FillMode.BATCH if is_batch else FillMode.INLINE

    return Classification(mode, prefix, suffix, trigger_index)
