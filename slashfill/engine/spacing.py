"""Spacing rule for splicing an answer into surrounding text."""

import re
from dataclasses import dataclass

_NO_SPACE_AFTER = re.compile(r"[\n(\[{]$")
_NO_SPACE_BEFORE = re.compile(r"^[\n.,!?;:'\"\-—–)\]}]")


@dataclass(frozen=True)
class Splice:
    """An answer with consistent spacing and the trimmed text around it."""

    before: str
    content: str
    after: str

    @property
    def text(self) -> str:
        return self.before + self.content + self.after


def apply_spacing(before: str, content: str, after: str) -> Splice:
    """Space ``content`` so it neither mashes into nor floats off its neighbours.

    Spaces and tabs at the insertion point are dropped, then one leading
    space is added unless the left side is empty or ends in a newline or
    opening bracket, and one trailing space unless the right side is empty
    or starts with a newline, closing punctuation or sentence punctuation.
    Newlines on either side are kept.
    """
    trimmed_before = before.rstrip(" \t")
    trimmed_after = after.lstrip(" \t")
    spaced = content.strip()

    if trimmed_before and not _NO_SPACE_AFTER.search(trimmed_before):
        spaced = " " + spaced

    if trimmed_after and not _NO_SPACE_BEFORE.match(trimmed_after):
        spaced = spaced + " "

    return Splice(before=trimmed_before, content=spaced, after=trimmed_after)
