"""Inline fill strategy.

Completes a single phrase exactly at the trigger. A loading glyph holds the
spot during the round trip and the answer is streamed in wherever that
glyph ends up, so edits made while waiting are kept.
"""

import logging

from slashfill.engine.context import LOADING_GLYPH, build_inline_context
from slashfill.engine.models import FillMode, FillRequest, FillResult, FillStatus
from slashfill.engine.prompts import SYSTEM_PROMPT
from slashfill.engine.responses import MalformedResponseError
from slashfill.engine.sanitizer import sanitize
from slashfill.engine.session import FillSession
from slashfill.engine.spacing import apply_spacing
from slashfill.interfaces.fill_strategy import BaseFillStrategy
from slashfill.interfaces.transport import TransportError
from slashfill.strategies.fill.common import finish

logger = logging.getLogger(__name__)


class InlineFillStrategy(BaseFillStrategy):
    """Single immediate completion at the trigger position."""

    name = "inline"

    async def fill(
        self,
        session: FillSession,
        prefix: str,
        suffix: str,
        *,
        include_trigger: bool = True,
    ) -> FillResult:
        options = session.options
        context = build_inline_context(
            prefix, suffix, options.prefix_window, options.suffix_window
        )
        request = FillRequest(FillMode.INLINE, context.prompt, blank_count=1)
        result = FillResult(
            text=prefix + suffix,
            mode=FillMode.INLINE,
            status=request.status,
            request=request,
        )

        session.write(prefix + LOADING_GLYPH + suffix)
        written_length = len(prefix) + len(LOADING_GLYPH) + len(suffix)

        try:
            completion = await session.complete(SYSTEM_PROMPT, context.prompt, FillMode.INLINE)
        except (TransportError, MalformedResponseError) as e:
            logger.error(f"Inline fill failed: {e}")
            self._remove_glyph(session, len(prefix), written_length)
            return finish(session, result, FillStatus.FAILED)

        if not session.is_current():
            return finish(session, result, FillStatus.CANCELLED)

        result.latency_ms = completion.latency_ms
        result.tokens_used = completion.tokens_used

        answer = sanitize(completion.content)
        result.answers = [answer]
        if not answer:
            logger.info("Inline fill returned no usable text")
            self._remove_glyph(session, len(prefix), written_length)
            return finish(session, result, FillStatus.FAILED)

        live = session.read()
        glyph_at = locate_glyph(live, len(prefix), written_length)
        if glyph_at is None:
            logger.info("Loading glyph was edited away, dropping inline answer")
            return finish(session, result, FillStatus.DONE)

        splice = apply_spacing(live[:glyph_at], answer, live[glyph_at + len(LOADING_GLYPH):])
        session.write(splice.before + LOADING_GLYPH + splice.after)

        request.status = FillStatus.STREAMING
        completed = await session.replace_at_marker(
            splice.content, LOADING_GLYPH, at=len(splice.before)
        )

        return finish(session, result, FillStatus.DONE if completed else FillStatus.CANCELLED)

    def _remove_glyph(self, session: FillSession, offset: int, written_length: int) -> None:
        live = session.read()
        glyph_at = locate_glyph(live, offset, written_length)
        if glyph_at is not None:
            session.write(live[:glyph_at] + live[glyph_at + len(LOADING_GLYPH):])


def locate_glyph(live: str, offset: int, written_length: int) -> int | None:
    """Find the loading glyph written at ``offset`` in the live text.

    The glyph is either still at ``offset`` (edits after it) or shifted by
    the change in document length (edits before it). Ellipses typed by the
    user elsewhere are never matched.
    """
    shift = len(live) - written_length
    for candidate in (offset, offset + shift):
        if 0 <= candidate and live[candidate:candidate + len(LOADING_GLYPH)] == LOADING_GLYPH:
            return candidate
    return None
