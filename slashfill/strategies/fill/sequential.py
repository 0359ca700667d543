"""Sequential fill strategy.

Alternative to the batch strategy for models that handle JSON arrays
poorly: every blank gets its own cursor-style completion, issued strictly
left to right so each request already sees the answers before it.
"""

import logging

from slashfill.engine.context import LOADING_GLYPH, build_batch_context, build_inline_context
from slashfill.engine.models import (
    FillMode,
    FillRequest,
    FillResult,
    FillStatus,
    Insertion,
)
from slashfill.engine.prompts import SYSTEM_PROMPT
from slashfill.engine.responses import MalformedResponseError
from slashfill.engine.sanitizer import sanitize
from slashfill.engine.session import FillSession
from slashfill.engine.spacing import apply_spacing
from slashfill.interfaces.fill_strategy import BaseFillStrategy
from slashfill.interfaces.transport import TransportError
from slashfill.strategies.fill.common import finish

logger = logging.getLogger(__name__)


class SequentialFillStrategy(BaseFillStrategy):
    """One completion request per blank, in document order."""

    name = "sequential"

    async def fill(
        self,
        session: FillSession,
        prefix: str,
        suffix: str,
        *,
        include_trigger: bool = True,
    ) -> FillResult:
        options = session.options
        context = build_batch_context(prefix, suffix, include_trigger=include_trigger, limit=0)
        request = FillRequest(FillMode.BATCH, context.prompt, context.blank_count)
        result = FillResult(
            text=context.base_text,
            mode=FillMode.BATCH,
            status=request.status,
            request=request,
        )

        current = context.base_text
        session.write(current)
        if context.blank_count == 0:
            return finish(session, result, FillStatus.DONE)

        delta = 0
        latency = 0.0
        tokens = 0.0

        for index, anchor in enumerate(context.anchors):
            insert_at = min(anchor + delta, len(current))
            before, after = current[:insert_at], current[insert_at:]
            inline = build_inline_context(
                before, after, options.prefix_window, options.suffix_window
            )

            session.write(before + LOADING_GLYPH + after)
            try:
                completion = await session.complete(SYSTEM_PROMPT, inline.prompt, FillMode.INLINE)
            except (TransportError, MalformedResponseError) as e:
                logger.error(f"Sequential fill failed at blank {index + 1}: {e}")
                session.write(current)
                return finish(session, result, FillStatus.FAILED)

            if not session.is_current():
                return finish(session, result, FillStatus.CANCELLED)

            latency += completion.latency_ms
            tokens += completion.tokens_used
            result.latency_ms = latency
            result.tokens_used = tokens

            answer = sanitize(completion.content)
            result.answers.append(answer)
            session.write(current)
            if not answer:
                continue

            splice = apply_spacing(before, answer, after)
            request.status = FillStatus.STREAMING
            if not await session.fill(splice.before, splice.content, splice.after):
                return finish(session, result, FillStatus.CANCELLED)

            updated = splice.text
            change = len(updated) - len(current)
            result.insertions.append(
                Insertion(index=index, answer=answer, position=len(splice.before), length=change)
            )
            delta += change
            current = updated

        status = FillStatus.DONE if result.insertions else FillStatus.FAILED
        return finish(session, result, status)
