"""Batch fill strategy.

Resolves every outstanding blank, the trigger position included, with a
single round trip. The model sees the whole note with numbered
``[FILL_n]`` tokens and answers with a JSON array; answers are then spliced
into the marker-free base text strictly left to right, each offset shifted
by the length change of every splice before it.
"""

import logging

from slashfill.engine.context import build_batch_context
from slashfill.engine.models import (
    FillMode,
    FillRequest,
    FillResult,
    FillStatus,
    Insertion,
)
from slashfill.engine.prompts import BATCH_FILL_PROMPT
from slashfill.engine.responses import MalformedResponseError, fit_answers, parse_answers
from slashfill.engine.sanitizer import sanitize
from slashfill.engine.session import FillSession
from slashfill.engine.spacing import apply_spacing
from slashfill.interfaces.fill_strategy import BaseFillStrategy
from slashfill.interfaces.transport import TransportError
from slashfill.strategies.fill.common import finish

logger = logging.getLogger(__name__)


class BatchFillStrategy(BaseFillStrategy):
    """One request for all blanks, answered as a JSON array."""

    name = "batch"

    async def fill(
        self,
        session: FillSession,
        prefix: str,
        suffix: str,
        *,
        include_trigger: bool = True,
    ) -> FillResult:
        context = build_batch_context(
            prefix,
            suffix,
            include_trigger=include_trigger,
            limit=session.options.batch_context_limit,
        )
        request = FillRequest(FillMode.BATCH, context.prompt, context.blank_count)
        result = FillResult(
            text=context.base_text,
            mode=FillMode.BATCH,
            status=request.status,
            request=request,
        )

        if context.blank_count == 0:
            logger.info("No blanks to fill, skipping completion request")
            session.write(context.base_text)
            return finish(session, result, FillStatus.DONE)

        logger.info(f"Batch fill for {context.blank_count} blank(s)")
        session.write(context.loading_text)

        try:
            completion = await session.complete(BATCH_FILL_PROMPT, context.prompt, FillMode.BATCH)
        except (TransportError, MalformedResponseError) as e:
            logger.error(f"Batch fill failed: {e}")
            session.write(context.base_text)
            return finish(session, result, FillStatus.FAILED)

        if not session.is_current():
            return finish(session, result, FillStatus.CANCELLED)

        result.latency_ms = completion.latency_ms
        result.tokens_used = completion.tokens_used

        answers = fit_answers(parse_answers(completion.content), context.blank_count)
        answers = [sanitize(answer) for answer in answers]
        result.answers = answers

        session.write(context.base_text)
        if not any(answers):
            logger.info("Batch fill returned no usable answers")
            return finish(session, result, FillStatus.FAILED)

        request.status = FillStatus.STREAMING
        current = context.base_text
        delta = 0

        for index, (anchor, answer) in enumerate(zip(context.anchors, answers)):
            if not answer:
                continue

            insert_at = min(anchor + delta, len(current))
            splice = apply_spacing(current[:insert_at], answer, current[insert_at:])

            if not await session.fill(splice.before, splice.content, splice.after):
                return finish(session, result, FillStatus.CANCELLED)

            updated = splice.text
            change = len(updated) - len(current)
            result.insertions.append(
                Insertion(index=index, answer=answer, position=len(splice.before), length=change)
            )
            delta += change
            current = updated

        logger.info(f"Batch fill applied {len(result.insertions)}/{context.blank_count} answer(s)")
        return finish(session, result, FillStatus.DONE)
