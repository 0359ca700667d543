"""Per-trigger fill session.

A session is handed to a fill strategy for one trigger. It owns the
generation the run was started with and refuses to touch the document once
a newer trigger has superseded it.
"""

import logging
import time
from collections.abc import Callable

from slashfill.engine.animator import TextAnimator
from slashfill.engine.document import DocumentBuffer
from slashfill.engine.models import Completion, FillMode, FillOptions, OrchestratorState
from slashfill.engine.prompts import build_payload, with_date
from slashfill.engine.responses import extract_content, extract_tokens
from slashfill.interfaces.transport import BaseTransport

logger = logging.getLogger(__name__)

StateListener = Callable[[OrchestratorState], None]


class FillSession:
    """Shared operations available to fill strategies during one run."""

    def __init__(
        self,
        document: DocumentBuffer,
        transport: BaseTransport,
        animator: TextAnimator,
        options: FillOptions,
        generation: int,
        is_current: Callable[[], bool],
        on_state: StateListener | None = None,
        today: str | None = None,
    ) -> None:
        self.document = document
        self.animator = animator
        self.options = options
        self.generation = generation
        self.today = today
        self._transport = transport
        self._is_current = is_current
        self._on_state = on_state

    def is_current(self) -> bool:
        """Whether this session still owns the document."""
        return self._is_current()

    def read(self) -> str:
        return self.document.get()

    def write(self, text: str) -> bool:
        """Replace the document text if the session is still current."""
        if not self.is_current():
            return False
        self.document.set(text)
        return True

    def transition(self, state: OrchestratorState) -> None:
        if self._on_state is not None and self.is_current():
            self._on_state(state)

    async def complete(self, system_prompt: str, user_content: str, mode: FillMode) -> Completion:
        """Issue exactly one completion request.

        Args:
            system_prompt: Inline or batch instructions.
            user_content: The bounded context or marked prompt.
            mode: Selects the inline or batch sampling parameters.

        Returns:
            The extracted content with latency and token usage.

        Raises:
            TransportError: If the transport fails.
            MalformedResponseError: If the body has no usable content.
        """
        options = self.options
        if mode == FillMode.BATCH:
            temperature, max_tokens = options.batch_temperature, options.batch_max_tokens
        else:
            temperature, max_tokens = options.inline_temperature, options.inline_max_tokens

        payload = build_payload(
            with_date(system_prompt, self.today),
            user_content,
            model=options.model,
            temperature=temperature,
            max_tokens=max_tokens,
            web_search=options.web_search,
            web_search_max_results=options.web_search_max_results,
        )

        self.transition(OrchestratorState.AWAITING_RESPONSE)
        logger.info(
            f"Requesting {mode.value} completion "
            f"(generation={self.generation}, chars={len(user_content)})"
        )

        started = time.monotonic()
        body = await self._transport.complete(payload)
        latency_ms = (time.monotonic() - started) * 1000

        content = extract_content(body)
        tokens_used = extract_tokens(body, content)
        logger.debug(f"Completion received in {latency_ms:.0f}ms: {content!r}")

        return Completion(content=content, tokens_used=tokens_used, latency_ms=latency_ms)

    async def fill(self, before: str, content: str, after: str) -> bool:
        self.transition(OrchestratorState.STREAMING)
        return await self.animator.fill(self.document, before, content, after, self.is_current)

    async def replace_at_marker(self, content: str, marker: str, at: int | None = None) -> bool:
        self.transition(OrchestratorState.STREAMING)
        return await self.animator.replace_at_marker(
            self.document, content, marker, self.is_current, at=at
        )

    async def erase(self, text: str) -> bool:
        self.transition(OrchestratorState.STREAMING)
        return await self.animator.erase(self.document, text, self.is_current)

    async def pause(self, milliseconds: float) -> None:
        await self.animator.pause(milliseconds)
