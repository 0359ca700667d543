"""Fill orchestration.

The orchestrator watches document edits for a ``//`` trigger, classifies it
and hands the run to the inline or batch fill strategy. Every trigger bumps
a generation counter; a run only writes to the document while its
generation is still the newest one, so re-triggering mid-animation makes
the older run stop instead of racing it.

State machine::

    IDLE -> AWAITING_RESPONSE -> STREAMING -> IDLE
                              \\-> FAILED  -> IDLE
"""

import logging
from collections.abc import Callable

from slashfill.engine.animator import TextAnimator
from slashfill.engine.classifier import Classification, classify, find_trigger
from slashfill.engine.document import DocumentBuffer
from slashfill.engine.models import (
    FillMode,
    FillOptions,
    FillRequest,
    FillResult,
    FillStatus,
    OrchestratorState,
)
from slashfill.engine.prompts import today_string
from slashfill.engine.session import FillSession
from slashfill.interfaces.connectivity import BaseConnectivity
from slashfill.interfaces.fill_strategy import BaseFillStrategy
from slashfill.interfaces.transport import BaseTransport
from slashfill.strategies.fill.inline import InlineFillStrategy

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]
StateListener = Callable[[OrchestratorState], None]

NOT_CONNECTED_TITLE = "LLM API Not Connected"
NOT_CONNECTED_MESSAGE = "Connect an API key to fill blanks."


class FillOrchestrator:
    """Coordinates classification, completion and animation for triggers.

    Example:
        ```python
        document = DocumentBuffer()
        orchestrator = FillOrchestrator(
            document=document,
            transport=transport,
            connectivity=connectivity,
            batch_strategy=BatchFillStrategy(),
        )
        result = await orchestrator.handle_text_change("The capital of France is /.//")
        print(result.text)  # "The capital of France is Paris."
        ```
    """

    def __init__(
        self,
        document: DocumentBuffer,
        transport: BaseTransport,
        connectivity: BaseConnectivity,
        batch_strategy: BaseFillStrategy,
        animator: TextAnimator | None = None,
        options: FillOptions | None = None,
        inline_strategy: BaseFillStrategy | None = None,
        notifier: Notifier | None = None,
        on_state_change: StateListener | None = None,
        easter_egg_message: str = "Boing boing!",
        easter_egg_delay_ms: float = 250,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            document: Buffer the fills are written to.
            transport: Sends chat completion requests.
            connectivity: Reports whether requests may be sent.
            batch_strategy: Resolves batch triggers.
            animator: Reveals and erases text. Defaults to 30ms ticks.
            options: Model and context parameters.
            inline_strategy: Resolves inline triggers.
            notifier: Receives ``(title, message)`` for user-facing alerts.
            on_state_change: Receives every state transition.
            easter_egg_message: Text shown for a trigger on an empty note.
            easter_egg_delay_ms: How long the easter egg stays visible.
        """
        self.document = document
        self.transport = transport
        self.connectivity = connectivity
        self.batch_strategy = batch_strategy
        self.inline_strategy = inline_strategy or InlineFillStrategy()
        self.animator = animator or TextAnimator()
        self.options = options or FillOptions()
        self.easter_egg_message = easter_egg_message
        self.easter_egg_delay_ms = easter_egg_delay_ms

        self._notifier = notifier
        self._on_state_change = on_state_change
        self._state = OrchestratorState.IDLE
        self._generation = 0

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def generation(self) -> int:
        """Number of runs started so far."""
        return self._generation

    # =========================================================================
    # Entry points
    # =========================================================================

    async def handle_text_change(self, new_text: str) -> FillResult | None:
        """Apply an edit to the document and run a fill if it holds a trigger.

        Returns:
            The fill outcome, or None when the edit contained no trigger.
        """
        self.document.set(new_text)
        trigger_index = find_trigger(new_text)
        if trigger_index is None:
            return None
        return await self.trigger(new_text, trigger_index)

    async def trigger(self, text: str | None = None, trigger_index: int | None = None) -> FillResult:
        """Resolve the trigger in ``text`` (the live document by default).

        Raises:
            ValueError: If the text contains no trigger.
        """
        text = self.document.get() if text is None else text
        classification = classify(text, trigger_index)
        logger.info(
            f"Trigger at {classification.trigger_index} classified as "
            f"{classification.mode.value}"
        )
        return await self._run(classification, include_trigger=True)

    async def fill_blanks(self, text: str | None = None) -> FillResult:
        """Batch-fill every outstanding ``/`` blank without a trigger."""
        text = self.document.get() if text is None else text
        classification = Classification(FillMode.BATCH, text, "", trigger_index=len(text))
        return await self._run(classification, include_trigger=False)

    # =========================================================================
    # Run lifecycle
    # =========================================================================

    async def _run(self, classification: Classification, include_trigger: bool) -> FillResult:
        self._generation += 1
        generation = self._generation
        session = self._session(generation)

        if not self.connectivity.connected:
            return self._refuse(session, classification, include_trigger)

        try:
            match classification.mode:
                case FillMode.EASTER_EGG:
                    result = await self._easter_egg(session, classification)
                case FillMode.INLINE:
                    result = await self.inline_strategy.fill(
                        session, classification.prefix, classification.suffix
                    )
                case _:
                    result = await self.batch_strategy.fill(
                        session,
                        classification.prefix,
                        classification.suffix,
                        include_trigger=include_trigger,
                    )
        finally:
            if generation == self._generation:
                self._set_state(OrchestratorState.IDLE)

        logger.info(
            f"Fill {result.status.value} (mode={result.mode.value}, "
            f"generation={generation}, latency_ms={result.latency_ms}, "
            f"tokens={result.tokens_used})"
        )
        return result

    def _refuse(
        self, session: FillSession, classification: Classification, include_trigger: bool
    ) -> FillResult:
        logger.warning("Fill requested while not connected")
        raw_text = classification.raw_text if include_trigger else classification.prefix
        session.write(raw_text)
        if self._notifier is not None:
            self._notifier(NOT_CONNECTED_TITLE, NOT_CONNECTED_MESSAGE)
        return FillResult(
            text=session.read(),
            mode=classification.mode,
            status=FillStatus.FAILED,
            notice=NOT_CONNECTED_TITLE,
        )

    async def _easter_egg(self, session: FillSession, classification: Classification) -> FillResult:
        message = self.easter_egg_message
        request = FillRequest(FillMode.EASTER_EGG, prompt_text="", blank_count=0)
        result = FillResult(
            text=classification.prefix + classification.suffix,
            mode=FillMode.EASTER_EGG,
            status=FillStatus.STREAMING,
            answers=[message],
            request=request,
        )

        request.status = FillStatus.STREAMING
        completed = await session.fill(classification.prefix, message, classification.suffix)
        if completed:
            await session.pause(self.easter_egg_delay_ms)
            completed = await session.erase(message)

        result.status = FillStatus.DONE if completed else FillStatus.CANCELLED
        request.status = result.status
        result.text = session.read()
        return result

    def _session(self, generation: int) -> FillSession:
        return FillSession(
            document=self.document,
            transport=self.transport,
            animator=self.animator,
            options=self.options,
            generation=generation,
            is_current=lambda: generation == self._generation,
            on_state=self._set_state,
            today=today_string(),
        )

    def _set_state(self, state: OrchestratorState) -> None:
        if state == self._state:
            return
        logger.debug(f"State {self._state.value} -> {state.value}")
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)
