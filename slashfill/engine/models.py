"""Fill engine domain models.

Value objects shared by the orchestrator, the fill strategies and the
animator. Everything here is ephemeral: a fill request lives for one
round trip plus its animation and has no identity across edits.
"""

from dataclasses import dataclass, field
from enum import Enum


class FillMode(str, Enum):
    """How a trigger is resolved."""

    INLINE = "inline"
    BATCH = "batch"
    EASTER_EGG = "easter_egg"


class FillStatus(str, Enum):
    """Lifecycle of a single fill request."""

    PENDING = "pending"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class OrchestratorState(str, Enum):
    """States of the fill orchestrator."""

    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
    STREAMING = "streaming"
    FAILED = "failed"


@dataclass
class FillRequest:
    """One fill request, created per trigger event.

    Attributes:
        mode: Inline, batch or easter-egg resolution.
        prompt_text: The user message sent to the model.
        blank_count: Number of answers the request owns.
        status: Current lifecycle status.
    """

    mode: FillMode
    prompt_text: str
    blank_count: int
    status: FillStatus = FillStatus.PENDING


@dataclass(frozen=True)
class Insertion:
    """An answer spliced into the document.

    Attributes:
        index: Position of the blank in document order.
        answer: The sanitized answer text.
        position: Offset where the spaced answer starts in the new text.
        length: Net change in document length caused by the splice.
    """

    index: int
    answer: str
    position: int
    length: int


@dataclass(frozen=True)
class Completion:
    """Text returned by the model plus usage metrics."""

    content: str
    tokens_used: float
    latency_ms: float


@dataclass
class FillResult:
    """Outcome of one orchestrator run."""

    text: str
    mode: FillMode
    status: FillStatus
    answers: list[str] = field(default_factory=list)
    insertions: list[Insertion] = field(default_factory=list)
    latency_ms: float | None = None
    tokens_used: float | None = None
    notice: str | None = None
    request: FillRequest | None = None


@dataclass(frozen=True)
class FillOptions:
    """Request parameters for fill completions."""

    model: str = "anthropic/claude-haiku-4.5"
    inline_temperature: float = 0.2
    inline_max_tokens: int = 64
    batch_temperature: float = 0.1
    batch_max_tokens: int = 256
    web_search: bool = True
    web_search_max_results: int = 3
    prefix_window: int = 1500
    suffix_window: int = 500
    batch_context_limit: int = 6000


@dataclass(frozen=True)
class AnimationJob:
    """A single reveal or erase operation.

    ``before`` and ``after`` surround the animated ``content``; frames are
    built from the first ``revealed`` characters of it.
    """

    before: str
    content: str
    after: str
    tick: float
    chunk_size: int

    def frame(self, revealed: int, cursor: str = "") -> str:
        return self.before + self.content[:revealed] + cursor + self.after

    @property
    def final(self) -> str:
        return self.before + self.content + self.after
