"""Placeholder fill engine.

The orchestrator lives in :mod:`slashfill.engine.orchestrator` and is
imported from there.
"""

from slashfill.engine.animator import TextAnimator
from slashfill.engine.classifier import Classification, classify, find_trigger
from slashfill.engine.context import build_batch_context, build_inline_context
from slashfill.engine.document import DocumentBuffer
from slashfill.engine.models import (
    FillMode,
    FillOptions,
    FillRequest,
    FillResult,
    FillStatus,
    Insertion,
    OrchestratorState,
)
from slashfill.engine.sanitizer import sanitize
from slashfill.engine.scanner import scan

__all__ = [
    "TextAnimator",
    "Classification",
    "classify",
    "find_trigger",
    "build_batch_context",
    "build_inline_context",
    "DocumentBuffer",
    "FillMode",
    "FillOptions",
    "FillRequest",
    "FillResult",
    "FillStatus",
    "Insertion",
    "OrchestratorState",
    "sanitize",
    "scan",
]
