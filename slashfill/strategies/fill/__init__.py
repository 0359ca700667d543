"""Concrete fill strategy implementations."""

from slashfill.strategies.fill.batch import BatchFillStrategy
from slashfill.strategies.fill.inline import InlineFillStrategy
from slashfill.strategies.fill.sequential import SequentialFillStrategy

__all__ = [
    "BatchFillStrategy",
    "InlineFillStrategy",
    "SequentialFillStrategy",
]
