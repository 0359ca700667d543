"""Shared fixtures for the unit tests."""

from typing import Any

import pytest

from slashfill.engine.animator import TextAnimator
from slashfill.engine.document import DocumentBuffer
from slashfill.engine.models import FillOptions
from slashfill.engine.orchestrator import FillOrchestrator
from slashfill.strategies.fill import BatchFillStrategy
from tests.fakes import FakeConnectivity, FakeTransport


@pytest.fixture
def animator():
    """Animator that never waits between frames."""
    return TextAnimator(tick_ms=0, chunk_size=1)


@pytest.fixture
def options():
    return FillOptions(web_search=False)


@pytest.fixture
def document():
    return DocumentBuffer()


@pytest.fixture
def make_orchestrator(document, animator, options):
    """Build an orchestrator around a FakeTransport answering with ``responses``."""

    def factory(*responses: Any, connected: bool = True, **kwargs: Any):
        transport = FakeTransport(*responses)
        orchestrator = FillOrchestrator(
            document=document,
            transport=transport,
            connectivity=FakeConnectivity(connected=connected),
            batch_strategy=kwargs.pop("batch_strategy", BatchFillStrategy()),
            animator=animator,
            options=options,
            **kwargs,
        )
        return orchestrator, transport

    return factory
