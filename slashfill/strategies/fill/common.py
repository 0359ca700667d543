"""Helpers shared by the fill strategies."""

from slashfill.engine.models import FillResult, FillStatus, OrchestratorState
from slashfill.engine.session import FillSession


def finish(session: FillSession, result: FillResult, status: FillStatus) -> FillResult:
    """Stamp the final status on a result and snapshot the document text."""
    if status == FillStatus.FAILED:
        session.transition(OrchestratorState.FAILED)
    result.status = status
    if result.request is not None:
        result.request.status = status
    result.text = session.read()
    return result
