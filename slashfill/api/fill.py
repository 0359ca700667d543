"""Fill and title API routes.

Each request runs one orchestrator pass on a fresh document buffer. The
plain endpoint skips animation delays; the streaming endpoint relays every
buffer frame as newline-delimited JSON.
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from slashfill.api.deps import get_component_factory
from slashfill.api.schemas import (
    FillFrameEvent,
    FillRequestBody,
    FillResponse,
    FillResultEvent,
    TitleRequestBody,
    TitleResponse,
)
from slashfill.core.factory import ComponentFactory
from slashfill.engine.animator import TextAnimator
from slashfill.engine.classifier import find_trigger
from slashfill.engine.document import DocumentBuffer
from slashfill.engine.models import FillResult
from slashfill.engine.orchestrator import FillOrchestrator
from slashfill.engine.responses import MalformedResponseError
from slashfill.interfaces.connectivity import NotConnectedError
from slashfill.interfaces.transport import TransportError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["fill"])


# =============================================================================
# Helper Functions
# =============================================================================


def _build_orchestrator(
    factory: ComponentFactory, document: DocumentBuffer, animator: TextAnimator
) -> FillOrchestrator:
    try:
        return factory.create_orchestrator(document, animator=animator)
    except ValueError as e:
        logger.error(f"Fill backend is misconfigured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e


def _check_trigger(body: FillRequestBody) -> None:
    if body.blanks_only:
        return
    if body.trigger_index is not None:
        if body.text[body.trigger_index:body.trigger_index + 2] != "//":
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="trigger_index does not point at a // trigger",
            )
        return
    if find_trigger(body.text) is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Text contains no // trigger",
        )


async def _run_fill(orchestrator: FillOrchestrator, body: FillRequestBody) -> FillResult:
    if body.blanks_only:
        return await orchestrator.fill_blanks(body.text)
    try:
        return await orchestrator.trigger(body.text, body.trigger_index)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e


async def _stream_fill(
    orchestrator: FillOrchestrator, document: DocumentBuffer, body: FillRequestBody
) -> AsyncIterator[str]:
    frames: asyncio.Queue[str | None] = asyncio.Queue()
    unsubscribe = document.subscribe(frames.put_nowait)

    async def run() -> FillResult:
        try:
            return await _run_fill(orchestrator, body)
        finally:
            frames.put_nowait(None)

    task = asyncio.create_task(run())
    try:
        while True:
            frame = await frames.get()
            if frame is None:
                break
            yield FillFrameEvent(text=frame).model_dump_json() + "\n"

        result = await task
        yield FillResultEvent(result=FillResponse.from_result(result)).model_dump_json() + "\n"
    finally:
        unsubscribe()
        if not task.done():
            task.cancel()


# =============================================================================
# Routes
# =============================================================================


@router.post("/fill", response_model=FillResponse)
async def fill(
    body: FillRequestBody,
    factory: ComponentFactory = Depends(get_component_factory),
) -> FillResponse:
    """Fill the blanks in a note and return the final text."""
    _check_trigger(body)

    document = DocumentBuffer(body.text)
    orchestrator = _build_orchestrator(factory, document, factory.get_animator(tick_ms=0))
    result = await _run_fill(orchestrator, body)

    return FillResponse.from_result(result)


@router.post("/fill/stream")
async def fill_stream(
    body: FillRequestBody,
    factory: ComponentFactory = Depends(get_component_factory),
) -> StreamingResponse:
    """Fill the blanks in a note, streaming every frame of the animation."""
    _check_trigger(body)

    document = DocumentBuffer(body.text)
    orchestrator = _build_orchestrator(factory, document, factory.get_animator())

    return StreamingResponse(
        _stream_fill(orchestrator, document, body),
        media_type="application/x-ndjson",
    )


@router.post("/title", response_model=TitleResponse)
async def title(
    body: TitleRequestBody,
    factory: ComponentFactory = Depends(get_component_factory),
) -> TitleResponse:
    """Generate a short title for a note."""
    try:
        generator = factory.get_title_generator()
        new_title = await generator.request_title(body.text)
    except NotConnectedError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="LLM API Not Connected",
        ) from e
    except MalformedResponseError as e:
        logger.error(f"Title response was malformed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Title response was malformed",
        ) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e
    except TransportError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e

    if not new_title:
        return TitleResponse(title=body.title, changed=False)
    return TitleResponse(title=new_title, changed=new_title != body.title)
