"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from typing import Literal

from pydantic import BaseModel, Field

from slashfill.engine.models import FillMode, FillResult, FillStatus


# =============================================================================
# Fill Schemas
# =============================================================================


class FillRequestBody(BaseModel):
    """Request schema for filling the blanks in a note."""

    text: str = Field(description="Note text containing a // trigger or / blanks")
    trigger_index: int | None = Field(
        default=None,
        ge=0,
        description="Offset of the trigger. Defaults to the first unescaped //.",
    )
    blanks_only: bool = Field(
        default=False,
        description="Fill / blanks without a trigger.",
    )


class InsertionResponse(BaseModel):
    """One answer spliced into the note."""

    index: int
    answer: str
    position: int
    length: int


class FillResponse(BaseModel):
    """Response schema for a completed fill."""

    text: str
    mode: FillMode
    status: FillStatus
    answers: list[str] = Field(default_factory=list)
    insertions: list[InsertionResponse] = Field(default_factory=list)
    latency_ms: float | None = None
    tokens_used: float | None = None
    notice: str | None = None

    @classmethod
    def from_result(cls, result: FillResult) -> "FillResponse":
        return cls(
            text=result.text,
            mode=result.mode,
            status=result.status,
            answers=result.answers,
            insertions=[
                InsertionResponse(
                    index=insertion.index,
                    answer=insertion.answer,
                    position=insertion.position,
                    length=insertion.length,
                )
                for insertion in result.insertions
            ],
            latency_ms=result.latency_ms,
            tokens_used=result.tokens_used,
            notice=result.notice,
        )


class FillFrameEvent(BaseModel):
    """One document frame in a streamed fill."""

    type: Literal["frame"] = "frame"
    text: str


class FillResultEvent(BaseModel):
    """Final event of a streamed fill."""

    type: Literal["result"] = "result"
    result: FillResponse


# =============================================================================
# Title Schemas
# =============================================================================


class TitleRequestBody(BaseModel):
    """Request schema for generating a note title."""

    text: str = Field(min_length=1, description="Note text to summarize")
    title: str = Field(default="", description="Current title of the note")


class TitleResponse(BaseModel):
    """Response schema for a generated title."""

    title: str
    changed: bool


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    error_code: str | None = None
