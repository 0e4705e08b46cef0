"""Streaming schemas for real-time token delivery.

Defines the StreamChunk model produced by the delta accumulator and the
DecodedEvent variant produced for every framed SSE line.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StreamChunk(BaseModel):
    """A single chunk of streaming output from the assistant."""

    delta: str = Field(description="New text in this chunk")
    accumulated: str = Field(description="Full text accumulated so far")
    fragment_count: int = Field(ge=0, description="Running count of fragments received")
    is_complete: bool = Field(
        default=False, description="True on final chunk"
    )


class EventKind(StrEnum):
    """Classification of a single SSE line."""

    DATA = "data"
    TERMINATOR = "terminator"
    IGNORABLE = "ignorable"


class DecodedEvent(BaseModel):
    """One classified SSE line. ``payload`` is set only for DATA events."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    payload: Any = None


IGNORABLE = DecodedEvent(kind=EventKind.IGNORABLE)
TERMINATOR = DecodedEvent(kind=EventKind.TERMINATOR)
