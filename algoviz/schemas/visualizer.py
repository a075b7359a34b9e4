"""
visualizer.py - Pydantic schemas for the visualizer API.

Rendered payloads mirror the display model one to one. No derived fields
beyond what the renderer already computed.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PlaybackStateSchema(str, Enum):
    """Playback state enum for API responses."""
    IDLE = "idle"
    READY = "ready"
    PLAYING = "playing"


class InvocationStatusSchema(str, Enum):
    """Outcome of a visualize request."""
    OK = "ok"
    FAILED = "failed"
    SUPERSEDED = "superseded"


class ErrorSchema(BaseModel):
    """Machine-readable error."""
    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class CellSchema(BaseModel):
    """One displayed value with its resolved highlight state."""
    value: Any = None
    text: str
    state: str
    label: str | None = None


class RenderedObjectSchema(BaseModel):
    name: str
    type: str
    title: str
    layout: str
    rows: list[list[CellSchema]]
    captions: list[str] = Field(default_factory=list)
    placeholder: bool = False
    error: ErrorSchema | None = None


class RenderedFrameSchema(BaseModel):
    message: str
    objects: list[RenderedObjectSchema]
    skipped: list[str] = Field(default_factory=list)


class PlaybackStatusSchema(BaseModel):
    state: PlaybackStateSchema
    index: int | None = None
    length: int
    is_playing: bool
    generating: bool
    engine_ready: bool
    last_error: ErrorSchema | None = None

    model_config = ConfigDict(use_enum_values=True)


class FrameViewSchema(BaseModel):
    """A rendered frame together with the playback position it was taken at."""
    playback: PlaybackStatusSchema
    frame: RenderedFrameSchema


class VisualizeRequest(BaseModel):
    raw_input: str = Field(..., description="Universal input text, passed to the engine verbatim")


class VisualizeResponse(BaseModel):
    status: InvocationStatusSchema
    frame_count: int = Field(0, description="Frames in the installed history (0 unless status is ok)")
    playback: PlaybackStatusSchema
    error: ErrorSchema | None = None

    model_config = ConfigDict(use_enum_values=True)


class ScrubRequest(BaseModel):
    index: int = Field(..., description="Target frame index, clamped to the history bounds")
