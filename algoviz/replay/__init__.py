"""
Replay Core Package.

Turns an engine's frame sequence into navigable, renderable history.

Core Principles:
- READ-ONLY: Frames are never mutated after parsing
- LITERAL: Render exactly what the engine recorded; no algorithm interpretation
- STABLE HIGHLIGHTS: Highlight keys address elements, never display positions
- CONTAINED FAILURES: A bad object costs one placeholder, a bad invocation costs nothing
- DETERMINISTIC: Same frame in, same display model out
"""

from .display import Cell, Layout, RenderedFrame, RenderedObject
from .frames import Frame, HighlightState, TypeTag, VisualObject, parse_history
from .history import HistoryStore
from .invocation import InvocationBoundary
from .playback import AsyncioScheduler, PlaybackController, PlaybackState, TickTimer
from .registry import REGISTRY, TypeSpec
from .render import EMPTY_HISTORY_MESSAGE, render_frame, render_object
from .session import VisualizerSession

__all__ = [
    "AsyncioScheduler",
    "Cell",
    "EMPTY_HISTORY_MESSAGE",
    "Frame",
    "HighlightState",
    "HistoryStore",
    "InvocationBoundary",
    "Layout",
    "PlaybackController",
    "PlaybackState",
    "REGISTRY",
    "RenderedFrame",
    "RenderedObject",
    "TickTimer",
    "TypeSpec",
    "TypeTag",
    "VisualObject",
    "VisualizerSession",
    "parse_history",
    "render_frame",
    "render_object",
]
