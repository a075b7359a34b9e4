"""
Engine handles for the external algorithm engine.

The engine is an opaque collaborator: raw input string in, serialized frame
array out. This package only knows how to reach it.
"""

from .handles import (
    CallableEngine,
    EngineHandle,
    HttpEngine,
    RecordedEngine,
    SubprocessEngine,
    load_engine,
)

__all__ = [
    "CallableEngine",
    "EngineHandle",
    "HttpEngine",
    "RecordedEngine",
    "SubprocessEngine",
    "load_engine",
]
