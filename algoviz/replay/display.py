"""
display.py - Display model produced by the renderer.

A display model is ephemeral: recomputed on every render, never cached, never
aliased back into Frame data. Cells carry copies of their values.
"""

import copy
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from algoviz.errors import VizError
from algoviz.replay.frames import HighlightState


class Layout(str, Enum):
    """How a rendered object arranges its cells."""
    CELL = "cell"
    SEQUENCE = "sequence"
    SET = "set"
    GRID = "grid"
    MAPPING = "mapping"
    STACK = "stack"
    QUEUE = "queue"
    HEAP = "heap"
    TUPLE = "tuple"
    PLACEHOLDER = "placeholder"


def as_text(value: Any) -> str:
    """
    Stringify a value the way the engine stringifies highlight keys.

    Booleans become `true`/`false`, integral floats lose their fraction, other
    scalars use `str()`, and anything nested is compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float, str)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), default=str)


def sort_key(value: Any) -> Tuple[int, Any, str]:
    """Total order over JSON values: numbers, then strings, then everything else."""
    if isinstance(value, (int, float)):
        return (0, value, "")
    if isinstance(value, str):
        return (1, 0, value)
    return (2, 0, json.dumps(value, sort_keys=True, default=str))


@dataclass(frozen=True)
class Cell:
    """One displayed leaf value paired with its resolved highlight state."""
    value: Any
    text: str
    state: HighlightState = HighlightState.DEFAULT
    label: Optional[str] = None  # index under sequence cells, key for mapping entries

    @classmethod
    def of(cls, value: Any, state: HighlightState = HighlightState.DEFAULT, *,
           label: Optional[str] = None, text: Optional[str] = None) -> "Cell":
        if isinstance(value, (list, dict)):
            value = copy.deepcopy(value)
        return cls(
            value=value,
            text=as_text(value) if text is None else text,
            state=state,
            label=label
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "text": self.text,
            "state": self.state.value,
            "label": self.label
        }


@dataclass(frozen=True)
class RenderedObject:
    """Display structure for one named object."""
    name: str
    type: str
    layout: Layout
    rows: Tuple[Tuple[Cell, ...], ...] = ()
    captions: Tuple[str, ...] = ()
    error: Optional[VizError] = None

    @property
    def title(self) -> str:
        return f"{self.name} ({self.type})"

    @property
    def placeholder(self) -> bool:
        return self.error is not None

    @property
    def cells(self) -> Tuple[Cell, ...]:
        """All cells in display order, rows flattened."""
        return tuple(cell for row in self.rows for cell in row)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "title": self.title,
            "layout": self.layout.value,
            "rows": [[cell.to_dict() for cell in row] for row in self.rows],
            "captions": list(self.captions),
            "placeholder": self.placeholder,
            "error": self.error.to_dict() if self.error else None
        }


@dataclass(frozen=True)
class RenderedFrame:
    """Display structure for a whole frame, objects in engine order."""
    message: str
    objects: Tuple[RenderedObject, ...] = ()
    skipped: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "objects": [obj.to_dict() for obj in self.objects],
            "skipped": list(self.skipped)
        }
