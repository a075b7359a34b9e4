"""
registry.py - Type registry: TypeTag -> (shape validator, render strategy).

LOCK-STEP INVARIANT:
Every TypeTag has exactly one entry here. Adding a tag means adding one row to
REGISTRY; the module refuses to import if the table and the enum disagree.

ADDRESSING INVARIANT:
Highlight keys are addressing keys, not display positions. Containers displayed
out of storage order (sets, maps, stacks, priority queues) resolve highlights by
value or by role ("top", "front", "back"), so re-sorting for humans never moves
a highlight onto the wrong element.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from algoviz.replay.display import Cell, Layout, as_text, sort_key
from algoviz.replay.frames import HighlightState, TypeTag

Highlights = Mapping[str, str]
Rows = Tuple[Tuple[Cell, ...], ...]


def _state(highlights: Highlights, key: Optional[str]) -> HighlightState:
    if key is None:
        return HighlightState.DEFAULT
    return HighlightState.resolve(highlights.get(key))


# --- Shape validators: raise ValueError with the reason on mismatch ---

def _kind(data: Any) -> str:
    return "null" if data is None else type(data).__name__


def check_number(data: Any) -> None:
    if isinstance(data, bool) or not isinstance(data, (int, float)):
        raise ValueError(f"expected a number, got {_kind(data)}")


def check_text(data: Any) -> None:
    if not isinstance(data, str):
        raise ValueError(f"expected a string, got {_kind(data)}")


def check_boolean(data: Any) -> None:
    if not isinstance(data, bool):
        raise ValueError(f"expected a boolean, got {_kind(data)}")


def check_sequence(data: Any) -> None:
    if not isinstance(data, list):
        raise ValueError(f"expected an array, got {_kind(data)}")


def check_grid(data: Any) -> None:
    check_sequence(data)
    for r, row in enumerate(data):
        if not isinstance(row, list):
            raise ValueError(f"row {r} is {_kind(row)}, expected an array")


def check_entries(data: Any) -> None:
    check_sequence(data)
    for i, entry in enumerate(data):
        if not isinstance(entry, dict) or "key" not in entry or "value" not in entry:
            raise ValueError(f"entry {i} is not a {{key, value}} pair")


def check_couple(data: Any) -> None:
    check_sequence(data)
    if len(data) != 2:
        raise ValueError(f"expected 2 elements, got {len(data)}")


# --- Render strategies: pure projections of (data, highlights) into rows ---

def render_scalar(data: Any, highlights: Highlights) -> Rows:
    return ((Cell.of(data, _state(highlights, "0")),),)


def render_string(data: str, highlights: Highlights) -> Rows:
    return ((Cell.of(data, _state(highlights, "0"), text=f'"{data}"'),),)


def render_sequence(data: list, highlights: Highlights) -> Rows:
    return (tuple(
        Cell.of(value, _state(highlights, str(i)), label=str(i))
        for i, value in enumerate(data)
    ),)


def render_set(data: list, highlights: Highlights) -> Rows:
    # Sorted position != storage position, so the value itself is the key.
    return (tuple(
        Cell.of(value, _state(highlights, as_text(value)))
        for value in sorted(data, key=sort_key)
    ),)


def render_matrix(data: list, highlights: Highlights) -> Rows:
    return tuple(
        tuple(Cell.of(value, _state(highlights, f"{r}-{c}")) for c, value in enumerate(row))
        for r, row in enumerate(data)
    )


def render_mapping(data: list, highlights: Highlights) -> Rows:
    entries = sorted(data, key=lambda entry: sort_key(entry["key"]))
    return (tuple(
        Cell.of(entry["value"], _state(highlights, as_text(entry["key"])), label=as_text(entry["key"]))
        for entry in entries
    ),)


def render_stack(data: list, highlights: Highlights) -> Rows:
    return (tuple(
        Cell.of(value, _state(highlights, "top" if i == 0 else None))
        for i, value in enumerate(reversed(data))
    ),)


def render_queue(data: list, highlights: Highlights) -> Rows:
    last = len(data) - 1

    def role(i: int) -> Optional[str]:
        if i == 0:
            return "front"
        if i == last:
            return "back"
        return None

    return (tuple(Cell.of(value, _state(highlights, role(i))) for i, value in enumerate(data)),)


def render_heap(data: list, highlights: Highlights) -> Rows:
    return (tuple(
        Cell.of(value, _state(highlights, "top" if i == 0 else None))
        for i, value in enumerate(sorted(data, key=sort_key, reverse=True))
    ),)


def render_tuple(data: list, highlights: Highlights) -> Rows:
    return (tuple(Cell.of(value, _state(highlights, str(i))) for i, value in enumerate(data)),)


@dataclass(frozen=True)
class TypeSpec:
    """One registry row."""
    validate: Callable[[Any], None]
    strategy: Callable[[Any, Highlights], Rows]
    layout: Layout
    captions: Tuple[str, ...] = ()


_SEQUENCE = TypeSpec(check_sequence, render_sequence, Layout.SEQUENCE)
_SET = TypeSpec(check_sequence, render_set, Layout.SET)
_MAPPING = TypeSpec(check_entries, render_mapping, Layout.MAPPING)

REGISTRY: Dict[TypeTag, TypeSpec] = {
    TypeTag.SCALAR: TypeSpec(check_number, render_scalar, Layout.CELL),
    TypeTag.STRING: TypeSpec(check_text, render_string, Layout.CELL),
    TypeTag.BOOL: TypeSpec(check_boolean, render_scalar, Layout.CELL),
    TypeTag.VECTOR: _SEQUENCE,
    TypeTag.LIST: _SEQUENCE,
    TypeTag.DEQUE: _SEQUENCE,
    TypeTag.SET: _SET,
    TypeTag.MULTISET: _SET,
    TypeTag.UNORDERED_SET: _SET,
    TypeTag.UNORDERED_MULTISET: _SET,
    TypeTag.MATRIX: TypeSpec(check_grid, render_matrix, Layout.GRID),
    TypeTag.MAP: _MAPPING,
    TypeTag.MULTIMAP: _MAPPING,
    TypeTag.UNORDERED_MAP: _MAPPING,
    TypeTag.UNORDERED_MULTIMAP: _MAPPING,
    TypeTag.STACK: TypeSpec(check_sequence, render_stack, Layout.STACK, ("TOP",)),
    TypeTag.QUEUE: TypeSpec(check_sequence, render_queue, Layout.QUEUE, ("FRONT", "BACK")),
    TypeTag.PRIORITY_QUEUE: TypeSpec(check_sequence, render_heap, Layout.HEAP, ("MAX HEAP (TOP)",)),
    TypeTag.PAIR: TypeSpec(check_couple, render_tuple, Layout.TUPLE),
    TypeTag.TUPLE: TypeSpec(check_sequence, render_tuple, Layout.TUPLE),
}

_unregistered = set(TypeTag) - set(REGISTRY)
if _unregistered:
    raise RuntimeError(f"Type registry out of lock-step, missing: {sorted(t.value for t in _unregistered)}")
