"""
text.py - Plain-text view of rendered frames, used by the CLI.
"""

from typing import List, Optional

from algoviz.replay.display import Cell, Layout, RenderedFrame, RenderedObject
from algoviz.replay.frames import HighlightState


def format_cell(cell: Cell) -> str:
    if cell.state == HighlightState.DEFAULT:
        return f"[{cell.text}]"
    return f"[{cell.text}:{cell.state.value}]"


def _row(cells) -> str:
    return " ".join(format_cell(cell) for cell in cells)


def format_object(obj: RenderedObject) -> List[str]:
    lines = [obj.title]
    if obj.placeholder:
        lines.append(f"  <empty: {obj.error.message}>")
        return lines

    if obj.layout == Layout.SEQUENCE:
        lines.append("  " + " ".join(f"{cell.label}:{format_cell(cell)}" for cell in obj.cells))
    elif obj.layout == Layout.MAPPING:
        lines.extend(f"  {cell.label} -> {format_cell(cell)}" for cell in obj.cells)
    elif obj.layout == Layout.GRID:
        lines.extend("  " + _row(row) for row in obj.rows)
    elif obj.layout == Layout.STACK:
        lines.append(f"  {obj.captions[0]}")
        lines.extend("  " + format_cell(cell) for cell in obj.cells)
    elif obj.layout == Layout.QUEUE:
        front, back = obj.captions
        lines.append(f"  {front} {_row(obj.cells)} {back}")
    elif obj.layout == Layout.HEAP:
        lines.append(f"  {obj.captions[0]} {_row(obj.cells)}")
    else:
        lines.append("  " + _row(obj.cells))
    return lines


def format_frame(frame: RenderedFrame, index: Optional[int] = None, length: Optional[int] = None) -> str:
    """Render a frame as text: header, status message, then each object."""
    lines = []
    if index is not None and length is not None:
        lines.append(f"--- frame {index + 1}/{length} ---")
    lines.append(frame.message)
    for obj in frame.objects:
        lines.extend(format_object(obj))
    return "\n".join(lines)
