"""Test configuration and fixtures."""

import json
from typing import Any, Callable, Dict, List

import pytest

from algoviz.replay.frames import Frame, parse_history


class ManualHandle:
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic stand-in for the event loop clock. Time only moves on advance()."""

    def __init__(self):
        self.now = 0.0
        self.handles: List[ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.due <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self.handles.remove(handle)
            self.now = handle.due
            handle.callback()
        self.now = target


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


def _frame_dicts(count: int) -> List[Dict[str, Any]]:
    return [
        {
            "message": f"step {i}",
            "objects": {
                "i": {"type": "scalar", "data": i, "highlights": {}},
                "arr": {"type": "vector", "data": list(range(i + 1)), "highlights": {str(i): "active"}},
            },
        }
        for i in range(count)
    ]


@pytest.fixture
def history_json() -> Callable[[int], str]:
    """Serialized engine output with `count` frames."""
    def build(count: int) -> str:
        return json.dumps(_frame_dicts(count))
    return build


@pytest.fixture
def make_frames(history_json) -> Callable[[int], List[Frame]]:
    def build(count: int) -> List[Frame]:
        return parse_history(history_json(count))
    return build
