"""
history.py - History store.

Holds the immutable sequence of frames from the most recent successful
invocation. `replace` swaps the whole sequence in one assignment, so a reader
sees either the old history or the new one, never a mix.
"""

import logging
from typing import Iterable, Tuple

from algoviz.errors import IndexOutOfRange, index_out_of_range
from algoviz.replay.frames import Frame

logger = logging.getLogger(__name__)


class HistoryStore:
    def __init__(self):
        self._frames: Tuple[Frame, ...] = ()

    def replace(self, frames: Iterable[Frame]) -> int:
        """Install a new history, discarding the previous one. Returns the new length."""
        self._frames = tuple(frames)
        logger.debug("History replaced, %d frame(s)", len(self._frames))
        return len(self._frames)

    def get(self, index: int) -> Frame:
        """
        Return the frame at `index`.

        Raises:
            IndexOutOfRange: If `index` is outside [0, length-1]. Callers clamp
                first, so this signals a programming defect.
        """
        if not 0 <= index < len(self._frames):
            raise IndexOutOfRange(index_out_of_range(index, len(self._frames)))
        return self._frames[index]

    def length(self) -> int:
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def frames(self) -> Tuple[Frame, ...]:
        return self._frames
