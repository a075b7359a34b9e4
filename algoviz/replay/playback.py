"""
playback.py - Playback controller.

State machine over the history store:

    IDLE     no history (length 0), index is None
    READY    history present, not auto-advancing
    PLAYING  auto-advancing one frame per tick

TIMER INVARIANT:
At most one tick is scheduled at any time. The tick is cancelled whenever the
state that drives it changes: pause, a newly scheduled tick, a history replace,
or close(). A tick that fires after cancellation does nothing.

Policies where the transitions leave a choice:
- play() at the final index is a no-op; nothing is scheduled.
- Stepping or scrubbing while PLAYING keeps playing and restarts the countdown
  from the new index.
- A tick that finds the index already at the final frame stops playback
  without advancing.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Protocol

from algoviz.replay.frames import Frame
from algoviz.replay.history import HistoryStore

logger = logging.getLogger(__name__)

TICK_INTERVAL = 0.4  # seconds between auto-advances


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class AsyncioScheduler:
    """Schedules callbacks on the running asyncio loop (or a fixed one)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class TickTimer:
    """
    Single-slot cancellable timer.

    start() always cancels whatever was pending first. Each start gets a fresh
    token; a fired callback whose token is stale is dropped, which covers
    schedulers that cannot retract a callback already queued for execution.
    """

    def __init__(self, scheduler: Scheduler, interval: float):
        self.interval = interval
        self._scheduler = scheduler
        self._handle: Optional[Cancellable] = None
        self._token = 0

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def start(self, callback: Callable[[], None]) -> None:
        self.cancel()
        token = self._token

        def fire() -> None:
            if token != self._token:
                return
            self._handle = None
            callback()

        self._handle = self._scheduler.call_later(self.interval, fire)

    def cancel(self) -> None:
        self._token += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class PlaybackState(str, Enum):
    IDLE = "idle"
    READY = "ready"
    PLAYING = "playing"


class PlaybackController:
    """
    Navigation, auto-advance and scrubbing over a HistoryStore.

    The controller is the only writer of the current index. `on_change`, when
    given, is called after every transition that changes index or state.
    """

    def __init__(
        self,
        store: HistoryStore,
        scheduler: Optional[Scheduler] = None,
        *,
        tick_interval: float = TICK_INTERVAL,
        on_change: Optional[Callable[["PlaybackController"], None]] = None
    ):
        self.store = store
        self._timer = TickTimer(scheduler or AsyncioScheduler(), tick_interval)
        self._on_change = on_change
        if len(store):
            self._state, self._index = PlaybackState.READY, 0
        else:
            self._state, self._index = PlaybackState.IDLE, None

    # --- Read side ---

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def index(self) -> Optional[int]:
        return self._index

    @property
    def length(self) -> int:
        return len(self.store)

    @property
    def is_playing(self) -> bool:
        return self._state == PlaybackState.PLAYING

    @property
    def tick_pending(self) -> bool:
        return self._timer.armed

    @property
    def current_frame(self) -> Optional[Frame]:
        if self._index is None:
            return None
        return self.store.get(self._index)

    def status(self) -> Dict[str, Any]:
        return {
            "state": self._state.value,
            "index": self._index,
            "length": self.length,
            "is_playing": self.is_playing
        }

    # --- Transitions ---

    def load(self, frames: Iterable[Frame]) -> int:
        """Replace the history and reset to frame 0 (READY), or IDLE if empty."""
        self._timer.cancel()
        length = self.store.replace(frames)
        if length:
            self._state, self._index = PlaybackState.READY, 0
        else:
            self._state, self._index = PlaybackState.IDLE, None
        logger.info("Loaded history with %d frame(s)", length)
        self._notify()
        return length

    def step_forward(self) -> None:
        if self._index is not None:
            self._move_to(self._index + 1)

    def step_back(self) -> None:
        if self._index is not None:
            self._move_to(self._index - 1)

    def scrub_to(self, index: int) -> None:
        if self._index is not None:
            self._move_to(index)

    def play(self) -> bool:
        """Start auto-advancing. Returns False when there is nothing left to play."""
        if self._state != PlaybackState.READY or self._index >= self.length - 1:
            return False
        self._state = PlaybackState.PLAYING
        self._timer.start(self._tick)
        self._notify()
        return True

    def pause(self) -> None:
        if self._state != PlaybackState.PLAYING:
            return
        self._timer.cancel()
        self._state = PlaybackState.READY
        self._notify()

    def toggle(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def close(self) -> None:
        """Tear down: cancel any pending tick and stop playing."""
        self._timer.cancel()
        if self._state == PlaybackState.PLAYING:
            self._state = PlaybackState.READY

    # --- Internals ---

    def _clamp(self, index: int) -> int:
        return max(0, min(index, self.length - 1))

    def _move_to(self, index: int) -> None:
        target = self._clamp(index)
        if target == self._index:
            return
        self._index = target
        if self._state == PlaybackState.PLAYING:
            self._timer.start(self._tick)
        self._notify()

    def _tick(self) -> None:
        if self._state != PlaybackState.PLAYING:
            return
        last = self.length - 1
        if self._index < last:
            self._index += 1
        if self._index >= last:
            self._state = PlaybackState.READY
            logger.debug("Playback reached final frame %d", self._index)
        else:
            self._timer.start(self._tick)
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
