"""
session.py - One visualizer session: store, controller and boundary wired together.

The History Store and the current index are written only through the
controller and the boundary; everything else reads rendered projections.
"""

from typing import Any, Callable, Dict, List, Optional

from algoviz.config import Settings
from algoviz.engine import EngineHandle
from algoviz.errors import VizError
from algoviz.replay.display import RenderedFrame
from algoviz.replay.frames import Frame
from algoviz.replay.history import HistoryStore
from algoviz.replay.invocation import GENERATE_DELAY, InvocationBoundary
from algoviz.replay.playback import TICK_INTERVAL, PlaybackController, Scheduler
from algoviz.replay.render import render_frame


class VisualizerSession:
    def __init__(
        self,
        engine: Optional[EngineHandle],
        *,
        scheduler: Optional[Scheduler] = None,
        tick_interval: float = TICK_INTERVAL,
        generate_delay: float = GENERATE_DELAY,
        on_failure: Optional[Callable[[VizError], None]] = None,
        on_change: Optional[Callable[[PlaybackController], None]] = None
    ):
        self.store = HistoryStore()
        self.controller = PlaybackController(
            self.store,
            scheduler,
            tick_interval=tick_interval,
            on_change=on_change
        )
        self.boundary = InvocationBoundary(
            engine,
            self.controller,
            defer=generate_delay,
            on_failure=on_failure
        )

    @classmethod
    def from_settings(cls, engine: Optional[EngineHandle], settings: Settings, **kwargs: Any) -> "VisualizerSession":
        return cls(
            engine,
            tick_interval=settings.tick_interval,
            generate_delay=settings.generate_delay,
            **kwargs
        )

    async def visualize(self, raw_input: str) -> Optional[List[Frame]]:
        return await self.boundary.invoke(raw_input)

    def current_view(self) -> RenderedFrame:
        return render_frame(self.controller.current_frame)

    def view_at(self, index: int) -> RenderedFrame:
        return render_frame(self.store.get(index))

    def status(self) -> Dict[str, Any]:
        status = self.controller.status()
        status.update({
            "generating": self.boundary.generating,
            "engine_ready": self.boundary.engine_ready,
            "last_error": self.boundary.last_error.to_dict() if self.boundary.last_error else None
        })
        return status

    async def aclose(self) -> None:
        self.controller.close()
        if self.boundary.engine is not None:
            await self.boundary.engine.aclose()
