"""
invocation.py - Invocation boundary between the UI and the external engine.

LAST-INVOCATION-WINS:
Every invoke() takes a new generation number. Only the newest generation may
touch the history or report a failure; results and failures of superseded
invocations are logged and dropped, whatever order they complete in.

FAILURE CONTAINMENT:
Engine exceptions, malformed output and empty output never propagate. They are
reported through `on_failure`, the previous history stays on screen, and the
boundary returns to the non-generating state.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from algoviz.engine import EngineHandle
from algoviz.errors import EngineFailure, VizError, engine_raised, engine_unavailable
from algoviz.replay.frames import Frame, parse_history
from algoviz.replay.playback import PlaybackController

logger = logging.getLogger(__name__)

GENERATE_DELAY = 0.05  # seconds the "generating" state is shown before the engine runs


class InvocationBoundary:
    def __init__(
        self,
        engine: Optional[EngineHandle],
        controller: PlaybackController,
        *,
        defer: float = GENERATE_DELAY,
        on_failure: Optional[Callable[[VizError], None]] = None
    ):
        self.engine = engine
        self.controller = controller
        self.defer = defer
        self.on_failure = on_failure
        self.last_error: Optional[VizError] = None
        self._generation = 0
        self._generating = False

    @property
    def generating(self) -> bool:
        return self._generating

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def engine_ready(self) -> bool:
        return self.engine is not None

    async def invoke(self, raw_input: str) -> Optional[List[Frame]]:
        """
        Run the engine on `raw_input` and install the resulting history.

        Returns:
            The installed frames, or None when the invocation failed or was
            superseded by a newer one.
        """
        self._generation += 1
        generation = self._generation
        self._generating = True
        self.controller.pause()

        try:
            # Yield first so the generating state is observable before the engine runs.
            await asyncio.sleep(self.defer)
            if generation != self._generation:
                logger.info("Invocation %d superseded before the engine ran", generation)
                return None
            frames = await self._run_engine(raw_input)
        except EngineFailure as e:
            if generation == self._generation:
                self._report(e.error)
            else:
                logger.info("Dropping failure of superseded invocation %d: %s", generation, e.error.message)
            return None
        finally:
            if generation == self._generation:
                self._generating = False

        if generation != self._generation:
            logger.info("Dropping result of superseded invocation %d", generation)
            return None

        self.last_error = None
        self.controller.load(frames)
        return frames

    async def _run_engine(self, raw_input: str) -> List[Frame]:
        if self.engine is None:
            raise EngineFailure(engine_unavailable())
        try:
            payload = await self.engine.visualize(raw_input)
        except EngineFailure:
            raise
        except Exception as e:
            logger.exception("Engine raised during invocation")
            raise EngineFailure(engine_raised(e)) from e
        return parse_history(payload)

    def _report(self, error: VizError) -> None:
        self.last_error = error
        logger.warning("Invocation failed [%s]: %s", error.code.value, error.message)
        if self.on_failure is not None:
            self.on_failure(error)
