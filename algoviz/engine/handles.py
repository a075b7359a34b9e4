"""
handles.py - Engine handles.

An engine turns the raw "universal input" string into a JSON array of frames.
The core treats it as opaque: it only sees `visualize(raw_input) -> str` and the
failures that call can raise.

A handle is created once at startup by load_engine(), passed explicitly to the
invocation boundary, and closed at shutdown. Nothing reassigns it implicitly.
"""

import asyncio
import inspect
import logging
import shlex
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence, Union

import httpx

from algoviz.config import Settings
from algoviz.errors import EngineFailure, engine_exit_status, engine_raised

logger = logging.getLogger(__name__)

STDERR_TAIL = 2000


class EngineHandle(ABC):
    """Explicit handle on a loaded engine."""
    name = "engine"

    @abstractmethod
    async def visualize(self, raw_input: str) -> str:
        """Run the engine on `raw_input` and return its serialized frame array."""

    async def aclose(self) -> None:
        return None


class CallableEngine(EngineHandle):
    """Wraps an in-process function, sync or async."""
    name = "callable"

    def __init__(self, fn: Callable[[str], Union[str, Awaitable[str]]]):
        self._fn = fn

    async def visualize(self, raw_input: str) -> str:
        result = self._fn(raw_input)
        if inspect.isawaitable(result):
            result = await result
        return result


class SubprocessEngine(EngineHandle):
    """
    Runs an engine executable: raw input on stdin, frame JSON on stdout.

    A non-zero exit status or a timeout is an EngineFailure; stderr is kept
    (tail only) in the error details.
    """
    name = "subprocess"

    def __init__(self, command: Union[str, Sequence[str]], timeout: float = 30.0):
        self.command = shlex.split(command) if isinstance(command, str) else list(command)
        if not self.command:
            raise ValueError("Engine command must not be empty")
        self.timeout = timeout

    async def visualize(self, raw_input: str) -> str:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            raise EngineFailure(engine_raised(e)) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(raw_input.encode("utf-8")),
                timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise EngineFailure(engine_raised(
                TimeoutError(f"engine did not finish within {self.timeout}s")
            )) from e
        finally:
            # Timed out or cancelled: the child must not outlive the call.
            if proc.returncode is None:
                proc.kill()
                await proc.wait()

        if proc.returncode != 0:
            tail = stderr.decode("utf-8", errors="replace")[-STDERR_TAIL:]
            raise EngineFailure(engine_exit_status(proc.returncode, tail))

        return stdout.decode("utf-8", errors="replace")


class HttpEngine(EngineHandle):
    """
    Remote engine service reached over HTTP.

    POSTs {"raw_input": ...} to `/visualize` and returns the response body.
    No retries: a failed invocation is re-triggered by the user.
    """
    name = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url
        self.http_client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def visualize(self, raw_input: str) -> str:
        try:
            response = await self.http_client.post("/visualize", json={"raw_input": raw_input})
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning("Engine request timed out: %s", e)
            raise EngineFailure(engine_raised(e)) from e
        except httpx.HTTPStatusError as e:
            logger.warning("Engine returned HTTP %d", e.response.status_code)
            raise EngineFailure(engine_raised(e)) from e
        except httpx.HTTPError as e:
            logger.warning("Engine request failed: %s", e)
            raise EngineFailure(engine_raised(e)) from e
        return response.text

    async def aclose(self) -> None:
        await self.http_client.aclose()


class RecordedEngine(EngineHandle):
    """Serves a saved history file. The raw input is ignored."""
    name = "recording"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def visualize(self, raw_input: str) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise EngineFailure(engine_raised(e)) from e


def load_engine(settings: Settings) -> Optional[EngineHandle]:
    """
    Build the engine handle described by the settings.

    Returns:
        EngineHandle, or None when ENGINE_KIND is "none".

    Raises:
        ValueError: On an unknown ENGINE_KIND or a missing required setting.
    """
    kind = settings.ENGINE_KIND.strip().lower()
    engine: EngineHandle
    if kind == "none":
        return None
    if kind == "subprocess":
        if not settings.ENGINE_COMMAND:
            raise ValueError("ENGINE_COMMAND is required for ENGINE_KIND=subprocess")
        engine = SubprocessEngine(settings.ENGINE_COMMAND, timeout=settings.ENGINE_TIMEOUT)
    elif kind == "http":
        if not settings.ENGINE_URL:
            raise ValueError("ENGINE_URL is required for ENGINE_KIND=http")
        engine = HttpEngine(settings.ENGINE_URL, timeout=settings.ENGINE_TIMEOUT)
    elif kind == "recording":
        if not settings.ENGINE_RECORDING_PATH:
            raise ValueError("ENGINE_RECORDING_PATH is required for ENGINE_KIND=recording")
        engine = RecordedEngine(settings.ENGINE_RECORDING_PATH)
    else:
        raise ValueError(f"Unknown ENGINE_KIND: {settings.ENGINE_KIND!r}")

    logger.info("Loaded %s engine", engine.name)
    return engine
