#!/usr/bin/env python3
"""
algoviz/cli.py - Command-Line Interface

Usage:
    algoviz run --input 'arr={5, 1, 4}, k=2'
    algoviz run --input-file input.txt --engine-command ./engine --frame 3
    algoviz show history.json --frame 0
    algoviz play history.json --interval-ms 250
    algoviz serve --port 8000

Exit Codes:
    0 = OK
    1 = Bad usage (missing file, frame out of range)
    2 = Engine failure (engine raised, empty or malformed output)
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from algoviz.config import settings
from algoviz.engine import EngineHandle, RecordedEngine, SubprocessEngine, load_engine
from algoviz.errors import EngineFailure, VizError
from algoviz.replay import PlaybackController, PlaybackState, VisualizerSession, render_frame
from algoviz.replay.history import HistoryStore
from algoviz.replay.frames import parse_history
from algoviz.replay.text import format_frame

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_ENGINE_FAILURE = 2

logger = logging.getLogger(__name__)


def main(argv=None):
    """
    Parse command-line arguments and dispatch the algoviz command-line interface.

    Subcommands:
    - run: invoke the engine on raw input and print the resulting frames
    - show: print frames from a saved history file
    - play: auto-advance through a saved history file in the terminal
    - serve: run the HTTP API under uvicorn
    """
    parser = argparse.ArgumentParser(
        prog="algoviz",
        description="Step-by-step replay of externally executed algorithms"
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Invoke the engine and print frames")
    source = run_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", "-i", help="Universal input text")
    source.add_argument("--input-file", help="File containing the universal input text")
    run_parser.add_argument(
        "--engine-command",
        help="Engine executable to run instead of the configured engine"
    )
    run_parser.add_argument("--frame", "-f", type=int, help="Print only this frame index")

    show_parser = subparsers.add_parser("show", help="Print frames from a saved history")
    show_parser.add_argument("history_file", help="Path to a JSON frame array")
    show_parser.add_argument("--frame", "-f", type=int, help="Print only this frame index")

    play_parser = subparsers.add_parser("play", help="Auto-advance through a saved history")
    play_parser.add_argument("history_file", help="Path to a JSON frame array")
    play_parser.add_argument(
        "--interval-ms",
        type=int,
        default=settings.TICK_INTERVAL_MS,
        help="Milliseconds between frames"
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.API_HOST)
    serve_parser.add_argument("--port", type=int, default=settings.API_PORT)

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "run":
        sys.exit(run_engine(args))
    elif args.command == "show":
        sys.exit(run_show(args))
    elif args.command == "play":
        sys.exit(run_play(args))
    elif args.command == "serve":
        run_serve(args)


def _report_failure(error: VizError) -> None:
    print(f"Error [{error.code.value}]: {error.message}", file=sys.stderr)


def _print_frames(store: HistoryStore, frame: Optional[int]) -> int:
    if frame is not None:
        if not 0 <= frame < len(store):
            print(f"Error: frame {frame} outside 0..{len(store) - 1}", file=sys.stderr)
            return EXIT_USAGE
        indices = [frame]
    else:
        indices = range(len(store))

    for index in indices:
        print(format_frame(render_frame(store.get(index)), index, len(store)))
    return EXIT_OK


def run_engine(args) -> int:
    """Invoke the engine once and print the frames it produced."""
    if args.input_file:
        input_path = Path(args.input_file)
        if not input_path.exists():
            print(f"Error: File not found: {input_path}", file=sys.stderr)
            return EXIT_USAGE
        raw_input = input_path.read_text(encoding="utf-8")
    else:
        raw_input = args.input

    if args.engine_command:
        engine: Optional[EngineHandle] = SubprocessEngine(args.engine_command, timeout=settings.ENGINE_TIMEOUT)
    else:
        try:
            engine = load_engine(settings)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_USAGE

    async def invoke() -> VisualizerSession:
        session = VisualizerSession(engine, generate_delay=0, on_failure=_report_failure)
        try:
            await session.visualize(raw_input)
        finally:
            await session.aclose()
        return session

    session = asyncio.run(invoke())
    if session.boundary.last_error is not None:
        return EXIT_ENGINE_FAILURE
    return _print_frames(session.store, args.frame)


def _load_history(path_arg: str) -> Optional[HistoryStore]:
    path = Path(path_arg)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return None
    store = HistoryStore()
    store.replace(parse_history(path.read_text(encoding="utf-8")))
    return store


def run_show(args) -> int:
    try:
        store = _load_history(args.history_file)
    except EngineFailure as e:
        _report_failure(e.error)
        return EXIT_ENGINE_FAILURE
    if store is None:
        return EXIT_USAGE
    return _print_frames(store, args.frame)


def run_play(args) -> int:
    """Replay a saved history through the playback controller on a real event loop."""
    if not Path(args.history_file).exists():
        print(f"Error: File not found: {args.history_file}", file=sys.stderr)
        return EXIT_USAGE

    async def play() -> Optional[VizError]:
        finished = asyncio.Event()
        shown = {"index": None}

        def on_change(controller: PlaybackController) -> None:
            if controller.index is not None and controller.index != shown["index"]:
                shown["index"] = controller.index
                print(format_frame(render_frame(controller.current_frame), controller.index, controller.length))
            if controller.state != PlaybackState.PLAYING:
                finished.set()

        session = VisualizerSession(
            RecordedEngine(args.history_file),
            tick_interval=args.interval_ms / 1000.0,
            generate_delay=0,
            on_failure=_report_failure,
            on_change=on_change
        )
        try:
            if await session.visualize("") is None:
                return session.boundary.last_error
            finished.clear()
            if session.controller.play():
                await finished.wait()
        finally:
            await session.aclose()
        return None

    error = asyncio.run(play())
    return EXIT_ENGINE_FAILURE if error is not None else EXIT_OK


def run_serve(args) -> None:
    import uvicorn

    uvicorn.run("algoviz.main:app", host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
