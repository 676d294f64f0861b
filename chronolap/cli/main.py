"""Terminal CLI entrypoint for Chronolap."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from chronolap.core.config import AppConfig
from chronolap.core.engine import TimeEngine
from chronolap.core.formatting import compose_countdown_ms, format_delta, format_time
from chronolap.core.state import TimerMode
from chronolap.store.kv_store import JsonFileStore
from chronolap.ui.controller import TimerController
from chronolap.ui.labels import Labels


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chronolap stopwatch / countdown")
    parser.add_argument(
        "--state-file",
        type=Path,
        default=None,
        help="JSON file holding the persisted timer state (default: ~/.chronolap/state.json)",
    )
    parser.add_argument("--lang", default="es", help="Label language (es, en)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("status", help="Show mode, phase and visible time")
    sub.add_parser("start", help="Start a fresh run")
    sub.add_parser("pause", help="Pause the running timer")
    sub.add_parser("resume", help="Resume a paused timer")
    sub.add_parser("toggle", help="Start, pause or resume depending on the current phase")
    sub.add_parser("reset", help="Zero the timer and clear laps")
    sub.add_parser("lap", help="Record a lap")
    sub.add_parser("laps", help="List recorded laps")
    sub.add_parser("clear-laps", help="Remove every lap")

    remove = sub.add_parser("remove-lap", help="Remove one lap by its index")
    remove.add_argument("index", type=int)

    mode = sub.add_parser("mode", help="Switch between stopwatch and countdown")
    mode.add_argument("mode", choices=[m.value for m in TimerMode])

    target = sub.add_parser("target", help="Set the countdown duration")
    target.add_argument("--hours", default=0)
    target.add_argument("--minutes", default=0)
    target.add_argument("--seconds", default=0)
    target.add_argument("--millis", default=0)

    watch = sub.add_parser("watch", help="Redraw the timer in the terminal until Ctrl+C")
    watch.add_argument("--interval", type=float, default=0.05, help="Redraw interval in seconds")
    watch.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop watching after this many seconds",
    )

    web = sub.add_parser("web", help="Launch the NiceGUI web UI")
    web.add_argument("--host", default="127.0.0.1")
    web.add_argument("--port", type=int, default=8089)
    web.add_argument("--interval", type=float, default=0.05, help="Redraw interval in seconds")
    return parser


def build_config(args: argparse.Namespace) -> AppConfig:
    config = AppConfig(lang=args.lang)
    if args.state_file is not None:
        config.state_path = Path(args.state_file).expanduser()
    if getattr(args, "interval", None) is not None:
        config.tick_interval_sec = max(0.01, float(args.interval))
    if args.command == "web":
        config.web_host = args.host
        config.web_port = args.port
    return config


def open_engine(config: AppConfig) -> TimeEngine:
    return TimeEngine(JsonFileStore(config.state_path), key=config.storage_key)


def print_status(engine: TimeEngine, labels: Labels) -> None:
    mode_key = "modeCountdown" if engine.mode is TimerMode.COUNTDOWN else "modeStopwatch"
    print(labels(mode_key))
    print(f"Phase: {engine.phase.value}")
    print(f"Time: {format_time(engine.visible_time())}")
    if engine.mode is TimerMode.COUNTDOWN:
        print(f"Target: {format_time(engine.target_ms)}")
    print(f"{labels('laps')}: {len(engine.laps)}")


def print_laps(engine: TimeEngine, labels: Labels) -> None:
    if not engine.laps:
        print(f"{labels('laps')}: -")
        return
    for lap in engine.laps:
        print(f"{lap.index:02d}  {format_time(lap.absolute_ms)}  {format_delta(lap.delta_ms)}")


async def run_watch(engine: TimeEngine, interval: float, duration: float | None) -> int:
    def _render(text: str) -> None:
        sys.stdout.write(f"\r{text}   ")
        sys.stdout.flush()

    def _expired() -> None:
        controller.stop()

    controller = TimerController(engine, interval_sec=interval, on_render=_render, on_expire=_expired)
    if duration is not None:
        asyncio.get_running_loop().call_later(max(0.0, duration), controller.stop)
    try:
        await controller.run()
    finally:
        sys.stdout.write("\n")
    return 0


def run_command(args: argparse.Namespace, config: AppConfig) -> int:
    labels = Labels(config.lang)
    engine = open_engine(config)
    command = args.command

    if command == "status":
        print_status(engine, labels)
    elif command == "start":
        if not engine.start():
            print(f"Cannot start while {engine.phase.value}")
            return 1
        print_status(engine, labels)
    elif command == "pause":
        if not engine.pause():
            print(f"Cannot pause while {engine.phase.value}")
            return 1
        print_status(engine, labels)
    elif command == "resume":
        if not engine.resume():
            print(f"Cannot resume while {engine.phase.value}")
            return 1
        print_status(engine, labels)
    elif command == "toggle":
        TimerController(engine).toggle()
        print_status(engine, labels)
    elif command == "reset":
        engine.reset()
        print_status(engine, labels)
    elif command == "lap":
        record = engine.lap()
        print(
            f"{record.index:02d}  {format_time(record.absolute_ms)}  {format_delta(record.delta_ms)}"
        )
    elif command == "laps":
        print_laps(engine, labels)
    elif command == "remove-lap":
        if not engine.remove_lap_at(args.index):
            print(f"No lap with index {args.index}")
            return 1
        print_laps(engine, labels)
    elif command == "clear-laps":
        engine.clear_laps()
        print_laps(engine, labels)
    elif command == "mode":
        engine.set_mode(args.mode)
        print_status(engine, labels)
    elif command == "target":
        target_ms = engine.set_countdown_target(
            compose_countdown_ms(args.hours, args.minutes, args.seconds, args.millis)
        )
        print(f"Target: {format_time(target_ms)}")
    elif command == "watch":
        try:
            return asyncio.run(run_watch(engine, config.tick_interval_sec, args.duration))
        except KeyboardInterrupt:
            return 0
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    config = build_config(args)
    if args.command == "web":
        from chronolap.ui.web_app import run_web_ui

        return run_web_ui(config)

    return run_command(args, config)


if __name__ == "__main__":
    raise SystemExit(main())
