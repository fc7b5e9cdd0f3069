"""Command-line runner for headless collection and log summaries."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import yaml

from .analysis.danger import summarize_log
from .config.runtime import GyroSteerConfig, load_config
from .config.thresholds import THRESHOLD_PRESETS
from .core.collector import CollectionController
from .core.models import DisplayState
from .dataio.csv_writer import LogCreateError
from .sensors import SENSOR_BUILDERS
from .tools.debug import debug_enabled

logger = logging.getLogger("gyrosteer")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or debug_enabled() else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gyrosteer",
        description="Gyroscope sampling, CSV logging and rotation danger alerts",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    rec = sub.add_parser("record", help="Run a collection session")
    rec.add_argument("--config", type=Path, default=None, help="YAML config file")
    rec.add_argument("--sensor", choices=sorted(SENSOR_BUILDERS), default=None,
                     help="Sensor driver (overrides config)")
    rec.add_argument("--interval", type=float, default=None,
                     help="Sampling interval in seconds (overrides config)")
    rec.add_argument("--monitor-interval", type=float, default=None,
                     help="Run the threshold monitor on its own timer with this period")
    rec.add_argument("--preset", choices=sorted(THRESHOLD_PRESETS), default=None,
                     help="Threshold preset (overrides config)")
    rec.add_argument("--log-path", type=Path, default=None, help="CSV log location")
    rec.add_argument("--export", type=Path, default=None,
                     help="Copy the log here (file or directory) when collection stops")
    rec.add_argument("--duration", type=float, default=None,
                     help="Stop after this many seconds (default: until Ctrl-C)")
    rec.add_argument("--status-every", type=int, default=0,
                     help="Log the display status every N samples (0 = never)")

    summ = sub.add_parser("summarize", help="Summarise a recorded log")
    summ.add_argument("log", type=Path, help="CSV log written by 'record'")
    summ.add_argument("--config", type=Path, default=None, help="YAML config file")
    summ.add_argument("--preset", choices=sorted(THRESHOLD_PRESETS), default=None)
    return parser


def _apply_overrides(cfg: GyroSteerConfig, args: argparse.Namespace) -> GyroSteerConfig:
    if getattr(args, "preset", None):
        cfg.thresholds = THRESHOLD_PRESETS[args.preset]
    if getattr(args, "sensor", None):
        cfg.sensor = args.sensor
        cfg.sensor_options = {}
    if getattr(args, "interval", None) is not None:
        cfg.sample_interval_s = args.interval
    if getattr(args, "monitor_interval", None) is not None:
        cfg.monitor_interval_s = args.monitor_interval
    if getattr(args, "log_path", None) is not None:
        cfg.log_path = args.log_path
    if getattr(args, "export", None) is not None:
        cfg.export_path = args.export
    return cfg.sanitized()


class _StatusPrinter:
    def __init__(self, every: int) -> None:
        self.every = max(0, int(every))
        self._count = 0

    def __call__(self, display: DisplayState) -> None:
        if not self.every:
            return
        self._count += 1
        if self._count % self.every == 0:
            logger.info(" | ".join(display.display_lines()))


async def _record(controller: CollectionController, duration: Optional[float]) -> DisplayState:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, stop_event.set)
        loop.add_signal_handler(signal.SIGTERM, stop_event.set)
    except (NotImplementedError, RuntimeError):
        # Not supported on this platform; Ctrl-C still raises KeyboardInterrupt.
        pass
    return await controller.run(duration_s=duration, stop_event=stop_event)


def _load(args: argparse.Namespace) -> Optional[GyroSteerConfig]:
    try:
        return _apply_overrides(load_config(args.config), args)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Invalid config %s: %s", args.config, exc)
        return None


def cmd_record(args: argparse.Namespace) -> int:
    cfg = _load(args)
    if cfg is None:
        return 2
    try:
        controller = CollectionController.from_config(cfg, on_update=_StatusPrinter(args.status_every))
    except (TypeError, ValueError, OSError) as exc:
        logger.error("Could not set up sensor %r: %s", cfg.sensor, exc)
        return 2

    try:
        display = asyncio.run(_record(controller, args.duration))
    except LogCreateError as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        display = controller.display
    finally:
        controller.close()

    for line in display.display_lines():
        print(line)
    if not display.sensor_available:
        logger.warning("Sensor %r was unavailable; the log only holds the header", cfg.sensor)
    return 0


def cmd_summarize(args: argparse.Namespace) -> int:
    cfg = _load(args)
    if cfg is None:
        return 2
    try:
        summary = summarize_log(args.log, cfg.thresholds)
    except OSError as exc:
        logger.error("Could not read %s: %s", args.log, exc)
        return 1
    for line in summary.lines():
        print(line)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``gyrosteer`` console script."""
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else sys.argv[1:])
    _configure_logging(args.verbose)
    handlers = {"record": cmd_record, "summarize": cmd_summarize}
    return handlers[args.command](args)


__all__: List[str] = ["build_parser", "main"]
