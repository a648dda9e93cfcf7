#!/usr/bin/env python3
"""Run the screenshot auto-delete service as a foreground daemon.

Settings come from the environment / ``.env`` (see ``app.utils.config``);
the flags below override them for a single run.
"""

from __future__ import annotations

import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import Optional

from loguru import logger

from app.utils.config import Settings, get_settings
from domains.screenshot_lifecycle.service import AutoDeleteService

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(
        description="Tag new screenshots with an expiry time and delete them once expired.",
    )
    parser.add_argument(
        "--dir",
        type=Path,
        default=None,
        help="Screenshots directory to watch (default: SCREENSHOT_DIR or ~/Pictures/Screenshots).",
    )
    parser.add_argument(
        "--delete-after",
        type=int,
        default=None,
        help="Minutes before a new screenshot is deleted; 0 disables tagging.",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Seconds between cleanup scans (default: 60).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL or INFO).",
    )

    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return a copy of ``settings`` with CLI overrides applied."""

    updates = {
        "screenshot_dir": args.dir,
        "delete_after_minutes": args.delete_after,
        "cleanup_interval": args.interval,
        "log_level": args.log_level,
    }
    updates = {key: value for key, value in updates.items() if value is not None}
    return settings.model_copy(update=updates)


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level.upper())


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI script."""

    args = parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    configure_logging(settings.log_level)

    logger.info("Screenshot Lifecycle - Auto Delete")

    service = AutoDeleteService(settings)
    stop_event = threading.Event()

    def _signal_handler(signum, frame):  # noqa: D401
        logger.info(f"Received signal {signum}, shutting down.")
        stop_event.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        service.start()
        while not stop_event.is_set():
            stop_event.wait(1.0)
    finally:
        service.close()

    logger.info("Screenshot auto-delete stopped.")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI bridge
    sys.exit(main())
