"""
Cleanup scanner for the Screenshot Lifecycle domain.

Periodically lists the screenshots directory, reads the expiry tag embedded in
each capture's name and deletes the ones that are due. Each scan is
independent; nothing is remembered between cycles except the directory itself.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from app.utils.helpers import matches_extension, normalise_path, now_unix
from domains.screenshot_lifecycle.tag_codec import decode


@dataclass
class ScanResult:
    """Outcome of one cleanup cycle."""

    scanned: int = 0
    deleted: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: int = 0
    aborted: bool = False


def run_scan_cycle(directory: Path, extension: str = ".png", now: Optional[int] = None) -> ScanResult:
    """
    Delete every tagged capture whose expiry has passed.

    Args:
        directory: Screenshots directory
        extension: Only files with this extension are inspected
        now: Current UTC epoch seconds (defaults to the system clock)

    Returns:
        ScanResult describing what happened
    """
    result = ScanResult()
    directory = Path(directory)

    if not directory.is_dir():
        logger.debug(f"Screenshots directory not present yet: {directory}")
        return result

    current = now_unix() if now is None else now

    try:
        candidates = [entry for entry in directory.iterdir() if matches_extension(entry, extension)]
    except OSError as e:
        logger.error(f"Cleanup cycle aborted, cannot list {directory}: {e}")
        result.aborted = True
        return result

    for path in candidates:
        try:
            if not path.is_file():
                continue
            result.scanned += 1

            expiry_ts = decode(path.name)
            if expiry_ts is None or current < expiry_ts:
                result.skipped += 1
                continue

            path.unlink()

        except FileNotFoundError:
            # Removed by the user or by a concurrent cycle
            logger.debug(f"Already gone: {path.name}")
            continue

        except OSError as e:
            logger.warning(f"Failed to inspect or delete {path.name}: {e}")
            result.failed.append(path.name)
            continue

        result.deleted.append(path.name)
        logger.info(f"Deleted expired screenshot: {path.name}")

    if result.deleted:
        logger.success(f"Deleted {len(result.deleted)} expired screenshot(s) from {directory}")

    return result


class CleanupService:
    """Interval-driven cleanup with pause/resume and on-demand scans."""

    def __init__(
        self,
        directory: Path,
        interval: float = 60,
        extension: str = ".png",
        clock: Callable[[], int] = now_unix,
        max_workers: int = 2,
    ):
        """
        Initialize cleanup service.

        Args:
            directory: Screenshots directory
            interval: Seconds between scheduled cycles
            extension: Capture file extension
            clock: Current UTC time in epoch seconds
            max_workers: Cycles allowed to run at the same time
        """
        self.directory = normalise_path(directory)
        self.interval = interval
        self.extension = extension
        self.clock = clock

        self._max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cleanup")
        self._lock = threading.Lock()
        self._in_flight = 0
        self._stop_event: Optional[threading.Event] = None
        self._started_once = False
        self._closed = False

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._stop_event is not None

    def start(self):
        """Arm the timer. The very first start also scans immediately."""
        with self._lock:
            if self._closed or self._stop_event is not None:
                return

            stop_event = threading.Event()
            self._stop_event = stop_event
            threading.Thread(
                target=self._tick_loop,
                args=(stop_event,),
                name="cleanup-timer",
                daemon=True,
            ).start()

            first_start = not self._started_once
            self._started_once = True

        logger.info(f"Cleanup running every {self.interval}s on {self.directory}")
        if first_start:
            self._submit()

    def stop(self):
        """Disarm the timer without waiting for running cycles."""
        with self._lock:
            stop_event, self._stop_event = self._stop_event, None

        if stop_event is not None:
            stop_event.set()
            logger.info(f"Cleanup stopped for {self.directory}")

    def force_cleanup(self) -> Optional[Future]:
        """Run one cycle now; the regular schedule is left untouched."""
        return self._submit()

    def close(self):
        self._closed = True
        self.stop()
        self._executor.shutdown(wait=False)

    def run_cycle(self) -> ScanResult:
        """Run one cycle on the calling thread. Never raises."""
        try:
            return run_scan_cycle(self.directory, self.extension, now=self.clock())
        except Exception as e:
            logger.error(f"Cleanup cycle failed: {e}")
            return ScanResult(aborted=True)

    def _tick_loop(self, stop_event: threading.Event):
        while not stop_event.wait(self.interval):
            self._tick()

    def _tick(self) -> Optional[Future]:
        """Submit a scheduled cycle unless every worker is already busy."""
        with self._lock:
            busy = self._in_flight >= self._max_workers
        if busy:
            logger.debug(f"Previous cleanup cycles still running, skipping tick for {self.directory}")
            return None
        return self._submit()

    def _submit(self) -> Optional[Future]:
        with self._lock:
            self._in_flight += 1
        try:
            future = self._executor.submit(self.run_cycle)
        except RuntimeError:
            self._cycle_done(None)
            logger.debug(f"Cleanup pool closed, skipping cycle for {self.directory}")
            return None

        future.add_done_callback(self._cycle_done)
        return future

    def _cycle_done(self, future: Optional[Future]):
        with self._lock:
            self._in_flight -= 1
