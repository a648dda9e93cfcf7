"""
Screenshot tagger for the Screenshot Lifecycle domain.

Watches the screenshots directory and renames every new capture so that its
name carries an absolute expiry timestamp. Uses the watchdog library for
file system event monitoring.
"""

import os
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from app.utils.helpers import matches_extension, normalise_path, now_unix
from domains.screenshot_lifecycle.tag_codec import has_marker, tag_name


class ScreenshotTagger:
    """Assigns expiry tags to newly created screenshots."""

    def __init__(
        self,
        get_delete_after_minutes: Callable[[], int],
        on_tagged: Optional[Callable[[str], object]] = None,
        extension: str = ".png",
        settle_delay: float = 0.5,
        clock: Callable[[], int] = now_unix,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize tagger.

        Args:
            get_delete_after_minutes: Returns the current delay; queried per file
            on_tagged: Called with the tagged file name after a successful rename
            extension: Capture file extension to react to
            settle_delay: Seconds to wait for the producer to finish writing
            clock: Current UTC time in epoch seconds
            sleep: Sleep function used for the settle delay
        """
        self.get_delete_after_minutes = get_delete_after_minutes
        self.on_tagged = on_tagged
        self.extension = extension
        self.settle_delay = settle_delay
        self.clock = clock
        self._sleep = sleep

    def handle_created(self, path: Path) -> Optional[Path]:
        """
        Tag a newly created file.

        Runs on the watcher's event thread, including the settle delay, so a
        burst of N captures is tagged one after another in roughly
        N x settle_delay seconds.

        Args:
            path: Path of the created file

        Returns:
            Path of the tagged file, or None if the file was left alone
        """
        path = Path(path)
        name = path.name

        if not matches_extension(path, self.extension):
            return None

        # Marker present (even with a corrupt timestamp) means already tagged
        if has_marker(name):
            logger.debug(f"Already tagged: {name}")
            return None

        try:
            minutes = int(self.get_delete_after_minutes())
        except Exception as e:
            logger.warning(f"Could not read delete delay, leaving {name} untagged: {e}")
            return None

        if minutes <= 0:
            return None

        if self.settle_delay > 0:
            self._sleep(self.settle_delay)

        if not path.exists():
            logger.debug(f"Screenshot vanished before tagging: {name}")
            return None

        expiry_ts = self.clock() + minutes * 60
        target = path.with_name(tag_name(name, expiry_ts))

        try:
            if target.exists():
                raise FileExistsError(f"target already exists: {target.name}")
            path.rename(target)

        except OSError as e:
            logger.warning(f"Failed to tag {name}: {e}")
            return None

        logger.info(f"Tagged {name} -> {target.name}")
        self._notify(target.name)
        return target

    def _notify(self, file_name: str):
        if self.on_tagged is None:
            return

        try:
            self.on_tagged(file_name)
        except Exception as e:
            logger.warning(f"Tag notification failed for {file_name}: {e}")


class TaggingEventHandler(FileSystemEventHandler):
    """Watchdog handler that forwards file creations to the tagger."""

    def __init__(self, tagger: ScreenshotTagger):
        super().__init__()
        self.tagger = tagger

    def on_created(self, event: FileSystemEvent):
        """Handle file creation."""
        if event.is_directory:
            return

        try:
            self.tagger.handle_created(Path(os.fsdecode(event.src_path)))
        except Exception as e:
            logger.error(f"Unexpected error tagging {event.src_path}: {e}")


class ScreenshotWatcher:
    """Directory monitoring orchestrator with automatic observer recovery."""

    def __init__(
        self,
        directory: Path,
        tagger: ScreenshotTagger,
        recover_interval: float = 5.0,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        """
        Initialize screenshot watcher.

        Args:
            directory: Directory to watch (created on start if missing)
            tagger: Tagger receiving creation events
            recover_interval: Seconds between observer health checks
            observer_factory: Builds watchdog observers
        """
        self.directory = normalise_path(directory)
        self.event_handler = TaggingEventHandler(tagger)
        self.recover_interval = recover_interval
        self._observer_factory = observer_factory

        self._observer = None
        self._lock = threading.Lock()
        self._watching = threading.Event()
        self._closed = threading.Event()
        self._supervisor: Optional[threading.Thread] = None

    @property
    def is_watching(self) -> bool:
        return self._watching.is_set()

    def start(self):
        """Start watching the directory."""
        with self._lock:
            if self._closed.is_set():
                logger.warning(f"Watcher for {self.directory} is closed; not starting")
                return

            self._watching.set()
            if self._observer is None:
                self._start_observer()
            self._ensure_supervisor()

    def stop(self):
        """Stop accepting new events. In-flight events finish on their own."""
        with self._lock:
            self._watching.clear()
            observer, self._observer = self._observer, None

        if observer is not None:
            self._stop_observer(observer)
            logger.info(f"Stopped watching: {self.directory}")

    def close(self):
        """Stop watching and shut down the supervisor."""
        self._closed.set()
        self.stop()

    def _start_observer(self) -> bool:
        observer = self._observer_factory()
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            observer.schedule(self.event_handler, str(self.directory), recursive=False)
            observer.daemon = True
            observer.start()

        except Exception as e:
            logger.error(f"Failed to watch {self.directory}: {e}")
            self._stop_observer(observer)
            return False

        self._observer = observer
        logger.success(f"Started watching: {self.directory}")
        return True

    @staticmethod
    def _stop_observer(observer):
        try:
            observer.stop()
        except Exception as e:
            logger.warning(f"Error stopping observer: {e}")

    def _ensure_supervisor(self):
        if self._supervisor is not None and self._supervisor.is_alive():
            return

        self._supervisor = threading.Thread(
            target=self._supervise, name="screenshot-watcher-supervisor", daemon=True
        )
        self._supervisor.start()

    def _is_healthy(self, observer) -> bool:
        if observer is None or not observer.is_alive():
            return False
        if not self.directory.is_dir():
            return False
        return all(emitter.is_alive() for emitter in observer.emitters)

    def _supervise(self):
        """Restart the observer whenever it dies while watching is requested."""
        while not self._closed.wait(self.recover_interval):
            try:
                self.check_health()
            except Exception as e:
                logger.error(f"Watcher supervisor error: {e}")

    def check_health(self) -> bool:
        """
        Restart the observer if it is no longer healthy.

        Returns:
            True if a restart was attempted
        """
        with self._lock:
            if not self._watching.is_set() or self._closed.is_set():
                return False
            if self._is_healthy(self._observer):
                return False

            logger.warning(f"Watcher for {self.directory} is down, restarting")
            if self._observer is not None:
                self._stop_observer(self._observer)
                self._observer = None
            self._start_observer()
            return True
