"""
Screenshot auto-delete service.

Wires configuration, the tagger/watcher pair and the cleanup service together
and exposes the controls a front end needs: pause/resume, forced cleanup,
changing the delay and switching the watched folder.
"""

from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from app.utils.config import Settings, get_settings
from app.utils.helpers import normalise_path
from domains.screenshot_lifecycle.cleanup.reaper import CleanupService
from domains.screenshot_lifecycle.notifications import Notifier, build_tagged_message
from domains.screenshot_lifecycle.policy import DeletePolicy
from domains.screenshot_lifecycle.watchers.tagger import ScreenshotTagger, ScreenshotWatcher


class AutoDeleteService:
    """Owns the watcher and cleanup components for one screenshots folder."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        on_tagged: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize service.

        Args:
            settings: Settings to use (defaults to the cached application settings)
            on_tagged: Called with the new name of every tagged screenshot
        """
        self.settings = settings or get_settings()
        self.policy = DeletePolicy(self.settings.delete_after_minutes)
        self.on_tagged = on_tagged
        self.notifier = Notifier(self._handle_tagged)

        self.directory = self.settings.get_screenshot_dir()
        self.extension = self.settings.get_capture_extension()

        self._started = False
        self._paused = False
        self._build_components()

        logger.info(f"Screenshots directory: {self.directory}")
        logger.info(f"Delete after: {self.policy.describe()}")

    def _build_components(self):
        tagger = ScreenshotTagger(
            self.policy.get_minutes,
            on_tagged=self.notifier.send,
            extension=self.extension,
            settle_delay=self.settings.get_settle_delay(),
        )
        self.watcher = ScreenshotWatcher(
            self.directory,
            tagger,
            recover_interval=self.settings.watcher_recover_interval,
        )
        self.cleanup = CleanupService(
            self.directory,
            interval=self.settings.cleanup_interval,
            extension=self.extension,
        )

    def _handle_tagged(self, file_name: str):
        if not self.settings.show_notifications:
            return

        logger.info(f"{build_tagged_message(self.policy.get_minutes())}: {file_name}")
        if self.on_tagged is not None:
            self.on_tagged(file_name)

    @property
    def is_paused(self) -> bool:
        return self._paused

    def start(self):
        """Start watching and cleaning."""
        self._started = True
        self._paused = False
        self.watcher.start()
        self.cleanup.start()
        logger.success("Screenshot auto-delete started")

    def pause(self):
        """Stop tagging new screenshots and stop scheduled cleanup."""
        self._paused = True
        self.watcher.stop()
        self.cleanup.stop()
        logger.info("Screenshot auto-delete paused")

    def resume(self):
        self._paused = False
        self.watcher.start()
        self.cleanup.start()
        logger.info("Screenshot auto-delete resumed")

    def force_cleanup(self):
        """Run one cleanup cycle immediately."""
        return self.cleanup.force_cleanup()

    def set_delete_after(self, minutes: int):
        """Change the delay for screenshots created from now on."""
        self.policy.set_minutes(minutes)
        logger.info(f"Delete after changed to: {self.policy.describe()}")

    def change_directory(self, directory: Path):
        """
        Switch to a different screenshots folder.

        The existing watcher and cleanup service are torn down and rebuilt for
        the new path. Files already tagged in the old folder are left as is.
        """
        self.watcher.close()
        self.cleanup.close()

        self.directory = normalise_path(directory)
        self._build_components()
        logger.info(f"Watching folder changed to: {self.directory}")

        if self._started and not self._paused:
            self.watcher.start()
            self.cleanup.start()

    def close(self):
        """Stop everything. Running work is allowed to finish."""
        self.watcher.close()
        self.cleanup.close()
        self.notifier.close()
        logger.info("Screenshot auto-delete shut down")
