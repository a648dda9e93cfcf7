"""
Dispatch of "new screenshot tagged" notifications.

Callbacks run on a dedicated worker so a slow or failing consumer never
stalls the directory watcher.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from loguru import logger

from domains.screenshot_lifecycle.policy import describe_delay


def build_tagged_message(minutes: int) -> str:
    """Text shown to the user when a screenshot has been tagged."""
    return f"Screenshot will be deleted in {describe_delay(minutes)}"


class Notifier:
    """Runs a single-argument callback off the caller's thread."""

    def __init__(self, callback: Optional[Callable[[str], None]]):
        self.callback = callback
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="notify")
        self._closed = False

    def send(self, file_name: str) -> Optional[Future]:
        """
        Queue a notification for ``file_name``.

        Returns:
            Future of the callback, or None if nothing was queued
        """
        if self.callback is None or self._closed:
            return None

        try:
            future = self._executor.submit(self.callback, file_name)
        except RuntimeError as e:
            # Executor shut down between the check and the submit
            logger.debug(f"Notification dropped for {file_name}: {e}")
            return None

        future.add_done_callback(lambda f: self._report(f, file_name))
        return future

    @staticmethod
    def _report(future: Future, file_name: str) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.warning(f"Notification callback failed for {file_name}: {exc}")

    def close(self, wait: bool = False) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait)
