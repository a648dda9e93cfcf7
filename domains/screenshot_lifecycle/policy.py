"""Deletion delay policy shared between the configuration layer and the tagger."""

import threading

PRESET_MINUTES = (0, 15, 30, 60, 1440)


def describe_delay(minutes: int) -> str:
    """
    Render a deletion delay the way users see it.

    Args:
        minutes: Delay in minutes

    Returns:
        Human readable delay, e.g. "30 minutes", "1 hour", "24 hours"
    """
    if minutes <= 0:
        return "never"
    if minutes % 60 == 0:
        hours = minutes // 60
        return "1 hour" if hours == 1 else f"{hours} hours"
    if minutes == 1:
        return "1 minute"
    return f"{minutes} minutes"


class DeletePolicy:
    """Current deletion delay, read fresh by the tagger on every new file."""

    def __init__(self, minutes: int = 0):
        self._minutes = int(minutes)
        self._lock = threading.Lock()

    def get_minutes(self) -> int:
        with self._lock:
            return self._minutes

    def set_minutes(self, minutes: int) -> None:
        """Change the delay for files tagged from now on."""
        with self._lock:
            self._minutes = int(minutes)

    @property
    def enabled(self) -> bool:
        return self.get_minutes() > 0

    def describe(self) -> str:
        return describe_delay(self.get_minutes())
