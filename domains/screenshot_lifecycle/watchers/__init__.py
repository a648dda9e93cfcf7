"""Directory watchers that assign expiry tags to new screenshots."""

from domains.screenshot_lifecycle.watchers.tagger import (
    ScreenshotTagger,
    ScreenshotWatcher,
    TaggingEventHandler,
)

__all__ = ["ScreenshotTagger", "ScreenshotWatcher", "TaggingEventHandler"]
