"""
Configuration management for the screenshot auto-delete service.

Uses pydantic-settings to load configuration from environment variables
and .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.helpers import default_screenshots_dir, normalise_path


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Watched directory (defaults to ~/Pictures/Screenshots)
    screenshot_dir: Optional[Path] = None
    capture_extension: str = ".png"

    # Expiry policy
    delete_after_minutes: int = 0  # 0 or negative disables tagging

    # Cleanup Configuration
    cleanup_interval: int = 60  # seconds

    # Watcher Configuration
    settle_delay_ms: int = 500
    watcher_recover_interval: float = 5.0  # seconds

    # Notifications
    show_notifications: bool = True

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_screenshot_dir(self) -> Path:
        """Resolve the watched directory, falling back to the platform default."""
        if self.screenshot_dir is None:
            return default_screenshots_dir()
        return normalise_path(self.screenshot_dir)

    def get_capture_extension(self) -> str:
        """Return the capture extension with a leading dot."""
        ext = self.capture_extension.strip()
        return ext if ext.startswith('.') else f".{ext}"

    def get_settle_delay(self) -> float:
        """Settle delay in seconds."""
        return max(self.settle_delay_ms, 0) / 1000.0


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
