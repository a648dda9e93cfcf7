"""
Helper utilities for the screenshot auto-delete service.

Common functions used across domains.
"""

import os
import time
from pathlib import Path


def now_unix() -> int:
    """Get current UTC time as whole seconds since the epoch."""
    return int(time.time())


def normalise_path(path: Path) -> Path:
    """Return a resolved version of ``path`` without forcing existence."""

    try:
        return Path(path).expanduser().resolve()
    except (FileNotFoundError, RuntimeError):
        return Path(os.path.abspath(Path(path).expanduser()))


def default_screenshots_dir() -> Path:
    """
    Get the default screenshots directory.

    Honours ``XDG_PICTURES_DIR`` when set, otherwise ``~/Pictures``.

    Returns:
        Path to the ``Screenshots`` folder (may not exist yet)
    """
    pictures = os.environ.get("XDG_PICTURES_DIR")
    base = Path(pictures).expanduser() if pictures else Path.home() / "Pictures"
    return normalise_path(base / "Screenshots")


def matches_extension(path: Path, extension: str) -> bool:
    """Check if a file name carries the capture extension (case-insensitive)."""
    return Path(path).suffix.lower() == extension.lower()
