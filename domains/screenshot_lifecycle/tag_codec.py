"""
Expiry tag codec shared by the tagger and the cleanup scanner.

Tagged file names look like ``<base>_AUTODEL_<unix-seconds>[.<ext>]``.
The marker must stay byte-identical across versions, otherwise files tagged
by an older build are never cleaned up.
"""

import re
from pathlib import PurePath
from typing import Optional

MARKER = "_AUTODEL_"

_TIMESTAMP_RE = re.compile(r"-?[0-9]+")


def encode(base_name: str, extension: str, expiry_ts: int) -> str:
    """
    Build a tagged file name.

    Args:
        base_name: File name without extension
        extension: Extension including the leading dot, or empty
        expiry_ts: Absolute expiry time (UTC seconds since epoch)

    Returns:
        Tagged file name
    """
    return f"{base_name}{MARKER}{int(expiry_ts)}{extension}"


def has_marker(filename: str) -> bool:
    """Check whether the marker appears anywhere in the file name."""
    return MARKER in filename


def decode(filename: str) -> Optional[int]:
    """
    Extract the expiry timestamp from a file name.

    The first marker occurrence wins. The timestamp runs from the end of the
    marker to the next ``.`` or the end of the name, and must be an optional
    ``-`` followed by ASCII digits only. Surrounding whitespace, a leading
    ``+`` or digit separators make the tag malformed, so such files are never
    deleted.

    Args:
        filename: Bare file name (no directory)

    Returns:
        Expiry timestamp, or None if the name is untagged or the tag is malformed
    """
    index = filename.find(MARKER)
    if index < 0:
        return None

    raw = filename[index + len(MARKER):]
    dot = raw.find('.')
    if dot >= 0:
        raw = raw[:dot]

    if not _TIMESTAMP_RE.fullmatch(raw):
        return None
    return int(raw)


def tag_name(filename: str, expiry_ts: int) -> str:
    """Tag ``filename`` by inserting the marker before its final extension."""
    path = PurePath(filename)
    return encode(path.stem, path.suffix, expiry_ts)
