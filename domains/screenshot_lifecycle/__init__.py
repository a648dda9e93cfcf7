"""
Screenshot Lifecycle Domain

Deferred deletion of capture-tool images in a single watched directory:
- Tagger → renames new screenshots to embed an absolute expiry timestamp
- Reaper → periodically deletes screenshots whose timestamp has passed

The directory listing is the only state store; a restart loses nothing
because every pending deletion lives in a file name.
"""

__all__ = ["cleanup", "notifications", "policy", "service", "tag_codec", "watchers"]
