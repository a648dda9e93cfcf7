"""Periodic cleanup of expired screenshots."""

from domains.screenshot_lifecycle.cleanup.reaper import CleanupService, ScanResult, run_scan_cycle

__all__ = ["CleanupService", "ScanResult", "run_scan_cycle"]
