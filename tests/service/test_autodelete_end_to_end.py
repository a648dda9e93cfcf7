"""
End-to-end test for the screenshot auto-delete service.

Uses a real watchdog observer on a temporary directory: a screenshot appears,
gets tagged, and is deleted by the next cleanup cycle once it has expired.
"""

import time
from pathlib import Path

import pytest

from app.utils.config import Settings
from domains.screenshot_lifecycle.cleanup.reaper import run_scan_cycle
from domains.screenshot_lifecycle.service import AutoDeleteService
from domains.screenshot_lifecycle.tag_codec import MARKER, decode
from scripts.screenshot_autodelete import apply_overrides, parse_args


def wait_for(predicate, timeout=10.0, interval=0.05):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def make_settings(directory: Path, **overrides) -> Settings:
    values = {
        "screenshot_dir": directory,
        "delete_after_minutes": 1,
        "cleanup_interval": 3600,
        "settle_delay_ms": 50,
        "watcher_recover_interval": 3600,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def service_factory():
    services = []

    def _make(settings, **kwargs):
        service = AutoDeleteService(settings, **kwargs)
        services.append(service)
        return service

    yield _make

    for service in services:
        service.close()


def tagged_files(directory: Path):
    return [p for p in directory.iterdir() if MARKER in p.name]


def test_screenshot_is_tagged_then_reaped(tmp_path, service_factory):
    directory = tmp_path / "Screenshots"
    notified = []
    service = service_factory(make_settings(directory), on_tagged=notified.append)
    service.start()
    assert directory.is_dir()

    before = int(time.time())
    (directory / "shot.png").write_bytes(b"png")

    assert wait_for(lambda: len(tagged_files(directory)) == 1)
    tagged = tagged_files(directory)[0]
    expiry = decode(tagged.name)

    assert tagged.name == f"shot{MARKER}{expiry}.png"
    assert before + 60 <= expiry <= int(time.time()) + 60
    assert wait_for(lambda: notified == [tagged.name])

    assert run_scan_cycle(directory, now=expiry - 1).deleted == []
    assert run_scan_cycle(directory, now=expiry).deleted == [tagged.name]
    assert list(directory.iterdir()) == []


def test_disabled_policy_leaves_screenshots_alone(tmp_path, service_factory):
    notified = []
    service = service_factory(make_settings(tmp_path, delete_after_minutes=0), on_tagged=notified.append)
    service.start()

    shot = tmp_path / "shot.png"
    shot.write_bytes(b"png")
    time.sleep(0.5)

    assert shot.exists()
    assert notified == []


def test_paused_service_does_not_tag(tmp_path, service_factory):
    service = service_factory(make_settings(tmp_path))
    service.start()
    service.pause()
    assert service.is_paused

    shot = tmp_path / "paused.png"
    shot.write_bytes(b"png")
    time.sleep(0.5)
    assert shot.exists()

    service.resume()
    (tmp_path / "resumed.png").write_bytes(b"png")
    assert wait_for(lambda: any(p.name.startswith("resumed" + MARKER) for p in tmp_path.iterdir()))


def test_force_cleanup_and_delay_change(tmp_path, service_factory):
    expired = tmp_path / f"old{MARKER}1000.png"
    expired.write_bytes(b"png")

    service = service_factory(make_settings(tmp_path))
    result = service.force_cleanup().result(timeout=5)
    assert result.deleted == [expired.name]

    service.set_delete_after(60)
    assert service.policy.get_minutes() == 60


def test_change_directory_moves_the_watch(tmp_path, service_factory):
    first = tmp_path / "first"
    second = tmp_path / "second"
    service = service_factory(make_settings(first))
    service.start()

    service.change_directory(second)
    assert second.is_dir()
    assert service.watcher.directory == second.resolve()

    (second / "shot.png").write_bytes(b"png")
    assert wait_for(lambda: len(tagged_files(second)) == 1)


def test_cli_overrides(tmp_path):
    args = parse_args(["--dir", str(tmp_path), "--delete-after", "15", "--interval", "30"])
    settings = apply_overrides(make_settings(tmp_path / "other"), args)

    assert settings.get_screenshot_dir() == tmp_path.resolve()
    assert settings.delete_after_minutes == 15
    assert settings.cleanup_interval == 30
    assert settings.settle_delay_ms == 50
