from __future__ import annotations

import json
import sys

import pytest
import redis

from app.deps import _tolerance_from
from cli import pitr_cli
from core.pitr.timeline import MERGE_TOLERANCE_MS
from storage.cache.redis_client import CacheClient

WINDOW = {
    "available": True,
    "intervals": [
        {"startTime": "2024-01-01T00:00:00Z", "endTime": "2024-01-02T00:00:00Z"},
        {"startTime": "2024-01-02T00:00:00.500Z", "endTime": "2024-01-03T00:00:00Z"},
    ],
}


@pytest.fixture
def window_file(tmp_path):
    path = tmp_path / "window.json"
    path.write_text(json.dumps(WINDOW), encoding="utf-8")
    return str(path)


def run_cli(monkeypatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["pitr-window", *argv])
    pitr_cli.main()


def test_cli_timeline_prints_merged_window(monkeypatch, capsys, window_file):
    run_cli(monkeypatch, "timeline", window_file)
    payload = json.loads(capsys.readouterr().out)
    assert payload["timeline_status"] == "continuous"
    assert payload["intervals"] == [{"startTime": "2024-01-01T00:00:00.000Z", "endTime": "2024-01-03T00:00:00.000Z"}]


def test_cli_validate_exit_code(monkeypatch, capsys, window_file):
    run_cli(monkeypatch, "validate", window_file, "--day", "2024-01-02", "--hour", "12")
    assert json.loads(capsys.readouterr().out)["result"]["is_valid"] is True
    with pytest.raises(SystemExit) as excinfo:
        run_cli(monkeypatch, "validate", window_file, "--target-time", "2024-01-04T00:00:00Z")
    assert excinfo.value.code == 1


def test_cli_calendar(monkeypatch, capsys, window_file):
    run_cli(monkeypatch, "calendar", window_file, "--month", "2024-01-01", "--day", "2024-01-03")
    out = capsys.readouterr().out
    assert out.startswith("January 2024  (prev: no, next: no)")
    assert "Navigable days: 1, 2, 3" in out
    assert "00:00:00–00:00:00 UTC" in out


def test_tolerance_config_and_env_override(monkeypatch):
    monkeypatch.delenv("PITR_MERGE_TOLERANCE_MS", raising=False)
    assert _tolerance_from({}) == MERGE_TOLERANCE_MS
    assert _tolerance_from({"timeline": {"merge_tolerance_ms": 250}}) == 250
    monkeypatch.setenv("PITR_MERGE_TOLERANCE_MS", "5000")
    assert _tolerance_from({"timeline": {"merge_tolerance_ms": 250}}) == 5000
    monkeypatch.setenv("PITR_MERGE_TOLERANCE_MS", "lots")
    assert _tolerance_from({}) == MERGE_TOLERANCE_MS


def test_cache_client_in_process_fallback():
    cache = CacheClient(None, key_prefix="test")
    key = cache.key("window", "c9")
    assert key == "test:window:c9"
    assert cache.get(key) is None
    cache.set(key, {"available": True})
    assert cache.get(key) == {"available": True}
    cache.delete(key)
    assert cache.get(key) is None


def test_fallback_snapshot_expires(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr("storage.cache.redis_client.time.monotonic", lambda: now[0])
    cache = CacheClient(None, key_prefix="test")
    key = cache.key("window", "c9")
    cache.set(key, {"available": True}, ex=60)
    cache.set(cache.key("window", "forever"), {"available": False})
    now[0] += 59
    assert cache.get(key) == {"available": True}
    now[0] += 1
    assert cache.get(key) is None
    assert key not in cache.fallback
    assert cache.get(cache.key("window", "forever")) == {"available": False}


class FlakyRedis:
    def __init__(self):
        self.data = {}
        self.down = True

    def set(self, key, value, ex=None):
        if self.down:
            raise redis.ConnectionError("down")
        self.data[key] = value

    def get(self, key):
        if self.down:
            raise redis.ConnectionError("down")
        return self.data.get(key)

    def delete(self, key):
        self.data.pop(key, None)


def test_redis_write_replaces_fallback_copy():
    cache = CacheClient(None, key_prefix="test")
    cache.client = FlakyRedis()
    key = cache.key("window", "c9")
    cache.set(key, {"status": "old"})
    assert key in cache.fallback
    cache.client.down = False
    cache.set(key, {"status": "new"}, ex=60)
    assert key not in cache.fallback
    cache.client.data.pop(key)
    assert cache.get(key) is None
