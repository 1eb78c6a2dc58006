import json
import re
from datetime import datetime, timedelta, timezone

import pytest

from buzzmon.snapshot import current_timestamp, default_filename, make, save_to_file

MOMENT = datetime(2025, 1, 1, 12, 30, 45, tzinfo=timezone.utc)
TIMESTAMP = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z")


def test_default_filename_matches_documented_example():
    assert default_filename(MOMENT) == "buzz-snapshot-20250101-123045Z.json"


def test_current_timestamp_format():
    assert current_timestamp(MOMENT) == "2025-01-01T12:30:45Z"


def test_timestamp_converts_to_utc():
    shifted = MOMENT.astimezone(timezone(timedelta(hours=5)))
    assert current_timestamp(shifted) == current_timestamp(MOMENT)
    assert default_filename(shifted) == default_filename(MOMENT)


def test_naive_time_is_taken_as_utc():
    assert current_timestamp(MOMENT.replace(tzinfo=None)) == current_timestamp(MOMENT)


def test_current_timestamp_now_is_current_utc_time():
    before = datetime.now(timezone.utc).replace(microsecond=0)
    stamp = current_timestamp()
    after = datetime.now(timezone.utc)
    parsed = datetime.strptime(stamp, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)
    assert before <= parsed <= after


def test_default_filename_now_is_current_utc_time():
    before = datetime.now(timezone.utc).replace(microsecond=0)
    name = default_filename()
    after = datetime.now(timezone.utc)
    parsed = datetime.strptime(name, "buzz-snapshot-%Y%m%d-%H%M%SZ.json").replace(
        tzinfo=timezone.utc
    )
    assert before <= parsed <= after


def test_save_round_trip(tmp_path):
    data = {"cpu": {"cpu_usage": 12.5}, "names": ["a", "b"], "n": None}
    target = tmp_path / "snap.json"
    save_to_file(data, target)
    text = target.read_text(encoding="utf-8")
    assert json.loads(text) == data
    assert '\n    "cpu"' in text


def test_save_to_missing_directory_raises(tmp_path):
    target = tmp_path / "missing" / "snap.json"
    with pytest.raises(OSError, match="Failed to open file for writing"):
        save_to_file({"a": 1}, target)


def test_make_has_all_sections():
    data = make()
    assert set(data) == {"cpu", "memory", "process_info", "disk", "battery", "network", "timestamp"}
    assert TIMESTAMP.fullmatch(data["timestamp"])
    assert 0.0 <= data["cpu"]["cpu_usage"] <= 100.0
    assert set(data["battery"]) == {"status", "current_capacity"}