"""Whole-system snapshots and saving them to JSON files."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from .report import (
    collect_battery_info,
    collect_cpu_info,
    collect_disk_info,
    collect_memory_info,
    collect_network_info,
    collect_process_info,
)

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
_FILENAME_FORMAT = "buzz-snapshot-%Y%m%d-%H%M%SZ.json"


def _utc(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def current_timestamp(now: datetime | None = None) -> str:
    """UTC time as ``YYYY-MM-DDTHH:MM:SSZ``; naive times are taken as UTC."""
    return _utc(now).strftime(_TIMESTAMP_FORMAT)


def make() -> dict:
    """Collect a full snapshot of the system."""
    return {
        "cpu": collect_cpu_info(),
        "memory": collect_memory_info(),
        "process_info": collect_process_info(),
        "disk": collect_disk_info(),
        "battery": collect_battery_info(),
        "network": collect_network_info(),
        "timestamp": current_timestamp(),
    }


def default_filename(now: datetime | None = None) -> str:
    """A name such as ``buzz-snapshot-20250101-123045Z.json``."""
    return _utc(now).strftime(_FILENAME_FORMAT)


def save_to_file(data: dict, path: str | Path) -> None:
    """Write ``data`` as indented JSON; raise OSError when it cannot be written."""
    text = json.dumps(data, indent=4, sort_keys=True, ensure_ascii=False)
    try:
        handle = open(path, "w", encoding="utf-8")
    except OSError as exc:
        raise OSError(exc.errno, f"Failed to open file for writing: {path}") from exc
    with handle:
        try:
            handle.write(text)
        except OSError as exc:
            raise OSError(exc.errno, f"Failed writing snapshot to: {path}") from exc