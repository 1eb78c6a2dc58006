"""Collects a full system report and prints it as JSON."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime, timezone

from . import cli
from .battery import get_battery_info
from .cpu import (
    get_cpu_frequency,
    get_cpu_name,
    get_cpu_usage,
    get_no_logical_processors,
    get_per_core_usage,
    get_running_processes,
)
from .disk import get_disk_stats
from .memory import get_mem_value, get_memory_usage
from .network import get_network_rates
from .processes import get_all_processes

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def collect_cpu_info() -> dict:
    """Overall and per-core usage, model name, frequency and counts."""
    cpu_usage = get_cpu_usage()
    per_core = get_per_core_usage()
    return {
        "cpu_usage": cpu_usage,
        "cpu_name": get_cpu_name(),
        "running_processes": get_running_processes(),
        "cpu_frequency": get_cpu_frequency(),
        "no_of_logical_processors": get_no_logical_processors(),
        "per_core_usage": [
            {"core_id": core_id, "usage_percent": usage}
            for core_id, usage in enumerate(per_core)
        ],
    }


def collect_memory_info() -> dict:
    """Memory usage percentage plus cache and swap figures in kB."""
    return {
        "memory_usage": get_memory_usage(),
        "cached_memory": get_mem_value("Cached:"),
        "free_swappable_memory": get_mem_value("SwapFree:"),
        "total_swappable_memory": get_mem_value("SwapTotal:"),
    }


def collect_process_info() -> dict | None:
    """Every running process, or None when none could be read."""
    processes = [process.to_json() for process in get_all_processes()]
    return {"processes": processes} if processes else None


def collect_disk_info() -> dict | None:
    """Counters of every disk, or None when there are none."""
    disks = [disk.to_json() for disk in get_disk_stats()]
    return {"disks": disks} if disks else None


def collect_battery_info() -> dict:
    """Battery status and charge."""
    return get_battery_info().to_json()


def collect_network_info() -> dict | None:
    """Transfer rates of every interface, or None when there are none."""
    interfaces = [stats.to_json() for stats in get_network_rates()]
    return {"interfaces": interfaces} if interfaces else None


def main(argv: Sequence[str] | None = None) -> int:
    """Run a subcommand if one is given, otherwise print a full report."""
    code = cli.run(argv)
    if code is not None:
        return code
    report = {
        "cpu": collect_cpu_info(),
        "memory": collect_memory_info(),
        "process_info": collect_process_info(),
        "disk": collect_disk_info(),
        "battery": collect_battery_info(),
        "network": collect_network_info(),
        "timestamp": datetime.now(timezone.utc).strftime(_TIMESTAMP_FORMAT),
    }
    print(json.dumps(report, indent=4, sort_keys=True, ensure_ascii=False))
    return 0