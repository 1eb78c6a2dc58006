"""CPU usage, name, frequency and counts read from /proc."""

from __future__ import annotations

import time
from pathlib import Path

STAT_PATH = "/proc/stat"
CPUINFO_PATH = "/proc/cpuinfo"

_FIRST_USAGE_WAIT = 0.25
_FIRST_CORE_WAIT = 0.5


def _read_lines(path: str | Path) -> list[str] | None:
    try:
        return Path(path).read_text(errors="replace").splitlines()
    except OSError:
        return None


def _leading_ints(fields: list[str], count: int) -> list[int]:
    numbers = []
    for field in fields[:count]:
        try:
            numbers.append(int(field))
        except ValueError:
            break
    return numbers + [0] * (count - len(numbers))


def _idle_and_total(numbers: list[int]) -> tuple[int, int]:
    user, nice, system, idle, iowait, irq, softirq, steal = numbers[:8]
    idle_time = idle + iowait
    non_idle = user + nice + system + irq + softirq + steal
    return idle_time, idle_time + non_idle


def _usage(idle_diff: int, total_diff: int) -> float:
    if total_diff <= 0:
        return 0.0
    usage = 100.0 * (1.0 - idle_diff / total_diff)
    return min(max(usage, 0.0), 100.0)


class CpuMonitor:
    """Tracks /proc/stat between calls to report usage over the interval."""

    def __init__(self, stat_path: str | Path = STAT_PATH):
        self.stat_path = Path(stat_path)
        self._prev_total: tuple[int, int] | None = None
        self._prev_cores: list[tuple[int, int]] | None = None

    def _read_total(self) -> tuple[int, int]:
        lines = _read_lines(self.stat_path)
        if not lines:
            return 0, 0
        fields = lines[0].split()
        return _idle_and_total(_leading_ints(fields[1:], 10))

    def _read_cores(self) -> list[tuple[int, int]]:
        cores = []
        for line in _read_lines(self.stat_path) or []:
            if not line.startswith("cpu") or line == "cpu":
                continue
            fields = line.split()
            if len(fields) < 9 or fields[0] == "cpu":
                continue
            try:
                numbers = [int(field) for field in fields[1:9]]
            except ValueError:
                continue
            cores.append(_idle_and_total(numbers))
        return cores

    def usage(self) -> float:
        """Overall CPU usage in percent since the previous call.

        The first call takes a short second sample to have an interval.
        """
        idle, total = self._read_total()
        if self._prev_total is None:
            self._prev_total = (idle, total)
            time.sleep(_FIRST_USAGE_WAIT)
            idle, total = self._read_total()
        prev_idle, prev_total = self._prev_total
        self._prev_total = (idle, total)
        return _usage(idle - prev_idle, total - prev_total)

    def per_core_usage(self) -> list[float]:
        """Usage in percent of each core since the previous call."""
        cores = self._read_cores()
        while self._prev_cores is None or len(self._prev_cores) != len(cores):
            self._prev_cores = cores
            time.sleep(_FIRST_CORE_WAIT)
            cores = self._read_cores()
        usages = [
            _usage(idle - prev_idle, total - prev_total)
            for (idle, total), (prev_idle, prev_total) in zip(cores, self._prev_cores)
        ]
        self._prev_cores = cores
        return usages


_default_monitor = CpuMonitor()


def get_cpu_usage() -> float:
    """Overall CPU usage in percent, tracked across calls."""
    return _default_monitor.usage()


def get_per_core_usage() -> list[float]:
    """Per-core CPU usage in percent, tracked across calls."""
    return _default_monitor.per_core_usage()


def get_cpu_name(cpuinfo_path: str | Path = CPUINFO_PATH) -> str:
    """The first "model name" entry, or an error text when it cannot be found."""
    lines = _read_lines(cpuinfo_path)
    if lines is None:
        return f"Error: Could not open {cpuinfo_path}."
    for line in lines:
        if not line.startswith("model name"):
            continue
        _, colon, name = line.partition(":")
        if colon:
            return name.lstrip(" \t")
    return "Error: CPU model not found."


def get_running_processes(stat_path: str | Path = STAT_PATH) -> int:
    """The procs_running count from /proc/stat, 0 when absent."""
    count = 0
    for line in _read_lines(stat_path) or []:
        if line.startswith("procs_running "):
            count = int(line.split()[1])
            break
    return max(count, 0)


def get_cpu_frequency(cpuinfo_path: str | Path = CPUINFO_PATH) -> float:
    """The first "cpu MHz" entry in MHz, 0.0 when absent."""
    for line in _read_lines(cpuinfo_path) or []:
        if line.startswith("cpu MHz"):
            value = line.partition(":")[2].split()
            try:
                return float(value[0]) if value else 0.0
            except ValueError:
                return 0.0
    return 0.0


def get_no_logical_processors(cpuinfo_path: str | Path = CPUINFO_PATH) -> int:
    """Number of "processor" entries in /proc/cpuinfo."""
    return sum(1 for line in _read_lines(cpuinfo_path) or [] if line.startswith("processor"))