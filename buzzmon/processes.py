"""Per-process information read from /proc, and sending signals to processes."""

from __future__ import annotations

import os
import signal
import time
from dataclasses import dataclass, field
from pathlib import Path
from pwd import getpwuid

from .cpu import get_no_logical_processors
from .memory import get_mem_value

PROC_ROOT = "/proc"

STATUS_LABELS = {
    "R": "Running",
    "S": "Sleeping",
    "Z": "Zombie",
    "T": "Traced or Stopped",
    "D": "Sleeping, Uninterruptable",
}

_TOTAL_FIELDS = 10


class ProcessSignalError(OSError):
    """Raised when a signal cannot be delivered to a process."""

    def __str__(self) -> str:
        return self.strerror or super().__str__()


@dataclass
class CpuInfo:
    """CPU figures of one process."""

    cpu_usage: float = 0.0  # percent over the sampling interval
    cpu_time: float = 0.0  # cumulative seconds


@dataclass
class ProcessInfo:
    """A snapshot of one running process."""

    pid: int
    process_name: str
    type: str
    cpu: CpuInfo = field(default_factory=CpuInfo)
    memory_usage: int = 0  # kB (VmRSS)
    memory_percent: float = 0.0  # percent of MemTotal
    status: str = "Unknown"
    threads: int = 0
    user: str = "unknown"

    def to_json(self) -> dict:
        return {
            "type": self.type,
            "process_id": self.pid,
            "process_name": self.process_name,
            "user": self.user,
            "status": self.status,
            "cpu": {"cpu_usage": self.cpu.cpu_usage, "cpu_time": self.cpu.cpu_time},
            "memory": {
                "memory_usage_kb": self.memory_usage,
                "memory_percent": self.memory_percent,
            },
            "threads": self.threads,
        }


def status_label(code: str) -> str:
    """Readable name of a one-letter process state, "Unknown" otherwise."""
    return STATUS_LABELS.get(code, "Unknown")


def parse_stat_jiffies(line: str) -> int:
    """utime + stime (in clock ticks) from a /proc/<pid>/stat line, 0 if malformed."""
    _, paren, rest = line.rpartition(")")
    if not paren:
        return 0
    fields = rest.split()
    # fields[0] is the state; fields[1:13] are fields 4..15 of the stat line
    if len(fields) < 13:
        return 0
    try:
        numbers = [int(item) for item in fields[1:13]]
    except ValueError:
        return 0
    utime, stime = numbers[10], numbers[11]
    return utime + stime


def _read_text(path: Path) -> str:
    try:
        return path.read_text(errors="replace")
    except OSError:
        return ""


def _first_line(path: Path) -> str:
    lines = _read_text(path).splitlines()
    return lines[0] if lines else ""


def _value_after(words: list[str], key: str) -> str | None:
    try:
        position = words.index(key)
    except ValueError:
        return None
    return words[position + 1] if position + 1 < len(words) else None


def _int_or(text: str | None, default: int) -> int:
    if text is None:
        return default
    try:
        return int(text)
    except ValueError:
        return default


def _username(uid: int | None) -> str:
    if uid is None:
        return "unknown"
    try:
        return getpwuid(uid).pw_name
    except (KeyError, OverflowError, ValueError):
        return "unknown"


def _sysconf(name: str) -> int:
    try:
        return os.sysconf(name)
    except (OSError, ValueError):
        return 0


def _rss_kb(status_text: str, proc_dir: Path) -> int:
    rss = 0
    for line in status_text.splitlines():
        if line.startswith("VmRSS:"):
            parts = line[len("VmRSS:"):].split()
            if len(parts) >= 2:
                rss = _int_or(parts[0], 0)
            break
    if rss == 0:
        parts = _read_text(proc_dir / "statm").split()
        if len(parts) >= 2:
            try:
                resident = int(parts[1])
                int(parts[0])
            except ValueError:
                return rss
            rss = resident * (_sysconf("SC_PAGESIZE") // 1024)
    return rss


def _total_jiffies(stat_path: Path) -> int:
    fields = _first_line(stat_path).split()[1:]
    total = 0
    for item in fields[:_TOTAL_FIELDS]:
        try:
            total += int(item)
        except ValueError:
            break
    return total


def _pids(root: Path) -> list[int]:
    pids = []
    with os.scandir(root) as entries:
        for entry in entries:
            try:
                is_dir = entry.is_dir()
            except OSError:
                continue
            if is_dir and entry.name.isascii() and entry.name.isdigit():
                pids.append(int(entry.name))
    return sorted(pids)


def _read_process(proc_dir: Path, pid: int, ticks: int) -> tuple[ProcessInfo, int]:
    status_text = _read_text(proc_dir / "status")
    words = status_text.split()
    name = _first_line(proc_dir / "comm")
    uid_field = _value_after(words, "Uid:")
    uid = _int_or(uid_field, -1) if uid_field is not None else None
    user = _username(uid if uid is not None and uid >= 0 else None)
    jiffies = parse_stat_jiffies(_first_line(proc_dir / "stat"))
    info = ProcessInfo(
        pid=pid,
        process_name=name,
        type="background process" if user == "root" or "d" in name else "app",
        cpu=CpuInfo(cpu_usage=0.0, cpu_time=jiffies / ticks if ticks > 0 else 0.0),
        memory_usage=_rss_kb(status_text, proc_dir),
        status=status_label(_value_after(words, "State:") or "Unknown"),
        threads=_int_or(_value_after(words, "Threads:"), 0),
        user=user,
    )
    return info, jiffies


def get_all_processes(proc_root: str | Path = PROC_ROOT, interval: float = 0.5) -> list[ProcessInfo]:
    """All processes still alive after an ``interval``-second CPU sampling window."""
    root = Path(proc_root)
    ticks = _sysconf("SC_CLK_TCK")

    total0 = _total_jiffies(root / "stat")
    sampled = [_read_process(root / str(pid), pid, ticks) for pid in _pids(root)]

    time.sleep(interval)

    total1 = _total_jiffies(root / "stat")
    delta_total = max(total1 - total0, 1)
    mem_total_kb = get_mem_value("MemTotal:", root / "meminfo")
    ncpu = max(get_no_logical_processors(root / "cpuinfo"), 1)

    alive = []
    for info, jiffies0 in sampled:
        proc_dir = root / str(info.pid)
        if not proc_dir.exists():
            continue
        jiffies1 = parse_stat_jiffies(_first_line(proc_dir / "stat"))
        delta_proc = max(jiffies1 - jiffies0, 0)
        usage = 100.0 * delta_proc / delta_total * ncpu
        info.cpu.cpu_usage = min(max(usage, 0.0), 100.0)
        info.cpu.cpu_time = jiffies1 / ticks if ticks > 0 else 0.0
        info.memory_percent = (
            100.0 * info.memory_usage / mem_total_kb if mem_total_kb > 0 else 0.0
        )
        alive.append(info)
    return alive


def kill_process(pid: int, sig: int = signal.SIGTERM) -> None:
    """Send ``sig`` to ``pid``; raise ProcessSignalError if it cannot be done."""
    try:
        os.kill(pid, 0)
    except OSError as exc:
        raise ProcessSignalError(
            exc.errno, f"Process not available: {os.strerror(exc.errno or 0)}"
        ) from exc
    try:
        os.kill(pid, sig)
    except (OSError, OverflowError, ValueError) as exc:
        code = getattr(exc, "errno", None) or 22
        raise ProcessSignalError(code, f"Failed to send signal: {os.strerror(code)}") from exc