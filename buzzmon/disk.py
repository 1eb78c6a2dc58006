"""Block device counters read from /proc/diskstats."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path

DISKSTATS_PATH = "/proc/diskstats"
_COUNTER_FIELDS = 11


@dataclass
class DiskStats:
    """Cumulative I/O counters of one block device."""

    device: str
    reads_completed: int
    writes_completed: int
    sectors_read: int
    sectors_written: int
    read_time_ms: float
    write_time_ms: float

    def to_json(self) -> dict:
        return asdict(self)


def _unsigned(token: str) -> int | None:
    return int(token) if token.isascii() and token.isdigit() else None


def parse_diskstats(text: str) -> list[DiskStats]:
    """Parse diskstats text, leaving out loop and RAM devices and malformed lines."""
    disks = []
    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 3:
            continue
        try:
            int(fields[0])
            int(fields[1])
        except ValueError:
            continue
        device = fields[2]
        if "loop" in device or "ram" in device:
            continue
        counters = [_unsigned(token) for token in fields[3 : 3 + _COUNTER_FIELDS]]
        if len(counters) < _COUNTER_FIELDS or None in counters:
            continue
        rd_ios, _, rd_sectors, rd_time, wr_ios, _, wr_sectors, wr_time = counters[:8]
        disks.append(
            DiskStats(
                device=device,
                reads_completed=rd_ios,
                writes_completed=wr_ios,
                sectors_read=rd_sectors,
                sectors_written=wr_sectors,
                read_time_ms=float(rd_time),
                write_time_ms=float(wr_time),
            )
        )
    return disks


def get_disk_stats(path: str | Path = DISKSTATS_PATH) -> list[DiskStats]:
    """Counters of every listed disk; empty when the file cannot be read."""
    try:
        text = Path(path).read_text(errors="replace")
    except OSError:
        return []
    return parse_diskstats(text)