"""Network interface transfer rates from /proc/net/dev."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

NET_DEV_PATH = "/proc/net/dev"


class InterfaceCounters(NamedTuple):
    """Cumulative byte counters of one interface."""

    interface: str
    rx_bytes: int
    tx_bytes: int


@dataclass
class NetworkStats:
    """Transfer rates of one interface in bytes per second."""

    interface: str
    upload_rate: float
    download_rate: float

    def to_json(self) -> dict:
        return {
            "interface": self.interface,
            "upload_rate_bytes_per_sec": self.upload_rate,
            "download_rate_bytes_per_sec": self.download_rate,
        }


def parse_net_dev(text: str) -> list[InterfaceCounters]:
    """Parse /proc/net/dev text, skipping its two header lines."""
    counters = []
    for line in text.splitlines()[2:]:
        name, colon, rest = line.partition(":")
        fields = rest.split()
        if not colon or len(fields) < 9:
            continue
        try:
            rx_bytes, tx_bytes = int(fields[0]), int(fields[8])
        except ValueError:
            continue
        counters.append(InterfaceCounters(name.lstrip(" "), rx_bytes, tx_bytes))
    return counters


def compute_rates(
    before: list[InterfaceCounters], after: list[InterfaceCounters]
) -> list[NetworkStats]:
    """Byte deltas per interface present in both samples, never negative."""
    previous = {counters.interface: counters for counters in before}
    results = []
    for counters in after:
        old = previous.get(counters.interface)
        if old is None:
            continue
        results.append(
            NetworkStats(
                interface=counters.interface,
                upload_rate=float(max(counters.tx_bytes - old.tx_bytes, 0)),
                download_rate=float(max(counters.rx_bytes - old.rx_bytes, 0)),
            )
        )
    return results


def _sample(path: Path) -> list[InterfaceCounters]:
    try:
        return parse_net_dev(path.read_text(errors="replace"))
    except OSError:
        return []


def get_network_rates(path: str | Path = NET_DEV_PATH, interval: float = 1.0) -> list[NetworkStats]:
    """Sample twice, ``interval`` seconds apart, and report bytes per second."""
    source = Path(path)
    before = _sample(source)
    time.sleep(interval)
    after = _sample(source)
    rates = compute_rates(before, after)
    if interval > 0:
        for stats in rates:
            stats.upload_rate /= interval
            stats.download_rate /= interval
    return rates