"""Memory figures read from /proc/meminfo."""

from __future__ import annotations

from pathlib import Path

MEMINFO_PATH = "/proc/meminfo"


def _read_text(path: str | Path) -> str:
    try:
        return Path(path).read_text(errors="replace")
    except OSError:
        return ""


def parse_meminfo(text: str) -> dict[str, int]:
    """Map each meminfo label (trailing colon kept) to its numeric value.

    Values carry the file's own unit, which is kB for the memory sizes.
    The first occurrence of a label wins.
    """
    values: dict[str, int] = {}
    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 2:
            continue
        try:
            value = int(fields[1])
        except ValueError:
            continue
        values.setdefault(fields[0], value)
    return values


def get_memory_usage(path: str | Path = MEMINFO_PATH) -> float:
    """Percentage of memory in use: 100 * (1 - MemAvailable / MemTotal)."""
    values = parse_meminfo(_read_text(path))
    total = values.get("MemTotal:", 0)
    available = values.get("MemAvailable:", 0)
    if total <= 0:
        return 0.0
    return 100.0 * (1.0 - available / total)


def get_mem_value(key: str, path: str | Path = MEMINFO_PATH) -> int:
    """Value for a label such as ``"Cached:"`` (in kB), or 0 if it is absent."""
    return parse_meminfo(_read_text(path)).get(key, 0)