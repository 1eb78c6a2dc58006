"""Text rendering helpers for the terminal view: tables, units and colours."""

from __future__ import annotations

import shutil
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

CLEAR = "\033[H\033[2J\033[3J"
HOME = "\033[H"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"

_DEFAULT_WIDTH = 120
_MAX_COL_WIDTH = 40
_MIN_COL_WIDTH = 6
_PADDING = 2
_COL_GAP = 2


@dataclass
class Theme:
    """ANSI colour codes, switched off as a whole by ``enabled``."""

    reset: str = "\033[0m"
    dim: str = "\033[2m"
    header: str = "\033[1;36m"
    title: str = "\033[1;35m"
    ok: str = "\033[1;32m"
    warn: str = "\033[1;33m"
    err: str = "\033[1;31m"
    enabled: bool = True

    def on(self, code: str) -> str:
        """``code`` when colours are enabled, otherwise an empty string."""
        return code if self.enabled else ""


def flatten_json(value: object, prefix: str = "") -> dict[str, str]:
    """Flatten nested dicts and lists into dotted / indexed keys with text values."""
    out: dict[str, str] = {}
    _flatten(value, prefix, out)
    return out


def _flatten(value: object, prefix: str, out: dict[str, str]) -> None:
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten(item, f"{prefix}.{key}" if prefix else str(key), out)
    elif isinstance(value, (list, tuple)):
        if not value:
            out[prefix] = "[]"
        for index, item in enumerate(value):
            _flatten(item, f"{prefix}[{index}]", out)
    elif isinstance(value, str):
        out[prefix] = value
    elif isinstance(value, bool):
        out[prefix] = "true" if value else "false"
    elif isinstance(value, int):
        out[prefix] = str(value)
    elif isinstance(value, float):
        out[prefix] = f"{value:.2f}"
    elif value is None:
        out[prefix] = "null"


def fmt_pct(value: float) -> str:
    """A percentage with one decimal, e.g. ``4.2%``."""
    return f"{value:.1f}%"


def _scaled(amount: float, units: Sequence[str]) -> str:
    index = 0
    while amount >= 1024.0 and index < len(units) - 1:
        amount /= 1024.0
        index += 1
    precision = 0 if amount >= 100 else 1
    return f"{amount:.{precision}f} {units[index]}"


def human_bytes(bps: float) -> str:
    """A transfer rate with a binary unit, e.g. ``1.0 MB/s``."""
    return _scaled(float(bps), ("B/s", "KB/s", "MB/s", "GB/s", "TB/s"))


def human_bytes_total(count: float) -> str:
    """A byte count with a binary unit, e.g. ``8.0 KB``."""
    return _scaled(float(count), ("B", "KB", "MB", "GB", "TB"))


def ellipsize(text: str, max_width: int) -> str:
    """Cut ``text`` to ``max_width`` characters, ending in ``...`` where room allows."""
    if max_width <= 0:
        return ""
    if len(text) <= max_width:
        return text
    if max_width <= 3:
        return text[:max_width]
    return text[: max_width - 3] + "..."


def _terminal_width() -> int:
    columns = shutil.get_terminal_size((_DEFAULT_WIDTH, 24)).columns
    return columns if columns > 0 else _DEFAULT_WIDTH


def render_line(width: int | None = None, theme: Theme | None = None) -> str:
    """A dim dividing line two characters narrower than the terminal."""
    theme = theme or Theme()
    width = width or _terminal_width()
    return f"{theme.on(theme.dim)}{'-' * max(20, width - 2)}{theme.on(theme.reset)}\n"


def render_kv(rows: Iterable[tuple[str, str]], theme: Theme | None = None) -> str:
    """Key/value lines with the keys padded to a common width."""
    theme = theme or Theme()
    rows = list(rows)
    key_width = max((len(key) for key, _ in rows), default=0)
    return "".join(
        f"  {theme.on(theme.header)}{key.ljust(key_width)}{theme.on(theme.reset)} : {value}\n"
        for key, value in rows
    )


def render_table(
    title: str,
    rows: Sequence[Mapping],
    preferred_cols: Sequence[str] = (),
    max_rows: int = 25,
    width: int | None = None,
    theme: Theme | None = None,
) -> str:
    """A titled table of flattened rows, fitted to ``width`` columns of text.

    Preferred columns come first, the rest follow alphabetically; columns
    that do not fit are dropped from the right.
    """
    theme = theme or Theme()
    parts = [f"{theme.on(theme.title)}{title}{theme.on(theme.reset)}\n"]
    if not rows:
        parts.append("  (no data)\n")
        return "".join(parts)

    flat = [flatten_json(row) for row in rows]
    all_cols = sorted(set().union(*flat))
    available = set(all_cols)
    cols = [col for col in preferred_cols if col in available]
    used = set(cols)
    cols += [col for col in all_cols if col not in used]

    shown = flat[: max(max_rows, 0)]
    widths = [
        max([len(col)] + [len(row[col]) for row in shown if col in row]) for col in cols
    ]
    widths = [min(max(w, _MIN_COL_WIDTH), _MAX_COL_WIDTH) for w in widths]

    term_width = width or _terminal_width()
    limit = max(40, term_width - 2)

    def required(count: int) -> int:
        if count == 0:
            return 0
        return sum(widths[:count]) + (count - 1) * _COL_GAP + _PADDING

    keep = len(cols)
    while keep > 0 and required(keep) > limit:
        keep -= 1
    cols, widths = cols[:keep], widths[:keep]

    gap = " " * _COL_GAP
    header = gap.join(
        f"{theme.on(theme.header)}{ellipsize(col, w).ljust(w)}{theme.on(theme.reset)}"
        for col, w in zip(cols, widths)
    )
    parts.append(f"  {header}\n")
    parts.append(render_line(term_width, theme))
    for row in shown:
        cells = gap.join(ellipsize(row.get(col, ""), w).ljust(w) for col, w in zip(cols, widths))
        parts.append(f"  {cells}\n")
    return "".join(parts)