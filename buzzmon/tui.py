"""Interactive terminal view that refreshes system figures and takes commands."""

from __future__ import annotations

import os
import re
import select
import signal
import sys
import threading
import time
from collections import deque
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from . import snapshot
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
from .formatting import (
    CLEAR,
    HIDE_CURSOR,
    HOME,
    SHOW_CURSOR,
    Theme,
    fmt_pct,
    human_bytes,
    human_bytes_total,
    render_kv,
    render_line,
    render_table,
)
from .memory import get_mem_value, get_memory_usage
from .network import get_network_rates
from .processes import ProcessSignalError, get_all_processes, kill_process

MIN_REFRESH_MS = 250
MIN_TOP = 1
SORT_CHOICES = ("cpu", "mem")

NETWORK_HUMANIZE: dict[str, Callable[[float], str]] = {
    "rate": human_bytes,
    "bytes": human_bytes,
}
DISK_HUMANIZE: dict[str, Callable[[float], str]] = {
    "bytes": human_bytes_total,
    "rate": human_bytes,
}

_CPU_FIRST_COLS = [
    "process_id", "process_name", "user", "status", "threads", "type",
    "cpu.cpu_usage", "cpu.cpu_time", "memory.memory_percent", "memory.memory_usage_kb",
]
_MEM_FIRST_COLS = [
    "process_id", "process_name", "user", "status", "threads", "type",
    "memory.memory_percent", "memory.memory_usage_kb", "cpu.cpu_usage", "cpu.cpu_time",
]

_ATOI = re.compile(r"\s*([+-]?\d+)")
_STREAM_INT = re.compile(r"[+-]?\d+")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_MESSAGE_PAUSE = 0.9


@dataclass
class Options:
    """Settings of the terminal view."""

    refresh_ms: int = 2000
    no_color: bool = False
    sort: str = "cpu"
    top: int = 25


@dataclass
class KillCommand:
    """A request typed at the prompt to signal a process."""

    pid: int
    sig: int


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    if not match:
        return 0
    return min(max(int(match.group(1)), _INT_MIN), _INT_MAX)


def _usage(prog: str) -> str:
    return f"Usage: {prog} [--refresh <ms>] [--no-color] [--sort cpu|mem] [--top N]"


def parse_opts(argv: Sequence[str] | None = None) -> Options:
    """Read options; unknown arguments are ignored, ``--help`` prints usage and exits."""
    args = deque(sys.argv[1:] if argv is None else argv)
    options = Options()
    while args:
        arg = args.popleft()
        if arg == "--refresh" and args:
            options.refresh_ms = max(MIN_REFRESH_MS, _atoi(args.popleft()))
        elif arg == "--no-color":
            options.no_color = True
        elif arg == "--sort" and args:
            choice = args.popleft()
            options.sort = choice if choice in SORT_CHOICES else "cpu"
        elif arg == "--top" and args:
            options.top = max(MIN_TOP, _atoi(args.popleft()))
        elif arg in ("-h", "--help"):
            prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "buzz"
            print(_usage(prog))
            raise SystemExit(0)
    return options


def _take_int(tokens: deque[str]) -> int | None:
    """Read a leading integer the way a stream extraction does; None on failure."""
    if not tokens:
        return None
    token = tokens.popleft()
    match = _STREAM_INT.match(token)
    if not match:
        return None
    rest = token[match.end():]
    if rest:
        tokens.appendleft(rest)
    value = int(match.group())
    if not _INT_MIN <= value <= _INT_MAX:
        return None
    return value


def parse_kill_command(line: str) -> KillCommand | None:
    """Parse ``k <pid> [--sigkill|--sigterm|--signal <num>]``; None for other commands.

    A PID that cannot be read is reported as 0, and reading stops at the
    first value that is not a number.
    """
    tokens = deque(line.split())
    if not tokens or tokens.popleft() not in ("k", "kill"):
        return None
    sig = int(signal.SIGTERM)
    pid = _take_int(tokens)
    if pid is None:
        return KillCommand(pid=0, sig=sig)
    while tokens:
        option = tokens.popleft()
        if option in ("--sigkill", "--force"):
            sig = int(signal.SIGKILL)
        elif option == "--sigterm":
            sig = int(signal.SIGTERM)
        elif option == "--signal":
            value = _take_int(tokens)
            if value is None:
                break
            sig = value
    return KillCommand(pid=pid, sig=sig)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _nested_number(row: Mapping, dotted_key: str, default: float = 0.0) -> float:
    current: object = row
    for part in dotted_key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return float(current) if _is_number(current) else default


def sort_processes(rows: Sequence[Mapping], sort: str = "cpu") -> list[Mapping]:
    """Process rows ordered by CPU% (or memory% for ``"mem"``), highest first."""
    key = "memory.memory_percent" if sort == "mem" else "cpu.cpu_usage"
    return sorted(rows, key=lambda row: _nested_number(row, key), reverse=True)


def humanize_rows(
    rows: Sequence[Mapping], keys: Mapping[str, Callable[[float], str]]
) -> list[dict]:
    """Copies of ``rows`` with numeric fields turned into readable sizes.

    A field whose name contains one of the ``keys`` substrings is formatted
    with the first matching formatter, in the mapping's order.
    """
    result = []
    for row in rows:
        converted = dict(row)
        for name, value in row.items():
            if not _is_number(value):
                continue
            for fragment, formatter in keys.items():
                if fragment in name:
                    converted[name] = formatter(float(value))
                    break
        result.append(converted)
    return result


def _summary(options: Options) -> list[tuple[str, str]]:
    cpu_usage = get_cpu_usage()
    cpu_name = get_cpu_name()  # read as the full view does, though not displayed
    del cpu_name
    running = get_running_processes()
    frequency = get_cpu_frequency()
    cores = get_no_logical_processors()

    memory_usage = get_memory_usage()
    swap_free = get_mem_value("SwapFree:")
    swap_total = get_mem_value("SwapTotal:")
    mem_total = get_mem_value("MemTotal:")
    mem_available = get_mem_value("MemAvailable:")

    battery = get_battery_info()

    rows = [
        ("CPU", fmt_pct(cpu_usage)),
        ("CPU Freq (GHz)", f"{frequency:.2f}"),
        ("Procs Running", str(running)),
        ("Cores", str(cores)),
        ("Memory Used", fmt_pct(memory_usage)),
        ("Swap Free", human_bytes_total(1024.0 * swap_free)),
        ("Swap Total", human_bytes_total(1024.0 * swap_total)),
    ]
    if mem_total > 0:
        rows.append(("Mem Total", human_bytes_total(1024.0 * mem_total)))
    if mem_available > 0:
        rows.append(("Mem Avail", human_bytes_total(1024.0 * mem_available)))
    rows.append(("Battery", f"{battery.status} ({battery.current_charge}%)"))
    rows.append(("Refresh", f"{options.refresh_ms} ms"))
    return rows


def _render_screen(options: Options, theme: Theme) -> str:
    summary = _summary(options)
    processes = sort_processes([p.to_json() for p in get_all_processes()], options.sort)
    net_rows = [stats.to_json() for stats in get_network_rates()]
    disk_rows = [disk.to_json() for disk in get_disk_stats()]

    by_memory = options.sort == "mem"
    parts = [
        CLEAR,
        HOME,
        f"{theme.on(theme.ok)}buzz: a lightweight resource monitor{theme.on(theme.reset)}  "
        f"{theme.on(theme.dim)}(configure with --refresh <ms> --sort <cpu|mem> --top <N>)"
        f"{theme.on(theme.reset)}\n",
        render_line(theme=theme),
        render_kv(summary, theme),
        render_line(theme=theme),
        render_table(
            f"Processes (sorted by {'Memory%' if by_memory else 'CPU%'}, top {options.top})",
            processes,
            _MEM_FIRST_COLS if by_memory else _CPU_FIRST_COLS,
            options.top,
            theme=theme,
        ),
        render_line(theme=theme),
    ]
    core_rows = [
        {"core": core, "usage_percent": usage}
        for core, usage in enumerate(get_per_core_usage())
    ]
    parts += [
        render_table("CPU Cores", core_rows, ["core", "usage_percent"], 128, theme=theme),
        render_line(theme=theme),
        render_table(
            "Network Interfaces",
            humanize_rows(net_rows, NETWORK_HUMANIZE),
            ["interface", "download_rate", "upload_rate"],
            theme=theme,
        ),
        render_line(theme=theme),
        render_table("Disks", humanize_rows(disk_rows, DISK_HUMANIZE), theme=theme),
        render_line(theme=theme),
        f"{theme.on(theme.warn)}Command{theme.on(theme.reset)} [q to exit | d to download "
        "snapshot | k <pid> [--sigkill|--sigterm|--signal <num>] to kill processes]: ",
    ]
    return "".join(parts)


def _save_snapshot(theme: Theme) -> str:
    data = snapshot.make()
    path = snapshot.default_filename()
    try:
        snapshot.save_to_file(data, path)
    except OSError as exc:
        message = exc.strerror or str(exc)
        return f"\n{theme.on(theme.err)}Snapshot failed: {theme.on(theme.reset)}{message}\n"
    try:
        display = str(Path.cwd() / path)
    except OSError:
        display = path
    return f"\n{theme.on(theme.ok)}Saved snapshot: {theme.on(theme.reset)}{display}\n"


def _signal_process(command: KillCommand, theme: Theme) -> str:
    if command.pid <= 1:
        return f"\n{theme.on(theme.warn)}Refusing to signal PID <= 1{theme.on(theme.reset)}\n"
    try:
        kill_process(command.pid, command.sig)
    except ProcessSignalError as exc:
        return (
            f"\n{theme.on(theme.err)}ERR{theme.on(theme.reset)}: "
            f"kill({command.pid}, {command.sig}) {exc}\n"
        )
    return (
        f"\n{theme.on(theme.ok)}OK{theme.on(theme.reset)}: "
        f"kill({command.pid}, {command.sig}) success\n"
    )


def _handle_line(line: str, theme: Theme) -> bool:
    """Act on one typed command; False means the view should close."""
    line = line.strip()
    if line in ("q", "quit", "exit"):
        return False
    if not line:
        return True
    message = None
    if line.split()[0] == "d":
        message = _save_snapshot(theme)
    else:
        command = parse_kill_command(line)
        if command is not None:
            message = _signal_process(command, theme)
    if message is not None:
        sys.stdout.write(message)
        sys.stdout.flush()
        time.sleep(_MESSAGE_PAUSE)
    return True


def _wait_for_input(timeout: float) -> bool:
    try:
        ready, _, _ = select.select([sys.stdin], [], [], timeout)
    except (OSError, ValueError):
        time.sleep(timeout)
        return False
    return bool(ready)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the refreshing terminal view until quit, interrupted or stdin closes."""
    options = parse_opts(argv)
    theme = Theme(enabled=not options.no_color)
    stop = threading.Event()

    def on_signal(signum, frame):
        stop.set()

    previous = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            previous[signum] = signal.signal(signum, on_signal)
        except ValueError:
            pass

    sys.stdout.write(HIDE_CURSOR)
    try:
        while not stop.is_set():
            started = time.monotonic()
            sys.stdout.write(_render_screen(options, theme))
            sys.stdout.flush()

            elapsed_ms = int((time.monotonic() - started) * 1000)
            wait_ms = max(0, options.refresh_ms - elapsed_ms)
            if not _wait_for_input(wait_ms / 1000.0):
                continue
            line = sys.stdin.readline()
            if not line:
                break
            if not _handle_line(line, theme):
                break
    finally:
        sys.stdout.write(SHOW_CURSOR + theme.on(theme.reset))
        sys.stdout.flush()
        for signum, handler in previous.items():
            signal.signal(signum, handler)
    return 0