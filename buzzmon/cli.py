"""Command-line subcommands that print a JSON result."""

from __future__ import annotations

import json
import re
import signal
import sys
from collections import deque
from collections.abc import Sequence

from .processes import ProcessSignalError, kill_process

KILL_USAGE = "Usage: --kill <pid> [--force|--sigkill|--sigterm|--signal <num>]"

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def parse_int(text: str) -> int:
    """Parse a whole string as a 32-bit decimal integer; raise ValueError otherwise."""
    stripped = text.lstrip(" \t\n\v\f\r")
    if not _INTEGER.fullmatch(stripped):
        raise ValueError(f"not an integer: {text!r}")
    value = int(stripped)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _emit(result: dict) -> None:
    print(json.dumps(result, indent=4, sort_keys=True, ensure_ascii=False))


def _parse_signal(options: Sequence[str]) -> int:
    sig = int(signal.SIGTERM)
    pending = deque(options)
    while pending:
        option = pending.popleft()
        if option in ("--force", "--sigkill"):
            sig = int(signal.SIGKILL)
        elif option == "--sigterm":
            sig = int(signal.SIGTERM)
        elif option == "--signal" and pending:
            try:
                sig = parse_int(pending[0])
            except ValueError:
                continue
            pending.popleft()
    return sig


def _kill(args: Sequence[str]) -> int:
    result: dict = {"action": "kill"}
    if len(args) < 2:
        result.update(success=False, error=KILL_USAGE)
        _emit(result)
        return 2

    try:
        pid = parse_int(args[1])
    except ValueError:
        result.update(success=False, error="Invalid PID")
        _emit(result)
        return 2

    if pid <= 1:
        result.update(success=False, pid=pid, error="Refusing to signal PID <= 1")
        _emit(result)
        return 2

    sig = _parse_signal(args[2:])
    result.update(pid=pid, signal=sig)
    try:
        kill_process(pid, sig)
    except ProcessSignalError as exc:
        result.update(success=False, error=str(exc))
        _emit(result)
        return 1
    result["success"] = True
    _emit(result)
    return 0


def run(argv: Sequence[str] | None = None) -> int | None:
    """Handle a subcommand and return its exit code, or None if there is none."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        return None
    if args[0] in ("--kill", "kill"):
        return _kill(args)
    return None