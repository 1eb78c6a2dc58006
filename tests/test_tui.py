import signal

import pytest

from buzzmon.formatting import human_bytes, human_bytes_total
from buzzmon.tui import (
    DISK_HUMANIZE,
    NETWORK_HUMANIZE,
    KillCommand,
    Options,
    humanize_rows,
    parse_kill_command,
    parse_opts,
    sort_processes,
)


def test_parse_opts_defaults():
    options = parse_opts([])
    assert options == Options(refresh_ms=2000, no_color=False, sort="cpu", top=25)


def test_parse_opts_values():
    options = parse_opts(["--refresh", "5000", "--no-color", "--sort", "mem", "--top", "7"])
    assert options.refresh_ms == 5000
    assert options.no_color is True
    assert options.sort == "mem"
    assert options.top == 7


def test_parse_opts_clamps_refresh_and_top():
    options = parse_opts(["--refresh", "100", "--top", "0"])
    assert options.refresh_ms == 250
    assert options.top == 1


def test_parse_opts_non_numeric_refresh_falls_to_minimum():
    assert parse_opts(["--refresh", "abc"]).refresh_ms == 250


def test_parse_opts_unknown_sort_falls_back_to_cpu():
    assert parse_opts(["--sort", "disk"]).sort == "cpu"


def test_parse_opts_flag_without_value_is_ignored():
    assert parse_opts(["--refresh"]).refresh_ms == 2000


def test_parse_opts_help_exits(capsys):
    with pytest.raises(SystemExit) as info:
        parse_opts(["--help"])
    assert info.value.code == 0
    assert "[--refresh <ms>] [--no-color] [--sort cpu|mem] [--top N]" in capsys.readouterr().out


def test_parse_kill_command_default_signal():
    assert parse_kill_command("k 1234") == KillCommand(pid=1234, sig=int(signal.SIGTERM))


def test_parse_kill_command_sigkill():
    command = parse_kill_command("kill 1234 --sigkill")
    assert command == KillCommand(pid=1234, sig=int(signal.SIGKILL))
    assert parse_kill_command("k 55 --force").sig == int(signal.SIGKILL)


def test_parse_kill_command_explicit_signal():
    assert parse_kill_command("k 42 --signal 9").sig == 9


def test_parse_kill_command_last_option_wins():
    assert parse_kill_command("k 42 --sigkill --sigterm").sig == int(signal.SIGTERM)


def test_parse_kill_command_bad_signal_stops_reading():
    command = parse_kill_command("k 42 --signal x --sigkill")
    assert command.sig == int(signal.SIGTERM)


def test_parse_kill_command_bad_pid():
    assert parse_kill_command("k abc --sigkill") == KillCommand(pid=0, sig=int(signal.SIGTERM))
    assert parse_kill_command("k").pid == 0


def test_parse_kill_command_other_commands():
    assert parse_kill_command("d") is None
    assert parse_kill_command("") is None


def _proc(cpu, mem):
    return {"cpu": {"cpu_usage": cpu}, "memory": {"memory_percent": mem}}


def test_sort_processes_by_cpu_descending():
    rows = [_proc(1.0, 9.0), _proc(5.0, 1.0), _proc(3.0, 5.0)]
    ordered = sort_processes(rows, "cpu")
    usages = [row["cpu"]["cpu_usage"] for row in ordered]
    assert usages == sorted(usages, reverse=True)
    assert len(ordered) == len(rows)


def test_sort_processes_by_memory_descending():
    rows = [_proc(1.0, 9.0), _proc(5.0, 1.0), _proc(3.0, 5.0)]
    ordered = sort_processes(rows, "mem")
    percents = [row["memory"]["memory_percent"] for row in ordered]
    assert percents == sorted(percents, reverse=True)


def test_sort_processes_missing_key_sorts_last():
    rows = [{"cpu": {}}, _proc(2.0, 0.0)]
    ordered = sort_processes(rows, "cpu")
    assert ordered[0] == rows[1]
    assert ordered[1] == rows[0]


def test_humanize_rows_network():
    rows = [
        {
            "interface": "eth0",
            "upload_rate_bytes_per_sec": 2048.0,
            "download_rate_bytes_per_sec": 1048576.0,
        }
    ]
    result = humanize_rows(rows, NETWORK_HUMANIZE)
    assert result[0]["interface"] == "eth0"
    assert result[0]["upload_rate_bytes_per_sec"] == human_bytes(2048.0)
    assert result[0]["download_rate_bytes_per_sec"] == human_bytes(1048576.0)
    assert rows[0]["upload_rate_bytes_per_sec"] == 2048.0


def test_humanize_rows_disk_prefers_bytes_formatter():
    rows = [{"device": "sda", "rate_bytes": 5000, "sectors_read": 10}]
    result = humanize_rows(rows, DISK_HUMANIZE)
    assert result[0]["rate_bytes"] == human_bytes_total(5000.0)
    assert result[0]["sectors_read"] == 10
    reversed_keys = {"rate": human_bytes, "bytes": human_bytes_total}
    assert humanize_rows(rows, reversed_keys)[0]["rate_bytes"] == human_bytes(5000.0)


def test_humanize_rows_leaves_non_numbers():
    rows = [{"flag_rate": True, "name_rate": "fast"}]
    assert humanize_rows(rows, NETWORK_HUMANIZE) == rows