# buzzmon

A lightweight resource monitor for Linux. It reads `/proc` and
`/sys/class/power_supply` to report CPU, memory, process, disk, network and
battery figures. You can view them as a terminal dashboard that refreshes
itself, or print them once as a JSON report.

It uses only the Python standard library.

## Installation

```
pip install .
```

To run the tests, install the `test` extra:

```
pip install .[test]
pytest
```

## Live dashboard

```
buzz [--refresh <ms>] [--no-color] [--sort cpu|mem] [--top N]
```

- `--refresh <ms>`: time between redraws in milliseconds. Values below 250 are raised to 250. The default is 2000.
- `--no-color`: plain output without ANSI colours.
- `--sort cpu|mem`: orders processes by CPU% or memory%. Any other value falls back to `cpu`.
- `--top N`: how many processes to show, at least 1. The default is 25.
- `-h`, `--help`: prints usage and exits.

The command ignores arguments it does not recognise.

Each screen shows the following:

- a summary: CPU %, frequency, running processes, cores, memory used, swap, memory totals, battery and refresh interval;
- the process table;
- per-core CPU usage;
- network interface rates;
- disk counters.

Tables drop columns from the right when they do not fit the terminal width.

While the dashboard runs, type a command and press Enter:

- `q`, `quit` or `exit`: leave the dashboard.
- `d`: save a JSON snapshot in the current directory, named `buzz-snapshot-YYYYMMDD-HHMMSSZ.json` in UTC.
- `k <pid> [--sigkill|--force|--sigterm|--signal <num>]`, or the same with `kill` in place of `k`: send a signal to a process. The default signal is SIGTERM. PIDs of 1 or below are refused.

Ctrl-C, SIGTERM or end of input also stop the dashboard.

## JSON report

```
buzz-report
```

This prints one indented JSON object with the keys `battery`, `cpu`, `disk`,
`memory`, `network`, `process_info` and `timestamp`. The timestamp is UTC in
the form `YYYY-MM-DDTHH:MM:SSZ`. A section with nothing to list (no processes,
disks or interfaces) is `null`. The report takes a few seconds to produce:

- CPU usage is sampled over 0.25 s, and per-core usage over 0.5 s.
- Process CPU% is sampled over 0.5 s.
- Network rates are measured over one second.

```
buzz-report --kill <pid> [--force|--sigkill|--sigterm|--signal <num>]
```

This form, or `buzz-report kill <pid> ...`, sends a signal instead and prints
the outcome as JSON. The exit status is:

- 0 on success;
- 1 if the signal could not be sent;
- 2 for missing arguments, an invalid PID, or a PID of 1 or below.

## Library use

Each module can be used on its own. Most readers accept a path, so they can be
pointed at sample files:

- `buzzmon.memory`: `parse_meminfo`, `get_memory_usage`, `get_mem_value`.
- `buzzmon.cpu`: `CpuMonitor` with `usage()` and `per_core_usage()`, plus `get_cpu_usage`, `get_per_core_usage`, `get_cpu_name`, `get_cpu_frequency` (MHz), `get_running_processes` and `get_no_logical_processors`.
- `buzzmon.disk`: `parse_diskstats` and `get_disk_stats`, which return `DiskStats`. Loop and RAM devices are skipped.
- `buzzmon.network`: `parse_net_dev`, `compute_rates` and `get_network_rates(path, interval)`, which return `NetworkStats`.
- `buzzmon.battery`: `get_battery_info`, which tries `BAT0`, then `BAT1`, and returns `BatteryInfo`.
- `buzzmon.processes`: `get_all_processes`, which returns `ProcessInfo` with `CpuInfo`. It also has `parse_stat_jiffies`, `status_label`, and `kill_process(pid, sig)`, which raises `ProcessSignalError` on failure.
- `buzzmon.snapshot`: `make()`, `default_filename()`, `current_timestamp()` and `save_to_file(data, path)`, which raises `OSError` when the file cannot be written.
- `buzzmon.formatting`: `Theme`, `flatten_json`, `fmt_pct`, `human_bytes`, `human_bytes_total`, `ellipsize`, `render_line`, `render_kv`, `render_table`.
- `buzzmon.cli`: `run(argv)` and `parse_int`.

`DiskStats`, `NetworkStats`, `BatteryInfo` and `ProcessInfo` each have a
`to_json()` method that returns a plain dict.

## Limitations

- It works only on Linux, because it reads `/proc` and `/sys`.
- It keeps no history: each screen, report or snapshot reflects only the moment it was taken.
- It has no network service and no configuration file.