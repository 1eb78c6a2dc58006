from buzzmon.network import (
    InterfaceCounters,
    NetworkStats,
    compute_rates,
    get_network_rates,
    parse_net_dev,
)

HEADER = (
    "Inter-|   Receive                                                |  Transmit\n"
    " face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed\n"
)
NET_DEV = HEADER + (
    "    lo:    1000      10    0    0    0     0          0         0     1000      10    0    0    0     0       0          0\n"
    "  eth0:    5000      50    0    0    0     0          0         0     7000      70    0    0    0     0       0          0\n"
)


def test_parse_net_dev():
    assert parse_net_dev(NET_DEV) == [
        InterfaceCounters("lo", 1000, 1000),
        InterfaceCounters("eth0", 5000, 7000),
    ]


def test_parse_skips_headers_and_malformed_lines():
    assert parse_net_dev(HEADER + "nonsense line\n  wlan0: 1 2\n") == []


def test_compute_rates_from_zero():
    before = [InterfaceCounters("eth0", 0, 0)]
    after = [InterfaceCounters("eth0", 5000, 7000)]
    assert compute_rates(before, after) == [NetworkStats("eth0", 7000.0, 5000.0)]


def test_compute_rates_clamps_counter_reset():
    before = [InterfaceCounters("eth0", 5000, 7000)]
    after = [InterfaceCounters("eth0", 10, 20)]
    stats = compute_rates(before, after)[0]
    assert (stats.upload_rate, stats.download_rate) == (0.0, 0.0)


def test_compute_rates_skips_new_interfaces():
    before = [InterfaceCounters("lo", 0, 0)]
    after = [InterfaceCounters("lo", 1, 1), InterfaceCounters("eth1", 9, 9)]
    assert [s.interface for s in compute_rates(before, after)] == ["lo"]


def test_get_network_rates_static_file(tmp_path):
    path = tmp_path / "dev"
    path.write_text(NET_DEV)
    rates = get_network_rates(path, 0)
    assert [s.interface for s in rates] == ["lo", "eth0"]
    assert all(s.upload_rate == 0.0 and s.download_rate == 0.0 for s in rates)


def test_get_network_rates_missing_file(tmp_path):
    assert get_network_rates(tmp_path / "absent", 0) == []


def test_to_json():
    stats = NetworkStats("eth0", 7000.0, 5000.0)
    assert stats.to_json() == {
        "interface": "eth0",
        "upload_rate_bytes_per_sec": 7000.0,
        "download_rate_bytes_per_sec": 5000.0,
    }