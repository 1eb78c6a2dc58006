import pytest

from buzzmon.battery import BatteryInfo, get_battery_info


def _battery(root, name, status=None, capacity=None):
    folder = root / name
    folder.mkdir()
    if status is not None:
        (folder / "status").write_text(status)
    if capacity is not None:
        (folder / "capacity").write_text(capacity)


def test_reads_bat0(tmp_path):
    _battery(tmp_path, "BAT0", "Charging\n", "85\n")
    _battery(tmp_path, "BAT1", "Discharging\n", "40\n")
    assert get_battery_info(tmp_path) == BatteryInfo("Charging", 85)


def test_falls_back_to_bat1(tmp_path):
    _battery(tmp_path, "BAT1", "Discharging\n", "40\n")
    info = get_battery_info(tmp_path)
    assert info.status == "Discharging"
    assert info.current_charge == 40


def test_bat0_without_capacity_uses_bat1(tmp_path):
    _battery(tmp_path, "BAT0", status="Full\n")
    _battery(tmp_path, "BAT1", "Discharging\n", "40\n")
    assert get_battery_info(tmp_path).status == "Discharging"


def test_unreadable_capacity_is_minus_one(tmp_path):
    _battery(tmp_path, "BAT0", "Full\n", "abc\n")
    info = get_battery_info(tmp_path)
    assert info.status == "Full"
    assert info.current_charge == -1


def test_no_battery(tmp_path):
    info = get_battery_info(tmp_path)
    assert info.status == "Unavailable"
    assert info.current_charge == -1


@pytest.mark.parametrize("status,charge", [("Charging", 85), ("Unavailable", -1)])
def test_to_json(status, charge):
    assert BatteryInfo(status, charge).to_json() == {"status": status, "current_capacity": charge}