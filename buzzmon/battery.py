"""Battery status read from /sys/class/power_supply."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

POWER_SUPPLY_DIR = "/sys/class/power_supply"
_BATTERIES = ("BAT0", "BAT1")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class BatteryInfo:
    """Battery status text and charge percentage (-1 when unknown)."""

    status: str = "Unavailable"
    current_charge: int = -1

    def to_json(self) -> dict:
        return {"status": self.status, "current_capacity": self.current_charge}


def get_battery_info(power_supply_dir: str | Path = POWER_SUPPLY_DIR) -> BatteryInfo:
    """Read BAT0, or BAT1 when BAT0 is missing."""
    base = Path(power_supply_dir)
    for name in _BATTERIES:
        try:
            status_text = (base / name / "status").read_text(errors="replace")
            capacity_text = (base / name / "capacity").read_text(errors="replace")
        except OSError:
            continue
        lines = status_text.splitlines()
        status = lines[0] if lines else ""
        match = _LEADING_INT.match(capacity_text)
        charge = int(match.group(1)) if match else -1
        return BatteryInfo(status, charge)
    return BatteryInfo()