"""Battery and power status sensor."""

from dataclasses import dataclass
from pathlib import Path

import psutil

from .base import BaseSensor, SensorReport
from .platform import Platform

POWER_SUPPLY_DIR = Path("/sys/class/power_supply")


@dataclass
class BatteryDetails:
    """Energy figures read from sysfs on Linux."""

    name: str
    energy_wh: float | None = None
    energy_full_wh: float | None = None
    energy_design_wh: float | None = None
    temperature_c: float | None = None

    @property
    def health_percent(self) -> float | None:
        if not self.energy_full_wh or not self.energy_design_wh:
            return None
        return self.energy_full_wh / self.energy_design_wh * 100


def battery_state(percent: float, power_plugged: bool | None) -> str:
    """Map psutil's plugged flag to a charging state."""
    if power_plugged is None:
        return "Unknown"
    if power_plugged:
        return "Full" if percent >= 100 else "Charging"
    return "Empty" if percent <= 0 else "Discharging"


def _read_number(path: Path) -> float | None:
    try:
        return float(path.read_text().strip())
    except (OSError, ValueError):
        return None


def read_linux_details(root: Path = POWER_SUPPLY_DIR) -> list[BatteryDetails]:
    """Read energy and health from /sys/class/power_supply/BAT*."""
    details = []
    if not root.is_dir():
        return details

    for supply in sorted(root.glob("BAT*")):
        # sysfs reports micro-watt-hours, or micro-amp-hours plus voltage
        energy_now = _read_number(supply / "energy_now")
        energy_full = _read_number(supply / "energy_full")
        energy_design = _read_number(supply / "energy_full_design")
        if energy_now is None:
            voltage = _read_number(supply / "voltage_now")
            charge_now = _read_number(supply / "charge_now")
            charge_full = _read_number(supply / "charge_full")
            charge_design = _read_number(supply / "charge_full_design")
            if voltage:
                volts = voltage / 1e6
                energy_now = charge_now * volts if charge_now is not None else None
                energy_full = charge_full * volts if charge_full is not None else None
                energy_design = charge_design * volts if charge_design is not None else None

        temp = _read_number(supply / "temp")
        details.append(
            BatteryDetails(
                name=supply.name,
                energy_wh=energy_now / 1e6 if energy_now is not None else None,
                energy_full_wh=energy_full / 1e6 if energy_full is not None else None,
                energy_design_wh=energy_design / 1e6 if energy_design is not None else None,
                # tenths of a degree
                temperature_c=temp / 10 if temp is not None else None,
            )
        )
    return details


class BatterySensor(BaseSensor):
    """Report battery charge, state and time remaining."""

    name = "get_battery_status"
    description = "Get battery/power status"

    def status(self) -> SensorReport:
        report = SensorReport(title="Battery Status")
        sensors_battery = getattr(psutil, "sensors_battery", None)
        battery = sensors_battery() if sensors_battery else None

        if battery is None:
            report.add("No batteries detected.")
            report.add("(This is normal for desktop computers without UPS)")
            return report

        report.add(f"Charge: {battery.percent:.1f}%")
        report.add(f"State: {battery_state(battery.percent, battery.power_plugged)}")

        if battery.power_plugged is False and battery.secsleft not in (
            psutil.POWER_TIME_UNKNOWN,
            psutil.POWER_TIME_UNLIMITED,
        ):
            report.add(f"Time to empty: {battery.secsleft / 60:.0f} minutes")

        if self.platform == Platform.LINUX:
            details = read_linux_details()
            for index, detail in enumerate(details, start=1):
                report.add()
                report.add(f"Battery {index} ({detail.name}):")
                if detail.energy_wh is not None and detail.energy_full_wh is not None:
                    report.add(
                        f"  Energy: {detail.energy_wh:.1f} / {detail.energy_full_wh:.1f} Wh"
                    )
                if detail.health_percent is not None:
                    report.add(f"  Health: {detail.health_percent:.1f}%")
                if detail.temperature_c is not None:
                    report.add(f"  Temperature: {detail.temperature_c:.1f}°C")
            if details:
                report.add()
                report.add(f"Total batteries: {len(details)}")

        return report
