"""Bluetooth Low Energy discovery sensor.

On Linux the default controller is put into discovery with ``bluetoothctl``
for a fixed collection window (``scan_seconds``), after which every device
the controller knows about is listed. The window is how long results are
collected, not a timeout or a retry. macOS and Windows expose no scriptable
discovery, so there the devices already known to the system are listed.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any

from .base import BaseSensor, SensorError, SensorReport
from .platform import Platform

WINDOWS_BLUETOOTH_SCRIPT = (
    "Get-PnpDevice -Class Bluetooth -PresentOnly | "
    "Select-Object FriendlyName, InstanceId | ConvertTo-Json"
)

_ANSI = re.compile(r"\x1b\[[0-9;]*m|\x01|\x02")
_CONTROLLER = re.compile(r"^Controller (?P<addr>[0-9A-Fa-f:]{17}) (?P<name>.*?)(?: \[default\])?$")
_DEVICE = re.compile(r"Device (?P<addr>[0-9A-Fa-f:]{17})(?: (?P<rest>.*))?$")
_RSSI = re.compile(r"RSSI: (?:0x[0-9a-fA-F]+ \()?(-?\d+)\)?")
_WINDOWS_BLE = re.compile(r"BTHLE\\DEV_([0-9A-Fa-f]{12})")
_ADDRESS_LIKE = re.compile(r"^[0-9A-Fa-f]{2}([-:])[0-9A-Fa-f]{2}(\1[0-9A-Fa-f]{2}){4}$")


@dataclass
class BleDevice:
    address: str
    name: str = "Unknown"
    rssi: int | None = None


@dataclass
class AdapterScan:
    """Devices seen through one adapter, or the reason the scan failed."""

    adapter: str
    devices: list[BleDevice] = field(default_factory=list)
    error: str | None = None


def _clean(line: str) -> str:
    return _ANSI.sub("", line).strip()


def parse_controllers(output: str) -> list[tuple[str, str]]:
    """(address, name) pairs from ``bluetoothctl list``, default controller first."""
    controllers = []
    for line in output.splitlines():
        line = _clean(line)
        match = _CONTROLLER.match(line)
        if not match:
            continue
        if line.endswith("[default]"):
            controllers.insert(0, (match["addr"], match["name"]))
        else:
            controllers.append((match["addr"], match["name"]))
    return controllers


def parse_devices(devices_output: str, scan_output: str = "") -> list[BleDevice]:
    """Merge ``bluetoothctl devices`` with names and RSSI seen while scanning."""
    found: dict[str, BleDevice] = {}

    def upsert(address: str) -> BleDevice:
        address = address.upper()
        if address not in found:
            found[address] = BleDevice(address=address)
        return found[address]

    for line in scan_output.splitlines():
        line = _clean(line)
        match = _DEVICE.search(line)
        if not match:
            continue
        device = upsert(match["addr"])
        rest = match["rest"] or ""
        rssi = _RSSI.search(rest)
        if rssi:
            device.rssi = int(rssi.group(1))
        elif line.startswith("[NEW]") and rest and not _ADDRESS_LIKE.match(rest):
            device.name = rest

    for line in devices_output.splitlines():
        match = _DEVICE.search(_clean(line))
        if not match:
            continue
        device = upsert(match["addr"])
        name = match["rest"] or ""
        if name and not _ADDRESS_LIKE.match(name):
            device.name = name

    return list(found.values())


def parse_system_profiler(data: dict[str, Any]) -> list[AdapterScan]:
    """Controllers and known devices from ``system_profiler SPBluetoothDataType -json``."""
    scans = []
    for entry in data.get("SPBluetoothDataType", []):
        controller = entry.get("controller_properties", {})
        address = controller.get("controller_address")
        if not address:
            continue
        chipset = controller.get("controller_chipset", "Bluetooth")
        scan = AdapterScan(adapter=f"{chipset} ({address})")
        for group in ("device_connected", "device_not_connected"):
            for item in entry.get(group, []):
                for name, props in item.items():
                    rssi = props.get("device_rssi")
                    scan.devices.append(
                        BleDevice(
                            address=props.get("device_address", "??:??:??:??:??:??"),
                            name=name,
                            rssi=int(rssi) if str(rssi).lstrip("-").isdigit() else None,
                        )
                    )
        scans.append(scan)
    return scans


def parse_windows_devices(data: Any) -> list[AdapterScan]:
    if isinstance(data, dict):
        data = [data]
    if not data:
        return []
    scan = AdapterScan(adapter="Windows Bluetooth")
    for entry in data:
        match = _WINDOWS_BLE.search(entry.get("InstanceId") or "")
        if not match:
            continue
        raw = match.group(1).upper()
        scan.devices.append(
            BleDevice(
                address=":".join(raw[i:i + 2] for i in range(0, 12, 2)),
                name=entry.get("FriendlyName") or "Unknown",
            )
        )
    return [scan]


def format_scans(scans: list[AdapterScan]) -> SensorReport:
    if not scans:
        return SensorReport(title="Bluetooth Status").add("No Bluetooth adapters found.")

    report = SensorReport(title="Bluetooth Devices")
    for scan in scans:
        report.add(f"Adapter: {scan.adapter}")
        report.add()
        if scan.error:
            report.add(f"  Could not scan: {scan.error}")
        elif not scan.devices:
            report.add("  No BLE devices found nearby.")
        else:
            for index, device in enumerate(scan.devices, start=1):
                rssi = f" ({device.rssi}dBm)" if device.rssi is not None else ""
                report.add(f"  {index}. {device.name}{rssi}")
                report.add(f"     Address: {device.address}")
            report.add()
            report.add(f"  Total: {len(scan.devices)} BLE devices")
        report.add()
    return report


class BluetoothSensor(BaseSensor):
    """Discover nearby Bluetooth LE devices."""

    name = "scan_ble_devices"
    description = "Scan for BLE devices"

    def __init__(self, executor=None, default_scan_seconds: int = 3):
        super().__init__(executor)
        self.default_scan_seconds = default_scan_seconds

    async def _scan_linux(self, scan_seconds: int) -> list[AdapterScan]:
        if not self.executor.available("bluetoothctl"):
            raise SensorError("bluetoothctl is not installed")

        listing = await self.executor.run(["bluetoothctl", "list"])
        if not listing.success:
            raise SensorError(f"Failed to get adapters: {listing.output}")
        controllers = parse_controllers(listing.stdout)
        if not controllers:
            return []

        # Discovery runs on the default controller
        address, name = controllers[0]
        scans = [AdapterScan(adapter=f"{name} ({address})")]
        scans.extend(
            AdapterScan(adapter=f"{n} ({a})", error="only the default controller is scanned")
            for a, n in controllers[1:]
        )

        discovery = await self.executor.run(
            ["bluetoothctl", "--timeout", str(scan_seconds), "scan", "on"],
            timeout=scan_seconds + 5,
        )
        if discovery.timed_out or "Failed to start discovery" in discovery.output:
            scans[0].error = discovery.output or "discovery did not start"
            return scans

        devices = await self.executor.run(["bluetoothctl", "devices"])
        if not devices.success:
            raise SensorError(f"Failed to get peripherals: {devices.output}")
        scans[0].devices = parse_devices(devices.stdout, discovery.stdout)
        return scans

    async def scan(self, scan_seconds: int | None = None) -> list[AdapterScan]:
        scan_seconds = scan_seconds or self.default_scan_seconds

        if self.platform == Platform.LINUX:
            return await self._scan_linux(scan_seconds)

        if self.platform == Platform.MACOS:
            result = await self.executor.run(
                ["system_profiler", "SPBluetoothDataType", "-json"], timeout=30
            )
            if not result.success:
                raise SensorError(f"Failed to get adapters: {result.output}")
            return parse_system_profiler(_load_json(result.stdout))

        if self.platform == Platform.WINDOWS:
            result = await self.executor.run_powershell(WINDOWS_BLUETOOTH_SCRIPT)
            if not result.success:
                raise SensorError(f"Failed to get adapters: {result.output}")
            return parse_windows_devices(_load_json(result.stdout) if result.stdout else [])

        raise self._unsupported()

    async def scan_devices(self, scan_seconds: int | None = None) -> SensorReport:
        return format_scans(await self.scan(scan_seconds))


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SensorError(f"Failed to parse Bluetooth data: {e}") from e
