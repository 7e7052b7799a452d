"""USB device enumeration sensor."""

import asyncio
import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .base import BaseSensor, SensorError, SensorReport
from .platform import Platform

SYSFS_USB_DIR = Path("/sys/bus/usb/devices")

WINDOWS_USB_SCRIPT = (
    "Get-PnpDevice -PresentOnly | Where-Object { $_.InstanceId -match '^USB\\\\VID_' } | "
    "Select-Object FriendlyName, InstanceId, Manufacturer | ConvertTo-Json"
)

_WINDOWS_ID = re.compile(r"VID_([0-9A-Fa-f]{4})&PID_([0-9A-Fa-f]{4})(?:[^\\]*\\(.+))?")
_HEX = re.compile(r"0x([0-9a-fA-F]+)")


@dataclass
class UsbDevice:
    """A connected USB device."""

    vendor_id: int
    product_id: int
    product: str = ""
    manufacturer: str = ""
    serial: str = ""
    bus: int | None = None
    address: int | None = None

    @property
    def display_name(self) -> str:
        return self.product or f"Device {self.vendor_id:04x}:{self.product_id:04x}"


def _read(path: Path) -> str:
    try:
        return path.read_text().strip()
    except OSError:
        return ""


def read_sysfs(root: Path = SYSFS_USB_DIR) -> list[UsbDevice]:
    """Read devices from /sys/bus/usb/devices (interfaces are skipped)."""
    devices = []
    if not root.is_dir():
        return devices

    for entry in sorted(root.iterdir()):
        vendor = _read(entry / "idVendor")
        product = _read(entry / "idProduct")
        if not vendor or not product:
            continue
        bus = _read(entry / "busnum")
        devnum = _read(entry / "devnum")
        devices.append(
            UsbDevice(
                vendor_id=int(vendor, 16),
                product_id=int(product, 16),
                product=_read(entry / "product"),
                manufacturer=_read(entry / "manufacturer"),
                serial=_read(entry / "serial"),
                bus=int(bus) if bus.isdigit() else None,
                address=int(devnum) if devnum.isdigit() else None,
            )
        )
    return devices


def _hex_id(value: str | None) -> int:
    match = _HEX.search(value or "")
    return int(match.group(1), 16) if match else 0


def parse_system_profiler(data: dict[str, Any]) -> list[UsbDevice]:
    """Walk the nested ``system_profiler SPUSBDataType -json`` tree."""
    devices: list[UsbDevice] = []

    def walk(items: list[dict[str, Any]]) -> None:
        for item in items:
            if "vendor_id" in item or "product_id" in item:
                location = item.get("location_id", "")
                bus_match = _HEX.search(location)
                devices.append(
                    UsbDevice(
                        vendor_id=_hex_id(item.get("vendor_id")),
                        product_id=_hex_id(item.get("product_id")),
                        product=item.get("_name", ""),
                        manufacturer=item.get("manufacturer", ""),
                        serial=item.get("serial_num", ""),
                        # location id 0xBBxxxxxx carries the bus in the top byte
                        bus=int(bus_match.group(1), 16) >> 24 if bus_match else None,
                    )
                )
            walk(item.get("_items", []))

    for controller in data.get("SPUSBDataType", []):
        walk(controller.get("_items", []))
    return devices


def parse_windows_devices(data: Any) -> list[UsbDevice]:
    if isinstance(data, dict):
        data = [data]
    devices = []
    for entry in data or []:
        match = _WINDOWS_ID.search(entry.get("InstanceId") or "")
        if not match:
            continue
        serial = match.group(3) or ""
        devices.append(
            UsbDevice(
                vendor_id=int(match.group(1), 16),
                product_id=int(match.group(2), 16),
                product=entry.get("FriendlyName") or "",
                manufacturer=entry.get("Manufacturer") or "",
                # Windows synthesizes "&"-laden ids for devices without a serial
                serial="" if "&" in serial else serial,
            )
        )
    return devices


def format_devices(devices: list[UsbDevice]) -> SensorReport:
    report = SensorReport(title="USB Devices")
    if not devices:
        report.add("No USB devices found.")
        return report

    for index, device in enumerate(devices, start=1):
        report.add(f"{index}. {device.display_name}")
        if device.manufacturer:
            report.add(f"   Manufacturer: {device.manufacturer}")
        report.add(
            f"   Vendor ID: {device.vendor_id:04x}, Product ID: {device.product_id:04x}"
        )
        if device.serial:
            report.add(f"   Serial: {device.serial}")
        if device.bus is not None:
            address = device.address if device.address is not None else "?"
            report.add(f"   Bus: {device.bus}, Device: {address}")
        report.add()

    report.add(f"Total: {len(devices)} USB devices")
    return report


class UsbSensor(BaseSensor):
    """List connected USB devices."""

    name = "get_usb_devices"
    description = "USB devices"

    async def devices(self) -> list[UsbDevice]:
        if self.platform == Platform.LINUX:
            return await asyncio.to_thread(read_sysfs)

        if self.platform == Platform.MACOS:
            result = await self.executor.run(
                ["system_profiler", "SPUSBDataType", "-json"], timeout=30
            )
            if not result.success:
                raise SensorError(f"Failed to list USB devices: {result.output}")
            return parse_system_profiler(_load_json(result.stdout))

        if self.platform == Platform.WINDOWS:
            result = await self.executor.run_powershell(WINDOWS_USB_SCRIPT)
            if not result.success:
                raise SensorError(f"Failed to list USB devices: {result.output}")
            return parse_windows_devices(_load_json(result.stdout) if result.stdout else [])

        raise self._unsupported()

    async def list_devices(self) -> SensorReport:
        return format_devices(await self.devices())


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SensorError(f"Failed to parse USB device list: {e}") from e
