"""Network interface sensor."""

import ipaddress
import socket
from dataclasses import dataclass, field

import psutil

from .base import BaseSensor, SensorReport

NULL_MAC = "00:00:00:00:00:00"


@dataclass
class InterfaceInfo:
    """Addresses bound to one network interface."""

    name: str
    mac: str | None = None
    ipv4: list[tuple[str, str | None]] = field(default_factory=list)
    ipv6: list[str] = field(default_factory=list)
    is_up: bool | None = None

    @property
    def has_addresses(self) -> bool:
        return bool(self.ipv4 or self.ipv6)

    @property
    def is_loopback(self) -> bool:
        for address in [ip for ip, _ in self.ipv4] + self.ipv6:
            try:
                if ipaddress.ip_address(address.split("%")[0]).is_loopback:
                    return True
            except ValueError:
                continue
        return False


def collect_interfaces(addrs: dict, stats: dict | None = None) -> list[InterfaceInfo]:
    """Build interface records from psutil.net_if_addrs/net_if_stats output."""
    stats = stats or {}
    interfaces = []
    for name, entries in addrs.items():
        info = InterfaceInfo(name=name)
        if name in stats:
            info.is_up = stats[name].isup
        for entry in entries:
            if entry.family == socket.AF_INET:
                info.ipv4.append((entry.address, entry.netmask))
            elif entry.family == socket.AF_INET6:
                info.ipv6.append(entry.address)
            elif entry.family == psutil.AF_LINK:
                info.mac = entry.address
        interfaces.append(info)
    return interfaces


def format_interfaces(interfaces: list[InterfaceInfo]) -> SensorReport:
    report = SensorReport(title="Network Interfaces")
    if not interfaces:
        report.add("No network interfaces found.")
        return report

    for iface in interfaces:
        header = iface.name
        if iface.is_loopback:
            header += " (loopback)"
        if iface.is_up is False:
            header += " (down)"
        report.add(header)

        if iface.mac and iface.mac.lower().replace("-", ":") != NULL_MAC:
            report.add(f"  MAC: {iface.mac}")
        for ip, netmask in iface.ipv4:
            report.add(f"  IPv4: {ip} / {netmask}" if netmask else f"  IPv4: {ip}")
        for ip in iface.ipv6:
            if not ip.lower().startswith("fe80"):
                report.add(f"  IPv6: {ip}")
        report.add()

    active = sum(1 for i in interfaces if i.has_addresses)
    report.add(f"Total interfaces: {len(interfaces)} ({active} with addresses)")
    return report


class NetworkSensor(BaseSensor):
    """List network interfaces with their addresses."""

    name = "get_interfaces"
    description = "List network interfaces"

    def interfaces(self) -> SensorReport:
        return format_interfaces(
            collect_interfaces(psutil.net_if_addrs(), psutil.net_if_stats())
        )
