"""User idle time sensor.

Idle time is the time since the last keyboard or mouse input, read with
the platform's own facility: ``ioreg`` on macOS, ``xprintidle`` on Linux
and ``GetLastInputInfo`` through PowerShell on Windows.
"""

import re

from .base import BaseSensor, SensorError, SensorReport
from .formatting import format_duration
from .platform import Platform

WINDOWS_IDLE_SCRIPT = r"""
Add-Type @'
using System;
using System.Runtime.InteropServices;
public static class HostsenseIdle {
    [StructLayout(LayoutKind.Sequential)]
    struct LASTINPUTINFO { public uint cbSize; public uint dwTime; }
    [DllImport("user32.dll")]
    static extern bool GetLastInputInfo(ref LASTINPUTINFO info);
    public static uint Milliseconds() {
        LASTINPUTINFO info = new LASTINPUTINFO();
        info.cbSize = (uint)Marshal.SizeOf(info);
        GetLastInputInfo(ref info);
        return (uint)Environment.TickCount - info.dwTime;
    }
}
'@
[HostsenseIdle]::Milliseconds()
"""

_HID_IDLE = re.compile(r'"HIDIdleTime"\s*=\s*(\d+)')


def is_idle(idle_seconds: int, threshold_seconds: int) -> bool:
    """Idle when idle time reaches the threshold (inclusive)."""
    return idle_seconds >= threshold_seconds


def parse_ioreg_idle(output: str) -> int:
    """Seconds from ``ioreg -c IOHIDSystem`` (HIDIdleTime is in nanoseconds)."""
    match = _HID_IDLE.search(output)
    if not match:
        raise SensorError("HIDIdleTime not found in ioreg output")
    return int(match.group(1)) // 1_000_000_000


def parse_milliseconds(output: str) -> int:
    try:
        return int(output.strip().splitlines()[-1]) // 1000
    except (ValueError, IndexError):
        raise SensorError(f"Unexpected idle time output: {output!r}") from None


class IdleSensor(BaseSensor):
    """Report how long the user has been idle."""

    name = "idle"
    description = "User idle time"

    async def idle_seconds(self) -> int:
        if self.platform == Platform.MACOS:
            result = await self.executor.run(["ioreg", "-c", "IOHIDSystem"])
            if not result.success:
                raise SensorError(f"Failed to get idle time: {result.stderr}")
            return parse_ioreg_idle(result.stdout)

        if self.platform == Platform.LINUX:
            if not self.executor.available("xprintidle"):
                raise SensorError(
                    "Failed to get idle time: xprintidle is not installed"
                )
            result = await self.executor.run(["xprintidle"])
            if not result.success:
                raise SensorError(f"Failed to get idle time: {result.output}")
            return parse_milliseconds(result.stdout)

        if self.platform == Platform.WINDOWS:
            result = await self.executor.run_powershell(WINDOWS_IDLE_SCRIPT)
            if not result.success:
                raise SensorError(f"Failed to get idle time: {result.stderr}")
            return parse_milliseconds(result.stdout)

        raise self._unsupported()

    async def idle_time(self) -> SensorReport:
        seconds = await self.idle_seconds()
        return SensorReport(title="User Idle Time").extend([
            f"  Raw: {seconds} seconds",
            f"  Formatted: {format_duration(seconds)}",
        ])

    async def is_idle_for(self, threshold_seconds: int) -> SensorReport:
        seconds = await self.idle_seconds()
        idle = is_idle(seconds, threshold_seconds)
        return SensorReport(title="Idle Check").extend([
            f"  Current idle: {seconds} ({format_duration(seconds)})",
            f"  Threshold: {threshold_seconds} ({format_duration(threshold_seconds)})",
            f"  Is idle: {'YES' if idle else 'NO'}",
        ])
