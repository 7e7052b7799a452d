"""Display/monitor enumeration sensor."""

import json
import math
import re
from dataclasses import dataclass
from typing import Any

from .base import BaseSensor, SensorError, SensorReport
from .platform import Platform

WINDOWS_DISPLAY_SCRIPT = (
    "Add-Type -AssemblyName System.Windows.Forms; "
    "[System.Windows.Forms.Screen]::AllScreens | Select-Object "
    "DeviceName, Primary, "
    "@{n='Width';e={$_.Bounds.Width}}, @{n='Height';e={$_.Bounds.Height}}, "
    "@{n='X';e={$_.Bounds.X}}, @{n='Y';e={$_.Bounds.Y}} | ConvertTo-Json"
)

_XRANDR_OUTPUT = re.compile(
    r"^(?P<name>\S+) connected(?P<primary> primary)?"
    r"(?: (?P<w>\d+)x(?P<h>\d+)\+(?P<x>-?\d+)\+(?P<y>-?\d+))?"
    r"(?:.*?(?P<wmm>\d+)mm x (?P<hmm>\d+)mm)?"
)
_XRANDR_RATE = re.compile(r"(\d+(?:\.\d+)?)\*")
_MAC_RESOLUTION = re.compile(r"(\d+)\s*x\s*(\d+)(?:.*?@\s*([\d.]+)\s*Hz)?")


@dataclass
class Display:
    """One connected display."""

    name: str
    width: int
    height: int
    x: int = 0
    y: int = 0
    is_primary: bool = False
    width_mm: int = 0
    height_mm: int = 0
    frequency: float = 0.0
    scale_factor: float = 1.0

    @property
    def diagonal_inches(self) -> float | None:
        if self.width_mm <= 0 or self.height_mm <= 0:
            return None
        return math.hypot(self.width_mm, self.height_mm) / 25.4


def parse_xrandr(output: str) -> list[Display]:
    """Parse ``xrandr --query`` output into connected displays."""
    displays: list[Display] = []
    current: Display | None = None

    for line in output.splitlines():
        match = _XRANDR_OUTPUT.match(line)
        if match:
            current = Display(
                name=match["name"],
                width=int(match["w"] or 0),
                height=int(match["h"] or 0),
                x=int(match["x"] or 0),
                y=int(match["y"] or 0),
                is_primary=bool(match["primary"]),
                width_mm=int(match["wmm"] or 0),
                height_mm=int(match["hmm"] or 0),
            )
            displays.append(current)
            continue

        if not line.startswith((" ", "\t")):
            current = None
        elif current is not None and not current.frequency:
            rate = _XRANDR_RATE.search(line)
            if rate:
                current.frequency = float(rate.group(1))

    return displays


def parse_system_profiler(data: dict[str, Any]) -> list[Display]:
    """Parse ``system_profiler SPDisplaysDataType -json`` output."""
    displays = []
    for gpu in data.get("SPDisplaysDataType", []):
        for screen in gpu.get("spdisplays_ndrvs", []):
            resolution = screen.get("_spdisplays_resolution", "")
            pixels = screen.get("_spdisplays_pixels", "")
            match = _MAC_RESOLUTION.search(resolution) or _MAC_RESOLUTION.search(pixels)
            width, height, rate = (0, 0, None)
            if match:
                width, height, rate = int(match[1]), int(match[2]), match[3]

            scale = 1.0
            pixel_match = _MAC_RESOLUTION.search(pixels)
            if pixel_match and width:
                # Retina panels report more physical pixels than points
                scale = int(pixel_match[1]) / width

            displays.append(
                Display(
                    name=screen.get("_name", "Display"),
                    width=width,
                    height=height,
                    is_primary=screen.get("spdisplays_main") == "spdisplays_yes",
                    frequency=float(rate) if rate else 0.0,
                    scale_factor=scale,
                )
            )
    return displays


def parse_windows_screens(data: Any) -> list[Display]:
    if isinstance(data, dict):
        data = [data]
    displays = []
    for screen in data or []:
        displays.append(
            Display(
                name=str(screen.get("DeviceName", "Display")).lstrip("\\.").strip("\\"),
                width=int(screen.get("Width") or 0),
                height=int(screen.get("Height") or 0),
                x=int(screen.get("X") or 0),
                y=int(screen.get("Y") or 0),
                is_primary=bool(screen.get("Primary")),
            )
        )
    return displays


def format_displays(displays: list[Display]) -> SensorReport:
    report = SensorReport(title="Display Information")
    if not displays:
        report.add("No displays detected.")
        return report

    for index, d in enumerate(displays, start=1):
        primary = " (primary)" if d.is_primary else ""
        report.add(f"Display {index}: {d.name}{primary}")
        report.add(f"  Resolution: {d.width}x{d.height}")
        report.add(f"  Position: ({d.x}, {d.y})")
        if d.diagonal_inches is not None:
            report.add(
                f'  Physical: {d.width_mm}mm x {d.height_mm}mm (~{d.diagonal_inches:.1f}")'
            )
        if d.frequency > 0:
            report.add(f"  Refresh: {d.frequency:.0f}Hz")
        if d.scale_factor != 1.0:
            report.add(f"  Scale: {d.scale_factor * 100:.0f}%")
        report.add()

    report.add(f"Total displays: {len(displays)}")
    return report


class DisplaySensor(BaseSensor):
    """Enumerate connected displays."""

    name = "get_display_info"
    description = "Display information"

    async def displays(self) -> list[Display]:
        if self.platform == Platform.LINUX:
            if not self.executor.available("xrandr"):
                raise SensorError("Failed to get display info: xrandr is not installed")
            result = await self.executor.run(["xrandr", "--query"])
            if not result.success:
                if "can't open display" in result.stderr.lower():
                    # headless session
                    return []
                raise SensorError(f"Failed to get display info: {result.output}")
            return parse_xrandr(result.stdout)

        if self.platform == Platform.MACOS:
            result = await self.executor.run(
                ["system_profiler", "SPDisplaysDataType", "-json"], timeout=30
            )
            if not result.success:
                raise SensorError(f"Failed to get display info: {result.output}")
            return parse_system_profiler(_load_json(result.stdout))

        if self.platform == Platform.WINDOWS:
            result = await self.executor.run_powershell(WINDOWS_DISPLAY_SCRIPT)
            if not result.success:
                raise SensorError(f"Failed to get display info: {result.output}")
            return parse_windows_screens(_load_json(result.stdout) if result.stdout else [])

        raise self._unsupported()

    async def info(self) -> SensorReport:
        return format_displays(await self.displays())


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SensorError(f"Failed to parse display info: {e}") from e
