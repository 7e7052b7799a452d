"""Host sensors exposed as tools.

Every tool is registered here, once, from a fixed table. Sensors receive
their collaborators (command executor, HTTP client, settings) from the
SensorContext built at startup.
"""

from .base import BaseSensor, SensorError, SensorReport
from .context import SensorContext
from .platform import CommandExecutor, CommandResult, Platform

__all__ = [
    "BaseSensor",
    "SensorError",
    "SensorReport",
    "SensorContext",
    "CommandExecutor",
    "CommandResult",
    "Platform",
    "register_all_sensors",
    "build_registry",
]


def register_all_sensors(registry, context: SensorContext) -> None:
    """
    Register all sensor tools with the tool registry.

    Args:
        registry: ToolRegistry instance to register tools with
        context: Shared dependencies handed to each sensor
    """
    from ..tools.schemas import ToolParameter
    from .battery import BatterySensor
    from .bluetooth import BluetoothSensor
    from .display import DisplaySensor
    from .git import GitSensor
    from .idle import IdleSensor
    from .network import NetworkSensor
    from .system import SystemSensor
    from .usb import UsbSensor
    from .weather import WeatherSensor

    settings = context.settings
    executor = context.executor

    # =========================================================================
    # DISPLAY
    # =========================================================================
    display = DisplaySensor(executor)
    registry.register(
        name="get_display_info",
        description="Get display/monitor information (connected displays, "
        "resolutions, physical sizes)",
    )(display.info)

    # =========================================================================
    # IDLE
    # =========================================================================
    idle = IdleSensor(executor)
    registry.register(
        name="get_idle_time",
        description="Get user idle time (how long since last keyboard/mouse input)",
    )(idle.idle_time)

    registry.register(
        name="is_idle_for",
        description="Check if user has been idle longer than specified seconds",
        parameters=[
            ToolParameter(
                name="threshold_seconds",
                type="integer",
                description="Threshold in seconds to check against (e.g. 300)",
                minimum=0,
            ),
        ],
    )(idle.is_idle_for)

    # =========================================================================
    # NETWORK
    # =========================================================================
    network = NetworkSensor(executor)
    registry.register(
        name="get_interfaces",
        description="List all network interfaces with their IP addresses and MAC addresses",
    )(network.interfaces)

    # =========================================================================
    # USB
    # =========================================================================
    usb = UsbSensor(executor)
    registry.register(
        name="get_usb_devices",
        description="List all connected USB devices with vendor/product info",
    )(usb.list_devices)

    # =========================================================================
    # BATTERY
    # =========================================================================
    battery = BatterySensor(executor)
    registry.register(
        name="get_battery_status",
        description="Get battery/power status (charge level, charging state, time remaining)",
    )(battery.status)

    # =========================================================================
    # BLUETOOTH
    # =========================================================================
    bluetooth = BluetoothSensor(executor, default_scan_seconds=settings.ble_scan_seconds)
    registry.register(
        name="scan_ble_devices",
        description="Scan for nearby Bluetooth Low Energy (BLE) devices. "
        "Blocks for the scan window while results are collected.",
        parameters=[
            ToolParameter(
                name="scan_seconds",
                type="integer",
                description=f"Discovery window in seconds (default {settings.ble_scan_seconds})",
                required=False,
                default=settings.ble_scan_seconds,
                minimum=1,
                maximum=30,
            ),
        ],
    )(bluetooth.scan_devices)

    # =========================================================================
    # GIT
    # =========================================================================
    git = GitSensor(executor)
    repo_path = ToolParameter(
        name="path",
        type="string",
        description="Path to the git repository (defaults to current directory)",
        required=False,
    )
    registry.register(
        name="get_git_status",
        description="Get git repository status (branch, uncommitted changes, last commit)",
        parameters=[repo_path],
    )(git.status)

    registry.register(
        name="get_git_log",
        description="Get recent git commits (last 10 by default)",
        parameters=[
            repo_path,
            ToolParameter(
                name="count",
                type="integer",
                description="Number of commits to show (default 10)",
                required=False,
                default=10,
                minimum=1,
                maximum=100,
            ),
        ],
    )(git.log)

    # =========================================================================
    # SYSINFO
    # =========================================================================
    system = SystemSensor(executor, sample_interval=settings.cpu_sample_interval)
    registry.register(
        name="get_system_info",
        description="Get system overview: CPU usage, memory, disk space, uptime",
    )(system.system_info)

    registry.register(
        name="get_disk_info",
        description="Get detailed disk usage for all mounted filesystems",
    )(system.disk_info)

    registry.register(
        name="get_top_processes",
        description="Get top processes by CPU or memory usage",
        parameters=[
            ToolParameter(
                name="count",
                type="integer",
                description="Number of top processes to show (default 10)",
                required=False,
                default=10,
                minimum=0,
            ),
            ToolParameter(
                name="sort_by",
                type="string",
                description="Sort by: 'cpu' or 'memory' (default 'cpu')",
                required=False,
                default="cpu",
            ),
        ],
    )(system.top_processes)

    registry.register(
        name="find_process",
        description="Find processes by name (case-insensitive, partial match)",
        parameters=[
            ToolParameter(
                name="name",
                type="string",
                description="Process name to search for (case-insensitive, partial match)",
            ),
        ],
    )(system.find_process)

    registry.register(
        name="get_process_details",
        description="Get detailed information about a specific process by PID",
        parameters=[
            ToolParameter(
                name="pid",
                type="integer",
                description="Process ID (PID) to get details for",
                minimum=0,
            ),
        ],
    )(system.process_details)

    registry.register(
        name="list_processes",
        description="List all running processes (sorted by CPU usage)",
    )(system.list_processes)

    # =========================================================================
    # WEATHER
    # =========================================================================
    weather = WeatherSensor(context.http_client, base_url=settings.weather_base_url)
    location = ToolParameter(
        name="location",
        type="string",
        description="Location to get weather for (city name, zip code, or 'lat,lon')",
    )
    registry.register(
        name="get_weather",
        description="Get current weather conditions for a location",
        parameters=[location],
    )(weather.current)

    registry.register(
        name="get_forecast",
        description="Get weather forecast for upcoming days",
        parameters=[
            location,
            ToolParameter(
                name="days",
                type="integer",
                description="Number of days (1-3, default 3)",
                required=False,
                default=3,
            ),
        ],
    )(weather.forecast)


def build_registry(context: SensorContext):
    """Create the process-wide registry: register every tool, then freeze."""
    from ..tools.registry import ToolRegistry

    registry = ToolRegistry()
    register_all_sensors(registry, context)
    return registry.freeze()
