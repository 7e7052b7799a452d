"""System overview, disk usage and process sensors.

All psutil calls here block (CPU percentages need two samples), so the
public methods are synchronous and run in a worker thread per call.
"""

import platform
import time
from dataclasses import dataclass
from pathlib import Path

import psutil

from .base import BaseSensor, SensorError, SensorReport
from .formatting import format_bytes, format_duration, usage_percent

TABLE_HEADER = f"{'PID':<8} {'CPU%':<10} {'Memory':<10} Name"
FIND_LIMIT = 20
LIST_LIMIT = 50
COMMAND_LIMIT = 200


@dataclass
class ProcessSample:
    """One process in a snapshot."""

    pid: int
    name: str
    cpu_percent: float
    memory: int

    def row(self) -> str:
        return f"{self.pid:<8} {self.cpu_percent:<10.1f} {format_bytes(self.memory):<10} {self.name}"


@dataclass
class DiskUsage:
    """Usage of one mounted filesystem."""

    device: str
    fstype: str
    mountpoint: str
    total: int
    free: int

    @property
    def used(self) -> int:
        return max(self.total - self.free, 0)

    @property
    def percent(self) -> int:
        return usage_percent(self.used, self.total)


def normalize_sort_key(sort_by: str | None) -> str:
    """Map a caller's sort key to "cpu" or "memory"; unknown keys mean cpu."""
    if sort_by and sort_by.strip().lower() in ("memory", "mem"):
        return "memory"
    return "cpu"


def sort_processes(samples: list[ProcessSample], sort_by: str = "cpu") -> list[ProcessSample]:
    """Sort descending by CPU or memory, keeping enumeration order on ties."""
    if normalize_sort_key(sort_by) == "memory":
        return sorted(samples, key=lambda p: p.memory, reverse=True)
    return sorted(samples, key=lambda p: p.cpu_percent, reverse=True)


def top_processes(
    samples: list[ProcessSample],
    count: int = 10,
    sort_by: str = "cpu",
) -> list[ProcessSample]:
    """The ``min(count, len(samples))`` heaviest processes."""
    return sort_processes(samples, sort_by)[: max(count, 0)]


def sum_disks(disks: list[DiskUsage]) -> tuple[int, int]:
    """Total and available bytes across all filesystems."""
    return sum(d.total for d in disks), sum(d.free for d in disks)


def cpu_brand() -> str:
    """Best-effort CPU model name."""
    cpuinfo = Path("/proc/cpuinfo")
    if cpuinfo.exists():
        try:
            for line in cpuinfo.read_text().splitlines():
                if line.lower().startswith("model name"):
                    return line.split(":", 1)[1].strip()
        except OSError:
            pass
    return platform.processor() or "Unknown"


class SystemSensor(BaseSensor):
    """CPU, memory, disk and process information via psutil."""

    name = "system"
    description = "System statistics and processes"

    def __init__(self, executor=None, sample_interval: float = 0.2):
        super().__init__(executor)
        self.sample_interval = sample_interval

    # -- snapshots -------------------------------------------------------

    def snapshot_processes(self) -> list[ProcessSample]:
        """Sample CPU usage of every process over the sample interval."""
        procs = []
        for proc in psutil.process_iter(["pid", "name"]):
            try:
                proc.cpu_percent(None)
                procs.append(proc)
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue

        time.sleep(self.sample_interval)

        samples = []
        for proc in procs:
            try:
                with proc.oneshot():
                    samples.append(
                        ProcessSample(
                            pid=proc.pid,
                            name=proc.info.get("name") or "?",
                            cpu_percent=proc.cpu_percent(None),
                            memory=proc.memory_info().rss,
                        )
                    )
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
        return samples

    def snapshot_disks(self) -> list[DiskUsage]:
        disks = []
        for part in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                # unreadable or vanished mount
                continue
            disks.append(
                DiskUsage(
                    device=part.device,
                    fstype=part.fstype,
                    mountpoint=part.mountpoint,
                    total=usage.total,
                    free=usage.free,
                )
            )
        return disks

    # -- tools -----------------------------------------------------------

    def system_info(self) -> SensorReport:
        per_cpu = psutil.cpu_percent(interval=self.sample_interval, percpu=True)
        cpu_count = len(per_cpu) or (psutil.cpu_count() or 0)
        cpu_usage = sum(per_cpu) / len(per_cpu) if per_cpu else 0.0

        mem = psutil.virtual_memory()
        used_mem = mem.total - mem.available
        swap = psutil.swap_memory()
        total_disk, free_disk = sum_disks(self.snapshot_disks())

        uptime = int(time.time() - psutil.boot_time())
        load = psutil.getloadavg()

        report = SensorReport(title="System Information")
        report.extend([
            f"CPU: {cpu_brand()} ({cpu_count} cores)",
            f"CPU Usage: {cpu_usage:.1f}%",
            "",
            f"Memory: {format_bytes(used_mem)} / {format_bytes(mem.total)} "
            f"({usage_percent(used_mem, mem.total)}%)",
            f"Swap: {format_bytes(swap.used)} / {format_bytes(swap.total)}",
            "",
            f"Disk: {format_bytes(free_disk)} / {format_bytes(total_disk)} free",
            "",
            f"Uptime: {uptime // 3600}h {(uptime % 3600) // 60}m",
            f"Load Average: {load[0]:.2f} {load[1]:.2f} {load[2]:.2f} (1m 5m 15m)",
        ])
        return report

    def disk_info(self) -> SensorReport:
        report = SensorReport(title="Disk Usage")
        disks = self.snapshot_disks()
        if not disks:
            report.add("No mounted filesystems found.")
            return report

        for disk in disks:
            report.extend([
                f"{disk.device} ({disk.fstype})",
                f"  {format_bytes(disk.used)} / {format_bytes(disk.total)} ({disk.percent}% used)",
                f"  Mount: {disk.mountpoint}",
                "",
            ])
        total, free = sum_disks(disks)
        report.add(f"Total: {format_bytes(free)} free of {format_bytes(total)}")
        return report

    def top_processes(self, count: int = 10, sort_by: str = "cpu") -> SensorReport:
        key = normalize_sort_key(sort_by)
        top = top_processes(self.snapshot_processes(), count, key)

        report = SensorReport(title=f"Top {count} processes by {key}")
        report.add(TABLE_HEADER)
        report.add("-" * 50)
        report.extend([p.row() for p in top])
        return report

    def find_process(self, name: str) -> SensorReport:
        search = name.lower()
        matches = [p for p in self.snapshot_processes() if search in p.name.lower()]
        matches = sort_processes(matches, "cpu")

        report = SensorReport(title=f"Processes matching '{name}'")
        if not matches:
            report.add("No matching processes found.")
            return report

        report.add(TABLE_HEADER)
        report.add("-" * 50)
        report.extend([p.row() for p in matches[:FIND_LIMIT]])
        if len(matches) > FIND_LIMIT:
            report.add()
            report.add(f"... and {len(matches) - FIND_LIMIT} more matches")
        report.add()
        report.add(f"Total matches: {len(matches)}")
        return report

    def list_processes(self) -> SensorReport:
        processes = sort_processes(self.snapshot_processes(), "cpu")

        report = SensorReport(title="All Running Processes")
        report.add(TABLE_HEADER)
        report.add("-" * 60)
        report.extend([p.row() for p in processes[:LIST_LIMIT]])
        if len(processes) > LIST_LIMIT:
            report.add()
            report.add(f"... and {len(processes) - LIST_LIMIT} more processes")
        report.add()
        report.add(f"Total processes: {len(processes)}")
        return report

    def process_details(self, pid: int) -> SensorReport:
        try:
            proc = psutil.Process(pid)
            cpu = proc.cpu_percent(interval=self.sample_interval)
            with proc.oneshot():
                name = proc.name()
                status = proc.status()
                mem = proc.memory_info()
                ppid = proc.ppid()
                started = proc.create_time()
        except psutil.NoSuchProcess:
            raise SensorError(f"Process {pid} not found") from None
        except psutil.AccessDenied:
            raise SensorError(f"Access denied for process {pid}") from None

        report = SensorReport(title=f"Process Details (PID {pid})")
        report.extend([
            f"Name: {name}",
            f"Status: {status}",
            f"CPU Usage: {cpu:.1f}%",
            f"Memory: {format_bytes(mem.rss)}",
            f"Virtual Memory: {format_bytes(mem.vms)}",
        ])
        if ppid:
            report.add(f"Parent PID: {ppid}")
        report.add(f"Running for: {format_duration(max(int(time.time() - started), 0))}")

        exe = self._optional(proc.exe)
        if exe:
            report.add(f"Executable: {exe}")
        cwd = self._optional(proc.cwd)
        if cwd:
            report.add(f"Working Dir: {cwd}")
        cmdline = self._optional(proc.cmdline)
        if cmdline:
            command = " ".join(cmdline)
            if len(command) > COMMAND_LIMIT:
                command = command[:COMMAND_LIMIT] + "..."
            report.add(f"Command: {command}")
        return report

    @staticmethod
    def _optional(getter):
        """Read a process attribute that may be hidden from this user."""
        try:
            return getter()
        except (psutil.AccessDenied, psutil.ZombieProcess, psutil.NoSuchProcess, OSError):
            return None
