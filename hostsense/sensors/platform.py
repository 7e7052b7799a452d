"""Platform detection and async command execution for sensors."""

import asyncio
import logging
import platform
import shutil
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("hostsense.sensors.platform")


class Platform(Enum):
    """Supported operating systems."""

    MACOS = "macos"
    WINDOWS = "windows"
    LINUX = "linux"
    UNKNOWN = "unknown"

    @classmethod
    def detect(cls) -> "Platform":
        """Detect the current operating system."""
        system = platform.system().lower()
        if system == "darwin":
            return cls.MACOS
        elif system == "windows":
            return cls.WINDOWS
        elif system == "linux":
            return cls.LINUX
        return cls.UNKNOWN

    @property
    def is_unix(self) -> bool:
        """Check if platform is Unix-like."""
        return self in (Platform.MACOS, Platform.LINUX)


@dataclass
class CommandResult:
    """Result of executing a system command."""

    stdout: str
    stderr: str
    return_code: int
    timed_out: bool = False

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.return_code == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Get combined output, preferring stdout."""
        return self.stdout if self.stdout else self.stderr


class CommandExecutor:
    """Execute commands asynchronously with a timeout.

    Commands are passed as argument lists and executed without a shell.
    A process still running when its call is cancelled or times out is
    killed before returning.
    """

    def __init__(self, timeout: int = 10, platform: Platform | None = None):
        self.timeout = timeout
        self.platform = platform or Platform.detect()

    @staticmethod
    def available(program: str) -> bool:
        """Check whether a program is on PATH."""
        return shutil.which(program) is not None

    async def run(
        self,
        command: list[str],
        timeout: float | None = None,
        strip: bool = True,
    ) -> CommandResult:
        """
        Execute a command.

        Args:
            command: Program and arguments
            timeout: Override default timeout (seconds)
            strip: Strip surrounding whitespace from stdout

        Returns:
            CommandResult with stdout, stderr, return code
        """
        timeout = timeout or self.timeout
        logger.debug(f"Running command: {command}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return CommandResult(stdout="", stderr=str(e), return_code=-1)

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            await self._kill(process)
            return CommandResult(
                stdout="",
                stderr=f"Command timed out after {timeout} seconds",
                return_code=-1,
                timed_out=True,
            )
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        encoding = "utf-8" if self.platform.is_unix else "cp1252"
        stdout_str = stdout.decode(encoding, errors="replace")
        return CommandResult(
            stdout=stdout_str.strip() if strip else stdout_str,
            stderr=stderr.decode(encoding, errors="replace").strip(),
            return_code=process.returncode or 0,
        )

    async def run_powershell(self, script: str, timeout: float | None = None) -> CommandResult:
        """Run a PowerShell script (Windows only)."""
        if self.platform != Platform.WINDOWS:
            return CommandResult(
                stdout="",
                stderr="PowerShell is only available on Windows",
                return_code=-1,
            )
        return await self.run(
            ["powershell", "-NoProfile", "-NonInteractive", "-Command", script],
            timeout=timeout,
        )

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()
