"""Tests for platform detection and command execution."""

import sys

import pytest

from hostsense.sensors.platform import CommandExecutor, CommandResult, Platform

unix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX utilities")


class TestPlatform:
    """Tests for Platform enum."""

    def test_detect_returns_valid_platform(self):
        """Platform.detect() should return a valid Platform."""
        platform = Platform.detect()
        assert isinstance(platform, Platform)
        assert platform != Platform.UNKNOWN

    def test_is_unix_property(self):
        """is_unix should be True for macOS and Linux."""
        assert Platform.MACOS.is_unix is True
        assert Platform.LINUX.is_unix is True
        assert Platform.WINDOWS.is_unix is False


class TestCommandResult:

    def test_output_prefers_stdout(self):
        assert CommandResult(stdout="out", stderr="err", return_code=1).output == "out"
        assert CommandResult(stdout="", stderr="err", return_code=1).output == "err"

    def test_timed_out_is_not_success(self):
        result = CommandResult(stdout="", stderr="", return_code=0, timed_out=True)
        assert result.success is False


@unix_only
class TestCommandExecutor:
    """Tests for CommandExecutor."""

    @pytest.mark.asyncio
    async def test_run_simple_command(self):
        """Should execute a simple command successfully."""
        executor = CommandExecutor()
        result = await executor.run(["echo", "hello"])

        assert result.success
        assert result.stdout == "hello"

    @pytest.mark.asyncio
    async def test_run_without_strip(self):
        """Leading whitespace is kept when strip is off."""
        executor = CommandExecutor()
        result = await executor.run(["printf", " M file\\n"], strip=False)

        assert result.stdout == " M file\n"

    @pytest.mark.asyncio
    async def test_run_with_timeout(self):
        """Should kill the process and report a timeout."""
        executor = CommandExecutor(timeout=1)
        result = await executor.run(["sleep", "10"], timeout=0.5)

        assert result.timed_out
        assert not result.success

    @pytest.mark.asyncio
    async def test_run_failing_command(self):
        """Should report a non-zero exit."""
        executor = CommandExecutor()
        result = await executor.run(["false"])

        assert not result.success
        assert result.return_code != 0

    @pytest.mark.asyncio
    async def test_missing_program(self):
        """A program that cannot be started yields a failed result."""
        executor = CommandExecutor()
        result = await executor.run(["hostsense-no-such-program"])

        assert result.return_code == -1
        assert not result.success

    @pytest.mark.asyncio
    async def test_powershell_unavailable_off_windows(self):
        executor = CommandExecutor(platform=Platform.LINUX)
        result = await executor.run_powershell("Get-Date")
        assert not result.success


def test_available():
    assert CommandExecutor.available("hostsense-no-such-program") is False
