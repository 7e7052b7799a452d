"""Base sensor class and text report."""

from pydantic import BaseModel, Field

from .platform import CommandExecutor


class SensorError(Exception):
    """Raised when a collaborator fails or returns unusable data."""


class SensorReport(BaseModel):
    """Human-readable report produced by a sensor tool."""

    title: str = Field(description="Heading, rendered with a trailing colon")
    lines: list[str] = Field(default_factory=list, description="Body lines")

    def add(self, line: str = "") -> "SensorReport":
        self.lines.append(line)
        return self

    def extend(self, lines: list[str]) -> "SensorReport":
        self.lines.extend(lines)
        return self

    def to_text(self) -> str:
        """Render the report as plain text."""
        body = "\n".join(self.lines)
        return f"{self.title}:\n\n{body}\n" if body else f"{self.title}:\n"


class BaseSensor:
    """Base class for sensors backed by platform commands or libraries."""

    # Override in subclass
    name: str = "base_sensor"
    description: str = "Base sensor"

    def __init__(self, executor: CommandExecutor | None = None):
        """Initialize sensor with command executor."""
        self.executor = executor or CommandExecutor()
        self.platform = self.executor.platform

    def _unsupported(self) -> SensorError:
        return SensorError(
            f"{self.name} is not supported on platform: {self.platform.value}"
        )
