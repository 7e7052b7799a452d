"""Shared, read-only dependencies injected into sensor tools."""

from dataclasses import dataclass

import httpx

from ..config import Settings, get_settings
from .platform import CommandExecutor


@dataclass(frozen=True)
class SensorContext:
    """Dependencies constructed once at startup and shared by every call."""

    settings: Settings
    executor: CommandExecutor
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, settings: Settings | None = None) -> "SensorContext":
        settings = settings or get_settings()
        return cls(
            settings=settings,
            executor=CommandExecutor(timeout=settings.command_timeout),
            http_client=httpx.AsyncClient(
                timeout=settings.http_timeout,
                headers={"User-Agent": settings.user_agent},
                follow_redirects=True,
            ),
        )

    async def aclose(self) -> None:
        """Release the shared HTTP client."""
        await self.http_client.aclose()
