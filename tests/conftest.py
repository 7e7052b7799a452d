"""
Shared pytest fixtures for HostSense tests.

This module provides fixtures used across multiple test modules.
Fixtures are automatically discovered by pytest.
"""
import sys
from pathlib import Path

import pytest

# Ensure project root is in path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def clean_settings(monkeypatch):
    """
    Fresh settings with no HOSTSENSE_* overrides from the environment.

    Clears the lru_cache before and after so other tests see defaults.
    """
    import os

    from hostsense.config import get_settings

    for key in list(os.environ):
        if key.startswith("HOSTSENSE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(project_root)

    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


# =============================================================================
# Registry Fixtures
# =============================================================================

class SensorFailure(Exception):
    """Stand-in for a collaborator failure inside a tool body."""


@pytest.fixture
def echo_registry():
    """
    Frozen registry with small tools covering each dispatch path.

    - echo: async, one required string
    - add: sync, integer parameters with a default
    - pick: enum-constrained string
    - boom: always raises
    """
    from hostsense.tools import ToolParameter, ToolRegistry

    registry = ToolRegistry()

    @registry.register(
        name="echo",
        description="Return the message unchanged",
        parameters=[
            ToolParameter(name="msg", type="string", description="Text to echo"),
        ],
    )
    async def echo(msg: str) -> str:
        return msg

    @registry.register(
        name="add",
        description="Add two integers",
        parameters=[
            ToolParameter(name="a", type="integer", description="First operand"),
            ToolParameter(
                name="b",
                type="integer",
                description="Second operand",
                required=False,
                default=1,
                minimum=0,
                maximum=100,
            ),
        ],
    )
    def add(a: int, b: int = 1) -> str:
        return str(a + b)

    @registry.register(
        name="pick",
        description="Pick a color",
        parameters=[
            ToolParameter(
                name="color",
                type="string",
                description="One of the allowed colors",
                enum=["red", "green"],
            ),
        ],
    )
    async def pick(color: str) -> str:
        return color

    @registry.register(
        name="boom",
        description="Always fails",
    )
    async def boom() -> str:
        raise SensorFailure("sensor exploded")

    return registry.freeze()


@pytest.fixture
def dispatcher(echo_registry):
    """Dispatcher over the echo registry."""
    from hostsense.tools import ToolDispatcher

    return ToolDispatcher(echo_registry)
