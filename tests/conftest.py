"""Test configuration and fixtures."""

import pytest

from event_dispatch.config import DispatchSettings
from event_dispatch.context import EventContext
from event_dispatch.manager import EventManager
from event_dispatch.scripting import ScriptRegistry


@pytest.fixture
def settings() -> DispatchSettings:
    """Provide test settings that ignore any local `.env`."""
    return DispatchSettings(
        _env_file=None,
        log_level="DEBUG",
        log_json=True,
        script_dispatch=True,
        raise_mechanical_faults=False,
    )


@pytest.fixture
def scripts() -> ScriptRegistry:
    """Provide an empty script registry."""
    return ScriptRegistry()


@pytest.fixture
def manager(scripts: ScriptRegistry, settings: DispatchSettings) -> EventManager:
    """Provide an event manager over the test registry."""
    return EventManager(scripts=scripts, settings=settings)


@pytest.fixture
def context(settings: DispatchSettings) -> EventContext:
    """Provide an event context without touching root logging."""
    return EventContext(settings)
