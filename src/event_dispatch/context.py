"""Application-level wiring of settings, scripts and the event manager."""

from __future__ import annotations

import logging

from event_dispatch.config import DispatchSettings
from event_dispatch.contracts import EventContract
from event_dispatch.manager import DispatchResult, EventManager
from event_dispatch.scripting import ScriptBinding, ScriptRegistry

logger = logging.getLogger(__name__)


class EventContext:
    """Owns the event manager and script registry of an application.

    The context is what lifecycle handlers receive in ``on_init`` and friends,
    so handlers can raise further events or attach scripts to other objects.
    """

    def __init__(
        self,
        settings: DispatchSettings | None = None,
        *,
        configure_logging: bool = False,
    ) -> None:
        """Initialize the context.

        Args:
            settings: Dispatch settings. If None, loads from environment.
            configure_logging: Install the root log handler from settings.
        """
        self.settings = settings if settings is not None else DispatchSettings()
        if configure_logging:
            self.settings.setup_logging()

        self.scripts = ScriptRegistry()
        self.events = EventManager(scripts=self.scripts, settings=self.settings)

        logger.info(
            "Event context initialized",
            extra={"script_dispatch": self.settings.script_dispatch},
        )

    def attach_script(self, target: object, binding: ScriptBinding) -> None:
        self.scripts.attach(target, binding)

    def detach_script(self, target: object) -> ScriptBinding | None:
        return self.scripts.detach(target)

    def send_event(
        self,
        target: object,
        contract: type[EventContract],
        event_name: str,
        *args: object,
    ) -> DispatchResult:
        return self.events.send_event(target, contract, event_name, *args)
