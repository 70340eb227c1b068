"""Built-in lifecycle event group."""

from __future__ import annotations

from abc import abstractmethod

from event_dispatch.context import EventContext
from event_dispatch.contracts import EventContract


class LifecycleEvents(EventContract):
    """Life-cycle events and the per-frame callback.

    Raised by whatever owns the object's life cycle, typically in the order
    ``on_early_init``, ``on_init``, ``on_after_init``, then ``on_step`` once
    per frame.
    """

    @abstractmethod
    def on_early_init(self, context: EventContext) -> None:
        """Called before any object receives ``on_init``."""
        pass

    @abstractmethod
    def on_init(self, context: EventContext) -> None:
        """Called once the context is ready for use."""
        pass

    @abstractmethod
    def on_after_init(self) -> None:
        pass

    @abstractmethod
    def on_step(self) -> None:
        """Called once per frame."""
        pass
