"""Script handlers bound to target objects.

A target opts into script dispatch by subclassing (or registering with)
:class:`Scriptable`. Scripts are attached per target instance through a
:class:`ScriptRegistry`. A script handles an event by defining a function
named after the event and taking the same parameters as the contract method,
minus ``self``::

    def on_init(context):
        ...
"""

from __future__ import annotations

import importlib.util
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from event_dispatch.errors import ScriptLoadError

logger = logging.getLogger(__name__)


class Scriptable(ABC):
    """Capability marker for targets that may carry a script binding."""


def is_scriptable(target: object) -> bool:
    return isinstance(target, Scriptable)


class ScriptBinding(ABC):
    """Abstract base class for script bindings.

    This interface allows pluggable script backends.
    """

    @abstractmethod
    def has_function(self, name: str) -> bool:
        """Return True if the script defines a callable named ``name``."""
        pass

    @abstractmethod
    def invoke(self, event_name: str, args: Sequence[object]) -> bool:
        """Call the script function named ``event_name``.

        Args:
            event_name: Name of the event (and of the script function).
            args: Positional arguments of the event.

        Returns:
            True if a function ran, False if the script does not handle the event.

        Errors raised by the script function propagate unchanged.
        """
        pass


class NamespaceScriptBinding(ScriptBinding):
    """Script binding over a plain mapping of names to callables."""

    def __init__(self, functions: Mapping[str, Callable[..., Any]] | None = None) -> None:
        self._namespace: dict[str, Any] = dict(functions or {})

    @property
    def namespace(self) -> Mapping[str, Any]:
        return self._namespace

    def has_function(self, name: str) -> bool:
        return callable(self.namespace.get(name))

    def invoke(self, event_name: str, args: Sequence[object]) -> bool:
        func = self.namespace.get(event_name)
        if not callable(func):
            return False
        func(*args)
        return True


class ScriptFile(NamespaceScriptBinding):
    """A Python script file whose top-level functions handle events.

    The file is imported once, on first use, as a fresh module that is not
    entered into ``sys.modules``.
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        self._loaded = False
        self._lock = threading.Lock()

    @classmethod
    def from_path(cls, path: Path | str) -> ScriptFile:
        return cls(Path(path))

    @property
    def namespace(self) -> Mapping[str, Any]:
        if not self._loaded:
            self.load()
        return self._namespace

    def load(self) -> None:
        """Import the script file. Subsequent calls are no-ops."""

        with self._lock:
            if self._loaded:
                return
            spec = importlib.util.spec_from_file_location(
                f"event_script_{self.path.stem}", self.path
            )
            if spec is None or spec.loader is None:
                raise ScriptLoadError(f"Failed to load script {self.path}: not a Python file")
            module = importlib.util.module_from_spec(spec)
            try:
                spec.loader.exec_module(module)
            except Exception as e:
                raise ScriptLoadError(f"Failed to load script {self.path}: {e}") from e
            self._namespace = vars(module)
            self._loaded = True
            logger.debug(f"Loaded script {self.path}")


class ScriptRegistry:
    """Associates target instances with script bindings.

    Entries are keyed by target identity, not equality. The registry keeps a
    strong reference to each attached target until it is detached. Writers are
    serialized; lookups take no lock.
    """

    def __init__(self) -> None:
        self._entries: dict[int, tuple[object, ScriptBinding]] = {}
        self._lock = threading.Lock()

    def attach(self, target: object, binding: ScriptBinding) -> None:
        """Bind ``binding`` to ``target``, replacing any previous binding."""

        with self._lock:
            self._entries[id(target)] = (target, binding)
        logger.debug(f"Attached script to {type(target).__name__}")

    def detach(self, target: object) -> ScriptBinding | None:
        """Remove and return the binding of ``target``, if any."""

        with self._lock:
            entry = self._entries.get(id(target))
            if entry is None or entry[0] is not target:
                return None
            del self._entries[id(target)]
        return entry[1]

    def lookup(self, target: object) -> ScriptBinding | None:
        entry = self._entries.get(id(target))
        if entry is None or entry[0] is not target:
            return None
        return entry[1]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, target: object) -> bool:
        return self.lookup(target) is not None
