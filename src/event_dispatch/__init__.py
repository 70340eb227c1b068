"""Contract-based event dispatch.

Delivers a named event of a declared event group to a target object, through
its native method and, for scriptable targets, through a bound script
function.
"""

__version__ = "0.1.0"

from event_dispatch.config import DispatchSettings
from event_dispatch.context import EventContext
from event_dispatch.contracts import EventContract, Signature, contract_signatures, implements
from event_dispatch.errors import (
    ArgumentMismatch,
    ContractNotImplemented,
    DispatchError,
    DispatchMechanicalFault,
    ErrorKind,
    UnknownEvent,
)
from event_dispatch.lifecycle import LifecycleEvents
from event_dispatch.manager import DispatchResult, EventManager
from event_dispatch.scripting import ScriptFile, ScriptRegistry, Scriptable

__all__ = [
    "__version__",
    "ArgumentMismatch",
    "ContractNotImplemented",
    "DispatchError",
    "DispatchMechanicalFault",
    "DispatchResult",
    "DispatchSettings",
    "ErrorKind",
    "EventContext",
    "EventContract",
    "EventManager",
    "LifecycleEvents",
    "ScriptFile",
    "ScriptRegistry",
    "Scriptable",
    "Signature",
    "UnknownEvent",
    "contract_signatures",
    "implements",
]
