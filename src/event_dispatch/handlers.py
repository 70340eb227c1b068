from __future__ import annotations

import inspect
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from event_dispatch.contracts import Signature
from event_dispatch.errors import DispatchMechanicalFault
from event_dispatch.scripting import ScriptBinding


class HandlerKind(str, Enum):
    SCRIPT = "script"
    NATIVE = "native"


class Handler(Protocol):
    """One way of handling an event for a target.

    ``bind`` checks that the handler can be called with ``args`` at all;
    ``invoke`` runs it.
    """

    kind: HandlerKind

    def bind(self, args: Sequence[object]) -> None: ...

    def invoke(self, args: Sequence[object]) -> bool: ...


@dataclass(frozen=True, slots=True)
class ScriptHandler:
    """The function of the same name in a script bound to the target."""

    binding: ScriptBinding
    event_name: str
    kind: HandlerKind = HandlerKind.SCRIPT

    def bind(self, args: Sequence[object]) -> None:
        # A script without the function is a no-op, not a fault.
        pass

    def invoke(self, args: Sequence[object]) -> bool:
        return self.binding.invoke(self.event_name, args)


@dataclass(frozen=True, slots=True)
class NativeHandler:
    """The method on the target object implementing the resolved signature.

    ``bind`` raises ``DispatchMechanicalFault`` when the method cannot be
    reached or cannot accept the arguments. ``invoke`` only calls it, so
    anything raised by the method body propagates untouched.
    """

    target: object
    signature: Signature
    kind: HandlerKind = HandlerKind.NATIVE

    def bind(self, args: Sequence[object]) -> None:
        name = self.signature.name
        method = getattr(self.target, name, None)
        if method is None or not callable(method):
            raise DispatchMechanicalFault(
                name, f"{type(self.target).__name__} has no callable {name!r}"
            )
        if getattr(method, "__isabstractmethod__", False):
            raise DispatchMechanicalFault(
                name, f"{type(self.target).__name__}.{name} is still abstract"
            )

        try:
            inspect.signature(method).bind(*args)
        except (TypeError, ValueError) as e:
            raise DispatchMechanicalFault(name, str(e)) from e

    def invoke(self, args: Sequence[object]) -> bool:
        getattr(self.target, self.signature.name)(*args)
        return True
