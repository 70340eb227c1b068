"""Event delivery to native and script handlers.

Events are grouped into contracts, each a subclass of
:class:`~event_dispatch.contracts.EventContract`. A handler for an event can
take one of two forms: a method on a target implementing the contract, or a
function in a script bound to a scriptable target. Script functions mirror
the contract method, for example a handler for
``LifecycleEvents.on_init(context)`` in a script is::

    def on_init(context):
        ...

When both exist, the script function runs first, then the native method.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from event_dispatch.config import DispatchSettings
from event_dispatch.contracts import EventContract, Signature
from event_dispatch.errors import DispatchMechanicalFault, ErrorKind
from event_dispatch.handlers import Handler, HandlerKind, NativeHandler, ScriptHandler
from event_dispatch.resolver import resolve
from event_dispatch.scripting import ScriptRegistry, is_scriptable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InvocationRequest:
    target: object
    contract: type[EventContract]
    event_name: str
    args: tuple[object, ...]


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of one ``send_event`` call that did not raise.

    ``handlers`` lists the handler kinds that actually ran, in order.
    ``fault`` is set when the native handler could not be invoked.
    """

    ok: bool
    event_name: str
    handlers: tuple[HandlerKind, ...] = ()
    fault: DispatchMechanicalFault | None = None


class EventManager:
    """Delivers events to handler objects.

    Delivery is synchronous: ``send_event`` returns once every handler has
    run. The manager keeps no per-event state, so separate targets can be
    served from separate threads. Calls against the same target are not
    serialized here.
    """

    def __init__(
        self,
        scripts: ScriptRegistry | None = None,
        settings: DispatchSettings | None = None,
    ) -> None:
        """Initialize the event manager.

        Args:
            scripts: Registry of script bindings. A private, empty one is
                created if omitted.
            settings: Dispatch settings. If None, loads from environment.
        """
        self.scripts = scripts if scripts is not None else ScriptRegistry()
        self.settings = settings if settings is not None else DispatchSettings()

    def send_event(
        self,
        target: object,
        contract: type[EventContract],
        event_name: str,
        *args: object,
    ) -> DispatchResult:
        """Deliver an event to a handler object.

        Args:
            target: The object which handles the event.
            contract: The contract the event belongs to, such as
                ``LifecycleEvents``.
            event_name: The name of the event, such as ``"on_init"``.
            *args: Parameters of the event. They must match the parameter
                list of the corresponding method in ``contract``.

        Returns:
            The dispatch result. ``ok`` is False only when the native handler
            could not be invoked mechanically.

        Raises:
            ContractNotImplemented: If ``target`` does not implement ``contract``.
            UnknownEvent: If ``contract`` has no event named ``event_name``.
            ArgumentMismatch: If the event exists but ``args`` don't fit it.
            DispatchMechanicalFault: Only with ``raise_mechanical_faults``.

        Exceptions raised by a script function or by the native method are
        re-raised unchanged.
        """
        request = InvocationRequest(
            target=target, contract=contract, event_name=event_name, args=args
        )
        signature = resolve(contract, target, event_name, args)

        ran: list[HandlerKind] = []
        for handler in self.handlers_for(request, signature):
            # Only binding failures are mechanical; the call itself is application code.
            try:
                handler.bind(request.args)
            except DispatchMechanicalFault as fault:
                if self.settings.raise_mechanical_faults:
                    raise
                self._report_fault(request, fault)
                return DispatchResult(
                    ok=False, event_name=event_name, handlers=tuple(ran), fault=fault
                )

            try:
                invoked = handler.invoke(request.args)
            except Exception:
                kind = (
                    ErrorKind.SCRIPT_EXECUTION_FAULT
                    if handler.kind is HandlerKind.SCRIPT
                    else ErrorKind.HANDLER_APPLICATION_FAULT
                )
                logger.debug(
                    "Handler raised for %s.%s",
                    contract.__name__,
                    event_name,
                    extra={
                        "contract": contract.__name__,
                        "event_name": event_name,
                        "error_kind": kind.value,
                    },
                )
                raise
            if invoked:
                ran.append(handler.kind)

        logger.debug(
            f"Delivered {contract.__name__}.{event_name} to {type(target).__name__} "
            f"via {[k.value for k in ran]}"
        )
        return DispatchResult(ok=True, event_name=event_name, handlers=tuple(ran))

    def handlers_for(self, request: InvocationRequest, signature: Signature) -> list[Handler]:
        """Ordered handlers for a resolved request: script first, then native."""

        handlers: list[Handler] = []
        if self.settings.script_dispatch and is_scriptable(request.target):
            binding = self.scripts.lookup(request.target)
            if binding is not None:
                handlers.append(ScriptHandler(binding=binding, event_name=request.event_name))
        handlers.append(NativeHandler(target=request.target, signature=signature))
        return handlers

    def _report_fault(self, request: InvocationRequest, fault: DispatchMechanicalFault) -> None:
        logger.error(
            "Dispatch of %s.%s failed: %s",
            request.contract.__name__,
            request.event_name,
            fault.reason,
            exc_info=fault,
            extra={
                "contract": request.contract.__name__,
                "event_name": request.event_name,
                "error_kind": fault.kind.value,
                "target": type(request.target).__name__,
            },
        )
