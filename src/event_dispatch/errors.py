"""Error taxonomy for event dispatch.

Resolution errors are raised before any handler runs. Application errors
raised by script or native handlers are never wrapped: they reach the caller
as the original exception. Only mechanical faults are absorbed by the
dispatcher, and even those are reported back in the dispatch result.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CONTRACT_NOT_IMPLEMENTED = "contract_not_implemented"
    UNKNOWN_EVENT = "unknown_event"
    ARGUMENT_MISMATCH = "argument_mismatch"
    SCRIPT_EXECUTION_FAULT = "script_execution_fault"
    HANDLER_APPLICATION_FAULT = "handler_application_fault"
    DISPATCH_MECHANICAL_FAULT = "dispatch_mechanical_fault"


class DispatchError(RuntimeError):
    """Base class for errors produced by the dispatcher itself."""

    kind: ErrorKind


class ContractNotImplemented(DispatchError):
    kind = ErrorKind.CONTRACT_NOT_IMPLEMENTED

    def __init__(self, contract_name: str) -> None:
        self.contract_name = contract_name
        super().__init__(f"The target object does not implement contract {contract_name}")


class UnknownEvent(DispatchError):
    kind = ErrorKind.UNKNOWN_EVENT

    def __init__(self, event_name: str, contract_name: str) -> None:
        self.event_name = event_name
        self.contract_name = contract_name
        super().__init__(f"Contract {contract_name} has no event {event_name!r}")


class ArgumentMismatch(DispatchError):
    kind = ErrorKind.ARGUMENT_MISMATCH

    def __init__(self, event_name: str, contract_name: str) -> None:
        self.event_name = event_name
        self.contract_name = contract_name
        super().__init__(
            f"Contract {contract_name} declares event {event_name!r} but the arguments don't match"
        )


class DispatchMechanicalFault(DispatchError):
    """The native handler could not be invoked at all.

    This points at an integration defect (a target registered for a contract
    without the method, or a method whose real signature cannot accept the
    declared arguments), not at a bug inside the handler.
    """

    kind = ErrorKind.DISPATCH_MECHANICAL_FAULT

    def __init__(self, event_name: str, reason: str) -> None:
        self.event_name = event_name
        self.reason = reason
        super().__init__(f"Cannot invoke handler for event {event_name!r}: {reason}")


class InvalidContractError(TypeError):
    """Raised for contracts that cannot be turned into a signature table."""


class ScriptLoadError(RuntimeError):
    """Raised when script source fails to compile or run its top level."""
