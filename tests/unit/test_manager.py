"""Unit tests for event delivery through the event manager."""

from __future__ import annotations

import logging
from abc import abstractmethod
from unittest.mock import Mock

import pytest

from event_dispatch.config import DispatchSettings
from event_dispatch.contracts import EventContract
from event_dispatch.errors import (
    ArgumentMismatch,
    ContractNotImplemented,
    DispatchMechanicalFault,
    ErrorKind,
    UnknownEvent,
)
from event_dispatch.handlers import HandlerKind
from event_dispatch.manager import EventManager
from event_dispatch.scripting import (
    NamespaceScriptBinding,
    ScriptBinding,
    Scriptable,
    ScriptRegistry,
)


class InputEvents(EventContract):
    @abstractmethod
    def on_key(self, key: str, pressed: bool) -> None: ...

    @abstractmethod
    def on_tap(self) -> None: ...


class Widget(InputEvents, Scriptable):
    def __init__(self, log: list[tuple[object, ...]], error: Exception | None = None) -> None:
        self.log = log
        self.error = error

    def on_key(self, key: str, pressed: bool) -> None:
        self.log.append(("native", key, pressed))
        if self.error is not None:
            raise self.error

    def on_tap(self) -> None:
        self.log.append(("native", "tap"))


class PlainWidget(InputEvents):
    """Implements the contract but is not scriptable."""

    def __init__(self, log: list[tuple[object, ...]]) -> None:
        self.log = log

    def on_key(self, key: str, pressed: bool) -> None:
        self.log.append(("native", key, pressed))

    def on_tap(self) -> None:
        self.log.append(("native", "tap"))


class Bystander(Scriptable):
    """Scriptable, but does not implement InputEvents."""


class HalfWidget:
    def on_key(self, key: str, pressed: bool) -> None:
        pass


InputEvents.register(HalfWidget)


class AbstractWidget:
    on_key = InputEvents.on_key
    on_tap = InputEvents.on_tap


InputEvents.register(AbstractWidget)


class RelayWidget(InputEvents):
    """Forwards taps to a dispatch that fails from inside the method body."""

    def __init__(self, error: DispatchMechanicalFault) -> None:
        self.error = error

    def on_key(self, key: str, pressed: bool) -> None:
        pass

    def on_tap(self) -> None:
        raise self.error


class NarrowWidget(InputEvents):
    def on_key(self, key: str) -> None:  # type: ignore[override]
        pass

    def on_tap(self) -> None:
        pass


def _script(log: list[tuple[object, ...]]) -> NamespaceScriptBinding:
    def on_key(key: str, pressed: bool) -> None:
        log.append(("script", key, pressed))

    return NamespaceScriptBinding({"on_key": on_key})


def test_native_handler_runs_once(manager: EventManager) -> None:
    log: list[tuple[object, ...]] = []

    result = manager.send_event(Widget(log), InputEvents, "on_key", "a", True)

    assert result.ok
    assert result.event_name == "on_key"
    assert result.handlers == (HandlerKind.NATIVE,)
    assert result.fault is None
    assert log == [("native", "a", True)]


def test_script_and_native_both_run_script_first(
    manager: EventManager, scripts: ScriptRegistry
) -> None:
    log: list[tuple[object, ...]] = []
    widget = Widget(log)
    scripts.attach(widget, _script(log))

    result = manager.send_event(widget, InputEvents, "on_key", "b", False)

    assert result.handlers == (HandlerKind.SCRIPT, HandlerKind.NATIVE)
    assert log == [("script", "b", False), ("native", "b", False)]


def test_unbound_target_never_calls_a_script(
    manager: EventManager, scripts: ScriptRegistry
) -> None:
    log: list[tuple[object, ...]] = []
    other = Widget([])
    binding = Mock(spec=ScriptBinding)
    scripts.attach(other, binding)

    result = manager.send_event(Widget(log), InputEvents, "on_tap")

    assert result.handlers == (HandlerKind.NATIVE,)
    assert log == [("native", "tap")]
    binding.invoke.assert_not_called()


def test_non_scriptable_target_skips_registry_lookup(settings: DispatchSettings) -> None:
    registry = Mock(spec=ScriptRegistry)
    manager = EventManager(scripts=registry, settings=settings)
    log: list[tuple[object, ...]] = []

    manager.send_event(PlainWidget(log), InputEvents, "on_tap")

    registry.lookup.assert_not_called()
    assert log == [("native", "tap")]


def test_script_without_matching_function_is_a_no_op(
    manager: EventManager, scripts: ScriptRegistry
) -> None:
    log: list[tuple[object, ...]] = []
    widget = Widget(log)
    scripts.attach(widget, _script(log))

    result = manager.send_event(widget, InputEvents, "on_tap")

    assert result.handlers == (HandlerKind.NATIVE,)
    assert log == [("native", "tap")]


def test_script_dispatch_can_be_disabled(scripts: ScriptRegistry) -> None:
    settings = DispatchSettings(_env_file=None, script_dispatch=False)
    manager = EventManager(scripts=scripts, settings=settings)
    log: list[tuple[object, ...]] = []
    widget = Widget(log)
    scripts.attach(widget, _script(log))

    result = manager.send_event(widget, InputEvents, "on_key", "c", True)

    assert result.handlers == (HandlerKind.NATIVE,)
    assert log == [("native", "c", True)]


def test_contract_not_implemented_runs_no_handler(
    manager: EventManager, scripts: ScriptRegistry
) -> None:
    target = Bystander()
    binding = Mock(spec=ScriptBinding)
    scripts.attach(target, binding)

    with pytest.raises(ContractNotImplemented):
        manager.send_event(target, InputEvents, "on_key", "a", True)

    binding.invoke.assert_not_called()


def test_unknown_event_runs_no_handler(manager: EventManager, scripts: ScriptRegistry) -> None:
    log: list[tuple[object, ...]] = []
    widget = Widget(log)
    scripts.attach(widget, _script(log))

    with pytest.raises(UnknownEvent):
        manager.send_event(widget, InputEvents, "on_swipe", 1)

    assert log == []


@pytest.mark.parametrize("args", [(), ("a",), ("a", "yes"), (1, True)])
def test_argument_mismatch_runs_no_handler(
    manager: EventManager, scripts: ScriptRegistry, args: tuple[object, ...]
) -> None:
    log: list[tuple[object, ...]] = []
    widget = Widget(log)
    scripts.attach(widget, _script(log))

    with pytest.raises(ArgumentMismatch):
        manager.send_event(widget, InputEvents, "on_key", *args)

    assert log == []


def test_native_error_reaches_caller_unchanged(
    manager: EventManager, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG, logger="event_dispatch.manager")
    error = LookupError("no such key binding")

    with pytest.raises(LookupError) as exc_info:
        manager.send_event(Widget([], error=error), InputEvents, "on_key", "z", True)

    assert exc_info.value is error
    kinds = [getattr(r, "error_kind", None) for r in caplog.records]
    assert ErrorKind.HANDLER_APPLICATION_FAULT.value in kinds


def test_script_error_propagates_and_skips_native(
    manager: EventManager, scripts: ScriptRegistry
) -> None:
    log: list[tuple[object, ...]] = []
    widget = Widget(log)
    error = ValueError("script failed")

    def on_key(key: str, pressed: bool) -> None:
        raise error

    scripts.attach(widget, NamespaceScriptBinding({"on_key": on_key}))

    with pytest.raises(ValueError) as exc_info:
        manager.send_event(widget, InputEvents, "on_key", "a", True)

    assert exc_info.value is error
    assert log == []


def test_missing_native_method_is_logged_not_raised(
    manager: EventManager, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.ERROR, logger="event_dispatch.manager")

    result = manager.send_event(HalfWidget(), InputEvents, "on_tap")

    assert not result.ok
    assert result.handlers == ()
    assert isinstance(result.fault, DispatchMechanicalFault)
    assert result.fault.kind is ErrorKind.DISPATCH_MECHANICAL_FAULT
    assert result.fault.event_name == "on_tap"

    (record,) = caplog.records
    assert record.levelno == logging.ERROR
    assert record.error_kind == ErrorKind.DISPATCH_MECHANICAL_FAULT.value
    assert record.target == "HalfWidget"


def test_abstract_native_method_is_a_mechanical_fault(
    manager: EventManager, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.ERROR, logger="event_dispatch.manager")

    result = manager.send_event(AbstractWidget(), InputEvents, "on_tap")

    assert not result.ok
    assert isinstance(result.fault, DispatchMechanicalFault)
    assert "abstract" in result.fault.reason
    (record,) = caplog.records
    assert record.target == "AbstractWidget"


def test_fault_raised_by_method_body_is_not_absorbed(
    manager: EventManager, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.ERROR, logger="event_dispatch.manager")
    error = DispatchMechanicalFault("on_refresh", "nested dispatch failed")

    with pytest.raises(DispatchMechanicalFault) as exc_info:
        manager.send_event(RelayWidget(error), InputEvents, "on_tap")

    assert exc_info.value is error
    assert caplog.records == []


def test_unbindable_native_signature_is_a_mechanical_fault(manager: EventManager) -> None:
    result = manager.send_event(NarrowWidget(), InputEvents, "on_key", "a", True)

    assert not result.ok
    assert isinstance(result.fault, DispatchMechanicalFault)


def test_mechanical_fault_raised_in_strict_mode(scripts: ScriptRegistry) -> None:
    settings = DispatchSettings(_env_file=None, raise_mechanical_faults=True)
    manager = EventManager(scripts=scripts, settings=settings)

    with pytest.raises(DispatchMechanicalFault):
        manager.send_event(HalfWidget(), InputEvents, "on_tap")


def test_mechanical_fault_keeps_script_handler_record(
    manager: EventManager, scripts: ScriptRegistry
) -> None:
    log: list[tuple[object, ...]] = []

    class ScriptedNarrowWidget(NarrowWidget, Scriptable):
        pass

    widget = ScriptedNarrowWidget()
    scripts.attach(widget, _script(log))

    result = manager.send_event(widget, InputEvents, "on_key", "q", True)

    assert not result.ok
    assert result.handlers == (HandlerKind.SCRIPT,)
    assert log == [("script", "q", True)]
