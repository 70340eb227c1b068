"""Event-group contracts and their signature tables.

An event group is declared as a subclass of :class:`EventContract` whose
abstract methods are the events of the group::

    class InputEvents(EventContract):
        @abstractmethod
        def on_key(self, key: str, pressed: bool) -> None: ...

A target handles the group by subclassing the contract, or by registering
its class explicitly with ``InputEvents.register(TargetClass)``.
"""

from __future__ import annotations

import functools
import inspect
import types
import typing
from abc import ABC
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal, TypeVar, Union

from event_dispatch.errors import InvalidContractError

# Widening conversions accepted on top of plain isinstance().
_NUMERIC_PROMOTIONS: dict[type, tuple[type, ...]] = {
    float: (int,),
    complex: (int, float),
}

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class EventContract(ABC):
    """Tag base class for event groups.

    Subclasses declare events as public methods. Every public function in the
    body of a contract class (and of its contract bases) becomes a signature.
    """


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str
    annotation: Any = Any


@dataclass(frozen=True, slots=True)
class Signature:
    """One handleable event form: an event name and its positional parameters."""

    name: str
    parameters: tuple[Parameter, ...]

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def accepts(self, args: Sequence[object]) -> bool:
        """Return True if ``args`` match this signature by count and type."""

        if len(args) != self.arity:
            return False
        return all(
            is_compatible(value, param.annotation)
            for value, param in zip(args, self.parameters, strict=True)
        )

    def describe(self) -> str:
        params = ", ".join(f"{p.name}: {_type_name(p.annotation)}" for p in self.parameters)
        return f"{self.name}({params})"


def is_contract(obj: object) -> bool:
    # Real inheritance only; classes registered with a contract are targets.
    return isinstance(obj, type) and EventContract in obj.__mro__ and obj is not EventContract


def implements(target: object, contract: type[EventContract]) -> bool:
    """Capability query: does ``target`` conform to ``contract``?"""

    return isinstance(target, contract)


@functools.cache
def contract_signatures(contract: type[EventContract]) -> tuple[Signature, ...]:
    """Build the signature table of a contract, in declaration order.

    Base contracts come first, then each class body in source order. A
    contract that redeclares an inherited event replaces it in place.
    The table is built once per contract and cached.
    """

    if not is_contract(contract):
        raise InvalidContractError(f"{contract!r} is not an EventContract subclass")

    declared: dict[str, Signature] = {}
    for klass in reversed(contract.__mro__):
        if not is_contract(klass):
            continue
        for attr_name, member in vars(klass).items():
            if attr_name.startswith("_") or not inspect.isfunction(member):
                continue
            declared[attr_name] = _signature_of(klass, member)

    return tuple(declared.values())


def _signature_of(klass: type, func: types.FunctionType) -> Signature:
    try:
        hints = typing.get_type_hints(func)
    except NameError as e:
        raise InvalidContractError(
            f"{klass.__name__}.{func.__name__}: cannot resolve annotation ({e})"
        ) from e

    # Drop ``self``; events are declared as instance methods.
    params = list(inspect.signature(func).parameters.values())[1:]
    out: list[Parameter] = []
    for param in params:
        if param.kind not in _POSITIONAL_KINDS:
            raise InvalidContractError(
                f"{klass.__name__}.{func.__name__}: parameter {param.name!r} must be positional"
            )
        out.append(Parameter(name=param.name, annotation=hints.get(param.name, Any)))
    return Signature(name=func.__name__, parameters=tuple(out))


def is_compatible(value: object, annotation: Any) -> bool:
    """Return True if ``value`` may be passed where ``annotation`` is declared."""

    if annotation is Any or annotation is object or annotation is inspect.Parameter.empty:
        return True
    if annotation is None or annotation is type(None):
        return value is None

    if isinstance(annotation, TypeVar):
        if annotation.__bound__ is not None:
            return is_compatible(value, annotation.__bound__)
        if annotation.__constraints__:
            return any(is_compatible(value, c) for c in annotation.__constraints__)
        return True

    supertype = getattr(annotation, "__supertype__", None)
    if supertype is not None:  # typing.NewType
        return is_compatible(value, supertype)

    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        return any(is_compatible(value, arg) for arg in typing.get_args(annotation))
    if origin is Literal:
        # Literal[1] admits neither True nor 1.0, even though both compare equal.
        return any(
            type(value) is type(option) and value == option
            for option in typing.get_args(annotation)
        )
    if origin is not None:
        # Parameterized generics are checked against their origin only.
        annotation = origin

    if not isinstance(annotation, type):
        return False

    try:
        if isinstance(value, annotation):
            return True
    except TypeError as e:
        raise InvalidContractError(
            f"Annotation {_type_name(annotation)} cannot be checked at runtime"
        ) from e
    return isinstance(value, _NUMERIC_PROMOTIONS.get(annotation, ()))


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return repr(annotation).replace("typing.", "")
