"""Signature resolution for a single event delivery."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from event_dispatch.contracts import (
    EventContract,
    Signature,
    contract_signatures,
    implements,
    is_contract,
)
from event_dispatch.errors import (
    ArgumentMismatch,
    ContractNotImplemented,
    InvalidContractError,
    UnknownEvent,
)

logger = logging.getLogger(__name__)


def resolve(
    contract: type[EventContract],
    target: object,
    event_name: str,
    args: Sequence[object],
) -> Signature:
    """Find the signature of ``contract`` that handles ``event_name(*args)``.

    Args:
        contract: The event group the event belongs to.
        target: The object that should handle the event.
        event_name: Name of the event, e.g. ``"on_init"``.
        args: Positional argument values of the event.

    Returns:
        The first signature, in declaration order, matching name, argument
        count and argument types.

    Raises:
        InvalidContractError: If ``contract`` is not an event contract.
        ContractNotImplemented: If ``target`` does not conform to ``contract``.
        ArgumentMismatch: If the event exists but no declaration fits ``args``.
        UnknownEvent: If the contract declares no event named ``event_name``.
    """
    if not is_contract(contract):
        raise InvalidContractError(f"{contract!r} is not an EventContract subclass")

    if not implements(target, contract):
        raise ContractNotImplemented(contract.__name__)

    name_match: Signature | None = None
    for signature in contract_signatures(contract):
        if signature.name != event_name:
            continue
        name_match = signature
        if signature.accepts(args):
            return signature

    if name_match is not None:
        logger.debug(
            "Arguments %r do not fit %s.%s",
            tuple(type(a).__name__ for a in args),
            contract.__name__,
            name_match.describe(),
        )
        raise ArgumentMismatch(event_name, contract.__name__)
    raise UnknownEvent(event_name, contract.__name__)
