"""Canonical state transition rules for the deal board."""

from __future__ import annotations

from brokerage.core.enums import DealStatus
from brokerage.core.exceptions import InvalidTransitionError

_ALL = {status.value for status in DealStatus}


class StateMachine:
    """Transition table with optional wildcard targets reachable from anywhere."""

    def __init__(
        self,
        transitions: dict[str, set[str]],
        always_allowed: set[str] | None = None,
        restricted: dict[str, str] | None = None,
    ) -> None:
        self._transitions = transitions
        self._always_allowed = always_allowed or set()
        self._restricted = restricted or {}

    def can_transition(self, current: str, target: str) -> bool:
        if target in self._always_allowed:
            return True
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: str, target: str) -> None:
        if target not in _ALL:
            raise InvalidTransitionError(current, target, reason="unknown status")
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(current, target, reason=self._restricted.get(target))


# Manual moves on the board. ContractDraft is deliberately absent as a target:
# it is only reached by recording an offer.
DEAL_MOVES = StateMachine(
    transitions={
        DealStatus.NEW.value: {DealStatus.OFFER_MADE.value, DealStatus.NEGOTIATION.value},
        DealStatus.NEGOTIATION.value: {DealStatus.NEGOTIATION.value, DealStatus.OFFER_MADE.value},
        DealStatus.CONTRACT_DRAFT.value: {DealStatus.UNDER_CONTRACT.value},
    },
    always_allowed={DealStatus.ARCHIVED.value, DealStatus.CLOSED.value},
    restricted={
        DealStatus.CONTRACT_DRAFT.value: "set an offer during Negotiation instead",
        DealStatus.UNDER_CONTRACT.value: "only reachable from ContractDraft",
    },
)
