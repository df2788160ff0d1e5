"""Dispatch lifecycle state machine."""

from typing import Dict, FrozenSet, List

from courier.enums import DispatchState
from courier.errors import InvalidTransitionError

TRANSITIONS: Dict[DispatchState, FrozenSet[DispatchState]] = {
    DispatchState.CREATED: frozenset({DispatchState.SENDING, DispatchState.SETTLED}),
    DispatchState.SENDING: frozenset(
        {DispatchState.SUCCEEDED, DispatchState.RETRYING, DispatchState.SETTLED}
    ),
    DispatchState.RETRYING: frozenset({DispatchState.SENDING}),
    DispatchState.SUCCEEDED: frozenset(
        {DispatchState.AWAITING_VERIFICATION, DispatchState.SETTLED}
    ),
    DispatchState.AWAITING_VERIFICATION: frozenset({DispatchState.SETTLED}),
    DispatchState.SETTLED: frozenset(),
}


class DispatchStateMachine:
    """Tracks the lifecycle of one dispatch.

    CREATED → SENDING → (SUCCEEDED | RETRYING → SENDING) → SETTLED, with
    SUCCEEDED → AWAITING_VERIFICATION → SETTLED for asynchronous channels
    and CREATED → SETTLED when the request never reaches a channel.
    """

    def __init__(self, notification_id: str):
        self.notification_id = notification_id
        self.state = DispatchState.CREATED
        self.history: List[DispatchState] = [DispatchState.CREATED]

    @property
    def is_settled(self) -> bool:
        return self.state == DispatchState.SETTLED

    def can_advance(self, target: DispatchState) -> bool:
        return target in TRANSITIONS[self.state]

    def advance(self, target: DispatchState) -> None:
        """Move to ``target``.

        Raises:
            InvalidTransitionError: If the current state has no edge to target
        """
        if not self.can_advance(target):
            raise InvalidTransitionError(
                f"Dispatch {self.notification_id} cannot move from "
                f"{self.state.value} to {target.value}"
            )
        self.state = target
        self.history.append(target)
