"""Two-step round state machine gating agent spawning and retirement."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

S = TypeVar("S", bound=Hashable)

RejectHandler = Callable[[str], None]


class Phase(str, Enum):
    """Progress of the transition in flight."""

    EXIT = "exit"
    ENTER = "enter"
    IDLE = "idle"


@dataclass(frozen=True, slots=True)
class StateGroup(Generic[S]):
    """Closed set of states used to scope per-state resources."""

    states: frozenset[S]

    @classmethod
    def of(cls, *states: S) -> StateGroup[S]:
        return cls(frozenset(states))

    @classmethod
    def matching(
        cls,
        predicate: Callable[[S], bool],
        universe: Iterable[S],
    ) -> StateGroup[S]:
        """Materialise a predicate over a finite universe of states."""
        return cls(frozenset(state for state in universe if predicate(state)))

    def covers(self, state: S) -> bool:
        return state in self.states

    def __contains__(self, state: object) -> bool:
        return state in self.states


@dataclass(slots=True)
class RoundStateMachine(Generic[S]):
    """State machine whose transitions take two ticks.

    ``transit_to`` only queues a request. The following ``update`` moves it to
    the enter phase, so systems can tear down what belonged to the old state
    while ``current`` is still unchanged; the next ``update`` commits.
    """

    current: S
    pending: S | None = None
    phase: Phase = Phase.IDLE
    on_reject: RejectHandler | None = field(default=None, repr=False)

    @classmethod
    def booting(
        cls,
        initial: S,
        *,
        begin: S,
        on_reject: RejectHandler | None = None,
    ) -> RoundStateMachine[S]:
        """Start at the ``begin`` sentinel with a transition to ``initial`` queued."""
        return cls(current=begin, pending=initial, phase=Phase.EXIT, on_reject=on_reject)

    @property
    def settled(self) -> bool:
        return self.phase is Phase.IDLE

    def is_(self, state: S) -> bool:
        return self.current == state

    def transit_to(self, state: S) -> bool:
        """Request a transition. Returns False and drops it if one is in flight."""
        if self.phase is not Phase.IDLE:
            message = (
                f"Not going to {state!r}, transition to {self.pending!r} "
                "already in progress"
            )
            if self.on_reject is not None:
                self.on_reject(message)
            return False
        self.pending = state
        self.phase = Phase.EXIT
        return True

    def update(self) -> None:
        """Advance the transition in flight; called once per tick."""
        if self.phase is Phase.EXIT:
            self.phase = Phase.ENTER
        elif self.phase is Phase.ENTER:
            if self.pending is None:
                msg = "Enter phase without a pending state."
                raise RuntimeError(msg)
            self.current = self.pending
            self.pending = None
            self.phase = Phase.IDLE

    def entering(self) -> S | None:
        """The target state, during the tick it is being entered."""
        if self.phase is Phase.ENTER:
            return self.pending
        return None

    def exiting(self) -> S | None:
        """The target state, during the tick the current one is being left."""
        if self.phase is Phase.EXIT:
            return self.pending
        return None

    def exiting_group(self, group: StateGroup[S]) -> bool:
        """True when leaving ``group`` for a state outside of it."""
        if self.phase is not Phase.EXIT:
            return False
        return group.covers(self.current) and not group.covers(self.pending)

    def entering_group(self, group: StateGroup[S]) -> bool:
        """True when entering ``group`` from a state outside of it."""
        if self.phase is not Phase.ENTER:
            return False
        return group.covers(self.pending) and not group.covers(self.current)


__all__ = ["Phase", "RejectHandler", "RoundStateMachine", "StateGroup"]
