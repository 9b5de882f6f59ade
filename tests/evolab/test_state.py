from __future__ import annotations

import pytest
from evolab.state import Phase, RoundStateMachine, StateGroup


def test_transition_takes_two_updates() -> None:
    fsm = RoundStateMachine(current="A")
    assert fsm.settled
    assert fsm.transit_to("B")
    assert fsm.exiting() == "B"
    assert fsm.entering() is None

    fsm.update()
    assert fsm.current == "A"
    assert fsm.entering() == "B"
    assert fsm.exiting() is None

    fsm.update()
    assert fsm.current == "B"
    assert fsm.is_("B")
    assert fsm.settled
    assert fsm.pending is None

    fsm.update()
    assert fsm.current == "B"
    assert fsm.phase is Phase.IDLE


def test_transition_in_flight_rejects_new_requests() -> None:
    messages: list[str] = []
    fsm = RoundStateMachine(current="A", on_reject=messages.append)
    assert fsm.transit_to("B")
    assert not fsm.transit_to("C")
    fsm.update()
    assert not fsm.transit_to("C")
    fsm.update()

    assert fsm.current == "B"
    assert len(messages) == 2
    assert "'C'" in messages[0]
    assert "'B'" in messages[0]


def test_rejection_without_handler_is_silent() -> None:
    fsm = RoundStateMachine(current=1)
    assert fsm.transit_to(2)
    assert not fsm.transit_to(3)
    assert fsm.pending == 2


def test_booting_enters_initial_state() -> None:
    fsm = RoundStateMachine.booting("menu", begin="begin")
    assert fsm.current == "begin"
    assert fsm.exiting() == "menu"
    fsm.update()
    assert fsm.entering() == "menu"
    fsm.update()
    assert fsm.current == "menu"


def test_group_exit_and_entry() -> None:
    arena = StateGroup.of("AA", "AB")
    fsm = RoundStateMachine.booting("AA", begin="BEGIN")

    assert not fsm.exiting_group(arena)
    fsm.update()
    assert fsm.entering_group(arena)
    fsm.update()
    fsm.update()
    assert not fsm.entering_group(arena)

    # Moving inside the group neither leaves nor enters it.
    fsm.transit_to("AB")
    assert not fsm.exiting_group(arena)
    fsm.update()
    assert not fsm.entering_group(arena)
    fsm.update()

    fsm.transit_to("B")
    assert fsm.exiting_group(arena)
    assert not fsm.entering_group(arena)
    fsm.update()
    assert not fsm.exiting_group(arena)
    assert fsm.entering_group(StateGroup.of("B"))
    fsm.update()
    assert not fsm.entering_group(StateGroup.of("B"))


def test_state_group_membership() -> None:
    evens = StateGroup.matching(lambda value: value % 2 == 0, range(10))
    assert evens.covers(4)
    assert 6 in evens
    assert 3 not in evens
    assert evens.states == frozenset({0, 2, 4, 6, 8})


@pytest.mark.parametrize("updates", [0, 1])
def test_no_settled_state_mid_transition(updates: int) -> None:
    fsm = RoundStateMachine(current="A")
    fsm.transit_to("B")
    for _ in range(updates):
        fsm.update()
    assert not fsm.settled


def test_enter_phase_without_target_is_an_error() -> None:
    fsm = RoundStateMachine(current="A", phase=Phase.ENTER)
    with pytest.raises(RuntimeError):
        fsm.update()
