"""
Flow state machine transitions.
"""

import pytest

from gasless_relay.engine.exceptions import InvalidTransition
from gasless_relay.engine.states import (
    STATUS_TEXT,
    FlowSnapshot,
    FlowState,
    is_in_flight,
    is_terminal,
    transition,
)

HAPPY_PATH = [
    FlowState.IDLE,
    FlowState.CONNECTING_WALLET,
    FlowState.PREPARING_AUTHORIZATION,
    FlowState.AWAITING_SIGNATURE,
    FlowState.SUBMITTING_TO_RELAYER,
    FlowState.SUCCEEDED,
    FlowState.IDLE,
]

NON_TERMINAL = [s for s in FlowState if s not in (FlowState.SUCCEEDED, FlowState.FAILED)]


def test_happy_path():
    state = HAPPY_PATH[0]
    for target in HAPPY_PATH[1:]:
        state = transition(state, target)
    assert state is FlowState.IDLE


@pytest.mark.parametrize("state", NON_TERMINAL)
def test_any_non_terminal_state_can_fail(state):
    assert transition(state, FlowState.FAILED) is FlowState.FAILED


@pytest.mark.parametrize("state", [FlowState.SUCCEEDED, FlowState.FAILED])
def test_terminal_states_only_return_to_idle(state):
    assert transition(state, FlowState.IDLE) is FlowState.IDLE
    with pytest.raises(InvalidTransition):
        transition(state, FlowState.CONNECTING_WALLET)
    with pytest.raises(InvalidTransition):
        transition(state, FlowState.FAILED)


@pytest.mark.parametrize("current,target", [
    (FlowState.IDLE, FlowState.AWAITING_SIGNATURE),
    (FlowState.IDLE, FlowState.SUCCEEDED),
    (FlowState.CONNECTING_WALLET, FlowState.SUBMITTING_TO_RELAYER),
    (FlowState.AWAITING_SIGNATURE, FlowState.CONNECTING_WALLET),
    (FlowState.SUBMITTING_TO_RELAYER, FlowState.IDLE),
])
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidTransition) as exc_info:
        transition(current, target)
    assert exc_info.value.current_state is current
    assert exc_info.value.target_state is target
    assert current.value in str(exc_info.value)


def test_state_predicates():
    assert is_terminal(FlowState.SUCCEEDED) and is_terminal(FlowState.FAILED)
    assert not is_terminal(FlowState.IDLE)
    assert not is_in_flight(FlowState.IDLE)
    assert is_in_flight(FlowState.AWAITING_SIGNATURE)
    assert not is_in_flight(FlowState.FAILED)


def test_every_state_has_status_text():
    assert set(STATUS_TEXT) == set(FlowState)
    assert STATUS_TEXT[FlowState.AWAITING_SIGNATURE] == "Waiting for signature in wallet..."


def test_snapshot_busy_flag():
    assert not FlowSnapshot().is_busy
    assert FlowSnapshot(state=FlowState.SUBMITTING_TO_RELAYER).is_busy
    assert FlowSnapshot(state=FlowState.IDLE, attempt_active=True).is_busy
