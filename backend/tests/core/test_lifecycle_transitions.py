"""Lifecycle Transitions — legal moves of the startup state machine."""

import pytest

from harmonia.core.domain_types import LifecycleState as S
from harmonia.core.errors import InvalidTransitionError
from harmonia.core.lifecycle_transitions import (
    STARTUP_ORDER, can_transition, is_startup_stage, next_state,
)


def test_startup_order_is_each_stage_once():
    assert STARTUP_ORDER[0] is S.IDLE
    assert STARTUP_ORDER[-1] is S.SERVING
    assert len(set(STARTUP_ORDER)) == len(STARTUP_ORDER)


def test_each_stage_moves_to_the_next():
    for current, target in zip(STARTUP_ORDER, STARTUP_ORDER[1:]):
        assert next_state(current, target) is target


def test_datastore_stage_may_be_skipped():
    assert can_transition(S.CONFIGURING_VALIDATION, S.REGISTERING_ROUTES)


@pytest.mark.parametrize("current,target", [
    (S.IDLE, S.CONFIGURING_VALIDATION),
    (S.SECURING_TRANSPORT_HEADERS, S.REGISTERING_ROUTES),
    (S.CONNECTING_DATASTORE, S.SERVING),
    (S.REGISTERING_ROUTES, S.IDLE),
    (S.SERVING, S.IDLE),
])
def test_out_of_order_moves_raise(current, target):
    with pytest.raises(InvalidTransitionError) as info:
        next_state(current, target)
    assert info.value.current == current.value
    assert info.value.target == target.value


def test_every_live_state_can_fail():
    for state in STARTUP_ORDER:
        assert can_transition(state, S.FAILED)


def test_failed_is_terminal():
    assert not any(can_transition(S.FAILED, s) for s in S)


def test_startup_stages_exclude_serving_and_failed():
    assert is_startup_stage(S.IDLE)
    assert is_startup_stage(S.CONNECTING_DATASTORE)
    assert not is_startup_stage(S.SERVING)
    assert not is_startup_stage(S.FAILED)
