"""Lifecycle Transitions — the legal moves of the startup state machine.

Invariants:
    - Stages advance strictly in order; no stage is revisited
    - CONNECTING_DATASTORE may be skipped when no databases are configured
    - Every state except FAILED may move to FAILED; FAILED is terminal

Design Decisions:
    - Explicit transition table over ordinal arithmetic: every legal move is
      visible in one place
"""

from harmonia.core.domain_types import LifecycleState
from harmonia.core.errors import InvalidTransitionError

S = LifecycleState

STARTUP_ORDER: tuple[LifecycleState, ...] = (
    S.IDLE,
    S.SECURING_TRANSPORT_HEADERS,
    S.CONFIGURING_VALIDATION,
    S.CONNECTING_DATASTORE,
    S.REGISTERING_ROUTES,
    S.SERVING,
)

_TRANSITIONS: dict[LifecycleState, frozenset[LifecycleState]] = {
    S.IDLE: frozenset({S.SECURING_TRANSPORT_HEADERS, S.FAILED}),
    S.SECURING_TRANSPORT_HEADERS: frozenset({S.CONFIGURING_VALIDATION, S.FAILED}),
    # skipping the datastore stage is legal (zero databases configured)
    S.CONFIGURING_VALIDATION: frozenset({
        S.CONNECTING_DATASTORE, S.REGISTERING_ROUTES, S.FAILED,
    }),
    S.CONNECTING_DATASTORE: frozenset({S.REGISTERING_ROUTES, S.FAILED}),
    S.REGISTERING_ROUTES: frozenset({S.SERVING, S.FAILED}),
    S.SERVING: frozenset({S.FAILED}),
    S.FAILED: frozenset(),
}


def can_transition(current: LifecycleState, target: LifecycleState) -> bool:
    """True if `target` is a legal next state from `current`."""
    return target in _TRANSITIONS[current]


def next_state(current: LifecycleState, target: LifecycleState) -> LifecycleState:
    """Validate a transition and return the new state. Raises on illegal moves."""
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)
    return target


def is_startup_stage(state: LifecycleState) -> bool:
    """Stages during which any fault is fatal (everything before SERVING)."""
    return state in STARTUP_ORDER[:-1]
