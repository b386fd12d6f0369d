"""
Timeplan — Action State Machine.

The lifecycle of an Action is an explicit table rather than derived logic,
so adding a state is always a deliberate edit here.

completed → rolled-over exists for recurrence: when a completed habit
spawns its next instance the original is rolled over and never moves again.
"""

from __future__ import annotations

import logging

from timeplan.core.errors import StateTransitionError
from timeplan.data.models import Action, ActionState
from timeplan.ports.clock import Clock, utc_now

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[ActionState, tuple[ActionState, ...]] = {
    ActionState.PLANNED: (ActionState.IN_PROGRESS, ActionState.DEFERRED),
    ActionState.IN_PROGRESS: (ActionState.COMPLETED, ActionState.DEFERRED, ActionState.PLANNED),
    ActionState.COMPLETED: (ActionState.ROLLED_OVER,),
    ActionState.DEFERRED: (ActionState.PLANNED,),
    ActionState.ROLLED_OVER: (),
}


def valid_next_states(state: ActionState | str) -> list[ActionState]:
    """States reachable from ``state`` in one step. Raises ValueError for unknown states."""
    return list(_TRANSITIONS[ActionState(state)])


def is_valid_transition(from_state: ActionState | str, to_state: ActionState | str) -> bool:
    try:
        source, target = ActionState(from_state), ActionState(to_state)
    except ValueError:
        return False
    return target in _TRANSITIONS[source]


def require_transition(from_state: ActionState | str, to_state: ActionState | str) -> None:
    """Raise StateTransitionError unless ``from_state → to_state`` is in the table.

    The error carries both states and the legal next states, so callers can
    render "cannot move from X to Y; valid: …" without another lookup.
    """
    source, target = ActionState(from_state), ActionState(to_state)
    if target not in _TRANSITIONS[source]:
        raise StateTransitionError(source, target, valid_next_states(source))


def is_terminal(state: ActionState | str) -> bool:
    return not _TRANSITIONS[ActionState(state)]


def transition_action(
    action: Action,
    to_state: ActionState | str,
    *,
    clock: Clock = utc_now,
) -> Action:
    """Return a copy of ``action`` moved to ``to_state`` with a fresh updated_at."""
    require_transition(action.state, to_state)
    target = ActionState(to_state)
    logger.debug("Action %s: %s -> %s", action.id, action.state.value, target.value)
    return action.model_copy(update={"state": target, "updated_at": clock()})
