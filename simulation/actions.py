from typing import Optional

from models.state import ActiveAction
from simulation.needs import apply_effects


def can_start(state, activity) -> bool:
    return not state.is_busy and activity.is_available(state)


def start_activity(state, activity) -> bool:
    """
    Idle -> Busy. Moves the character to the activity's room and applies its effects
    up front. Returns False without touching the state when busy or not eligible.
    """
    if not can_start(state, activity):
        return False
    state.current_room = activity.room
    apply_effects(state.needs, activity.effects)
    state.active_action = ActiveAction(activity_id=activity.id, minutes_remaining=activity.duration)
    return True


def count_down(state, minutes: float) -> Optional[str]:
    """
    Busy -> Busy, or Busy -> Idle once the countdown reaches zero.
    Returns the id of the activity that just finished, if any.
    """
    action = state.active_action
    if action is None:
        return None
    remaining = action.minutes_remaining - minutes
    if remaining > 0:
        action.minutes_remaining = remaining
        return None
    action.minutes_remaining = 0
    state.active_action = None
    return action.activity_id
