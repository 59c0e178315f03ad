import datetime
import math
from collections import deque
from typing import Deque, Optional

from config import ROOMS, EVENT_LOG_LIMIT
from models.state import SimulationState
from simulation import actions, clock
from simulation.activities import UnknownActivity, available_activities, get_activity
from simulation.needs import decay_tick
from simulation.persistence import CorruptSave, NoSaveFound, SaveGateway
from utils import log_event, summarize_needs


class SimulationController:
    """
    Owns the SimulationState and is the only thing that mutates it.

    An external scheduler calls `tick()` at a fixed cadence; the presentation layer
    reads `snapshot()` and submits intents through the other public methods.
    Rejected intents return False rather than raising.
    """

    def __init__(self, state: Optional[SimulationState] = None, gateway: Optional[SaveGateway] = None):
        self.state = state if state is not None else SimulationState()
        self.gateway = gateway if gateway is not None else SaveGateway()
        # Oldest entries drop off once the limit is reached
        self.event_log: Deque[dict] = deque(maxlen=EVENT_LOG_LIMIT)
        self.last_save_time = None
        self.ticks = 0

    def _log(self, event_type: str, payload: dict):
        return log_event(self.event_log, self.state, event_type, "SIM_CORE", payload)

    def _reject(self, intent: str, reason: str) -> bool:
        self._log("INTENT_REJECTED", {"intent": intent, "reason": reason})
        return False

    # --- Tick ---

    def tick(self) -> bool:
        """Runs one simulation step. Returns False when paused."""
        state = self.state
        if state.paused:
            return False

        elapsed = clock.minutes_per_tick(state.speed_multiplier)
        days_passed = clock.advance_minutes(state, elapsed)
        if days_passed:
            self._log("DAY_ROLLOVER", {"days_passed": days_passed})

        finished = actions.count_down(state, elapsed)
        if finished:
            self._log("ACTIVITY_COMPLETED", {"activity": finished})

        # Decay applies once per tick whatever the speed or action state
        decay_tick(state.needs)
        self.ticks += 1
        return True

    # --- Intents ---

    def start_activity(self, activity_id: str) -> bool:
        if not isinstance(activity_id, str):
            return self._reject("start_activity", f"activity id must be a string, got {activity_id!r}")
        try:
            activity = get_activity(activity_id)
        except UnknownActivity:
            return self._reject("start_activity", f"unknown activity {activity_id!r}")
        if self.state.is_busy:
            return self._reject("start_activity", f"busy with {self.state.active_action.activity_id}")
        if not actions.start_activity(self.state, activity):
            return self._reject("start_activity", f"{activity_id} is not available right now")
        self._log("ACTIVITY_STARTED", {
            "activity": activity_id,
            "room": activity.room,
            "minutes": activity.duration,
            "needs": summarize_needs(self.state.needs),
        })
        return True

    def change_room(self, room: str) -> bool:
        if room not in ROOMS:
            return self._reject("change_room", f"unknown room {room!r}")
        if self.state.is_busy:
            return self._reject("change_room", f"busy with {self.state.active_action.activity_id}")
        if room != self.state.current_room:
            self.state.current_room = room
            self._log("ROOM_CHANGED", {"room": room})
        return True

    def set_paused(self, paused: bool) -> bool:
        if not isinstance(paused, bool):
            return self._reject("set_paused", f"expected true or false, got {paused!r}")
        if paused != self.state.paused:
            self.state.paused = paused
            self._log("PAUSED" if paused else "RESUMED", {})
        return True

    def set_speed(self, multiplier: float) -> bool:
        try:
            multiplier = float(multiplier)
        except (TypeError, ValueError):
            return self._reject("set_speed", f"not a number: {multiplier!r}")
        if not math.isfinite(multiplier) or multiplier <= 0:
            return self._reject("set_speed", f"speed must be positive, got {multiplier}")
        self.state.speed_multiplier = multiplier
        self._log("SPEED_CHANGED", {"speed": multiplier})
        return True

    def reset(self) -> None:
        """Starts over from the default state. The save slot is discarded too."""
        self.state = SimulationState()
        self.gateway.discard()
        self.last_save_time = None
        self._log("RESET", {})

    def save(self) -> str:
        saved_at = datetime.datetime.now(datetime.timezone.utc)
        blob = self.gateway.save(self.state, saved_at)
        self.last_save_time = saved_at
        self._log("SAVED", {"slot": self.gateway.key, "saved_at": saved_at.isoformat()})
        return blob

    def load(self) -> SimulationState:
        """
        Replaces the state with the saved one. On CorruptSave or NoSaveFound the
        error propagates and the current state is kept as it was.
        """
        try:
            state, saved_at = self.gateway.load()
        except (CorruptSave, NoSaveFound) as e:
            self._log("LOAD_FAILED", {"slot": self.gateway.key, "error": type(e).__name__})
            raise
        self.state = state
        self.last_save_time = saved_at
        self._log("LOADED", {"slot": self.gateway.key, "saved_at": saved_at.isoformat()})
        return self.state

    # --- Read-only views ---

    def snapshot(self) -> SimulationState:
        return self.state.model_copy(deep=True)

    def available_activities(self, room: Optional[str] = None):
        return available_activities(self.state, room)
