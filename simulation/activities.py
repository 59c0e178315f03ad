from pydantic import BaseModel, ConfigDict, Field
from typing import Callable, List, Optional, Tuple

from models.state import Effects, Room
from simulation.clock import is_night


class UnknownActivity(KeyError):
    """Raised when an activity id is not in the catalog."""


class Activity(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    duration: int = Field(gt=0, description="Length in game-minutes.")
    effects: Effects
    room: Room
    available: Callable[..., bool] = Field(description="Pure predicate over the current SimulationState.")

    def is_available(self, state) -> bool:
        return bool(self.available(state))


def _always(state) -> bool:
    return True


def _sleepy_or_night(state) -> bool:
    return state.needs.sleepiness > 60 or is_night(state.clock_minutes)


# Effects are validated here, at import time; a typo in a need name fails immediately.
CATALOG: Tuple[Activity, ...] = (
    Activity(id="sleep", duration=480, room="bedroom",
             effects=Effects(energy=100, sleepiness=-100, health=10),
             available=_sleepy_or_night),
    Activity(id="computer", duration=120, room="bedroom",
             effects=Effects(happiness=15, energy=-10, sleepiness=5),
             available=_always),
    Activity(id="relax", duration=60, room="living",
             effects=Effects(happiness=10, energy=5, sleepiness=10),
             available=_always),
    Activity(id="tv", duration=90, room="living",
             effects=Effects(happiness=20, sleepiness=15),
             available=_always),
    Activity(id="eat", duration=30, room="kitchen",
             effects=Effects(hunger=-50, happiness=10, energy=15),
             available=lambda state: state.needs.hunger > 20),
    Activity(id="drinkWater", duration=5, room="kitchen",
             effects=Effects(health=5, energy=5),
             available=_always),
    Activity(id="exercise", duration=60, room="gym",
             effects=Effects(health=15, energy=-20, hunger=15, happiness=10, sleepiness=-10),
             available=lambda state: state.needs.energy > 30),
    Activity(id="shower", duration=20, room="bathroom",
             effects=Effects(hygiene=50, happiness=10, energy=5),
             available=lambda state: state.needs.hygiene < 80),
)

_BY_ID = {activity.id: activity for activity in CATALOG}


def get_activity(activity_id: str) -> Activity:
    try:
        return _BY_ID[activity_id]
    except KeyError:
        raise UnknownActivity(activity_id) from None


def activities_in_room(room: str) -> List[Activity]:
    return [activity for activity in CATALOG if activity.room == room]


def available_activities(state, room: Optional[str] = None) -> List[Activity]:
    """
    Activities whose eligibility currently holds, in catalog order.
    Defaults to the state's current room; eligibility is evaluated fresh on every call.
    """
    room = room or state.current_room
    return [activity for activity in activities_in_room(room) if activity.is_available(state)]
