import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, Literal, Optional

from config import (
    START_CLOCK_MINUTES, START_DAY, START_ROOM, START_SPEED, START_NEEDS,
    MINUTES_PER_DAY, NEED_MIN, NEED_MAX, SAVE_FORMAT_VERSION
)

Room = Literal["bedroom", "living", "kitchen", "gym", "bathroom"]


def _need(name: str):
    return Field(default=START_NEEDS[name], ge=NEED_MIN, le=NEED_MAX, allow_inf_nan=False)


class Needs(BaseModel):
    """The six bounded statistics. Out-of-range assignments are rejected, so callers clamp first."""
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    energy: float = _need("energy")
    hunger: float = _need("hunger")
    hygiene: float = _need("hygiene")
    happiness: float = _need("happiness")
    sleepiness: float = _need("sleepiness")
    health: float = _need("health")


class Effects(BaseModel):
    """Signed per-need deltas an activity applies when it starts. Unset fields are left alone."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    energy: Optional[float] = Field(default=None, ge=-NEED_MAX, le=NEED_MAX)
    hunger: Optional[float] = Field(default=None, ge=-NEED_MAX, le=NEED_MAX)
    hygiene: Optional[float] = Field(default=None, ge=-NEED_MAX, le=NEED_MAX)
    happiness: Optional[float] = Field(default=None, ge=-NEED_MAX, le=NEED_MAX)
    sleepiness: Optional[float] = Field(default=None, ge=-NEED_MAX, le=NEED_MAX)
    # Correction added on top of the derived health value
    health: Optional[float] = Field(default=None, ge=-NEED_MAX, le=NEED_MAX)

    def deltas(self) -> Dict[str, float]:
        return self.model_dump(exclude_none=True)


class ActiveAction(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    activity_id: str
    minutes_remaining: float = Field(ge=0, allow_inf_nan=False)


class SimulationState(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    clock_minutes: float = Field(default=START_CLOCK_MINUTES, ge=0, lt=MINUTES_PER_DAY, allow_inf_nan=False)
    day: int = Field(default=START_DAY, ge=1)
    needs: Needs = Field(default_factory=Needs)
    current_room: Room = START_ROOM
    # None means the character is idle
    active_action: Optional[ActiveAction] = None
    speed_multiplier: float = Field(default=START_SPEED, gt=0, allow_inf_nan=False)
    paused: bool = False

    @property
    def is_busy(self) -> bool:
        return self.active_action is not None


class SaveSnapshot(BaseModel):
    """What goes into the save slot: the whole state plus when it was written."""
    model_config = ConfigDict(extra="forbid")

    format_version: int
    state: SimulationState
    last_save_time: datetime.datetime

    @field_validator("format_version")
    @classmethod
    def _known_version(cls, value: int) -> int:
        if value != SAVE_FORMAT_VERSION:
            raise ValueError(f"unsupported save format version {value}")
        return value
