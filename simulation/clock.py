from config import (
    MINUTES_PER_TICK, MINUTES_PER_DAY, NIGHT_START_MINUTES, NIGHT_END_MINUTES,
    MORNING_START_MINUTES, AFTERNOON_START_MINUTES, EVENING_START_MINUTES
)


def minutes_per_tick(speed_multiplier: float, real_ticks: int = 1) -> float:
    """Game-minutes covered by `real_ticks` scheduler ticks at the given speed."""
    return MINUTES_PER_TICK * speed_multiplier * real_ticks


def advance_minutes(state, minutes: float) -> int:
    """
    Moves the clock forward by `minutes` and rolls the day over.
    Any size of jump is handled in one step. Returns how many midnights were crossed.
    """
    total = state.clock_minutes + minutes
    days_passed = int(total // MINUTES_PER_DAY)
    state.day = state.day + days_passed
    state.clock_minutes = total % MINUTES_PER_DAY
    return days_passed


def advance(state, real_ticks: int = 1) -> int:
    """Advances the clock by `real_ticks` scheduler ticks at the state's speed multiplier."""
    return advance_minutes(state, minutes_per_tick(state.speed_multiplier, real_ticks))


def is_night(clock_minutes: float) -> bool:
    return clock_minutes >= NIGHT_START_MINUTES or clock_minutes < NIGHT_END_MINUTES


def period_of_day(clock_minutes: float) -> str:
    if MORNING_START_MINUTES <= clock_minutes < AFTERNOON_START_MINUTES:
        return "morning"
    if AFTERNOON_START_MINUTES <= clock_minutes < EVENING_START_MINUTES:
        return "afternoon"
    if EVENING_START_MINUTES <= clock_minutes < NIGHT_START_MINUTES:
        return "evening"
    return "night"
