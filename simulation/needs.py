from config import DECAY_PER_TICK, NEED_MIN, NEED_MAX

# Health is derived from these five; hunger and sleepiness count against it.
HEALTH_INPUTS = ("energy", "hunger", "hygiene", "happiness", "sleepiness")


def clamp(value: float) -> float:
    return max(NEED_MIN, min(NEED_MAX, value))


def derived_health(needs) -> float:
    """Mean of the five inputs, each turned into a higher-is-better score."""
    goodness = (
        (NEED_MAX - needs.hunger)
        + needs.energy
        + needs.hygiene
        + needs.happiness
        + (NEED_MAX - needs.sleepiness)
    )
    return clamp(goodness / len(HEALTH_INPUTS))


def recompute_health(needs, correction: float = 0.0) -> float:
    needs.health = clamp(derived_health(needs) + correction)
    return needs.health


def decay_tick(needs, ticks: int = 1):
    """
    Applies the passive per-tick drift `ticks` times, then refreshes health.
    Happiness has no passive drift. With ticks=0 nothing is touched.
    """
    if ticks <= 0:
        return needs
    for name, delta in DECAY_PER_TICK.items():
        setattr(needs, name, clamp(getattr(needs, name) + delta * ticks))
    recompute_health(needs)
    return needs


def apply_effects(needs, effects):
    """Adds an activity's deltas to the matching needs, then refreshes health plus any health correction."""
    deltas = effects.deltas()
    correction = deltas.pop("health", 0.0)
    for name, delta in deltas.items():
        setattr(needs, name, clamp(getattr(needs, name) + delta))
    recompute_health(needs, correction)
    return needs
