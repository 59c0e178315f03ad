from simulation.persistence import SaveError
from utils import log_event

def submit_intent(queue, intent_type: str, **payload):
    """Queues a player intent for the intent process. Returns the simpy put event."""
    return queue.put({"type": intent_type, "payload": payload})

# Payload field each parameterised intent must carry
REQUIRED_FIELDS = {
    "START_ACTIVITY": "activity_id",
    "CHANGE_ROOM": "room",
    "SET_PAUSED": "paused",
    "SET_SPEED": "multiplier",
}

def _reject(controller, intent_type, reason: str) -> bool:
    log_event(controller.event_log, controller.state, "INTENT_REJECTED", "HOST",
              {"intent": intent_type, "reason": reason})
    return False

def apply_intent(controller, intent) -> bool:
    """
    Dispatches one queued intent to the controller. Malformed or unknown intents
    are rejected and logged; nothing here raises, so the intent process keeps running.
    """
    if not isinstance(intent, dict):
        return _reject(controller, None, f"not an intent: {intent!r}")
    intent_type = intent.get("type")
    if not isinstance(intent_type, str):
        return _reject(controller, None, f"intent type must be a string, got {intent_type!r}")
    payload = intent.get("payload") or {}
    if not isinstance(payload, dict):
        return _reject(controller, intent_type, "payload must be a mapping")

    field = REQUIRED_FIELDS.get(intent_type)
    if field is not None and field not in payload:
        return _reject(controller, intent_type, f"missing {field!r}")

    if intent_type == "START_ACTIVITY":
        return controller.start_activity(payload["activity_id"])
    elif intent_type == "CHANGE_ROOM":
        return controller.change_room(payload["room"])
    elif intent_type == "SET_PAUSED":
        return controller.set_paused(payload["paused"])
    elif intent_type == "SET_SPEED":
        return controller.set_speed(payload["multiplier"])
    elif intent_type == "RESET":
        controller.reset()
        return True
    elif intent_type == "SAVE":
        controller.save()
        return True
    elif intent_type == "LOAD":
        try:
            controller.load()
        except SaveError:
            # The controller keeps its state and has already logged LOAD_FAILED
            return False
        return True

    return _reject(controller, intent_type, "unknown intent")

def tick_process(env, controller, interval: float = 1.0):
    """The external scheduler: one controller tick per `interval` of environment time."""
    while True:
        yield env.timeout(interval)
        controller.tick()

def intent_process(env, controller, queue):
    """
    Single owner of the intent queue. Intents are applied one at a time and
    never in the middle of a tick, so reset and load always swap the state whole.
    """
    while True:
        intent = yield queue.get()
        apply_intent(controller, intent)

def autosave_process(env, controller, every: float):
    """Saves the game every `every` units of environment time, skipping while paused."""
    while True:
        yield env.timeout(every)
        if not controller.state.paused:
            controller.save()

def scripted_player_process(env, queue, script):
    """
    Stands in for the presentation layer: submits (at_time, intent_type, payload)
    entries from `script` at their scheduled environment times.
    """
    for at_time, intent_type, payload in sorted(script, key=lambda entry: entry[0]):
        if at_time > env.now:
            yield env.timeout(at_time - env.now)
        yield submit_intent(queue, intent_type, **payload)
