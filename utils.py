import json
from config import SIMULATION_START_DATE, ECHO_EVENTS
import datetime

def format_clock(clock_minutes: float) -> str:
    """Minutes since midnight as HH:MM."""
    hours, mins = divmod(int(clock_minutes), 60)
    return f"{hours:02d}:{mins:02d}"

def get_simulation_timestamp(day: int, clock_minutes: float) -> str:
    """Converts an in-game day and clock to a formatted date string."""
    delta = datetime.timedelta(days=day - 1, minutes=clock_minutes)
    timestamp = SIMULATION_START_DATE + delta
    return timestamp.strftime("%m/%d/%y, %I:%M %p")

def log_event(event_log, state, event_type: str, source: str, payload: dict) -> dict:
    """Creates a structured log entry and appends it to the event log."""
    log_entry = {
        "day": state.day,
        "clock": format_clock(state.clock_minutes),
        "timestamp": get_simulation_timestamp(state.day, state.clock_minutes),
        "type": event_type,
        "source": source,
        "payload": payload
    }
    event_log.append(log_entry)
    if ECHO_EVENTS:
        # Print in real-time for observation
        print(f"Day {log_entry['day']} {log_entry['clock']} | {source}: {event_type} {json.dumps(payload)}")
    return log_entry

def summarize_needs(needs) -> dict:
    """Rounded copy of the needs for log payloads."""
    return {name: round(value, 1) for name, value in needs.model_dump().items()}
