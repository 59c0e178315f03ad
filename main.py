import simpy
import simpy.rt
import os
import json
from dotenv import load_dotenv
import datetime

from simulation.controller import SimulationController
from simulation.persistence import SaveGateway, JsonFileStore, SaveError
from simulation.processes import (
    tick_process, intent_process, autosave_process, scripted_player_process
)
from config import (
    RUN_TICKS, REALTIME, TICK_INTERVAL_SECONDS, AUTOSAVE_EVERY_TICKS, SAVE_DIR
)
from utils import log_event, summarize_needs, format_clock

# A short scripted morning, standing in for a player clicking around.
# (tick, intent type, payload)
DEMO_SCRIPT = [
    (1, "START_ACTIVITY", {"activity_id": "eat"}),
    (2, "CHANGE_ROOM", {"room": "gym"}),           # rejected, still eating
    (4, "START_ACTIVITY", {"activity_id": "shower"}),  # rejected, hygiene is still high
    (4, "START_ACTIVITY", {"activity_id": "exercise"}),
    (10, "CHANGE_ROOM", {"room": "living"}),
    (10, "START_ACTIVITY", {"activity_id": "tv"}),
    (20, "SET_SPEED", {"multiplier": 2}),
    (30, "START_ACTIVITY", {"activity_id": "computer"}),
    (40, "SET_SPEED", {"multiplier": 1}),
    (60, "START_ACTIVITY", {"activity_id": "sleep"}),
]

def load_settings():
    load_dotenv()
    return {
        "save_dir": os.getenv("DREAM_STORY_SAVE_DIR", SAVE_DIR),
        "realtime": os.getenv("DREAM_STORY_REALTIME", str(REALTIME)).lower() in ("1", "true", "yes"),
        "ticks": int(os.getenv("DREAM_STORY_TICKS", RUN_TICKS)),
    }

def build_environment(realtime: bool):
    if realtime:
        print(f"--- Realtime mode: one tick every {TICK_INTERVAL_SECONDS}s ---")
        return simpy.rt.RealtimeEnvironment(factor=TICK_INTERVAL_SECONDS, strict=False)
    print("--- Running as fast as possible ---")
    return simpy.Environment()

def main():
    settings = load_settings()
    gateway = SaveGateway(JsonFileStore(settings["save_dir"]))
    controller = SimulationController(gateway=gateway)

    if gateway.has_save():
        try:
            controller.load()
            print(f"--- Resumed save from {controller.last_save_time} ---")
        except SaveError as e:
            print(f"!! Could not load the saved game ({type(e).__name__}); starting a new one.")
    else:
        print("--- No save found, starting a new game ---")

    env = build_environment(settings["realtime"])
    intents = simpy.Store(env)

    # Environment time is measured in ticks
    env.process(tick_process(env, controller, interval=1))
    env.process(intent_process(env, controller, intents))
    env.process(autosave_process(env, controller, every=AUTOSAVE_EVERY_TICKS))
    env.process(scripted_player_process(env, intents, DEMO_SCRIPT))

    log_event(controller.event_log, controller.state, "SIM_START", "HOST",
              {"message": "Simulation starting.", "needs": summarize_needs(controller.state.needs)})
    print("\n--- Running Simulation ---")
    # Half a tick of slack so the last scheduled tick is processed
    env.run(until=settings["ticks"] + 0.5)
    print("\n--- Simulation Complete ---")
    controller.save()
    state = controller.state
    log_event(controller.event_log, state, "SIM_END", "HOST", {
        "message": f"Stopped on day {state.day} at {format_clock(state.clock_minutes)} after {controller.ticks} ticks.",
        "needs": summarize_needs(state.needs),
    })

    timestamp_str = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = f"simulation_log_{timestamp_str}.json"
    with open(log_filename, 'w') as f:
        json.dump(list(controller.event_log), f, indent=2)
    print(f"\nEvent log saved to {log_filename}")


if __name__ == "__main__":
    main()
