import datetime

# --- Starting State ---
# A fresh game starts at 07:00 on day 1 in the bedroom.
START_CLOCK_MINUTES = 420
START_DAY = 1
START_ROOM = "bedroom"
START_SPEED = 1.0

START_NEEDS = {
    "energy": 80.0,
    "hunger": 30.0,
    "hygiene": 90.0,
    "happiness": 70.0,
    "sleepiness": 20.0,
    "health": 85.0,
}

ROOMS = ["bedroom", "living", "kitchen", "gym", "bathroom"]

# --- Clock ---
# One real tick advances the in-game clock by this many minutes (times the speed multiplier).
MINUTES_PER_TICK = 15
MINUTES_PER_DAY = 1440

# Night window used by the sleep eligibility rule: [22:00, 24:00) and [00:00, 06:00).
NIGHT_START_MINUTES = 1320
NIGHT_END_MINUTES = 360

# Period boundaries (minutes since midnight), night is everything else.
MORNING_START_MINUTES = 360
AFTERNOON_START_MINUTES = 720
EVENING_START_MINUTES = 1080

# --- Needs ---
NEED_MIN = 0.0
NEED_MAX = 100.0

# Passive change per tick. Positive hunger/sleepiness means worse.
DECAY_PER_TICK = {
    "energy": -0.5,
    "hunger": 0.8,
    "hygiene": -0.3,
    "sleepiness": 0.6,
}

# --- Persistence ---
SAVE_SLOT_KEY = "dream-story-save"
SAVE_FORMAT_VERSION = 1

# --- Event Log ---
# Echo every logged event to stdout as it happens.
ECHO_EVENTS = True
# Entries kept in memory by the controller; older ones are dropped.
EVENT_LOG_LIMIT = 5000
# Calendar date of day 1, only used to render readable log timestamps.
SIMULATION_START_DATE = datetime.datetime(2025, 1, 1)

# --- Host Runner ---
# Real seconds between ticks when running on a realtime environment (1s by default).
TICK_INTERVAL_SECONDS = 1.0
REALTIME = False
RUN_TICKS = 96  # one in-game day at speed 1
AUTOSAVE_EVERY_TICKS = 24
SAVE_DIR = "saves"
