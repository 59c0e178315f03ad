import datetime
import json
import random

import pytest

from models.state import ActiveAction, Needs, SimulationState
from simulation.activities import CATALOG
from simulation.persistence import (
    CorruptSave, JsonFileStore, MemoryStore, NoSaveFound, SaveError, SaveGateway, decode, encode
)

SAVED_AT = datetime.datetime(2025, 3, 1, 12, 30, tzinfo=datetime.timezone.utc)


def random_state(rng):
    action = None
    if rng.random() < 0.5:
        activity = rng.choice(CATALOG)
        action = ActiveAction(activity_id=activity.id, minutes_remaining=rng.uniform(0.5, activity.duration))
    return SimulationState(
        clock_minutes=rng.uniform(0, 1439.99),
        day=rng.randint(1, 10_000),
        needs=Needs(**{name: rng.uniform(0, 100) for name in Needs.model_fields}),
        current_room=rng.choice(["bedroom", "living", "kitchen", "gym", "bathroom"]),
        active_action=action,
        speed_multiplier=rng.choice([0.5, 1, 2, 4, rng.uniform(0.1, 10)]),
        paused=rng.random() < 0.5,
    )


def mutated_blob(**changes):
    """A valid save blob with some state fields replaced."""
    data = json.loads(encode(SimulationState(), SAVED_AT))
    for key, value in changes.items():
        if key in ("format_version", "last_save_time"):
            data[key] = value
        elif key in Needs.model_fields:
            data["state"]["needs"][key] = value
        else:
            data["state"][key] = value
    return json.dumps(data)


def test_round_trip_of_default_state():
    state = SimulationState()
    assert decode(encode(state)).state == state


def test_round_trip_mid_action():
    state = SimulationState(
        clock_minutes=1327.5, day=12, current_room="living", speed_multiplier=2.5, paused=True,
        active_action=ActiveAction(activity_id="tv", minutes_remaining=52.5),
        needs=Needs(energy=12.345, hunger=99.9, hygiene=0, happiness=100, sleepiness=33.3, health=41.1),
    )
    assert decode(encode(state)).state == state


def test_round_trip_of_random_states():
    rng = random.Random(99)
    for _ in range(200):
        state = random_state(rng)
        assert decode(encode(state)).state == state


def test_blob_is_self_describing_and_stamped():
    data = json.loads(encode(SimulationState(), SAVED_AT))
    assert data["format_version"] == 1
    assert data["state"]["current_room"] == "bedroom"
    assert decode(json.dumps(data)).last_save_time == SAVED_AT


@pytest.mark.parametrize("blob", [
    "not json at all",
    "",
    "{}",
    "[]",
    '{"format_version": 1}',
    mutated_blob(hunger=150),
    mutated_blob(energy=-1),
    mutated_blob(clock_minutes=1440),
    mutated_blob(day=0),
    mutated_blob(current_room="attic"),
    mutated_blob(speed_multiplier=0),
    mutated_blob(paused="yes"),
    mutated_blob(day="3"),
    mutated_blob(active_action={"activity_id": "eat"}),
    mutated_blob(format_version=99),
    mutated_blob(last_save_time="yesterday"),
    mutated_blob(cheat_mode=True),
    mutated_blob(active_action={"activity_id": "eat", "minutes_remaining": float("inf")}),
    mutated_blob(active_action={"activity_id": "eat", "minutes_remaining": 12345.0}).replace("12345.0", "1e400"),
    mutated_blob(active_action={"activity_id": "eat", "minutes_remaining": float("nan")}),
    mutated_blob(active_action={"activity_id": "juggle", "minutes_remaining": 0.0}),
    mutated_blob(active_action={"activity_id": "juggle", "minutes_remaining": 10.0}),
    mutated_blob(active_action={"activity_id": "eat", "minutes_remaining": 1e300}),
    mutated_blob(active_action={"activity_id": "eat", "minutes_remaining": 0.0}),
    mutated_blob(active_action={"activity_id": "eat", "minutes_remaining": 30.5}),
    mutated_blob(clock_minutes=float("nan")),
    mutated_blob(speed_multiplier=float("inf")),
    b'{"format_version": 1, \xff\xfe}',
])
def test_malformed_blobs_are_corrupt_saves(blob):
    with pytest.raises(CorruptSave):
        decode(blob)


def test_non_text_blob_is_a_corrupt_save():
    with pytest.raises(CorruptSave):
        decode(None)
    with pytest.raises(CorruptSave):
        decode({"state": {}})


def test_gateway_save_load_and_discard():
    gateway = SaveGateway(MemoryStore())
    assert not gateway.has_save()
    state = SimulationState(day=4)
    gateway.save(state, SAVED_AT)
    assert gateway.has_save()
    loaded, saved_at = gateway.load()
    assert loaded == state
    assert loaded is not state
    assert saved_at == SAVED_AT
    gateway.discard()
    assert not gateway.has_save()


def test_loading_an_empty_slot_raises_no_save_found():
    with pytest.raises(NoSaveFound):
        SaveGateway(MemoryStore()).load()
    assert issubclass(NoSaveFound, SaveError)
    assert issubclass(CorruptSave, SaveError)


def test_gateway_uses_the_fixed_slot_key():
    store = MemoryStore()
    SaveGateway(store).save(SimulationState())
    assert store.get("dream-story-save") is not None


def test_json_file_store(tmp_path):
    store = JsonFileStore(tmp_path / "saves")
    assert store.get("slot") is None
    store.set("slot", '{"a": 1}')
    store.set("slot", '{"a": 2}')
    assert store.get("slot") == b'{"a": 2}'
    assert [p.name for p in (tmp_path / "saves").iterdir()] == ["slot.json"]
    store.delete("slot")
    store.delete("slot")
    assert store.get("slot") is None


def test_gateway_on_json_file_store_round_trips(tmp_path):
    gateway = SaveGateway(JsonFileStore(tmp_path))
    state = SimulationState(active_action=ActiveAction(activity_id="sleep", minutes_remaining=465))
    gateway.save(state)
    assert gateway.load()[0] == state


def test_saved_action_may_have_its_full_duration_left():
    blob = mutated_blob(active_action={"activity_id": "sleep", "minutes_remaining": 480.0})
    assert decode(blob).state.active_action == ActiveAction(activity_id="sleep", minutes_remaining=480)


def test_undecodable_save_file_is_a_corrupt_save(tmp_path):
    (tmp_path / "dream-story-save.json").write_bytes(b'{"format_version": 1, \xff\xfe}')
    gateway = SaveGateway(JsonFileStore(tmp_path))
    assert gateway.has_save()
    with pytest.raises(CorruptSave):
        gateway.load()
