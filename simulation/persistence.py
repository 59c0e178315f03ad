import datetime
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Tuple

from pydantic import ValidationError

from config import SAVE_SLOT_KEY, SAVE_FORMAT_VERSION
from models.state import SaveSnapshot, SimulationState
from simulation.activities import UnknownActivity, get_activity


class SaveError(Exception):
    """Base class for save slot failures the caller is expected to recover from."""


class CorruptSave(SaveError):
    """The stored blob does not describe a valid SimulationState."""


class NoSaveFound(SaveError):
    """The save slot is empty."""


class MemoryStore:
    """Dict-backed key-value store. Useful for tests and for hosts that persist elsewhere."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """One JSON file per key inside `directory`. Writes go through a temp file and an atomic replace."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        # Raw bytes; decoding problems are reported by decode() as CorruptSave
        return path.read_bytes()

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def encode(state: SimulationState, saved_at: Optional[datetime.datetime] = None) -> str:
    """Serializes the whole state, stamped with the save time, into a self-describing JSON blob."""
    snapshot = SaveSnapshot(
        format_version=SAVE_FORMAT_VERSION,
        state=state,
        last_save_time=saved_at or datetime.datetime.now(datetime.timezone.utc),
    )
    return snapshot.model_dump_json(indent=2)


def decode(blob) -> SaveSnapshot:
    """Validates a blob and returns the snapshot. Any structural problem becomes CorruptSave."""
    if not isinstance(blob, (str, bytes, bytearray)):
        raise CorruptSave(f"expected a JSON document, got {type(blob).__name__}")
    try:
        snapshot = SaveSnapshot.model_validate_json(blob, strict=True)
    except (ValidationError, UnicodeDecodeError) as e:
        raise CorruptSave(str(e)) from e
    _check_active_action(snapshot.state)
    return snapshot


def _check_active_action(state: SimulationState) -> None:
    """A saved action must name a catalog activity with 0 < minutes_remaining <= its duration."""
    action = state.active_action
    if action is None:
        return
    try:
        activity = get_activity(action.activity_id)
    except UnknownActivity:
        raise CorruptSave(f"unknown activity {action.activity_id!r} in save") from None
    if not 0 < action.minutes_remaining <= activity.duration:
        raise CorruptSave(
            f"{action.activity_id} has {action.minutes_remaining} minutes left, "
            f"expected more than 0 and at most {activity.duration}"
        )


class SaveGateway:
    """Reads and writes the single save slot of a key-value store."""

    def __init__(self, store=None, key: str = SAVE_SLOT_KEY):
        self.store = store if store is not None else MemoryStore()
        self.key = key

    def has_save(self) -> bool:
        return self.store.get(self.key) is not None

    def save(self, state: SimulationState, saved_at: Optional[datetime.datetime] = None) -> str:
        blob = encode(state, saved_at)
        self.store.set(self.key, blob)
        return blob

    def load(self) -> Tuple[SimulationState, datetime.datetime]:
        blob = self.store.get(self.key)
        if blob is None:
            raise NoSaveFound(self.key)
        snapshot = decode(blob)
        return snapshot.state, snapshot.last_save_time

    def discard(self) -> None:
        self.store.delete(self.key)
