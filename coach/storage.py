"""
Local persistence for Language Coach.

Each key is stored as its own JSON file inside a namespace directory:

    <data_dir>/ll.settings.json  -> Settings
    <data_dir>/ll.goal.json      -> goal text
    <data_dir>/ll.plan.json      -> StudyPlan
    <data_dir>/ll.audioSentences.json -> practice sentences

Reads fall back to a typed default and writes are best-effort: a failed
write is logged and the in-memory value is kept, so memory and disk may
disagree until the next successful write.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Generic, List, Optional, TypeVar

from .config import (
    AUDIO_SENTENCES_KEY, DEFAULT_GOAL, DEFAULT_SETTINGS, GOAL_KEY, PLAN_KEY, SETTINGS_KEY,
)
from .demo_plan import build_demo_plan
from .errors import StorageError
from .logger import logger
from .models import Exercise, PracticeSentence, Settings, StudyPlan
from .normalize import plan_from_dict

T = TypeVar("T")


class LocalStore:
    """JSON key/value store rooted at a namespace directory."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def _load(self, key: str) -> Any:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Read failed for {key}: {e}") from e

    def _dump(self, key: str, value: Any) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.data_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self._path(key))
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Write failed for {key}: {e}") from e

    def read(self, key: str, default: Any = None) -> Any:
        """Return the stored blob for key, or default when missing or unreadable."""
        if not self._path(key).exists():
            return default
        try:
            value = self._load(key)
            logger.store(f"Loaded {key}")
            return value
        except StorageError as e:
            logger.store_error(str(e))
            return default

    def write(self, key: str, value: Any) -> bool:
        """Persist value under key. Returns False (and logs) on failure."""
        try:
            self._dump(key, value)
            logger.store(f"Saved {key}")
            return True
        except StorageError as e:
            logger.store_error(str(e))
            return False

    def remove(self, key: str) -> bool:
        try:
            self._path(key).unlink()
            return True
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.store_error(f"Remove failed for {key}: {e}")
            return False


class StoredValue(Generic[T]):
    """
    A typed value backed by one store key.

    `set` updates memory first, then writes through. A write failure does
    not roll the in-memory value back.
    """

    def __init__(
        self,
        store: LocalStore,
        key: str,
        default: T,
        decode: Optional[Callable[[Any], T]] = None,
        encode: Optional[Callable[[T], Any]] = None,
    ):
        self.store = store
        self.key = key
        self._encode = encode or (lambda value: value)
        raw = store.read(key)
        if raw is None:
            self._value = default
        else:
            try:
                self._value = decode(raw) if decode else raw
            except Exception as e:
                logger.store_error(f"Could not decode {key}, using default: {e}")
                self._value = default
        self.last_write_ok = True

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> bool:
        self._value = value
        self.last_write_ok = self.store.write(self.key, self._encode(value))
        return self.last_write_ok


class AppState:
    """The persisted entries the UI reads and writes through."""

    def __init__(self, store: LocalStore):
        self.store = store
        self.settings = StoredValue(
            store, SETTINGS_KEY, DEFAULT_SETTINGS,
            decode=lambda raw: Settings.from_dict(raw, DEFAULT_SETTINGS),
            encode=lambda settings: settings.to_dict(),
        )
        self.goal = StoredValue(store, GOAL_KEY, DEFAULT_GOAL, decode=str)
        self.plan = StoredValue(
            store, PLAN_KEY, build_demo_plan(),
            decode=lambda raw: plan_from_dict(raw, build_demo_plan()),
            encode=lambda plan: plan.to_dict(),
        )
        self.audio_sentences = StoredValue(
            store, AUDIO_SENTENCES_KEY, [],
            decode=lambda raw: [PracticeSentence.from_dict(item) for item in raw if isinstance(item, dict)],
            encode=lambda items: [item.to_dict() for item in items],
        )

    def reset_to_defaults(self) -> None:
        """Restore default settings, goal and the demo plan."""
        self.settings.set(DEFAULT_SETTINGS)
        self.goal.set(DEFAULT_GOAL)
        self.plan.set(build_demo_plan())
        logger.store("Reset to demo data")

    def append_exercises(self, expected_plan: StudyPlan, lesson_index: int, exercises: List[Exercise]) -> bool:
        """
        Append exercises to a lesson of the current plan and persist it.

        Returns False and changes nothing when the plan was replaced since
        `expected_plan` was read.
        """
        if expected_plan is not self.plan.value or not 0 <= lesson_index < len(expected_plan.lessons):
            logger.warning("Plan changed while exercises were generating, dropping them")
            return False
        expected_plan.lessons[lesson_index].exercises.extend(exercises)
        self.plan.set(expected_plan)
        return True
