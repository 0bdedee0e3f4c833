from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass

from word_review.config import PROGRESS_KEY
from word_review.storage.db import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class Progress:
    lesson_id: int
    completed: bool

    def to_dict(self) -> dict:
        return {"lessonId": self.lesson_id, "completed": self.completed}


class ProgressStore:
    """Lesson completion flags kept as one JSON array under a single key.

    Persistence is best effort: read failures look like "no progress" and
    write failures are logged and dropped.
    """

    def __init__(self, backend: KeyValueStore, key: str = PROGRESS_KEY) -> None:
        self.backend = backend
        self.key = key

    def read_all(self) -> list[Progress]:
        try:
            raw = self.backend.get(self.key)
        except (sqlite3.Error, OSError) as exc:
            logger.error("failed to read progress: %s", exc)
            return []
        if raw is None:
            return []
        try:
            return _progress_from_json(raw)
        except (json.JSONDecodeError, TypeError, ValueError, KeyError) as exc:
            logger.warning("discarding corrupt progress data: %s", exc)
            return []

    def write_all(self, progress: list[Progress]) -> None:
        payload = json.dumps([item.to_dict() for item in progress], ensure_ascii=False)
        try:
            self.backend.set(self.key, payload)
        except (sqlite3.Error, OSError) as exc:
            logger.error("failed to save progress: %s", exc)

    def upsert(self, lesson_id: int, completed: bool) -> None:
        # Read-modify-write without a transaction; concurrent writers race and the last one wins.
        progress = self.read_all()
        existing = next((item for item in progress if item.lesson_id == lesson_id), None)
        if existing is not None:
            existing.completed = completed
        else:
            progress.append(Progress(lesson_id=lesson_id, completed=completed))
        self.write_all(progress)

    def is_completed(self, lesson_id: int) -> bool:
        return any(item.lesson_id == lesson_id and item.completed for item in self.read_all())

    def completed_ids(self) -> set[int]:
        return {item.lesson_id for item in self.read_all() if item.completed}


def _progress_from_json(raw: str) -> list[Progress]:
    data = json.loads(raw)
    if not isinstance(data, list):
        raise TypeError("progress payload is not a list")
    items: list[Progress] = []
    for entry in data:
        if not isinstance(entry, dict):
            raise TypeError(f"progress entry is not an object: {entry!r}")
        lesson_id = entry["lessonId"]
        completed = entry["completed"]
        if isinstance(lesson_id, bool) or not isinstance(lesson_id, int):
            raise ValueError(f"invalid lessonId: {lesson_id!r}")
        if not isinstance(completed, bool):
            raise ValueError(f"invalid completed flag: {completed!r}")
        items.append(Progress(lesson_id=lesson_id, completed=completed))
    return items
