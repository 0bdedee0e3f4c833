from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx

from word_review.lessons.model import LESSON_SIZE, Lesson, Word, find_lesson, partition_into_lessons

logger = logging.getLogger(__name__)

FETCH_TIMEOUT_SEC = 15


def load_words(source: str | Path) -> list[Word]:
    """Read the word list from a JSON file or an http(s) URL.

    Any failure is logged and yields an empty list so callers can render an
    empty state instead of erroring.
    """
    try:
        payload = _read_payload(str(source))
    except (OSError, httpx.HTTPError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("failed to load words from %s: %s", source, exc)
        return []

    if not isinstance(payload, list):
        logger.error("word source %s is not a JSON array", source)
        return []
    return parse_words(payload)


def parse_words(records: list) -> list[Word]:
    words: list[Word] = []
    for position, record in enumerate(records):
        word = _word_from_record(record)
        if word is None:
            logger.warning("skipping malformed word record #%d: %r", position, record)
            continue
        words.append(word)
    return words


def _read_payload(source: str):
    if source.startswith(("http://", "https://")):
        with httpx.Client(timeout=FETCH_TIMEOUT_SEC) as client:
            resp = client.get(source)
            resp.raise_for_status()
            return resp.json()
    return json.loads(Path(source).read_text(encoding="utf-8"))


def _word_from_record(record: object) -> Word | None:
    if not isinstance(record, dict):
        return None
    if any(key not in record for key in ("no", "word", "meaning")):
        return None
    no = _parse_no(record["no"])
    word, meaning = record["word"], record["meaning"]
    if no is None or not isinstance(word, str) or not isinstance(meaning, str):
        return None
    return Word(no=no, word=word, meaning=meaning)


def _parse_no(raw: object) -> int | None:
    # Fractional or boolean keys would collide with real ones after int().
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


class WordCatalog:
    """Word list loaded once; lessons are derived from it on every access."""

    def __init__(self, source: str | Path, lesson_size: int = LESSON_SIZE) -> None:
        self.source = source
        self.lesson_size = lesson_size
        self.words: list[Word] = []

    def load(self) -> list[Word]:
        self.words = load_words(self.source)
        logger.info("loaded %d words from %s", len(self.words), self.source)
        return self.words

    def lessons(self) -> list[Lesson]:
        return partition_into_lessons(self.words, self.lesson_size)

    def get_lesson(self, lesson_id: int) -> Lesson | None:
        return find_lesson(self.lessons(), lesson_id)
