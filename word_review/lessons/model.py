from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Sequence, TypeVar

LESSON_SIZE = 20
GROUP_SIZE = 5

T = TypeVar("T")


@dataclass(frozen=True)
class Word:
    no: int
    word: str
    meaning: str

    def to_dict(self) -> dict:
        return {"no": self.no, "word": self.word, "meaning": self.meaning}


@dataclass(frozen=True)
class Lesson:
    id: int
    words: tuple[Word, ...]

    @property
    def word_count(self) -> int:
        return len(self.words)


def partition_into_lessons(words: Sequence[Word], size: int = LESSON_SIZE) -> list[Lesson]:
    lessons: list[Lesson] = []
    if size <= 0:
        return lessons
    for start in range(0, len(words), size):
        chunk = tuple(words[start : start + size])
        if chunk:
            lessons.append(Lesson(id=start // size + 1, words=chunk))
    return lessons


def find_lesson(lessons: Sequence[Lesson], lesson_id: int) -> Lesson | None:
    return next((lesson for lesson in lessons if lesson.id == lesson_id), None)


def group_count(words: Sequence[Word], size: int = GROUP_SIZE) -> int:
    return math.ceil(len(words) / size)


def group_words(words: Sequence[Word], group_index: int, size: int = GROUP_SIZE) -> list[Word]:
    start = group_index * size
    return list(words[start : start + size])


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Fisher-Yates over a copy; the input sequence is left untouched."""
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
