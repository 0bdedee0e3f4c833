from __future__ import annotations

from typing import Sequence

from word_review.lessons.model import Word


class ReviewCursor:
    """Flash-card position within a lesson, clamped to the word list."""

    def __init__(self, words: Sequence[Word], index: int = 0) -> None:
        self.words = list(words)
        self.index = 0
        self.go_to(index)

    @property
    def current(self) -> Word | None:
        if not self.words:
            return None
        return self.words[self.index]

    @property
    def has_previous(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return self.index < len(self.words) - 1

    @property
    def position(self) -> str:
        if not self.words:
            return "0/0"
        return f"{self.index + 1}/{len(self.words)}"

    def go_to(self, index: int) -> Word | None:
        self.index = min(max(0, index), max(0, len(self.words) - 1))
        return self.current

    def previous(self) -> Word | None:
        return self.go_to(self.index - 1)

    def next(self) -> Word | None:
        return self.go_to(self.index + 1)

    def to_dict(self) -> dict:
        current = self.current
        return {
            "index": self.index,
            "total": len(self.words),
            "position": self.position,
            "word": current.to_dict() if current else None,
            "has_previous": self.has_previous,
            "has_next": self.has_next,
        }
