from __future__ import annotations

import logging
import random
import time
from typing import Callable

from word_review.lessons.model import GROUP_SIZE, Lesson, group_count, group_words
from word_review.matching import engine
from word_review.matching.engine import GroupState
from word_review.storage.progress import ProgressStore

logger = logging.getLogger(__name__)

DEFAULT_RESET_DELAY_SEC = 0.5

ACTION_SHOW_ANSWER = "show_answer"
ACTION_NEXT_GROUP = "next_group"
ACTION_BACK_TO_REVIEW = "back_to_review"


class SessionFinishedError(ValueError):
    pass


class MatchSession:
    """Plays a lesson's groups in order and records completion at the end."""

    def __init__(
        self,
        lesson: Lesson,
        progress_store: ProgressStore,
        *,
        group_size: int = GROUP_SIZE,
        reset_delay: float = DEFAULT_RESET_DELAY_SEC,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_complete: Callable[[int], None] | None = None,
    ) -> None:
        if not lesson.words:
            raise ValueError(f"lesson {lesson.id} has no words")
        self.lesson = lesson
        self.progress_store = progress_store
        self.group_size = group_size
        self.reset_delay = reset_delay
        self.rng = rng or random.Random()
        self.clock = clock
        self.on_complete = on_complete
        self.group_count = group_count(lesson.words, group_size)
        self.group_index = 0
        self.finished = False
        self.state = self._build_group()

    @property
    def is_last_group(self) -> bool:
        return self.group_index >= self.group_count - 1

    @property
    def next_action(self) -> str:
        if self.state.all_matched or self.state.revealed:
            return ACTION_BACK_TO_REVIEW if self.is_last_group else ACTION_NEXT_GROUP
        return ACTION_SHOW_ANSWER

    def tick(self) -> GroupState:
        self.state = engine.apply_due_reset(self.state, self.clock())
        return self.state

    def click_prompt(self, index: int) -> GroupState:
        self._ensure_active()
        self.tick()
        self.state = engine.click_prompt(self.state, index)
        return self.state

    def click_answer(self, index: int) -> GroupState:
        self._ensure_active()
        self.tick()
        self.state = engine.click_answer(
            self.state,
            index,
            now=self.clock(),
            reset_delay=self.reset_delay,
        )
        return self.state

    def show_answer(self) -> GroupState:
        self._ensure_active()
        self.tick()
        if self.state.all_matched or self.state.revealed:
            self.advance()
        else:
            self.state = engine.reveal(self.state)
        return self.state

    def advance(self) -> GroupState:
        self._ensure_active()
        if not self.is_last_group:
            # The old group's state, pending mismatch reset included, is dropped here.
            self.group_index += 1
            self.state = self._build_group()
            return self.state

        self.progress_store.upsert(self.lesson.id, True)
        self.finished = True
        logger.info("lesson %d completed", self.lesson.id)
        if self.on_complete is not None:
            self.on_complete(self.lesson.id)
        return self.state

    def snapshot(self) -> dict:
        return {
            "lesson_id": self.lesson.id,
            "group_index": self.group_index,
            "group_count": self.group_count,
            "progress": f"{self.group_index + 1}/{self.group_count}",
            "finished": self.finished,
            "next_action": self.next_action,
            "reset_delay_ms": int(self.reset_delay * 1000),
            "group": self.state.to_dict(),
        }

    def _build_group(self) -> GroupState:
        words = group_words(self.lesson.words, self.group_index, self.group_size)
        return engine.new_group(words, self.rng)

    def _ensure_active(self) -> None:
        if self.finished:
            raise SessionFinishedError(f"match session for lesson {self.lesson.id} already finished")
