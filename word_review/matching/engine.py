"""Matching-game state machine for a single group of words.

Every transition is a pure function from one frozen ``GroupState`` to the
next. The prompt column shows words, the answer column shows meanings; a
prompt and an answer pair up when they share ``Word.no``.

Matched items are not inert: clicking one cancels its connection.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Sequence

from word_review.lessons.model import Word, shuffle


class ItemState(str, Enum):
    UNSELECTED = "unselected"
    SELECTED = "selected"
    MATCHED = "matched"


@dataclass(frozen=True)
class MatchItem:
    word: Word
    display_index: int
    state: ItemState = ItemState.UNSELECTED

    @property
    def selected(self) -> bool:
        return self.state is ItemState.SELECTED

    @property
    def matched(self) -> bool:
        return self.state is ItemState.MATCHED

    def to_dict(self) -> dict:
        return {
            "index": self.display_index,
            "no": self.word.no,
            "word": self.word.word,
            "meaning": self.word.meaning,
            "state": self.state.value,
            "selected": self.selected,
            "matched": self.matched,
        }


@dataclass(frozen=True)
class Connection:
    prompt_index: int
    answer_index: int


@dataclass(frozen=True)
class GroupState:
    prompts: tuple[MatchItem, ...]
    answers: tuple[MatchItem, ...]
    selected_prompt: int | None = None
    selected_answer: int | None = None
    connections: tuple[Connection, ...] = ()
    revealed: bool = False
    # Monotonic deadline of the pending mismatch reset, if any.
    reset_due_at: float | None = None

    @property
    def all_matched(self) -> bool:
        return bool(self.prompts) and all(item.matched for item in self.prompts)

    @property
    def size(self) -> int:
        return len(self.prompts)

    def to_dict(self) -> dict:
        return {
            "prompts": [item.to_dict() for item in self.prompts],
            "answers": [item.to_dict() for item in self.answers],
            "selected_prompt": self.selected_prompt,
            "selected_answer": self.selected_answer,
            "connections": [
                {"prompt": conn.prompt_index, "answer": conn.answer_index}
                for conn in self.connections
            ],
            "revealed": self.revealed,
            "all_matched": self.all_matched,
            "reset_pending": self.reset_due_at is not None,
        }


def new_group(words: Sequence[Word], rng: random.Random | None = None) -> GroupState:
    rng = rng or random.Random()
    prompt_words = shuffle(words, rng)
    answer_words = shuffle(words, rng)
    return GroupState(
        prompts=tuple(MatchItem(word=w, display_index=i) for i, w in enumerate(prompt_words)),
        answers=tuple(MatchItem(word=w, display_index=i) for i, w in enumerate(answer_words)),
    )


def click_prompt(state: GroupState, index: int) -> GroupState:
    _check_index(state.prompts, index, "prompt")

    if state.prompts[index].matched:
        conn = next((c for c in state.connections if c.prompt_index == index), None)
        return _cancel(state, conn) if conn else state

    if state.selected_prompt == index:
        return replace(
            state,
            prompts=_set_state(state.prompts, index, ItemState.UNSELECTED),
            selected_prompt=None,
        )

    return replace(
        state,
        prompts=_select_only(state.prompts, index),
        answers=_select_only(state.answers, None),
        selected_prompt=index,
        selected_answer=None,
    )


def click_answer(state: GroupState, index: int, *, now: float, reset_delay: float) -> GroupState:
    _check_index(state.answers, index, "answer")

    if state.answers[index].matched:
        conn = next((c for c in state.connections if c.answer_index == index), None)
        return _cancel(state, conn) if conn else state

    if state.selected_answer == index:
        return replace(
            state,
            answers=_set_state(state.answers, index, ItemState.UNSELECTED),
            selected_answer=None,
        )

    if state.selected_prompt is None:
        return state

    prompt = state.prompts[state.selected_prompt]
    answer = state.answers[index]
    if prompt.word.no == answer.word.no:
        return replace(
            state,
            prompts=_set_state(state.prompts, state.selected_prompt, ItemState.MATCHED),
            answers=_set_state(_select_only(state.answers, None), index, ItemState.MATCHED),
            connections=state.connections + (Connection(state.selected_prompt, index),),
            selected_prompt=None,
            selected_answer=None,
        )

    # Wrong pair: highlight the answer until the reset deadline passes.
    return replace(
        state,
        answers=_select_only(state.answers, index),
        selected_answer=index,
        reset_due_at=now + reset_delay,
    )


def clear_selection(state: GroupState) -> GroupState:
    return replace(
        state,
        prompts=_select_only(state.prompts, None),
        answers=_select_only(state.answers, None),
        selected_prompt=None,
        selected_answer=None,
        reset_due_at=None,
    )


def apply_due_reset(state: GroupState, now: float) -> GroupState:
    if state.reset_due_at is None or now < state.reset_due_at:
        return state
    return clear_selection(state)


def reveal(state: GroupState) -> GroupState:
    """Connect every prompt to its answer; a no-op once revealed or complete."""
    if state.revealed or state.all_matched:
        return state

    connections: list[Connection] = []
    for prompt_idx, prompt in enumerate(state.prompts):
        answer_idx = next(
            (i for i, answer in enumerate(state.answers) if answer.word.no == prompt.word.no),
            None,
        )
        if answer_idx is not None:
            connections.append(Connection(prompt_idx, answer_idx))

    matched_prompts = {c.prompt_index for c in connections}
    matched_answers = {c.answer_index for c in connections}
    return replace(
        state,
        prompts=tuple(
            replace(item, state=ItemState.MATCHED if i in matched_prompts else ItemState.UNSELECTED)
            for i, item in enumerate(state.prompts)
        ),
        answers=tuple(
            replace(item, state=ItemState.MATCHED if i in matched_answers else ItemState.UNSELECTED)
            for i, item in enumerate(state.answers)
        ),
        connections=tuple(connections),
        selected_prompt=None,
        selected_answer=None,
        revealed=True,
        reset_due_at=None,
    )


def _cancel(state: GroupState, conn: Connection) -> GroupState:
    cleared = clear_selection(state)
    return replace(
        cleared,
        prompts=_set_state(cleared.prompts, conn.prompt_index, ItemState.UNSELECTED),
        answers=_set_state(cleared.answers, conn.answer_index, ItemState.UNSELECTED),
        connections=tuple(c for c in state.connections if c != conn),
    )


def _set_state(items: tuple[MatchItem, ...], index: int, new_state: ItemState) -> tuple[MatchItem, ...]:
    return tuple(replace(item, state=new_state) if i == index else item for i, item in enumerate(items))


def _select_only(items: tuple[MatchItem, ...], index: int | None) -> tuple[MatchItem, ...]:
    updated: list[MatchItem] = []
    for i, item in enumerate(items):
        if item.matched:
            updated.append(item)
        elif i == index:
            updated.append(replace(item, state=ItemState.SELECTED))
        elif item.selected:
            updated.append(replace(item, state=ItemState.UNSELECTED))
        else:
            updated.append(item)
    return tuple(updated)


def _check_index(items: tuple[MatchItem, ...], index: int, column: str) -> None:
    if not 0 <= index < len(items):
        raise ValueError(f"{column} index out of range: {index}")
