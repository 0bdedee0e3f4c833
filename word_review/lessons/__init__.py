from word_review.lessons.loader import WordCatalog, load_words
from word_review.lessons.model import (
    GROUP_SIZE,
    LESSON_SIZE,
    Lesson,
    Word,
    find_lesson,
    group_count,
    group_words,
    partition_into_lessons,
    shuffle,
)
from word_review.lessons.review import ReviewCursor

__all__ = [
    "GROUP_SIZE",
    "LESSON_SIZE",
    "Lesson",
    "ReviewCursor",
    "Word",
    "WordCatalog",
    "find_lesson",
    "group_count",
    "group_words",
    "load_words",
    "partition_into_lessons",
    "shuffle",
]
