from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = PROJECT_ROOT / "data"
TEMPLATES_DIR = PROJECT_ROOT / "templates"
STATIC_DIR = PROJECT_ROOT / "static"
DB_PATH = Path(os.getenv("WORD_REVIEW_DB_PATH", str(DATA_DIR / "word_review.db")))
WORDS_SOURCE = os.getenv("WORD_REVIEW_WORDS", str(DATA_DIR / "word.json"))

logger = logging.getLogger(__name__)

PROGRESS_KEY = "word-review-progress"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class GameSettings:
    lesson_size: int = 20
    group_size: int = 5
    mismatch_reset_ms: int = 500
    curve_threshold_px: int = 50

    @property
    def mismatch_reset_sec(self) -> float:
        return self.mismatch_reset_ms / 1000


def load_game_settings() -> GameSettings:
    defaults = GameSettings()
    return GameSettings(
        lesson_size=max(1, _int_env("WORD_REVIEW_LESSON_SIZE", defaults.lesson_size)),
        group_size=max(1, _int_env("WORD_REVIEW_GROUP_SIZE", defaults.group_size)),
        mismatch_reset_ms=max(0, _int_env("WORD_REVIEW_MISMATCH_RESET_MS", defaults.mismatch_reset_ms)),
        curve_threshold_px=max(0, _int_env("WORD_REVIEW_CURVE_THRESHOLD_PX", defaults.curve_threshold_px)),
    )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("ignoring non-integer %s=%r", name, raw)
        return default


def configure_logging(level: str | None = None) -> None:
    name = (level or os.getenv("WORD_REVIEW_LOG_LEVEL", "INFO")).strip().upper()
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=LOG_FORMAT)


def ensure_dirs() -> None:
    for path in [DATA_DIR, DB_PATH.parent]:
        path.mkdir(parents=True, exist_ok=True)
