from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import word_review.app as app_module
from word_review.lessons.loader import WordCatalog
from word_review.lessons.model import Word
from word_review.matching.registry import MatchSessionRegistry
from word_review.storage.db import MemoryKeyValueStore, SqliteKeyValueStore
from word_review.storage.progress import ProgressStore


def make_words(count: int, start: int = 1) -> list[Word]:
    return [Word(no=n, word=f"word{n}", meaning=f"meaning{n}") for n in range(start, start + count)]


@pytest.fixture()
def memory_store():
    return ProgressStore(MemoryKeyValueStore())


@pytest.fixture()
def sqlite_backend(tmp_path):
    backend = SqliteKeyValueStore(tmp_path / "word_review_test.db")
    backend.initialize()
    return backend


@pytest.fixture()
def words_file(tmp_path):
    path = tmp_path / "word.json"
    path.write_text(
        json.dumps([word.to_dict() for word in make_words(23)], ensure_ascii=False),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def catalog(words_file):
    return WordCatalog(words_file)


@pytest.fixture()
def client(catalog, sqlite_backend, monkeypatch):
    monkeypatch.setattr(app_module, "catalog", catalog)
    monkeypatch.setattr(app_module, "kv_backend", sqlite_backend)
    monkeypatch.setattr(app_module, "progress_store", ProgressStore(sqlite_backend))
    monkeypatch.setattr(app_module, "sessions", MatchSessionRegistry())
    with TestClient(app_module.app) as c:
        yield c


@pytest.fixture()
def word_factory():
    return make_words
