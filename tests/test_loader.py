from __future__ import annotations

import json
import random

import httpx

import word_review.lessons.loader as loader_module
from word_review.lessons.loader import WordCatalog, load_words, parse_words
from word_review.lessons.model import Word
from word_review.matching.engine import new_group, reveal


def test_load_words_from_file(words_file):
    words = load_words(words_file)
    assert len(words) == 23
    assert words[0] == Word(no=1, word="word1", meaning="meaning1")


def test_missing_file_yields_empty_list(tmp_path, caplog):
    assert load_words(tmp_path / "nope.json") == []
    assert "failed to load words" in caplog.text


def test_malformed_json_yields_empty_list(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{not json", encoding="utf-8")
    assert load_words(path) == []


def test_non_array_payload_yields_empty_list(tmp_path):
    path = tmp_path / "object.json"
    path.write_text(json.dumps({"no": 1, "word": "cat", "meaning": "猫"}), encoding="utf-8")
    assert load_words(path) == []


def test_malformed_records_are_skipped():
    words = parse_words(
        [
            {"no": 1, "word": "cat", "meaning": "猫"},
            {"no": "x", "word": "bad", "meaning": "bad"},
            {"word": "missing no", "meaning": "?"},
            "not a record",
            {"no": "2", "word": "dog", "meaning": "狗"},
            {"no": 1.5, "word": "book", "meaning": "书"},
            {"no": "1.5", "word": "book", "meaning": "书"},
            {"no": True, "word": "yes", "meaning": "是"},
            {"no": 3, "word": "egg", "meaning": None},
            {"no": 4, "word": None, "meaning": "鱼"},
            {"no": 5.0, "word": "fish", "meaning": "鱼"},
        ]
    )
    assert words == [Word(1, "cat", "猫"), Word(2, "dog", "狗"), Word(5, "fish", "鱼")]


def test_skipped_fractional_key_keeps_reveal_one_to_one():
    words = parse_words(
        [
            {"no": 1, "word": "cat", "meaning": "猫"},
            {"no": 1.5, "word": "book", "meaning": "书"},
            {"no": 2, "word": "dog", "meaning": "狗"},
        ]
    )
    state = reveal(new_group(words, random.Random(4)))

    answer_indices = [conn.answer_index for conn in state.connections]
    assert len(answer_indices) == len(set(answer_indices)) == 2


def test_http_source_uses_httpx(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/word.json"
        return httpx.Response(200, json=[{"no": 1, "word": "cat", "meaning": "猫"}])

    transport = httpx.MockTransport(handler)
    real_client = httpx.Client
    monkeypatch.setattr(loader_module.httpx, "Client", lambda **kw: real_client(transport=transport, **kw))

    assert load_words("https://example.test/word.json") == [Word(1, "cat", "猫")]


def test_http_failure_yields_empty_list(monkeypatch):
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    real_client = httpx.Client
    monkeypatch.setattr(loader_module.httpx, "Client", lambda **kw: real_client(transport=transport, **kw))

    assert load_words("https://example.test/word.json") == []


def test_catalog_recomputes_lessons(words_file):
    catalog = WordCatalog(words_file)
    assert catalog.words == []
    assert catalog.lessons() == []

    catalog.load()
    lessons = catalog.lessons()
    assert [lesson.word_count for lesson in lessons] == [20, 3]
    assert catalog.get_lesson(2).words[0].no == 21
    assert catalog.get_lesson(9) is None
