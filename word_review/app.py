from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from word_review.api.schemas import MatchClickRequest, MatchStartRequest, ProgressUpdateRequest
from word_review.config import (
    DB_PATH,
    STATIC_DIR,
    TEMPLATES_DIR,
    WORDS_SOURCE,
    configure_logging,
    ensure_dirs,
    load_game_settings,
)
from word_review.lessons.loader import WordCatalog
from word_review.lessons.review import ReviewCursor
from word_review.matching.registry import MatchSessionRegistry
from word_review.matching.session import MatchSession, SessionFinishedError
from word_review.storage.db import SqliteKeyValueStore
from word_review.storage.progress import ProgressStore

logger = logging.getLogger(__name__)

settings = load_game_settings()
catalog = WordCatalog(WORDS_SOURCE, lesson_size=settings.lesson_size)
kv_backend = SqliteKeyValueStore(DB_PATH)
progress_store = ProgressStore(kv_backend)
sessions = MatchSessionRegistry()
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging()
    ensure_dirs()
    kv_backend.initialize()
    catalog.load()
    yield


app = FastAPI(title="Word Review", version="0.1.0", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "words": len(catalog.words)}


# Pages


@app.get("/", response_class=HTMLResponse)
def lesson_list_page(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "lessons.html",
        {"lessons": _lesson_summaries()},
    )


@app.get("/lesson/{lesson_id}/review", response_class=HTMLResponse)
def review_page(request: Request, lesson_id: int, index: int = Query(default=0)) -> HTMLResponse:
    lesson = catalog.get_lesson(lesson_id)
    cursor = ReviewCursor(lesson.words if lesson else [], index=index)
    return templates.TemplateResponse(
        request,
        "review.html",
        {"lesson_id": lesson_id, "found": lesson is not None, "cursor": cursor},
    )


@app.get("/lesson/{lesson_id}/match", response_class=HTMLResponse)
def match_page(request: Request, lesson_id: int) -> HTMLResponse:
    lesson = catalog.get_lesson(lesson_id)
    return templates.TemplateResponse(
        request,
        "match.html",
        {
            "lesson_id": lesson_id,
            "found": lesson is not None,
            "curve_threshold": settings.curve_threshold_px,
        },
    )


# Lessons & progress


@app.get("/api/lessons")
def lessons() -> dict:
    return {"ok": True, "items": _lesson_summaries()}


@app.get("/api/lessons/{lesson_id}")
def lesson_detail(lesson_id: int) -> dict:
    lesson = catalog.get_lesson(lesson_id)
    if lesson is None:
        return {"ok": True, "lesson_id": lesson_id, "found": False, "words": []}
    return {
        "ok": True,
        "lesson_id": lesson.id,
        "found": True,
        "completed": progress_store.is_completed(lesson.id),
        "words": [word.to_dict() for word in lesson.words],
    }


@app.get("/api/lessons/{lesson_id}/review")
def lesson_review(lesson_id: int, index: int = Query(default=0)) -> dict:
    lesson = catalog.get_lesson(lesson_id)
    cursor = ReviewCursor(lesson.words if lesson else [], index=index)
    return {"ok": True, "lesson_id": lesson_id, "found": lesson is not None, **cursor.to_dict()}


@app.get("/api/progress")
def progress() -> dict:
    return {"ok": True, "items": [item.to_dict() for item in progress_store.read_all()]}


@app.put("/api/progress/{lesson_id}")
def update_progress(lesson_id: int, req: ProgressUpdateRequest) -> dict:
    progress_store.upsert(lesson_id, req.completed)
    return {"ok": True, "lessonId": lesson_id, "completed": progress_store.is_completed(lesson_id)}


# Matching game


@app.post("/api/match/sessions")
def start_match(req: MatchStartRequest) -> dict:
    lesson = catalog.get_lesson(req.lesson_id)
    if lesson is None:
        raise HTTPException(status_code=404, detail=f"lesson {req.lesson_id} not found")
    session = MatchSession(
        lesson,
        progress_store,
        group_size=settings.group_size,
        reset_delay=settings.mismatch_reset_sec,
    )
    session_id = sessions.create(session)
    return _session_payload(session_id, session)


@app.get("/api/match/sessions/{session_id}")
def match_state(session_id: str) -> dict:
    with sessions.lock:
        session = _require_session(session_id)
        if not session.finished:
            session.tick()
        return _session_payload(session_id, session)


@app.post("/api/match/sessions/{session_id}/prompt")
def match_click_prompt(session_id: str, req: MatchClickRequest) -> dict:
    return _run_session_action(session_id, lambda s: s.click_prompt(req.index))


@app.post("/api/match/sessions/{session_id}/answer")
def match_click_answer(session_id: str, req: MatchClickRequest) -> dict:
    return _run_session_action(session_id, lambda s: s.click_answer(req.index))


@app.post("/api/match/sessions/{session_id}/show-answer")
def match_show_answer(session_id: str) -> dict:
    return _run_session_action(session_id, lambda s: s.show_answer())


@app.post("/api/match/sessions/{session_id}/advance")
def match_advance(session_id: str) -> dict:
    return _run_session_action(session_id, lambda s: s.advance())


@app.delete("/api/match/sessions/{session_id}")
def match_discard(session_id: str) -> dict:
    if not sessions.discard(session_id):
        raise HTTPException(status_code=404, detail="match session not found")
    return {"ok": True}


def _run_session_action(session_id: str, action) -> dict:
    with sessions.lock:
        session = _require_session(session_id)
        try:
            action(session)
        except SessionFinishedError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _session_payload(session_id, session)


def _require_session(session_id: str) -> MatchSession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="match session not found")
    return session


def _session_payload(session_id: str, session: MatchSession) -> dict:
    return {
        "ok": True,
        "session_id": session_id,
        "review_url": f"/lesson/{session.lesson.id}/review",
        **session.snapshot(),
    }


def _lesson_summaries() -> list[dict]:
    completed = progress_store.completed_ids()
    return [
        {"id": lesson.id, "word_count": lesson.word_count, "completed": lesson.id in completed}
        for lesson in catalog.lessons()
    ]
