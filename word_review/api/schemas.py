from __future__ import annotations

from pydantic import BaseModel, Field


class MatchStartRequest(BaseModel):
    lesson_id: int = Field(ge=1)


class MatchClickRequest(BaseModel):
    index: int = Field(ge=0)


class ProgressUpdateRequest(BaseModel):
    completed: bool = True
