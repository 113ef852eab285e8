"""Pydantic schemas for per-day briefing content."""

from typing import Literal

from pydantic import BaseModel

ContentSource = Literal["local", "github", "database"]


class DayContent(BaseModel):
    day: int
    situation: str | None = None
    resources: str | None = None
    mentor_notes: str | None = None
    source: ContentSource
    cached: bool = False
