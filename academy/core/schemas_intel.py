"""Pydantic schemas for intel drops."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class IntelClassification(str, Enum):
    URGENT = "URGENT"
    CLASSIFIED = "CLASSIFIED"
    BRIEFING = "BRIEFING"


IntelTab = Literal["unreleased", "released", "all"]


class IntelDrop(BaseModel):
    """Row of the intel_drops table."""

    id: str
    day: int
    title: str
    content: str = ""
    classification: IntelClassification = IntelClassification.BRIEFING
    affected_task_forces: list[str] | None = Field(
        default=None, description="Targeted task forces; None or empty means everyone"
    )
    trigger_time: str | None = None
    is_released: bool = False
    released_at: str | None = None


class IntelDropUpdate(BaseModel):
    """Admin edit of an intel drop. Only provided fields are written."""

    title: str | None = None
    classification: IntelClassification | None = None
    content: str | None = None
    affected_task_forces: list[str] | None = None
    trigger_time: str | None = None


class IntelStats(BaseModel):
    unreleased: int
    released: int
    urgent_unreleased: int
    days: list[int]


class UnreadCountResponse(BaseModel):
    count: int
