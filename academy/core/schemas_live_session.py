"""Pydantic schemas for instructor-led live sessions."""

from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SessionSection(str, Enum):
    BRIEFING = "briefing"
    RESOURCES = "resources"
    LAB = "lab"
    DEBRIEF = "debrief"


SECTION_ORDER = [
    SessionSection.BRIEFING,
    SessionSection.RESOURCES,
    SessionSection.LAB,
    SessionSection.DEBRIEF,
]


class SessionState(BaseModel):
    """Position broadcast by the instructor.

    Serialized with camelCase keys on the broadcast channel so browser and
    Python clients share one payload shape.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    current_step: int = Field(default=1, ge=1, alias="currentStep")
    current_section: SessionSection = Field(
        default=SessionSection.BRIEFING, alias="currentSection"
    )
    is_active: bool = Field(default=True, alias="isActive")

    def to_broadcast(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SessionParticipant(BaseModel):
    id: str
    name: str
    avatar_url: str | None = None
    role: str | None = None
    joined_at: str | None = None


class LiveSessionCreate(BaseModel):
    mission_day_id: int = Field(..., ge=1)


class LiveSessionUpdate(BaseModel):
    """PATCH body: an action, an explicit step, a section, or a mix."""

    action: Literal["next_step", "prev_step"] | None = None
    step: int | None = Field(default=None, ge=1)
    section: SessionSection | None = None


class LiveSessionResponse(BaseModel):
    id: str
    join_code: str
    mission_day_id: int
    instructor_id: str | None = None
    current_step: int
    current_section: SessionSection
    is_active: bool
    started_at: str | None = None
    ended_at: str | None = None


class ParticipantsResponse(BaseModel):
    participants: list[SessionParticipant]


class PresenceUser(BaseModel):
    """One tracked presence on a presence channel.

    Timestamps without an offset are read as UTC so presences from different
    clients always compare.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    avatar_url: str | None = None
    role: str | None = None
    joined_at: datetime
    online_at: datetime

    @field_validator("joined_at", "online_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
