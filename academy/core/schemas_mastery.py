"""Pydantic schemas for mastery levels and level-up evaluation."""

from enum import Enum

from pydantic import BaseModel, Field


class ClearanceLevel(str, Enum):
    """Display label bound to a mastery level."""

    RECRUIT = "RECRUIT"
    FIELD_TRAINEE = "FIELD_TRAINEE"
    FIELD_READY = "FIELD_READY"
    SPECIALIST = "SPECIALIST"


class MasteryRecord(BaseModel):
    """Row of the participant_mastery table."""

    id: str | None = None
    participant_id: str
    mastery_level: int = Field(default=1, ge=1, le=4)
    clearance: str = ClearanceLevel.RECRUIT.value
    days_completed: int = 0
    artifacts_submitted: int = 0
    ai_tutor_sessions: int = 0
    peer_assists_given: int = 0


class LevelUp(BaseModel):
    new_level: int
    new_clearance: ClearanceLevel


class MasteryRequirement(BaseModel):
    name: str
    current: int
    required: int
    completed: bool


class MasteryProgress(BaseModel):
    """Progress toward the next mastery level."""

    current_level: int
    next_level: int | None
    requirements: list[MasteryRequirement] = Field(default_factory=list)
    overall_progress: int = Field(..., ge=0, le=100)


class MasteryStatusResponse(BaseModel):
    mastery: MasteryRecord
    progress: MasteryProgress


class MasteryCheckResponse(BaseModel):
    leveled_up: bool
    mastery: MasteryRecord
    level_up: LevelUp | None = None


class MasteryUpdate(BaseModel):
    participant_id: str
    old_level: int
    new_level: int
    new_clearance: ClearanceLevel


class MasterySweepSummary(BaseModel):
    """Result of one scheduled mastery sweep."""

    success: bool = True
    processed: int
    updated: int
    failed: int = 0
    updates: list[MasteryUpdate] = Field(default_factory=list)
