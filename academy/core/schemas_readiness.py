"""Pydantic models for task force readiness."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MAX_MASTERY_LEVEL = 4


class MemberMastery(BaseModel):
    """Read-only mastery snapshot of one task force member."""

    model_config = ConfigDict(frozen=True)

    participant_id: str
    name: str
    role: str | None = None
    mastery_level: int = Field(..., ge=1, le=MAX_MASTERY_LEVEL)
    clearance: str
    days_completed: int = Field(default=0, ge=0)


class RoleBreakdown(BaseModel):
    """Readiness of the members sharing one role."""

    role: str | None
    count: int
    total_mastery: int
    avg_mastery: float
    ready_count: int = Field(..., description="Members at level 3 or above")
    readiness_percent: int


class TaskForceReadiness(BaseModel):
    """Readiness aggregate for a single task force."""

    task_force_id: str
    task_force_name: str
    total_members: int
    overall_readiness: int = Field(..., ge=0, le=100)
    role_breakdown: list[RoleBreakdown] = Field(default_factory=list)
    trend: Literal["up", "down", "stable"] = "stable"
    trend_value: int = Field(default=0, description="Change vs. the previous snapshot")
    target_readiness: int = Field(..., description="Expected readiness for the program day")
    is_on_track: bool
    members: list[MemberMastery] = Field(default_factory=list)
    lowest_role: str | None = None
    highest_role: str | None = None


class RoleAnalysis(BaseModel):
    total: int
    avg_readiness: int


class ProgramReadiness(BaseModel):
    """Readiness aggregate across every task force."""

    overall_readiness: int
    total_participants: int
    task_forces_on_track: int
    task_forces_at_risk: int
    role_analysis: dict[str, RoleAnalysis] = Field(default_factory=dict)


class ReadinessLabel(BaseModel):
    label: str
    description: str


class ProgramReadinessResponse(BaseModel):
    """Program readiness plus the per-task-force detail it was built from."""

    program_day: int
    target_readiness: int
    program: ProgramReadiness
    task_forces: list[TaskForceReadiness]


class TaskForceReadinessResponse(BaseModel):
    readiness: TaskForceReadiness
    label: ReadinessLabel
    recommendations: list[str]
