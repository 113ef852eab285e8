"""API endpoints for task force and program readiness."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from academy.core.auth_middleware import AuthContext, require_participant
from academy.core.config import get_settings
from academy.core.logging import get_logger
from academy.core.readiness import (
    calculate_overall_program_readiness,
    calculate_task_force_readiness,
    get_current_program_day,
    get_expected_readiness,
    get_readiness_label,
    get_readiness_recommendations,
)
from academy.core.schemas_participants import TaskForce
from academy.core.schemas_readiness import (
    MemberMastery,
    ProgramReadinessResponse,
    TaskForceReadinessResponse,
)
from academy.db.mastery import list_member_mastery

logger = get_logger(__name__)

router = APIRouter(prefix="/readiness")


def task_force_name(task_force_id: str) -> str:
    return f"Task Force {task_force_id.title()}"


def _members_by_task_force() -> dict[str, list[MemberMastery]]:
    """Group mastery snapshots by task force. Unassigned participants are left out."""
    groups: dict[str, list[MemberMastery]] = {tf.value: [] for tf in TaskForce}
    for task_force, member in list_member_mastery():
        if task_force:
            groups.setdefault(task_force, []).append(member)
    return groups


def _resolve_program_day(program_day: Optional[int]) -> int:
    return program_day if program_day is not None else get_current_program_day()


@router.get("/program", response_model=ProgramReadinessResponse)
async def get_program_readiness(
    program_day: Optional[int] = Query(None, description="Override the current program day"),
    auth: AuthContext = Depends(require_participant),  # noqa: B008
) -> ProgramReadinessResponse:
    """Readiness of every task force plus the member-weighted program total."""
    day = _resolve_program_day(program_day)
    try:
        groups = _members_by_task_force()
    except Exception as e:
        logger.exception("Failed to load mastery for program readiness")
        raise HTTPException(status_code=500, detail="Failed to load readiness") from e

    task_forces = [
        calculate_task_force_readiness(tf_id, task_force_name(tf_id), members, program_day=day)
        for tf_id, members in groups.items()
    ]
    return ProgramReadinessResponse(
        program_day=day,
        target_readiness=get_expected_readiness(day, get_settings().PROGRAM_LENGTH_DAYS),
        program=calculate_overall_program_readiness(task_forces),
        task_forces=task_forces,
    )


@router.get("/task-forces/{task_force}", response_model=TaskForceReadinessResponse)
async def get_task_force_readiness(
    task_force: str,
    previous_readiness: Optional[int] = Query(None, ge=0, le=100),
    program_day: Optional[int] = Query(None),
    auth: AuthContext = Depends(require_participant),  # noqa: B008
) -> TaskForceReadinessResponse:
    """
    Readiness, label and recommendations for one task force.

    Raises:
        HTTPException 404: If the task force is unknown
    """
    task_force = task_force.upper()
    if task_force not in {tf.value for tf in TaskForce}:
        raise HTTPException(status_code=404, detail="Task force not found")

    try:
        members = [m for tf, m in list_member_mastery() if tf == task_force]
    except Exception as e:
        logger.exception("Failed to load task force mastery", extra={"task_force": task_force})
        raise HTTPException(status_code=500, detail="Failed to load readiness") from e

    readiness = calculate_task_force_readiness(
        task_force,
        task_force_name(task_force),
        members,
        previous_readiness=previous_readiness,
        program_day=_resolve_program_day(program_day),
    )
    return TaskForceReadinessResponse(
        readiness=readiness,
        label=get_readiness_label(readiness.overall_readiness),
        recommendations=get_readiness_recommendations(readiness),
    )
