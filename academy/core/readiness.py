"""Task force readiness engine.

Pure functions over already-fetched mastery snapshots. Readiness is the share
of the maximum attainable mastery a group has reached:

    round(sum(mastery_level) / (members * 4) * 100)

Targets follow a step function of the program day so instructors can see
whether a task force keeps pace with the 25-day curriculum.
"""

import math
from datetime import date, datetime
from zoneinfo import ZoneInfo

from academy.core.config import get_settings
from academy.core.schemas_readiness import (
    MAX_MASTERY_LEVEL,
    MemberMastery,
    ProgramReadiness,
    ReadinessLabel,
    RoleAnalysis,
    RoleBreakdown,
    TaskForceReadiness,
)

# Members at or above this level count as "ready" in the role breakdown
READY_LEVEL = 3

# (last program day of the plateau, expected readiness)
READINESS_PLATEAUS = [
    (3, 25),  # Level 1
    (10, 50),  # Level 2
    (20, 75),  # Level 3
]

READINESS_LABELS = [
    (90, "Mission Ready", "Task force is fully prepared for deployment"),
    (75, "Field Ready", "Most members are prepared for field operations"),
    (50, "In Training", "Active skill development in progress"),
    (25, "Initiating", "Early stages of training"),
]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def _readiness_percent(total_mastery: int, count: int) -> int:
    return round_half_up(total_mastery / (count * MAX_MASTERY_LEVEL) * 100)


def get_current_program_day(
    today: date | None = None,
    start: date | None = None,
    length: int | None = None,
) -> int:
    """
    Return the 1-based program day, 0 before the program starts.

    Days past the end of the program are clamped to the last day. Without an
    explicit date, today is taken in the academy time zone.
    """
    settings = get_settings()
    today = today or datetime.now(ZoneInfo(settings.ACADEMY_TIMEZONE)).date()
    start = start or settings.PROGRAM_START_DATE
    length = length or settings.PROGRAM_LENGTH_DAYS

    diff_days = (today - start).days
    if diff_days < 0:
        return 0
    return min(diff_days + 1, length)


def get_expected_readiness(program_day: int, length: int = 25) -> int:
    """Expected readiness percentage for a program day."""
    if program_day <= 0:
        return 0
    if program_day >= length:
        return 100

    for last_day, expected in READINESS_PLATEAUS:
        if program_day <= last_day:
            return expected
    return 100


def calculate_task_force_readiness(
    task_force_id: str,
    task_force_name: str,
    members: list[MemberMastery],
    previous_readiness: int | None = None,
    program_day: int | None = None,
) -> TaskForceReadiness:
    """
    Calculate readiness for a single task force.

    Args:
        task_force_id: Task force identifier
        task_force_name: Display name
        members: Mastery snapshots of the members
        previous_readiness: Earlier overall readiness used for the trend
        program_day: Program day for the target; defaults to today's

    Returns:
        TaskForceReadiness, zeroed and never on track when there are no members
    """
    if program_day is None:
        program_day = get_current_program_day()
    target_readiness = get_expected_readiness(program_day, get_settings().PROGRAM_LENGTH_DAYS)

    if not members:
        return TaskForceReadiness(
            task_force_id=task_force_id,
            task_force_name=task_force_name,
            total_members=0,
            overall_readiness=0,
            role_breakdown=[],
            trend="stable",
            trend_value=0,
            target_readiness=target_readiness,
            is_on_track=False,
            members=[],
            lowest_role=None,
            highest_role=None,
        )

    total_mastery = sum(m.mastery_level for m in members)
    overall_readiness = _readiness_percent(total_mastery, len(members))

    # dicts keep first-seen order, which decides lowest/highest ties
    role_groups: dict[str | None, list[MemberMastery]] = {}
    for member in members:
        role_groups.setdefault(member.role, []).append(member)

    role_breakdown: list[RoleBreakdown] = []
    lowest_readiness = 101
    highest_readiness = -1
    lowest_role: str | None = None
    highest_role: str | None = None

    for role, role_members in role_groups.items():
        role_total = sum(m.mastery_level for m in role_members)
        readiness_percent = _readiness_percent(role_total, len(role_members))
        role_breakdown.append(
            RoleBreakdown(
                role=role,
                count=len(role_members),
                total_mastery=role_total,
                avg_mastery=role_total / len(role_members),
                ready_count=sum(1 for m in role_members if m.mastery_level >= READY_LEVEL),
                readiness_percent=readiness_percent,
            )
        )

        if readiness_percent < lowest_readiness:
            lowest_readiness = readiness_percent
            lowest_role = role
        if readiness_percent > highest_readiness:
            highest_readiness = readiness_percent
            highest_role = role

    # Lowest first to highlight the roles needing attention
    role_breakdown.sort(key=lambda rb: rb.readiness_percent)

    trend = "stable"
    trend_value = 0
    if previous_readiness is not None:
        trend_value = overall_readiness - previous_readiness
        if trend_value > 0:
            trend = "up"
        elif trend_value < 0:
            trend = "down"

    return TaskForceReadiness(
        task_force_id=task_force_id,
        task_force_name=task_force_name,
        total_members=len(members),
        overall_readiness=overall_readiness,
        role_breakdown=role_breakdown,
        trend=trend,
        trend_value=trend_value,
        target_readiness=target_readiness,
        is_on_track=overall_readiness >= target_readiness,
        members=list(members),
        lowest_role=lowest_role,
        highest_role=highest_role,
    )


def calculate_overall_program_readiness(
    task_forces: list[TaskForceReadiness],
) -> ProgramReadiness:
    """Aggregate task force readiness, weighted by member count."""
    total_participants = sum(tf.total_members for tf in task_forces)
    if not task_forces or total_participants == 0:
        on_track = sum(1 for tf in task_forces if tf.is_on_track)
        return ProgramReadiness(
            overall_readiness=0,
            total_participants=0,
            task_forces_on_track=on_track,
            task_forces_at_risk=len(task_forces) - on_track,
            role_analysis={},
        )

    weighted = sum(tf.overall_readiness * tf.total_members for tf in task_forces)
    overall_readiness = round_half_up(weighted / total_participants)

    on_track = sum(1 for tf in task_forces if tf.is_on_track)

    role_totals: dict[str, list[int]] = {}
    for tf in task_forces:
        for rb in tf.role_breakdown:
            key = rb.role or "UNASSIGNED"
            totals = role_totals.setdefault(key, [0, 0])
            totals[0] += rb.count
            totals[1] += rb.readiness_percent * rb.count

    role_analysis = {
        role: RoleAnalysis(total=total, avg_readiness=round_half_up(sum_readiness / total))
        for role, (total, sum_readiness) in role_totals.items()
    }

    return ProgramReadiness(
        overall_readiness=overall_readiness,
        total_participants=total_participants,
        task_forces_on_track=on_track,
        task_forces_at_risk=len(task_forces) - on_track,
        role_analysis=role_analysis,
    )


def get_readiness_label(readiness: int) -> ReadinessLabel:
    for threshold, label, description in READINESS_LABELS:
        if readiness >= threshold:
            return ReadinessLabel(label=label, description=description)
    return ReadinessLabel(label="Mobilizing", description="Task force is being assembled")


def get_readiness_recommendations(readiness: TaskForceReadiness) -> list[str]:
    """Suggest next steps for a task force based on its readiness."""
    recommendations: list[str] = []

    if not readiness.is_on_track:
        gap = readiness.target_readiness - readiness.overall_readiness
        recommendations.append(
            f"Task force is {gap}% behind target. Consider additional support sessions."
        )

    if readiness.lowest_role:
        recommendations.append(
            f"Focus on {readiness.lowest_role} role members - "
            "they have the lowest readiness in the team."
        )

    level_one = [m for m in readiness.members if m.mastery_level < 2]
    if level_one:
        recommendations.append(
            f"{len(level_one)} member(s) are still at Level 1. Pair them with advanced members."
        )

    if readiness.trend == "down":
        recommendations.append("Readiness has declined. Check for engagement issues or blockers.")

    return recommendations
