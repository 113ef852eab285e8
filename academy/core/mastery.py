"""Mastery threshold evaluator.

Level-ups are driven by an ordered threshold table. A participant is checked
against the highest level first, so a participant whose counters jumped past
several thresholds at once lands directly on the highest level they qualify
for, still with a single level-up per evaluation.
"""

from dataclasses import dataclass

from academy.core.schemas_mastery import (
    ClearanceLevel,
    LevelUp,
    MasteryProgress,
    MasteryRecord,
    MasteryRequirement,
)

MAX_LEVEL = 4


@dataclass(frozen=True)
class LevelThreshold:
    level: int
    clearance: ClearanceLevel
    days_completed: int
    ai_tutor_sessions: int | None = None
    artifacts_submitted: int | None = None
    peer_assists_given: int | None = None


MASTERY_THRESHOLDS: dict[int, LevelThreshold] = {
    2: LevelThreshold(
        level=2,
        clearance=ClearanceLevel.FIELD_TRAINEE,
        days_completed=3,
        ai_tutor_sessions=1,
    ),
    3: LevelThreshold(
        level=3,
        clearance=ClearanceLevel.FIELD_READY,
        days_completed=10,  # Week 2 complete
        artifacts_submitted=1,
    ),
    4: LevelThreshold(
        level=4,
        clearance=ClearanceLevel.SPECIALIST,
        days_completed=20,
        artifacts_submitted=3,
        peer_assists_given=2,
    ),
}

# (threshold attribute, display name)
_REQUIREMENT_FIELDS = [
    ("days_completed", "Days Completed"),
    ("ai_tutor_sessions", "AI Tutor Sessions"),
    ("artifacts_submitted", "Artifacts Submitted"),
    ("peer_assists_given", "Peer Assists"),
]


def _requirements(record: MasteryRecord, threshold: LevelThreshold) -> list[MasteryRequirement]:
    requirements = []
    for field_name, display_name in _REQUIREMENT_FIELDS:
        required = getattr(threshold, field_name)
        if required is None:
            continue
        current = getattr(record, field_name)
        requirements.append(
            MasteryRequirement(
                name=display_name,
                current=current,
                required=required,
                completed=current >= required,
            )
        )
    return requirements


def meets_threshold(record: MasteryRecord, threshold: LevelThreshold) -> bool:
    return all(r.completed for r in _requirements(record, threshold))


def calculate_new_level(record: MasteryRecord) -> LevelUp | None:
    """
    Return the level-up a participant qualifies for, if any.

    Only levels strictly above the current one are considered.
    """
    for level in sorted(MASTERY_THRESHOLDS, reverse=True):
        if record.mastery_level >= level:
            continue
        threshold = MASTERY_THRESHOLDS[level]
        if meets_threshold(record, threshold):
            return LevelUp(new_level=level, new_clearance=threshold.clearance)
    return None


def get_mastery_progress(record: MasteryRecord | None) -> MasteryProgress:
    """Requirements and completion toward the next mastery level."""
    if record is None:
        return MasteryProgress(current_level=1, next_level=2, requirements=[], overall_progress=0)

    current_level = record.mastery_level
    if current_level >= MAX_LEVEL:
        return MasteryProgress(
            current_level=MAX_LEVEL, next_level=None, requirements=[], overall_progress=100
        )

    next_level = current_level + 1
    requirements = _requirements(record, MASTERY_THRESHOLDS[next_level])
    completed = sum(1 for r in requirements if r.completed)

    return MasteryProgress(
        current_level=current_level,
        next_level=next_level,
        requirements=requirements,
        overall_progress=round(completed / len(requirements) * 100),
    )
