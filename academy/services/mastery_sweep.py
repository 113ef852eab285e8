"""Mastery level-up evaluation, reactive and scheduled.

Both paths share one conditional store update, so a level-up applied by the
sweep and by a participant's own check at the same time is reported (and
notified) once.
"""

from academy.core.logging import get_logger
from academy.core.mastery import calculate_new_level
from academy.core.schemas_mastery import (
    LevelUp,
    MasteryCheckResponse,
    MasteryRecord,
    MasterySweepSummary,
    MasteryUpdate,
)
from academy.db.mastery import apply_level_up, get_mastery, list_mastery_rows
from academy.db.notifications import create_notification

logger = get_logger(__name__)


def _notify_level_up(record: MasteryRecord, level_up: LevelUp) -> None:
    try:
        create_notification(
            participant_id=record.participant_id,
            type="level_up",
            title="Level Up!",
            body=(
                f"You've reached Mastery Level {level_up.new_level} "
                f"({level_up.new_clearance.value})"
            ),
            metadata={"new_level": level_up.new_level},
        )
    except Exception as e:
        logger.warning(f"Failed to notify level-up for {record.participant_id}: {e}")


def promote(record: MasteryRecord) -> tuple[MasteryRecord, LevelUp | None]:
    """
    Apply the level-up a record qualifies for, if any.

    Returns:
        (current record, applied level-up or None)
    """
    level_up = calculate_new_level(record)
    if level_up is None:
        return record, None

    updated = apply_level_up(record, level_up)
    if updated is None:
        logger.info(
            f"Level {level_up.new_level} already applied for {record.participant_id}",
            extra={"participant_id": record.participant_id},
        )
        return record.model_copy(
            update={
                "mastery_level": level_up.new_level,
                "clearance": level_up.new_clearance.value,
            }
        ), None

    _notify_level_up(updated, level_up)
    logger.info(
        f"Participant {record.participant_id} leveled up "
        f"{record.mastery_level} -> {level_up.new_level}",
        extra={"participant_id": record.participant_id},
    )
    return updated, level_up


def check_participant_level_up(participant_id: str) -> MasteryCheckResponse | None:
    """Re-read a participant's counters and apply any level-up they earned."""
    record = get_mastery(participant_id)
    if record is None:
        return None

    current, level_up = promote(record)
    return MasteryCheckResponse(
        leveled_up=level_up is not None,
        mastery=current,
        level_up=level_up,
    )


def run_mastery_sweep() -> MasterySweepSummary:
    """
    Evaluate every participant's mastery counters.

    An error on one record is logged and counted; the sweep continues.
    """
    rows = list_mastery_rows()
    updates: list[MasteryUpdate] = []
    failed = 0

    for row in rows:
        try:
            record = MasteryRecord(**row)
            _, level_up = promote(record)
        except Exception:
            failed += 1
            logger.exception(f"Failed to update mastery for {row.get('participant_id')}")
            continue

        if level_up is not None:
            updates.append(
                MasteryUpdate(
                    participant_id=record.participant_id,
                    old_level=record.mastery_level,
                    new_level=level_up.new_level,
                    new_clearance=level_up.new_clearance,
                )
            )

    logger.info(f"Mastery update complete: {len(updates)} participants leveled up")
    return MasterySweepSummary(
        processed=len(rows),
        updated=len(updates),
        failed=failed,
        updates=updates,
    )
