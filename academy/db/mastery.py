"""Database operations for participant_mastery table."""

from academy.core.logging import get_logger
from academy.core.schemas_mastery import LevelUp, MasteryRecord
from academy.core.schemas_readiness import MemberMastery
from academy.db.supabase_client import get_supabase

logger = get_logger(__name__)


def get_mastery(participant_id: str) -> MasteryRecord | None:
    supabase = get_supabase()
    response = (
        supabase.table("participant_mastery")
        .select("*")
        .eq("participant_id", participant_id)
        .maybe_single()
        .execute()
    )
    if not response or not response.data:
        return None
    return MasteryRecord(**response.data)


def list_mastery_rows() -> list[dict]:
    """
    Fetch every participant's raw mastery row.

    Rows are left unparsed so a sweep can count a malformed row as one failure.
    """
    supabase = get_supabase()
    response = supabase.table("participant_mastery").select("*").execute()
    return response.data or []


def apply_level_up(record: MasteryRecord, level_up: LevelUp) -> MasteryRecord | None:
    """
    Raise a participant's mastery level.

    The update only matches rows still below the new level, so when two
    clients apply the same level-up only the first one gets the row back.

    Returns:
        The updated record, or None if the level was already applied
    """
    supabase = get_supabase()
    response = (
        supabase.table("participant_mastery")
        .update(
            {
                "mastery_level": level_up.new_level,
                "clearance": level_up.new_clearance.value,
            }
        )
        .eq("participant_id", record.participant_id)
        .lt("mastery_level", level_up.new_level)
        .execute()
    )
    if not response.data:
        return None
    return MasteryRecord(**response.data[0])


def list_member_mastery() -> list[tuple[str | None, MemberMastery]]:
    """
    Fetch mastery snapshots joined with participant details.

    Returns:
        (task_force, MemberMastery) pairs; task_force is None for unassigned
        participants
    """
    supabase = get_supabase()
    response = (
        supabase.table("participant_mastery")
        .select(
            "participant_id, mastery_level, clearance, days_completed, "
            "participants(name, role, task_force)"
        )
        .execute()
    )

    members = []
    for row in response.data or []:
        participant = row.get("participants") or {}
        members.append(
            (
                participant.get("task_force"),
                MemberMastery(
                    participant_id=row["participant_id"],
                    name=participant.get("name") or "Unknown",
                    role=participant.get("role"),
                    mastery_level=row.get("mastery_level") or 1,
                    clearance=row.get("clearance") or "RECRUIT",
                    days_completed=row.get("days_completed") or 0,
                ),
            )
        )
    return members
