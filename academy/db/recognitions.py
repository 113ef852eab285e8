"""Database operations for recognition types and awards."""

from datetime import UTC, datetime

from academy.core.logging import get_logger
from academy.db.supabase_client import get_supabase

logger = get_logger(__name__)


def get_recognition_type_ids() -> dict[str, int]:
    """Map recognition code -> recognition_types.id."""
    supabase = get_supabase()
    response = supabase.table("recognition_types").select("id, code").execute()
    return {row["code"]: row["id"] for row in response.data or []}


def award_recognition(participant_id: str, recognition_type_id: int, context: str) -> bool:
    """
    Award a recognition unless the participant already holds it.

    Returns:
        True if a new award was inserted
    """
    supabase = get_supabase()
    existing = (
        supabase.table("participant_recognitions")
        .select("id")
        .eq("participant_id", participant_id)
        .eq("recognition_type_id", recognition_type_id)
        .execute()
    )
    if existing.data:
        return False

    response = (
        supabase.table("participant_recognitions")
        .insert(
            {
                "participant_id": participant_id,
                "recognition_type_id": recognition_type_id,
                "context": context,
                "earned_at": datetime.now(UTC).isoformat(),
            }
        )
        .execute()
    )
    return bool(response.data)
