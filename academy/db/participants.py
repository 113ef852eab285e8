"""Database operations for participants table."""

from typing import Any

from academy.core.logging import get_logger
from academy.core.schemas_participants import Participant
from academy.db.supabase_client import get_supabase

logger = get_logger(__name__)


def get_participant_by_email(email: str) -> Participant | None:
    """Look up a participant by (case-insensitive) email."""
    supabase = get_supabase()
    response = (
        supabase.table("participants")
        .select("*")
        .eq("email", email.lower())
        .maybe_single()
        .execute()
    )
    if not response or not response.data:
        return None
    return Participant(**response.data)


def update_participant(participant_id: str, updates: dict[str, Any]) -> Participant:
    """
    Update assignment/preference fields of a participant.

    Raises:
        ValueError: If no row was updated
    """
    supabase = get_supabase()
    response = (
        supabase.table("participants").update(updates).eq("id", participant_id).execute()
    )
    if not response.data:
        raise ValueError(f"Participant {participant_id} not found")
    return Participant(**response.data[0])


def delete_participant(participant_id: str) -> None:
    supabase = get_supabase()
    supabase.table("participants").delete().eq("id", participant_id).execute()
    logger.info(f"Deleted participant {participant_id}")
