"""Database operations for live_sessions and live_session_participants."""

from datetime import UTC, datetime
from typing import Any

from academy.core.logging import get_logger
from academy.core.schemas_live_session import SessionParticipant, SessionState
from academy.db.supabase_client import get_supabase

logger = get_logger(__name__)


def create_live_session(instructor_id: str, mission_day_id: int, join_code: str) -> dict:
    supabase = get_supabase()
    response = (
        supabase.table("live_sessions")
        .insert(
            {
                "instructor_id": instructor_id,
                "mission_day_id": mission_day_id,
                "join_code": join_code,
                "current_step": 1,
                "current_section": "briefing",
                "is_active": True,
            }
        )
        .execute()
    )
    if not response.data:
        raise ValueError("No data returned from live session insert")
    return response.data[0]


def join_code_exists(join_code: str) -> bool:
    """Codes are never reused, ended sessions included."""
    supabase = get_supabase()
    response = (
        supabase.table("live_sessions")
        .select("id")
        .eq("join_code", join_code.upper())
        .limit(1)
        .execute()
    )
    return bool(response.data)


def get_live_session_by_code(join_code: str, active_only: bool = False) -> dict | None:
    supabase = get_supabase()
    query = supabase.table("live_sessions").select("*").eq("join_code", join_code.upper())
    if active_only:
        query = query.eq("is_active", True)
    # Latest session wins for codes issued before codes were unique
    response = query.order("started_at", desc=True).limit(1).maybe_single().execute()
    if not response or not response.data:
        return None
    return response.data


def update_session_state(session_id: str, state: SessionState) -> dict:
    supabase = get_supabase()
    row: dict[str, Any] = {
        "current_step": state.current_step,
        "current_section": state.current_section.value,
        "is_active": state.is_active,
    }
    if not state.is_active:
        row["ended_at"] = datetime.now(UTC).isoformat()

    response = supabase.table("live_sessions").update(row).eq("id", session_id).execute()
    if not response.data:
        raise ValueError(f"Live session {session_id} not found")
    return response.data[0]


def list_session_participants(session_id: str) -> list[SessionParticipant]:
    supabase = get_supabase()
    response = (
        supabase.table("live_session_participants")
        .select("joined_at, participants(id, name, avatar_url, role)")
        .eq("session_id", session_id)
        .order("joined_at")
        .execute()
    )
    participants = []
    for row in response.data or []:
        participant = row.get("participants") or {}
        if not participant.get("id"):
            continue
        participants.append(
            SessionParticipant(
                id=participant["id"],
                name=participant.get("name") or "Unknown",
                avatar_url=participant.get("avatar_url"),
                role=participant.get("role"),
                joined_at=row.get("joined_at"),
            )
        )
    return participants


def add_session_participant(session_id: str, participant_id: str) -> None:
    """Register a participant in a session. Re-joining is a no-op."""
    supabase = get_supabase()
    supabase.table("live_session_participants").upsert(
        {"session_id": session_id, "participant_id": participant_id},
        on_conflict="session_id,participant_id",
        ignore_duplicates=True,
    ).execute()
