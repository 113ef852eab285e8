"""Database operations for submissions table."""

from datetime import datetime

from academy.db.supabase_client import get_supabase


def list_submissions_between(start: datetime, end: datetime) -> list[dict]:
    """Submission timestamps (participant_id, submitted_at) inside a window."""
    supabase = get_supabase()
    response = (
        supabase.table("submissions")
        .select("participant_id, submitted_at")
        .gte("submitted_at", start.isoformat())
        .lte("submitted_at", end.isoformat())
        .execute()
    )
    return response.data or []
