"""Database operations for mission_days table."""

from academy.db.supabase_client import get_supabase


def get_mission_day_content(day: int) -> dict | None:
    """Briefing and resources text stored for a program day."""
    supabase = get_supabase()
    response = (
        supabase.table("mission_days")
        .select("briefing_content, resources_content")
        .eq("day", day)
        .maybe_single()
        .execute()
    )
    if not response or not response.data:
        return None
    return response.data
