"""Database operations for the leaderboard view."""

from academy.core.schemas_leaderboard import LeaderboardEntry
from academy.db.supabase_client import get_supabase


def list_leaderboard() -> list[LeaderboardEntry]:
    supabase = get_supabase()
    response = (
        supabase.table("leaderboard").select("*").order("total_points", desc=True).execute()
    )
    return [LeaderboardEntry(**row) for row in response.data or []]


def list_participants_with_streak(min_streak: int) -> list[str]:
    supabase = get_supabase()
    response = (
        supabase.table("leaderboard")
        .select("participant_id, current_streak")
        .gte("current_streak", min_streak)
        .execute()
    )
    return [row["participant_id"] for row in response.data or []]


def list_participants_with_peer_assists(min_assists: int) -> list[str]:
    supabase = get_supabase()
    response = (
        supabase.table("participant_mastery")
        .select("participant_id, peer_assists_given")
        .gte("peer_assists_given", min_assists)
        .execute()
    )
    return [row["participant_id"] for row in response.data or []]
