"""Database operations for intel_drops table."""

from datetime import UTC, datetime
from typing import Any

from academy.core.schemas_intel import IntelDrop
from academy.db.supabase_client import get_supabase


def list_intel_drops(released_only: bool = False) -> list[IntelDrop]:
    """List intel drops ordered by program day."""
    supabase = get_supabase()
    query = supabase.table("intel_drops").select("*").order("day")
    if released_only:
        query = query.eq("is_released", True)
    response = query.execute()
    return [IntelDrop(**row) for row in response.data or []]


def get_intel_drop(intel_id: str) -> IntelDrop | None:
    supabase = get_supabase()
    response = (
        supabase.table("intel_drops").select("*").eq("id", intel_id).maybe_single().execute()
    )
    if not response or not response.data:
        return None
    return IntelDrop(**response.data)


def release_intel_drop(intel_id: str) -> IntelDrop:
    """
    Mark an intel drop as released now.

    Raises:
        ValueError: If the drop does not exist
    """
    supabase = get_supabase()
    response = (
        supabase.table("intel_drops")
        .update({"is_released": True, "released_at": datetime.now(UTC).isoformat()})
        .eq("id", intel_id)
        .execute()
    )
    if not response.data:
        raise ValueError(f"Intel drop {intel_id} not found")
    return IntelDrop(**response.data[0])


def update_intel_drop(intel_id: str, updates: dict[str, Any]) -> IntelDrop:
    supabase = get_supabase()
    response = supabase.table("intel_drops").update(updates).eq("id", intel_id).execute()
    if not response.data:
        raise ValueError(f"Intel drop {intel_id} not found")
    return IntelDrop(**response.data[0])


def list_released_since(since: datetime) -> list[IntelDrop]:
    supabase = get_supabase()
    response = (
        supabase.table("intel_drops")
        .select("*")
        .eq("is_released", True)
        .gte("released_at", since.isoformat())
        .execute()
    )
    return [IntelDrop(**row) for row in response.data or []]
