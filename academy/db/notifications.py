"""Database operations for notifications table."""

from academy.core.logging import get_logger
from academy.db.supabase_client import get_supabase

logger = get_logger(__name__)


def create_notification(
    participant_id: str,
    type: str,
    title: str,
    body: str | None = None,
    metadata: dict | None = None,
) -> dict:
    """Create a new in-app notification for a participant."""
    supabase = get_supabase()
    row: dict = {
        "participant_id": participant_id,
        "type": type,
        "title": title,
    }
    if body:
        row["body"] = body
    if metadata:
        row["metadata"] = metadata

    result = supabase.table("notifications").insert(row).execute()
    if not result.data:
        raise ValueError("No data returned from notification insert")
    return result.data[0]
