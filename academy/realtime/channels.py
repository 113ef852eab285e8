"""Supabase realtime channel helpers.

Channel objects returned here are supabase ``AsyncRealtimeChannel`` instances;
the sync classes only rely on the small ``BroadcastChannel`` surface below, so
tests can drive them with an in-memory channel.
"""

from collections.abc import Callable
from typing import Any, Protocol

from supabase import AsyncClient, acreate_client

from academy.core.config import get_settings

INTEL_RELEASES_TOPIC = "intel-releases"
LEADERBOARD_TOPIC = "leaderboard-changes"

_client: AsyncClient | None = None


class BroadcastChannel(Protocol):
    def on_broadcast(self, event: str, callback: Callable[[dict[str, Any]], None]) -> Any: ...

    async def subscribe(self, callback: Callable[..., None] | None = None) -> Any: ...

    async def send_broadcast(self, event: str, data: Any) -> None: ...

    async def unsubscribe(self) -> None: ...


def live_session_topic(code: str) -> str:
    return f"live-session-{code.upper()}"


def presence_topic(code: str) -> str:
    return f"presence-session-{code.upper()}"


def broadcast_payload(message: Any) -> dict[str, Any]:
    """Unwrap the user payload from a broadcast message envelope."""
    if isinstance(message, dict) and "event" in message and "payload" in message:
        return message.get("payload") or {}
    return message or {}


def change_records(message: Any) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Extract (new row, old row) from a postgres change message.

    Accepts both the realtime server envelope (``data.record`` /
    ``data.old_record``) and the flattened ``new`` / ``old`` shape.
    """
    if not isinstance(message, dict):
        return {}, {}
    data = message.get("data")
    if isinstance(data, dict):
        return data.get("record") or {}, data.get("old_record") or {}
    return message.get("new") or {}, message.get("old") or {}


def status_name(status: Any) -> str:
    """Normalize a subscribe status (enum or string) to its name."""
    return str(getattr(status, "value", status))


async def get_realtime_client() -> AsyncClient:
    """Shared async Supabase client for realtime channels."""
    global _client
    if _client is None:
        settings = get_settings()
        key = settings.SUPABASE_ANON_KEY or settings.SUPABASE_SERVICE_ROLE_KEY
        _client = await acreate_client(settings.SUPABASE_URL, key)
    return _client


async def open_channel(topic: str, presence_key: str = "", ack: bool = True):
    """Create (not yet subscribed) a realtime channel for a topic."""
    client = await get_realtime_client()
    return client.channel(
        topic,
        {
            "config": {
                "broadcast": {"ack": ack, "self": False},
                "presence": {"key": presence_key},
            }
        },
    )
