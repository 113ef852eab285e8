"""Server-side realtime broadcasts through the Supabase Realtime HTTP API.

Lets request handlers publish on a channel without holding a websocket.
"""

from typing import Any

import httpx

from academy.core.config import get_settings
from academy.core.logging import get_logger

logger = get_logger(__name__)


async def broadcast(topic: str, event: str, payload: dict[str, Any]) -> bool:
    """
    Publish one broadcast message.

    Broadcasts are best effort: failures are logged and reported as False so
    the caller's database write still stands.
    """
    settings = get_settings()
    url = f"{settings.SUPABASE_URL.rstrip('/')}/realtime/v1/api/broadcast"
    headers = {
        "apikey": settings.SUPABASE_SERVICE_ROLE_KEY,
        "Authorization": f"Bearer {settings.SUPABASE_SERVICE_ROLE_KEY}",
        "Content-Type": "application/json",
    }
    body = {"messages": [{"topic": topic, "event": event, "payload": payload}]}

    try:
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.post(url, headers=headers, json=body)
            resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Broadcast {event} on {topic} failed: {e}")
        return False

    logger.debug(f"Broadcast {event} on {topic}")
    return True
