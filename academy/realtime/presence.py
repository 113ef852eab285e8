"""Presence tracking on a per-context presence channel."""

import asyncio
import contextlib
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from academy.core.logging import get_logger
from academy.core.schemas_live_session import PresenceUser
from academy.realtime.channels import status_name

logger = get_logger(__name__)


def transform_presence_state(state: dict[str, list[dict[str, Any]]]) -> list[PresenceUser]:
    """
    Flatten a presence state into one entry per user.

    A user tracked from several tabs keeps the presence with the latest
    online_at. Users are ordered by when they joined.
    """
    users: dict[str, PresenceUser] = {}
    for presences in state.values():
        for raw in presences:
            try:
                presence = PresenceUser(**raw)
            except ValidationError:
                logger.debug(f"Skipping malformed presence: {raw}")
                continue
            existing = users.get(presence.id)
            if existing is None or presence.online_at > existing.online_at:
                users[presence.id] = presence

    return sorted(users.values(), key=lambda u: u.joined_at)


class PresenceTracker:
    """Tracks the local user on a presence channel and mirrors who is online."""

    def __init__(
        self,
        channel,
        user: dict[str, Any],
        heartbeat_interval: float = 5.0,
        on_user_join: Callable[[PresenceUser], None] | None = None,
        on_user_leave: Callable[[str], None] | None = None,
    ):
        self.channel = channel
        self.user = user
        self.heartbeat_interval = heartbeat_interval
        self.on_user_join = on_user_join
        self.on_user_leave = on_user_leave

        self.users: list[PresenceUser] = []
        self.is_connected = False
        self.error: str | None = None
        self.joined_at: str | None = None
        self._heartbeat_task: asyncio.Task | None = None

    @property
    def online_count(self) -> int:
        return len(self.users)

    def _presence(self) -> dict[str, Any]:
        return {
            "id": self.user["id"],
            "name": self.user["name"],
            "avatar_url": self.user.get("avatar_url"),
            "role": self.user.get("role"),
            "joined_at": self.joined_at,
            "online_at": datetime.now(UTC).isoformat(),
        }

    async def start(self) -> None:
        self.channel.on_presence_sync(self._handle_sync)
        self.channel.on_presence_join(self._handle_join)
        self.channel.on_presence_leave(self._handle_leave)
        await self.channel.subscribe(self._on_status)

    async def track(self) -> None:
        if self.joined_at is None:
            self.joined_at = datetime.now(UTC).isoformat()
        await self.channel.track(self._presence())

    async def stop(self) -> None:
        if self._heartbeat_task is not None:
            self._heartbeat_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._heartbeat_task
            self._heartbeat_task = None
        await self.channel.unsubscribe()
        self.is_connected = False

    async def _heartbeat_loop(self) -> None:
        while True:
            await asyncio.sleep(self.heartbeat_interval)
            try:
                await self.track()
            except Exception as e:
                logger.warning(f"Presence heartbeat failed: {e}")

    def _on_status(self, status: Any, err: Exception | None = None) -> None:
        name = status_name(status)
        if name == "SUBSCRIBED":
            self.is_connected = True
            self.error = None
            if self._heartbeat_task is None:
                # First track happens right away, then on every heartbeat
                self._heartbeat_task = asyncio.get_running_loop().create_task(self._track_forever())
        elif name == "CHANNEL_ERROR":
            self.is_connected = False
            self.error = "Connection error"
        elif name == "TIMED_OUT":
            self.is_connected = False
            self.error = "Connection timed out"

    async def _track_forever(self) -> None:
        try:
            await self.track()
        except Exception as e:
            logger.warning(f"Presence track failed: {e}")
        await self._heartbeat_loop()

    def _handle_sync(self) -> None:
        self.users = transform_presence_state(self.channel.presence_state())

    def _handle_join(self, key: str, current: Any, new_presences: list[dict[str, Any]]) -> None:
        if not self.on_user_join:
            return
        for raw in new_presences:
            with contextlib.suppress(ValidationError):
                self.on_user_join(PresenceUser(**raw))

    def _handle_leave(self, key: str, current: Any, left_presences: list[dict[str, Any]]) -> None:
        if not self.on_user_leave:
            return
        for raw in left_presences:
            if raw.get("id"):
                self.on_user_leave(raw["id"])
