"""Live leaderboard standings fed by postgres changes on the leaderboard table."""

from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from academy.core.leaderboard import (
    insert_entry,
    merge_delta_update,
    remove_entry,
    track_position_changes,
)
from academy.core.logging import get_logger
from academy.core.schemas_leaderboard import LeaderboardEntry, PositionChange
from academy.realtime.channels import change_records

logger = get_logger(__name__)

LEADERBOARD_TABLE = "leaderboard"


class LeaderboardListener:
    """
    Keeps a ranked copy of the leaderboard current.

    Updates are merged as deltas and reranked; the rank moves they cause are
    reported alongside the new standings. Inserts and deletes rerank without
    reporting moves.
    """

    def __init__(
        self,
        channel,
        entries: list[LeaderboardEntry] | None = None,
        on_change: Callable[[list[LeaderboardEntry], dict[str, PositionChange]], None] | None = None,
    ):
        self.channel = channel
        self.entries: list[LeaderboardEntry] = list(entries or [])
        self.on_change = on_change
        self.position_changes: dict[str, PositionChange] = {}

    async def start(self) -> None:
        for event, handler in (
            ("UPDATE", self._handle_update),
            ("INSERT", self._handle_insert),
            ("DELETE", self._handle_delete),
        ):
            self.channel.on_postgres_changes(event, handler, table=LEADERBOARD_TABLE, schema="public")
        await self.channel.subscribe()

    async def stop(self) -> None:
        await self.channel.unsubscribe()

    def _publish(self, entries: list[LeaderboardEntry], changes: dict[str, PositionChange]) -> None:
        self.entries = entries
        self.position_changes = changes
        if self.on_change:
            self.on_change(entries, changes)

    def _handle_update(self, message: dict[str, Any]) -> None:
        new, _ = change_records(message)
        if not new.get("github_username"):
            return
        previous = self.entries
        current = merge_delta_update(previous, new)
        self._publish(current, track_position_changes(previous, current))

    def _handle_insert(self, message: dict[str, Any]) -> None:
        new, _ = change_records(message)
        try:
            entry = LeaderboardEntry(**new)
        except ValidationError:
            logger.debug(f"Skipping malformed leaderboard row: {new}")
            return
        current = insert_entry(self.entries, entry)
        if current is not self.entries:
            self._publish(current, {})

    def _handle_delete(self, message: dict[str, Any]) -> None:
        _, old = change_records(message)
        username = old.get("github_username")
        if not username:
            return
        self._publish(remove_entry(self.entries, username), {})
