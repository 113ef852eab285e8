"""Client-side listener for intel release broadcasts."""

from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from academy.core.intel import affects_task_force
from academy.core.logging import get_logger
from academy.core.schemas_intel import IntelDrop
from academy.realtime.channels import broadcast_payload

logger = get_logger(__name__)

NEW_INTEL = "new_intel"


class IntelReleaseListener:
    """Delivers released intel drops that target the listener's task force."""

    def __init__(
        self,
        channel,
        task_force: str | None,
        on_new_intel: Callable[[IntelDrop], None],
    ):
        self.channel = channel
        self.task_force = task_force
        self.on_new_intel = on_new_intel

    async def start(self) -> None:
        self.channel.on_broadcast(NEW_INTEL, self._handle_release)
        await self.channel.subscribe()

    async def stop(self) -> None:
        await self.channel.unsubscribe()

    def _handle_release(self, message: dict[str, Any]) -> None:
        released = broadcast_payload(message).get("released")
        if not isinstance(released, list):
            return
        for raw in released:
            try:
                intel = IntelDrop(**raw)
            except ValidationError:
                logger.debug(f"Skipping malformed intel payload: {raw}")
                continue
            if affects_task_force(intel, self.task_force):
                self.on_new_intel(intel)
