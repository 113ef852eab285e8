"""Live-session sync over a broadcast channel.

One instructor publishes ``state_update`` messages; students mirror them
unless they pause sync. Lifecycle::

    NOT_CONNECTED -> SUBSCRIBED -> RECEIVING -> ENDED

Reconnection is left to the channel's own retry. A missed broadcast leaves
students on stale state until the next one arrives. Heartbeats only signal
liveness and are never used to reconcile state.
"""

import asyncio
import contextlib
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Literal

from pydantic import ValidationError

from academy.core.live_session import StudentPosition, merge_state
from academy.core.logging import get_logger
from academy.core.schemas_live_session import SessionParticipant, SessionSection, SessionState
from academy.realtime.channels import BroadcastChannel, broadcast_payload, status_name

logger = get_logger(__name__)

STATE_UPDATE = "state_update"
SESSION_END = "session_end"
PARTICIPANT_JOIN = "participant_join"
PARTICIPANT_LEAVE = "participant_leave"
HEARTBEAT = "heartbeat"

StateLoader = Callable[[], Awaitable[SessionState | None]]
ParticipantsLoader = Callable[[], Awaitable[list[SessionParticipant]]]


class SyncStatus(str, Enum):
    NOT_CONNECTED = "not_connected"
    SUBSCRIBED = "subscribed"
    RECEIVING = "receiving"
    ENDED = "ended"


class LiveSessionSync:
    """Shared channel handling for instructor and student clients."""

    is_instructor = False

    def __init__(
        self,
        channel: BroadcastChannel,
        code: str,
        state_loader: StateLoader | None = None,
        participants_loader: ParticipantsLoader | None = None,
        heartbeat_interval: float = 5.0,
        subscribe_timeout: float = 10.0,
        on_state_change: Callable[[SessionState], None] | None = None,
        on_session_end: Callable[[], None] | None = None,
        on_participant_join: Callable[[SessionParticipant], None] | None = None,
        on_participant_leave: Callable[[str], None] | None = None,
    ):
        self.channel = channel
        self.code = code.upper()
        self.state_loader = state_loader
        self.participants_loader = participants_loader
        self.heartbeat_interval = heartbeat_interval
        self.subscribe_timeout = subscribe_timeout
        self.on_state_change = on_state_change
        self.on_session_end = on_session_end
        self.on_participant_join = on_participant_join
        self.on_participant_leave = on_participant_leave

        self.status = SyncStatus.NOT_CONNECTED
        self.session_state: SessionState | None = None
        self.participants: list[SessionParticipant] = []
        self.is_connected = False
        self.error: str | None = None
        self.last_instructor_heartbeat: float | None = None

        self._subscribe_settled = asyncio.Event()
        self._heartbeat_task: asyncio.Task | None = None

    # -- lifecycle -----------------------------------------------------------

    async def connect(self) -> bool:
        """
        Subscribe, load the current state and start heartbeating.

        Returns:
            False if the channel reported an error or did not confirm the
            subscription in time; ``error`` holds the reason
        """
        self.channel.on_broadcast(STATE_UPDATE, self._handle_state_update)
        self.channel.on_broadcast(SESSION_END, self._handle_session_end)
        self.channel.on_broadcast(PARTICIPANT_JOIN, self._handle_participant_join)
        self.channel.on_broadcast(PARTICIPANT_LEAVE, self._handle_participant_leave)
        self.channel.on_broadcast(HEARTBEAT, self._handle_heartbeat)

        await self.channel.subscribe(self._on_status)
        try:
            await asyncio.wait_for(self._subscribe_settled.wait(), timeout=self.subscribe_timeout)
        except asyncio.TimeoutError:
            self.is_connected = False
            self.error = "Connection timed out"
            logger.warning(f"Live session {self.code}: subscribe timed out")
            return False
        if not self.is_connected:
            logger.warning(f"Live session {self.code}: subscribe failed: {self.error}")
            return False

        if self.state_loader is not None:
            try:
                state = await self.state_loader()
            except Exception as e:
                self.error = "Failed to load session"
                logger.warning(f"Live session {self.code}: failed to load state: {e}")
                state = None
            if state is not None:
                self.session_state = state
                self._on_state(state)
                if not state.is_active:
                    self._end()

        if self.participants_loader is not None:
            try:
                self.participants = list(await self.participants_loader())
            except Exception as e:
                logger.warning(f"Live session {self.code}: failed to load participants: {e}")

        if self.heartbeat_interval > 0 and self._heartbeat_task is None:
            self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())
        return True

    async def close(self) -> None:
        """Stop heartbeating and leave the channel."""
        if self._heartbeat_task is not None:
            self._heartbeat_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._heartbeat_task
            self._heartbeat_task = None
        await self.channel.unsubscribe()
        self.is_connected = False

    async def send_heartbeat(self) -> None:
        await self.channel.send_broadcast(
            HEARTBEAT,
            {"timestamp": int(time.time() * 1000), "isInstructor": self.is_instructor},
        )

    async def _heartbeat_loop(self) -> None:
        while True:
            await asyncio.sleep(self.heartbeat_interval)
            try:
                await self.send_heartbeat()
            except Exception as e:
                logger.warning(f"Live session {self.code}: heartbeat failed: {e}")

    # -- channel callbacks ---------------------------------------------------

    def _on_status(self, status: Any, err: Exception | None = None) -> None:
        name = status_name(status)
        if name == "SUBSCRIBED":
            self.is_connected = True
            self.error = None
            if self.status == SyncStatus.NOT_CONNECTED:
                self.status = SyncStatus.SUBSCRIBED
            self._subscribe_settled.set()
        elif name == "CHANNEL_ERROR":
            self.is_connected = False
            self.error = "Connection error"
            logger.warning(f"Live session {self.code}: channel error: {err}")
            self._subscribe_settled.set()
        elif name == "TIMED_OUT":
            self.is_connected = False
            self.error = "Connection timed out"
            self._subscribe_settled.set()

    def _handle_state_update(self, message: dict[str, Any]) -> None:
        if self.status == SyncStatus.ENDED:
            return
        try:
            state = merge_state(self.session_state, broadcast_payload(message))
        except ValidationError as e:
            logger.warning(f"Live session {self.code}: ignoring malformed state update: {e}")
            return

        self.session_state = state
        self.status = SyncStatus.RECEIVING
        self._on_state(state)
        if self.on_state_change:
            self.on_state_change(state)
        if not state.is_active:
            self._end()

    def _handle_session_end(self, message: dict[str, Any]) -> None:
        if self.session_state is not None:
            self.session_state = self.session_state.model_copy(update={"is_active": False})
        self._end()

    def _handle_participant_join(self, message: dict[str, Any]) -> None:
        try:
            participant = SessionParticipant(**broadcast_payload(message))
        except ValidationError:
            logger.debug(f"Live session {self.code}: malformed participant_join")
            return
        if any(p.id == participant.id for p in self.participants):
            return
        self.participants.append(participant)
        if self.on_participant_join:
            self.on_participant_join(participant)

    def _handle_participant_leave(self, message: dict[str, Any]) -> None:
        participant_id = broadcast_payload(message).get("id")
        if participant_id is None:
            return
        self.participants = [p for p in self.participants if p.id != participant_id]
        if self.on_participant_leave:
            self.on_participant_leave(participant_id)

    def _handle_heartbeat(self, message: dict[str, Any]) -> None:
        payload = broadcast_payload(message)
        if payload.get("isInstructor") and not self.is_instructor:
            self.is_connected = True
            self.last_instructor_heartbeat = time.monotonic()

    # -- hooks ---------------------------------------------------------------

    def _on_state(self, state: SessionState) -> None:
        """Called whenever a new instructor state is known."""

    def _end(self) -> None:
        if self.status == SyncStatus.ENDED:
            return
        self.status = SyncStatus.ENDED
        logger.info(f"Live session {self.code} ended")
        if self.on_session_end:
            self.on_session_end()


class InstructorSync(LiveSessionSync):
    """The single writer of a session's state."""

    is_instructor = True

    async def send_state_update(
        self,
        current_step: int | None = None,
        current_section: SessionSection | str | None = None,
        is_active: bool | None = None,
    ) -> SessionState:
        """Broadcast a (partial) state update and apply it locally."""
        payload: dict[str, Any] = {}
        if current_step is not None:
            payload["currentStep"] = current_step
        if current_section is not None:
            payload["currentSection"] = SessionSection(current_section).value
        if is_active is not None:
            payload["isActive"] = is_active

        state = merge_state(self.session_state, payload)
        await self.channel.send_broadcast(STATE_UPDATE, payload)
        self.session_state = state
        if self.status != SyncStatus.ENDED:
            self.status = SyncStatus.RECEIVING
        return state

    async def advance(self, action: Literal["next", "prev"] | int) -> SessionState:
        """Move to the next/previous step or jump to an explicit one."""
        current = self.session_state.current_step if self.session_state else 1
        if isinstance(action, int):
            step = max(1, action)
        elif action == "next":
            step = current + 1
        else:
            step = max(1, current - 1)
        return await self.send_state_update(current_step=step)

    async def set_section(self, section: SessionSection | str) -> SessionState:
        return await self.send_state_update(current_section=section)

    async def end_session(self) -> None:
        """Force-end the session for every follower."""
        await self.channel.send_broadcast(SESSION_END, {})
        if self.session_state is not None:
            self.session_state = self.session_state.model_copy(update={"is_active": False})
        self._end()


class StudentSync(LiveSessionSync):
    """A follower that mirrors the instructor unless sync is paused."""

    def __init__(self, channel: BroadcastChannel, code: str, **kwargs: Any):
        super().__init__(channel, code, **kwargs)
        self.position = StudentPosition()

    def _on_state(self, state: SessionState) -> None:
        self.position.apply_instructor_state(state)

    def pause(self) -> None:
        self.position.pause()

    def resume(self) -> SessionState:
        """Rejoin the instructor's current position."""
        self.position.resume()
        return self.position.local_state

    def navigate(self, step: int | None = None, section: SessionSection | None = None) -> None:
        self.position.navigate(step=step, section=section)

    @property
    def is_out_of_sync(self) -> bool:
        return self.position.is_out_of_sync
