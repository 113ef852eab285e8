"""Live-session state transitions.

Pure helpers shared by the HTTP layer (which persists instructor moves) and
the realtime clients (which mirror them). There is one writer per session,
the instructor; last write wins.
"""

import secrets
import string
from typing import Any

from academy.core.schemas_live_session import (
    SECTION_ORDER,
    LiveSessionUpdate,
    SessionSection,
    SessionState,
)

DEFAULT_STATE = SessionState()

JOIN_CODE_LENGTH = 6
JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits

_WIRE_KEYS = {
    "currentStep": "current_step",
    "currentSection": "current_section",
    "isActive": "is_active",
}


def merge_state(previous: SessionState | None, payload: dict[str, Any]) -> SessionState:
    """
    Apply a (possibly partial) broadcast payload over the last known state.

    Missing keys fall back to the previous state, then to step 1 of the
    briefing with the session active.
    """
    base = (previous or DEFAULT_STATE).model_dump()
    for wire_key, field_name in _WIRE_KEYS.items():
        value = payload.get(wire_key, payload.get(field_name))
        if value is not None:
            base[field_name] = value
    return SessionState(**base)


def state_from_row(row: dict[str, Any]) -> SessionState:
    """Build a SessionState from a live_sessions row."""
    return SessionState(
        current_step=row.get("current_step") or 1,
        current_section=row.get("current_section") or SessionSection.BRIEFING,
        is_active=row.get("is_active", True),
    )


def apply_update(state: SessionState, update: LiveSessionUpdate) -> SessionState:
    """Resolve an instructor PATCH into the next state.

    An explicit step wins over a relative action; the step never drops below 1.
    """
    step = state.current_step
    if update.step is not None:
        step = update.step
    elif update.action == "next_step":
        step += 1
    elif update.action == "prev_step":
        step = max(1, step - 1)

    section = update.section or state.current_section
    return state.model_copy(update={"current_step": step, "current_section": section})


def section_progress(section: SessionSection) -> float:
    """Percentage of the session's sections reached at ``section``."""
    index = SECTION_ORDER.index(SessionSection(section))
    return (index + 1) / len(SECTION_ORDER) * 100


class StudentPosition:
    """A student's local view of a session.

    Mirrors the instructor while sync is on. Pausing, or navigating locally,
    lets the position diverge until the student resumes.
    """

    def __init__(self, initial: SessionState | None = None):
        initial = initial or DEFAULT_STATE
        self.instructor_state: SessionState | None = initial
        self.local_step = initial.current_step
        self.local_section = initial.current_section
        self.sync_paused = False

    def apply_instructor_state(self, state: SessionState) -> bool:
        """Record the instructor's state; returns True if the local view followed."""
        self.instructor_state = state
        if self.sync_paused:
            return False
        self.local_step = state.current_step
        self.local_section = state.current_section
        return True

    def pause(self) -> None:
        self.sync_paused = True

    def navigate(self, step: int | None = None, section: SessionSection | None = None) -> None:
        """Browse at the student's own pace. Implies a paused sync."""
        self.sync_paused = True
        if step is not None:
            self.local_step = max(1, step)
        if section is not None:
            self.local_section = SessionSection(section)

    def resume(self) -> None:
        """Rejoin the instructor, dropping any local divergence."""
        if self.instructor_state is not None:
            self.local_step = self.instructor_state.current_step
            self.local_section = self.instructor_state.current_section
        self.sync_paused = False

    def toggle_sync(self) -> bool:
        """Flip between paused and synced; returns the new paused flag."""
        if self.sync_paused:
            self.resume()
        else:
            self.pause()
        return self.sync_paused

    @property
    def is_out_of_sync(self) -> bool:
        if self.sync_paused:
            return True
        if self.instructor_state is None:
            return False
        return (
            self.local_step != self.instructor_state.current_step
            or self.local_section != self.instructor_state.current_section
        )

    @property
    def local_state(self) -> SessionState:
        is_active = self.instructor_state.is_active if self.instructor_state else True
        return SessionState(
            current_step=self.local_step,
            current_section=self.local_section,
            is_active=is_active,
        )


def generate_join_code(length: int = JOIN_CODE_LENGTH) -> str:
    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(length))
