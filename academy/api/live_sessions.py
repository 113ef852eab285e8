"""API endpoints for instructor-led live sessions.

The instructor is the only writer of a session's state. Every accepted
change is persisted first and then broadcast on the session topic, so a
reconnecting student can always reload the authoritative row.
"""

from fastapi import APIRouter, Depends, HTTPException

from academy.core.auth_middleware import (
    AuthContext,
    require_admin,
    require_auth,
    require_participant,
)
from academy.core.live_session import apply_update, generate_join_code, state_from_row
from academy.core.logging import get_logger
from academy.core.schemas_live_session import (
    LiveSessionCreate,
    LiveSessionResponse,
    LiveSessionUpdate,
    ParticipantsResponse,
)
from academy.db.live_sessions import (
    add_session_participant,
    create_live_session,
    get_live_session_by_code,
    join_code_exists,
    list_session_participants,
    update_session_state,
)
from academy.realtime.channels import live_session_topic
from academy.realtime.live_session import PARTICIPANT_JOIN, SESSION_END, STATE_UPDATE
from academy.services.realtime_broadcast import broadcast

logger = get_logger(__name__)

router = APIRouter(prefix="/live-sessions")

MAX_CODE_ATTEMPTS = 5


def _load_session(code: str, active_only: bool = False) -> dict:
    session = get_live_session_by_code(code, active_only=active_only)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _require_owner(session: dict, auth: AuthContext) -> None:
    if session.get("instructor_id") != auth.participant_id:
        raise HTTPException(
            status_code=403, detail="Only the session instructor can control this session"
        )


@router.post("", response_model=LiveSessionResponse, status_code=201)
async def create_session(
    request: LiveSessionCreate,
    auth: AuthContext = Depends(require_admin),  # noqa: B008
) -> LiveSessionResponse:
    """
    Start a live session for a mission day.

    Raises:
        HTTPException 500: If no unused join code could be generated or the
            insert failed
    """
    join_code = None
    for _ in range(MAX_CODE_ATTEMPTS):
        candidate = generate_join_code()
        if not join_code_exists(candidate):
            join_code = candidate
            break
    if join_code is None:
        logger.error("Could not generate an unused join code")
        raise HTTPException(status_code=500, detail="Failed to create session")

    try:
        row = create_live_session(auth.participant_id, request.mission_day_id, join_code)
    except Exception as e:
        logger.exception("Failed to create live session")
        raise HTTPException(status_code=500, detail="Failed to create session") from e

    logger.info(
        f"Live session {join_code} started for day {request.mission_day_id}",
        extra={"participant_id": auth.participant_id, "join_code": join_code},
    )
    return LiveSessionResponse(**row)


@router.get("/{code}", response_model=LiveSessionResponse)
async def get_session(
    code: str,
    auth: AuthContext = Depends(require_auth),  # noqa: B008
) -> LiveSessionResponse:
    return LiveSessionResponse(**_load_session(code))


@router.patch("/{code}", response_model=LiveSessionResponse)
async def update_session(
    code: str,
    request: LiveSessionUpdate,
    auth: AuthContext = Depends(require_admin),  # noqa: B008
) -> LiveSessionResponse:
    """
    Move the session to a new step or section and notify followers.

    Raises:
        HTTPException 404: If the session does not exist or has ended
        HTTPException 403: If the caller is not the session's instructor
    """
    session = _load_session(code, active_only=True)
    _require_owner(session, auth)

    new_state = apply_update(state_from_row(session), request)
    try:
        row = update_session_state(session["id"], new_state)
    except Exception as e:
        logger.exception(f"Failed to update live session {code}")
        raise HTTPException(status_code=500, detail="Failed to update session") from e

    await broadcast(live_session_topic(code), STATE_UPDATE, new_state.to_broadcast())
    return LiveSessionResponse(**row)


@router.delete("/{code}")
async def end_session(
    code: str,
    auth: AuthContext = Depends(require_admin),  # noqa: B008
) -> dict:
    """End the session and force followers into the ended state."""
    session = _load_session(code, active_only=True)
    _require_owner(session, auth)

    ended = state_from_row(session).model_copy(update={"is_active": False})
    try:
        update_session_state(session["id"], ended)
    except Exception as e:
        logger.exception(f"Failed to end live session {code}")
        raise HTTPException(status_code=500, detail="Failed to end session") from e

    await broadcast(live_session_topic(code), SESSION_END, {})
    logger.info("Live session ended by instructor", extra={"join_code": code.upper()})
    return {"success": True}


@router.get("/{code}/participants", response_model=ParticipantsResponse)
async def get_participants(
    code: str,
    auth: AuthContext = Depends(require_auth),  # noqa: B008
) -> ParticipantsResponse:
    session = _load_session(code)
    return ParticipantsResponse(participants=list_session_participants(session["id"]))


@router.post("/{code}/participants")
async def join_session(
    code: str,
    auth: AuthContext = Depends(require_participant),  # noqa: B008
) -> dict:
    """Register the caller in an active session and announce the join."""
    session = _load_session(code, active_only=True)
    participant = auth.participant

    try:
        add_session_participant(session["id"], participant.id)
    except Exception as e:
        logger.exception(f"Failed to join live session {code}")
        raise HTTPException(status_code=500, detail="Failed to join session") from e

    await broadcast(
        live_session_topic(code),
        PARTICIPANT_JOIN,
        {
            "id": participant.id,
            "name": participant.name,
            "avatar_url": participant.avatar_url,
            "role": participant.role,
        },
    )
    return {"success": True, "session_id": session["id"]}
