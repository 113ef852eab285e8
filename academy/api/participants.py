"""API endpoints for the caller's participant profile."""

from fastapi import APIRouter, Depends, HTTPException

from academy.core.auth_middleware import AuthContext, require_participant
from academy.core.logging import get_logger
from academy.core.schemas_participants import Participant, ParticipantUpdate
from academy.db.participants import delete_participant, update_participant
from academy.db.supabase_client import get_supabase

logger = get_logger(__name__)

router = APIRouter(prefix="/participants")


@router.get("/me", response_model=Participant)
async def get_me(
    auth: AuthContext = Depends(require_participant),  # noqa: B008
) -> Participant:
    return auth.participant


@router.patch("/me", response_model=Participant)
async def update_me(
    request: ParticipantUpdate,
    auth: AuthContext = Depends(require_participant),  # noqa: B008
) -> Participant:
    """
    Update role, team, stream, task force or notification preference.

    Raises:
        HTTPException 400: If the body sets no field
        HTTPException 404: If the participant row disappeared
    """
    updates = request.model_dump(mode="json", exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        participant = update_participant(auth.participant_id, updates)
    except ValueError as e:
        raise HTTPException(status_code=404, detail="Participant not found") from e

    logger.info(
        f"Participant profile updated: {sorted(updates)}",
        extra={"participant_id": auth.participant_id},
    )
    return participant


@router.delete("/me")
async def delete_me(
    auth: AuthContext = Depends(require_participant),  # noqa: B008
) -> dict:
    """Delete the caller's participant row and their auth user."""
    try:
        delete_participant(auth.participant_id)
        get_supabase().auth.admin.delete_user(auth.user_id)
    except Exception as e:
        logger.exception("Failed to delete account", extra={"participant_id": auth.participant_id})
        raise HTTPException(status_code=500, detail="Failed to delete account") from e

    return {"success": True}
