"""API endpoints for the caller's mastery level."""

from fastapi import APIRouter, Depends, HTTPException

from academy.core.auth_middleware import AuthContext, require_participant
from academy.core.logging import get_logger
from academy.core.mastery import get_mastery_progress
from academy.core.schemas_mastery import MasteryCheckResponse, MasteryStatusResponse
from academy.db.mastery import get_mastery
from academy.services.mastery_sweep import check_participant_level_up

logger = get_logger(__name__)

router = APIRouter(prefix="/mastery")


@router.get("/me", response_model=MasteryStatusResponse)
async def get_my_mastery(
    auth: AuthContext = Depends(require_participant),  # noqa: B008
) -> MasteryStatusResponse:
    record = get_mastery(auth.participant_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Mastery record not found")
    return MasteryStatusResponse(mastery=record, progress=get_mastery_progress(record))


@router.post("/me/check", response_model=MasteryCheckResponse)
async def check_my_mastery(
    auth: AuthContext = Depends(require_participant),  # noqa: B008
) -> MasteryCheckResponse:
    """Apply a level-up right away instead of waiting for the nightly sweep."""
    try:
        result = check_participant_level_up(auth.participant_id)
    except Exception as e:
        logger.exception(
            "Mastery check failed", extra={"participant_id": auth.participant_id}
        )
        raise HTTPException(status_code=500, detail="Failed to check mastery") from e

    if result is None:
        raise HTTPException(status_code=404, detail="Mastery record not found")
    return result
