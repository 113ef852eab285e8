"""Day briefing content endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from academy.core.auth_middleware import AuthContext, optional_auth, require_admin
from academy.core.config import get_settings
from academy.core.logging import get_logger
from academy.core.schemas_content import DayContent
from academy.services.content_service import get_content_cache, get_day_content

logger = get_logger(__name__)

router = APIRouter(prefix="/content")


@router.get("/day/{day_id}", response_model=DayContent)
async def get_content_for_day(
    day_id: str,
    auth: Optional[AuthContext] = Depends(optional_auth),  # noqa: B008
) -> DayContent:
    """
    Resolve the briefing content for a program day.

    Mentor notes are only included for admins.

    Raises:
        HTTPException 400: If the day is not a valid program day
        HTTPException 404: If no source has content for the day
    """
    length = get_settings().PROGRAM_LENGTH_DAYS
    try:
        day = int(day_id)
    except ValueError:
        day = 0
    if day < 1 or day > length:
        raise HTTPException(
            status_code=400, detail=f"Invalid day. Must be between 1 and {length}."
        )

    is_admin = bool(auth and auth.is_admin)
    content = await get_day_content(day, is_admin)
    if content is None:
        raise HTTPException(status_code=404, detail="Content not found for this day.")
    return content


@router.delete("/cache")
async def clear_content_cache(
    auth: AuthContext = Depends(require_admin),  # noqa: B008
) -> dict:
    """Drop every cached day so the next lookup re-reads the sources."""
    cleared = get_content_cache().clear()
    logger.info(f"Content cache cleared by {auth.participant_id}: {cleared} entries")
    return {"cleared": cleared}
