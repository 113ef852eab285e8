"""API endpoints for intel drops.

Admins see and manage every drop. Participants only see released drops
that target their task force or nobody in particular.
"""

from datetime import UTC, datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from academy.core.auth_middleware import AuthContext, require_admin, require_participant
from academy.core.intel import affects_task_force, filter_intel_drops, intel_stats, normalize_update
from academy.core.logging import get_logger
from academy.core.schemas_intel import (
    IntelClassification,
    IntelDrop,
    IntelDropUpdate,
    IntelStats,
    IntelTab,
    UnreadCountResponse,
)
from academy.db.intel_drops import (
    get_intel_drop,
    list_intel_drops,
    list_released_since,
    release_intel_drop,
    update_intel_drop,
)
from academy.realtime.channels import INTEL_RELEASES_TOPIC
from academy.realtime.intel import NEW_INTEL
from academy.services.realtime_broadcast import broadcast

logger = get_logger(__name__)

router = APIRouter(prefix="/intel")

UNREAD_WINDOW = timedelta(hours=24)


@router.get("", response_model=list[IntelDrop])
async def list_intel(
    tab: IntelTab = Query("all"),
    search: Optional[str] = Query(None),
    day: Optional[int] = Query(None, ge=1),
    classification: Optional[IntelClassification] = Query(None),
    auth: AuthContext = Depends(require_participant),  # noqa: B008
) -> list[IntelDrop]:
    """List intel drops visible to the caller, ordered by day."""
    if auth.is_admin:
        drops = list_intel_drops()
    else:
        tab = "released"
        drops = [d for d in list_intel_drops(released_only=True) if affects_task_force(d, auth.task_force)]

    return filter_intel_drops(drops, tab=tab, search=search, day=day, classification=classification)


@router.get("/stats", response_model=IntelStats)
async def get_intel_stats(
    auth: AuthContext = Depends(require_admin),  # noqa: B008
) -> IntelStats:
    return intel_stats(list_intel_drops())


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    auth: AuthContext = Depends(require_participant),  # noqa: B008
) -> UnreadCountResponse:
    """Count drops released to the caller's task force in the last 24 hours."""
    since = datetime.now(UTC) - UNREAD_WINDOW
    recent = list_released_since(since)
    return UnreadCountResponse(
        count=sum(1 for d in recent if affects_task_force(d, auth.task_force))
    )


@router.post("/{intel_id}/release", response_model=IntelDrop)
async def release_intel(
    intel_id: str,
    auth: AuthContext = Depends(require_admin),  # noqa: B008
) -> IntelDrop:
    """
    Release an intel drop and push it to subscribed clients.

    Releasing an already released drop returns it unchanged without a
    second broadcast.

    Raises:
        HTTPException 404: If the drop does not exist
    """
    existing = get_intel_drop(intel_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Intel drop not found")
    if existing.is_released:
        return existing

    try:
        released = release_intel_drop(intel_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail="Intel drop not found") from e

    await broadcast(
        INTEL_RELEASES_TOPIC, NEW_INTEL, {"released": [released.model_dump(mode="json")]}
    )
    logger.info(
        "Intel drop released",
        extra={"participant_id": auth.participant_id, "intel_id": intel_id},
    )
    return released


@router.patch("/{intel_id}", response_model=IntelDrop)
async def update_intel(
    intel_id: str,
    request: IntelDropUpdate,
    auth: AuthContext = Depends(require_admin),  # noqa: B008
) -> IntelDrop:
    updates = normalize_update(request.model_dump(mode="json", exclude_unset=True))
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        return update_intel_drop(intel_id, updates)
    except ValueError as e:
        raise HTTPException(status_code=404, detail="Intel drop not found") from e
