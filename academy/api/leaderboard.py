"""Leaderboard endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from academy.core.auth_middleware import AuthContext, require_auth
from academy.core.leaderboard import filter_and_sort
from academy.core.logging import get_logger
from academy.core.schemas_leaderboard import LeaderboardEntry, LeaderboardSort
from academy.db.leaderboard import list_leaderboard

logger = get_logger(__name__)

router = APIRouter()


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    role: Optional[str] = Query(None),
    team: Optional[str] = Query(None),
    stream: Optional[str] = Query(None),
    sort_by: LeaderboardSort = Query("points"),
    auth: AuthContext = Depends(require_auth),  # noqa: B008
) -> list[LeaderboardEntry]:
    """
    Leaderboard filtered by role, team and stream.

    Ranks follow the requested sort order and run 1..N over the returned
    rows.
    """
    try:
        entries = list_leaderboard()
    except Exception as e:
        logger.exception("Failed to load leaderboard")
        raise HTTPException(status_code=500, detail="Failed to load leaderboard") from e

    ordered = filter_and_sort(entries, role=role, team=team, stream=stream, sort_by=sort_by)
    return [entry.model_copy(update={"rank": index + 1}) for index, entry in enumerate(ordered)]
