"""Scheduled recognition awards."""

from collections.abc import Callable
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from academy.core.config import get_settings
from academy.core.logging import get_logger
from academy.core.recognitions import (
    MOMENTUM_MIN_STREAK,
    RECOGNITION_CONTEXT,
    TEAM_SUPPORTER_MIN_ASSISTS,
    find_early_risers,
    find_night_scholars,
    submission_window,
)
from academy.core.schemas_recognitions import (
    RecognitionCode,
    RecognitionResult,
    RecognitionSweepSummary,
)
from academy.db.leaderboard import (
    list_participants_with_peer_assists,
    list_participants_with_streak,
)
from academy.db.recognitions import award_recognition, get_recognition_type_ids
from academy.db.submissions import list_submissions_between

logger = get_logger(__name__)


def _award_all(code: RecognitionCode, type_id: int, participant_ids: list[str]) -> int:
    awarded = 0
    for participant_id in participant_ids:
        try:
            if award_recognition(participant_id, type_id, RECOGNITION_CONTEXT[code]):
                awarded += 1
        except Exception:
            logger.exception(f"Failed to award {code.value} to {participant_id}")
    return awarded


def run_recognition_sweep(now: datetime | None = None) -> RecognitionSweepSummary:
    """
    Find and award recognitions for every rule whose type is configured.

    Args:
        now: Reference time for the submission window (defaults to now)

    Raises:
        Exception: If the recognition types cannot be loaded
    """
    tz = ZoneInfo(get_settings().ACADEMY_TIMEZONE)
    now = now or datetime.now(UTC)

    type_ids = get_recognition_type_ids()

    submissions: list[dict] | None = None

    def window_submissions() -> list[dict]:
        nonlocal submissions
        if submissions is None:
            start, end = submission_window(now, tz)
            submissions = list_submissions_between(start, end)
        return submissions

    finders: dict[RecognitionCode, Callable[[], list[str]]] = {
        RecognitionCode.EARLY_RISER: lambda: find_early_risers(window_submissions(), tz),
        RecognitionCode.NIGHT_SCHOLAR: lambda: find_night_scholars(window_submissions(), tz),
        RecognitionCode.MOMENTUM: lambda: list_participants_with_streak(MOMENTUM_MIN_STREAK),
        RecognitionCode.TEAM_SUPPORTER: lambda: list_participants_with_peer_assists(
            TEAM_SUPPORTER_MIN_ASSISTS
        ),
    }

    results: dict[RecognitionCode, RecognitionResult] = {}
    for code, finder in finders.items():
        result = RecognitionResult()
        results[code] = result

        type_id = type_ids.get(code.value)
        if type_id is None:
            logger.debug(f"Recognition type {code.value} not configured, skipping")
            continue

        try:
            participant_ids = finder()
        except Exception:
            logger.exception(f"Failed to find candidates for {code.value}")
            continue

        result.found = len(participant_ids)
        result.awarded = _award_all(code, type_id, participant_ids)

    total_awarded = sum(r.awarded for r in results.values())
    logger.info(f"Recognition awards complete: {total_awarded} new recognitions awarded")
    return RecognitionSweepSummary(results=results, total_awarded=total_awarded)
