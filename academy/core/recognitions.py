"""Recognition rules evaluated by the scheduled recognition sweep."""

from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from academy.core.schemas_recognitions import RecognitionCode

EARLY_RISER_BEFORE_HOUR = 8
NIGHT_SCHOLAR_FROM_HOUR = 22
MOMENTUM_MIN_STREAK = 5
TEAM_SUPPORTER_MIN_ASSISTS = 3

RECOGNITION_CONTEXT = {
    RecognitionCode.EARLY_RISER: "Submitted work before 8:00 AM",
    RecognitionCode.NIGHT_SCHOLAR: "Submitted work after 10:00 PM",
    RecognitionCode.MOMENTUM: f"Maintained {MOMENTUM_MIN_STREAK}+ day submission streak",
    RecognitionCode.TEAM_SUPPORTER: f"Helped {TEAM_SUPPORTER_MIN_ASSISTS}+ peers with their work",
}


def submission_window(now: datetime, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Start of yesterday through the end of today, in the academy time zone."""
    local_now = now.astimezone(tz)
    start = datetime.combine(local_now.date() - timedelta(days=1), time.min, tzinfo=tz)
    end = datetime.combine(local_now.date(), time.max, tzinfo=tz)
    return start, end


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo("UTC"))
    return parsed


def _submitters(submissions: list[dict], tz: ZoneInfo, matches) -> list[str]:
    # Keep first-seen order while de-duplicating
    found: dict[str, None] = {}
    for submission in submissions:
        submitted_at = submission.get("submitted_at")
        if not submitted_at:
            continue
        hour = _parse_timestamp(submitted_at).astimezone(tz).hour
        if matches(hour):
            found.setdefault(submission["participant_id"], None)
    return list(found)


def find_early_risers(submissions: list[dict], tz: ZoneInfo) -> list[str]:
    """Participants with a submission before 08:00 local time."""
    return _submitters(submissions, tz, lambda hour: hour < EARLY_RISER_BEFORE_HOUR)


def find_night_scholars(submissions: list[dict], tz: ZoneInfo) -> list[str]:
    """Participants with a submission at or after 22:00 local time."""
    return _submitters(submissions, tz, lambda hour: hour >= NIGHT_SCHOLAR_FROM_HOUR)
