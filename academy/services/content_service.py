"""Per-day briefing content lookup.

Sources are tried in order: a local checkout of the content repo, the GitHub
contents API, then the mission_days table. A source only counts when it has
the day's SITUATION file. Resolved content is cached per day and admin flag.
"""

from functools import lru_cache
from pathlib import Path

from academy.core.config import get_settings
from academy.core.content_cache import TTLCache
from academy.core.logging import get_logger
from academy.core.schemas_content import DayContent
from academy.db.mission_days import get_mission_day_content
from academy.services.github_content import GitHubContentClient

logger = get_logger(__name__)

CONTENT_ROOT = "01-Common-Foundations"
SITUATION_FILE = "SITUATION.md"
RESOURCES_FILE = "RESOURCES.md"
MENTOR_NOTES_FILE = "MENTOR-NOTES.md"


@lru_cache(maxsize=1)
def get_content_cache() -> TTLCache[DayContent]:
    """Process-wide content cache."""
    return TTLCache(ttl_seconds=get_settings().CONTENT_CACHE_TTL_SECONDS)


def cache_key(day: int, is_admin: bool) -> str:
    return f"day-{day}-admin-{str(is_admin).lower()}"


def day_folder(day: int) -> str:
    return f"{CONTENT_ROOT}/Day-{day:02d}"


def _read_local_file(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        return None


def get_local_content(base_path: str | None, day: int, is_admin: bool) -> DayContent | None:
    if not base_path:
        return None

    folder = Path(base_path) / day_folder(day)
    situation = _read_local_file(folder / SITUATION_FILE)
    if not situation:
        return None

    return DayContent(
        day=day,
        situation=situation,
        resources=_read_local_file(folder / RESOURCES_FILE),
        mentor_notes=_read_local_file(folder / MENTOR_NOTES_FILE) if is_admin else None,
        source="local",
    )


async def get_github_content(
    client: GitHubContentClient | None, day: int, is_admin: bool
) -> DayContent | None:
    if client is None:
        return None

    folder = day_folder(day)
    situation = await client.fetch_file(f"{folder}/{SITUATION_FILE}")
    if not situation:
        return None

    resources = await client.fetch_file(f"{folder}/{RESOURCES_FILE}")
    mentor_notes = await client.fetch_file(f"{folder}/{MENTOR_NOTES_FILE}") if is_admin else None
    return DayContent(
        day=day,
        situation=situation,
        resources=resources,
        mentor_notes=mentor_notes,
        source="github",
    )


def get_database_content(day: int) -> DayContent | None:
    try:
        row = get_mission_day_content(day)
    except Exception as e:
        logger.warning(f"Mission day lookup failed for day {day}: {e}")
        return None

    if not row or not row.get("briefing_content"):
        return None
    return DayContent(
        day=day,
        situation=row.get("briefing_content"),
        resources=row.get("resources_content"),
        mentor_notes=None,
        source="database",
    )


def _github_client() -> GitHubContentClient | None:
    settings = get_settings()
    if not settings.GITHUB_TOKEN:
        return None
    return GitHubContentClient(
        token=settings.GITHUB_TOKEN,
        owner=settings.GITHUB_CONTENT_OWNER,
        repo=settings.GITHUB_CONTENT_REPO,
        branch=settings.GITHUB_CONTENT_BRANCH,
    )


async def get_day_content(day: int, is_admin: bool) -> DayContent | None:
    """
    Resolve the briefing content for a program day.

    Args:
        day: Program day (validated by the caller)
        is_admin: Admins also receive mentor notes

    Returns:
        DayContent, flagged cached=True on cache hits, or None if no source
        has the day
    """
    cache = get_content_cache()
    key = cache_key(day, is_admin)

    cached = cache.get(key)
    if cached is not None:
        return cached.model_copy(update={"cached": True})

    content = get_local_content(get_settings().LOCAL_CONTENT_PATH, day, is_admin)
    if content is None:
        content = await get_github_content(_github_client(), day, is_admin)
    if content is None:
        content = get_database_content(day)

    if content is None:
        logger.info(f"No content found for day {day}")
        return None

    cache.set(key, content)
    logger.info(f"Resolved day {day} content from {content.source}")
    return content
