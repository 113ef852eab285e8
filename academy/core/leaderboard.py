"""Leaderboard ranking, filtering and delta merges."""

from collections.abc import Iterable

from academy.core.schemas_leaderboard import LeaderboardEntry, LeaderboardSort, PositionChange


def rerank(entries: Iterable[LeaderboardEntry]) -> list[LeaderboardEntry]:
    """Sort by points (highest first) and assign 1-based ranks."""
    ordered = sorted(entries, key=lambda e: e.total_points, reverse=True)
    return [entry.model_copy(update={"rank": index + 1}) for index, entry in enumerate(ordered)]


def merge_delta_update(
    entries: list[LeaderboardEntry], updated: dict
) -> list[LeaderboardEntry]:
    """
    Merge a changed leaderboard row into the current standings.

    Rows are matched on github_username. Unknown usernames are ignored here;
    inserts go through insert_entry.
    """
    username = updated["github_username"]
    changes = {k: v for k, v in updated.items() if k in LeaderboardEntry.model_fields}
    merged = []
    for entry in entries:
        if entry.github_username == username:
            entry = entry.model_copy(update=changes)
        merged.append(entry)
    return rerank(merged)


def insert_entry(entries: list[LeaderboardEntry], new: LeaderboardEntry) -> list[LeaderboardEntry]:
    if any(e.github_username == new.github_username for e in entries):
        return entries
    return rerank([*entries, new])


def remove_entry(entries: list[LeaderboardEntry], github_username: str) -> list[LeaderboardEntry]:
    remaining = [e for e in entries if e.github_username != github_username]
    return [entry.model_copy(update={"rank": i + 1}) for i, entry in enumerate(remaining)]


def track_position_changes(
    previous: Iterable[LeaderboardEntry], current: Iterable[LeaderboardEntry]
) -> dict[str, PositionChange]:
    """Rank changes between two snapshots, keyed by username."""
    previous_ranks = {e.github_username: e.rank for e in previous}
    changes = {}
    for entry in current:
        previous_rank = previous_ranks.get(entry.github_username)
        if previous_rank is not None and previous_rank != entry.rank:
            changes[entry.github_username] = PositionChange(
                username=entry.github_username,
                previous_rank=previous_rank,
                current_rank=entry.rank,
            )
    return changes


def filter_and_sort(
    entries: Iterable[LeaderboardEntry],
    role: str | None = None,
    team: str | None = None,
    stream: str | None = None,
    sort_by: LeaderboardSort = "points",
) -> list[LeaderboardEntry]:
    filtered = [
        e
        for e in entries
        if (role is None or e.role == role)
        and (team is None or e.team == team)
        and (stream is None or e.stream == stream)
    ]

    if sort_by == "submissions":
        key = lambda e: e.total_submissions  # noqa: E731
    elif sort_by == "rating":
        key = lambda e: e.avg_mentor_rating or 0  # noqa: E731
    else:
        key = lambda e: e.total_points  # noqa: E731

    return sorted(filtered, key=key, reverse=True)
