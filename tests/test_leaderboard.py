"""Tests for leaderboard ranking, filtering and delta merges."""

from academy.core.leaderboard import (
    filter_and_sort,
    insert_entry,
    merge_delta_update,
    remove_entry,
    rerank,
    track_position_changes,
)
from academy.core.schemas_leaderboard import LeaderboardEntry


def entry(username: str, points: int, **fields) -> LeaderboardEntry:
    return LeaderboardEntry(github_username=username, total_points=points, **fields)


def standings() -> list[LeaderboardEntry]:
    return rerank(
        [
            entry("ada", 300, role="FDE", team="Alpha", total_submissions=4, avg_mentor_rating=4.5),
            entry("grace", 200, role="AI-SE", team="Alpha", total_submissions=9),
            entry("linus", 100, role="FDE", team="Beta", total_submissions=2, avg_mentor_rating=3.0),
        ]
    )


def usernames(entries) -> list[str]:
    return [e.github_username for e in entries]


def test_rerank_orders_by_points():
    ranked = standings()

    assert usernames(ranked) == ["ada", "grace", "linus"]
    assert [e.rank for e in ranked] == [1, 2, 3]


def test_delta_update_reranks():
    merged = merge_delta_update(standings(), {"github_username": "linus", "total_points": 500, "unknown": 1})

    assert usernames(merged) == ["linus", "ada", "grace"]
    assert merged[0].rank == 1


def test_insert_and_remove():
    ranked = insert_entry(standings(), entry("margaret", 250))
    assert usernames(ranked) == ["ada", "margaret", "grace", "linus"]

    # Duplicates are not inserted twice
    assert insert_entry(ranked, entry("margaret", 999)) is ranked

    remaining = remove_entry(ranked, "ada")
    assert usernames(remaining) == ["margaret", "grace", "linus"]
    assert [e.rank for e in remaining] == [1, 2, 3]


def test_position_changes():
    before = standings()
    after = merge_delta_update(before, {"github_username": "linus", "total_points": 250})

    changes = track_position_changes(before, after)

    assert set(changes) == {"linus", "grace"}
    assert changes["linus"].delta == 1
    assert changes["grace"].delta == -1


def test_filter_and_sort():
    assert usernames(filter_and_sort(standings(), role="FDE")) == ["ada", "linus"]
    assert usernames(filter_and_sort(standings(), team="Alpha", sort_by="submissions")) == ["grace", "ada"]
    # Missing ratings sort as 0
    assert usernames(filter_and_sort(standings(), sort_by="rating")) == ["ada", "linus", "grace"]
