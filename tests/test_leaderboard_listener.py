"""Tests for the live leaderboard listener over a fake channel."""

import pytest
from fakes.fake_channel import FakeChannel

from academy.core.leaderboard import rerank
from academy.core.schemas_leaderboard import LeaderboardEntry
from academy.realtime.channels import change_records
from academy.realtime.leaderboard import LeaderboardListener


def standings() -> list[LeaderboardEntry]:
    return rerank(
        [
            LeaderboardEntry(github_username="ada", total_points=300),
            LeaderboardEntry(github_username="grace", total_points=200),
            LeaderboardEntry(github_username="linus", total_points=100),
        ]
    )


async def start_listener(channel: FakeChannel, seen: list | None = None) -> LeaderboardListener:
    on_change = (lambda entries, changes: seen.append((entries, changes))) if seen is not None else None
    listener = LeaderboardListener(channel, standings(), on_change=on_change)
    await listener.start()
    return listener


@pytest.mark.asyncio
async def test_listens_to_leaderboard_table():
    channel = FakeChannel()
    await start_listener(channel)

    assert channel.subscribed is True
    assert sorted(f["event"] for f in channel.change_filters) == ["DELETE", "INSERT", "UPDATE"]
    assert {f["table"] for f in channel.change_filters} == {"leaderboard"}


@pytest.mark.asyncio
async def test_update_reranks_and_reports_moves():
    channel = FakeChannel()
    seen = []
    listener = await start_listener(channel, seen)

    channel.deliver_change("UPDATE", {"github_username": "linus", "total_points": 250})

    assert [e.github_username for e in listener.entries] == ["ada", "linus", "grace"]
    assert listener.position_changes["linus"].delta == 1
    assert listener.position_changes["grace"].delta == -1
    assert "ada" not in listener.position_changes
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_insert_adds_new_username_once():
    channel = FakeChannel()
    seen = []
    listener = await start_listener(channel, seen)

    channel.deliver_change("INSERT", {"github_username": "margaret", "total_points": 250})
    channel.deliver_change("INSERT", {"github_username": "margaret", "total_points": 999})

    assert [e.github_username for e in listener.entries] == ["ada", "margaret", "grace", "linus"]
    assert [e.rank for e in listener.entries] == [1, 2, 3, 4]
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_delete_removes_by_old_row():
    channel = FakeChannel()
    listener = await start_listener(channel)

    channel.deliver_change("DELETE", old_record={"github_username": "ada"})

    assert [(e.github_username, e.rank) for e in listener.entries] == [("grace", 1), ("linus", 2)]


@pytest.mark.asyncio
async def test_rows_without_username_are_ignored():
    channel = FakeChannel()
    seen = []
    listener = await start_listener(channel, seen)

    channel.deliver_change("UPDATE", {"total_points": 1000})
    channel.deliver_change("INSERT", {"total_points": 1000})
    channel.deliver_change("DELETE", old_record={})

    assert [e.github_username for e in listener.entries] == ["ada", "grace", "linus"]
    assert seen == []


@pytest.mark.asyncio
async def test_stop_unsubscribes():
    channel = FakeChannel()
    listener = await start_listener(channel)

    await listener.stop()

    assert channel.unsubscribed is True


def test_change_records_accepts_flat_shape():
    assert change_records({"new": {"a": 1}, "old": {"b": 2}}) == ({"a": 1}, {"b": 2})
    assert change_records(None) == ({}, {})
