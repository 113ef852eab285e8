"""Tests for presence state flattening and the presence tracker."""

import asyncio

import pytest
from fakes.fake_channel import FakeChannel

from academy.realtime.channels import live_session_topic, presence_topic
from academy.realtime.presence import PresenceTracker, transform_presence_state


def presence(uid: str, joined: str, online: str, **fields) -> dict:
    return {"id": uid, "name": fields.pop("name", uid), "joined_at": joined, "online_at": online, **fields}


def test_transform_deduplicates_by_latest_online_at():
    state = {
        "tab-1": [presence("ada", "2026-02-02T09:00:00Z", "2026-02-02T09:05:00Z", role="FDE")],
        "tab-2": [presence("ada", "2026-02-02T09:00:00Z", "2026-02-02T09:06:00Z", role="AI-PM")],
        "grace": [presence("grace", "2026-02-02T08:00:00Z", "2026-02-02T09:00:00Z")],
    }

    users = transform_presence_state(state)

    assert [u.id for u in users] == ["grace", "ada"]
    assert users[1].role == "AI-PM"


def test_transform_skips_malformed():
    state = {"x": [{"id": "nobody"}], "y": [presence("ok", "2026-02-02T08:00:00Z", "2026-02-02T08:00:00Z")]}

    assert [u.id for u in transform_presence_state(state)] == ["ok"]


def test_transform_skips_unparseable_timestamps():
    state = {
        "x": [presence("empty", "", "")],
        "y": [presence("junk", "yesterday", "2026-02-02T08:00:00Z")],
        "z": [presence("ok", "2026-02-02T08:00:00Z", "2026-02-02T08:00:00Z")],
    }

    assert [u.id for u in transform_presence_state(state)] == ["ok"]


def test_transform_mixes_naive_and_offset_timestamps():
    state = {
        "tab-1": [presence("ada", "2026-02-02T09:00:00", "2026-02-02T09:05:00", role="FDE")],
        "tab-2": [presence("ada", "2026-02-02T09:00:00Z", "2026-02-02T09:06:00+00:00", role="AI-PM")],
        "grace": [presence("grace", "2026-02-02T09:30:00+01:00", "2026-02-02T09:00:00")],
    }

    users = transform_presence_state(state)

    assert [u.id for u in users] == ["grace", "ada"]
    assert {u.id: u.role for u in users}["ada"] == "AI-PM"
    assert all(u.joined_at.tzinfo is not None for u in users)


@pytest.mark.asyncio
async def test_tracker_tracks_and_syncs():
    channel = FakeChannel()
    left = []
    tracker = PresenceTracker(
        channel,
        {"id": "ada", "name": "Ada", "role": "FDE"},
        heartbeat_interval=60,
        on_user_leave=left.append,
    )

    await tracker.start()
    await asyncio.sleep(0)

    assert tracker.is_connected is True
    assert channel.tracked[0]["id"] == "ada"
    assert channel.tracked[0]["joined_at"] == tracker.joined_at

    channel.state = {"ada": [channel.tracked[0]]}
    channel.on_sync()
    channel.on_leave("grace", [], [{"id": "grace"}])

    assert tracker.online_count == 1
    assert left == ["grace"]

    await tracker.stop()
    assert channel.unsubscribed is True


@pytest.mark.asyncio
async def test_retrack_keeps_joined_at():
    channel = FakeChannel()
    tracker = PresenceTracker(channel, {"id": "ada", "name": "Ada"}, heartbeat_interval=60)

    await tracker.track()
    await tracker.track()

    assert channel.tracked[0]["joined_at"] == channel.tracked[1]["joined_at"]


def test_topics_use_upper_case_codes():
    assert presence_topic("abc123") == "presence-session-ABC123"
    assert live_session_topic("abc123") == "live-session-ABC123"
