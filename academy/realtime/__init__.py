"""Realtime channel clients: live-session sync, presence, intel releases and the leaderboard."""

from academy.realtime.channels import (
    INTEL_RELEASES_TOPIC,
    LEADERBOARD_TOPIC,
    live_session_topic,
    open_channel,
    presence_topic,
)
from academy.realtime.intel import IntelReleaseListener
from academy.realtime.leaderboard import LeaderboardListener
from academy.realtime.live_session import InstructorSync, StudentSync, SyncStatus
from academy.realtime.presence import PresenceTracker, transform_presence_state

__all__ = [
    "INTEL_RELEASES_TOPIC",
    "InstructorSync",
    "IntelReleaseListener",
    "LEADERBOARD_TOPIC",
    "LeaderboardListener",
    "PresenceTracker",
    "StudentSync",
    "SyncStatus",
    "live_session_topic",
    "open_channel",
    "presence_topic",
    "transform_presence_state",
]
