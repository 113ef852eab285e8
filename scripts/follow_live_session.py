#!/usr/bin/env python3
"""
Follow a live session from the terminal.

Joins the session's broadcast channel as a student and prints every step
or section change until the instructor ends the session.

Usage:
    python scripts/follow_live_session.py JOIN_CODE [--heartbeat 5]

Options:
    --heartbeat: Seconds between heartbeats (default: LIVE_SESSION_HEARTBEAT_SECONDS)
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from academy.core.config import get_settings
from academy.core.live_session import section_progress, state_from_row
from academy.core.logging import get_logger
from academy.core.schemas_live_session import SessionState
from academy.db.live_sessions import get_live_session_by_code, list_session_participants
from academy.realtime.channels import live_session_topic, open_channel
from academy.realtime.live_session import StudentSync

logger = get_logger(__name__)


async def follow(code: str, heartbeat: float) -> int:
    row = await asyncio.to_thread(get_live_session_by_code, code)
    if row is None:
        logger.error(f"No live session with code {code}")
        return 1

    ended = asyncio.Event()

    async def load_state() -> SessionState | None:
        fresh = await asyncio.to_thread(get_live_session_by_code, code)
        return state_from_row(fresh) if fresh else None

    async def load_participants():
        return await asyncio.to_thread(list_session_participants, row["id"])

    def on_state_change(state: SessionState) -> None:
        progress = section_progress(state.current_section)
        print(f"step {state.current_step} / {state.current_section.value} ({progress:.0f}%)")

    channel = await open_channel(live_session_topic(code))
    sync = StudentSync(
        channel,
        code,
        state_loader=load_state,
        participants_loader=load_participants,
        heartbeat_interval=heartbeat,
        on_state_change=on_state_change,
        on_session_end=ended.set,
    )

    if not await sync.connect():
        logger.error(f"Could not connect to live session {code}: {sync.error}")
        await sync.close()
        return 1

    if sync.session_state is not None:
        on_state_change(sync.session_state)
    print(f"{len(sync.participants)} participant(s) in session")

    try:
        await ended.wait()
        print("Session ended")
    finally:
        await sync.close()
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Follow a live session")
    parser.add_argument("code", help="Six character join code")
    parser.add_argument(
        "--heartbeat",
        type=float,
        default=None,
        help="Seconds between heartbeats",
    )
    args = parser.parse_args()

    heartbeat = args.heartbeat
    if heartbeat is None:
        heartbeat = get_settings().LIVE_SESSION_HEARTBEAT_SECONDS

    try:
        sys.exit(asyncio.run(follow(args.code.upper(), heartbeat)))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
