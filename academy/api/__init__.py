"""API router for v1 endpoints."""

from fastapi import APIRouter

from academy.api import content, cron, intel, leaderboard, live_sessions, mastery, participants, readiness

router = APIRouter()

# Scheduled jobs (shared-secret auth, no user session)
router.include_router(cron.router, tags=["cron"])

# Day briefing content
router.include_router(content.router, tags=["content"])

# Instructor-led live sessions
router.include_router(live_sessions.router, tags=["live_sessions"])

# Intel drops
router.include_router(intel.router, tags=["intel"])

# Task force and program readiness
router.include_router(readiness.router, tags=["readiness"])

# Mastery levels
router.include_router(mastery.router, tags=["mastery"])

# Leaderboard
router.include_router(leaderboard.router, tags=["leaderboard"])

# Participant profile
router.include_router(participants.router, tags=["participants"])
