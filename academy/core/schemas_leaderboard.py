"""Pydantic schemas for the leaderboard."""

from typing import Literal

from pydantic import BaseModel

LeaderboardSort = Literal["points", "submissions", "rating"]


class LeaderboardEntry(BaseModel):
    """Row of the leaderboard view."""

    participant_id: str | None = None
    github_username: str
    name: str | None = None
    avatar_url: str | None = None
    role: str | None = None
    team: str | None = None
    stream: str | None = None
    total_points: int = 0
    total_submissions: int = 0
    avg_mentor_rating: float | None = None
    current_streak: int = 0
    rank: int = 0


class PositionChange(BaseModel):
    username: str
    previous_rank: int
    current_rank: int

    @property
    def delta(self) -> int:
        """Positive when the participant moved up."""
        return self.previous_rank - self.current_rank
