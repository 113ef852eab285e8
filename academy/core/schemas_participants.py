"""Pydantic schemas for participants and their assignments."""

from enum import Enum

from pydantic import BaseModel


class RoleType(str, Enum):
    FDE = "FDE"
    AI_SE = "AI-SE"
    AI_PM = "AI-PM"
    AI_DA = "AI-DA"
    AI_DS = "AI-DS"
    AI_SEC = "AI-SEC"
    AI_FE = "AI-FE"


class TeamType(str, Enum):
    ALPHA = "Alpha"
    BETA = "Beta"
    GAMMA = "Gamma"
    DELTA = "Delta"
    EPSILON = "Epsilon"
    ZETA = "Zeta"
    ETA = "Eta"
    THETA = "Theta"


class StreamType(str, Enum):
    TECH = "Tech"
    BUSINESS = "Business"


class TaskForce(str, Enum):
    RHEIN = "RHEIN"
    LYON = "LYON"
    MILAN = "MILAN"
    AMSTERDAM = "AMSTERDAM"


class Participant(BaseModel):
    """Row of the participants table. Assignment fields stay null until chosen."""

    id: str
    email: str
    name: str
    github_username: str | None = None
    avatar_url: str | None = None
    role: str | None = None
    team: str | None = None
    stream: str | None = None
    task_force: str | None = None
    is_admin: bool = False
    email_notifications: bool = True


class ParticipantUpdate(BaseModel):
    """Profile assignment update. Only provided fields are written."""

    role: RoleType | None = None
    team: TeamType | None = None
    stream: StreamType | None = None
    task_force: TaskForce | None = None
    email_notifications: bool | None = None
