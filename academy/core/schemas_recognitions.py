"""Pydantic schemas for recognition awards."""

from enum import Enum

from pydantic import BaseModel, Field


class RecognitionCode(str, Enum):
    EARLY_RISER = "early_riser"
    NIGHT_SCHOLAR = "night_scholar"
    MOMENTUM = "momentum"
    TEAM_SUPPORTER = "team_supporter"


class RecognitionResult(BaseModel):
    found: int = 0
    awarded: int = 0


class RecognitionSweepSummary(BaseModel):
    """Result of one scheduled recognition sweep, per recognition code."""

    success: bool = True
    results: dict[RecognitionCode, RecognitionResult] = Field(default_factory=dict)
    total_awarded: int = 0
