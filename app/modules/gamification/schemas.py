"""Pydantic v2 schemas for gamification module."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.core.gamification.models import (
    BadgeCategory,
    LeaderboardEntry,
    LeaderboardPeriod,
    LeaderboardStats,
    RankMovement,
    RuleCategory,
)


class PointsRuleResponse(BaseModel):
    """Response schema for points rules."""

    id: str
    name: str
    description: str = ""
    points: int
    category: RuleCategory
    conditions: list[str]
    multiplier: float | None = None

    model_config = ConfigDict(from_attributes=True)


class BadgeResponse(BaseModel):
    """Response schema for badges (catalog entries or awards)."""

    id: str
    name: str
    description: str = ""
    icon: str = ""
    color: str = ""
    category: BadgeCategory
    earned_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class LevelResponse(BaseModel):
    """Response schema for levels."""

    level: int
    name: str = ""
    required_exp: int
    benefits: list[str] = Field(default_factory=list)
    color: str = ""

    model_config = ConfigDict(from_attributes=True)


class LevelProgressResponse(BaseModel):
    """Response schema for level progress."""

    level: LevelResponse
    next_level: LevelResponse | None = None
    experience: int
    experience_to_next_level: int = 0
    progress_percent: float = Field(
        0.0, description="Percentage progress to next level (0-100)"
    )

    model_config = ConfigDict(from_attributes=True)


class ComputePointsRequest(BaseModel):
    """Request schema for computing the points of an action."""

    action: str = Field(..., min_length=1, max_length=100, pattern=r"\S")
    context: dict[str, Any] = Field(default_factory=dict)


class PointsResponse(BaseModel):
    """Response schema for a computed points value."""

    action: str
    points: int
    rule_id: str | None = None


class BadgeEvaluationRequest(BaseModel):
    """Request schema for badge evaluation and event handling."""

    user: LeaderboardEntry
    action: str = Field(..., min_length=1, max_length=100, pattern=r"\S")
    context: dict[str, Any] = Field(default_factory=dict)


class GamificationOutcomeResponse(BaseModel):
    """Response schema for a handled gamification event."""

    action: str
    points: int
    level_up: bool
    new_badges: list[BadgeResponse] = Field(default_factory=list)
    entry: LeaderboardEntry

    model_config = ConfigDict(from_attributes=True)


class LeaderboardRequest(BaseModel):
    """Request schema for ranking a leaderboard."""

    entries: list[LeaderboardEntry] = Field(default_factory=list)
    period: LeaderboardPeriod = "all_time"
    cohort: str | None = Field(None, description='Cohort filter; None or "all" keeps everyone')
    limit: int | None = Field(None, ge=1)


class RankedEntryResponse(BaseModel):
    """Leaderboard entry with its rank movement."""

    entry: LeaderboardEntry
    movement: RankMovement


class LeaderboardResponse(BaseModel):
    """Response schema for a ranked leaderboard view."""

    period: LeaderboardPeriod
    cohort: str | None = None
    entries: list[RankedEntryResponse] = Field(default_factory=list)
    stats: LeaderboardStats
