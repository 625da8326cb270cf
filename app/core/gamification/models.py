"""Domain models for the gamification engine.

All models are frozen: derived values are produced with ``model_copy`` and
never by mutating an instance the caller handed in.
"""

from collections.abc import Callable, Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

RuleCategory = Literal["assignment", "bonus", "social", "milestone"]
BadgeCategory = Literal["achievement", "milestone", "special", "social"]
LeaderboardPeriod = Literal["all_time", "weekly", "monthly"]
RankMovement = Literal["up", "down", "same"]

Context = Mapping[str, Any]
MultiplierCondition = Callable[[Context], bool]


class PointsRule(BaseModel):
    """Maps one or more action tokens to a point reward."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    points: int = Field(..., gt=0)
    category: RuleCategory
    conditions: tuple[str, ...] = Field(..., min_length=1)
    multiplier: Decimal | None = Field(None, gt=0)
    # When absent, a declared multiplier always applies
    multiplier_condition: MultiplierCondition | None = Field(None, exclude=True)

    def matches(self, action: str) -> bool:
        return action in self.conditions


class Badge(BaseModel):
    """Badge metadata. ``earned_at`` is only set on awarded copies."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    icon: str = ""
    color: str = ""
    category: BadgeCategory
    earned_at: datetime | None = None


class Level(BaseModel):
    """Experience tier."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1)
    name: str = ""
    required_exp: int = Field(..., ge=0)
    benefits: tuple[str, ...] = ()
    color: str = ""


class LeaderboardEntry(BaseModel):
    """A student's progress record as hydrated by the persistence layer."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str = ""
    cohort: str = ""
    current_phase: int = 0
    total_points: int = 0
    weekly_points: int = 0
    monthly_points: int = 0
    completed_assignments: int = 0
    total_assignments: int = 0
    experience: int = 0
    rank: int | None = Field(None, ge=1)
    previous_rank: int | None = Field(None, ge=1)
    badges: tuple[str, ...] = Field(
        default=(), description="Ids of badges already earned"
    )
    level: int | None = None
    next_level_exp: int | None = None
    avatar: str | None = None
    last_active: str | None = None

    def has_badge(self, badge_id: str) -> bool:
        return badge_id in self.badges


BadgePredicate = Callable[[LeaderboardEntry, str, Context], bool]


class BadgeDefinition(BaseModel):
    """A catalog badge paired with its unlock predicate.

    A definition without a predicate is dormant: it is listed but can never
    be earned.
    """

    model_config = ConfigDict(frozen=True)

    badge: Badge
    predicate: BadgePredicate | None = None

    @property
    def is_dormant(self) -> bool:
        return self.predicate is None


class LeaderboardStats(BaseModel):
    """Aggregate statistics for a leaderboard view."""

    model_config = ConfigDict(frozen=True)

    total_students: int = 0
    average_points: int = 0
    top_performer: str = "N/A"
    most_active_cohort: str = "N/A"
    total_points_awarded: int = 0


class LevelProgress(BaseModel):
    """Where a given experience total sits inside the level ladder."""

    model_config = ConfigDict(frozen=True)

    level: Level
    next_level: Level | None = None
    experience: int
    experience_to_next_level: int = Field(0, ge=0)
    progress_percent: float = Field(0.0, ge=0.0, le=100.0)
