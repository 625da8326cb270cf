"""Event handlers for gamification system.

Turns a gamified action (assignment graded, video watched, daily login, ...)
into a points delta, refreshed level fields and newly earned badges. Nothing
is persisted here: the caller stores the returned entry.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.core.gamification.badge_service import BadgeService
from app.core.gamification.catalog import RuleCatalog, get_catalog
from app.core.gamification.leaderboard_service import LeaderboardService
from app.core.gamification.models import Badge, LeaderboardEntry
from app.core.gamification.points_service import PointsService
from app.core.logging import get_logger

logger = get_logger(__name__)


class GamificationOutcome(BaseModel):
    """Result of handling one gamified action."""

    model_config = ConfigDict(frozen=True)

    action: str
    points: int = Field(0, ge=0)
    new_badges: tuple[Badge, ...] = ()
    level_up: bool = False
    entry: LeaderboardEntry


class GamificationEventHandler:
    """Applies points, levels and badges for incoming actions."""

    def __init__(self, catalog: RuleCatalog | None = None) -> None:
        self.catalog = catalog or get_catalog()
        self.points_service = PointsService(self.catalog)
        self.badge_service = BadgeService(self.catalog)
        self.leaderboard_service = LeaderboardService(self.catalog)

    def handle(
        self,
        user: LeaderboardEntry,
        action: str,
        context: Mapping[str, Any] | None = None,
        now: datetime | None = None,
    ) -> GamificationOutcome:
        """Handle a gamified action for a user.

        Awards points, re-derives the level and checks badges against the
        refreshed stats.

        Args:
            user: User stats before the action
            action: Action token
            context: Event data for multipliers and badge predicates
            now: Award timestamp for new badges

        Returns:
            GamificationOutcome with a new entry; ``user`` is left untouched
        """
        context = context or {}
        points = self.points_service.compute_points(action, context)

        previous_level = self.leaderboard_service.level_for_experience(user.experience)
        refreshed = user.model_copy(
            update={
                "total_points": user.total_points + points,
                "weekly_points": user.weekly_points + points,
                "monthly_points": user.monthly_points + points,
                "experience": user.experience + points,
            }
        )
        refreshed = self.leaderboard_service.with_levels([refreshed])[0]
        level_up = refreshed.level > previous_level.level

        new_badges = self.badge_service.eligible_badges(refreshed, action, context, now=now)
        refreshed = self.badge_service.award(refreshed, new_badges)

        if level_up:
            logger.info(
                f"User {user.id} leveled up to {refreshed.level} "
                f"(experience: {refreshed.experience})"
            )
        logger.info(
            f"{action}: user={user.id}, points={points}, "
            f"badges={[badge.id for badge in new_badges]}"
        )

        return GamificationOutcome(
            action=action,
            points=points,
            new_badges=tuple(new_badges),
            level_up=level_up,
            entry=refreshed,
        )
