"""Badge service for gamification system."""

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from app.core.gamification.catalog import RuleCatalog, get_catalog
from app.core.gamification.models import Badge, BadgeDefinition, LeaderboardEntry
from app.core.gamification.points_service import PREDICATE_ERRORS
from app.core.logging import get_logger

logger = get_logger(__name__)


class BadgeService:
    """Service for evaluating which badges a user qualifies for."""

    def __init__(self, catalog: RuleCatalog | None = None) -> None:
        self.catalog = catalog or get_catalog()

    def eligible_badges(
        self,
        user: LeaderboardEntry,
        action: str,
        context: Mapping[str, Any] | None = None,
        now: datetime | None = None,
    ) -> list[Badge]:
        """Check all catalog badges against the user's current stats.

        Badges the user already holds are skipped, so evaluating the same
        state twice never awards a badge again.

        Args:
            user: User stats, already refreshed with the latest totals
            action: Action token that triggered the check
            context: Event data used by the unlock predicates
            now: Award timestamp (defaults to the current UTC time)

        Returns:
            Newly eligible badges in catalog order, each with earned_at set
        """
        context = context if context is not None else {}
        earned_at = now or datetime.now(UTC)

        eligible: list[Badge] = []
        for definition in self.catalog.badge_definitions():
            if user.has_badge(definition.badge.id):
                continue
            if self._is_eligible(definition, user, action, context):
                eligible.append(definition.badge.model_copy(update={"earned_at": earned_at}))

        if eligible:
            logger.info(
                f"User {user.id} qualifies for badges "
                f"{[badge.id for badge in eligible]} on '{action}'"
            )
        return eligible

    @staticmethod
    def new_badge_ids(user: LeaderboardEntry, awarded: Iterable[Badge]) -> list[str]:
        """Diff awarded badges against the ids the user already holds."""
        new_ids: list[str] = []
        for badge in awarded:
            if not user.has_badge(badge.id) and badge.id not in new_ids:
                new_ids.append(badge.id)
        return new_ids

    def award(self, user: LeaderboardEntry, awarded: Iterable[Badge]) -> LeaderboardEntry:
        """Return a copy of the user with the new badge ids appended."""
        new_ids = self.new_badge_ids(user, awarded)
        if not new_ids:
            return user
        return user.model_copy(update={"badges": (*user.badges, *new_ids)})

    @staticmethod
    def _is_eligible(
        definition: BadgeDefinition,
        user: LeaderboardEntry,
        action: str,
        context: Mapping[str, Any],
    ) -> bool:
        """Evaluate one badge predicate; errors and dormant badges mean not eligible."""
        if definition.predicate is None:
            return False
        try:
            return bool(definition.predicate(user, action, context))
        except PREDICATE_ERRORS as e:
            logger.debug(f"Predicate for badge '{definition.badge.id}' failed: {e}")
            return False
