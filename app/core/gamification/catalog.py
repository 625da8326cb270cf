"""Rule catalog for the gamification engine.

The catalog is built once, validated on construction and read-only
afterwards. Services receive it by injection; ``get_catalog()`` returns the
process-wide default.
"""

from bisect import bisect_right
from collections.abc import Iterable
from functools import lru_cache

from app.core.gamification.defaults import (
    DEFAULT_BADGES,
    DEFAULT_LEVELS,
    DEFAULT_POINTS_RULES,
)
from app.core.gamification.exceptions import CatalogError
from app.core.gamification.models import Badge, BadgeDefinition, Level, PointsRule
from app.core.logging import get_logger

logger = get_logger(__name__)


class RuleCatalog:
    """Immutable set of points rules, badges and levels."""

    def __init__(
        self,
        rules: Iterable[PointsRule],
        badges: Iterable[BadgeDefinition],
        levels: Iterable[Level],
    ) -> None:
        self._rules: tuple[PointsRule, ...] = tuple(rules)
        self._badges: tuple[BadgeDefinition, ...] = tuple(badges)
        self._levels: tuple[Level, ...] = tuple(levels)

        self._validate_rules()
        self._validate_badges()
        self._validate_levels()

        # First declaration wins for a shared token
        self._rule_by_action: dict[str, PointsRule] = {}
        for rule in self._rules:
            for token in rule.conditions:
                self._rule_by_action.setdefault(token, rule)

        self._badge_by_id = {d.badge.id: d.badge for d in self._badges}
        self._level_thresholds = [lvl.required_exp for lvl in self._levels]

    @property
    def rules(self) -> tuple[PointsRule, ...]:
        return self._rules

    @property
    def levels(self) -> tuple[Level, ...]:
        return self._levels

    def find_rule(self, action: str) -> PointsRule | None:
        """Return the first declared rule whose conditions contain ``action``."""
        return self._rule_by_action.get(action)

    def find_badge(self, badge_id: str) -> Badge | None:
        return self._badge_by_id.get(badge_id)

    def all_badges(self) -> tuple[Badge, ...]:
        return tuple(d.badge for d in self._badges)

    def badge_definitions(self) -> tuple[BadgeDefinition, ...]:
        return self._badges

    def find_level(self, level: int) -> Level | None:
        if 1 <= level <= len(self._levels):
            return self._levels[level - 1]
        return None

    def level_for_experience(self, experience: int) -> Level:
        """Return the highest level whose threshold is at or below ``experience``.

        Negative experience is treated as zero, so level 1 is always the floor.
        """
        index = bisect_right(self._level_thresholds, max(experience, 0)) - 1
        return self._levels[max(index, 0)]

    def next_level(self, current_level: int) -> Level | None:
        """Return the level right above ``current_level``, or None at the top."""
        return self.find_level(current_level + 1)

    @property
    def max_level(self) -> Level:
        return self._levels[-1]

    def _validate_rules(self) -> None:
        seen: set[str] = set()
        for rule in self._rules:
            if rule.id in seen:
                raise CatalogError(f"Duplicate points rule id: {rule.id}")
            seen.add(rule.id)
            if any(not token for token in rule.conditions):
                raise CatalogError(f"Rule {rule.id} declares an empty action token")

        claimed: dict[str, str] = {}
        for rule in self._rules:
            for token in rule.conditions:
                if token in claimed and claimed[token] != rule.id:
                    logger.warning(
                        f"Action '{token}' is claimed by rules '{claimed[token]}' "
                        f"and '{rule.id}'; '{claimed[token]}' wins"
                    )
                claimed.setdefault(token, rule.id)

    def _validate_badges(self) -> None:
        seen: set[str] = set()
        for definition in self._badges:
            badge = definition.badge
            if badge.id in seen:
                raise CatalogError(f"Duplicate badge id: {badge.id}")
            seen.add(badge.id)
            if badge.earned_at is not None:
                raise CatalogError(f"Catalog badge {badge.id} must not carry earned_at")

    def _validate_levels(self) -> None:
        if not self._levels:
            raise CatalogError("At least one level is required")
        first = self._levels[0]
        if first.level != 1 or first.required_exp != 0:
            raise CatalogError("Level 1 must exist and require 0 experience")
        for previous, current in zip(self._levels, self._levels[1:]):
            if current.level != previous.level + 1:
                raise CatalogError(
                    f"Level {current.level} does not follow level {previous.level}"
                )
            if current.required_exp <= previous.required_exp:
                raise CatalogError(
                    f"Level {current.level} must require more experience "
                    f"than level {previous.level}"
                )


def build_default_catalog() -> RuleCatalog:
    """Build a catalog from the built-in program definitions."""
    return RuleCatalog(DEFAULT_POINTS_RULES, DEFAULT_BADGES, DEFAULT_LEVELS)


@lru_cache
def get_catalog() -> RuleCatalog:
    """Get the cached process-wide catalog."""
    catalog = build_default_catalog()
    logger.info(
        f"Gamification catalog loaded: {len(catalog.rules)} rules, "
        f"{len(catalog.all_badges())} badges, {len(catalog.levels)} levels"
    )
    return catalog
