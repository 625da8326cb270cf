"""Points service for gamification system."""

from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from app.core.gamification.catalog import RuleCatalog, get_catalog
from app.core.gamification.models import PointsRule
from app.core.logging import get_logger

logger = get_logger(__name__)

# Errors a multiplier condition may raise on a malformed context
PREDICATE_ERRORS = (LookupError, TypeError, ValueError, AttributeError, ArithmeticError)


def round_half_away_from_zero(value: Decimal) -> int:
    """Round to the nearest integer, halves going away from zero."""
    with localcontext() as ctx:
        # Enough precision for the integer part of any value
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def rounded_mean(total: int, count: int) -> int:
    """Integer mean of ``total`` over ``count``, halves going away from zero."""
    quotient, remainder = divmod(abs(total), count)
    if 2 * remainder >= count:
        quotient += 1
    return -quotient if total < 0 else quotient


class PointsService:
    """Service for computing the point value of gamified actions."""

    def __init__(self, catalog: RuleCatalog | None = None) -> None:
        self.catalog = catalog or get_catalog()

    def compute_points(
        self,
        action: str,
        context: Mapping[str, Any] | None = None,
    ) -> int:
        """Compute the points earned by a single action.

        Args:
            action: Action token (e.g., "assignment_submitted_early")
            context: Event data used by multiplier conditions

        Returns:
            Non-negative point value; 0 for actions no rule recognizes

        Raises:
            ValueError: If action is empty
        """
        if not isinstance(action, str) or not action.strip():
            raise ValueError("action must be a non-empty string")

        rule = self.catalog.find_rule(action)
        if rule is None:
            logger.debug(f"No points rule for action '{action}'")
            return 0

        if rule.multiplier is None or not self._multiplier_applies(rule, context):
            return rule.points

        return round_half_away_from_zero(Decimal(rule.points) * rule.multiplier)

    def compute_total(
        self,
        actions: Iterable[str],
        context: Mapping[str, Any] | None = None,
    ) -> int:
        """Sum points for several action tokens raised by one event."""
        return sum(self.compute_points(action, context) for action in actions)

    def rule_for(self, action: str) -> PointsRule | None:
        """Get the rule that scores an action, if any."""
        return self.catalog.find_rule(action)

    @staticmethod
    def _multiplier_applies(
        rule: PointsRule,
        context: Mapping[str, Any] | None,
    ) -> bool:
        """Evaluate the rule's multiplier condition; failures mean ineligible."""
        if rule.multiplier_condition is None:
            return True
        if not isinstance(context, Mapping):
            return False
        try:
            return bool(rule.multiplier_condition(context))
        except PREDICATE_ERRORS as e:
            logger.debug(f"Multiplier condition for rule '{rule.id}' failed: {e}")
            return False
