"""Unit tests for PointsService (gamification)."""

from decimal import Decimal

import pytest

from app.core.gamification.catalog import RuleCatalog
from app.core.gamification.defaults import DEFAULT_LEVELS
from app.core.gamification.models import PointsRule
from app.core.gamification.points_service import (
    PointsService,
    round_half_away_from_zero,
    rounded_mean,
)


@pytest.fixture
def points_service(catalog):
    """Create PointsService instance."""
    return PointsService(catalog)


def _service_with(*rules: PointsRule) -> PointsService:
    return PointsService(RuleCatalog(rules, [], DEFAULT_LEVELS))


class TestComputePoints:
    """Tests for compute_points with the default catalog."""

    def test_unknown_action_is_worth_zero(self, points_service):
        assert points_service.compute_points("unknown_action", {}) == 0

    def test_rule_without_multiplier_returns_base_points(self, points_service, catalog):
        for rule in catalog.rules:
            if rule.multiplier is None:
                for token in rule.conditions:
                    assert points_service.compute_points(token, {}) == rule.points

    def test_grade_90_plus(self, points_service):
        assert points_service.compute_points("assignment_grade_90_plus", {}) == 15

    def test_early_submission_applies_multiplier(self, points_service):
        # 5 * 1.5 = 7.5, rounded away from zero
        assert points_service.compute_points("assignment_submitted_early", {}) == 8

    def test_context_defaults_to_empty(self, points_service):
        assert points_service.compute_points("daily_login") == 2

    def test_empty_action_rejected(self, points_service):
        with pytest.raises(ValueError):
            points_service.compute_points("", {})

    def test_blank_action_rejected(self, points_service):
        with pytest.raises(ValueError):
            points_service.compute_points("   ", {})

    def test_default_service_uses_shared_catalog(self):
        assert PointsService().compute_points("phase_completed") == 50


class TestMultiplierCondition:
    """Tests for multiplier eligibility."""

    def test_condition_true_applies_multiplier(self):
        service = _service_with(
            PointsRule(
                id="streak",
                name="Streak",
                points=10,
                category="bonus",
                conditions=("streak",),
                multiplier=Decimal("2.5"),
                multiplier_condition=lambda ctx: ctx["days"] >= 7,
            )
        )
        assert service.compute_points("streak", {"days": 8}) == 25

    def test_condition_false_returns_base_points(self):
        service = _service_with(
            PointsRule(
                id="streak",
                name="Streak",
                points=10,
                category="bonus",
                conditions=("streak",),
                multiplier=Decimal("2.5"),
                multiplier_condition=lambda ctx: ctx["days"] >= 7,
            )
        )
        assert service.compute_points("streak", {"days": 3}) == 10

    def test_missing_context_field_means_ineligible(self):
        service = _service_with(
            PointsRule(
                id="streak",
                name="Streak",
                points=10,
                category="bonus",
                conditions=("streak",),
                multiplier=Decimal("3"),
                multiplier_condition=lambda ctx: ctx["days"] >= 7,
            )
        )
        assert service.compute_points("streak", {}) == 10

    def test_malformed_context_value_means_ineligible(self):
        service = _service_with(
            PointsRule(
                id="streak",
                name="Streak",
                points=10,
                category="bonus",
                conditions=("streak",),
                multiplier=Decimal("3"),
                multiplier_condition=lambda ctx: ctx["days"] >= 7,
            )
        )
        assert service.compute_points("streak", {"days": "many"}) == 10

    def test_non_mapping_context_means_ineligible(self):
        service = _service_with(
            PointsRule(
                id="streak",
                name="Streak",
                points=10,
                category="bonus",
                conditions=("streak",),
                multiplier=Decimal("3"),
                multiplier_condition=lambda ctx: True,
            )
        )
        assert service.compute_points("streak", None) == 10

    def test_empty_list_index_means_ineligible(self):
        service = _service_with(
            PointsRule(
                id="top_score",
                name="Top Score",
                points=5,
                category="bonus",
                conditions=("top_score",),
                multiplier=Decimal("2"),
                multiplier_condition=lambda ctx: ctx["scores"][0] >= 90,
            )
        )
        assert service.compute_points("top_score", {"scores": []}) == 5
        assert service.compute_points("top_score", {"scores": [95]}) == 10

    def test_zero_divisor_means_ineligible(self):
        service = _service_with(
            PointsRule(
                id="completion",
                name="Completion",
                points=5,
                category="bonus",
                conditions=("completion",),
                multiplier=Decimal("2"),
                multiplier_condition=lambda ctx: ctx["done"] / ctx["total"] >= 0.5,
            )
        )
        assert service.compute_points("completion", {"done": 3, "total": 0}) == 5
        assert service.compute_points("completion", {"done": 3, "total": 4}) == 10

    def test_first_declared_rule_scores_shared_token(self):
        service = _service_with(
            PointsRule(id="a", name="A", points=4, category="social", conditions=("x",)),
            PointsRule(id="b", name="B", points=40, category="social", conditions=("x",)),
        )
        assert service.compute_points("x") == 4


class TestComputeTotal:
    """Tests for summing several tokens of one event."""

    def test_sums_each_token(self, points_service):
        total = points_service.compute_total(
            ["assignment_submitted_early", "assignment_grade_90_plus"], {}
        )
        assert total == 8 + 15

    def test_unknown_tokens_add_nothing(self, points_service):
        assert points_service.compute_total(["video_watched", "mystery"]) == 5

    def test_empty(self, points_service):
        assert points_service.compute_total([]) == 0


class TestRounding:
    """Tests for half-away-from-zero rounding."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("7.5", 8), ("2.5", 3), ("2.4", 2), ("-2.5", -3), ("0.5", 1)],
    )
    def test_round_half_away_from_zero(self, value, expected):
        assert round_half_away_from_zero(Decimal(value)) == expected

    def test_large_value_keeps_precision(self):
        value = Decimal(f"{10**40}.5")
        assert round_half_away_from_zero(value) == 10**40 + 1


class TestRoundedMean:
    """Tests for the integer mean used by leaderboard stats."""

    @pytest.mark.parametrize(
        ("total", "count", "expected"),
        [(130, 3, 43), (3, 2, 2), (401, 3, 134), (-3, 2, -2), (0, 5, 0)],
    )
    def test_rounded_mean(self, total, count, expected):
        assert rounded_mean(total, count) == expected

    def test_huge_total(self):
        assert rounded_mean(3 * 10**30 + 1, 2) == 15 * 10**29 + 1
