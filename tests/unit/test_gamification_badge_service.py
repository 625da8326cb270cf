"""Unit tests for BadgeService (gamification)."""

import pytest

from app.core.gamification.badge_service import BadgeService
from app.core.gamification.catalog import RuleCatalog
from app.core.gamification.defaults import DEFAULT_LEVELS
from app.core.gamification.models import Badge, BadgeDefinition


@pytest.fixture
def badge_service(catalog):
    """Create BadgeService instance."""
    return BadgeService(catalog)


def _ids(badges):
    return [badge.id for badge in badges]


class TestEligibleBadges:
    """Tests for eligible_badges."""

    def test_new_user_earns_nothing(self, badge_service, make_entry):
        assert badge_service.eligible_badges(make_entry(), "daily_login", {}) == []

    def test_first_assignment(self, badge_service, make_entry):
        user = make_entry(completed_assignments=1)
        assert _ids(badge_service.eligible_badges(user, "assignment_submitted", {})) == [
            "first_assignment"
        ]

    def test_phase_12_complete(self, badge_service, make_entry):
        user = make_entry(current_phase=12)
        assert "phase_12_complete" in _ids(
            badge_service.eligible_badges(user, "phase_completed", {})
        )

    def test_phase_11_is_not_graduate(self, badge_service, make_entry):
        user = make_entry(current_phase=11)
        ids = _ids(badge_service.eligible_badges(user, "phase_completed", {}))
        assert "phase_12_complete" not in ids
        assert ids == ["phase_1_complete", "phase_3_complete", "phase_6_complete"]

    def test_context_predicates(self, badge_service, make_entry):
        context = {
            "has_perfect_score": True,
            "early_submissions": 5,
            "assignments_in_one_day": 3,
            "streak_days": 30,
        }
        ids = _ids(badge_service.eligible_badges(make_entry(), "assignment_submitted", context))
        assert ids == ["perfect_score", "early_bird", "speed_demon", "consistency_king"]

    def test_context_below_thresholds(self, badge_service, make_entry):
        context = {"early_submissions": 4, "assignments_in_one_day": 2, "streak_days": 29}
        assert badge_service.eligible_badges(make_entry(), "daily_login", context) == []

    def test_rank_badges(self, badge_service, make_entry):
        assert _ids(badge_service.eligible_badges(make_entry(rank=1), "daily_login")) == [
            "top_performer",
            "first_place",
        ]
        assert _ids(badge_service.eligible_badges(make_entry(rank=3), "daily_login")) == [
            "top_performer"
        ]
        assert badge_service.eligible_badges(make_entry(rank=4), "daily_login") == []

    def test_unranked_user_gets_no_rank_badges(self, badge_service, make_entry):
        assert badge_service.eligible_badges(make_entry(rank=None), "daily_login") == []

    def test_malformed_context_is_not_eligible(self, badge_service, make_entry):
        context = {"early_submissions": "lots", "streak_days": None}
        assert badge_service.eligible_badges(make_entry(), "daily_login", context) == []

    def test_non_mapping_context_is_not_eligible(self, badge_service, make_entry):
        user = make_entry(current_phase=2)
        ids = _ids(badge_service.eligible_badges(user, "daily_login", ["not", "a", "dict"]))
        assert ids == ["phase_1_complete"]

    def test_held_badges_are_excluded(self, badge_service, make_entry):
        user = make_entry(current_phase=12, badges=["phase_1_complete", "phase_12_complete"])
        ids = _ids(badge_service.eligible_badges(user, "phase_completed", {}))
        assert ids == ["phase_3_complete", "phase_6_complete"]

    def test_reevaluating_awarded_state_is_idempotent(self, badge_service, make_entry):
        user = make_entry(current_phase=12, completed_assignments=3)
        first = badge_service.eligible_badges(user, "phase_completed", {})
        awarded = badge_service.award(user, first)
        assert badge_service.eligible_badges(awarded, "phase_completed", {}) == []

    def test_earned_at_is_set(self, badge_service, make_entry, fixed_now):
        badges = badge_service.eligible_badges(
            make_entry(completed_assignments=1), "assignment_submitted", {}, now=fixed_now
        )
        assert all(badge.earned_at == fixed_now for badge in badges)

    def test_catalog_is_not_stamped(self, badge_service, catalog, make_entry, fixed_now):
        badge_service.eligible_badges(make_entry(completed_assignments=1), "x", {}, now=fixed_now)
        assert catalog.find_badge("first_assignment").earned_at is None

    def test_user_is_not_mutated(self, badge_service, make_entry):
        user = make_entry(current_phase=12)
        before = user.model_dump()
        badge_service.eligible_badges(user, "phase_completed", {})
        assert user.model_dump() == before


class TestDormantBadges:
    """Tests for badges without a predicate."""

    def test_dormant_badge_never_awarded(self, make_entry):
        catalog = RuleCatalog(
            [],
            [BadgeDefinition(badge=Badge(id="sleepy", name="Sleepy", category="social"))],
            DEFAULT_LEVELS,
        )
        service = BadgeService(catalog)
        assert service.eligible_badges(make_entry(current_phase=99, rank=1), "x", {}) == []

    def test_predicate_receives_action(self, make_entry):
        catalog = RuleCatalog(
            [],
            [
                BadgeDefinition(
                    badge=Badge(id="talker", name="Talker", category="social"),
                    predicate=lambda user, action, ctx: action == "forum_post_created",
                )
            ],
            DEFAULT_LEVELS,
        )
        service = BadgeService(catalog)
        assert _ids(service.eligible_badges(make_entry(), "forum_post_created")) == ["talker"]
        assert service.eligible_badges(make_entry(), "daily_login") == []


class TestPredicateFailures:
    """Tests for predicates that cannot evaluate the context."""

    @staticmethod
    def _service(predicate):
        catalog = RuleCatalog(
            [],
            [
                BadgeDefinition(
                    badge=Badge(id="sharp", name="Sharp", category="achievement"),
                    predicate=predicate,
                )
            ],
            DEFAULT_LEVELS,
        )
        return BadgeService(catalog)

    def test_empty_list_index_is_not_eligible(self, make_entry):
        service = self._service(lambda user, action, ctx: ctx["scores"][0] >= 90)
        assert service.eligible_badges(make_entry(), "x", {"scores": []}) == []
        assert _ids(service.eligible_badges(make_entry(), "x", {"scores": [95]})) == ["sharp"]

    def test_zero_divisor_is_not_eligible(self, make_entry):
        service = self._service(lambda user, action, ctx: ctx["done"] / ctx["total"] >= 0.5)
        assert service.eligible_badges(make_entry(), "x", {"done": 1, "total": 0}) == []
        assert _ids(service.eligible_badges(make_entry(), "x", {"done": 1, "total": 2})) == [
            "sharp"
        ]


class TestAward:
    """Tests for new_badge_ids and award."""

    def test_new_badge_ids_diff(self, badge_service, catalog, make_entry):
        user = make_entry(badges=["first_assignment"])
        awarded = [catalog.find_badge("first_assignment"), catalog.find_badge("early_bird")]
        assert badge_service.new_badge_ids(user, awarded) == ["early_bird"]

    def test_award_returns_new_entry(self, badge_service, catalog, make_entry):
        user = make_entry(badges=["first_assignment"])
        updated = badge_service.award(user, [catalog.find_badge("early_bird")])
        assert updated.badges == ("first_assignment", "early_bird")
        assert user.badges == ("first_assignment",)

    def test_award_nothing_returns_same_entry(self, badge_service, make_entry):
        user = make_entry()
        assert badge_service.award(user, []) is user
