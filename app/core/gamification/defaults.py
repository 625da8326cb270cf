"""Default rule catalog for the startup program.

Points rules, badges and levels the platform ships with. Declaration order
is significant: the first rule claiming an action token wins, and badges are
evaluated and returned in the order listed here.
"""

from decimal import Decimal

from app.core.gamification.models import (
    Badge,
    BadgeDefinition,
    Context,
    LeaderboardEntry,
    Level,
    PointsRule,
)

DEFAULT_POINTS_RULES: tuple[PointsRule, ...] = (
    # Assignment points
    PointsRule(
        id="assignment_submit",
        name="Assignment Submission",
        description="Points for submitting an assignment",
        points=10,
        category="assignment",
        conditions=("assignment_submitted",),
    ),
    PointsRule(
        id="assignment_early",
        name="Early Submission Bonus",
        description="Bonus points for submitting before deadline",
        points=5,
        category="bonus",
        conditions=("assignment_submitted_early",),
        multiplier=Decimal("1.5"),
    ),
    PointsRule(
        id="assignment_perfect",
        name="Perfect Score",
        description="Bonus points for perfect assignment score",
        points=20,
        category="bonus",
        conditions=("assignment_perfect_score",),
    ),
    PointsRule(
        id="assignment_grade_90",
        name="High Grade (90%+)",
        description="Points for scoring 90% or higher",
        points=15,
        category="assignment",
        conditions=("assignment_grade_90_plus",),
    ),
    PointsRule(
        id="assignment_grade_80",
        name="Good Grade (80%+)",
        description="Points for scoring 80% or higher",
        points=10,
        category="assignment",
        conditions=("assignment_grade_80_plus",),
    ),
    PointsRule(
        id="assignment_grade_70",
        name="Passing Grade (70%+)",
        description="Points for scoring 70% or higher",
        points=5,
        category="assignment",
        conditions=("assignment_grade_70_plus",),
    ),
    # Milestone points
    PointsRule(
        id="phase_complete",
        name="Phase Completion",
        description="Points for completing a phase",
        points=50,
        category="milestone",
        conditions=("phase_completed",),
    ),
    PointsRule(
        id="module_complete",
        name="Module Completion",
        description="Points for completing a module",
        points=25,
        category="milestone",
        conditions=("module_completed",),
    ),
    PointsRule(
        id="video_watch",
        name="Video Watched",
        description="Points for watching a video",
        points=5,
        category="milestone",
        conditions=("video_watched",),
    ),
    # Social points
    PointsRule(
        id="peer_review",
        name="Peer Review",
        description="Points for reviewing peer assignments",
        points=10,
        category="social",
        conditions=("peer_review_submitted",),
    ),
    PointsRule(
        id="forum_participation",
        name="Forum Participation",
        description="Points for active forum participation",
        points=5,
        category="social",
        conditions=("forum_post_created",),
    ),
    PointsRule(
        id="mentor_feedback",
        name="Mentor Feedback",
        description="Points for providing mentor feedback",
        points=15,
        category="social",
        conditions=("mentor_feedback_provided",),
    ),
    # Streak points
    PointsRule(
        id="daily_login",
        name="Daily Login",
        description="Points for daily platform login",
        points=2,
        category="bonus",
        conditions=("daily_login",),
    ),
    PointsRule(
        id="weekly_streak",
        name="Weekly Streak",
        description="Bonus points for weekly activity streak",
        points=25,
        category="bonus",
        conditions=("weekly_streak_maintained",),
    ),
    PointsRule(
        id="monthly_streak",
        name="Monthly Streak",
        description="Bonus points for monthly activity streak",
        points=100,
        category="bonus",
        conditions=("monthly_streak_maintained",),
    ),
)


# --- Badge unlock predicates ---

def _first_assignment(user: LeaderboardEntry, action: str, context: Context) -> bool:
    return user.completed_assignments >= 1


def _perfect_score(user: LeaderboardEntry, action: str, context: Context) -> bool:
    return bool(context.get("has_perfect_score", False))


def _early_bird(user: LeaderboardEntry, action: str, context: Context) -> bool:
    return context.get("early_submissions", 0) >= 5


def _speed_demon(user: LeaderboardEntry, action: str, context: Context) -> bool:
    return context.get("assignments_in_one_day", 0) >= 3


def _reached_phase(phase: int):
    """Build a predicate that holds once the user has reached ``phase``."""

    def predicate(user: LeaderboardEntry, action: str, context: Context) -> bool:
        return user.current_phase >= phase

    return predicate


def _top_performer(user: LeaderboardEntry, action: str, context: Context) -> bool:
    return user.rank is not None and user.rank <= 3


def _first_place(user: LeaderboardEntry, action: str, context: Context) -> bool:
    return user.rank == 1


def _consistency_king(user: LeaderboardEntry, action: str, context: Context) -> bool:
    return context.get("streak_days", 0) >= 30


DEFAULT_BADGES: tuple[BadgeDefinition, ...] = (
    # Achievement badges
    BadgeDefinition(
        badge=Badge(
            id="first_assignment",
            name="Quick Starter",
            description="Submitted your first assignment",
            icon="🚀",
            color="bg-green-100 text-green-800",
            category="achievement",
        ),
        predicate=_first_assignment,
    ),
    BadgeDefinition(
        badge=Badge(
            id="perfect_score",
            name="Perfectionist",
            description="Scored 100% on an assignment",
            icon="⭐",
            color="bg-yellow-100 text-yellow-800",
            category="achievement",
        ),
        predicate=_perfect_score,
    ),
    BadgeDefinition(
        badge=Badge(
            id="early_bird",
            name="Early Bird",
            description="Submitted 5 assignments early",
            icon="🐦",
            color="bg-blue-100 text-blue-800",
            category="achievement",
        ),
        predicate=_early_bird,
    ),
    BadgeDefinition(
        badge=Badge(
            id="speed_demon",
            name="Speed Demon",
            description="Completed 3 assignments in one day",
            icon="⚡",
            color="bg-red-100 text-red-800",
            category="achievement",
        ),
        predicate=_speed_demon,
    ),
    # Milestone badges
    BadgeDefinition(
        badge=Badge(
            id="phase_1_complete",
            name="Foundation Master",
            description="Completed Phase 1: Foundation & Mindset",
            icon="🏗️",
            color="bg-purple-100 text-purple-800",
            category="milestone",
        ),
        predicate=_reached_phase(2),
    ),
    BadgeDefinition(
        badge=Badge(
            id="phase_3_complete",
            name="Business Strategist",
            description="Completed Phase 3: Business Model & Strategy",
            icon="📊",
            color="bg-indigo-100 text-indigo-800",
            category="milestone",
        ),
        predicate=_reached_phase(4),
    ),
    BadgeDefinition(
        badge=Badge(
            id="phase_6_complete",
            name="Funding Expert",
            description="Completed Phase 6: Funding & Investment",
            icon="💰",
            color="bg-green-100 text-green-800",
            category="milestone",
        ),
        predicate=_reached_phase(7),
    ),
    BadgeDefinition(
        badge=Badge(
            id="phase_12_complete",
            name="Startup Graduate",
            description="Completed all 12 phases of the program",
            icon="🎓",
            color="bg-gold-100 text-gold-800",
            category="milestone",
        ),
        predicate=_reached_phase(12),
    ),
    # Social badges (no automatic unlock yet)
    BadgeDefinition(
        badge=Badge(
            id="helpful_peer",
            name="Helpful Peer",
            description="Provided 10 helpful peer reviews",
            icon="🤝",
            color="bg-teal-100 text-teal-800",
            category="social",
        ),
    ),
    BadgeDefinition(
        badge=Badge(
            id="forum_champion",
            name="Forum Champion",
            description="Active in forum discussions",
            icon="💬",
            color="bg-pink-100 text-pink-800",
            category="social",
        ),
    ),
    BadgeDefinition(
        badge=Badge(
            id="mentor_favorite",
            name="Mentor Favorite",
            description="Recognized by mentors for excellence",
            icon="👨‍🏫",
            color="bg-orange-100 text-orange-800",
            category="social",
        ),
    ),
    # Special badges
    BadgeDefinition(
        badge=Badge(
            id="top_performer",
            name="Top Performer",
            description="Reached top 3 in leaderboard",
            icon="🏆",
            color="bg-yellow-100 text-yellow-800",
            category="special",
        ),
        predicate=_top_performer,
    ),
    BadgeDefinition(
        badge=Badge(
            id="consistency_king",
            name="Consistency King",
            description="Maintained 30-day activity streak",
            icon="🔥",
            color="bg-red-100 text-red-800",
            category="special",
        ),
        predicate=_consistency_king,
    ),
    BadgeDefinition(
        badge=Badge(
            id="first_place",
            name="First Place",
            description="Achieved #1 rank in leaderboard",
            icon="🥇",
            color="bg-gold-100 text-gold-800",
            category="special",
        ),
        predicate=_first_place,
    ),
)

DEFAULT_LEVELS: tuple[Level, ...] = (
    Level(
        level=1,
        name="Novice",
        required_exp=0,
        benefits=("Basic platform access", "Assignment submissions"),
        color="bg-gray-100 text-gray-800",
    ),
    Level(
        level=2,
        name="Apprentice",
        required_exp=100,
        benefits=("Forum access", "Peer reviews"),
        color="bg-blue-100 text-blue-800",
    ),
    Level(
        level=3,
        name="Learner",
        required_exp=250,
        benefits=("Mentor access", "Advanced assignments"),
        color="bg-green-100 text-green-800",
    ),
    Level(
        level=4,
        name="Practitioner",
        required_exp=500,
        benefits=("Live classes", "Group projects"),
        color="bg-purple-100 text-purple-800",
    ),
    Level(
        level=5,
        name="Expert",
        required_exp=1000,
        benefits=("Investor access", "Mentoring opportunities"),
        color="bg-orange-100 text-orange-800",
    ),
    Level(
        level=6,
        name="Master",
        required_exp=2000,
        benefits=("Premium features", "Exclusive events"),
        color="bg-red-100 text-red-800",
    ),
    Level(
        level=7,
        name="Grandmaster",
        required_exp=5000,
        benefits=("All features", "Platform ambassador"),
        color="bg-gold-100 text-gold-800",
    ),
)
