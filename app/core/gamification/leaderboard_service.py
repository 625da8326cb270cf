"""Leaderboard service for gamification system."""

from collections import Counter
from collections.abc import Sequence

from app.core.gamification.catalog import RuleCatalog, get_catalog
from app.core.gamification.models import (
    LeaderboardEntry,
    LeaderboardPeriod,
    LeaderboardStats,
    Level,
    LevelProgress,
    RankMovement,
)
from app.core.gamification.points_service import rounded_mean
from app.core.logging import get_logger

logger = get_logger(__name__)

NOT_AVAILABLE = "N/A"
ALL_COHORTS = "all"

_PERIOD_FIELDS: dict[str, str] = {
    "all_time": "total_points",
    "weekly": "weekly_points",
    "monthly": "monthly_points",
}


class LeaderboardService:
    """Service for levels, leaderboard rankings and aggregate stats.

    Every method returns new values; entries passed in are never modified.
    """

    def __init__(self, catalog: RuleCatalog | None = None) -> None:
        self.catalog = catalog or get_catalog()

    # --- Levels ---

    def level_for_experience(self, experience: int) -> Level:
        return self.catalog.level_for_experience(experience)

    def experience_to_next_level(self, current_exp: int, current_level: int) -> int:
        """Experience still needed to reach the level after ``current_level``.

        Returns 0 at the maximum level or when the threshold is already met.
        """
        next_level = self.catalog.next_level(current_level)
        if next_level is None:
            return 0
        return max(next_level.required_exp - current_exp, 0)

    def level_progress(self, experience: int) -> LevelProgress:
        """Describe progress through the current level band (0-100%)."""
        level = self.level_for_experience(experience)
        next_level = self.catalog.next_level(level.level)

        if next_level is None:
            progress = 100.0
        else:
            band = next_level.required_exp - level.required_exp
            progress = (experience - level.required_exp) / band * 100
            progress = min(100.0, max(0.0, progress))

        return LevelProgress(
            level=level,
            next_level=next_level,
            experience=experience,
            experience_to_next_level=self.experience_to_next_level(experience, level.level),
            progress_percent=round(progress, 1),
        )

    def with_levels(self, entries: Sequence[LeaderboardEntry]) -> list[LeaderboardEntry]:
        """Return copies of the entries with level fields derived from experience."""
        leveled: list[LeaderboardEntry] = []
        for entry in entries:
            level = self.level_for_experience(entry.experience)
            next_level = self.catalog.next_level(level.level)
            leveled.append(
                entry.model_copy(
                    update={
                        "level": level.level,
                        "next_level_exp": next_level.required_exp if next_level else None,
                    }
                )
            )
        return leveled

    # --- Ranking ---

    def rank(
        self,
        entries: Sequence[LeaderboardEntry],
        period: LeaderboardPeriod = "all_time",
    ) -> list[LeaderboardEntry]:
        """Rank entries by points, highest first.

        Ties keep their relative input order. ``previous_rank`` carries the
        rank each entry had before this call, or its 1-based input position
        when it had none.

        Args:
            entries: Entries to rank
            period: Which points total to rank by

        Returns:
            New list of ranked entries
        """
        field = _PERIOD_FIELDS[period]
        positioned = [
            (entry.rank if entry.rank is not None else position, entry)
            for position, entry in enumerate(entries, start=1)
        ]
        # sorted() is stable, so equal scores keep input order
        ordered = sorted(positioned, key=lambda item: getattr(item[1], field), reverse=True)

        return [
            entry.model_copy(update={"rank": rank, "previous_rank": previous_rank})
            for rank, (previous_rank, entry) in enumerate(ordered, start=1)
        ]

    @staticmethod
    def filter_by_cohort(
        entries: Sequence[LeaderboardEntry],
        cohort: str | None,
    ) -> list[LeaderboardEntry]:
        """Keep entries of one cohort; None or "all" keeps everything."""
        if cohort is None or cohort == ALL_COHORTS:
            return list(entries)
        return [entry for entry in entries if entry.cohort == cohort]

    @staticmethod
    def rank_movement(entry: LeaderboardEntry) -> RankMovement:
        """Direction the entry moved since its previous rank."""
        if entry.rank is None or entry.previous_rank is None:
            return "same"
        if entry.rank < entry.previous_rank:
            return "up"
        if entry.rank > entry.previous_rank:
            return "down"
        return "same"

    # --- Stats ---

    def leaderboard_stats(self, entries: Sequence[LeaderboardEntry]) -> LeaderboardStats:
        """Compute aggregate statistics; empty input yields sentinel values."""
        if not entries:
            return LeaderboardStats()

        total_points = sum(entry.total_points for entry in entries)
        average = rounded_mean(total_points, len(entries))

        return LeaderboardStats(
            total_students=len(entries),
            average_points=average,
            top_performer=self.rank(entries)[0].name,
            most_active_cohort=self._most_active_cohort(entries),
            total_points_awarded=total_points,
        )

    @staticmethod
    def _most_active_cohort(entries: Sequence[LeaderboardEntry]) -> str:
        """Cohort with the most members; the first one seen wins ties."""
        counts = Counter(entry.cohort for entry in entries)
        if not counts:
            return NOT_AVAILABLE
        # Counter keeps insertion order and max() returns the first maximum
        return max(counts, key=counts.__getitem__)
