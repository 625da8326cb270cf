"""Gamification API router.

Endpoints for the rule catalog, points, badges, levels and leaderboard views.
The engine is stateless: every endpoint computes from the request payload.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.core.config_file import Settings, get_settings
from app.core.exceptions import raise_bad_request, raise_not_found
from app.core.gamification.badge_service import BadgeService
from app.core.gamification.catalog import RuleCatalog, get_catalog
from app.core.gamification.leaderboard_service import LeaderboardService
from app.core.gamification.points_service import PointsService
from app.modules.gamification.event_handlers import GamificationEventHandler
from app.modules.gamification.schemas import (
    BadgeEvaluationRequest,
    BadgeResponse,
    ComputePointsRequest,
    GamificationOutcomeResponse,
    LeaderboardRequest,
    LeaderboardResponse,
    LevelProgressResponse,
    LevelResponse,
    PointsResponse,
    PointsRuleResponse,
    RankedEntryResponse,
)
from app.schemas.common import ListMeta, StandardListResponse, StandardResponse

router = APIRouter()


# --- Dependencies ---

def _get_points_service(
    catalog: Annotated[RuleCatalog, Depends(get_catalog)],
) -> PointsService:
    return PointsService(catalog)


def _get_badge_service(
    catalog: Annotated[RuleCatalog, Depends(get_catalog)],
) -> BadgeService:
    return BadgeService(catalog)


def _get_leaderboard_service(
    catalog: Annotated[RuleCatalog, Depends(get_catalog)],
) -> LeaderboardService:
    return LeaderboardService(catalog)


def _get_event_handler(
    catalog: Annotated[RuleCatalog, Depends(get_catalog)],
) -> GamificationEventHandler:
    return GamificationEventHandler(catalog)


# --- Catalog ---

@router.get(
    "/rules",
    response_model=StandardListResponse[PointsRuleResponse],
    status_code=status.HTTP_200_OK,
    summary="List points rules",
)
async def list_rules(
    catalog: Annotated[RuleCatalog, Depends(get_catalog)],
) -> StandardListResponse[PointsRuleResponse]:
    """List points rules in declaration order."""
    rules = [
        PointsRuleResponse.model_validate(rule.model_dump(mode="json"))
        for rule in catalog.rules
    ]
    return StandardListResponse(data=rules, meta=ListMeta(total=len(rules)))


@router.get(
    "/badges",
    response_model=StandardListResponse[BadgeResponse],
    status_code=status.HTTP_200_OK,
    summary="List badges",
)
async def list_badges(
    catalog: Annotated[RuleCatalog, Depends(get_catalog)],
) -> StandardListResponse[BadgeResponse]:
    """List catalog badges in declaration order."""
    badges = [BadgeResponse.model_validate(badge.model_dump()) for badge in catalog.all_badges()]
    return StandardListResponse(data=badges, meta=ListMeta(total=len(badges)))


@router.get(
    "/badges/{badge_id}",
    response_model=StandardResponse[BadgeResponse],
    status_code=status.HTTP_200_OK,
    summary="Get a badge",
)
async def get_badge(
    badge_id: str,
    catalog: Annotated[RuleCatalog, Depends(get_catalog)],
) -> StandardResponse[BadgeResponse]:
    """Get a single catalog badge."""
    badge = catalog.find_badge(badge_id)
    if badge is None:
        raise_not_found("Badge", badge_id)
    return StandardResponse(data=BadgeResponse.model_validate(badge.model_dump()))


@router.get(
    "/levels",
    response_model=StandardListResponse[LevelResponse],
    status_code=status.HTTP_200_OK,
    summary="List levels",
)
async def list_levels(
    catalog: Annotated[RuleCatalog, Depends(get_catalog)],
) -> StandardListResponse[LevelResponse]:
    """List experience levels in ascending order."""
    levels = [LevelResponse.model_validate(level.model_dump()) for level in catalog.levels]
    return StandardListResponse(data=levels, meta=ListMeta(total=len(levels)))


@router.get(
    "/levels/progress",
    response_model=StandardResponse[LevelProgressResponse],
    status_code=status.HTTP_200_OK,
    summary="Get level progress for an experience total",
)
async def get_level_progress(
    service: Annotated[LeaderboardService, Depends(_get_leaderboard_service)],
    experience: int = Query(0, description="Cumulative experience"),
) -> StandardResponse[LevelProgressResponse]:
    """Get the level, next level and progress for an experience total."""
    progress = service.level_progress(experience)
    return StandardResponse(data=LevelProgressResponse.model_validate(progress.model_dump()))


# --- Points & Badges ---

@router.post(
    "/points",
    response_model=StandardResponse[PointsResponse],
    status_code=status.HTTP_200_OK,
    summary="Compute points for an action",
)
async def compute_points(
    payload: ComputePointsRequest,
    service: Annotated[PointsService, Depends(_get_points_service)],
) -> StandardResponse[PointsResponse]:
    """Compute the points an action is worth. Unknown actions are worth 0."""
    rule = service.rule_for(payload.action)
    points = service.compute_points(payload.action, payload.context)
    return StandardResponse(
        data=PointsResponse(
            action=payload.action,
            points=points,
            rule_id=rule.id if rule else None,
        )
    )


@router.post(
    "/badges/eligible",
    response_model=StandardListResponse[BadgeResponse],
    status_code=status.HTTP_200_OK,
    summary="Evaluate badge eligibility",
)
async def evaluate_badges(
    payload: BadgeEvaluationRequest,
    service: Annotated[BadgeService, Depends(_get_badge_service)],
) -> StandardListResponse[BadgeResponse]:
    """List badges the user newly qualifies for."""
    badges = service.eligible_badges(payload.user, payload.action, payload.context)
    data = [BadgeResponse.model_validate(badge.model_dump()) for badge in badges]
    return StandardListResponse(data=data, meta=ListMeta(total=len(data)))


@router.post(
    "/events",
    response_model=StandardResponse[GamificationOutcomeResponse],
    status_code=status.HTTP_200_OK,
    summary="Apply a gamified action",
)
async def handle_event(
    payload: BadgeEvaluationRequest,
    handler: Annotated[GamificationEventHandler, Depends(_get_event_handler)],
) -> StandardResponse[GamificationOutcomeResponse]:
    """Compute points, level and badges for an action. Nothing is stored."""
    outcome = handler.handle(payload.user, payload.action, payload.context)
    return StandardResponse(
        data=GamificationOutcomeResponse.model_validate(outcome.model_dump())
    )


# --- Leaderboard ---

@router.post(
    "/leaderboard",
    response_model=StandardResponse[LeaderboardResponse],
    status_code=status.HTTP_200_OK,
    summary="Rank a leaderboard",
)
async def rank_leaderboard(
    payload: LeaderboardRequest,
    service: Annotated[LeaderboardService, Depends(_get_leaderboard_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> StandardResponse[LeaderboardResponse]:
    """Rank entries for a period and cohort and compute aggregate stats.

    Stats cover the filtered cohort; ``limit`` only trims the returned rows.
    """
    if len(payload.entries) > settings.LEADERBOARD_MAX_ENTRIES:
        raise_bad_request(
            "LEADERBOARD_TOO_LARGE",
            "Too many leaderboard entries",
            details={
                "entries": len(payload.entries),
                "max_entries": settings.LEADERBOARD_MAX_ENTRIES,
            },
        )

    entries = service.filter_by_cohort(payload.entries, payload.cohort)
    ranked = service.with_levels(service.rank(entries, payload.period))
    stats = service.leaderboard_stats(entries)

    limit = payload.limit or settings.LEADERBOARD_DEFAULT_LIMIT
    rows = [
        RankedEntryResponse(entry=entry, movement=service.rank_movement(entry))
        for entry in ranked[:limit]
    ]

    return StandardResponse(
        data=LeaderboardResponse(
            period=payload.period,
            cohort=payload.cohort,
            entries=rows,
            stats=stats,
        ),
        meta={"total": len(ranked), "returned": len(rows)},
    )
