"""API v1 router aggregation."""

from fastapi import APIRouter

from app.modules.gamification.api import router as gamification_router

api_router = APIRouter()

# Include module routers
api_router.include_router(gamification_router, prefix="/gamification", tags=["gamification"])
