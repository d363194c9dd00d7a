from fastapi import APIRouter

from app.api.v1.integrations import router as integrations_router
from app.api.v1.weekly_stats import router as weekly_stats_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(weekly_stats_router)
api_router.include_router(integrations_router)
