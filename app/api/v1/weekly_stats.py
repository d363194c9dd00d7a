import uuid as uuid_pkg

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user_id, get_github_integration, get_github_token
from app.api.v1.schemas import WeeklyStatsBody, WeeklyStatsResponse
from app.core.config import settings
from app.core.database import get_db
from app.core.limiter import limiter
from app.core.logging import get_logger
from app.domain.activity.schemas import WeeklyStatsRequest
from app.domain.activity.service import get_weekly_stats
from app.models.integration import Integration

router = APIRouter(tags=["weekly-stats"])
logger = get_logger(__name__)


@router.post("/weekly-stats", response_model=WeeklyStatsResponse)
@limiter.limit(settings.weekly_stats_rate_limit)
async def post_weekly_stats(
    request: Request,
    body: WeeklyStatsBody,
    user_id: uuid_pkg.UUID = Depends(get_current_user_id),
    integration: Integration = Depends(get_github_integration),
    github_token: str = Depends(get_github_token),
    db: AsyncSession = Depends(get_db),
) -> WeeklyStatsResponse:
    stats_request = WeeklyStatsRequest(
        user_id=user_id,
        integration_id=integration.id,
        week_start=body.week_start,
        force_refresh=body.refresh_data,
        github_token=github_token,
    )

    result = await get_weekly_stats(db, stats_request)

    return WeeklyStatsResponse(
        stats=result.stats.model_dump(mode="json", by_alias=True),
        summary=result.summary,
        week_start=result.week_start,
        user_id=result.user_id,
        cached=result.cached,
    )
