import uuid as uuid_pkg
from datetime import date
from typing import Any, TypedDict

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.activity.schemas.activity import GitHubActivity
from app.models.weekly_stats import WeeklyStats


class WeeklyStatsRequest(BaseModel):
    """주간 통계 조회 요청"""

    user_id: uuid_pkg.UUID
    integration_id: uuid_pkg.UUID
    week_start: date
    force_refresh: bool = False
    github_token: str

    def __repr__(self) -> str:
        return (
            f"WeeklyStatsRequest(user_id={self.user_id!r}, week_start={self.week_start}, "
            f"force_refresh={self.force_refresh})"
        )


class WeeklyStatsResult(BaseModel):
    """주간 통계 조회 결과, cached는 진단용"""

    stats: GitHubActivity
    summary: Any
    week_start: str
    user_id: uuid_pkg.UUID
    cached: bool


class WeeklyStatsState(TypedDict, total=False):
    """LangGraph 캐시 워크플로우 상태"""

    request: WeeklyStatsRequest
    db: AsyncSession
    today: date
    is_current_week: bool
    cached_record: WeeklyStats | None
    activity: GitHubActivity
    summary: Any
    cached: bool
    persisted: bool
