"""주간 통계 API 스키마."""

import uuid as uuid_pkg
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WeeklyStatsBody(BaseModel):
    """주간 통계 조회 요청."""

    model_config = ConfigDict(populate_by_name=True)

    week_start: date = Field(alias="weekStart")
    refresh_data: bool = Field(default=False, alias="refreshData")


class WeeklyStatsResponse(BaseModel):
    """주간 통계 조회 응답. stats는 camelCase 집계 결과."""

    stats: dict[str, Any]
    summary: Any
    week_start: str
    user_id: uuid_pkg.UUID
    cached: bool
