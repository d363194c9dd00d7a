"""주간 통계 캐시 모델"""

import uuid as uuid_pkg
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index
from sqlmodel import Field, SQLModel


class WeeklyStats(SQLModel, table=True):
    """
    사용자별 주간 GitHub 활동 집계 + LLM 요약 캐시

    (user_id, integration_id, week_start) 당 한 행만 존재하며 재계산 시 덮어쓴다.
    진행 중인 주는 저장하지 않는다.
    """

    __tablename__ = "productivity_stats"
    __table_args__ = (
        Index(
            "ix_productivity_stats_user_integration_week",
            "user_id",
            "integration_id",
            "week_start",
            unique=True,
        ),
    )

    id: uuid_pkg.UUID = Field(default_factory=uuid_pkg.uuid4, primary_key=True, nullable=False)

    user_id: uuid_pkg.UUID = Field(nullable=False, index=True)
    integration_id: uuid_pkg.UUID = Field(foreign_key="integrations.id", nullable=False)
    week_start: date = Field(nullable=False, description="주 시작일 (월요일)")

    stats: dict[str, Any] = Field(default_factory=dict, sa_type=JSON, nullable=False)
    summary: dict[str, Any] | str | None = Field(default=None, sa_type=JSON)

    created_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
    )
    updated_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
    )
