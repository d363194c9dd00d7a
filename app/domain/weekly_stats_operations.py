"""주간 통계 캐시 DB 연산"""

import uuid as uuid_pkg
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.weekly_stats import WeeklyStats


class WeeklyStatsOperations:
    """
    (user_id, integration_id, week_start) 키 기반 조회/업서트

    업서트는 SELECT 후 UPDATE/INSERT로 처리하며, 동시 재계산 시 마지막 쓰기가 남는다.
    """

    def __init__(self) -> None:
        self.model = WeeklyStats

    async def get_by_key(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        integration_id: uuid_pkg.UUID,
        week_start: date,
    ) -> WeeklyStats | None:
        """캐시 키로 저장된 주간 통계 조회

        Args:
            db: DB 세션
            user_id: 사용자 ID
            integration_id: GitHub 연동 ID
            week_start: 주 시작일 (월요일)

        Returns:
            저장된 레코드, 없으면 None
        """
        statement = select(WeeklyStats).where(
            and_(
                WeeklyStats.user_id == user_id,  # type: ignore[arg-type]
                WeeklyStats.integration_id == integration_id,  # type: ignore[arg-type]
                WeeklyStats.week_start == week_start,  # type: ignore[arg-type]
            )
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        integration_id: uuid_pkg.UUID,
        week_start: date,
        stats: dict[str, Any],
        summary: dict[str, Any] | str | None,
    ) -> WeeklyStats:
        """주간 통계 생성 또는 덮어쓰기

        Returns:
            생성되거나 갱신된 레코드
        """
        record = await self.get_by_key(db, user_id, integration_id, week_start)

        if record is None:
            record = WeeklyStats(
                user_id=user_id,
                integration_id=integration_id,
                week_start=week_start,
                stats=stats,
                summary=summary,
            )
            db.add(record)
        else:
            record.stats = stats
            record.summary = summary
            record.updated_at = datetime.now(UTC)

        await db.flush()
        return record


weekly_stats_ops = WeeklyStatsOperations()
