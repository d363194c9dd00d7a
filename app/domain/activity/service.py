from datetime import UTC, date, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.context import set_week_start
from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.domain.activity.schemas import WeeklyStatsRequest, WeeklyStatsResult
from app.domain.activity.workflow import create_weekly_stats_workflow, current_week_start

logger = get_logger(__name__)

_workflow = create_weekly_stats_workflow()


def normalize_week_start(week_start: date, today: date) -> date:
    """요청 날짜를 해당 주 월요일로 맞추고 미래 주는 거부

    Raises:
        ValidationError: 이번 주 이후의 주를 요청한 경우
    """
    monday = current_week_start(week_start)
    if monday > current_week_start(today):
        raise ValidationError(f"미래 주는 조회할 수 없습니다: {monday.isoformat()}")
    return monday


async def get_weekly_stats(
    db: AsyncSession,
    request: WeeklyStatsRequest,
    today: date | None = None,
) -> WeeklyStatsResult:
    """주간 통계 조회 - 캐시 또는 재계산

    Args:
        db: DB 세션
        request: 주간 통계 요청
        today: 기준일 (기본값은 오늘, UTC)

    Returns:
        집계, 요약, 캐시 여부

    Raises:
        ValidationError: 미래 주 요청
        GitHubAPIError: GitHub 조회 실패
        GitHubRateLimitError: 사용자 확인 단계에서 요청 한도 초과
    """
    today = today or datetime.now(UTC).date()
    week_start = normalize_week_start(request.week_start, today)
    if week_start != request.week_start:
        request = request.model_copy(update={"week_start": week_start})
    set_week_start(week_start.isoformat())

    logger.info(
        "주간 통계 요청 week_start=%s force_refresh=%s",
        week_start,
        request.force_refresh,
    )

    final_state = await _workflow.ainvoke({"request": request, "db": db, "today": today})

    return WeeklyStatsResult(
        stats=final_state["activity"],
        summary=final_state.get("summary"),
        week_start=week_start.isoformat(),
        user_id=request.user_id,
        cached=final_state.get("cached", False),
    )
