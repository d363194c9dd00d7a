"""
커밋 통계 계산

입력 커밋과 기간만으로 결정되는 순수 함수. I/O 없음.
"""

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta

from app.domain.activity.schemas import ActiveDay, Commit, DailyBucket, Statistics, TimeWindow


def to_day_key(value: datetime | date) -> str:
    """UTC 기준 날짜 문자열 (YYYY-MM-DD)"""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        value = value.astimezone(UTC).date()
    return value.isoformat()


def window_days(window: TimeWindow) -> list[str]:
    """기간에 포함된 날짜 목록 (start, end 포함, 오름차순)"""
    first = window.start.astimezone(UTC).date()
    last = window.end.astimezone(UTC).date()
    span = (last - first).days
    return [(first + timedelta(days=offset)).isoformat() for offset in range(span + 1)]


def build_daily_buckets(
    commits: Iterable[Commit], window: TimeWindow
) -> dict[str, list[Commit]]:
    """기간 전체 날짜를 먼저 만든 뒤 커밋을 날짜별로 배치

    기간 밖 날짜의 커밋은 버린다.
    """
    buckets: dict[str, list[Commit]] = {day: [] for day in window_days(window)}
    for commit in commits:
        day = to_day_key(commit.timestamp)
        if day in buckets:
            buckets[day].append(commit)
    return buckets


def pick_active_days(counts: list[tuple[str, int]]) -> tuple[ActiveDay | None, ActiveDay | None]:
    """최다/최소 활동일 선택, 동률이면 먼저 나온 날짜"""
    if not counts:
        return None, None

    most_date, most_count = counts[0]
    least_date, least_count = counts[0]
    for day, count in counts[1:]:
        if count > most_count:
            most_date, most_count = day, count
        if count < least_count:
            least_date, least_count = day, count

    return (
        ActiveDay(date=most_date, count=most_count),
        ActiveDay(date=least_date, count=least_count),
    )


def compute_statistics(commits: Iterable[Commit], window: TimeWindow) -> Statistics:
    """커밋 목록과 기간으로 일별/전체 통계 계산

    Args:
        commits: 커밋 목록 (도착 순서 유지)
        window: 집계 기간

    Returns:
        일별 버킷, 총합, 일 평균, 최다/최소 활동일
    """
    buckets = build_daily_buckets(commits, window)

    daily_commits = {
        day: DailyBucket(date=day, count=len(day_commits), commits=day_commits)
        for day, day_commits in buckets.items()
    }
    total = sum(bucket.count for bucket in daily_commits.values())
    average = total / len(daily_commits) if daily_commits else 0

    most_active, least_active = pick_active_days(
        [(day, bucket.count) for day, bucket in daily_commits.items()]
    )

    return Statistics(
        total_commits=total,
        daily_commits=daily_commits,
        average_commits_per_day=average,
        most_active_day=most_active,
        least_active_day=least_active,
    )
