from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ActivityModel(BaseModel):
    """집계 결과 공통 베이스 - 불변, camelCase 직렬화"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TimeWindow(ActivityModel):
    """집계 기간 (start, end 모두 포함)"""

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)

    @model_validator(mode="after")
    def check_order(self):
        if self.start > self.end:
            raise ValueError("start는 end보다 늦을 수 없습니다")
        return self


class Commit(ActivityModel):
    sha: str
    message: str
    timestamp: datetime


class DailyBucket(ActivityModel):
    """하루 단위 커밋 누적"""

    date: str
    count: int = 0
    commits: list[Commit] = []


class ActiveDay(ActivityModel):
    date: str
    count: int


class Statistics(ActivityModel):
    total_commits: int
    daily_commits: dict[str, DailyBucket]
    average_commits_per_day: float
    most_active_day: ActiveDay | None = None
    least_active_day: ActiveDay | None = None


class RepositoryActivity(ActivityModel):
    total_commits: int
    organization: str | None = None
    commits: list[Commit]
    statistics: Statistics


class OrganizationActivity(ActivityModel):
    total_commits: int
    repositories: list[str]
    statistics: Statistics


class GitHubActivity(ActivityModel):
    """주간 활동 집계 결과 - 캐시 및 응답 단위"""

    time_window: TimeWindow
    repositories: dict[str, RepositoryActivity] = {}
    organizations: dict[str, OrganizationActivity] = {}
    overall_statistics: Statistics
    overall_summary: str | None = None
