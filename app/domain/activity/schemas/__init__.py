from app.domain.activity.schemas.activity import (
    ActiveDay,
    Commit,
    DailyBucket,
    GitHubActivity,
    OrganizationActivity,
    RepositoryActivity,
    Statistics,
    TimeWindow,
)
from app.domain.activity.schemas.github import (
    GitHubIdentity,
    GitHubUser,
    PushCommit,
    PushEvent,
)
from app.domain.activity.schemas.weekly import (
    WeeklyStatsRequest,
    WeeklyStatsResult,
    WeeklyStatsState,
)

__all__ = [
    "TimeWindow",
    "Commit",
    "DailyBucket",
    "ActiveDay",
    "Statistics",
    "RepositoryActivity",
    "OrganizationActivity",
    "GitHubActivity",
    "PushCommit",
    "PushEvent",
    "GitHubUser",
    "GitHubIdentity",
    "WeeklyStatsRequest",
    "WeeklyStatsResult",
    "WeeklyStatsState",
]
