from app.api.v1.schemas.integrations import (
    GitHubTokenBody,
    SuccessResponse,
    TokenValidationResponse,
)
from app.api.v1.schemas.weekly_stats import WeeklyStatsBody, WeeklyStatsResponse

__all__ = [
    "WeeklyStatsBody",
    "WeeklyStatsResponse",
    "GitHubTokenBody",
    "SuccessResponse",
    "TokenValidationResponse",
]
