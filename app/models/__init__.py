from app.models.integration import GITHUB_INTEGRATION_TYPE, Integration, IntegrationToken
from app.models.weekly_stats import WeeklyStats

__all__ = [
    "GITHUB_INTEGRATION_TYPE",
    "Integration",
    "IntegrationToken",
    "WeeklyStats",
]
