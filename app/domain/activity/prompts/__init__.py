from app.domain.activity.prompts.summary import (
    WEEKLY_SUMMARY_HUMAN,
    WEEKLY_SUMMARY_SYSTEM,
)

__all__ = [
    "WEEKLY_SUMMARY_SYSTEM",
    "WEEKLY_SUMMARY_HUMAN",
]
