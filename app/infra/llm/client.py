import os
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage
from langfuse.langchain import CallbackHandler

from app.core.config import settings
from app.core.exceptions import LLMError
from app.core.logging import get_logger
from app.domain.activity.prompts import WEEKLY_SUMMARY_HUMAN, WEEKLY_SUMMARY_SYSTEM
from app.domain.activity.schemas import GitHubActivity, RepositoryActivity
from app.infra.llm.base import build_completion
from app.infra.llm.factory import get_summary_client

logger = get_logger(__name__)

if settings.langfuse_public_key:
    os.environ["LANGFUSE_PUBLIC_KEY"] = settings.langfuse_public_key
if settings.langfuse_secret_key:
    os.environ["LANGFUSE_SECRET_KEY"] = settings.langfuse_secret_key
if settings.langfuse_base_url:
    os.environ["LANGFUSE_HOST"] = settings.langfuse_base_url

DOCUMENT_SEPARATOR = "\n---\n"

NO_ACTIVITY_CONTENT = "No commit activity was recorded for this week."
SUMMARY_ERROR_PLACEHOLDER = "Error generating summary"


def get_langfuse_handler() -> CallbackHandler | None:
    """Langfuse 콜백 핸들러 반환"""
    if not settings.langfuse_public_key or not settings.langfuse_secret_key:
        return None

    return CallbackHandler()


def format_repository_document(name: str, repo: RepositoryActivity) -> str:
    """레포지토리 하나를 프롬프트용 문서로 포맷"""
    stats = repo.statistics
    lines = [
        f"Repository: {name}",
        f"Total commits: {repo.total_commits}",
        f"Average commits per day: {stats.average_commits_per_day:.1f}",
    ]
    if stats.most_active_day is not None:
        lines.append(
            f"Most active day: {stats.most_active_day.date} "
            f"({stats.most_active_day.count} commits)"
        )

    lines.append("Commits by day:")
    for day, bucket in stats.daily_commits.items():
        if bucket.count == 0:
            continue
        lines.append(f"{day}:")
        for commit in bucket.commits:
            message = commit.message.strip().splitlines()[0] if commit.message.strip() else ""
            lines.append(f"  - {message}")

    return "\n".join(lines)


def format_activity_for_prompt(activity: GitHubActivity) -> str:
    """레포지토리별 문서를 구분선으로 이어 붙임"""
    return DOCUMENT_SEPARATOR.join(
        format_repository_document(name, repo) for name, repo in activity.repositories.items()
    )


def extract_summary_text(summary: dict[str, Any] | str | None) -> str | None:
    """요약 페이로드에서 본문 추출, 문자열이면 그대로 반환"""
    if summary is None or isinstance(summary, str):
        return summary

    choices = summary.get("choices") or []
    if not choices:
        return None
    return choices[0].get("message", {}).get("content")


async def request_summary(
    activity: GitHubActivity, session_id: str | None = None
) -> dict[str, Any]:
    """주간 활동 요약 요청

    Args:
        activity: 집계된 주간 활동
        session_id: Langfuse 세션 ID

    Returns:
        채팅 완성 형태의 요약 페이로드

    Raises:
        LLMError: 프로바이더 호출 실패
    """
    if not activity.repositories:
        logger.info("활동 없음, 요약 요청 생략")
        return build_completion("none", NO_ACTIVITY_CONTENT)

    window = activity.time_window
    human_content = WEEKLY_SUMMARY_HUMAN.format(
        week_start=window.start.date().isoformat(),
        week_end=window.end.date().isoformat(),
        total_commits=activity.overall_statistics.total_commits,
        repository_count=len(activity.repositories),
        activity_documents=format_activity_for_prompt(activity),
    )
    messages = [
        SystemMessage(content=WEEKLY_SUMMARY_SYSTEM),
        HumanMessage(content=human_content),
    ]

    langfuse_handler = get_langfuse_handler()
    config = {
        "callbacks": [langfuse_handler] if langfuse_handler else [],
        "metadata": {
            "langfuse_session_id": session_id,
            "langfuse_tags": ["weekly-stats", "summary"],
        },
    }

    logger.debug("주간 요약 요청 repos=%d", len(activity.repositories))

    try:
        client = get_summary_client()
        completion = await client.complete(messages, config=config)
    except Exception as e:
        logger.warning("주간 요약 요청 실패 error=%s", type(e).__name__)
        raise LLMError(detail=f"{type(e).__name__}: {e}") from e

    logger.debug("주간 요약 완료 model=%s", completion["model"])
    return completion
