from datetime import UTC, date, datetime, time, timedelta
from typing import Literal

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import ErrorCode, LLMError
from app.core.logging import get_logger
from app.domain.activity.aggregator import aggregate_activity
from app.domain.activity.schemas import (
    GitHubActivity,
    GitHubIdentity,
    TimeWindow,
    WeeklyStatsState,
)
from app.domain.weekly_stats_operations import weekly_stats_ops
from app.infra.github.client import get_authenticated_user
from app.infra.llm.client import (
    SUMMARY_ERROR_PLACEHOLDER,
    extract_summary_text,
    request_summary,
)

logger = get_logger(__name__)


def current_week_start(today: date) -> date:
    """today가 속한 주의 월요일"""
    return today - timedelta(days=today.weekday())


def week_window(week_start: date) -> TimeWindow:
    """월요일 00:00 UTC부터 일요일 23:59:59.999999 UTC까지"""
    start = datetime.combine(week_start, time.min, tzinfo=UTC)
    end = datetime.combine(week_start + timedelta(days=6), time.max, tzinfo=UTC)
    return TimeWindow(start=start, end=end)


async def cache_check_node(state: WeeklyStatsState) -> WeeklyStatsState:
    """캐시 확인 노드: 지난 주이고 강제 갱신이 아니면 저장된 레코드 조회"""
    request = state["request"]
    is_current_week = request.week_start == current_week_start(state["today"])

    cached_record = None
    if not request.force_refresh and not is_current_week:
        cached_record = await weekly_stats_ops.get_by_key(
            state["db"], request.user_id, request.integration_id, request.week_start
        )

    logger.info(
        "cache_check_node 완료 week_start=%s current=%s force=%s hit=%s",
        request.week_start,
        is_current_week,
        request.force_refresh,
        cached_record is not None,
    )

    return {
        **state,
        "is_current_week": is_current_week,
        "cached_record": cached_record,
    }


async def serve_cached_node(state: WeeklyStatsState) -> WeeklyStatsState:
    """캐시 응답 노드: 저장된 집계와 요약을 그대로 사용"""
    record = state["cached_record"]
    activity = GitHubActivity.model_validate(record.stats)

    return {
        **state,
        "activity": activity,
        "summary": record.summary,
        "cached": True,
        "persisted": False,
    }


async def aggregate_node(state: WeeklyStatsState) -> WeeklyStatsState:
    """집계 노드: 토큰 소유자 확인 후 주간 이벤트 집계"""
    request = state["request"]
    logger.info("aggregate_node 시작 week_start=%s", request.week_start)

    user = await get_authenticated_user(request.github_token)
    identity = GitHubIdentity(login=user.login, token=request.github_token)
    activity = await aggregate_activity(identity, week_window(request.week_start))

    return {**state, "activity": activity, "cached": False}


async def summarize_node(state: WeeklyStatsState) -> WeeklyStatsState:
    """요약 노드: 실패 시 대체 문구로 진행"""
    activity = state["activity"]
    request = state["request"]

    try:
        summary = await request_summary(
            activity, session_id=f"{request.user_id}:{request.week_start}"
        )
    except LLMError as e:
        logger.warning("summarize_node 요약 실패, 대체 문구 사용 error=%s", e.detail)
        summary = SUMMARY_ERROR_PLACEHOLDER

    activity = activity.model_copy(update={"overall_summary": extract_summary_text(summary)})

    return {**state, "activity": activity, "summary": summary}


async def persist_node(state: WeeklyStatsState) -> WeeklyStatsState:
    """저장 노드: 지난 주 결과 업서트, 실패해도 결과는 반환"""
    request = state["request"]
    db = state["db"]

    try:
        await weekly_stats_ops.upsert(
            db,
            user_id=request.user_id,
            integration_id=request.integration_id,
            week_start=request.week_start,
            stats=state["activity"].model_dump(mode="json", by_alias=True),
            summary=state["summary"],
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "persist_node 저장 실패 error_code=%s error=%s",
            ErrorCode.PERSISTENCE_FAILURE.value,
            type(e).__name__,
        )
        return {**state, "persisted": False}

    logger.info("persist_node 완료 week_start=%s", request.week_start)
    return {**state, "persisted": True}


def route_after_cache_check(state: WeeklyStatsState) -> Literal["serve_cached", "aggregate"]:
    """캐시 레코드가 있으면 캐시 응답, 없으면 재계산"""
    if state.get("cached_record") is not None:
        return "serve_cached"
    return "aggregate"


def should_persist(state: WeeklyStatsState) -> Literal["persist", "end"]:
    """진행 중인 주는 저장하지 않음"""
    if state.get("is_current_week"):
        logger.info("should_persist: 진행 중인 주, 저장 생략")
        return "end"
    return "persist"


def create_weekly_stats_workflow() -> CompiledStateGraph:
    """주간 통계 캐시 워크플로우 생성"""
    workflow = StateGraph(WeeklyStatsState)

    workflow.add_node("cache_check", cache_check_node)
    workflow.add_node("serve_cached", serve_cached_node)
    workflow.add_node("aggregate", aggregate_node)
    workflow.add_node("summarize", summarize_node)
    workflow.add_node("persist", persist_node)

    workflow.set_entry_point("cache_check")

    workflow.add_conditional_edges(
        "cache_check",
        route_after_cache_check,
        {
            "serve_cached": "serve_cached",
            "aggregate": "aggregate",
        },
    )
    workflow.add_edge("serve_cached", END)
    workflow.add_edge("aggregate", "summarize")

    workflow.add_conditional_edges(
        "summarize",
        should_persist,
        {
            "persist": "persist",
            "end": END,
        },
    )
    workflow.add_edge("persist", END)

    return workflow.compile()
