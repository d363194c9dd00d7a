"""
요청 컨텍스트 관리 모듈

요청 단위로 request_id, user_id, 조회 중인 week_start를 contextvars에 보관하고
로그 프로세서가 get_log_context()로 한 번에 읽어간다.
"""

import uuid
from contextvars import ContextVar

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
week_start_var: ContextVar[str | None] = ContextVar("week_start", default=None)

_CONTEXT_VARS = {
    "request_id": request_id_var,
    "user_id": user_id_var,
    "week_start": week_start_var,
}


def set_request_id(request_id: str | None = None) -> str:
    """request_id 설정, 없으면 8자리 UUID 생성"""
    request_id = request_id or uuid.uuid4().hex[:8]
    request_id_var.set(request_id)
    return request_id


def get_request_id() -> str | None:
    return request_id_var.get()


def set_user_id(user_id: str | None) -> None:
    user_id_var.set(user_id)


def get_user_id() -> str | None:
    return user_id_var.get()


def set_week_start(week_start: str | None) -> None:
    """집계 대상 주(월요일, ISO 날짜) 설정"""
    week_start_var.set(week_start)


def get_log_context() -> dict[str, str]:
    """값이 설정된 컨텍스트 변수만 반환"""
    return {name: var.get() for name, var in _CONTEXT_VARS.items() if var.get() is not None}


def clear_context() -> None:
    for var in _CONTEXT_VARS.values():
        var.set(None)
