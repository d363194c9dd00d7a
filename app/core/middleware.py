"""
HTTP 요청 로깅 미들웨어

- 요청 시작 시 request_id 생성 (X-Request-ID 헤더 우선)
- 응답 상태에 따라 로그 레벨 분리 (4xx/5xx는 warning)
- X-Request-ID, X-Response-Time 응답 헤더 추가
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.context import clear_context, set_request_id
from app.core.logging import get_logger

logger = get_logger(__name__)

SKIP_PATHS = {"/health", "/docs", "/openapi.json", "/redoc", "/favicon.ico"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """HTTP 요청 로깅 및 request_id 관리 미들웨어"""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in SKIP_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        request_id = set_request_id(request.headers.get("X-Request-ID"))
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "요청 처리 중 예외",
                method=request.method,
                path=request.url.path,
                error=type(e).__name__,
                duration_ms=_elapsed_ms(start_time),
            )
            raise
        finally:
            clear_context()

        duration_ms = _elapsed_ms(start_time)
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "요청 완료",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            client_ip=_get_client_ip(request),
            duration_ms=duration_ms,
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        return response


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)


def _get_client_ip(request: Request) -> str:
    """클라이언트 IP 추출"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
