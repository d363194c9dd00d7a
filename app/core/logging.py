"""
structlog 기반 로깅 설정

- 개발 환경: 컬러 콘솔 출력
- 프로덕션 환경: JSON 출력, 토큰/키 마스킹
- request_id, user_id 자동 주입
- %-스타일 위치 인자 포맷팅 (logger.info("... %s", value))
"""

import logging
import re
import sys
from typing import Any

import structlog

from app.core.config import settings
from app.core.context import get_log_context

MASK = "***"

SENSITIVE_PATTERNS = [
    (re.compile(r"(token=)[^&\s]+", re.IGNORECASE), r"\1" + MASK),
    (re.compile(r"(Bearer\s+)[^\s]+", re.IGNORECASE), r"\1" + MASK),
    (re.compile(r"(api[_-]?key=)[^&\s]+", re.IGNORECASE), r"\1" + MASK),
    (re.compile(r"(gh[pousr]_)[A-Za-z0-9]+"), r"\1" + MASK),
    (re.compile(r"(sk-)[A-Za-z0-9_-]{8,}"), r"\1" + MASK),
]

SENSITIVE_KEYS = {
    "token",
    "access_token",
    "github_token",
    "authorization",
    "api_key",
    "password",
    "secret",
}

NOISY_LOGGERS = [
    "httpcore",
    "httpx",
    "langfuse",
    "langchain",
    "langgraph",
    "openai",
    "sqlalchemy.engine",
    "aiosqlite",
    "asyncpg",
]


def _mask_sensitive_data(value: str) -> str:
    for pattern, replacement in SENSITIVE_PATTERNS:
        value = pattern.sub(replacement, value)
    return value


def _mask_value(key: str | None, value: Any) -> Any:
    """키 이름이 민감하면 값 전체, 아니면 문자열 안의 토큰 패턴만 마스킹"""
    if key is not None and key.lower() in SENSITIVE_KEYS:
        return MASK
    if isinstance(value, str):
        return _mask_sensitive_data(value)
    if isinstance(value, dict):
        return {k: _mask_value(str(k), v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_mask_value(None, v) for v in value]
    return value


def add_context_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """request_id, user_id, week_start를 로그에 자동 주입"""
    for key, value in get_log_context().items():
        event_dict.setdefault(key, value)
    return event_dict


def mask_sensitive_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """프로덕션에서 민감한 정보 마스킹"""
    if not settings.is_production:
        return event_dict

    return {key: _mask_value(key, value) for key, value in event_dict.items()}


def _build_shared_processors() -> list:
    processors: list = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_context_processor,
        mask_sensitive_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.is_production:
        processors.append(structlog.processors.format_exc_info)
    return processors


def setup_logging(level: str | None = None) -> None:
    """structlog 및 stdlib 루트 로거 설정"""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    shared_processors = _build_shared_processors()

    if settings.is_production:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # uvicorn 로그도 루트 핸들러로 출력
    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        logging.getLogger(logger_name).handlers.clear()

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog 로거 반환"""
    return structlog.get_logger(name)
