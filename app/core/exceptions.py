from enum import Enum

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings


class ErrorCode(str, Enum):
    """에러 코드 열거형"""

    UNAUTHORIZED = "UNAUTHORIZED"
    IDENTITY_NOT_FOUND = "IDENTITY_NOT_FOUND"
    CREDENTIAL_MISSING = "CREDENTIAL_MISSING"
    GITHUB_API_ERROR = "GITHUB_API_ERROR"
    GITHUB_RATE_LIMITED = "GITHUB_RATE_LIMITED"
    LLM_ERROR = "LLM_ERROR"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    INVALID_INPUT = "INVALID_INPUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CustomException(Exception):
    def __init__(
        self,
        status_code: int,
        error_code: ErrorCode | str,
        message: str,
        detail: str | None = None,
        retryable: bool = False,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail
        self.retryable = retryable
        super().__init__(message)


class UnauthorizedError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=401,
            error_code=ErrorCode.UNAUTHORIZED,
            message="인증 정보가 올바르지 않습니다",
            detail=detail,
        )


class IdentityNotFoundError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=404,
            error_code=ErrorCode.IDENTITY_NOT_FOUND,
            message="GitHub 연동 정보를 찾을 수 없습니다",
            detail=detail,
        )


class CredentialMissingError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=404,
            error_code=ErrorCode.CREDENTIAL_MISSING,
            message="GitHub 토큰이 등록되지 않았습니다",
            detail=detail,
        )


class GitHubAPIError(CustomException):
    def __init__(self, detail: str | None = None, status_code: int | None = None):
        super().__init__(
            status_code=502,
            error_code=ErrorCode.GITHUB_API_ERROR,
            message="GitHub API 호출에 실패했습니다",
            detail=detail,
            retryable=True,
        )
        self.upstream_status = status_code


class GitHubRateLimitError(CustomException):
    def __init__(self, detail: str | None = None, reset_at: str | None = None):
        super().__init__(
            status_code=429,
            error_code=ErrorCode.GITHUB_RATE_LIMITED,
            message="GitHub API 요청 한도를 초과했습니다",
            detail=detail,
            retryable=True,
        )
        self.reset_at = reset_at


class LLMError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=502,
            error_code=ErrorCode.LLM_ERROR,
            message="LLM 호출에 실패했습니다",
            detail=detail,
            retryable=True,
        )


class ValidationError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=400,
            error_code=ErrorCode.INVALID_INPUT,
            message="입력값이 올바르지 않습니다",
            detail=detail,
        )


def register_exception_handlers(app):
    @app.exception_handler(CustomException)
    async def custom_exception_handler(request: Request, exc: CustomException):
        content = {
            "error_code": exc.error_code,
            "message": exc.message,
            "retryable": exc.retryable,
        }
        if exc.detail and not settings.is_production:
            content["detail"] = exc.detail

        return JSONResponse(
            status_code=exc.status_code,
            content=content,
        )
