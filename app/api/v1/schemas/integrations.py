"""GitHub 연동 API 스키마."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GitHubTokenBody(BaseModel):
    """GitHub 토큰 저장 요청."""

    token: str = Field(min_length=1)

    @field_validator("token")
    @classmethod
    def strip_token(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("토큰이 비어 있습니다")
        return v

    def __repr__(self) -> str:
        return "GitHubTokenBody(token=***)"


class SuccessResponse(BaseModel):
    success: bool = True


class TokenValidationResponse(BaseModel):
    """토큰 검증 결과."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    username: str | None = None
    error: str | None = None
