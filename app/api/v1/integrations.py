import uuid as uuid_pkg

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user_id, get_github_integration, get_github_token
from app.api.v1.schemas import GitHubTokenBody, SuccessResponse, TokenValidationResponse
from app.core.database import get_db
from app.core.exceptions import GitHubAPIError
from app.core.logging import get_logger
from app.domain.integration_operations import integration_ops
from app.infra.github.client import get_authenticated_user
from app.models.integration import Integration

router = APIRouter(prefix="/integrations/github", tags=["integrations"])
logger = get_logger(__name__)


@router.post("/token", response_model=SuccessResponse)
async def save_github_token(
    body: GitHubTokenBody,
    user_id: uuid_pkg.UUID = Depends(get_current_user_id),
    integration: Integration = Depends(get_github_integration),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    await integration_ops.upsert_token(db, user_id, integration.id, body.token)
    logger.info("GitHub 토큰 저장 완료")
    return SuccessResponse()


@router.get(
    "/validate", response_model=TokenValidationResponse, response_model_exclude_none=True
)
async def validate_github_token(
    github_token: str = Depends(get_github_token),
) -> TokenValidationResponse:
    """저장된 토큰으로 GitHub 사용자 조회를 시도해 유효성 확인"""
    try:
        user = await get_authenticated_user(github_token)
    except GitHubAPIError as e:
        logger.info("GitHub 토큰 검증 실패 status=%s", e.upstream_status)
        if e.upstream_status in (401, 403):
            return TokenValidationResponse(is_valid=False, error="Invalid or expired token")
        raise

    return TokenValidationResponse(is_valid=True, username=user.login)
