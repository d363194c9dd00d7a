"""API 공통 의존성: 인증 사용자, GitHub 연동, 저장된 토큰"""

import uuid as uuid_pkg

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.context import set_user_id
from app.core.database import get_db
from app.core.exceptions import CredentialMissingError, IdentityNotFoundError, UnauthorizedError
from app.core.security import decode_access_token
from app.domain.integration_operations import integration_ops
from app.models.integration import GITHUB_INTEGRATION_TYPE, Integration

security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> uuid_pkg.UUID:
    """Bearer 토큰 검증 후 사용자 ID 반환"""
    if not credentials:
        raise UnauthorizedError("Authorization 헤더가 없습니다")

    sub = decode_access_token(credentials.credentials)
    try:
        user_id = uuid_pkg.UUID(sub)
    except ValueError as e:
        raise UnauthorizedError("sub 클레임이 UUID 형식이 아닙니다") from e

    set_user_id(str(user_id))
    return user_id


async def get_github_integration(db: AsyncSession = Depends(get_db)) -> Integration:
    """GitHub 연동 레코드 조회

    Raises:
        IdentityNotFoundError: 연동 레코드가 없는 경우
    """
    integration = await integration_ops.get_by_type(db, GITHUB_INTEGRATION_TYPE)
    if integration is None:
        raise IdentityNotFoundError("GitHub 연동이 등록되지 않았습니다")
    return integration


async def get_github_token(
    user_id: uuid_pkg.UUID = Depends(get_current_user_id),
    integration: Integration = Depends(get_github_integration),
    db: AsyncSession = Depends(get_db),
) -> str:
    """사용자의 저장된 GitHub 토큰 반환

    Raises:
        CredentialMissingError: 토큰이 저장되지 않은 경우
    """
    token = await integration_ops.get_token(db, user_id, integration.id)
    if token is None or not token.access_token:
        raise CredentialMissingError()
    return token.access_token
