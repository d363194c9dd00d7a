"""외부 연동/토큰 DB 연산"""

import uuid as uuid_pkg
from datetime import UTC, datetime

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.integration import Integration, IntegrationToken


class IntegrationOperations:
    def __init__(self) -> None:
        self.model = Integration

    async def get_by_type(self, db: AsyncSession, integration_type: str) -> Integration | None:
        """type으로 연동 레코드 조회 (예: "github")"""
        statement = select(Integration).where(Integration.type == integration_type)  # type: ignore[arg-type]
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def get_token(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        integration_id: uuid_pkg.UUID,
    ) -> IntegrationToken | None:
        """사용자의 연동 토큰 조회"""
        statement = select(IntegrationToken).where(
            and_(
                IntegrationToken.user_id == user_id,  # type: ignore[arg-type]
                IntegrationToken.integration_id == integration_id,  # type: ignore[arg-type]
            )
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def upsert_token(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        integration_id: uuid_pkg.UUID,
        access_token: str,
    ) -> IntegrationToken:
        """사용자의 연동 토큰 저장 또는 교체"""
        token = await self.get_token(db, user_id, integration_id)

        if token is None:
            token = IntegrationToken(
                user_id=user_id,
                integration_id=integration_id,
                access_token=access_token,
            )
            db.add(token)
        else:
            token.access_token = access_token
            token.updated_at = datetime.now(UTC)

        await db.flush()
        return token


integration_ops = IntegrationOperations()
