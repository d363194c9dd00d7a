"""외부 서비스 연동 모델"""

import uuid as uuid_pkg
from datetime import UTC, datetime

from sqlalchemy import DateTime, Index
from sqlmodel import Field, SQLModel

GITHUB_INTEGRATION_TYPE = "github"


class Integration(SQLModel, table=True):
    """연동 가능한 외부 서비스 (type으로 식별)"""

    __tablename__ = "integrations"

    id: uuid_pkg.UUID = Field(default_factory=uuid_pkg.uuid4, primary_key=True, nullable=False)
    type: str = Field(max_length=50, nullable=False, unique=True)
    name: str = Field(max_length=100, nullable=False)
    description: str = Field(default="", nullable=False)
    is_premium: bool = Field(default=False, nullable=False)


class IntegrationToken(SQLModel, table=True):
    """사용자별 연동 액세스 토큰"""

    __tablename__ = "integration_tokens"
    __table_args__ = (
        Index(
            "ix_integration_tokens_user_integration",
            "user_id",
            "integration_id",
            unique=True,
        ),
    )

    id: uuid_pkg.UUID = Field(default_factory=uuid_pkg.uuid4, primary_key=True, nullable=False)
    user_id: uuid_pkg.UUID = Field(nullable=False, index=True)
    integration_id: uuid_pkg.UUID = Field(foreign_key="integrations.id", nullable=False)
    access_token: str = Field(nullable=False)

    created_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
    )
    updated_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
    )
