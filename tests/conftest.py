"""테스트 공통 fixture"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

import uuid
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.core.config import settings
from app.core.database import get_db
from app.domain.activity.aggregator import build_activity
from app.domain.activity.schemas import (
    Commit,
    GitHubActivity,
    PushCommit,
    PushEvent,
    TimeWindow,
)
from app.main import app as fastapi_app
from app.models import GITHUB_INTEGRATION_TYPE, Integration

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    """테스트용 인메모리 SQLite 엔진"""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncSession:
    """테스트용 DB 세션"""
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def github_integration(db_session) -> Integration:
    """GitHub 연동 레코드"""
    integration = Integration(type=GITHUB_INTEGRATION_TYPE, name="GitHub")
    db_session.add(integration)
    await db_session.commit()
    return integration


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.UUID("11111111-2222-3333-4444-555555555555")


def _make_access_token(sub: str, **claims) -> str:
    payload = {
        "sub": sub,
        "aud": settings.jwt_audience,
        "exp": datetime.now(UTC) + timedelta(hours=1),
        **claims,
    }
    return jwt.encode(payload, settings.supabase_jwt_secret, algorithm=settings.jwt_algorithm)


@pytest.fixture
def auth_headers(user_id) -> dict[str, str]:
    """인증 헤더"""
    return {"Authorization": f"Bearer {_make_access_token(str(user_id))}"}


@pytest_asyncio.fixture
async def async_client(db_session):
    """DB 세션을 테스트 세션으로 교체한 비동기 HTTP 클라이언트"""

    async def _override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def feb_week_window() -> TimeWindow:
    """2024-02-19(월) ~ 2024-02-25(일)"""
    return TimeWindow(
        start=datetime(2024, 2, 19, tzinfo=UTC),
        end=datetime(2024, 2, 25, 23, 59, 59, 999999, tzinfo=UTC),
    )


def _make_commit(sha: str, timestamp: datetime, message: str = "feat: update") -> Commit:
    return Commit(sha=sha, message=message, timestamp=timestamp)


def _make_push_event(
    repo_name: str,
    created_at: datetime,
    shas: list[str] | None = None,
    event_id: str | None = None,
    before: str | None = None,
    head: str | None = None,
) -> PushEvent:
    shas = ["abc123"] if shas is None else shas
    return PushEvent(
        id=event_id or f"{repo_name}-{created_at.isoformat()}",
        created_at=created_at,
        repo_name=repo_name,
        commits=[PushCommit(sha=sha, message=f"commit {sha}") for sha in shas],
        before=before,
        head=head,
    )


def _raw_push_event(
    repo_name: str,
    created_at: str,
    commits: list[dict] | None = None,
    event_id: str = "1",
    before: str = "a" * 40,
    head: str = "b" * 40,
) -> dict:
    return {
        "id": event_id,
        "type": "PushEvent",
        "created_at": created_at,
        "repo": {"id": 1, "name": repo_name},
        "payload": {
            "before": before,
            "head": head,
            "commits": commits if commits is not None else [{"sha": "c1", "message": "init"}],
        },
    }


@pytest.fixture
def make_access_token():
    """테스트용 Supabase 액세스 토큰 생성 helper"""
    return _make_access_token


@pytest.fixture
def make_commit():
    """Commit 생성 helper"""
    return _make_commit


@pytest.fixture
def make_push_event():
    """PushEvent 생성 helper"""
    return _make_push_event


@pytest.fixture
def raw_push_event():
    """GitHub events API 원본 형식의 PushEvent 생성 helper"""
    return _raw_push_event


@pytest.fixture
def sample_activity(feb_week_window) -> GitHubActivity:
    """두 레포(개인 1, 조직 1)의 주간 활동"""
    repo_commits = {
        "octocat/dotfiles": [
            _make_commit("d1", datetime(2024, 2, 19, 9, tzinfo=UTC), "chore: update zshrc"),
        ],
        "org/repoA": [
            _make_commit("a1", datetime(2024, 2, 20, 10, tzinfo=UTC), "feat: add login\n\nbody"),
            _make_commit("a2", datetime(2024, 2, 20, 15, tzinfo=UTC), "wip: session store"),
        ],
    }
    return build_activity(
        repo_commits,
        {"octocat/dotfiles": None, "org/repoA": "org"},
        {"org": ["org/repoA"]},
        feb_week_window,
    )


@pytest.fixture
def empty_activity(feb_week_window) -> GitHubActivity:
    return build_activity({}, {}, {}, feb_week_window)
