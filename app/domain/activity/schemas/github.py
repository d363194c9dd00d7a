from datetime import datetime

from pydantic import BaseModel


class PushCommit(BaseModel):
    """푸시 이벤트에 포함된 커밋"""

    sha: str
    message: str


class PushEvent(BaseModel):
    """GitHub PushEvent 요약"""

    id: str
    created_at: datetime
    repo_name: str
    commits: list[PushCommit]
    before: str | None = None
    head: str | None = None


class GitHubUser(BaseModel):
    """인증된 GitHub 사용자"""

    login: str
    id: int | None = None
    name: str | None = None


class GitHubIdentity(BaseModel):
    """이벤트 조회 주체 - 로그인과 토큰"""

    login: str
    token: str

    def __repr__(self) -> str:
        return f"GitHubIdentity(login={self.login!r})"
