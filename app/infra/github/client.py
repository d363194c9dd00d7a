import re
from collections.abc import AsyncIterator

import httpx

from app.core.config import settings
from app.core.exceptions import GitHubAPIError, GitHubRateLimitError
from app.core.logging import get_logger
from app.domain.activity.schemas import GitHubUser, PushCommit, PushEvent

logger = get_logger(__name__)

GITHUB_API_BASE = "https://api.github.com"

PUSH_EVENT_TYPE = "PushEvent"
MAX_PER_PAGE = 100

REPO_FULL_NAME_PATTERN = re.compile(r"^([a-zA-Z0-9_.-]+)/([a-zA-Z0-9_.-]+)$")
NULL_SHA_PATTERN = re.compile(r"^0+$")

_client = httpx.AsyncClient(timeout=settings.github_timeout)


def _get_headers(token: str | None = None) -> dict[str, str]:
    """GitHub API 요청 헤더 생성

    Args:
        token: GitHub OAuth 토큰

    Returns:
        HTTP 헤더 딕셔너리
    """
    headers = {"Accept": "application/vnd.github.v3+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def close_client():
    """httpx 클라이언트 종료"""
    await _client.aclose()


def parse_repo_full_name(full_name: str) -> tuple[str, str]:
    """owner/repo 형식 이름에서 owner와 repo 추출

    Args:
        full_name: 레포지토리 전체 이름

    Returns:
        owner, repo 튜플

    Raises:
        ValueError: owner/repo 형식이 아닌 경우
    """
    match = REPO_FULL_NAME_PATTERN.match(full_name)
    if not match:
        raise ValueError(f"유효하지 않은 레포지토리 이름: {full_name}")
    return match.group(1), match.group(2)


def is_null_sha(sha: str | None) -> bool:
    """새 브랜치 푸시 등에서 쓰이는 0으로만 된 SHA 여부"""
    return not sha or bool(NULL_SHA_PATTERN.match(sha))


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    return response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"


def _raise_for_status(response: httpx.Response) -> None:
    """응답 상태를 도메인 예외로 변환

    Raises:
        GitHubRateLimitError: 요청 한도 초과
        GitHubAPIError: 그 외 4xx/5xx
    """
    if _is_rate_limited(response):
        reset_at = response.headers.get("X-RateLimit-Reset")
        logger.warning(
            "GitHub 요청 한도 초과 status=%d reset_at=%s", response.status_code, reset_at
        )
        raise GitHubRateLimitError(detail=f"HTTP {response.status_code}", reset_at=reset_at)

    if response.is_error:
        raise GitHubAPIError(
            detail=f"HTTP {response.status_code}",
            status_code=response.status_code,
        )


async def _get(url: str, token: str | None, params: dict | None = None) -> httpx.Response:
    """GET 요청, 전송 오류는 GitHubAPIError로 변환"""
    try:
        return await _client.get(url, headers=_get_headers(token), params=params)
    except httpx.RequestError as e:
        logger.warning("GitHub 요청 실패 url=%s error=%s", url, type(e).__name__)
        raise GitHubAPIError(detail=f"전송 오류: {type(e).__name__}") from e


def _parse_push_event(raw: dict) -> PushEvent:
    payload = raw.get("payload") or {}
    return PushEvent(
        id=str(raw["id"]),
        created_at=raw["created_at"],
        repo_name=raw["repo"]["name"],
        commits=[
            PushCommit(sha=c["sha"], message=c.get("message", ""))
            for c in payload.get("commits") or []
        ],
        before=payload.get("before"),
        head=payload.get("head"),
    )


async def get_authenticated_user(token: str) -> GitHubUser:
    """토큰 소유자 조회

    Args:
        token: GitHub OAuth 토큰

    Returns:
        로그인 이름을 포함한 사용자 정보
    """
    response = await _get(f"{GITHUB_API_BASE}/user", token)
    _raise_for_status(response)
    data = response.json()

    logger.info("GitHub 사용자 조회 완료 login=%s", data["login"])
    return GitHubUser(login=data["login"], id=data.get("id"), name=data.get("name"))


async def iter_push_event_pages(
    username: str,
    token: str,
    per_page: int = MAX_PER_PAGE,
) -> AsyncIterator[list[PushEvent]]:
    """사용자 이벤트를 페이지 단위로 조회, PushEvent만 반환

    호출자가 반복을 중단하면 다음 페이지를 요청하지 않는다.
    빈 페이지, per_page보다 짧은 페이지, 페이지 깊이 제한(HTTP 422)에서 정상 종료.

    Args:
        username: GitHub 유저네임
        token: GitHub OAuth 토큰
        per_page: 페이지 크기 (최대 100)

    Yields:
        페이지별 PushEvent 목록 (최신순, 비어 있을 수 있음)

    Raises:
        GitHubRateLimitError: 요청 한도 초과
        GitHubAPIError: 그 외 API/전송 오류
    """
    url = f"{GITHUB_API_BASE}/users/{username}/events"
    per_page = min(per_page, MAX_PER_PAGE)
    page = 1

    while True:
        response = await _get(url, token, params={"per_page": per_page, "page": page})

        if response.status_code == 422:
            logger.info("이벤트 페이지 깊이 제한 도달 username=%s page=%d", username, page)
            return

        _raise_for_status(response)
        raw_events = response.json()

        if not raw_events:
            logger.info("이벤트 페이지 소진 username=%s page=%d", username, page)
            return

        push_events = [_parse_push_event(e) for e in raw_events if e.get("type") == PUSH_EVENT_TYPE]
        logger.info(
            "이벤트 페이지 조회 username=%s page=%d events=%d pushes=%d",
            username,
            page,
            len(raw_events),
            len(push_events),
        )
        yield push_events

        if len(raw_events) < per_page:
            return
        page += 1


async def compare_commits(
    repo_full_name: str,
    base: str,
    head: str,
    token: str,
) -> list[PushCommit]:
    """두 커밋 사이의 커밋 목록 조회

    커밋 목록이 생략된 PushEvent를 before...head 범위로 보강할 때 사용.

    Args:
        repo_full_name: owner/repo
        base: 기준 SHA (푸시 이전)
        head: 대상 SHA (푸시 이후)
        token: GitHub OAuth 토큰

    Returns:
        오래된 순서의 커밋 목록
    """
    owner, repo = parse_repo_full_name(repo_full_name)
    url = f"{GITHUB_API_BASE}/repos/{owner}/{repo}/compare/{base}...{head}"

    response = await _get(url, token)
    _raise_for_status(response)
    data = response.json()

    commits = [
        PushCommit(sha=c["sha"], message=c["commit"]["message"]) for c in data.get("commits", [])
    ]
    logger.info(
        "커밋 비교 조회 완료 repo=%s/%s base=%s head=%s count=%d",
        owner,
        repo,
        base[:7],
        head[:7],
        len(commits),
    )
    return commits
