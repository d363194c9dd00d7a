from app.core.config import settings
from app.core.exceptions import GitHubAPIError, GitHubRateLimitError
from app.core.logging import get_logger
from app.domain.activity.schemas import (
    Commit,
    GitHubActivity,
    GitHubIdentity,
    OrganizationActivity,
    PushCommit,
    PushEvent,
    RepositoryActivity,
    TimeWindow,
)
from app.domain.activity.statistics import compute_statistics
from app.infra.github.client import compare_commits, is_null_sha, iter_push_event_pages

logger = get_logger(__name__)


def derive_organization(repo_name: str, login: str) -> str | None:
    """레포 이름의 owner가 사용자 본인이 아니면 조직명으로 반환"""
    if "/" not in repo_name:
        return None
    owner = repo_name.split("/", 1)[0]
    if owner.lower() == login.lower():
        return None
    return owner


async def _resolve_push_commits(event: PushEvent, token: str) -> list[PushCommit]:
    """이벤트 커밋 목록, 생략된 경우 before...head 비교로 보강

    비교 API 실패는 해당 이벤트만 커밋 없음으로 처리하고 이벤트 조회는 계속한다.
    """
    if event.commits:
        return event.commits
    if is_null_sha(event.before) or is_null_sha(event.head):
        return []
    try:
        return await compare_commits(event.repo_name, event.before, event.head, token)
    except (GitHubAPIError, GitHubRateLimitError) as e:
        logger.warning(
            "커밋 보강 실패, 이벤트 커밋 없음으로 처리 repo=%s event_id=%s error=%s",
            event.repo_name,
            event.id,
            e.detail,
        )
        return []


async def aggregate_activity(
    identity: GitHubIdentity,
    window: TimeWindow,
    per_page: int | None = None,
) -> GitHubActivity:
    """PushEvent 페이지를 순회하며 레포/조직/전체 활동 집계

    이벤트는 최신순으로 온다고 가정한다. 기간 시작보다 오래된 이벤트를 만나면
    현재 페이지까지만 처리하고 다음 페이지는 요청하지 않는다.

    Args:
        identity: 조회 대상 로그인과 토큰
        window: 집계 기간
        per_page: 이벤트 페이지 크기

    Returns:
        기간 내 활동 집계 결과

    Raises:
        GitHubAPIError: 첫 페이지조차 받지 못한 경우
    """
    per_page = per_page or settings.github_events_per_page

    repo_commits: dict[str, list[Commit]] = {}
    repo_orgs: dict[str, str | None] = {}
    org_repos: dict[str, list[str]] = {}

    pages_seen = 0
    time_limit_reached = False

    pages = iter_push_event_pages(identity.login, identity.token, per_page)
    try:
        async for page in pages:
            pages_seen += 1

            for event in page:
                if event.created_at < window.start:
                    time_limit_reached = True
                    continue
                if event.created_at > window.end:
                    continue

                push_commits = await _resolve_push_commits(event, identity.token)

                # 기간 내 푸시는 커밋이 없어도 레포를 등록한다
                repo_name = event.repo_name
                if repo_name not in repo_commits:
                    organization = derive_organization(repo_name, identity.login)
                    repo_commits[repo_name] = []
                    repo_orgs[repo_name] = organization
                    if organization is not None:
                        org_repos.setdefault(organization, []).append(repo_name)

                for push_commit in push_commits:
                    repo_commits[repo_name].append(
                        Commit(
                            sha=push_commit.sha,
                            message=push_commit.message,
                            timestamp=event.created_at,
                        )
                    )

            if time_limit_reached:
                logger.info("기간 시작 이전 이벤트 도달, 조회 중단 page=%d", pages_seen)
                break

    except GitHubRateLimitError:
        logger.warning("요청 한도 초과로 조회 중단, 부분 결과 사용 pages=%d", pages_seen)

    except GitHubAPIError as e:
        if pages_seen == 0:
            raise
        logger.warning(
            "이벤트 조회 중 오류, 부분 결과 사용 pages=%d error=%s", pages_seen, e.detail
        )

    finally:
        await pages.aclose()

    activity = build_activity(repo_commits, repo_orgs, org_repos, window)
    logger.info(
        "활동 집계 완료 login=%s repos=%d orgs=%d commits=%d",
        identity.login,
        len(activity.repositories),
        len(activity.organizations),
        activity.overall_statistics.total_commits,
    )
    return activity


def build_activity(
    repo_commits: dict[str, list[Commit]],
    repo_orgs: dict[str, str | None],
    org_repos: dict[str, list[str]],
    window: TimeWindow,
) -> GitHubActivity:
    """누적된 레포별 커밋으로 불변 집계 결과 생성"""
    repositories = {
        name: RepositoryActivity(
            total_commits=len(commits),
            organization=repo_orgs.get(name),
            commits=commits,
            statistics=compute_statistics(commits, window),
        )
        for name, commits in repo_commits.items()
    }

    organizations = {}
    for org, repo_names in org_repos.items():
        org_commits = [c for name in repo_names for c in repo_commits[name]]
        organizations[org] = OrganizationActivity(
            total_commits=len(org_commits),
            repositories=list(dict.fromkeys(repo_names)),
            statistics=compute_statistics(org_commits, window),
        )

    all_commits = [c for commits in repo_commits.values() for c in commits]

    return GitHubActivity(
        time_window=window,
        repositories=repositories,
        organizations=organizations,
        overall_statistics=compute_statistics(all_commits, window),
    )
