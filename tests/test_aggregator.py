"""활동 집계 테스트"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest

from app.core.exceptions import GitHubAPIError, GitHubRateLimitError
from app.domain.activity.aggregator import aggregate_activity, derive_organization
from app.domain.activity.schemas import GitHubIdentity, PushCommit

IDENTITY = GitHubIdentity(login="octocat", token="ghp_test")


def fake_event_source(pages: list, error: Exception | None = None, requested: list | None = None):
    """페이지 목록을 순서대로 내보내는 iter_push_event_pages 대체"""

    async def _iter(username, token, per_page):
        for idx, page in enumerate(pages, start=1):
            if requested is not None:
                requested.append(idx)
            yield page
        if error is not None:
            raise error

    return _iter


class TestDeriveOrganization:
    """derive_organization 함수 테스트"""

    @pytest.mark.parametrize(
        "repo_name,login,expected",
        [
            ("org/repoA", "octocat", "org"),
            ("octocat/dotfiles", "octocat", None),
            ("OctoCat/dotfiles", "octocat", None),
            ("no-slash", "octocat", None),
        ],
    )
    def test_owner_segment(self, repo_name, login, expected):
        assert derive_organization(repo_name, login) == expected


class TestAggregateActivity:
    """aggregate_activity 함수 테스트"""

    @pytest.mark.asyncio
    async def test_org_repository_scenario(self, feb_week_window, make_push_event):
        """조직 레포 푸시는 레포/조직 집계 양쪽에 반영"""
        pages = [[make_push_event("org/repoA", datetime(2024, 2, 20, 10, tzinfo=UTC), ["a1", "a2"])]]

        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source(pages),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        repo = activity.repositories["org/repoA"]
        assert repo.organization == "org"
        assert repo.total_commits == 2
        assert [c.sha for c in repo.commits] == ["a1", "a2"]

        org = activity.organizations["org"]
        assert org.repositories == ["org/repoA"]
        assert org.total_commits == 2
        assert activity.overall_statistics.total_commits == 2

    @pytest.mark.asyncio
    async def test_personal_repository_has_no_organization(self, feb_week_window, make_push_event):
        pages = [[make_push_event("octocat/dotfiles", datetime(2024, 2, 21, tzinfo=UTC))]]

        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source(pages),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        assert activity.repositories["octocat/dotfiles"].organization is None
        assert activity.organizations == {}

    @pytest.mark.asyncio
    async def test_empty_source(self, feb_week_window):
        """이벤트가 없으면 0으로 채운 전체 통계"""
        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source([]),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        assert activity.repositories == {}
        assert activity.organizations == {}
        stats = activity.overall_statistics
        assert stats.total_commits == 0
        assert stats.average_commits_per_day == 0
        assert stats.most_active_day.date == "2024-02-19"
        assert stats.most_active_day.count == 0
        assert stats.least_active_day.date == "2024-02-19"
        assert stats.least_active_day.count == 0

    @pytest.mark.asyncio
    async def test_stops_after_page_with_old_event(self, feb_week_window, make_push_event):
        """기간 이전 이벤트가 나온 페이지까지만 처리"""
        requested = []
        pages = [
            [make_push_event("octocat/a", datetime(2024, 2, 24, tzinfo=UTC), ["p1"])],
            [
                make_push_event("octocat/a", datetime(2024, 2, 18, 23, tzinfo=UTC), ["old"]),
                make_push_event("octocat/b", datetime(2024, 2, 19, 1, tzinfo=UTC), ["p2"]),
            ],
            [make_push_event("octocat/c", datetime(2024, 2, 20, tzinfo=UTC), ["never"])],
        ]

        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source(pages, requested=requested),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        assert requested == [1, 2]
        assert set(activity.repositories) == {"octocat/a", "octocat/b"}
        assert [c.sha for c in activity.repositories["octocat/a"].commits] == ["p1"]
        assert activity.overall_statistics.total_commits == 2

    @pytest.mark.asyncio
    async def test_events_after_window_skipped(self, feb_week_window, make_push_event):
        pages = [
            [
                make_push_event("octocat/a", datetime(2024, 2, 26, 0, 0, 1, tzinfo=UTC), ["future"]),
                make_push_event("octocat/a", datetime(2024, 2, 25, 12, tzinfo=UTC), ["sunday"]),
            ]
        ]

        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source(pages),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        assert [c.sha for c in activity.repositories["octocat/a"].commits] == ["sunday"]

    @pytest.mark.asyncio
    async def test_commit_timestamp_is_event_time(self, feb_week_window, make_push_event):
        created_at = datetime(2024, 2, 22, 8, 30, tzinfo=UTC)
        pages = [[make_push_event("octocat/a", created_at, ["x"])]]

        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source(pages),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        assert activity.repositories["octocat/a"].commits[0].timestamp == created_at
        assert activity.overall_statistics.daily_commits["2024-02-22"].count == 1

    @pytest.mark.asyncio
    async def test_rate_limit_returns_collected(self, feb_week_window, make_push_event):
        """요청 한도 초과는 오류 없이 부분 결과 반환"""
        pages = [[make_push_event("octocat/a", datetime(2024, 2, 23, tzinfo=UTC), ["p1"])]]

        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source(pages, error=GitHubRateLimitError("HTTP 429")),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        assert activity.overall_statistics.total_commits == 1

    @pytest.mark.asyncio
    async def test_rate_limit_on_first_page_returns_empty(self, feb_week_window):
        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source([], error=GitHubRateLimitError("HTTP 403")),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        assert activity.repositories == {}
        assert activity.overall_statistics.total_commits == 0

    @pytest.mark.asyncio
    async def test_api_error_on_first_page_propagates(self, feb_week_window):
        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source([], error=GitHubAPIError("HTTP 500", status_code=500)),
        ):
            with pytest.raises(GitHubAPIError):
                await aggregate_activity(IDENTITY, feb_week_window)

    @pytest.mark.asyncio
    async def test_api_error_after_first_page_returns_partial(
        self, feb_week_window, make_push_event
    ):
        pages = [[make_push_event("octocat/a", datetime(2024, 2, 23, tzinfo=UTC), ["p1", "p2"])]]

        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source(pages, error=GitHubAPIError("HTTP 502", status_code=502)),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        assert activity.overall_statistics.total_commits == 2

    @pytest.mark.asyncio
    async def test_empty_push_is_backfilled(self, feb_week_window, make_push_event):
        """커밋 목록이 생략된 푸시는 compare API로 보강"""
        event = make_push_event(
            "org/repoA",
            datetime(2024, 2, 20, tzinfo=UTC),
            shas=[],
            before="1" * 40,
            head="2" * 40,
        )
        mock_compare = AsyncMock(
            return_value=[PushCommit(sha="b1", message="one"), PushCommit(sha="b2", message="two")]
        )

        with (
            patch(
                "app.domain.activity.aggregator.iter_push_event_pages",
                fake_event_source([[event]]),
            ),
            patch("app.domain.activity.aggregator.compare_commits", mock_compare),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        mock_compare.assert_awaited_once_with("org/repoA", "1" * 40, "2" * 40, "ghp_test")
        assert [c.sha for c in activity.repositories["org/repoA"].commits] == ["b1", "b2"]

    @pytest.mark.asyncio
    async def test_new_branch_push_not_backfilled(self, feb_week_window, make_push_event):
        event = make_push_event(
            "octocat/a",
            datetime(2024, 2, 20, tzinfo=UTC),
            shas=[],
            before="0" * 40,
            head="2" * 40,
        )
        mock_compare = AsyncMock()

        with (
            patch(
                "app.domain.activity.aggregator.iter_push_event_pages",
                fake_event_source([[event]]),
            ),
            patch("app.domain.activity.aggregator.compare_commits", mock_compare),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        mock_compare.assert_not_awaited()
        assert activity.repositories["octocat/a"].total_commits == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            GitHubAPIError("HTTP 404", status_code=404),
            GitHubRateLimitError("HTTP 403"),
        ],
    )
    async def test_backfill_failure_keeps_enumerating(
        self, feb_week_window, make_push_event, error
    ):
        """한 이벤트의 커밋 보강 실패가 나머지 이벤트와 다음 페이지 집계를 막지 않음"""
        pages = [
            [
                make_push_event("org/a", datetime(2024, 2, 23, tzinfo=UTC), ["a1"]),
                make_push_event(
                    "org/gone",
                    datetime(2024, 2, 22, tzinfo=UTC),
                    shas=[],
                    before="1" * 40,
                    head="2" * 40,
                ),
                make_push_event("org/b", datetime(2024, 2, 21, tzinfo=UTC), ["b1"]),
            ],
            [make_push_event("org/c", datetime(2024, 2, 20, tzinfo=UTC), ["c1", "c2"])],
        ]
        requested: list = []

        with (
            patch(
                "app.domain.activity.aggregator.iter_push_event_pages",
                fake_event_source(pages, requested=requested),
            ),
            patch(
                "app.domain.activity.aggregator.compare_commits",
                AsyncMock(side_effect=error),
            ),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        assert requested == [1, 2]
        assert activity.repositories["org/b"].total_commits == 1
        assert activity.repositories["org/c"].total_commits == 2
        assert activity.repositories["org/gone"].total_commits == 0
        assert activity.organizations["org"].repositories == [
            "org/a",
            "org/gone",
            "org/b",
            "org/c",
        ]
        assert activity.overall_statistics.total_commits == 4

    @pytest.mark.asyncio
    async def test_organization_concatenates_repositories(self, feb_week_window, make_push_event):
        pages = [
            [
                make_push_event("org/repoA", datetime(2024, 2, 21, tzinfo=UTC), ["a1"]),
                make_push_event("org/repoB", datetime(2024, 2, 20, tzinfo=UTC), ["b1", "b2"]),
                make_push_event("org/repoA", datetime(2024, 2, 19, tzinfo=UTC), ["a2"]),
            ]
        ]

        with patch(
            "app.domain.activity.aggregator.iter_push_event_pages",
            fake_event_source(pages),
        ):
            activity = await aggregate_activity(IDENTITY, feb_week_window)

        org = activity.organizations["org"]
        assert org.repositories == ["org/repoA", "org/repoB"]
        assert org.total_commits == 4
        assert org.statistics.total_commits == 4
