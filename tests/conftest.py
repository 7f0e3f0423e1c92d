"""Shared fixtures: pull request builders and a fake hosting service."""

from datetime import datetime, timedelta, timezone
from typing import Callable, List
from unittest.mock import Mock

import pytest

from gitea_pr_resource.adapters.base import PullRequestSource
from gitea_pr_resource.models import Branch, Commit, PullRequest

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def create_test_pr(
    count: int,
    base_name: str = "master",
    skip_ci: bool = False,
    labels: List[str] | None = None,
    state: str = "open",
) -> PullRequest:
    """PR number ``count`` whose tip commit is ``count`` days old.

    Closed PRs are merged, with merge and close times set to NOW.
    """
    n = str(count)
    message = f"commit message{n}"
    if skip_ci:
        message = "[skip ci]" + message
    return PullRequest(
        number=count,
        title=f"pr{n} title",
        url=f"pr{n} url",
        base=Branch(name=base_name, ref=base_name, clone_url=f"pr{n} url"),
        head=Branch(name=f"pr{n}", ref=f"pr{n}", clone_url=f"pr{n} url"),
        state=state,
        merged=state == "closed",
        merged_at=NOW,
        closed_at=NOW,
        labels=labels or [],
        tip=Commit(
            sha=f"oid{n}",
            message=message,
            author=f"login{n}",
            author_email="user@example.com",
            committed_at=NOW - timedelta(days=count),
        ),
    )


@pytest.fixture
def test_pull_requests() -> List[PullRequest]:
    """Mixed set: skip-ci, other base branch, labels, one closed PR."""
    return [
        create_test_pr(1, skip_ci=True),
        create_test_pr(2),
        create_test_pr(3),
        create_test_pr(4),
        create_test_pr(5),
        create_test_pr(6),
        create_test_pr(7, base_name="develop", labels=["enhancement"]),
        create_test_pr(8, labels=["wontfix"]),
        create_test_pr(9),
        create_test_pr(10, state="closed"),
        create_test_pr(12),
    ]


@pytest.fixture
def make_manager() -> Callable[..., Mock]:
    """Build a mocked PullRequestSource that filters PRs by state like the
    hosting service does."""

    def _make(prs: List[PullRequest], files: dict | None = None) -> Mock:
        manager = Mock(spec=PullRequestSource)

        def _list(state: str) -> List[PullRequest]:
            if state == "all":
                return list(prs)
            return [pr for pr in prs if pr.state == state]

        manager.list_pull_requests.side_effect = _list
        manager.list_modified_files.side_effect = lambda number: list((files or {}).get(number, []))
        return manager

    return _make


@pytest.fixture
def make_pr() -> Callable[..., PullRequest]:
    """Expose create_test_pr to tests."""
    return create_test_pr
