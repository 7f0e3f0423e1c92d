"""Abstract base for the hosting service the resource polls."""

from abc import ABC, abstractmethod
from typing import List

from gitea_pr_resource.errors import ResourceError
from gitea_pr_resource.models import PullRequest, StateFilter


class PlatformError(ResourceError):
    """Raised when a hosting service API call fails."""

    pass


class PullRequestSource(ABC):
    """Interface to the pull request API of a hosting service (Gitea).

    Pagination, authentication and HTTP details stay behind these calls.
    """

    @abstractmethod
    def list_pull_requests(self, state: StateFilter) -> List[PullRequest]:
        """List every pull request in the given state, each with its latest
        commit."""
        ...

    @abstractmethod
    def list_modified_files(self, pr_number: int) -> List[str]:
        """List every file path touched by the pull request."""
        ...

    def get_pull_request(self, pr_number: str, commit_ref: str) -> PullRequest:
        """Fetch a pull request with ``commit_ref`` as its tip. Override if
        needed."""
        raise NotImplementedError("get_pull_request")

    def post_comment(self, pr_number: str, body: str) -> None:
        """Post a comment on the pull request. Override if needed."""
        raise NotImplementedError("post_comment")

    def update_commit_status(
        self,
        commit_ref: str,
        context: str,
        state: str,
        target_url: str,
        description: str,
    ) -> None:
        """Set a commit status. Override if needed."""
        raise NotImplementedError("update_commit_status")
