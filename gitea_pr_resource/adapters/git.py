"""Abstract base for the git working copy the get step prepares."""

from abc import ABC, abstractmethod

from gitea_pr_resource.errors import ResourceError


class GitError(ResourceError):
    """Raised when a git operation fails."""

    pass


class GitWorkspace(ABC):
    """Git operations on the output directory of the get step."""

    @abstractmethod
    def init(self, base_ref: str) -> None:
        """Initialize the repository on ``base_ref``."""
        ...

    @abstractmethod
    def pull(self, url: str, base_ref: str, depth: int, submodules: bool, fetch_tags: bool) -> None:
        """Pull ``base_ref`` from ``url``."""
        ...

    @abstractmethod
    def rev_parse(self, ref: str) -> str:
        """Return the commit SHA of ``ref``."""
        ...

    @abstractmethod
    def fetch(self, url: str, pr_number: int, depth: int, submodules: bool) -> None:
        """Fetch the pull request head from ``url``."""
        ...

    @abstractmethod
    def merge(self, sha: str, submodules: bool) -> None:
        """Merge ``sha`` into the checked out base."""
        ...

    @abstractmethod
    def rebase(self, base_ref: str, sha: str, submodules: bool) -> None:
        """Rebase ``sha`` onto ``base_ref``."""
        ...

    @abstractmethod
    def checkout(self, branch: str, sha: str, submodules: bool) -> None:
        """Check out ``sha`` as ``branch``."""
        ...
