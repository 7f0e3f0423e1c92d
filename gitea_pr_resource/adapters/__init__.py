"""Collaborator interfaces: hosting service and git working copy."""

from gitea_pr_resource.adapters.base import PlatformError, PullRequestSource
from gitea_pr_resource.adapters.git import GitError, GitWorkspace

__all__ = ["GitError", "GitWorkspace", "PlatformError", "PullRequestSource"]
