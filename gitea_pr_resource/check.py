"""Check step: resolve which pull request versions are new.

Lists pull requests from the hosting service, drops the ones filtered out
by the source (skip-CI markers, base branch, recency, labels, paths),
and returns the surviving versions oldest first.
"""

import logging
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gitea_pr_resource.adapters.base import PlatformError, PullRequestSource
from gitea_pr_resource.errors import ResourceError
from gitea_pr_resource.filters import PatternError, contains_skip_ci, filter_ignore_path, filter_path
from gitea_pr_resource.models import PullRequest, Source, Version, new_version

logger = logging.getLogger(__name__)


class CheckError(ResourceError):
    """Raised when the check step cannot complete."""

    pass


class CheckRequest(BaseModel):
    """Check request as sent by the pipeline on stdin."""

    model_config = ConfigDict(extra="forbid")

    source: Source
    version: Version = Field(default_factory=Version)

    @field_validator("version", mode="before")
    @classmethod
    def _null_version(cls, value):
        return {} if value is None else value


def _has_label(pr: PullRequest, labels: List[str]) -> bool:
    return any(label in pr.labels for label in labels)


def _matches_paths(pr: PullRequest, source: Source, manager: PullRequestSource) -> bool:
    """Apply include and ignore patterns to the files the PR touches.

    Files are fetched once per pull request, and only when patterns are
    configured.
    """
    if not source.paths and not source.ignore_paths:
        return True

    try:
        files = manager.list_modified_files(pr.number)
    except PlatformError as e:
        raise CheckError(f"failed to list modified files: {e}") from e
    logger.debug("PR #%s modified files: %s", pr.number, files)

    if source.paths:
        wanted: List[str] = []
        for pattern in source.paths:
            try:
                wanted.extend(filter_path(files, pattern))
            except PatternError as e:
                raise CheckError(f"path match failed: {e}") from e
        if not wanted:
            return False

    if source.ignore_paths:
        wanted = files
        for pattern in source.ignore_paths:
            try:
                wanted = filter_ignore_path(wanted, pattern)
            except PatternError as e:
                raise CheckError(f"ignore path match failed: {e}") from e
        if not wanted:
            return False

    return True


def check(request: CheckRequest, manager: PullRequestSource) -> List[Version]:
    """Return the versions to emit for the request.

    Args:
        request: Source configuration and the last emitted version.
        manager: Hosting service to list pull requests and files from.

    Returns:
        New versions sorted by update time, oldest first. Without a previous
        version only the newest one is returned; with a previous version and
        nothing new, the previous version is returned alone.

    Raises:
        CheckError: If listing pull requests or files fails, or a path
            pattern is malformed.
    """
    source = request.source
    last = request.version

    try:
        prs = manager.list_pull_requests(source.state)
    except PlatformError as e:
        raise CheckError(f"failed to list pull requests: {e}") from e

    response: List[Version] = []
    for pr in prs:
        if not source.disable_ci_skip and (contains_skip_ci(pr.title) or contains_skip_ci(pr.tip.message)):
            continue

        if source.base_branch and pr.base.name != source.base_branch:
            continue

        version = new_version(pr)
        if not version.committed > last.committed:
            continue

        if source.labels and not _has_label(pr, source.labels):
            continue

        if not _matches_paths(pr, source, manager):
            continue

        response.append(version)

    response.sort(key=lambda v: v.committed)

    # Nothing new but an old version: return the old one
    if not response and not last.is_empty:
        response = [last]
    # New versions and no previous one: return only the latest
    if response and last.is_empty:
        response = [response[-1]]

    logger.info("Check found %d version(s) for %s", len(response), source.repository)
    return response
