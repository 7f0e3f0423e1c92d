"""Data models for pull requests, versions, source config and metadata
(Pydantic)."""

from gitea_pr_resource.models.metadata import Metadata, MetadataField
from gitea_pr_resource.models.pull_request import Branch, Commit, PullRequest, updated_date
from gitea_pr_resource.models.source import Source, StateFilter
from gitea_pr_resource.models.version import ZERO_TIME, Version, new_version

__all__ = [
    "Branch",
    "Commit",
    "Metadata",
    "MetadataField",
    "PullRequest",
    "Source",
    "StateFilter",
    "Version",
    "ZERO_TIME",
    "new_version",
    "updated_date",
]
