"""Gitea pull request resource: check, get and put steps for CI pipelines."""

from gitea_pr_resource.check import CheckError, CheckRequest, check
from gitea_pr_resource.errors import ConfigError, ResourceError
from gitea_pr_resource.filters import PatternError, contains_skip_ci, filter_ignore_path, filter_path, is_inside_path
from gitea_pr_resource.get import GetError, GetRequest, get
from gitea_pr_resource.put import PutError, PutRequest, put, substitute_build_metadata

__all__ = [
    "CheckError",
    "CheckRequest",
    "ConfigError",
    "GetError",
    "GetRequest",
    "PatternError",
    "PutError",
    "PutRequest",
    "ResourceError",
    "check",
    "contains_skip_ci",
    "filter_ignore_path",
    "filter_path",
    "get",
    "is_inside_path",
    "put",
    "substitute_build_metadata",
]
