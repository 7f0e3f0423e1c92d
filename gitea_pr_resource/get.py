"""Get step: check out a pull request version and write its metadata.

The output directory receives the merged (or rebased, or checked out)
working copy plus ``.git/resource/`` with ``version.json``,
``metadata.json`` and one plain file per metadata field, so later tasks
and the put step can read them.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from gitea_pr_resource.adapters.base import PlatformError, PullRequestSource
from gitea_pr_resource.adapters.git import GitWorkspace
from gitea_pr_resource.errors import ResourceError
from gitea_pr_resource.models import Metadata, PullRequest, Source, Version

logger = logging.getLogger(__name__)

RESOURCE_DIR = Path(".git") / "resource"
VERSION_FILE = "version.json"
METADATA_FILE = "metadata.json"


class GetError(ResourceError):
    """Raised when the get step cannot complete."""

    pass


class GetParameters(BaseModel):
    """Params of a get step."""

    model_config = ConfigDict(extra="forbid")

    skip_download: bool = False
    integration_tool: str = ""
    git_depth: int = Field(default=0, ge=0)
    submodules: bool = False
    fetch_tags: bool = False


class GetRequest(BaseModel):
    """Get request as sent by the pipeline on stdin."""

    model_config = ConfigDict(extra="forbid")

    source: Source
    version: Version
    params: GetParameters = Field(default_factory=GetParameters)


class GetResponse(BaseModel):
    """Get response written to stdout."""

    version: Version
    metadata: Metadata = Field(default_factory=Metadata)


def _dump(data) -> str:
    """Compact JSON, as the pipeline shows it."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def build_metadata(pr: PullRequest, base_sha: str) -> Metadata:
    """Collect the fields exposed to the pipeline for a pull request."""
    metadata = Metadata()
    metadata.add("pr", str(pr.number))
    metadata.add("title", pr.title)
    metadata.add("url", pr.url)
    metadata.add("head_name", pr.head.ref)
    metadata.add("head_sha", pr.tip.sha)
    metadata.add("base_name", pr.base.ref)
    metadata.add("base_sha", base_sha)
    metadata.add("message", pr.tip.message)
    metadata.add("author", pr.tip.author)
    metadata.add("author_email", pr.tip.author_email)
    metadata.add("state", pr.state)
    return metadata


def write_resource_files(output_dir: Path, version: Version, metadata: Metadata) -> Path:
    """Write version, metadata and per-field files under .git/resource.

    Returns:
        The directory the files were written to.
    """
    path = Path(output_dir) / RESOURCE_DIR
    try:
        path.mkdir(parents=True, exist_ok=True)
        (path / VERSION_FILE).write_text(_dump(version.model_dump(mode="json")), encoding="utf-8")
        (path / METADATA_FILE).write_text(_dump(metadata.model_dump(mode="json")), encoding="utf-8")
        for field in metadata:
            (path / field.name).write_text(field.value, encoding="utf-8")
    except OSError as e:
        raise GetError(f"failed to write resource files to {path}: {e}") from e
    return path


def _integrate(git: GitWorkspace, pr: PullRequest, params: GetParameters) -> None:
    tool = params.integration_tool
    if tool == "rebase":
        git.rebase(pr.base.ref, pr.tip.sha, params.submodules)
    elif tool in ("merge", ""):
        git.merge(pr.tip.sha, params.submodules)
    elif tool == "checkout":
        git.checkout(pr.head.ref, pr.tip.sha, params.submodules)
    else:
        raise GetError(f"invalid integration tool specified: {tool}")


def get(
    request: GetRequest,
    manager: PullRequestSource,
    git: GitWorkspace,
    output_dir: Path,
) -> GetResponse:
    """Fetch the pull request of the requested version into output_dir.

    The base branch is pulled first, then the PR head is fetched and
    integrated with the configured tool (merge by default).

    Raises:
        GetError: If the pull request cannot be retrieved, the files cannot
            be written or the integration tool is unknown.
        GitError: If a git operation fails.
    """
    params = request.params
    if params.skip_download:
        return GetResponse(version=request.version)

    try:
        pr = manager.get_pull_request(request.version.pr, request.version.commit)
    except PlatformError as e:
        raise GetError(f"failed to retrieve pull request: {e}") from e
    except NotImplementedError as e:
        raise GetError(f"source does not support {e}") from e

    git.init(pr.base.ref)
    git.pull(pr.base.clone_url, pr.base.ref, params.git_depth, params.submodules, params.fetch_tags)
    base_sha = git.rev_parse(pr.base.ref)
    git.fetch(pr.head.clone_url, pr.number, params.git_depth, params.submodules)

    metadata = build_metadata(pr, base_sha)
    path = write_resource_files(output_dir, request.version, metadata)
    logger.info("Wrote PR #%s metadata to %s", pr.number, path)

    _integrate(git, pr, params)

    return GetResponse(version=request.version, metadata=metadata)
