"""Put step: report a build back to the pull request.

Reads the version written by the get step, then sets a commit status
and/or posts a comment. Comment and target URL may reference Concourse
build metadata (``$BUILD_ID``, ``${BUILD_JOB_NAME}``, ...), taken from an
explicit environment mapping.
"""

import logging
import posixpath
import re
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gitea_pr_resource.adapters.base import PlatformError, PullRequestSource
from gitea_pr_resource.config import StatusConfig
from gitea_pr_resource.errors import ResourceError
from gitea_pr_resource.get import METADATA_FILE, RESOURCE_DIR, VERSION_FILE
from gitea_pr_resource.models import Metadata, Source, Version

logger = logging.getLogger(__name__)

STATUSES = ("pending", "success", "error", "failure", "warning")

# Concourse build metadata; no other variable is ever substituted
BUILD_METADATA_VARS = frozenset(
    {
        "ATC_EXTERNAL_URL",
        "BUILD_CREATED_BY",
        "BUILD_ID",
        "BUILD_JOB_NAME",
        "BUILD_NAME",
        "BUILD_PIPELINE_INSTANCE_VARS",
        "BUILD_PIPELINE_NAME",
        "BUILD_TEAM_NAME",
    }
)

_VAR_RE = re.compile(r"\$(?:\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))")


class PutError(ResourceError):
    """Raised when the put step cannot complete."""

    pass


class PutParameters(BaseModel):
    """Params of a put step."""

    model_config = ConfigDict(extra="forbid")

    path: str = ""
    status: str = ""
    base_context: str = ""
    context: str = ""
    target_url: str = ""
    description: str = ""
    comment: str = ""


class PutRequest(BaseModel):
    """Put request as sent by the pipeline on stdin."""

    model_config = ConfigDict(extra="forbid")

    source: Source
    params: PutParameters = Field(default_factory=PutParameters)


class PutResponse(BaseModel):
    """Put response written to stdout."""

    version: Version
    metadata: Metadata = Field(default_factory=Metadata)


def substitute_build_metadata(text: str, environ: Mapping[str, str]) -> str:
    """Expand $NAME and ${NAME} for Concourse build metadata variables.

    Unknown names and names missing from environ are left as written.
    """

    def _replace(m: re.Match) -> str:
        name = m.group("braced") or m.group("bare")
        if name in BUILD_METADATA_VARS and name in environ:
            return environ[name]
        return m.group(0)

    return _VAR_RE.sub(_replace, text)


def read_resource_files(directory: Path) -> tuple[Version, Metadata]:
    """Load the version and metadata the get step wrote to directory."""
    path = Path(directory) / RESOURCE_DIR
    try:
        version = Version.model_validate_json((path / VERSION_FILE).read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        raise PutError(f"failed to read version from {path}: {e}") from e
    try:
        metadata = Metadata.model_validate_json((path / METADATA_FILE).read_text(encoding="utf-8"))
    except FileNotFoundError:
        metadata = Metadata()
    except (OSError, ValidationError) as e:
        raise PutError(f"failed to read metadata from {path}: {e}") from e
    return version, metadata


def _join_context(*parts: str) -> str:
    """Join context segments like a slash path, dropping empty and doubled
    separators."""
    joined = "/".join(p for p in parts if p)
    return posixpath.normpath(joined) if joined else ""


def _update_status(
    manager: PullRequestSource,
    version: Version,
    params: PutParameters,
    defaults: StatusConfig,
    environ: Mapping[str, str],
) -> None:
    status = params.status.lower()
    if status not in STATUSES:
        raise PutError(f"unknown status: {params.status!r}, must be one of: {', '.join(STATUSES)}")

    base_context = params.base_context or defaults.base_context
    context = _join_context(base_context, params.context or defaults.context)
    if params.target_url:
        target_url = substitute_build_metadata(params.target_url, environ)
    else:
        target_url = "/".join([environ.get("ATC_EXTERNAL_URL", ""), "builds", environ.get("BUILD_ID", "")])
    description = params.description or f"Concourse CI build {params.status}"

    try:
        manager.update_commit_status(version.commit, context, status, target_url, description)
    except PlatformError as e:
        raise PutError(f"failed to set status: {e}") from e
    except NotImplementedError as e:
        raise PutError(f"source does not support {e}") from e
    logger.info("Set status %s (%s) on %s", status, context, version.commit)


def put(
    request: PutRequest,
    manager: PullRequestSource,
    input_dir: Path,
    environ: Mapping[str, str],
    defaults: StatusConfig | None = None,
) -> PutResponse:
    """Set status and/or comment for the version fetched into input_dir.

    Args:
        request: Source and put params.
        manager: Hosting service to post to.
        input_dir: Build directory; params.path is resolved against it.
        environ: Build metadata for templating (usually os.environ).
        defaults: Status context defaults from settings.

    Returns:
        The version read from disk and its metadata.

    Raises:
        PutError: If the version cannot be read, the status is unknown or
            the hosting service call fails.
    """
    params = request.params
    defaults = defaults or StatusConfig()
    version, metadata = read_resource_files(Path(input_dir) / params.path)

    if params.status:
        _update_status(manager, version, params, defaults, environ)

    if params.comment:
        comment = substitute_build_metadata(params.comment, environ)
        try:
            manager.post_comment(version.pr, comment)
        except PlatformError as e:
            raise PutError(f"failed to post comment: {e}") from e
        except NotImplementedError as e:
            raise PutError(f"source does not support {e}") from e
        logger.info("Posted comment on PR #%s", version.pr)

    return PutResponse(version=version, metadata=metadata)
