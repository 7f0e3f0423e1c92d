"""Resource settings loading from YAML and environment.

Per-request configuration (source, params) arrives as JSON on stdin; these
settings cover how the resource itself runs: logging, status defaults and
the collaborator factories that talk to the hosting service and git.
"""

import os
from importlib import import_module
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from gitea_pr_resource.errors import ConfigError

DEFAULT_CONFIG_PATH = Path("/opt/resource/config.yaml")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class StatusConfig(BaseSettings):
    """Commit status defaults for the put step."""

    model_config = SettingsConfigDict(env_prefix="STATUS_", extra="ignore")

    base_context: str = Field(default="concourse-ci", description="Status context prefix")
    context: str = Field(default="status", description="Status context when none is given")


class CollaboratorsConfig(BaseSettings):
    """Import paths (``module:callable``) of the collaborator factories."""

    model_config = SettingsConfigDict(env_prefix="RESOURCE_", extra="ignore")

    source_factory: str | None = Field(
        default=None, description="Builds the PullRequestSource from a Source"
    )
    git_factory: str | None = Field(
        default=None, description="Builds the GitWorkspace from a working directory"
    )


class ResourceSettings(BaseSettings):
    """Root settings from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    status: StatusConfig = Field(default_factory=StatusConfig)
    collaborators: CollaboratorsConfig = Field(default_factory=CollaboratorsConfig)


def _substitute_env(value: Any, environ: Mapping[str, str]) -> Any:
    """Replace ${VAR} and $VAR in strings with values from environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return environ.get(key, value)
        if value.startswith("$"):
            key = value[1:].strip()
            return environ.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v, environ) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v, environ) for v in value]
    return value


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"settings section {name!r} must be a mapping")
    return value


def load_settings(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ResourceSettings:
    """Load settings from a YAML file and environment.

    A missing file is not an error: every setting has a default and can be
    overridden through env (LOGGING_LEVEL, STATUS_BASE_CONTEXT,
    RESOURCE_SOURCE_FACTORY, ...).
    """
    env = dict(os.environ) if environ is None else dict(environ)
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.is_file():
        return ResourceSettings()

    try:
        raw = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"invalid settings file {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"invalid settings file {path}: top level must be a mapping")
    raw = _substitute_env(raw, env)

    try:
        return ResourceSettings(
            logging=LoggingConfig(**_section(raw, "logging")),
            status=StatusConfig(**_section(raw, "status")),
            collaborators=CollaboratorsConfig(**_section(raw, "collaborators")),
        )
    except ValidationError as e:
        raise ConfigError(f"invalid settings in {path}: {e}") from e


def resolve_factory(import_path: str | None, name: str) -> Callable[..., Any]:
    """Import a ``module:callable`` factory.

    Raises:
        ConfigError: If the path is unset, malformed or cannot be imported.
    """
    if not import_path:
        raise ConfigError(f"{name} is not configured")
    module_name, _, attr = import_path.partition(":")
    if not module_name or not attr:
        raise ConfigError(f"{name} must look like 'module:callable', got {import_path!r}")
    try:
        module = import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"cannot import {name} module {module_name!r}: {e}") from e
    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ConfigError(f"{name} {import_path!r} is not callable")
    return factory
