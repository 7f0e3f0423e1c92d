"""Tests for settings loading and collaborator factory resolution."""

import os.path
from pathlib import Path

import pytest

from gitea_pr_resource.config import ResourceSettings, load_settings, resolve_factory
from gitea_pr_resource.errors import ConfigError


def test_missing_file_returns_defaults(tmp_path: Path) -> None:
    """A missing settings file gives the defaults."""
    settings = load_settings(tmp_path / "missing.yaml", environ={})
    assert isinstance(settings, ResourceSettings)
    assert settings.logging.level == "INFO"
    assert settings.status.base_context == "concourse-ci"
    assert settings.status.context == "status"
    assert settings.collaborators.source_factory is None


def test_load_yaml_with_env_substitution(tmp_path: Path) -> None:
    """YAML values like ${VAR} and $VAR are read from environ."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "logging:\n"
        "  level: ${LOG_LEVEL}\n"
        "status:\n"
        "  base_context: $CONTEXT\n"
        "collaborators:\n"
        "  source_factory: acme.gitea:build_source\n"
    )
    settings = load_settings(path, environ={"LOG_LEVEL": "DEBUG", "CONTEXT": "gitea-ci"})
    assert settings.logging.level == "DEBUG"
    assert settings.status.base_context == "gitea-ci"
    assert settings.collaborators.source_factory == "acme.gitea:build_source"


def test_unset_variable_is_kept(tmp_path: Path) -> None:
    """Unknown variables are left verbatim."""
    path = tmp_path / "config.yaml"
    path.write_text("status:\n  base_context: ${NOPE}\n")
    settings = load_settings(path, environ={})
    assert settings.status.base_context == "${NOPE}"


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    """Broken YAML raises ConfigError."""
    path = tmp_path / "config.yaml"
    path.write_text("logging: [unclosed\n")
    with pytest.raises(ConfigError):
        load_settings(path, environ={})


def test_env_overrides_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """LOGGING_LEVEL and RESOURCE_SOURCE_FACTORY are read from env."""
    monkeypatch.setenv("LOGGING_LEVEL", "WARNING")
    monkeypatch.setenv("RESOURCE_SOURCE_FACTORY", "acme:make")
    settings = load_settings(tmp_path / "missing.yaml")
    assert settings.logging.level == "WARNING"
    assert settings.collaborators.source_factory == "acme:make"


@pytest.mark.parametrize(
    "content, message",
    [
        ("status:\n  base_context: [1, 2]\n", "invalid settings in"),
        ("- logging\n- status\n", "top level must be a mapping"),
        ("logging: DEBUG\n", "'logging' must be a mapping"),
    ],
)
def test_invalid_settings_values(tmp_path: Path, content: str, message: str) -> None:
    """Wrongly typed settings are reported as ConfigError."""
    path = tmp_path / "config.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError) as exc_info:
        load_settings(path, environ={})
    assert message in str(exc_info.value)


class TestResolveFactory:
    """resolve_factory imports module:callable paths."""

    def test_resolves_callable(self) -> None:
        """A valid path returns the callable."""
        assert resolve_factory("os.path:join", "source_factory") is os.path.join

    def test_unset(self) -> None:
        """Unset factories are a configuration error."""
        with pytest.raises(ConfigError) as exc_info:
            resolve_factory(None, "source_factory")
        assert "source_factory is not configured" in str(exc_info.value)

    @pytest.mark.parametrize("path", ["os.path", ":join", "os.path:"])
    def test_malformed(self, path: str) -> None:
        """Paths without module or attribute are rejected."""
        with pytest.raises(ConfigError):
            resolve_factory(path, "git_factory")

    def test_missing_module(self) -> None:
        """Modules that cannot be imported are reported."""
        with pytest.raises(ConfigError) as exc_info:
            resolve_factory("no_such_module_xyz:make", "git_factory")
        assert "cannot import" in str(exc_info.value)

    def test_not_callable(self) -> None:
        """Attributes that are not callable are rejected."""
        with pytest.raises(ConfigError):
            resolve_factory("os.path:sep", "git_factory")
