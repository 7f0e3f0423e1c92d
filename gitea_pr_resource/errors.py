"""Exceptions raised by resource steps."""


class ResourceError(Exception):
    """Base class for every error the resource reports to the pipeline."""

    pass


class ConfigError(ResourceError):
    """Raised when settings or collaborator factories cannot be loaded."""

    pass
