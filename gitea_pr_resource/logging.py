"""Logging from settings and env.

Levels (inclusive):
- ERROR: critical errors only
- WARNING: non-critical issues and ERROR
- INFO: service messages, WARNING, and ERROR
- DEBUG: debugging and all levels above

Configure via the settings file (logging.level, logging.format) or env
(LOGGING_LEVEL, LOGGING_FORMAT). Records go to stderr: stdout carries the
JSON response the pipeline reads.
"""

import logging
import sys
from typing import TextIO

from gitea_pr_resource.config import LoggingConfig

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


class ResourceLogging:
    """Configures root logger from LoggingConfig (YAML + env LOGGING_*)."""

    def __init__(self, config: LoggingConfig, stream: TextIO | None = None) -> None:
        """Store logging config (level and format) and target stream."""
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT
        self._stream = stream

    def setup(self) -> None:
        """Apply level, format and stream to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            stream=self._stream or sys.stderr,
            force=True,
        )
