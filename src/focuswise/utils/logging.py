"""Logging setup for the focuswise command-line and server entry points."""

from __future__ import annotations

import logging
import sys

from focuswise.config.settings import LoggingConfig

# Per-request chatter from the HTTP clients used by the vision backend
_NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Install handlers on the 'focuswise' logger.

    Output goes to stderr, and additionally to ``config.file`` when set.
    A second call replaces the handlers installed by the first.

    Args:
        config: Logging configuration. Defaults to INFO on stderr.
    """
    config = config or LoggingConfig()
    level = getattr(logging, config.level.upper(), logging.INFO)

    package_logger = logging.getLogger("focuswise")
    package_logger.setLevel(level)
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(config.format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    if level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    package_logger.debug("Logging configured at %s", config.level.upper())
