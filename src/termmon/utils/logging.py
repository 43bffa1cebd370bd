"""Logging setup utilities for termmon.

Configures the ``termmon`` logger hierarchy from the logging section of
the settings. SQLAlchemy's statement log (enabled by ``storage.echo``)
is routed through the same handlers.
"""

from __future__ import annotations

import logging
import sys

from termmon.config.settings import LoggingConfig

# Third-party loggers that share termmon's handlers.
_ATTACHED_LOGGERS = ("sqlalchemy.engine",)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure logging for the termmon service.

    Replaces any handlers installed by an earlier call, so calling this
    twice does not duplicate output.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter = logging.Formatter(config.format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    for handler in handlers:
        handler.setFormatter(formatter)

    app_logger = logging.getLogger("termmon")
    app_logger.setLevel(level)
    for old in list(app_logger.handlers):
        app_logger.removeHandler(old)
        old.close()
    for handler in handlers:
        app_logger.addHandler(handler)

    for name in _ATTACHED_LOGGERS:
        lib_logger = logging.getLogger(name)
        lib_logger.handlers = list(handlers)
        lib_logger.propagate = False

    app_logger.info("Logging initialized at %s level", config.level)
