"""Logging configuration.

Logs always go to stderr: stdout is reserved for reports and, inside a
test subprocess, for the JSON result payload.

Usage:
    from skilltest.log_config import configure_logging, get_logger
    configure_logging(level="INFO")
    logger = get_logger(__name__)
    logger.info("suite.complete", total_tests=3)
"""
from __future__ import annotations

import logging
import sys

import structlog

_configured = False


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr


def configure_logging(level: str = "INFO", verbose: bool = False, force: bool = False) -> None:
    """Route stdlib and structlog output to stderr.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        verbose: Shortcut for DEBUG.
        force: Reconfigure even if already configured.
    """
    global _configured

    if _configured and not force:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)
    if verbose:
        log_level = logging.DEBUG

    root_logger = logging.getLogger()
    root_logger.handlers = []
    stderr_handler = _StderrHandler()
    stderr_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(stderr_handler)
    root_logger.setLevel(log_level)

    _configure_structlog(colors=sys.stderr.isatty())
    _configured = True


def _configure_structlog(colors: bool = False) -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "skilltest") -> structlog.stdlib.BoundLogger:
    """Get a logger; falls back to stdlib routing when nothing was configured."""

    if not structlog.is_configured():
        _configure_structlog()
    return structlog.get_logger(name)


__all__ = ["configure_logging", "get_logger"]
