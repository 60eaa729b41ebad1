"""structlog setup for the command-line entry point."""

from __future__ import annotations
import logging
import sys

import structlog

_logging_configured = False


def configure_logging(level: str = "WARNING") -> None:
    """Route structlog through stdlib logging on stderr.

    Safe to call more than once; only the first call configures handlers,
    later calls just adjust the level.
    """
    global _logging_configured
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"unknown log level {level!r}")

    if _logging_configured:
        logging.getLogger().setLevel(numeric)
        return
    _logging_configured = True

    # stdout carries the filtered stream, so logs must go to stderr
    logging.basicConfig(format="%(message)s", level=numeric, stream=sys.stderr)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    """structlog logger on top of the stdlib logger ``name``.

    Before configure_logging() runs, events still go through stdlib logging
    (WARNING and above to stderr) rather than structlog's stdout printer.
    """
    return structlog.wrap_logger(logging.getLogger(name))
