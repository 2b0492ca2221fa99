"""Logging setup shared by the server and command line entry points.

Output goes through loguru. Library modules keep ``logging.getLogger(__name__)``;
their records, ``extra`` fields included, are forwarded to loguru by
:class:`InterceptHandler` on the root logger.
"""

from __future__ import annotations

import inspect
import logging
import sys

from loguru import logger

from siteweave.config import SITEWEAVE_LOG_LEVEL

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level> | {extra}"
)

_configured = False


class InterceptHandler(logging.Handler):
    """Forward standard library records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside the logging module so loguru reports it.
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        extras = {key: value for key, value in vars(record).items() if key not in _RESERVED_ATTRS}
        logger.bind(**extras).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(level: str | int = SITEWEAVE_LOG_LEVEL) -> None:
    """Replace loguru's sinks with one stderr sink and route stdlib logging to it.

    Calling it again swaps the sink and the intercept handler instead of
    adding more.
    """
    global _configured

    if isinstance(level, str):
        level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, InterceptHandler):
            root.removeHandler(handler)
    root.addHandler(InterceptHandler())
    root.setLevel(level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True

    _configured = True


def get_logger(name: str):
    """Return the loguru logger bound to ``name``, configuring sinks on first use."""
    if not _configured:
        configure_logging()
    return logger.bind(logger_name=name)
