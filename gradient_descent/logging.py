"""Logging utilities for gradient_descent.

Every module obtains its logger through :func:`get_logger` so that all output
shares one namespace and one formatter.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

_DEFAULT_LEVEL = logging.WARNING
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_loggers: dict[str, logging.Logger] = {}


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a logger for the given module name.

    Loggers are cached so repeated calls never stack duplicate handlers.

    Args:
        name: Logger name (typically ``__name__``). If None, the package
            logger is returned.

    Returns:
        Configured logger instance.

    Example:
        >>> from gradient_descent.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Starting descent")
    """
    if name is None:
        name = "gradient_descent"

    if name == "gradient_descent" or name.startswith("gradient_descent."):
        logger_name = name
    else:
        logger_name = f"gradient_descent.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)

    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))

        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the logging level for all gradient_descent loggers.

    Args:
        level: Logging level (``logging.DEBUG``, ``logging.INFO``, ...) or its
            name as a string.
    """
    level = _coerce_level(level)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Configure logging for gradient_descent.

    Replaces the handlers of every existing logger. Typically called once at
    application startup.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format string. If None, uses the default.
        stream: Output stream (default: ``sys.stderr``).
    """
    level = _coerce_level(level)

    if stream is None:
        stream = sys.stderr

    formatter = logging.Formatter(format_string or _DEFAULT_FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


TRACE_LOGGERS = (
    "gradient_descent.gradient",
    "gradient_descent.line_search",
)


@contextmanager
def trace_descent(
    level: int | str = logging.DEBUG, stream: Optional[object] = None
) -> Iterator[None]:
    """Temporarily emit per-iteration descent and line-search records.

    Only the loop and line-search loggers are touched, and their levels and
    handlers are restored on exit, so a single run can be traced without
    reconfiguring the rest of the package.

    Example:
        >>> import io
        >>> import numpy as np
        >>> from gradient_descent import optimize
        >>> from gradient_descent.logging import trace_descent
        >>> buf = io.StringIO()
        >>> with trace_descent(stream=buf):
        ...     _ = optimize(np.array([1.0]), 0.1, max_iter=2, backtrack=False,
        ...                  f=lambda x: float(x @ x), gradf=lambda x: 2 * x)
        >>> "iter 2:" in buf.getvalue()
        True
    """
    level = _coerce_level(level)
    saved = []
    for name in TRACE_LOGGERS:
        logger = get_logger(name)
        saved.append((logger, logger.level, list(logger.handlers)))
        logger.setLevel(level)
        if stream is not None:
            handler = logging.StreamHandler(stream)
            handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
            logger.handlers = [handler]
        for handler in logger.handlers:
            handler.setLevel(level)
    try:
        yield
    finally:
        for logger, old_level, old_handlers in saved:
            logger.setLevel(old_level)
            logger.handlers = old_handlers
            for handler in old_handlers:
                handler.setLevel(old_level)


__all__ = ["configure_logging", "get_logger", "set_log_level", "trace_descent"]
