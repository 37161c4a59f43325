"""CLI logging setup.

Logs go to stderr so that stdout carries only the JSON envelope.
"""

import functools
import logging
import sys
import time
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

_ROOT_LOGGER = "research_orchestrator"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_NAME = "research-orchestrator-cli"


def get_cli_logger() -> logging.Logger:
    """Return the logger used by CLI commands."""
    return logging.getLogger(f"{_ROOT_LOGGER}.cli")


def configure_logging(level: str = "WARNING") -> None:
    """Attach a single stderr handler to the package logger at ``level``."""
    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)

    resolved = logging.getLevelName(str(level).upper())
    logger.setLevel(resolved if isinstance(resolved, int) else logging.WARNING)


def cli_command(name: str) -> Callable[[F], F]:
    """Log entry and duration of a CLI command at debug level."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            logger = get_cli_logger()
            start = time.perf_counter()
            logger.debug("Running command %s", name)
            try:
                return func(*args, **kwargs)
            finally:
                logger.debug("Command %s finished in %.0fms", name, (time.perf_counter() - start) * 1000)

        return wrapper  # type: ignore[return-value]

    return decorator
