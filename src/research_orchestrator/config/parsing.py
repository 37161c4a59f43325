"""Parsing and normalization helpers for configuration values.

Provides list and number parsing used by the config sub-modules.
"""

import logging
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


def _parse_list(value: Any) -> List[str]:
    """Parse a comma-separated string or a list into a list of stripped names."""
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip().lower() for item in value.split(",") if item.strip()]
    return [str(item).strip().lower() for item in value if str(item).strip()]


def _parse_float(value: Any, *, name: str, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %r. Falling back to %s", name, value, default)
        return default


def _parse_int(value: Any, *, name: str, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %r. Falling back to %s", name, value, default)
        return default


def _env_or_none(environ: Any, key: str) -> Optional[str]:
    value = environ.get(key)
    if value is None or not str(value).strip():
        return None
    return str(value).strip()
