"""Audit logging for research runs.

Provides structured audit events written to a dedicated logger, with the
current run's correlation id populated automatically from context.
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Optional

logger = logging.getLogger(__name__)

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Return the correlation id of the active run ("" outside a run)."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str) -> Iterator[str]:
    """Bind ``correlation_id`` for the duration of a run."""
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


class AuditEventType(Enum):
    """Types of audit events emitted by the pipeline."""

    RUN_STARTED = "research_run_started"
    RUN_COMPLETED = "research_run_completed"
    RUN_FAILED = "research_run_failed"
    PROVIDER_RESULT = "gathering_provider_result"
    GATHERING_RESULT = "gathering_result"
    PHASE_COMPLETED = "phase_completed"


@dataclass
class AuditEvent:
    """Structured audit event."""

    event_type: AuditEventType
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Auto-populate correlation_id from context if not set."""
        if self.correlation_id is None:
            self.correlation_id = get_correlation_id() or None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "details": self.details,
        }
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        return result


class AuditLogger:
    """
    Structured audit logging for research runs.

    Audit logs are written to a separate logger for easy filtering.
    """

    def __init__(self):
        self._logger = logging.getLogger(f"{__name__}.audit")

    def log(self, event: AuditEvent, level: int = logging.INFO) -> None:
        """Log an audit event."""
        self._logger.log(level, "AUDIT: %s", event.event_type.value, extra={"audit": event.to_dict()})


# Global audit logger
_audit = AuditLogger()


def audit_log(event_type: str, *, level: str = "info", **details: Any) -> None:
    """
    Convenience function for audit logging.

    Args:
        event_type: Type of event (see AuditEventType values)
        level: Log level name for the record ("info", "warning", ...)
        **details: Additional details to include in the audit log
    """
    try:
        event_enum = AuditEventType(event_type)
    except ValueError:
        event_enum = AuditEventType.PHASE_COMPLETED
        details["original_event_type"] = event_type

    _audit.log(
        AuditEvent(event_type=event_enum, details=details),
        level=logging.getLevelName(level.upper()),
    )
