"""Standard response envelopes for pipeline callers."""

from research_orchestrator.core.responses.builders import (
    error_response,
    success_response,
)
from research_orchestrator.core.responses.types import (
    RESPONSE_VERSION,
    ErrorCode,
    ErrorType,
    ToolResponse,
)

__all__ = [
    "RESPONSE_VERSION",
    "ErrorCode",
    "ErrorType",
    "ToolResponse",
    "error_response",
    "success_response",
]
