"""Error-to-ErrorCode mapping registry.

Provides a centralized mapping from exception types to (ErrorCode, ErrorType)
tuples, enabling consistent error envelopes for every caller of the pipeline.

Usage:
    from research_orchestrator.core.errors.base import error_to_response

    try:
        response = run_research(question)
    except Exception as e:
        result = error_to_response(e)
        if result is not None:
            return result
        raise  # Unknown error, re-raise
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Dict, Optional, Tuple, Type

from research_orchestrator.core.errors.research import (
    QuestionValidationError,
    ResearchIntegrityError,
)
from research_orchestrator.core.errors.search import (
    RateLimitError,
    SearchProviderError,
)
from research_orchestrator.core.responses.builders import error_response
from research_orchestrator.core.responses.types import ErrorCode, ErrorType

ERROR_MAPPINGS: Dict[Type[Exception], Tuple[ErrorCode, ErrorType]] = {
    # --- Input errors ---
    QuestionValidationError: (ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION),
    # --- Search provider errors ---
    SearchProviderError: (ErrorCode.PROVIDER_ERROR, ErrorType.UNAVAILABLE),
    RateLimitError: (ErrorCode.RATE_LIMIT_EXCEEDED, ErrorType.RATE_LIMIT),
    # --- Pipeline invariants ---
    ResearchIntegrityError: (ErrorCode.INTEGRITY_VIOLATION, ErrorType.INTERNAL),
}

_REMEDIATIONS: Dict[Type[Exception], str] = {
    QuestionValidationError: "Provide a more detailed research question.",
    ResearchIntegrityError: "Retry the run; if it persists, report the violations listed in details.",
}


def error_to_response(exc: Exception) -> Optional[dict]:
    """Convert a known exception to a standard error envelope, or None if unknown.

    Looks up the exception's *exact* type in ERROR_MAPPINGS and, if found,
    generates a standardized error response using the mapped ErrorCode and
    ErrorType.

    Args:
        exc: The exception to convert.

    Returns:
        A JSON-serializable dict, or None if the exception type is not
        registered in ERROR_MAPPINGS.
    """
    exc_type = type(exc)
    mapping = ERROR_MAPPINGS.get(exc_type)
    if mapping is None:
        return None

    code, error_type = mapping
    details = exc.to_dict() if isinstance(exc, ResearchIntegrityError) else None
    return asdict(
        error_response(
            str(exc),
            error_code=code,
            error_type=error_type,
            remediation=_REMEDIATIONS.get(exc_type),
            details=details,
        )
    )
