"""Unified error hierarchy for research-orchestrator.

All custom exception classes are defined in domain-specific modules within
this package. This __init__.py re-exports everything for convenient access.

Usage:
    from research_orchestrator.core.errors import ResearchIntegrityError
    from research_orchestrator.core.errors import error_to_response
"""

from research_orchestrator.core.errors.base import ERROR_MAPPINGS, error_to_response
from research_orchestrator.core.errors.research import (
    QuestionValidationError,
    ResearchIntegrityError,
)
from research_orchestrator.core.errors.search import (
    RateLimitError,
    SearchProviderError,
)

__all__ = [
    # Registry
    "ERROR_MAPPINGS",
    "error_to_response",
    # Research
    "QuestionValidationError",
    "ResearchIntegrityError",
    # Search
    "SearchProviderError",
    "RateLimitError",
]
