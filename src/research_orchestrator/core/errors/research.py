"""Research pipeline error classes."""

from __future__ import annotations

from typing import Any, Optional


class QuestionValidationError(ValueError):
    """Raised by callers that reject a question before running the pipeline.

    The pipeline itself never raises this; it degrades short or empty
    questions to zero salient terms.
    """

    def __init__(self, question: str, min_length: int):
        self.question = question
        self.min_length = min_length
        super().__init__(
            f"Provide a more detailed research question (>= {min_length} characters)."
        )


class ResearchIntegrityError(RuntimeError):
    """Raised when an assembled run breaks an internal invariant.

    A run whose id graph is broken (dangling sub-question or source ids,
    out-of-range scores, themes without members) cannot be safely rendered,
    so the whole run fails with this single error instead of returning a
    partial report.

    Attributes:
        violations: Human-readable description of each broken invariant
        question: The root question of the failed run
    """

    def __init__(self, violations: list[str], question: Optional[str] = None):
        self.violations = list(violations)
        self.question = question
        summary = violations[0] if violations else "unknown violation"
        extra = f" (+{len(violations) - 1} more)" if len(violations) > 1 else ""
        super().__init__(f"Research run failed integrity checks: {summary}{extra}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "error_type": "research_integrity",
            "question": self.question,
            "violations": self.violations,
        }
