"""Multi-engine research synthesis workflow."""

from research_orchestrator.core.research.workflows.synthesis.core import (
    ResearchRun,
    SynthesisWorkflow,
    run_research,
    run_research_async,
)
from research_orchestrator.core.research.workflows.synthesis.integrity import validate_response

__all__ = [
    "ResearchRun",
    "SynthesisWorkflow",
    "run_research",
    "run_research_async",
    "validate_response",
]
