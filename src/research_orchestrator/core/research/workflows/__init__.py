"""Research workflows."""

from research_orchestrator.core.research.workflows.synthesis import (
    SynthesisWorkflow,
    run_research,
    run_research_async,
)

__all__ = ["SynthesisWorkflow", "run_research", "run_research_async"]
