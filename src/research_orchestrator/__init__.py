"""research-orchestrator: multi-engine research synthesis over public reference sources."""

from research_orchestrator.core.research.workflows.synthesis import (
    SynthesisWorkflow,
    run_research,
    run_research_async,
)

__version__ = "0.1.0"

__all__ = ["SynthesisWorkflow", "run_research", "run_research_async", "__version__"]
