"""Research synthesis models package.

Re-exports all public symbols so callers can use:
    from research_orchestrator.core.research.models import X, Y, Z
"""

from research_orchestrator.core.research.models.analysis import (
    EngineAnalysis,
    EngineHighlight,
)
from research_orchestrator.core.research.models.enums import (
    ConfidenceTier,
    EngineId,
    SourceOrigin,
)
from research_orchestrator.core.research.models.report import (
    MasterReport,
    ResearchResponse,
    ThemeFinding,
    ToolComparison,
)
from research_orchestrator.core.research.models.sources import (
    SourceDocument,
    SubQuestion,
    WireModel,
)

__all__ = [
    # Enums
    "ConfidenceTier",
    "EngineId",
    "SourceOrigin",
    # Planning / gathering
    "SubQuestion",
    "SourceDocument",
    "WireModel",
    # Analysis
    "EngineHighlight",
    "EngineAnalysis",
    # Report
    "ThemeFinding",
    "ToolComparison",
    "MasterReport",
    "ResearchResponse",
]
