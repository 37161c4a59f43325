"""Pipeline phases of the synthesis workflow, in execution order."""

from research_orchestrator.core.research.workflows.synthesis.phases.analysis import (
    ENGINE_PROFILES,
    EngineProfile,
    SelectionRule,
    build_engine_analyses,
    build_engine_analysis,
)
from research_orchestrator.core.research.workflows.synthesis.phases.gathering import (
    GatheringResult,
    GatheringStats,
    gather_evidence,
)
from research_orchestrator.core.research.workflows.synthesis.phases.planning import (
    TAXONOMY,
    generate_sub_questions,
)
from research_orchestrator.core.research.workflows.synthesis.phases.synthesis import (
    THEME_OVERLAP_THRESHOLD,
    build_master_report,
    cluster_themes,
)

__all__ = [
    "TAXONOMY",
    "generate_sub_questions",
    "GatheringResult",
    "GatheringStats",
    "gather_evidence",
    "ENGINE_PROFILES",
    "EngineProfile",
    "SelectionRule",
    "build_engine_analysis",
    "build_engine_analyses",
    "THEME_OVERLAP_THRESHOLD",
    "build_master_report",
    "cluster_themes",
]
