"""Master report and run response models."""

from typing import Any

from pydantic import Field, model_validator

from research_orchestrator.core.research.models.analysis import EngineAnalysis
from research_orchestrator.core.research.models.enums import ConfidenceTier, EngineId
from research_orchestrator.core.research.models.sources import (
    SourceDocument,
    SubQuestion,
    WireModel,
)


class ThemeFinding(WireModel):
    """A cluster of related sub-questions aggregated across engines.

    ``consensus`` is derived from ``dissenting_engines`` and is always
    equal to ``len(dissenting_engines) == 0``.
    """

    theme: str
    summary: str
    confidence: ConfidenceTier
    consensus: bool = True
    supporting_sources: list[str] = Field(default_factory=list)
    dissenting_engines: list[str] = Field(default_factory=list)
    sub_question_ids: list[str] = Field(
        default_factory=list,
        description="Member sub-questions of this theme",
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_consensus(cls, data: Any) -> Any:
        if isinstance(data, dict):
            dissenting = data.get("dissenting_engines", data.get("dissentingEngines")) or []
            data = {**data, "consensus": len(dissenting) == 0}
        return data


class ToolComparison(WireModel):
    """How one engine fared across themes."""

    engine: EngineId
    engine_label: str
    strengths: list[str] = Field(default_factory=list)
    blindspots: list[str] = Field(default_factory=list)
    best_for: str
    coverage_score: int = Field(..., ge=0, le=100)


class MasterReport(WireModel):
    """Cross-engine synthesis of one research run."""

    executive_summary: list[str] = Field(default_factory=list)
    key_findings: list[ThemeFinding] = Field(default_factory=list)
    tool_comparison: list[ToolComparison] = Field(default_factory=list)
    consensus_signals: list[str] = Field(default_factory=list)
    conflict_signals: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class ResearchResponse(WireModel):
    """Root output of a research run. One per run, never merged."""

    question: str
    generated_at: str = Field(..., description="ISO-8601 UTC timestamp")
    sub_questions: list[SubQuestion] = Field(default_factory=list)
    sources: list[SourceDocument] = Field(default_factory=list)
    analyses: list[EngineAnalysis] = Field(default_factory=list)
    report: MasterReport

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire shape."""
        return self.model_dump(mode="json", by_alias=True)
