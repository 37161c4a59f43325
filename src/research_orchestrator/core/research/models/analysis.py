"""Per-engine analysis models."""

from pydantic import Field

from research_orchestrator.core.research.models.enums import ConfidenceTier, EngineId
from research_orchestrator.core.research.models.sources import WireModel


class EngineHighlight(WireModel):
    """One engine's finding for one sub-question."""

    sub_question_id: str
    insight: str
    confidence: ConfidenceTier
    sources: list[str] = Field(
        default_factory=list,
        description="Ids of the SourceDocuments the engine selected",
    )


class EngineAnalysis(WireModel):
    """The output of one engine profile over the whole evidence set.

    ``highlights`` holds exactly one entry per sub-question, in
    sub-question order.
    """

    engine: EngineId
    engine_label: str
    overview: str
    highlights: list[EngineHighlight] = Field(default_factory=list)
    watchouts: list[str] = Field(default_factory=list)

    def highlight_for(self, sub_question_id: str) -> EngineHighlight | None:
        for highlight in self.highlights:
            if highlight.sub_question_id == sub_question_id:
                return highlight
        return None
