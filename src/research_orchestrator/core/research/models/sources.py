"""Sub-question and source document models for research synthesis."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from research_orchestrator.core.research.models.enums import SourceOrigin


class WireModel(BaseModel):
    """Base for all pipeline models.

    Instances are immutable once built and serialize with camelCase keys,
    which is the interchange shape consumed by UIs and downstream services.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class SubQuestion(WireModel):
    """One investigative angle derived from the root question.

    Sub-questions are created once per run by the planning phase, in
    taxonomy order. ``angle`` names the taxonomy slot that produced it and
    is used to label report themes.
    """

    id: str = Field(..., description="Identifier unique within a run (sq-1, sq-2, ...)")
    question: str = Field(..., description="The investigative question text")
    rationale: str = Field(..., description="Why this angle matters for the root question")
    focus_terms: list[str] = Field(
        default_factory=list,
        description="Salient terms of the root question used to build this sub-question",
    )
    angle: str = Field(default="", description="Taxonomy angle title")


class SourceDocument(WireModel):
    """A deduplicated, relevance-scored reference document.

    ``url`` is the dedup key within an evidence set. ``relevance`` is the
    maximum term-overlap score seen across every sub-question whose lookup
    returned this document; those sub-questions are listed in
    ``sub_question_ids``.
    """

    id: str = Field(..., description="Stable id derived from the normalized URL")
    title: str
    url: str
    summary: str = ""
    key_sentences: list[str] = Field(default_factory=list)
    relevance: float = Field(..., ge=0.0, le=1.0)
    origin: SourceOrigin
    sub_question_ids: list[str] = Field(
        default_factory=list,
        description="Sub-questions whose lookups surfaced this document",
    )
