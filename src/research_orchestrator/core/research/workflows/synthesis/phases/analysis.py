"""Analysis phase: four heuristic engine profiles over one evidence set.

Engines are not model calls. Each is an ``EngineProfile`` record (a source
selection rule plus confidence knobs) and every profile is run through the
same ``build_engine_analysis`` function, so engines differ only in the
data they are configured with.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from research_orchestrator.core.research.models import (
    ConfidenceTier,
    EngineAnalysis,
    EngineHighlight,
    EngineId,
    SourceDocument,
    SubQuestion,
)
from research_orchestrator.core.research.text import count_terms, term_set, truncate

logger = logging.getLogger(__name__)

HIGH_CONFIDENCE_THRESHOLD = 0.66
MEDIUM_CONFIDENCE_THRESHOLD = 0.33
#: Minimum relevance for a selected source to count as corroboration.
CORROBORATION_FLOOR = 0.2
#: Distinct corroborating sources needed for the one-step tier bonus.
CORROBORATION_MIN_SOURCES = 2
#: Key sentences quoted in one insight.
INSIGHT_SENTENCES = 2
INSIGHT_MAX_CHARS = 420

RISK_TERMS = frozenset(
    {
        "risk", "risks", "risky", "threat", "threats", "vulnerability",
        "vulnerabilities", "attack", "attacks", "breach", "breaches",
        "failure", "failures", "concern", "concerns", "challenge",
        "challenges", "uncertainty", "uncertain", "danger", "dangerous",
        "exposure", "liability", "decline", "loss", "losses", "harm",
        "harmful", "obstacle", "obstacles", "barrier", "barriers",
        "limitation", "limitations", "criticism", "controversy", "misuse",
        "regulation", "regulatory", "compliance", "shortage", "disruption",
    }
)


class SelectionRule(str, Enum):
    """How a profile orders candidate sources for a sub-question."""

    ORIGIN_BREADTH = "origin-breadth"
    TOP_RELEVANCE = "top-relevance"
    SENTENCE_DENSITY = "sentence-density"
    RISK_LANGUAGE = "risk-language"


@dataclass(frozen=True)
class EngineProfile:
    """Configuration record for one heuristic engine.

    Attributes:
        engine: Wire identifier of the engine
        label: Human-readable engine name
        overview: One-line description used as ``EngineAnalysis.overview``
        strength: Declared strength, templated into ``bestFor``
        selection: Source selection rule
        max_sources: Maximum sources selected per sub-question
        relevance_weight: Multiplier applied to the best relevance before
            mapping it to a tier
        corroboration_bonus: Whether corroborating sources may raise the tier
    """

    engine: EngineId
    label: str
    overview: str
    strength: str
    selection: SelectionRule
    max_sources: int = 3
    relevance_weight: float = 1.0
    corroboration_bonus: bool = True


ENGINE_PROFILES: tuple[EngineProfile, ...] = (
    EngineProfile(
        engine=EngineId.OPENAI_DEEP_RESEARCH,
        label="OpenAI Deep Research",
        overview="Surveys every kind of source before committing, trading depth for breadth of origins.",
        strength="broad landscape scans that draw on several kinds of sources",
        selection=SelectionRule.ORIGIN_BREADTH,
        max_sources=3,
    ),
    EngineProfile(
        engine=EngineId.PERPLEXITY_DEEP_RESEARCH,
        label="Perplexity Deep Research",
        overview="Answers from the most relevant sources first and cites them tightly.",
        strength="fast, citation-backed answers to focused questions",
        selection=SelectionRule.TOP_RELEVANCE,
        max_sources=2,
    ),
    EngineProfile(
        engine=EngineId.KIMI_K2,
        label="Kimi K2",
        overview="Reads for density, preferring sources packed with on-topic key sentences.",
        strength="dense synthesis of detail-heavy material",
        selection=SelectionRule.SENTENCE_DENSITY,
        max_sources=3,
        relevance_weight=0.95,
    ),
    EngineProfile(
        engine=EngineId.GEMINI_2_5_PRO,
        label="Gemini 2.5 Pro",
        overview="Weighs cautionary language heavily to surface risks and open problems.",
        strength="stress-testing assumptions and surfacing downside risks",
        selection=SelectionRule.RISK_LANGUAGE,
        max_sources=2,
        relevance_weight=0.9,
        corroboration_bonus=False,
    ),
)

PROFILES_BY_ENGINE: dict[EngineId, EngineProfile] = {profile.engine: profile for profile in ENGINE_PROFILES}


# ---------------------------------------------------------------------------
# Selection rules
# ---------------------------------------------------------------------------


def _by_origin_breadth(candidates: list[SourceDocument], sub_question: SubQuestion) -> list[SourceDocument]:
    """Round-robin across origins in order of first appearance."""
    queues: dict[str, list[SourceDocument]] = {}
    for source in candidates:
        queues.setdefault(source.origin.value, []).append(source)
    ordered: list[SourceDocument] = []
    while any(queues.values()):
        for queue in queues.values():
            if queue:
                ordered.append(queue.pop(0))
    return ordered


def _by_relevance(candidates: list[SourceDocument], sub_question: SubQuestion) -> list[SourceDocument]:
    return sorted(candidates, key=lambda source: -source.relevance)


def _sentence_density(source: SourceDocument, sub_question: SubQuestion) -> int:
    if not sub_question.focus_terms:
        return len(source.key_sentences)
    return sum(count_terms(sentence, sub_question.focus_terms) for sentence in source.key_sentences)


def _by_sentence_density(candidates: list[SourceDocument], sub_question: SubQuestion) -> list[SourceDocument]:
    return sorted(
        candidates,
        key=lambda source: (-_sentence_density(source, sub_question), -source.relevance),
    )


def risk_score(source: SourceDocument) -> int:
    """Count distinct risk-lexicon terms in a source's summary and key sentences."""
    text = " ".join([source.summary, *source.key_sentences])
    return len(term_set(text) & RISK_TERMS)


def _by_risk_language(candidates: list[SourceDocument], sub_question: SubQuestion) -> list[SourceDocument]:
    return sorted(candidates, key=lambda source: (-risk_score(source), -source.relevance))


_SELECTORS: dict[SelectionRule, Callable[[list[SourceDocument], SubQuestion], list[SourceDocument]]] = {
    SelectionRule.ORIGIN_BREADTH: _by_origin_breadth,
    SelectionRule.TOP_RELEVANCE: _by_relevance,
    SelectionRule.SENTENCE_DENSITY: _by_sentence_density,
    SelectionRule.RISK_LANGUAGE: _by_risk_language,
}


def select_sources(
    profile: EngineProfile,
    sub_question: SubQuestion,
    sources: Sequence[SourceDocument],
) -> list[SourceDocument]:
    """Select up to ``profile.max_sources`` candidates for ``sub_question``.

    Candidates are the sources whose lookups were triggered by the
    sub-question, kept in evidence order so every sort stays stable.
    """
    candidates = [source for source in sources if sub_question.id in source.sub_question_ids]
    return _SELECTORS[profile.selection](candidates, sub_question)[: profile.max_sources]


# ---------------------------------------------------------------------------
# Confidence
# ---------------------------------------------------------------------------


def tier_for_relevance(score: float) -> ConfidenceTier:
    """Map a relevance score to a tier (high >= 0.66, medium >= 0.33)."""
    if score >= HIGH_CONFIDENCE_THRESHOLD:
        return ConfidenceTier.HIGH
    if score >= MEDIUM_CONFIDENCE_THRESHOLD:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def derive_confidence(profile: EngineProfile, selected: Sequence[SourceDocument]) -> ConfidenceTier:
    """Derive the confidence tier of one highlight.

    The best selected relevance, scaled by the profile weight, sets the
    base tier. Profiles with the corroboration bonus step up one tier when
    at least two selected sources with distinct URLs clear the
    corroboration floor.
    """
    if not selected:
        return ConfidenceTier.LOW
    best = max(source.relevance for source in selected) * profile.relevance_weight
    tier = tier_for_relevance(best)
    corroborating = {source.url for source in selected if source.relevance >= CORROBORATION_FLOOR}
    if profile.corroboration_bonus and len(corroborating) >= CORROBORATION_MIN_SOURCES:
        tier = tier.step_up()
    return tier


# ---------------------------------------------------------------------------
# Highlights and analyses
# ---------------------------------------------------------------------------


def _compose_insight(sub_question: SubQuestion, selected: Sequence[SourceDocument]) -> str:
    if not selected:
        return f'No reference evidence surfaced for "{sub_question.question}".'

    quoted: list[str] = []
    for source in selected:
        sentence = source.key_sentences[0] if source.key_sentences else source.summary or source.title
        if sentence and sentence not in quoted:
            quoted.append(sentence)
        if len(quoted) == INSIGHT_SENTENCES:
            break
    return truncate(" ".join(quoted), INSIGHT_MAX_CHARS)


def _watchout(sub_question: SubQuestion, highlight: EngineHighlight) -> str:
    angle = sub_question.angle or sub_question.id
    if not highlight.sources:
        return f'{angle}: no evidence retrieved for "{sub_question.question}"'
    return f'{angle}: only low-confidence evidence supports "{sub_question.question}"'


def build_engine_analysis(
    profile: EngineProfile,
    sub_questions: Sequence[SubQuestion],
    sources: Sequence[SourceDocument],
) -> EngineAnalysis:
    """Run one engine profile over the evidence set.

    Produces exactly one highlight per sub-question, in sub-question
    order. Never fails on empty evidence: every highlight then falls back
    to low confidence with no sources and a matching watchout.
    """
    highlights: list[EngineHighlight] = []
    watchouts: list[str] = []

    for sub_question in sub_questions:
        selected = select_sources(profile, sub_question, sources)
        highlight = EngineHighlight(
            sub_question_id=sub_question.id,
            insight=_compose_insight(sub_question, selected),
            confidence=derive_confidence(profile, selected),
            sources=[source.id for source in selected],
        )
        highlights.append(highlight)
        if highlight.confidence is ConfidenceTier.LOW or not highlight.sources:
            watchouts.append(_watchout(sub_question, highlight))

    logger.debug(
        "%s: %d highlights, %d watchouts",
        profile.engine.value,
        len(highlights),
        len(watchouts),
    )
    return EngineAnalysis(
        engine=profile.engine,
        engine_label=profile.label,
        overview=profile.overview,
        highlights=highlights,
        watchouts=watchouts,
    )


def build_engine_analyses(
    sub_questions: Sequence[SubQuestion],
    sources: Sequence[SourceDocument],
    profiles: Sequence[EngineProfile] = ENGINE_PROFILES,
) -> list[EngineAnalysis]:
    """Run every engine profile, in profile order."""
    return [build_engine_analysis(profile, sub_questions, sources) for profile in profiles]
