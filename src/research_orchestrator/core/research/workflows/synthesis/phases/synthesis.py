"""Synthesis phase: aggregate engine analyses into the master report.

Sub-questions are grouped into themes by focus-term overlap, each theme's
highlights are reduced to one finding with a modal confidence tier, and
engines whose own tier is low on a medium or high theme are recorded as
dissenting. Everything here is pure: inputs are never mutated.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from research_orchestrator.core.research.models import (
    ConfidenceTier,
    EngineAnalysis,
    EngineHighlight,
    MasterReport,
    SubQuestion,
    ThemeFinding,
    ToolComparison,
)
from research_orchestrator.core.research.workflows.synthesis.phases.analysis import PROFILES_BY_ENGINE

logger = logging.getLogger(__name__)

#: Minimum Jaccard overlap of focus-term sets for two sub-questions to share a theme.
THEME_OVERLAP_THRESHOLD = 0.5
THEME_NAME_TERMS = 3
THEME_SUMMARY_INSIGHTS = 2
DEFAULT_EXECUTIVE_SUMMARY_SIZE = 3


def jaccard(left: Iterable[str], right: Iterable[str]) -> float:
    """Jaccard overlap of two term collections; 0.0 when either is empty."""
    a, b = set(left), set(right)
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def cluster_themes(
    sub_questions: Sequence[SubQuestion],
    threshold: float = THEME_OVERLAP_THRESHOLD,
) -> list[list[SubQuestion]]:
    """Group sub-questions whose focus terms overlap by at least ``threshold``.

    Union-find over every pair, so overlap is transitive. Clusters are
    ordered by their first member and members keep sub-question order.
    """
    parent = list(range(len(sub_questions)))

    def find(index: int) -> int:
        while parent[index] != index:
            parent[index] = parent[parent[index]]
            index = parent[index]
        return index

    for i in range(len(sub_questions)):
        for j in range(i + 1, len(sub_questions)):
            if jaccard(sub_questions[i].focus_terms, sub_questions[j].focus_terms) >= threshold:
                root_i, root_j = find(i), find(j)
                if root_i != root_j:
                    parent[max(root_i, root_j)] = min(root_i, root_j)

    clusters: dict[int, list[SubQuestion]] = {}
    for index, sub_question in enumerate(sub_questions):
        clusters.setdefault(find(index), []).append(sub_question)
    return list(clusters.values())


def modal_tier(tiers: Iterable[ConfidenceTier]) -> ConfidenceTier:
    """Most common tier, ties broken toward the higher tier. LOW if empty."""
    counts = Counter(tiers)
    if not counts:
        return ConfidenceTier.LOW
    return max(counts, key=lambda tier: (counts[tier], tier.rank))


def theme_name(members: Sequence[SubQuestion]) -> str:
    """Angles joined with " & ", followed by up to three focus terms."""
    angles = " & ".join(dict.fromkeys(member.angle or member.id for member in members))
    terms = list(dict.fromkeys(term for member in members for term in member.focus_terms))
    if not terms:
        return angles
    return f"{angles}: {', '.join(terms[:THEME_NAME_TERMS])}"


@dataclass
class _Theme:
    finding: ThemeFinding
    engine_tiers: dict[str, ConfidenceTier]
    index: int


def _member_highlights(analysis: EngineAnalysis, members: Sequence[SubQuestion]) -> list[EngineHighlight]:
    highlights = []
    for member in members:
        highlight = analysis.highlight_for(member.id)
        if highlight is not None:
            highlights.append(highlight)
    return highlights


def _build_theme(
    index: int,
    members: Sequence[SubQuestion],
    analyses: Sequence[EngineAnalysis],
) -> _Theme:
    contributing: list[EngineHighlight] = []
    engine_tiers: dict[str, ConfidenceTier] = {}
    insights: list[str] = []
    supporting: list[str] = []

    for analysis in analyses:
        highlights = _member_highlights(analysis, members)
        if not highlights:
            continue
        contributing.extend(highlights)
        engine_tiers[analysis.engine.value] = modal_tier(h.confidence for h in highlights)
        for highlight in highlights:
            if highlight.insight and highlight.insight not in insights:
                insights.append(highlight.insight)
            for source_id in highlight.sources:
                if source_id not in supporting:
                    supporting.append(source_id)

    confidence = modal_tier(h.confidence for h in contributing)
    dissenting: list[str] = []
    if confidence is not ConfidenceTier.LOW:
        dissenting = [
            analysis.engine_label
            for analysis in analyses
            if engine_tiers.get(analysis.engine.value) is ConfidenceTier.LOW
        ]

    finding = ThemeFinding(
        theme=theme_name(members),
        summary=" ".join(insights[:THEME_SUMMARY_INSIGHTS]),
        confidence=confidence,
        supporting_sources=supporting,
        dissenting_engines=dissenting,
        sub_question_ids=[member.id for member in members],
    )
    return _Theme(finding=finding, engine_tiers=engine_tiers, index=index)


def coverage_score(analysis: EngineAnalysis, sub_question_count: int) -> int:
    """Percentage of sub-questions answered with sources and non-low confidence."""
    if sub_question_count <= 0:
        return 0
    covered = sum(
        1
        for highlight in analysis.highlights
        if highlight.sources and highlight.confidence is not ConfidenceTier.LOW
    )
    return min(max(round(100 * covered / sub_question_count), 0), 100)


def _tool_comparison(
    analysis: EngineAnalysis,
    themes: Sequence[_Theme],
    sub_question_count: int,
) -> ToolComparison:
    strengths: list[str] = []
    blindspots: list[str] = []
    for theme in themes:
        tier = theme.engine_tiers.get(analysis.engine.value)
        if tier is ConfidenceTier.HIGH:
            strengths.append(f"High-confidence coverage of {theme.finding.theme}")
        elif tier is ConfidenceTier.LOW:
            blindspots.append(f"Weak evidence on {theme.finding.theme}")

    profile = PROFILES_BY_ENGINE.get(analysis.engine)
    strength = profile.strength if profile else analysis.overview.rstrip(".").lower()
    return ToolComparison(
        engine=analysis.engine,
        engine_label=analysis.engine_label,
        strengths=strengths,
        blindspots=blindspots,
        best_for=f"Best for {strength}.",
        coverage_score=coverage_score(analysis, sub_question_count),
    )


def _rank_key(theme: _Theme) -> tuple[int, int, int]:
    finding = theme.finding
    return (-finding.confidence.rank, -len(finding.supporting_sources), theme.index)


def build_master_report(
    sub_questions: Sequence[SubQuestion],
    analyses: Sequence[EngineAnalysis],
    executive_summary_size: Optional[int] = None,
) -> MasterReport:
    """Aggregate the engine analyses into a MasterReport.

    Args:
        sub_questions: Sub-questions in planning order.
        analyses: One analysis per engine, in engine order.
        executive_summary_size: Number of themes summarized up front.

    Returns:
        The master report. With no evidence at all every theme is low
        confidence and a global risk is added.
    """
    size = executive_summary_size or DEFAULT_EXECUTIVE_SUMMARY_SIZE
    themes = [
        _build_theme(index, members, analyses)
        for index, members in enumerate(cluster_themes(sub_questions))
    ]
    findings = [theme.finding for theme in themes]
    engine_count = len(analyses)

    executive_summary = [
        f"{theme.finding.theme} ({theme.finding.confidence.value} confidence): {theme.finding.summary}"
        for theme in sorted(themes, key=_rank_key)[:size]
    ]

    consensus_signals = [
        f"All {engine_count} engines agree on {finding.theme} at {finding.confidence.value} confidence."
        for finding in findings
        if finding.consensus and finding.confidence is not ConfidenceTier.LOW
    ]
    conflict_signals = [
        f"{', '.join(finding.dissenting_engines)} rated {finding.theme} low against a "
        f"{finding.confidence.value}-confidence majority."
        for finding in findings
        if not finding.consensus
    ]

    risks: list[str] = []
    has_evidence = any(highlight.sources for analysis in analyses for highlight in analysis.highlights)
    if not has_evidence:
        risks.append("No reference evidence could be gathered; every finding in this report is unverified.")
    for finding in findings:
        if finding.confidence is ConfidenceTier.LOW:
            risks.append(f"Evidence for {finding.theme} is thin; treat conclusions there as provisional.")
        elif finding.dissenting_engines:
            risks.append(
                f"Engines disagree on {finding.theme}: {', '.join(finding.dissenting_engines)} "
                "found only weak support."
            )

    recommendations = [
        f"Act on {finding.theme}: {len(finding.supporting_sources)} sources back it "
        f"and all {engine_count} engines agree with high confidence."
        for finding in findings
        if finding.consensus and finding.confidence is ConfidenceTier.HIGH
    ]

    logger.info(
        "Report built: %d themes, %d consensus, %d conflict, %d risks",
        len(findings),
        len(consensus_signals),
        len(conflict_signals),
        len(risks),
    )
    return MasterReport(
        executive_summary=executive_summary,
        key_findings=findings,
        tool_comparison=[_tool_comparison(analysis, themes, len(sub_questions)) for analysis in analyses],
        consensus_signals=consensus_signals,
        conflict_signals=conflict_signals,
        risks=risks,
        recommendations=recommendations,
    )
