"""Post-assembly integrity checks for a research response.

A response with a broken id graph cannot be rendered or reasoned about
safely, so any violation fails the whole run with one
``ResearchIntegrityError`` listing every problem found.
"""

from __future__ import annotations

import logging

from research_orchestrator.core.errors.research import ResearchIntegrityError
from research_orchestrator.core.research.models import ResearchResponse

logger = logging.getLogger(__name__)


def _duplicates(values: list[str]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for value in values:
        if value in seen and value not in dupes:
            dupes.append(value)
        seen.add(value)
    return dupes


def find_violations(response: ResearchResponse) -> list[str]:
    """Return a description of every broken invariant in ``response``."""
    violations: list[str] = []

    sub_question_ids = [sq.id for sq in response.sub_questions]
    source_ids = [source.id for source in response.sources]
    known_sub_questions = set(sub_question_ids)
    known_sources = set(source_ids)

    if not sub_question_ids:
        violations.append("run has no sub-questions")
    for dupe in _duplicates(sub_question_ids):
        violations.append(f"duplicate sub-question id {dupe}")
    for dupe in _duplicates(source_ids):
        violations.append(f"duplicate source id {dupe}")
    for dupe in _duplicates([source.url for source in response.sources]):
        violations.append(f"duplicate source url {dupe}")

    for source in response.sources:
        if not 0.0 <= source.relevance <= 1.0:
            violations.append(f"source {source.id} relevance {source.relevance} outside [0, 1]")
        for sq_id in source.sub_question_ids:
            if sq_id not in known_sub_questions:
                violations.append(f"source {source.id} references unknown sub-question {sq_id}")

    engines = [analysis.engine.value for analysis in response.analyses]
    for dupe in _duplicates(engines):
        violations.append(f"duplicate analysis for engine {dupe}")
    for analysis in response.analyses:
        covered = [highlight.sub_question_id for highlight in analysis.highlights]
        if sorted(covered) != sorted(sub_question_ids):
            violations.append(
                f"engine {analysis.engine.value} highlights do not cover each sub-question exactly once"
            )
        for highlight in analysis.highlights:
            if highlight.sub_question_id not in known_sub_questions:
                violations.append(
                    f"engine {analysis.engine.value} highlight references unknown "
                    f"sub-question {highlight.sub_question_id}"
                )
            for source_id in highlight.sources:
                if source_id not in known_sources:
                    violations.append(
                        f"engine {analysis.engine.value} highlight {highlight.sub_question_id} "
                        f"references unknown source {source_id}"
                    )

    report = response.report
    membership: list[str] = []
    for finding in report.key_findings:
        if not finding.sub_question_ids:
            violations.append(f"theme '{finding.theme}' has no member sub-questions")
        membership.extend(finding.sub_question_ids)
        for sq_id in finding.sub_question_ids:
            if sq_id not in known_sub_questions:
                violations.append(f"theme '{finding.theme}' references unknown sub-question {sq_id}")
        for source_id in finding.supporting_sources:
            if source_id not in known_sources:
                violations.append(f"theme '{finding.theme}' references unknown source {source_id}")
        if finding.consensus != (len(finding.dissenting_engines) == 0):
            violations.append(f"theme '{finding.theme}' consensus disagrees with its dissenting engines")
    if report.key_findings and sorted(membership) != sorted(sub_question_ids):
        violations.append("themes do not partition the sub-questions")

    analysed = set(engines)
    for comparison in report.tool_comparison:
        if not 0 <= comparison.coverage_score <= 100:
            violations.append(
                f"engine {comparison.engine.value} coverage {comparison.coverage_score} outside [0, 100]"
            )
        if comparison.engine.value not in analysed:
            violations.append(f"tool comparison for engine {comparison.engine.value} has no analysis")

    return violations


def validate_response(response: ResearchResponse) -> ResearchResponse:
    """Return ``response`` unchanged, or raise if any invariant is broken.

    Raises:
        ResearchIntegrityError: Listing every violation found.
    """
    violations = find_violations(response)
    if violations:
        logger.error("Research response failed %d integrity checks", len(violations))
        raise ResearchIntegrityError(violations, question=response.question)
    return response
