"""Synthesis workflow: question in, validated ResearchResponse out.

Runs the linear pipeline

    planning -> gathering -> analysis -> synthesis -> integrity check

Only gathering suspends (on provider I/O); every other phase is pure
computation. Provider failures degrade confidence and never fail a run;
only an integrity violation does.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from research_orchestrator.config.research import ResearchConfig
from research_orchestrator.core.observability import audit_log, correlation_scope
from research_orchestrator.core.research.models import ResearchResponse
from research_orchestrator.core.research.providers import SearchProvider, create_providers
from research_orchestrator.core.research.workflows.synthesis.integrity import validate_response
from research_orchestrator.core.research.workflows.synthesis.phases.analysis import (
    build_engine_analyses,
)
from research_orchestrator.core.research.workflows.synthesis.phases.gathering import (
    GatheringStats,
    gather_evidence,
)
from research_orchestrator.core.research.workflows.synthesis.phases.planning import (
    generate_sub_questions,
)
from research_orchestrator.core.research.workflows.synthesis.phases.synthesis import (
    build_master_report,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ResearchRun:
    """Outcome of one run: the validated response and its gathering stats."""

    response: ResearchResponse
    stats: GatheringStats


class SynthesisWorkflow:
    """Multi-engine research synthesis over public reference sources.

    Attributes:
        config: Research configuration
        providers: Search providers queried for every sub-question
    """

    def __init__(
        self,
        config: Optional[ResearchConfig] = None,
        providers: Optional[Sequence[SearchProvider]] = None,
        clock: Optional[Clock] = None,
    ):
        self.config = config or ResearchConfig()
        self.providers: list[SearchProvider] = (
            list(providers) if providers is not None else create_providers(self.config)
        )
        self._clock = clock or _utc_now

    async def run(self, question: Optional[str]) -> ResearchResponse:
        """Run the full pipeline for one question and return its response."""
        return (await self.run_with_stats(question)).response

    async def run_with_stats(self, question: Optional[str]) -> ResearchRun:
        """Run the full pipeline for one question, keeping its gathering stats.

        Short or empty questions are not rejected here; they yield generic
        sub-questions and whatever evidence the providers return.

        Raises:
            ResearchIntegrityError: If the assembled response breaks an
                internal invariant. No partial response is returned.
        """
        text = (question or "").strip()
        run_id = f"run-{uuid.uuid4().hex[:12]}"
        start = time.perf_counter()

        with correlation_scope(run_id):
            audit_log(
                "research_run_started",
                question=text,
                providers=[provider.get_provider_name() for provider in self.providers],
            )
            try:
                run = await self._execute(text)
            except Exception as exc:
                audit_log(
                    "research_run_failed",
                    level="error",
                    question=text,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                raise

            response = run.response
            duration_ms = (time.perf_counter() - start) * 1000
            audit_log(
                "research_run_completed",
                question=text,
                sub_questions=len(response.sub_questions),
                sources=len(response.sources),
                themes=len(response.report.key_findings),
                duration_ms=round(duration_ms, 1),
            )
            logger.info(
                "Research run %s completed in %.0fms with %d sources",
                run_id,
                duration_ms,
                len(response.sources),
            )
            return run

    async def _execute(self, question: str) -> ResearchRun:
        sub_questions = generate_sub_questions(question)
        gathered = await gather_evidence(question, sub_questions, self.providers, self.config)
        analyses = build_engine_analyses(sub_questions, gathered.sources)
        report = build_master_report(
            sub_questions,
            analyses,
            executive_summary_size=self.config.executive_summary_size,
        )
        response = ResearchResponse(
            question=question,
            generated_at=format_timestamp(self._clock()),
            sub_questions=sub_questions,
            sources=gathered.sources,
            analyses=analyses,
            report=report,
        )
        return ResearchRun(response=validate_response(response), stats=gathered.stats)


async def run_research_async(
    question: Optional[str],
    config: Optional[ResearchConfig] = None,
    providers: Optional[Sequence[SearchProvider]] = None,
    clock: Optional[Clock] = None,
) -> ResearchResponse:
    """Run one research question through a fresh SynthesisWorkflow."""
    workflow = SynthesisWorkflow(config=config, providers=providers, clock=clock)
    return await workflow.run(question)


def run_research(
    question: Optional[str],
    config: Optional[ResearchConfig] = None,
    providers: Optional[Sequence[SearchProvider]] = None,
    clock: Optional[Clock] = None,
) -> ResearchResponse:
    """Synchronous wrapper around ``run_research_async``.

    Must not be called from inside a running event loop.
    """
    return asyncio.run(run_research_async(question, config=config, providers=providers, clock=clock))
