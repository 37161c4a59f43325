"""Gathering phase: fan provider lookups out and score the evidence.

One lookup is issued per (sub-question, provider) pair. Lookups run
concurrently under a semaphore, each bounded by the provider timeout, and
the whole stage is bounded by the gathering budget. Every lookup writes
only its own slot; slots are merged after the barrier in sub-question
order then provider order, so the resulting evidence never depends on
which lookup finished first.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from research_orchestrator.config.research import ResearchConfig
from research_orchestrator.core.errors.search import SearchProviderError
from research_orchestrator.core.observability import audit_log
from research_orchestrator.core.research.models import SourceDocument, SourceOrigin, SubQuestion
from research_orchestrator.core.research.providers.base import RawDocument, SearchProvider
from research_orchestrator.core.research.providers.shared import extract_domain, normalize_url
from research_orchestrator.core.research.text import (
    extract_terms,
    normalize_text,
    rank_sentences,
    split_sentences,
    term_set,
    truncate,
)

logger = logging.getLogger(__name__)

#: Leading sentences of a document body kept as its summary.
SUMMARY_SENTENCES = 2
SUMMARY_MAX_CHARS = 320
KEY_SENTENCE_MAX_CHARS = 280
SOURCE_ID_PREFIX = "src-"


@dataclass
class _LookupSlot:
    """Result slot owned by exactly one lookup."""

    sub_question: SubQuestion
    provider: SearchProvider
    query: str
    status: str = "pending"
    documents: list[RawDocument] = field(default_factory=list)
    error: Optional[str] = None
    duration_ms: float = 0.0


@dataclass
class _Candidate:
    order: int
    source_id: str
    title: str
    url: str
    summary: str
    key_sentences: list[str]
    relevance: float
    origin: SourceOrigin
    sub_question_ids: list[str]

    def to_source(self) -> SourceDocument:
        return SourceDocument(
            id=self.source_id,
            title=self.title,
            url=self.url,
            summary=self.summary,
            key_sentences=self.key_sentences,
            relevance=self.relevance,
            origin=self.origin,
            sub_question_ids=self.sub_question_ids,
        )


@dataclass
class GatheringStats:
    """Outcome counters for one gathering stage."""

    lookups: int = 0
    succeeded: int = 0
    failed: int = 0
    timed_out: int = 0
    abandoned: int = 0
    skipped: int = 0
    raw_documents: int = 0
    unique_sources: int = 0
    duration_ms: float = 0.0
    errors: list[str] = field(default_factory=list)

    @property
    def unsuccessful(self) -> int:
        return self.failed + self.timed_out + self.abandoned

    def to_dict(self) -> dict[str, Any]:
        return {
            "lookups": self.lookups,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "timed_out": self.timed_out,
            "abandoned": self.abandoned,
            "skipped": self.skipped,
            "raw_documents": self.raw_documents,
            "unique_sources": self.unique_sources,
            "duration_ms": round(self.duration_ms, 1),
            "errors": list(self.errors),
        }


@dataclass
class GatheringResult:
    """Ranked evidence set plus the stats of the stage that produced it."""

    sources: list[SourceDocument]
    stats: GatheringStats


def build_query(sub_question: SubQuestion, question: Optional[str]) -> str:
    """Return the lookup query for a sub-question.

    Focus terms joined by spaces; the root question itself when the
    sub-question has none.
    """
    if sub_question.focus_terms:
        return " ".join(sub_question.focus_terms)
    return normalize_text(question)


def score_relevance(body: str, target_terms: set[str]) -> float:
    """Fraction of ``target_terms`` present in ``body``, in [0, 1]."""
    if not target_terms:
        return 0.0
    overlap = len(term_set(body) & target_terms) / len(target_terms)
    return round(min(max(overlap, 0.0), 1.0), 3)


def source_id_for(url: str) -> str:
    """Stable source id derived from the normalized URL."""
    digest = hashlib.sha1(normalize_url(url).encode("utf-8")).hexdigest()
    return f"{SOURCE_ID_PREFIX}{digest[:10]}"


def _summarize(body: str) -> str:
    sentences = split_sentences(body)
    if not sentences:
        return truncate(body, SUMMARY_MAX_CHARS)
    return truncate(" ".join(sentences[:SUMMARY_SENTENCES]), SUMMARY_MAX_CHARS)


def _key_sentences(body: str, terms: list[str], limit: int) -> list[str]:
    ranked = rank_sentences(body, terms, limit=limit)
    if not ranked:
        # Bodies made only of short fragments still cite something.
        ranked = [body]
    return [truncate(sentence, KEY_SENTENCE_MAX_CHARS) for sentence in ranked]


async def _run_lookup(
    slot: _LookupSlot,
    semaphore: asyncio.Semaphore,
    max_results: int,
    timeout: float,
) -> None:
    async with semaphore:
        start = time.perf_counter()
        try:
            slot.documents = list(
                await asyncio.wait_for(
                    slot.provider.search(slot.query, max_results=max_results),
                    timeout=timeout,
                )
            )
            slot.status = "ok"
        except asyncio.TimeoutError:
            slot.status = "timeout"
            slot.error = f"timed out after {timeout:.1f}s"
        except SearchProviderError as exc:
            slot.status = "error"
            slot.error = str(exc)
        except Exception as exc:
            slot.status = "error"
            slot.error = f"{type(exc).__name__}: {exc}"
        finally:
            slot.duration_ms = (time.perf_counter() - start) * 1000


async def _execute_lookups(slots: list[_LookupSlot], config: ResearchConfig) -> None:
    semaphore = asyncio.Semaphore(config.max_concurrent)
    tasks = [
        asyncio.create_task(
            _run_lookup(slot, semaphore, config.max_results_per_query, config.provider_timeout)
        )
        for slot in slots
        if slot.query
    ]
    if not tasks:
        return

    _, pending = await asyncio.wait(tasks, timeout=config.gathering_budget)
    if pending:
        logger.warning(
            "Gathering budget of %.1fs exhausted; abandoning %d pending lookups",
            config.gathering_budget,
            len(pending),
        )
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)


def _merge_slots(
    slots: list[_LookupSlot],
    question_terms: list[str],
    stats: GatheringStats,
    key_sentence_count: int,
) -> list[SourceDocument]:
    candidates: dict[str, _Candidate] = {}

    for slot in slots:
        sub_question = slot.sub_question
        provider_name = slot.provider.get_provider_name()

        if not slot.query:
            slot.status = "skipped"
        elif slot.status == "pending":
            slot.status = "abandoned"
            slot.error = "abandoned at gathering budget"

        if slot.status == "ok":
            stats.succeeded += 1
        elif slot.status == "timeout":
            stats.timed_out += 1
        elif slot.status == "abandoned":
            stats.abandoned += 1
        elif slot.status == "skipped":
            stats.skipped += 1
        else:
            stats.failed += 1
        if slot.error:
            stats.errors.append(f"{provider_name}/{sub_question.id}: {slot.error}")
            logger.warning(
                "Lookup %s/%s failed (%s): %s",
                provider_name,
                sub_question.id,
                slot.status,
                slot.error,
            )

        audit_log(
            "gathering_provider_result",
            provider=provider_name,
            sub_question_id=sub_question.id,
            query=slot.query,
            status=slot.status,
            documents=len(slot.documents),
            duration_ms=round(slot.duration_ms, 1),
            error=slot.error,
        )

        target_order = list(dict.fromkeys([*sub_question.focus_terms, *question_terms]))
        target = set(target_order)
        for raw in slot.documents:
            stats.raw_documents += 1
            body = normalize_text(raw.body)
            url = (raw.url or "").strip()
            if not url or not body:
                continue

            key = normalize_url(url)
            relevance = score_relevance(body, target)
            existing = candidates.get(key)
            if existing is not None:
                existing.relevance = max(existing.relevance, relevance)
                if sub_question.id not in existing.sub_question_ids:
                    existing.sub_question_ids.append(sub_question.id)
                continue

            candidates[key] = _Candidate(
                order=len(candidates),
                source_id=source_id_for(url),
                title=normalize_text(raw.title) or extract_domain(url) or url,
                url=url,
                summary=_summarize(body),
                key_sentences=_key_sentences(body, target_order, key_sentence_count),
                relevance=relevance,
                origin=slot.provider.origin,
                sub_question_ids=[sub_question.id],
            )

    ranked = sorted(candidates.values(), key=lambda c: (-c.relevance, c.order))
    return [candidate.to_source() for candidate in ranked]


async def gather_evidence(
    question: Optional[str],
    sub_questions: Sequence[SubQuestion],
    providers: Sequence[SearchProvider],
    config: Optional[ResearchConfig] = None,
) -> GatheringResult:
    """Collect, deduplicate and rank evidence for every sub-question.

    Provider failures, timeouts and lookups abandoned at the gathering
    budget are logged and counted in the returned stats; they never raise.
    When every lookup fails the evidence set is simply empty.

    Args:
        question: Root question; its salient terms join each relevance target.
        sub_questions: Sub-questions in planning order.
        providers: Providers in lookup order.
        config: Timeouts, budget and concurrency (defaults if None).

    Returns:
        GatheringResult with sources ordered by relevance descending, ties
        by first-seen order.
    """
    config = config or ResearchConfig()
    start = time.perf_counter()
    question_terms = extract_terms(question)

    slots = [
        _LookupSlot(
            sub_question=sub_question,
            provider=provider,
            query=build_query(sub_question, question),
        )
        for sub_question in sub_questions
        for provider in providers
    ]
    stats = GatheringStats(lookups=len(slots))

    await _execute_lookups(slots, config)
    sources = _merge_slots(slots, question_terms, stats, config.key_sentence_count)

    stats.unique_sources = len(sources)
    stats.duration_ms = (time.perf_counter() - start) * 1000

    if slots and stats.succeeded == 0:
        logger.warning("All %d provider lookups failed; continuing with empty evidence", len(slots))
    logger.info(
        "Gathering complete: %d lookups, %d succeeded, %d unique sources",
        stats.lookups,
        stats.succeeded,
        stats.unique_sources,
    )
    audit_log(
        "gathering_result",
        level="warning" if stats.unsuccessful else "info",
        **stats.to_dict(),
    )
    return GatheringResult(sources=sources, stats=stats)
