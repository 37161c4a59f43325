"""In-memory search providers and model builders shared by the test suite."""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from research_orchestrator.core.research.models import (
    ConfidenceTier,
    EngineAnalysis,
    EngineHighlight,
    EngineId,
    SourceDocument,
    SourceOrigin,
    SubQuestion,
)
from research_orchestrator.core.research.providers.base import RawDocument, SearchProvider

SCENARIO_QUESTION = (
    "How will open-source AI models reshape enterprise security strategies over the next five years?"
)
FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fake providers
# ---------------------------------------------------------------------------


class FakeProvider(SearchProvider):
    """Provider returning canned documents.

    ``documents`` is either a callable ``query -> documents`` or a mapping
    from query to documents (missing queries return nothing).
    """

    def __init__(
        self,
        name: str = "fake",
        origin: SourceOrigin = SourceOrigin.REFERENCE_ENCYCLOPEDIA,
        documents=None,
        delay: float | Callable[[str], float] = 0.0,
        error: Optional[Exception] = None,
    ):
        self._name = name
        self._origin = origin
        self._documents = documents or {}
        self._delay = delay
        self._error = error
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def get_provider_name(self) -> str:
        return self._name

    @property
    def origin(self) -> SourceOrigin:
        return self._origin

    async def search(self, query: str, max_results: int = 5) -> list[RawDocument]:
        self.calls.append(query)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self._delay(query) if callable(self._delay) else self._delay
            if delay:
                await asyncio.sleep(delay)
            if self._error is not None:
                raise self._error
            if callable(self._documents):
                documents = self._documents(query)
            else:
                documents = self._documents.get(query, [])
            return list(documents)[:max_results]
        finally:
            self.in_flight -= 1


def encyclopedia_corpus(query: str) -> list[RawDocument]:
    """One encyclopedia article per query term."""
    documents = []
    for term in query.split():
        documents.append(
            RawDocument(
                title=term.capitalize(),
                url=f"https://en.wikipedia.org/wiki/{term.capitalize()}",
                body=(
                    f"{term.capitalize()} is a recurring theme in enterprise security planning. "
                    f"Open source models change how {term} strategies are built and audited. "
                    f"Most analysts expect {term} to matter for at least five years."
                ),
            )
        )
    return documents


def web_corpus(query: str) -> list[RawDocument]:
    """One web result per query, heavy on risk language."""
    slug = "_".join(query.split())
    return [
        RawDocument(
            title=f"{query.title()} - Overview",
            url=f"https://duckduckgo.com/{slug}",
            body=(
                f"Security teams weigh {query} against new risks and vulnerabilities. "
                "Open models raise concerns about supply chain attacks and misuse. "
                "Enterprise adoption faces regulatory uncertainty."
            ),
        )
    ]


# ---------------------------------------------------------------------------
# Model builders
# ---------------------------------------------------------------------------


def make_sub_question(
    sq_id: str = "sq-1",
    focus_terms: Iterable[str] = ("solar", "storage"),
    angle: str = "Current state",
) -> SubQuestion:
    terms = list(focus_terms)
    subject = " ".join(terms) or "the topic in question"
    return SubQuestion(
        id=sq_id,
        question=f"What is the current state of {subject}?",
        rationale=f"Baseline for {subject}.",
        focus_terms=terms,
        angle=angle,
    )


def make_source(
    source_id: str,
    relevance: float,
    *,
    sub_question_ids: Iterable[str] = ("sq-1",),
    origin: SourceOrigin = SourceOrigin.REFERENCE_ENCYCLOPEDIA,
    url: Optional[str] = None,
    key_sentences: Iterable[str] = (),
    summary: str = "",
) -> SourceDocument:
    sentences = list(key_sentences) or [f"Key finding reported by {source_id} on the subject."]
    return SourceDocument(
        id=source_id,
        title=f"Title {source_id}",
        url=url or f"https://example.com/{source_id}",
        summary=summary or sentences[0],
        key_sentences=sentences,
        relevance=relevance,
        origin=origin,
        sub_question_ids=list(sub_question_ids),
    )


def make_analysis(
    engine: EngineId,
    label: str,
    tiers: dict[str, ConfidenceTier],
    sources: Optional[dict[str, list[str]]] = None,
) -> EngineAnalysis:
    sources = sources or {}
    return EngineAnalysis(
        engine=engine,
        engine_label=label,
        overview=f"{label} overview.",
        highlights=[
            EngineHighlight(
                sub_question_id=sq_id,
                insight=f"{label} insight on {sq_id}.",
                confidence=tier,
                sources=sources.get(sq_id, ["src-1"] if tier is not ConfidenceTier.LOW else []),
            )
            for sq_id, tier in tiers.items()
        ],
    )
