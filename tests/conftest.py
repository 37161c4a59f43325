"""Shared fixtures for the research-orchestrator test suite.

No test talks to the network. Pipeline tests use the in-memory providers
from ``research_fakes``; provider tests patch ``httpx.AsyncClient``.
"""

import pytest

from research_fakes import (
    FIXED_NOW,
    FakeProvider,
    encyclopedia_corpus,
    web_corpus,
)
from research_orchestrator.core.errors.search import SearchProviderError
from research_orchestrator.core.research.models import SourceOrigin


@pytest.fixture
def corpus_providers():
    """A reference-encyclopedia and a web-search provider over a fixed corpus."""
    return [
        FakeProvider("wikipedia", SourceOrigin.REFERENCE_ENCYCLOPEDIA, documents=encyclopedia_corpus),
        FakeProvider("duckduckgo", SourceOrigin.WEB_SEARCH, documents=web_corpus),
    ]


@pytest.fixture
def failing_providers():
    """Two providers that fail every lookup."""
    return [
        FakeProvider(
            "wikipedia",
            SourceOrigin.REFERENCE_ENCYCLOPEDIA,
            error=SearchProviderError("wikipedia", "service unavailable", retryable=True),
        ),
        FakeProvider("duckduckgo", SourceOrigin.WEB_SEARCH, error=ConnectionError("network down")),
    ]


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
