"""Reference search providers for the gathering phase.

Supported providers:
- WikipediaSearchProvider: reference encyclopedia via the MediaWiki API
- DuckDuckGoSearchProvider: web search via the DuckDuckGo Instant Answer API
"""

from typing import Optional

from research_orchestrator.config.research import ResearchConfig
from research_orchestrator.core.errors.search import RateLimitError, SearchProviderError
from research_orchestrator.core.research.providers.base import RawDocument, SearchProvider
from research_orchestrator.core.research.providers.duckduckgo import DuckDuckGoSearchProvider
from research_orchestrator.core.research.providers.retry import async_retry_with_backoff
from research_orchestrator.core.research.providers.wikipedia import WikipediaSearchProvider

_PROVIDER_CLASSES = {
    "wikipedia": WikipediaSearchProvider,
    "duckduckgo": DuckDuckGoSearchProvider,
}


def create_provider(name: str, config: Optional[ResearchConfig] = None) -> SearchProvider:
    """Instantiate a provider by name using ``config`` for endpoints and timeouts.

    Raises:
        ValueError: If ``name`` is not a known provider.
    """
    config = config or ResearchConfig()
    key = name.strip().lower()
    if key not in _PROVIDER_CLASSES:
        raise ValueError(f"Unknown search provider: {name!r}. Must be one of: {sorted(_PROVIDER_CLASSES)}")
    base_url = config.wikipedia_base_url if key == "wikipedia" else config.duckduckgo_base_url
    return _PROVIDER_CLASSES[key](
        base_url=base_url,
        timeout=config.provider_timeout,
        max_retries=config.max_retries,
        user_agent=config.user_agent,
    )


def create_providers(config: Optional[ResearchConfig] = None) -> list[SearchProvider]:
    """Instantiate every provider named in ``config.providers``, in order."""
    config = config or ResearchConfig()
    return [create_provider(name, config) for name in config.providers]


__all__ = [
    # Abstract base
    "SearchProvider",
    "RawDocument",
    # Concrete providers
    "WikipediaSearchProvider",
    "DuckDuckGoSearchProvider",
    "create_provider",
    "create_providers",
    # Errors
    "SearchProviderError",
    "RateLimitError",
    # Resilience
    "async_retry_with_backoff",
]
