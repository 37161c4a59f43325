"""DuckDuckGo Instant Answer provider (web search).

The Instant Answer API returns a topic abstract plus a list of related
topics, some of which are nested in named groups. Each abstract or topic
with a URL and text becomes one raw document.

API documentation: https://duckduckgo.com/api
"""

import logging
from typing import Any, Iterator, Optional

from research_orchestrator.core.research.models.enums import SourceOrigin
from research_orchestrator.core.research.providers.base import RawDocument, SearchProvider
from research_orchestrator.core.research.providers.retry import SleepFunc
from research_orchestrator.core.research.providers.shared import fetch_json
from research_orchestrator.core.research.text import normalize_text, truncate

logger = logging.getLogger(__name__)

DUCKDUCKGO_API_URL = "https://api.duckduckgo.com/"
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 1
_TITLE_MAX_CHARS = 90


def _iter_topics(topics: Any) -> Iterator[dict[str, Any]]:
    """Flatten RelatedTopics, descending into ``{"Name", "Topics"}`` groups."""
    if not isinstance(topics, list):
        return
    for topic in topics:
        if not isinstance(topic, dict):
            continue
        if "Topics" in topic:
            yield from _iter_topics(topic.get("Topics"))
        else:
            yield topic


def _topic_title(text: str) -> str:
    head = text.split(" - ", 1)[0].strip()
    return truncate(head or text, _TITLE_MAX_CHARS)


class DuckDuckGoSearchProvider(SearchProvider):
    """DuckDuckGo Instant Answer provider.

    Attributes:
        base_url: Instant Answer API endpoint
        timeout: Request timeout in seconds
        max_retries: Retry attempts for transient failures
        user_agent: User-Agent header
    """

    def __init__(
        self,
        base_url: str = DUCKDUCKGO_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        user_agent: Optional[str] = None,
        sleep_func: Optional[SleepFunc] = None,
    ):
        self._base_url = base_url
        self._timeout = timeout
        self._max_retries = max_retries
        self._user_agent = user_agent
        self._sleep_func = sleep_func

    def get_provider_name(self) -> str:
        return "duckduckgo"

    @property
    def origin(self) -> SourceOrigin:
        return SourceOrigin.WEB_SEARCH

    async def search(
        self,
        query: str,
        max_results: int = 5,
    ) -> list[RawDocument]:
        """Query the Instant Answer API.

        Args:
            query: Search query
            max_results: Maximum number of documents to return

        Returns:
            The abstract (when present) followed by related topics.

        Raises:
            RateLimitError: If rate limited after all retries
            SearchProviderError: For other API errors
        """
        if not query.strip():
            return []

        params = {
            "q": query,
            "format": "json",
            "no_html": "1",
            "no_redirect": "1",
            "skip_disambig": "1",
            "t": "research-orchestrator",
        }
        headers = {"User-Agent": self._user_agent} if self._user_agent else None

        data = await fetch_json(
            self.get_provider_name(),
            self._base_url,
            params,
            headers=headers,
            timeout=self._timeout,
            max_retries=self._max_retries,
            sleep_func=self._sleep_func,
        )
        return self._parse_response(data)[: max(max_results, 0)]

    def _parse_response(self, data: Any) -> list[RawDocument]:
        if not isinstance(data, dict):
            return []

        documents: list[RawDocument] = []
        abstract = normalize_text(data.get("AbstractText"))
        abstract_url = data.get("AbstractURL")
        if abstract and abstract_url:
            title = normalize_text(data.get("Heading")) or _topic_title(abstract)
            documents.append(RawDocument(title=title, url=str(abstract_url), body=abstract))

        for topic in _iter_topics(data.get("RelatedTopics")):
            text = normalize_text(topic.get("Text"))
            url = topic.get("FirstURL")
            if not text or not url:
                continue
            documents.append(RawDocument(title=_topic_title(text), url=str(url), body=text))

        logger.debug("DuckDuckGo returned %d usable documents", len(documents))
        return documents
