"""Wikipedia search provider (reference encyclopedia).

Wraps the MediaWiki Action API: a full-text ``generator=search`` combined
with ``prop=extracts|info`` returns matching pages together with their
plain-text introduction and canonical URL in a single request.

MediaWiki API documentation: https://www.mediawiki.org/wiki/API:Search

Example usage:
    provider = WikipediaSearchProvider()
    documents = await provider.search("enterprise security open source", max_results=5)
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

from research_orchestrator.core.research.models.enums import SourceOrigin
from research_orchestrator.core.research.providers.base import RawDocument, SearchProvider
from research_orchestrator.core.research.providers.retry import SleepFunc
from research_orchestrator.core.research.providers.shared import fetch_json
from research_orchestrator.core.research.text import normalize_text

logger = logging.getLogger(__name__)

WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"
WIKIPEDIA_PAGE_URL = "https://en.wikipedia.org/wiki/"
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 1
# exlimit caps intro extracts per request
MAX_EXTRACTS_PER_REQUEST = 20


class WikipediaSearchProvider(SearchProvider):
    """MediaWiki search provider returning article introductions.

    Attributes:
        base_url: MediaWiki API endpoint
        timeout: Request timeout in seconds
        max_retries: Retry attempts for transient failures
        user_agent: User-Agent header (Wikimedia requires a descriptive one)
    """

    def __init__(
        self,
        base_url: str = WIKIPEDIA_API_URL,
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
        return "wikipedia"

    @property
    def origin(self) -> SourceOrigin:
        return SourceOrigin.REFERENCE_ENCYCLOPEDIA

    async def search(
        self,
        query: str,
        max_results: int = 5,
    ) -> list[RawDocument]:
        """Search Wikipedia and return article introductions.

        Args:
            query: Full-text search query
            max_results: Maximum number of articles (capped at 20)

        Returns:
            Documents ordered by search rank; pages without an extract are
            skipped.

        Raises:
            RateLimitError: If rate limited after all retries
            SearchProviderError: For other API errors
        """
        if not query.strip():
            return []

        limit = max(1, min(max_results, MAX_EXTRACTS_PER_REQUEST))
        params: dict[str, Any] = {
            "action": "query",
            "format": "json",
            "formatversion": "2",
            "generator": "search",
            "gsrsearch": query,
            "gsrlimit": limit,
            "prop": "extracts|info",
            "exintro": "1",
            "explaintext": "1",
            "exlimit": limit,
            "inprop": "url",
            "redirects": "1",
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
        return self._parse_response(data)[:limit]

    def _parse_response(self, data: Any) -> list[RawDocument]:
        if not isinstance(data, dict):
            return []
        pages = (data.get("query") or {}).get("pages") or []
        if isinstance(pages, dict):
            # formatversion=1 keys pages by id
            pages = list(pages.values())

        ranked = sorted(
            (page for page in pages if isinstance(page, dict)),
            key=lambda page: page.get("index", 0),
        )
        documents: list[RawDocument] = []
        for page in ranked:
            title = str(page.get("title") or "").strip()
            body = normalize_text(page.get("extract"))
            if not title or not body:
                continue
            url = page.get("fullurl") or f"{WIKIPEDIA_PAGE_URL}{quote(title.replace(' ', '_'))}"
            documents.append(RawDocument(title=title, url=str(url), body=body))

        logger.debug("Wikipedia returned %d usable pages", len(documents))
        return documents
