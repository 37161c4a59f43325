"""Abstract base class for search providers.

This module defines the SearchProvider interface that every reference
provider implements. The evidence gatherer only ever talks to providers
through this interface, which keeps the network layer swappable and lets
tests inject canned documents.

Example usage:
    class WikipediaSearchProvider(SearchProvider):
        def get_provider_name(self) -> str:
            return "wikipedia"

        @property
        def origin(self) -> SourceOrigin:
            return SourceOrigin.REFERENCE_ENCYCLOPEDIA

        async def search(self, query: str, max_results: int = 5) -> list[RawDocument]:
            ...
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from research_orchestrator.core.research.models.enums import SourceOrigin


@dataclass(frozen=True)
class RawDocument:
    """Unscored document returned by a provider.

    Attributes:
        title: Title or headline of the result
        url: Canonical URL of the result (dedup key downstream)
        body: Plain-text body used for scoring and sentence extraction
    """

    title: str
    url: str
    body: str


class SearchProvider(ABC):
    """Abstract base class for search providers.

    Subclasses should:
    - Implement get_provider_name() to return a unique identifier
    - Implement origin to declare which kind of reference they query
    - Implement search() to execute queries against the provider
    - Optionally override health_check()

    Calls are independently failable: implementations raise
    ``SearchProviderError`` (or any exception) and the gatherer treats the
    call as contributing no documents.
    """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the unique identifier for this provider.

        Returns:
            Provider name (e.g., "wikipedia", "duckduckgo")
        """
        ...

    @property
    @abstractmethod
    def origin(self) -> SourceOrigin:
        """Return the origin recorded on documents from this provider."""
        ...

    @abstractmethod
    async def search(
        self,
        query: str,
        max_results: int = 5,
    ) -> list[RawDocument]:
        """Execute a search query and return raw documents.

        Args:
            query: The search query string
            max_results: Maximum number of documents to return

        Returns:
            List of RawDocument objects, possibly empty

        Raises:
            SearchProviderError: If the search fails after retries
        """
        ...

    async def health_check(self) -> bool:
        """Check if the provider is available.

        Default implementation returns True.
        """
        return True
