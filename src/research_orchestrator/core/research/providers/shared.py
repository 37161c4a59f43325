"""Shared utilities for HTTP-backed reference providers.

Extracts the request/response boilerplate common to the Wikipedia and
DuckDuckGo providers:

    Pure parsing helpers:
        - parse_retry_after(response) -> Optional[float]
        - extract_error_message(response) -> str
        - extract_domain(url) -> Optional[str]
        - normalize_url(url) -> str

    Request execution:
        - fetch_json(provider_name, url, params, ...) -> dict
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlparse, urlunparse

import httpx

from research_orchestrator.core.errors.search import RateLimitError, SearchProviderError
from research_orchestrator.core.research.providers.retry import (
    SleepFunc,
    async_retry_with_backoff,
)

logger = logging.getLogger(__name__)

_MAX_ERROR_MESSAGE_CHARS = 200


def parse_retry_after(response: httpx.Response) -> Optional[float]:
    """Parse a numeric Retry-After header (seconds), if present."""
    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except (TypeError, ValueError):
        return None


def extract_error_message(response: httpx.Response) -> str:
    """Extract a short error message from an HTTP error response.

    Tries the standard ``{"error": ...}`` / ``{"message": ...}`` JSON
    shapes, including MediaWiki's ``{"error": {"info": ...}}``, and falls
    back to the truncated body text.
    """
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            message = error.get("info") or error.get("message")
            if message:
                return str(message)[:_MAX_ERROR_MESSAGE_CHARS]
        elif error:
            return str(error)[:_MAX_ERROR_MESSAGE_CHARS]
        if data.get("message"):
            return str(data["message"])[:_MAX_ERROR_MESSAGE_CHARS]

    text = (response.text or "").strip()
    return text[:_MAX_ERROR_MESSAGE_CHARS] or f"HTTP {response.status_code}"


def extract_domain(url: str) -> Optional[str]:
    """Extract the network location (domain) from a URL.

    Returns:
        The ``netloc`` component (e.g. ``"example.com"``), or ``None``
        if the URL is empty or unparseable.
    """
    if not url:
        return None
    try:
        parsed = urlparse(url)
        return parsed.netloc or None
    except ValueError:
        return None


def normalize_url(url: str) -> str:
    """Normalize a URL for deduplication.

    Lower-cases scheme and host, drops the fragment and any trailing slash
    on the path. Unparseable input is returned stripped.
    """
    stripped = (url or "").strip()
    try:
        parsed = urlparse(stripped)
    except ValueError:
        return stripped
    if not parsed.scheme or not parsed.netloc:
        return stripped
    path = parsed.path.rstrip("/")
    return urlunparse(
        (parsed.scheme.lower(), parsed.netloc.lower(), path, parsed.params, parsed.query, "")
    )


def _is_retryable(error: Exception) -> bool:
    return isinstance(error, SearchProviderError) and error.retryable


async def fetch_json(
    provider_name: str,
    url: str,
    params: dict[str, Any],
    *,
    headers: Optional[dict[str, str]] = None,
    timeout: float = 10.0,
    max_retries: int = 1,
    sleep_func: Optional[SleepFunc] = None,
) -> Any:
    """GET ``url`` and decode the JSON body, retrying transient failures.

    A new ``httpx.AsyncClient`` is opened per attempt so no connection
    outlives the request.

    Raises:
        RateLimitError: On HTTP 429 after all retries.
        SearchProviderError: On other HTTP errors, transport failures or an
            undecodable body.
    """

    async def make_request() -> Any:
        try:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
                response = await client.get(url, params=params, headers=headers or {})
        except httpx.TimeoutException as e:
            raise SearchProviderError(
                provider=provider_name,
                message=f"Request timed out after {timeout}s",
                retryable=True,
                original_error=e,
            ) from e
        except httpx.RequestError as e:
            raise SearchProviderError(
                provider=provider_name,
                message=f"Request failed: {e}",
                retryable=True,
                original_error=e,
            ) from e

        if response.status_code == 429:
            raise RateLimitError(provider=provider_name, retry_after=parse_retry_after(response))
        if response.status_code >= 400:
            raise SearchProviderError(
                provider=provider_name,
                message=f"API error {response.status_code}: {extract_error_message(response)}",
                retryable=response.status_code >= 500,
            )
        try:
            return response.json()
        except ValueError as e:
            raise SearchProviderError(
                provider=provider_name,
                message="Response body is not valid JSON",
                original_error=e,
            ) from e

    return await async_retry_with_backoff(
        make_request,
        max_retries=max_retries,
        base_delay=0.5,
        max_delay=4.0,
        is_retryable=_is_retryable,
        sleep_func=sleep_func,
    )
