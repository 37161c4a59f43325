"""Research pipeline configuration.

Contains ResearchConfig, the configuration dataclass for a research run:
which reference providers to query, how long to wait for them, and the
size knobs of the synthesis phases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, FrozenSet, List

from research_orchestrator.config.parsing import (
    _parse_float,
    _parse_int,
    _parse_list,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "research-orchestrator/0.1 (+https://github.com/research-orchestrator)"


@dataclass
class ResearchConfig:
    """Configuration for research runs.

    Attributes:
        providers: Ordered list of search providers to query per sub-question
        max_results_per_query: Maximum raw documents requested per provider call
        provider_timeout: Timeout in seconds for a single provider call
        gathering_budget: Wall-clock budget in seconds for the whole gathering
            stage; lookups still pending at the budget are abandoned
        max_concurrent: Maximum concurrent provider lookups
        max_retries: Retry attempts for transient provider errors
        user_agent: User-Agent header sent to reference providers
        wikipedia_base_url: MediaWiki API endpoint
        duckduckgo_base_url: DuckDuckGo Instant Answer API endpoint
        key_sentence_count: Key sentences extracted per source document
        executive_summary_size: Number of themes in the executive summary
        min_question_length: Minimum question length enforced by callers
        log_level: Log level used by the CLI
    """

    KNOWN_PROVIDERS: ClassVar[FrozenSet[str]] = frozenset({"wikipedia", "duckduckgo"})

    providers: List[str] = field(default_factory=lambda: ["wikipedia", "duckduckgo"])
    max_results_per_query: int = 5
    provider_timeout: float = 10.0
    gathering_budget: float = 25.0
    max_concurrent: int = 6
    max_retries: int = 1
    user_agent: str = DEFAULT_USER_AGENT
    wikipedia_base_url: str = "https://en.wikipedia.org/w/api.php"
    duckduckgo_base_url: str = "https://api.duckduckgo.com/"
    key_sentence_count: int = 3
    executive_summary_size: int = 3
    min_question_length: int = 8
    log_level: str = "WARNING"

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "ResearchConfig":
        """Create config from TOML dict (typically the [research] section).

        Args:
            data: Dict from TOML parsing

        Returns:
            ResearchConfig instance
        """
        defaults = cls()
        providers = _parse_list(data.get("providers", defaults.providers))

        return cls(
            providers=providers,
            max_results_per_query=_parse_int(
                data.get("max_results_per_query", defaults.max_results_per_query),
                name="max_results_per_query",
                default=defaults.max_results_per_query,
            ),
            provider_timeout=_parse_float(
                data.get("provider_timeout", defaults.provider_timeout),
                name="provider_timeout",
                default=defaults.provider_timeout,
            ),
            gathering_budget=_parse_float(
                data.get("gathering_budget", defaults.gathering_budget),
                name="gathering_budget",
                default=defaults.gathering_budget,
            ),
            max_concurrent=_parse_int(
                data.get("max_concurrent", defaults.max_concurrent),
                name="max_concurrent",
                default=defaults.max_concurrent,
            ),
            max_retries=_parse_int(
                data.get("max_retries", defaults.max_retries),
                name="max_retries",
                default=defaults.max_retries,
            ),
            user_agent=str(data.get("user_agent", defaults.user_agent)),
            wikipedia_base_url=str(data.get("wikipedia_base_url", defaults.wikipedia_base_url)),
            duckduckgo_base_url=str(data.get("duckduckgo_base_url", defaults.duckduckgo_base_url)),
            key_sentence_count=_parse_int(
                data.get("key_sentence_count", defaults.key_sentence_count),
                name="key_sentence_count",
                default=defaults.key_sentence_count,
            ),
            executive_summary_size=_parse_int(
                data.get("executive_summary_size", defaults.executive_summary_size),
                name="executive_summary_size",
                default=defaults.executive_summary_size,
            ),
            min_question_length=_parse_int(
                data.get("min_question_length", defaults.min_question_length),
                name="min_question_length",
                default=defaults.min_question_length,
            ),
            log_level=str(data.get("log_level", defaults.log_level)).upper(),
        )

    def __post_init__(self) -> None:
        self._validate_providers()
        self._validate_limits()

    def _validate_providers(self) -> None:
        if not self.providers:
            raise ValueError(
                f"At least one search provider is required. Choose from: {sorted(self.KNOWN_PROVIDERS)}"
            )
        unknown = [name for name in self.providers if name not in self.KNOWN_PROVIDERS]
        if unknown:
            raise ValueError(
                f"Unknown search provider(s): {unknown}. "
                f"Must be a subset of: {sorted(self.KNOWN_PROVIDERS)}"
            )
        if len(set(self.providers)) != len(self.providers):
            raise ValueError(f"Duplicate search providers configured: {self.providers}")

    def _validate_limits(self) -> None:
        if self.provider_timeout <= 0:
            raise ValueError(f"provider_timeout must be positive, got {self.provider_timeout}")
        if self.gathering_budget <= 0:
            raise ValueError(f"gathering_budget must be positive, got {self.gathering_budget}")
        if self.max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {self.max_concurrent}")
        if self.max_results_per_query < 1:
            raise ValueError(
                f"max_results_per_query must be >= 1, got {self.max_results_per_query}"
            )
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.key_sentence_count < 1:
            raise ValueError(f"key_sentence_count must be >= 1, got {self.key_sentence_count}")
        if self.executive_summary_size < 1:
            raise ValueError(
                f"executive_summary_size must be >= 1, got {self.executive_summary_size}"
            )
        if self.provider_timeout > self.gathering_budget:
            logger.warning(
                "provider_timeout (%.1fs) exceeds gathering_budget (%.1fs); "
                "slow lookups will be abandoned at the budget",
                self.provider_timeout,
                self.gathering_budget,
            )
