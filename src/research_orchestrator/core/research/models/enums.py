"""Shared enums for research synthesis models."""

from enum import Enum


class ConfidenceTier(str, Enum):
    """Fixed confidence tiers for highlights and themes.

    Tiers are ordered; ``rank`` gives the ordering used for sorting and
    tie-breaking (higher rank = more confident).
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _TIER_RANKS[self]

    def step_up(self) -> "ConfidenceTier":
        """Return the next tier up, saturating at HIGH."""
        if self is ConfidenceTier.LOW:
            return ConfidenceTier.MEDIUM
        return ConfidenceTier.HIGH


_TIER_RANKS = {
    ConfidenceTier.LOW: 0,
    ConfidenceTier.MEDIUM: 1,
    ConfidenceTier.HIGH: 2,
}


class SourceOrigin(str, Enum):
    """Which kind of reference provider produced a source document."""

    REFERENCE_ENCYCLOPEDIA = "reference-encyclopedia"
    WEB_SEARCH = "web-search"


class EngineId(str, Enum):
    """Identifiers of the fixed engine profiles."""

    OPENAI_DEEP_RESEARCH = "openai-deep-research"
    PERPLEXITY_DEEP_RESEARCH = "perplexity-deep-research"
    KIMI_K2 = "kimi-k2"
    GEMINI_2_5_PRO = "gemini-2_5-pro"
