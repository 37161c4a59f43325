"""Lexical text utilities shared by every synthesis phase.

Provides text normalization, salient-term extraction and sentence
salience ranking. All functions are pure and deterministic: identical
input always yields identical output, and nothing here depends on
ordering of sets or dicts beyond insertion order.
"""

from __future__ import annotations

import html
import re
import unicodedata
from collections import Counter
from typing import Iterable, Optional

MIN_TERM_LENGTH = 3
MIN_SENTENCE_LENGTH = 20

STOPWORDS = frozenset(
    {
        "a", "about", "above", "across", "after", "again", "against", "all",
        "also", "among", "an", "and", "any", "are", "around", "as", "at",
        "be", "because", "been", "before", "being", "between", "both", "but",
        "by", "can", "could", "did", "do", "does", "doing", "during", "each",
        "either", "for", "from", "further", "had", "has", "have", "having",
        "how", "however", "into", "is", "it", "its", "itself", "just", "may",
        "might", "more", "most", "much", "must", "near", "not", "now", "of",
        "off", "on", "once", "only", "or", "other", "our", "out", "over",
        "own", "same", "shall", "should", "since", "some", "such", "than",
        "that", "the", "their", "them", "then", "there", "these", "they",
        "this", "those", "through", "thus", "to", "too", "under", "until",
        "upon", "very", "was", "were", "what", "when", "where", "whether",
        "which", "while", "who", "whom", "whose", "why", "will", "with",
        "within", "without", "would", "yet", "you", "your", "we", "us",
        "i", "me", "my", "he", "she", "him", "her", "his", "hers", "next",
        "like", "get", "got", "make", "made", "many", "few", "new", "one",
        "two", "way", "ways", "well", "here",
    }
)

_TOKEN_SPLIT = re.compile(r"[\W_]+")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+(?=[A-Z0-9\"'(\[])")
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """Normalize raw provider text to a canonical form.

    Pipeline: HTML entity decoding, tag stripping, NFC normalization,
    whitespace collapse. Idempotent.

    Examples:
        >>> normalize_text("<p>Hello&nbsp;World</p>")
        'Hello World'
    """
    if not text:
        return ""
    result = html.unescape(text)
    result = _TAG.sub(" ", result)
    result = unicodedata.normalize("NFC", result)
    result = _WHITESPACE.sub(" ", result)
    return result.strip()


def _tokens(text: str) -> list[str]:
    return [
        token
        for token in _TOKEN_SPLIT.split(normalize_text(text).lower())
        if len(token) >= MIN_TERM_LENGTH and token not in STOPWORDS
    ]


def extract_terms(text: Optional[str]) -> list[str]:
    """Extract salient terms from text.

    Terms are lower-cased, stopword-filtered, at least ``MIN_TERM_LENGTH``
    characters long and deduplicated. The order is deterministic: most
    frequent first, ties broken by first appearance.

    Args:
        text: Any text; ``None`` or empty yields no terms.

    Returns:
        Ordered list of unique terms.
    """
    if not text:
        return []
    tokens = _tokens(text)
    counts = Counter(tokens)
    first_seen: dict[str, int] = {}
    for index, token in enumerate(tokens):
        first_seen.setdefault(token, index)
    return sorted(first_seen, key=lambda term: (-counts[term], first_seen[term]))


def term_set(text: Optional[str]) -> set[str]:
    """Return the salient terms of ``text`` as a set."""
    if not text:
        return set()
    return set(_tokens(text))


def split_sentences(text: Optional[str]) -> list[str]:
    """Split normalized text into sentences.

    Fragments shorter than ``MIN_SENTENCE_LENGTH`` characters (headings,
    stray punctuation) are dropped.
    """
    normalized = normalize_text(text)
    if not normalized:
        return []
    return [
        sentence.strip()
        for sentence in _SENTENCE_SPLIT.split(normalized)
        if len(sentence.strip()) >= MIN_SENTENCE_LENGTH
    ]


def count_terms(sentence: str, terms: Iterable[str]) -> int:
    """Count how many distinct ``terms`` occur in ``sentence``."""
    present = term_set(sentence)
    return sum(1 for term in set(terms) if term in present)


def rank_sentences(
    text: Optional[str],
    terms: Iterable[str],
    limit: Optional[int] = None,
) -> list[str]:
    """Rank the sentences of ``text`` by salient-term count.

    Each sentence is scored by the number of distinct ``terms`` it
    contains. Sorting is by score descending, ties by original order, so
    a text with no matching terms comes back in reading order.

    Args:
        text: Longer text to rank.
        terms: Salient terms to score against.
        limit: Maximum number of sentences to return (all if None).

    Returns:
        Ranked list of sentences.
    """
    wanted = list(dict.fromkeys(terms))
    sentences = split_sentences(text)
    scored = [
        (count_terms(sentence, wanted), index, sentence)
        for index, sentence in enumerate(sentences)
    ]
    scored.sort(key=lambda item: (-item[0], item[1]))
    ranked = [sentence for _, _, sentence in scored]
    if limit is not None:
        return ranked[: max(limit, 0)]
    return ranked


def truncate(text: str, max_chars: int) -> str:
    """Truncate at a word boundary, appending an ellipsis when cut."""
    if len(text) <= max_chars:
        return text
    cut = text[:max_chars].rsplit(" ", 1)[0].rstrip(",;:")
    return f"{cut}..."
