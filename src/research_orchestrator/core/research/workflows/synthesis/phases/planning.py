"""Planning phase: decompose the root question into sub-questions.

Each slot of a fixed investigative taxonomy is filled with the question's
own salient terms. Planning involves no network and no clock, so the same
question always yields the same sub-questions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from research_orchestrator.core.research.models import SubQuestion
from research_orchestrator.core.research.text import extract_terms

logger = logging.getLogger(__name__)

#: Maximum focus terms attached to one sub-question.
MAX_FOCUS_TERMS = 3
#: Slots with fewer stride terms than this borrow terms from the front.
MIN_FOCUS_TERMS = 2
#: Subject used when the question has no salient terms.
GENERIC_SUBJECT = "the topic in question"


@dataclass(frozen=True)
class TaxonomyAngle:
    """One investigative angle of the planning taxonomy."""

    key: str
    title: str
    stem: str
    rationale: str


TAXONOMY: tuple[TaxonomyAngle, ...] = (
    TaxonomyAngle(
        key="current-state",
        title="Current state",
        stem="What is the current state of {subject}?",
        rationale="Establishes a factual baseline for {subject} that the other angles build on.",
    ),
    TaxonomyAngle(
        key="drivers",
        title="Drivers and causes",
        stem="What forces are driving change in {subject}?",
        rationale="Explains why {subject} is moving, which separates durable shifts from noise.",
    ),
    TaxonomyAngle(
        key="risks",
        title="Risks and obstacles",
        stem="What risks or obstacles could derail {subject}?",
        rationale="Surfaces failure modes and constraints around {subject} before acting on it.",
    ),
    TaxonomyAngle(
        key="stakeholders",
        title="Stakeholder impact",
        stem="Which stakeholders are most affected by {subject}, and how?",
        rationale="Identifies who gains or loses from {subject}, shaping adoption and resistance.",
    ),
    TaxonomyAngle(
        key="outlook",
        title="Outlook and trajectory",
        stem="How is {subject} likely to evolve from here?",
        rationale="Projects the trajectory of {subject} so conclusions stay useful over time.",
    ),
)


def select_focus_terms(terms: list[str], slot: int, slots: int = len(TAXONOMY)) -> list[str]:
    """Pick the focus terms for taxonomy ``slot``.

    Terms are taken by stride (``slot``, ``slot + slots``, ...) so that
    different slots see different parts of the question. When the stride
    yields fewer than ``MIN_FOCUS_TERMS`` the selection wraps around the
    term list, so short questions repeat terms across slots instead of
    leaving a slot empty.
    """
    if not terms:
        return []
    picked = terms[slot::slots][:MAX_FOCUS_TERMS]
    wanted = min(MIN_FOCUS_TERMS, len(terms))
    offset = 0
    while len(picked) < wanted and offset < len(terms):
        candidate = terms[(slot + offset) % len(terms)]
        if candidate not in picked:
            picked.append(candidate)
        offset += 1
    return picked


def generate_sub_questions(question: Optional[str]) -> list[SubQuestion]:
    """Expand ``question`` into one sub-question per taxonomy angle.

    Args:
        question: The root research question. Empty or ``None`` is treated
            as a question with zero salient terms.

    Returns:
        Exactly ``len(TAXONOMY)`` sub-questions with ids ``sq-1`` ..
        ``sq-N`` in taxonomy order.
    """
    terms = extract_terms(question)
    if not terms:
        logger.info("Question has no salient terms; using generic sub-questions")

    sub_questions: list[SubQuestion] = []
    for index, angle in enumerate(TAXONOMY):
        focus_terms = select_focus_terms(terms, index)
        subject = " ".join(focus_terms) if focus_terms else GENERIC_SUBJECT
        sub_questions.append(
            SubQuestion(
                id=f"sq-{index + 1}",
                question=angle.stem.format(subject=subject),
                rationale=angle.rationale.format(subject=subject),
                focus_terms=focus_terms,
                angle=angle.title,
            )
        )
    return sub_questions
