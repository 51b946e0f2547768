"""
Selection and scoring functions for extraction candidates.

Amount groups and date candidates each have their own tie-break rule;
classification confidence is derived from the accepted score.
"""

from typing import Iterable, List, Optional

from .candidates import AmountCandidate, DateCandidate

__all__ = [
    'select_first_amount', 'select_largest_amount', 'select_best_date',
    'rank_date_candidates', 'classification_confidence',
]


def select_first_amount(candidates: List[AmountCandidate]) -> Optional[AmountCandidate]:
    """
    Pick the candidate from the earliest pattern in its group.

    Used for the high-priority group: the most specific pattern wins,
    not the largest value.
    """
    if not candidates:
        return None
    return min(candidates, key=lambda c: c.order)


def select_largest_amount(candidates: List[AmountCandidate]) -> Optional[AmountCandidate]:
    """
    Pick the largest value among ambiguous matches.

    Known trade-off: with no contextual anchor a tax or tip line can be
    larger than a mislabeled total and will be chosen.
    """
    if not candidates:
        return None
    # max() keeps the first of equal values, so earlier patterns win ties
    return max(candidates, key=lambda c: c.value)


def rank_date_candidates(candidates: Iterable[DateCandidate]) -> List[DateCandidate]:
    """Sort by confidence (highest first), then by recency (latest first)."""
    return sorted(candidates, key=lambda c: (c.confidence, c.value), reverse=True)


def select_best_date(candidates: Iterable[DateCandidate]) -> Optional[DateCandidate]:
    """Return the top-ranked date candidate or None."""
    ranked = rank_date_candidates(candidates)
    return ranked[0] if ranked else None


def classification_confidence(
    score: int,
    is_named_vendor: bool,
    indicator_count: int,
) -> int:
    """
    Confidence for an accepted classification.

    Scoring factors:
    - Base: the accepted profile score
    - Named vendor bonus: +10 (anything but the generic profile)
    - Corroboration bonus: +15 when three or more distinct indicators fired

    Returns:
        Integer confidence capped at 100
    """
    confidence = score

    if is_named_vendor:
        confidence += 10

    if indicator_count >= 3:
        confidence += 15

    return min(confidence, 100)
