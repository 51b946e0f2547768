"""
Candidate dataclasses for extraction scoring.

Each candidate represents a potential extracted value with the metadata
used to rank it. Match records are what a resolver hands back once a
candidate has been selected.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from receiptsieve.models.results import AmountSource


@dataclass(frozen=True)
class Candidate:
    """Base class for extraction candidates."""
    value: Any
    pattern_name: str
    match_span: tuple[int, int]  # (start, end) character positions
    raw_text: str = ""  # Original matched text


@dataclass(frozen=True)
class AmountCandidate(Candidate):
    """
    Candidate for extracted amount.

    `order` is the position of the pattern inside its priority group;
    the high-priority group resolves ties by it, the looser groups by value.
    """
    value: Decimal
    group: AmountSource = AmountSource.LOW
    order: int = 0


@dataclass(frozen=True)
class DateCandidate(Candidate):
    """
    Candidate for extracted date.

    Scoring factors:
    - confidence: 10 subject, 9 delivery context, 8 order context, 5 bare
    - value: later dates win ties
    """
    value: date
    confidence: int = 5
    source: str = "content"  # 'subject' or 'content'


@dataclass(frozen=True)
class AmountMatch:
    """Selected amount plus the step that produced it."""
    value: Decimal
    source: Optional[AmountSource]  # None when the amount came from a filename
    pattern_name: str
    subtotal: Optional[Decimal] = None


@dataclass(frozen=True)
class DateMatch:
    """
    Selected date.

    `synthetic` marks the recent-past fallback: it is a placeholder,
    not a fact read from the document.
    """
    value: date
    confidence: int
    source: str
    synthetic: bool = False


@dataclass(frozen=True)
class VendorMatch:
    """Selected vendor plus the resolution tier that produced it."""
    name: str
    tier: str
    pattern_name: Optional[str] = None


# Helper functions for creating candidates

def create_amount_candidate(
    amount: Decimal,
    pattern_name: str,
    match_span: tuple[int, int],
    raw_text: str,
    group: AmountSource,
    order: int,
) -> AmountCandidate:
    """Create AmountCandidate for a parsed, positive amount."""
    return AmountCandidate(
        value=amount,
        pattern_name=pattern_name,
        match_span=match_span,
        raw_text=raw_text,
        group=group,
        order=order,
    )


def create_date_candidate(
    value: date,
    pattern_name: str,
    match_span: tuple[int, int],
    raw_text: str,
    text: str,
    source: str = "content",
    context_window: int = 50,
) -> DateCandidate:
    """
    Create DateCandidate with confidence computed from surrounding text.

    Subject matches are the strongest signal and score 10 unconditionally.
    Content matches look `context_window` characters either side of the
    match start for order or delivery vocabulary.

    Args:
        value: Parsed calendar date
        pattern_name: Name of pattern that matched
        match_span: Character span of match
        raw_text: Original matched text
        text: Full text the match was found in
        source: 'subject' or 'content'
        context_window: Characters inspected before/after the match start

    Returns:
        DateCandidate with computed confidence
    """
    if source == "subject":
        confidence = 10
    else:
        start, _ = match_span
        context = text[max(0, start - context_window):start + context_window].lower()

        confidence = 5
        if 'order' in context or 'placed' in context or 'shipped' in context:
            confidence = 8
        if 'delivery' in context or 'delivered' in context:
            confidence = 9

    return DateCandidate(
        value=value,
        pattern_name=pattern_name,
        match_span=match_span,
        raw_text=raw_text,
        confidence=confidence,
        source=source,
    )
