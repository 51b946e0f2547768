"""
Amount resolution from receipt text.

A "Subtotal: $X" line anchors the search: the final total must come after
it and can never be smaller. Without a subtotal, patterns are tried in
three priority groups.
"""

import re
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from receiptsieve.models.results import AmountSource
from receiptsieve.services.catalog import PatternSpec
from receiptsieve.utils.candidates import AmountCandidate, AmountMatch, create_amount_candidate
from receiptsieve.utils.money import AMOUNT_CAPTURE, parse_money
from receiptsieve.utils.scoring import select_first_amount, select_largest_amount

logger = logging.getLogger(__name__)

# Skips negative figures such as "-$5.00"
DOLLAR = rf'(?<!-)\$\s*{AMOUNT_CAPTURE}'

# "total" as a word, never the tail of "Subtotal" / "Sub total" / "Sub-total"
BARE_TOTAL = r'(?<!sub\s)(?<!sub-)\btotal\b'

SUBTOTAL_PATTERN = PatternSpec(
    name='subtotal',
    pattern=rf'\bsub\s*-?\s*total[:\s]*{DOLLAR}',
    example='Subtotal: $45.00',
)

FINAL_TOTAL_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec('final_grand_total', rf'\b(?:grand|final|order)\s+total[:\s]*{DOLLAR}', 'Order Total: $52.30', priority=1),
    PatternSpec('final_total', rf'{BARE_TOTAL}[:\s]*{DOLLAR}', 'Total: $52.30', priority=2),
    PatternSpec('final_amount_charged', rf'\bamount\s+charged[:\s]*{DOLLAR}', 'Amount Charged: $52.30', priority=3),
    PatternSpec('final_you_paid', rf'\byou\s+(?:paid|owe)[:\s]*{DOLLAR}', 'You paid $52.30', priority=4),
    PatternSpec('final_card_charged', rf'\bcard\s+charged[:\s]*{DOLLAR}', 'Card charged: $52.30', priority=5),
    PatternSpec('final_total_due', rf'\btotal\s+due[:\s]*{DOLLAR}', 'Total Due: $52.30', priority=6),
)

HIGH_PRIORITY_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec('total', rf'{BARE_TOTAL}[:\s]*{DOLLAR}', 'Total $10.00', priority=1),
    PatternSpec('grand_total', rf'\b(?:grand|final|order)\s+total[:\s]*{DOLLAR}', 'Grand Total: $10.00', priority=2),
    PatternSpec('charged', rf'\b(?:amount\s+)?charged[:\s]*{DOLLAR}', 'Amount Charged: $10.00', priority=3),
    PatternSpec('amount', rf'\b(?:total\s+)?amount[:\s]*{DOLLAR}', 'Amount: $10.00', priority=4),
    PatternSpec('payment', rf'\b(?:final\s+)?payment[:\s]*{DOLLAR}', 'Payment: $10.00', priority=5),
    PatternSpec('you_paid', rf'\byou\s+(?:paid|owe)[:\s]*{DOLLAR}', 'You paid $10.00', priority=6),
    PatternSpec('card_charged', rf'\bcard\s+charged[:\s]*{DOLLAR}', 'Card charged $10.00', priority=7),
    PatternSpec('due', rf'\b(?:total\s+)?due[:\s]*{DOLLAR}', 'Total Due: $10.00', priority=8),
)

# Same-line proximity, bounded gap
MEDIUM_PRIORITY_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec('total_then_amount', rf'{BARE_TOTAL}[^\n]{{0,100}}?{DOLLAR}', 'Total (incl. tax) ... $10.00'),
    PatternSpec('amount_then_total', rf'{DOLLAR}[^\n]{{0,100}}?\btotal\b', '$10.00 order total'),
    PatternSpec('paid_then_amount', rf'\bpaid[^\n]{{0,100}}?{DOLLAR}', 'Paid with Visa $10.00'),
    PatternSpec('amount_then_paid', rf'{DOLLAR}[^\n]{{0,100}}?\bpaid\b', '$10.00 paid'),
)

LOW_PRIORITY_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec('dollar_amount', DOLLAR, '$10.00', notes='Last resort; may pick a tax or tip line'),
)


class AmountResolver:
    """Extract the final charged amount from receipt text."""

    def resolve(self, text: Optional[str]) -> Optional[Decimal]:
        """
        Extract total amount from receipt text.

        Args:
            text: Normalized receipt text

        Returns:
            Positive Decimal with two decimal places, or None
        """
        match = self.resolve_with_source(text)
        return match.value if match else None

    def resolve_with_source(self, text: Optional[str]) -> Optional[AmountMatch]:
        """Same as resolve() but tags which search step produced the value."""
        if not text:
            return None

        try:
            match = self._resolve_after_subtotal(text) or self._resolve_by_priority(text)
            if match:
                logger.debug("Amount resolved", extra={
                    "amount": str(match.value),
                    "amount_source": match.source.value,
                    "pattern": match.pattern_name,
                })
            return match

        except (re.error, AttributeError):
            logger.warning("Error extracting amount", exc_info=True)
            return None

    def _resolve_after_subtotal(self, text: str) -> Optional[AmountMatch]:
        subtotal = None
        anchor = None
        for match in SUBTOTAL_PATTERN.compiled.finditer(text):
            subtotal = parse_money(match.group(1))
            if subtotal is not None:
                anchor = match
                break

        if anchor is None:
            return None

        remainder = text[anchor.end():]
        for spec in FINAL_TOTAL_PATTERNS:
            for match in spec.compiled.finditer(remainder):
                amount = parse_money(match.group(1))
                if amount is None:
                    continue
                # Taxes and fees only ever add to the subtotal
                if amount >= subtotal:
                    return AmountMatch(amount, AmountSource.SUBTOTAL_ANCHOR, spec.name, subtotal)
                logger.debug("Skipping amount below subtotal", extra={
                    "amount": str(amount),
                    "subtotal": str(subtotal),
                    "pattern": spec.name,
                })

        return AmountMatch(subtotal, AmountSource.SUBTOTAL_ANCHOR, SUBTOTAL_PATTERN.name, subtotal)

    def _resolve_by_priority(self, text: str) -> Optional[AmountMatch]:
        groups = (
            (HIGH_PRIORITY_PATTERNS, AmountSource.HIGH, select_first_amount),
            (MEDIUM_PRIORITY_PATTERNS, AmountSource.MEDIUM, select_largest_amount),
            (LOW_PRIORITY_PATTERNS, AmountSource.LOW, select_largest_amount),
        )

        for patterns, source, select in groups:
            best = select(self._collect_candidates(text, patterns, source))
            if best:
                return AmountMatch(best.value, source, best.pattern_name)

        return None

    def _collect_candidates(
        self,
        text: str,
        patterns: Tuple[PatternSpec, ...],
        source: AmountSource,
    ) -> List[AmountCandidate]:
        candidates: List[AmountCandidate] = []

        for order, spec in enumerate(patterns):
            for match in spec.compiled.finditer(text):
                amount = parse_money(match.group(1))
                if amount is None:
                    continue

                candidates.append(create_amount_candidate(
                    amount=amount,
                    pattern_name=spec.name,
                    match_span=(match.start(), match.end()),
                    raw_text=match.group(0),
                    group=source,
                    order=order,
                ))

        return candidates
