"""
Amount resolution: subtotal anchoring and the priority fallback groups.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from receiptsieve.models.results import AmountSource
from receiptsieve.services.amount import AmountResolver
from decimal import Decimal


DOORDASH_RECEIPT = """\
Order Details
Subtotal: $45.00
Tax: $3.60
Delivery Fee: $3.70
Order Total: $52.30
"""

SUBTOTAL_ONLY = """\
Subtotal: $20.00
Thanks for your order
"""

DISCOUNT_BEFORE_CHARGE = """\
Subtotal: $50.00
Discount total: $5.00
Amount Charged: $55.00
"""

COFFEE_RECEIPT = """\
Latte $4.50
Muffin $3.25
"""


class TestSubtotalAnchor:
    """The final total comes after the subtotal and is never smaller."""

    def setup_method(self):
        self.resolver = AmountResolver()

    def test_order_total_after_subtotal(self):
        match = self.resolver.resolve_with_source(DOORDASH_RECEIPT)
        assert match.value == Decimal('52.30')
        assert str(match.value) == '52.30'
        assert match.source == AmountSource.SUBTOTAL_ANCHOR
        assert match.subtotal == Decimal('45.00')

    def test_subtotal_returned_when_no_final_total(self):
        match = self.resolver.resolve_with_source(SUBTOTAL_ONLY)
        assert match.value == Decimal('20.00')
        assert match.source == AmountSource.SUBTOTAL_ANCHOR
        assert match.pattern_name == 'subtotal'

    def test_amount_below_subtotal_skipped(self):
        assert self.resolver.resolve(DISCOUNT_BEFORE_CHARGE) == Decimal('55.00')

    def test_spaced_sub_total(self):
        text = "Sub total: $12.00\nTotal: $13.56"
        assert self.resolver.resolve(text) == Decimal('13.56')

    def test_result_never_below_subtotal(self):
        for text in (DOORDASH_RECEIPT, SUBTOTAL_ONLY, DISCOUNT_BEFORE_CHARGE):
            match = self.resolver.resolve_with_source(text)
            assert match.value >= match.subtotal


class TestPriorityGroups:

    def setup_method(self):
        self.resolver = AmountResolver()

    def test_plain_total(self):
        match = self.resolver.resolve_with_source("Total $10.00")
        assert match.value == Decimal('10.00')
        assert match.source == AmountSource.HIGH

    def test_first_high_priority_pattern_wins_over_larger_value(self):
        text = "Grand Total: $30.00\nTotal: $45.00"
        match = self.resolver.resolve_with_source(text)
        assert match.value == Decimal('30.00')
        assert match.pattern_name == 'total'

    def test_earlier_total_line_beats_later_grand_total(self):
        match = self.resolver.resolve_with_source("Total: $5.00\nGrand Total: $10.00")
        assert match.value == Decimal('5.00')
        assert match.source == AmountSource.HIGH

    def test_subtotal_word_is_not_a_total(self):
        # No "$" on the subtotal line, so there is no anchor
        text = "Subtotal 12.00\nTotal: $15.00"
        assert self.resolver.resolve(text) == Decimal('15.00')

    def test_medium_priority_same_line(self):
        match = self.resolver.resolve_with_source("Total charged to card ending 1234 $25.99")
        assert match.value == Decimal('25.99')
        assert match.source == AmountSource.MEDIUM

    def test_low_priority_takes_largest(self):
        match = self.resolver.resolve_with_source(COFFEE_RECEIPT)
        assert match.value == Decimal('4.50')
        assert match.source == AmountSource.LOW

    def test_low_priority_may_pick_tip_line(self):
        # Known trade-off of the largest-value rule
        assert self.resolver.resolve("Item $5.00\nTip $8.00") == Decimal('8.00')

    def test_thousands_separator(self):
        assert self.resolver.resolve("Order Total: $1,234.56") == Decimal('1234.56')


class TestAmountEdgeCases:

    def setup_method(self):
        self.resolver = AmountResolver()

    def test_empty_text(self):
        assert self.resolver.resolve("") is None
        assert self.resolver.resolve(None) is None

    def test_no_amount(self):
        assert self.resolver.resolve("Thanks for shopping with us") is None

    def test_zero_amount_discarded(self):
        assert self.resolver.resolve("Total: $0.00") is None

    def test_negative_amount_discarded(self):
        assert self.resolver.resolve("Refund: -$5.00") is None
        assert self.resolver.resolve("Item $12.00\nDiscount -$15.00") == Decimal('12.00')

    def test_amount_has_two_decimals(self):
        amount = self.resolver.resolve("You paid $7.10")
        assert amount.as_tuple().exponent == -2
