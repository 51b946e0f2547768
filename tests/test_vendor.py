"""
Vendor resolution tiers: platform, store, domain, generic.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from receiptsieve.services.vendor import VendorResolver


INSTACART_EMAIL = """\
Your Instacart order
Your shopper picked items from Safeway
Delivery complete
"""

AMAZON_EMAIL = """\
Your Amazon.com order has shipped
Order #112-1234567-1234567
"""

STARBUCKS_RECEIPT = """\
STARBUCKS STORE #1234
Latte $4.50
"""

PIZZA_RECEIPT = """\
Joe's Pizza Restaurant
123 Main St
Total $18.00
"""

CORNER_MARKET_RECEIPT = """\
Thank you for shopping at Corner Market
Total $5.00
"""

LYFT_EMAIL = """\
From: receipts@email.lyft.com
Thanks for riding
"""


class TestPlatformTier:

    def setup_method(self):
        self.resolver = VendorResolver()

    def test_instacart_beats_store_mention(self):
        match = self.resolver.resolve_with_tier(INSTACART_EMAIL)
        assert match.name == 'Instacart'
        assert match.tier == 'platform'

    def test_amazon(self):
        assert self.resolver.resolve(AMAZON_EMAIL) == 'Amazon'

    def test_name_without_confirmation_is_not_enough(self):
        assert self.resolver.resolve("Paid with PayPal") is None


class TestStoreTier:

    def setup_method(self):
        self.resolver = VendorResolver()

    def test_canonical_name_returned_as_declared(self):
        match = self.resolver.resolve_with_tier(STARBUCKS_RECEIPT)
        assert match.name == 'Starbucks'
        assert match.tier == 'store'

    def test_store_below_header(self):
        text = '\n'.join(f"Line {i}" for i in range(12)) + "\nThanks for visiting Costco\n"
        assert self.resolver.resolve(text) == 'Costco'

    def test_list_order_breaks_ties(self):
        assert self.resolver.resolve("Target price match at Walmart") == 'Walmart'

    def test_word_boundary_on_short_names(self):
        assert self.resolver.resolve("Targeted offers just for you") is None


class TestDomainTier:

    def setup_method(self):
        self.resolver = VendorResolver()

    def test_known_domain_with_subdomain(self):
        match = self.resolver.resolve_with_tier(LYFT_EMAIL)
        assert match.name == 'Lyft'
        assert match.tier == 'domain'

    def test_unknown_domain(self):
        assert self.resolver.resolve("From: hello@randomshop.com\nHi there") is None


class TestGenericTier:

    def setup_method(self):
        self.resolver = VendorResolver()

    def test_business_suffix(self):
        match = self.resolver.resolve_with_tier(PIZZA_RECEIPT)
        assert match.name == "Joe's pizza"
        assert match.tier == 'generic'

    def test_thank_you_for_shopping_at(self):
        assert self.resolver.resolve(CORNER_MARKET_RECEIPT) == 'Corner market'

    def test_produce_rejected(self):
        assert self.resolver.resolve("Fresh Chicken Store\nWeight 2 lb") is None

    def test_clean_vendor_name(self):
        assert self.resolver.clean_vendor_name("  ACME   Widgets Inc.") == 'Acme widgets'

    def test_length_bounds(self):
        assert not self.resolver.is_plausible_vendor('A')
        assert not self.resolver.is_plausible_vendor('X' * 31)
        assert self.resolver.is_plausible_vendor('Corner market')


class TestVendorEdgeCases:

    def test_empty_text(self):
        resolver = VendorResolver()
        assert resolver.resolve("") is None
        assert resolver.resolve(None) is None

    def test_header_lines_configurable(self):
        text = "Line 1\nLine 2\nJoe's Pizza Restaurant\n"
        assert VendorResolver(header_lines=2).resolve(text) is None
        assert VendorResolver(header_lines=3).resolve(text) == "Joe's pizza"
