"""
Fallback strategies: filename parsing, sender/subject vendors, Amazon HTML
probe, business category and suggested filenames.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from receiptsieve.services.strategies import (
    amazon_html_dates,
    analyze_context,
    parse_filename,
    suggested_filename,
    vendor_from_sender,
    vendor_from_subject,
)
from datetime import date
from decimal import Decimal


class TestParseFilename:

    def test_vendor_space_amount(self):
        info = parse_filename("Instacart $304.66.pdf")
        assert info.vendor == 'Instacart'
        assert info.amount == Decimal('304.66')
        assert info.date is None

    def test_vendor_dash_amount(self):
        info = parse_filename("Instacart - $172.51.pdf")
        assert info.vendor == 'Instacart'
        assert info.amount == Decimal('172.51')

    def test_vendor_date_amount(self):
        info = parse_filename("Amazon_2025-07-10_$29.99.pdf")
        assert info.vendor == 'Amazon'
        assert info.date == date(2025, 7, 10)
        assert info.amount == Decimal('29.99')

    def test_receipt_word_stripped_from_vendor(self):
        info = parse_filename("Starbucks Receipt $15.67 2025-07-15.pdf")
        assert info.vendor == 'Starbucks'
        assert info.amount == Decimal('15.67')
        assert info.date == date(2025, 7, 15)

    def test_date_only(self):
        info = parse_filename("Receipt_2025-07-15.pdf")
        assert info.vendor is None
        assert info.amount is None
        assert info.date == date(2025, 7, 15)

    def test_bare_vendor(self):
        info = parse_filename("Starbucks.pdf")
        assert info.vendor == 'Starbucks'
        assert info.amount is None

    def test_nothing_usable(self):
        assert parse_filename(None).is_empty()
        assert parse_filename("receipt.pdf").is_empty()
        assert parse_filename("12345.pdf").is_empty()


class TestSenderAndSubjectVendor:

    def test_sender_display_name(self):
        assert vendor_from_sender("Amazon.com <auto-confirm@amazon.com>") == 'Amazon'
        assert vendor_from_sender('"Uber Receipts" <noreply@uber.com>') == 'Uber'

    def test_bare_sender_address_uses_brand(self):
        assert vendor_from_sender("auto-confirm@amazon.com") == 'Amazon'

    def test_unknown_sender(self):
        assert vendor_from_sender("friend@gmail.com") is None
        assert vendor_from_sender(None) is None

    def test_brand_inside_another_word_ignored(self):
        assert vendor_from_sender("tuberose@flowers.com") is None
        assert vendor_from_sender("Target Deals <deals@targetedoffers.net>") == 'Target'

    def test_subject_patterns(self):
        assert vendor_from_subject("Your Instacart order is complete") == 'Instacart'
        assert vendor_from_subject("Thank you for shopping at Costco") == 'Costco'
        assert vendor_from_subject("STARBUCKS receipt") == 'Starbucks'

    def test_subject_stopwords(self):
        assert vendor_from_subject("Your receipt from Apple") is None
        assert vendor_from_subject(None) is None


class TestAmazonHtmlProbe:

    def test_arriving_date(self):
        html = "<p>Arriving <b>July 15, 2025</b></p>"
        assert list(amazon_html_dates("auto-confirm@amazon.com", html)) == ['July 15, 2025']

    def test_other_senders_ignored(self):
        html = "<p>Arriving <b>July 15, 2025</b></p>"
        assert list(amazon_html_dates("orders@target.com", html)) == []
        assert list(amazon_html_dates("auto-confirm@amazon.com", None)) == []


class TestAnalyzeContext:

    def test_coffee(self):
        assert analyze_context("Your barista made a latte") == 'Coffee'

    def test_groceries_checked_first(self):
        assert analyze_context("Your shopper picked items. Organic produce. Your driver is close.") == 'Groceries'

    def test_single_hit_not_enough(self):
        assert analyze_context("fresh coffee") is None
        assert analyze_context(None) is None


class TestSuggestedFilename:

    def test_vendor_and_amount(self):
        assert suggested_filename('Target', date(2025, 6, 23), Decimal('52.3')) == 'Target 2025-06-23 $52.30.pdf'

    def test_missing_amount(self):
        assert suggested_filename('Target', date(2025, 6, 23), None) == 'Email Receipt 2025-06-23.pdf'

    def test_date_defaults_to_today(self):
        assert suggested_filename(None, None, None, today=date(2025, 1, 2)) == 'Email Receipt 2025-01-02.pdf'
