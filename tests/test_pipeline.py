"""
End-to-end extraction through the pipeline, including strategy provenance.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from receiptsieve.models.document import Document
from receiptsieve.models.results import AmountSource
from receiptsieve.services.dates import DateResolver
from receiptsieve.services.pipeline import ReceiptPipeline
from datetime import date, timedelta
from decimal import Decimal
import random


AMAZON_TEXT = """\
Amazon.com order confirmation
Order placed June 23rd, 2025
Subtotal: $45.00
Shipping: $3.00
Estimated tax: $4.30
Order Total: $52.30
"""


def make_pipeline(today=date(2025, 7, 1)):
    return ReceiptPipeline(date_resolver=DateResolver(today=lambda: today, rng=random.Random(0)))


class TestFullExtraction:

    def test_amazon_email(self):
        document = Document(
            text=AMAZON_TEXT,
            subject="Your Amazon.com order #112-1234567-1234567",
            sender="Amazon.com <auto-confirm@amazon.com>",
        )
        result = make_pipeline().extract(document)

        assert result.vendor == 'Amazon'
        assert result.vendor_source == 'text'
        assert result.amount == Decimal('52.30')
        assert result.amount_source == AmountSource.SUBTOTAL_ANCHOR
        assert result.date == date(2025, 6, 23)
        assert result.date_confidence == 8
        assert result.date_source == 'content'
        assert not result.date_is_synthetic
        assert result.suggested_filename == 'Amazon 2025-06-23 $52.30.pdf'

    def test_amazon_html_date_preferred(self):
        document = Document(
            text="Your package",
            sender="auto-confirm@amazon.com",
            html_source="<td>Delivered <b>June 28, 2025</b></td>",
        )
        result = make_pipeline().extract(document)

        assert result.date == date(2025, 6, 28)
        assert result.date_source == 'amazon_html'
        assert result.vendor == 'Amazon'
        assert result.vendor_source == 'sender'


class TestFallbackStrategies:

    def test_filename_fills_missing_fields(self):
        document = Document(
            text="scanned image with no useful text",
            filename="Starbucks Receipt $15.67 2025-07-15.pdf",
        )
        result = make_pipeline(today=date(2025, 7, 20)).extract(document)

        assert result.vendor == 'Starbucks'
        assert result.vendor_source == 'filename'
        assert result.amount == Decimal('15.67')
        assert result.amount_source is None
        assert result.date == date(2025, 7, 15)
        assert result.date_source == 'filename'

    def test_sender_vendor(self):
        document = Document(text="Thanks!", sender="Instacart <orders@instacart.com>")
        result = make_pipeline().extract(document)
        assert result.vendor == 'Instacart'
        assert result.vendor_source == 'sender'

    def test_subject_vendor(self):
        document = Document(text="Thanks!", subject="Your Grubhub delivery")
        result = make_pipeline().extract(document)
        assert result.vendor == 'Grubhub'
        assert result.vendor_source == 'subject'

    def test_filename_date_beats_synthetic(self):
        document = Document(text="Thanks", subject="Your receipt", filename="Receipt_2025-06-30.pdf")
        result = make_pipeline().extract(document)
        assert result.date == date(2025, 6, 30)
        assert not result.date_is_synthetic

    def test_synthetic_date_flagged(self):
        today = date(2025, 7, 1)
        document = Document(text="Thanks for your purchase", subject="Your receipt")
        result = make_pipeline(today=today).extract(document)

        assert result.date_is_synthetic
        assert result.date_source == 'fallback'
        assert result.date_confidence == 0
        assert today - timedelta(days=7) <= result.date <= today - timedelta(days=1)

    def test_no_date_without_email_context(self):
        result = make_pipeline().extract(Document(text="Thanks for your purchase"))
        assert result.date is None
        assert not result.date_is_synthetic
        assert result.suggested_filename == 'Email Receipt 2025-07-01.pdf'


class TestCategory:

    def test_food_delivery_category(self):
        document = Document(text="Your driver picked up your order from the restaurant. Total $18.00")
        result = make_pipeline().extract(document)
        assert result.category == 'Food Delivery'
        assert result.amount == Decimal('18.00')
