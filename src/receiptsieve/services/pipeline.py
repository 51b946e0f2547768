"""
Extraction pipeline: runs the resolvers and the fallback strategies over a
Document and merges them into one ExtractionResult.

Each field has an explicit, ordered list of named strategies. The first
strategy that returns a value wins and its name is recorded on the result.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List, Optional, Tuple

from receiptsieve.models.document import Document
from receiptsieve.models.results import ExtractionResult
from receiptsieve.services.amount import AmountResolver
from receiptsieve.services.dates import DateResolver
from receiptsieve.services.strategies import (
    amazon_html_dates,
    analyze_context,
    parse_filename,
    suggested_filename,
    vendor_from_sender,
    vendor_from_subject,
)
from receiptsieve.services.vendor import VendorResolver
from receiptsieve.utils.candidates import AmountMatch, DateMatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Strategy:
    """A named way of getting one field out of a Document."""
    name: str
    run: Callable[[Document], Any]


class ReceiptPipeline:
    """Merge vendor, amount and date resolution into one ExtractionResult."""

    def __init__(
        self,
        vendor_resolver: Optional[VendorResolver] = None,
        amount_resolver: Optional[AmountResolver] = None,
        date_resolver: Optional[DateResolver] = None,
    ):
        self.vendor_resolver = vendor_resolver or VendorResolver()
        self.amount_resolver = amount_resolver or AmountResolver()
        self.date_resolver = date_resolver or DateResolver()

        self.vendor_strategies: List[Strategy] = [
            Strategy('text', self._vendor_from_text),
            Strategy('sender', lambda doc: vendor_from_sender(doc.sender)),
            Strategy('subject', lambda doc: vendor_from_subject(doc.subject)),
            Strategy('filename', lambda doc: parse_filename(doc.filename).vendor),
        ]
        self.amount_strategies: List[Strategy] = [
            Strategy('text', lambda doc: self.amount_resolver.resolve_with_source(doc.text)),
            Strategy('filename', lambda doc: parse_filename(doc.filename).amount),
        ]
        self.date_strategies: List[Strategy] = [
            Strategy('amazon_html', self._date_from_amazon_html),
            Strategy('text', self._date_from_text),
            Strategy('filename', lambda doc: parse_filename(doc.filename).date),
        ]

    def extract(self, document: Document) -> ExtractionResult:
        """
        Extract vendor, amount and date from a document.

        Args:
            document: Normalized input document

        Returns:
            ExtractionResult with per-field provenance
        """
        vendor, vendor_source = self._run(self.vendor_strategies, document, 'vendor')
        amount, amount_source = self._resolve_amount(document)
        receipt_date, date_source, date_confidence, synthetic = self._resolve_date(document)

        category = analyze_context(document.text)

        result = ExtractionResult(
            vendor=vendor,
            amount=amount.value if amount else None,
            date=receipt_date,
            amount_source=amount.source if amount else None,
            date_confidence=date_confidence,
            vendor_source=vendor_source,
            date_source=date_source,
            date_is_synthetic=synthetic,
            category=category,
            suggested_filename=suggested_filename(
                vendor, receipt_date, amount.value if amount else None,
                today=self.date_resolver.today(),
            ),
        )

        logger.info("Extraction complete", extra={
            "vendor": vendor,
            "vendor_source": vendor_source,
            "amount": str(result.amount) if result.amount is not None else None,
            "amount_strategy": amount_source,
            "date": receipt_date.isoformat() if receipt_date else None,
            "date_source": date_source,
        })

        return result

    def _run(
        self,
        strategies: List[Strategy],
        document: Document,
        field_name: str,
    ) -> Tuple[Any, Optional[str]]:
        for strategy in strategies:
            value = strategy.run(document)
            if value is not None:
                logger.debug("Strategy succeeded", extra={
                    "field": field_name,
                    "strategy": strategy.name,
                })
                return value, strategy.name
        return None, None

    def _resolve_amount(self, document: Document) -> Tuple[Optional[AmountMatch], Optional[str]]:
        value, source = self._run(self.amount_strategies, document, 'amount')
        if value is None or isinstance(value, AmountMatch):
            return value, source
        # Filename amounts carry no search step
        return AmountMatch(value=value, source=None, pattern_name=source), source

    def _resolve_date(self, document: Document) -> Tuple[Optional[date], Optional[str], int, bool]:
        synthetic: Optional[DateMatch] = None

        for strategy in self.date_strategies:
            value = strategy.run(document)
            if value is None:
                continue

            if isinstance(value, DateMatch):
                if value.synthetic:
                    # Placeholder only; a later strategy may still find a real date
                    synthetic = synthetic or value
                    continue
                return value.value, value.source, value.confidence, False

            return value, strategy.name, 0, False

        if synthetic:
            return synthetic.value, synthetic.source, synthetic.confidence, True

        return None, None, 0, False

    def _vendor_from_text(self, document: Document) -> Optional[str]:
        match = self.vendor_resolver.resolve_with_tier(document.text)
        if not match:
            return None
        logger.debug("Vendor tier", extra={"tier": match.tier, "vendor": match.name})
        return match.name

    def _date_from_amazon_html(self, document: Document) -> Optional[DateMatch]:
        for date_str in amazon_html_dates(document.sender, document.html_source):
            value = self.date_resolver.parse(date_str)
            if value is not None:
                return DateMatch(value=value, confidence=10, source='amazon_html')
        return None

    def _date_from_text(self, document: Document) -> Optional[DateMatch]:
        keyword_context = bool(document.subject or document.sender)
        return self.date_resolver.resolve_with_confidence(
            document.text,
            subject=document.subject,
            keyword_context=keyword_context,
        )
