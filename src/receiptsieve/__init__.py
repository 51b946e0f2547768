"""
Receipt detection and vendor/amount/date extraction for email and PDF text.
"""

__version__ = "0.1.0"

from receiptsieve.models.document import Document
from receiptsieve.models.results import ClassificationResult, ExtractionResult, FilterResult
from receiptsieve.services.amount import AmountResolver
from receiptsieve.services.catalog import DEFAULT_CATALOG, PatternCatalog, VendorProfile
from receiptsieve.services.classifier import ReceiptClassifier
from receiptsieve.services.dates import DateResolver
from receiptsieve.services.dedup import Deduplicator
from receiptsieve.services.filter import ReceiptFilter
from receiptsieve.services.pipeline import ReceiptPipeline
from receiptsieve.services.vendor import VendorResolver

__all__ = [
    'Document', 'ExtractionResult', 'ClassificationResult', 'FilterResult',
    'PatternCatalog', 'VendorProfile', 'DEFAULT_CATALOG',
    'VendorResolver', 'AmountResolver', 'DateResolver',
    'ReceiptClassifier', 'Deduplicator', 'ReceiptPipeline', 'ReceiptFilter',
]
