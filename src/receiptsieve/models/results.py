"""
Pydantic models for extraction, classification and filtering results.
"""

from datetime import date as CalendarDate
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class AmountSource(str, Enum):
    """Which amount search step produced the value."""
    SUBTOTAL_ANCHOR = "subtotal-anchor"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MatchType(str, Enum):
    """How a classification was reached."""
    SENDER_CONTENT = "sender_content"  # Trusted sender plus content
    CONTENT = "content"                # Content patterns only
    REJECTED = "rejected"              # Negative pattern matched


class ExtractionResult(BaseModel):
    """Structured transaction facts pulled from one document."""
    vendor: Optional[str] = None
    amount: Optional[Decimal] = None
    date: Optional[CalendarDate] = None
    amount_source: Optional[AmountSource] = None
    date_confidence: int = 0

    # Provenance (which strategy won) for debugging
    vendor_source: Optional[str] = None
    date_source: Optional[str] = None
    date_is_synthetic: bool = False

    category: Optional[str] = None
    suggested_filename: str = ""


class ClassificationResult(BaseModel):
    """Receipt / not-receipt decision for an email."""
    is_receipt: bool = False
    vendor: Optional[str] = None
    score: int = 0
    confidence: int = 0
    indicators: List[str] = []
    match_type: MatchType = MatchType.CONTENT

    class Config:
        frozen = True


class FilterResult(BaseModel):
    """Outcome of the inbound dedup + classification gate."""
    fingerprint: str
    duplicate: bool = False
    reason: Optional[str] = None
    classification: Optional[ClassificationResult] = None

    @property
    def is_receipt(self) -> bool:
        return bool(self.classification and self.classification.is_receipt)


class CacheStats(BaseModel):
    """Deduplicator occupancy."""
    size: int
    capacity: int
    usage_percent: float


class DetectedReceipt(BaseModel):
    """One receipt found while filtering a batch."""
    message_id: Optional[str] = None
    vendor: Optional[str] = None
    confidence: int = 0
    match_type: MatchType = MatchType.CONTENT


class BatchSummary(BaseModel):
    """Model for a filtered batch of documents."""
    total_documents: int
    receipts_detected: int
    results: List[DetectedReceipt]
    cache_stats: CacheStats
