"""
Inbound receipt filter: deduplication gate followed by classification.
"""

import logging
from typing import Iterable, List, Optional

from receiptsieve.models.document import Document
from receiptsieve.models.results import BatchSummary, CacheStats, DetectedReceipt, FilterResult, MatchType
from receiptsieve.services.classifier import ReceiptClassifier
from receiptsieve.services.dedup import Deduplicator

logger = logging.getLogger(__name__)


class ReceiptFilter:
    """
    Decide which inbound documents are new receipts.

    Every document is fingerprinted and recorded on first sight, so a
    re-delivered email is never classified twice.
    """

    def __init__(
        self,
        classifier: Optional[ReceiptClassifier] = None,
        deduplicator: Optional[Deduplicator] = None,
    ):
        self.classifier = classifier or ReceiptClassifier()
        self.deduplicator = deduplicator or Deduplicator()

    def filter(self, document: Document) -> FilterResult:
        fingerprint = self.deduplicator.fingerprint(document)

        if self.deduplicator.check_and_record(fingerprint):
            logger.debug("Skipping duplicate document", extra={
                "fingerprint": fingerprint,
                "message_id": document.message_id,
            })
            return FilterResult(fingerprint=fingerprint, duplicate=True, reason="duplicate")

        classification = self.classifier.classify(document.sender, document.subject, document.text)

        if classification.is_receipt:
            reason = None
        elif classification.match_type == MatchType.REJECTED:
            reason = "rejected"
        else:
            reason = "below_threshold"

        return FilterResult(fingerprint=fingerprint, classification=classification, reason=reason)

    def process_batch(self, documents: Iterable[Document]) -> BatchSummary:
        """
        Filter a batch and summarize the receipts found.

        Args:
            documents: Documents in arrival order

        Returns:
            BatchSummary with one entry per detected receipt
        """
        total = 0
        detected: List[DetectedReceipt] = []

        for document in documents:
            total += 1
            result = self.filter(document)
            if not result.is_receipt:
                continue

            detected.append(DetectedReceipt(
                message_id=document.message_id,
                vendor=result.classification.vendor,
                confidence=result.classification.confidence,
                match_type=result.classification.match_type,
            ))

        logger.info("Batch filtered", extra={
            "total_documents": total,
            "receipts_detected": len(detected),
        })

        return BatchSummary(
            total_documents=total,
            receipts_detected=len(detected),
            results=detected,
            cache_stats=self.stats(),
        )

    def stats(self) -> CacheStats:
        return self.deduplicator.stats()

    def clear_cache(self) -> None:
        self.deduplicator.clear()
