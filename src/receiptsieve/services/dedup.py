"""
Bounded deduplication cache for inbound documents.
"""

import hashlib
import logging
import threading
from collections import OrderedDict
from typing import Optional

from receiptsieve.config import settings
from receiptsieve.models.document import Document
from receiptsieve.models.results import CacheStats

logger = logging.getLogger(__name__)

FINGERPRINT_LENGTH = 16


class Deduplicator:
    """
    Insertion-ordered set of document fingerprints.

    Once the set grows past `capacity * cleanup_threshold` entries the
    oldest are evicted until `int(capacity * retention)` remain. One
    instance per process or session; check_and_record is atomic.
    """

    def __init__(
        self,
        capacity: Optional[int] = None,
        cleanup_threshold: Optional[float] = None,
        retention: Optional[float] = None,
    ):
        self.capacity = capacity if capacity is not None else settings.DEDUP_CAPACITY
        self.cleanup_threshold = cleanup_threshold if cleanup_threshold is not None else settings.DEDUP_CLEANUP_THRESHOLD
        self.retention = retention if retention is not None else settings.DEDUP_RETENTION_FRACTION

        if self.capacity <= 0:
            raise ValueError("capacity must be positive")
        if not 0 < self.retention <= self.cleanup_threshold <= 1:
            raise ValueError("expected 0 < retention <= cleanup_threshold <= 1")

        self._entries: "OrderedDict[str, None]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def fingerprint(document: Document) -> str:
        """
        Stable identity of a document.

        SHA-256 over sender, subject, header date and the last 8 characters
        of the message id; missing fields hash as empty strings.
        """
        message_id = document.message_id or ''
        key = '|'.join([
            document.sender or '',
            document.subject or '',
            document.date or '',
            message_id[-8:],
        ])
        return hashlib.sha256(key.encode('utf-8')).hexdigest()[:FINGERPRINT_LENGTH]

    def seen(self, fingerprint: str) -> bool:
        with self._lock:
            return fingerprint in self._entries

    def record(self, fingerprint: str) -> None:
        with self._lock:
            self._record_locked(fingerprint)

    def check_and_record(self, fingerprint: str) -> bool:
        """
        Record the fingerprint and report whether it was already present.

        Returns:
            True if the fingerprint had been seen before
        """
        with self._lock:
            if fingerprint in self._entries:
                return True
            self._record_locked(fingerprint)
            return False

    def stats(self) -> CacheStats:
        with self._lock:
            size = len(self._entries)
        return CacheStats(
            size=size,
            capacity=self.capacity,
            usage_percent=round(size / self.capacity * 100, 2),
        )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Dedup cache cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _record_locked(self, fingerprint: str) -> None:
        if fingerprint in self._entries:
            return
        self._entries[fingerprint] = None

        if len(self._entries) > self.capacity * self.cleanup_threshold:
            keep = int(self.capacity * self.retention)
            evicted = 0
            while len(self._entries) > keep:
                self._entries.popitem(last=False)
                evicted += 1
            logger.debug("Dedup cache cleanup", extra={
                "evicted": evicted,
                "remaining": len(self._entries),
            })
