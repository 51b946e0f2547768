"""
Inbound filter API router: dedup gate, batch filtering and cache stats.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from typing import List
import logging

from receiptsieve.models.document import Document
from receiptsieve.models.results import BatchSummary, CacheStats, FilterResult
from receiptsieve.services.filter import ReceiptFilter

router = APIRouter(prefix="/filter", tags=["filter"])
logger = logging.getLogger(__name__)


def get_receipt_filter(request: Request) -> ReceiptFilter:
    return request.app.state.receipt_filter


@router.post("", response_model=FilterResult)
async def filter_document(
    document: Document,
    receipt_filter: ReceiptFilter = Depends(get_receipt_filter),
):
    """
    Run one document through the dedup gate and the classifier.

    A document already seen by this process comes back with duplicate=true
    and no classification.
    """
    return receipt_filter.filter(document)


@router.post("/batch", response_model=BatchSummary)
async def filter_batch(
    documents: List[Document],
    receipt_filter: ReceiptFilter = Depends(get_receipt_filter),
):
    """Filter a batch of documents and summarize the receipts found."""
    if not documents:
        raise HTTPException(status_code=400, detail="No documents provided")

    return receipt_filter.process_batch(documents)


@router.get("/stats", response_model=CacheStats)
async def filter_stats(receipt_filter: ReceiptFilter = Depends(get_receipt_filter)):
    return receipt_filter.stats()


@router.delete("/cache")
async def clear_filter_cache(receipt_filter: ReceiptFilter = Depends(get_receipt_filter)):
    """Forget every fingerprint seen so far."""
    receipt_filter.clear_cache()
    logger.info("Filter cache cleared via API")
    return {"success": True, "cache_stats": receipt_filter.stats()}
