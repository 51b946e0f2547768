"""
Extraction and classification API router.
Wraps the pure core; the caller supplies already-materialized text.
"""

from fastapi import APIRouter, Depends, Request
import logging

from receiptsieve.models.document import Document
from receiptsieve.models.requests import ClassifyRequest
from receiptsieve.models.results import ClassificationResult, ExtractionResult
from receiptsieve.services.classifier import ReceiptClassifier
from receiptsieve.services.pipeline import ReceiptPipeline

router = APIRouter(tags=["extraction"])
logger = logging.getLogger(__name__)


def get_pipeline(request: Request) -> ReceiptPipeline:
    return request.app.state.pipeline


def get_classifier(request: Request) -> ReceiptClassifier:
    return request.app.state.receipt_filter.classifier


@router.post("/extract", response_model=ExtractionResult)
async def extract_receipt(
    document: Document,
    pipeline: ReceiptPipeline = Depends(get_pipeline),
):
    """
    Extract vendor, amount and date from a document.

    Fields that cannot be found come back as null.
    """
    return pipeline.extract(document)


@router.post("/classify", response_model=ClassificationResult)
async def classify_email(
    payload: ClassifyRequest,
    classifier: ReceiptClassifier = Depends(get_classifier),
):
    """Decide whether an email is a receipt."""
    return classifier.classify(payload.sender, payload.subject, payload.body)
