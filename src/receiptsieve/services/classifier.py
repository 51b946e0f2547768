"""
Receipt / non-receipt classification for emails.

Every vendor profile scores the email independently; the best accepted
profile decides. Global negatives (marketing, security notices) veto the
email before any profile is consulted.
"""

import re
import logging
from email.utils import parseaddr
from typing import List, Optional

from receiptsieve.config import settings
from receiptsieve.models.results import ClassificationResult, MatchType
from receiptsieve.services.catalog import DEFAULT_CATALOG, PatternCatalog, VendorProfile, any_match
from receiptsieve.utils.scoring import classification_confidence

logger = logging.getLogger(__name__)

SENDER_WEIGHT = 40
SUBJECT_WEIGHT = 15
BODY_WEIGHT = 10


def sender_address(sender: Optional[str]) -> str:
    """
    Extract the bare, lowercased address from a From header.

    Examples:
        >>> sender_address('Amazon.com <auto-confirm@amazon.com>')
        'auto-confirm@amazon.com'
    """
    if not sender:
        return ''
    _, address = parseaddr(sender)
    return (address or sender).strip().lower()


class ProfileScore:
    """Score accumulated by one profile for one email."""

    def __init__(self, profile: VendorProfile):
        self.profile = profile
        self.score = 0
        self.indicators: List[str] = []
        self.sender_matched = False
        self.rejected = False

    @property
    def match_type(self) -> MatchType:
        if self.rejected:
            return MatchType.REJECTED
        return MatchType.SENDER_CONTENT if self.sender_matched else MatchType.CONTENT


class ReceiptClassifier:
    """
    Weighted-pattern receipt classifier.

    Scoring per profile:
    - Trusted sender domain: +40
    - Each distinct subject pattern: +15
    - Each distinct body pattern: +10
    - Any profile-specific negative: profile rejected

    A profile is accepted at `score_threshold` (50), or at
    `sender_threshold` (25) when the sender matched.
    """

    def __init__(
        self,
        catalog: PatternCatalog = DEFAULT_CATALOG,
        score_threshold: Optional[int] = None,
        sender_threshold: Optional[int] = None,
    ):
        self.catalog = catalog
        self.score_threshold = score_threshold if score_threshold is not None else settings.RECEIPT_SCORE_THRESHOLD
        self.sender_threshold = sender_threshold if sender_threshold is not None else settings.SENDER_VERIFIED_THRESHOLD

    def classify(
        self,
        sender: Optional[str],
        subject: Optional[str],
        body: Optional[str],
    ) -> ClassificationResult:
        """
        Decide whether an email is a receipt.

        Args:
            sender: From header (display name and address, or bare address)
            subject: Subject line
            body: Plain-text body

        Returns:
            ClassificationResult; never raises on missing fields
        """
        subject = subject or ''
        body = body or ''

        try:
            negative = self._global_negative(subject, body)
            if negative:
                logger.debug("Email rejected by global negative", extra={
                    "pattern": negative,
                    "subject": subject[:80],
                })
                return ClassificationResult(
                    is_receipt=False,
                    score=0,
                    indicators=[f'negative:{negative}'],
                    match_type=MatchType.REJECTED,
                )

            address = sender_address(sender)
            scores = [
                self._score_profile(profile, address, subject, body)
                for profile in self.catalog.classifier_profiles
            ]

        except (re.error, AttributeError):
            logger.warning("Error classifying email", exc_info=True)
            return ClassificationResult(is_receipt=False)

        best: Optional[ProfileScore] = None
        for result in scores:
            if not self._is_accepted(result):
                continue
            # Strict comparison keeps declaration order on ties
            if best is None or result.score > best.score:
                best = result

        if best is None:
            return self._not_a_receipt(scores)

        is_named_vendor = best.profile is not self.catalog.generic_profile
        confidence = classification_confidence(best.score, is_named_vendor, len(best.indicators))

        logger.info("Receipt detected", extra={
            "vendor": best.profile.name,
            "score": best.score,
            "confidence": confidence,
            "match_type": best.match_type.value,
        })

        return ClassificationResult(
            is_receipt=True,
            vendor=best.profile.name if is_named_vendor else None,
            score=best.score,
            confidence=confidence,
            indicators=best.indicators,
            match_type=best.match_type,
        )

    def _global_negative(self, subject: str, body: str) -> Optional[str]:
        for spec in self.catalog.global_negative_patterns:
            if spec.matches(subject) or spec.matches(body):
                return spec.name
        return None

    def _score_profile(
        self,
        profile: VendorProfile,
        address: str,
        subject: str,
        body: str,
    ) -> ProfileScore:
        result = ProfileScore(profile)

        if profile.sender_matches(address):
            result.score += SENDER_WEIGHT
            result.sender_matched = True
            result.indicators.append(f'trusted_sender_{profile.name.lower()}')

        for spec in profile.subject_patterns:
            if spec.matches(subject):
                result.score += SUBJECT_WEIGHT
                result.indicators.append(f'subject:{spec.name}')

        for spec in profile.body_patterns:
            if spec.matches(body):
                result.score += BODY_WEIGHT
                result.indicators.append(f'body:{spec.name}')

        if (any_match(profile.negative_subject_patterns, subject)
                or any_match(profile.negative_body_patterns, body)):
            logger.debug("Profile rejected by negative pattern", extra={
                "profile": profile.name,
                "score_before_rejection": result.score,
            })
            result.score = 0
            result.rejected = True

        return result

    def _is_accepted(self, result: ProfileScore) -> bool:
        if result.rejected:
            return False
        if result.score >= self.score_threshold:
            return True
        return result.sender_matched and result.score >= self.sender_threshold

    def _not_a_receipt(self, scores: List[ProfileScore]) -> ClassificationResult:
        live = [s for s in scores if not s.rejected]

        if not live:
            return ClassificationResult(is_receipt=False, score=0, match_type=MatchType.REJECTED)

        best = live[0]
        for result in live[1:]:
            if result.score > best.score:
                best = result

        return ClassificationResult(
            is_receipt=False,
            score=best.score,
            indicators=best.indicators,
            match_type=best.match_type,
        )
