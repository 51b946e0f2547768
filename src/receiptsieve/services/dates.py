"""
Date resolution from receipt and email text.

Two variants share one pattern set:
- standard: every candidate weighs the same, the most recent date wins
- email (keyword_context=True): subject dates beat content dates, content
  dates near order/delivery vocabulary beat bare ones, ties go to the
  most recent. Falls back to the standard variant, then to a synthetic
  date in the recent past.
"""

import re
import random
import logging
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Tuple

from receiptsieve.config import settings
from receiptsieve.services.catalog import PatternSpec
from receiptsieve.utils.candidates import DateCandidate, DateMatch, create_date_candidate
from receiptsieve.utils.scoring import select_best_date

logger = logging.getLogger(__name__)

MONTH = (
    r'(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?'
    r'|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\.?'
)
MONTH_DATE = rf'\b{MONTH}\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}}\b'
SLASH_DATE = r'\b\d{1,2}/\d{1,2}/\d{4}\b'
DASH_DATE = r'\b\d{1,2}-\d{1,2}-\d{4}\b'
ISO_DATE = r'\b\d{4}-\d{1,2}-\d{1,2}\b'
ANY_DATE = rf'(?:{MONTH_DATE}|{SLASH_DATE}|{ISO_DATE})'

DATE_KEYWORDS = (
    r'(?:order\s+placed|placed\s+on|delivered\s+on|shipped\s+on|ordered\s+on'
    r'|delivery\s+date|delivery|expected|arriving)'
)

DATE_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec('keyword_date', rf'{DATE_KEYWORDS}\s*:?\s*({ANY_DATE})', 'placed on June 23rd, 2025', priority=1),
    PatternSpec('month_name_date', rf'({MONTH_DATE})', 'June 23, 2025', priority=2),
    PatternSpec('slash_date', rf'({SLASH_DATE})', '06/23/2025', priority=3),
    PatternSpec('dash_date', rf'({DASH_DATE})', '06-23-2025', priority=4),
    PatternSpec('iso_date', rf'({ISO_DATE})', '2025-06-23', priority=5),
)

DATE_FORMATS = [
    '%B %d, %Y', '%B %d %Y',
    '%b %d, %Y', '%b %d %Y',
    '%m/%d/%Y', '%m-%d-%Y',
    '%Y-%m-%d',
]

STANDARD_CONFIDENCE = 5


def parse_date_string(date_str: str) -> Optional[date]:
    """
    Parse a matched date string.

    Ordinal suffixes ("23rd") and abbreviation dots are dropped before
    trying each known format.

    Returns:
        Calendar date or None if no format fits
    """
    if not date_str:
        return None

    cleaned = re.sub(r'(\d{1,2})(?:st|nd|rd|th)\b', r'\1', date_str, flags=re.IGNORECASE)
    cleaned = cleaned.replace('.', '')
    cleaned = re.sub(r'\bSept\b', 'Sep', cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r'\s+', ' ', cleaned).strip()

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue

    return None


class DateResolver:
    """
    Multi-format date resolver with confidence weighting.

    `today` and `rng` are injectable so the future-date cutoff and the
    synthetic fallback are deterministic under test.
    """

    def __init__(
        self,
        future_tolerance_days: Optional[int] = None,
        context_window: Optional[int] = None,
        fallback_days: Optional[Tuple[int, int]] = None,
        today: Optional[Callable[[], date]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.future_tolerance = timedelta(days=(
            future_tolerance_days if future_tolerance_days is not None
            else settings.FUTURE_DATE_TOLERANCE_DAYS
        ))
        self.context_window = context_window if context_window is not None else settings.DATE_CONTEXT_WINDOW
        self.fallback_days = fallback_days or (settings.FALLBACK_DATE_MIN_DAYS, settings.FALLBACK_DATE_MAX_DAYS)
        self.today = today or date.today
        self.rng = rng or random.Random()

    def resolve(
        self,
        text: Optional[str],
        subject: Optional[str] = None,
        keyword_context: bool = False,
    ) -> Optional[date]:
        """
        Extract the transaction date.

        Args:
            text: Normalized receipt/email text
            subject: Email subject, searched first in the email variant
            keyword_context: Use the email variant

        Returns:
            Calendar date or None (the email variant never returns None)
        """
        match = self.resolve_with_confidence(text, subject=subject, keyword_context=keyword_context)
        return match.value if match else None

    def resolve_with_confidence(
        self,
        text: Optional[str],
        subject: Optional[str] = None,
        keyword_context: bool = False,
    ) -> Optional[DateMatch]:
        """Same as resolve() but keeps confidence, source and the synthetic flag."""
        try:
            if not keyword_context:
                return self._resolve_standard(text)

            match = self._resolve_email(text or '', subject)
            return match or self.synthetic_date()

        except (re.error, ValueError, AttributeError):
            logger.warning("Error extracting date", exc_info=True)
            return None

    def is_acceptable(self, value: date) -> bool:
        """Reject dates beyond today plus the future tolerance."""
        return value <= self.today() + self.future_tolerance

    def parse(self, date_str: str) -> Optional[date]:
        """Parse and apply the future-date cutoff."""
        value = parse_date_string(date_str)
        if value is None or not self.is_acceptable(value):
            return None
        return value

    def synthetic_date(self) -> DateMatch:
        """
        Recent-past placeholder used when no date can be read.

        The value is random by construction; callers must treat it as a
        guess (synthetic=True, confidence 0).
        """
        low, high = self.fallback_days
        value = self.today() - timedelta(days=self.rng.randint(low, high))
        logger.info("No date found, using synthetic recent-past date", extra={
            "date": value.isoformat(),
        })
        return DateMatch(value=value, confidence=0, source='fallback', synthetic=True)

    def _resolve_standard(self, text: Optional[str]) -> Optional[DateMatch]:
        if not text:
            return None

        dates: List[date] = []
        for spec in DATE_PATTERNS:
            for match in spec.compiled.finditer(text):
                value = self.parse(match.group(1))
                if value is not None:
                    dates.append(value)

        if not dates:
            return None

        return DateMatch(value=max(dates), confidence=STANDARD_CONFIDENCE, source='standard')

    def _resolve_email(self, text: str, subject: Optional[str]) -> Optional[DateMatch]:
        candidates: List[DateCandidate] = []

        if subject:
            candidates.extend(self._collect_candidates(subject, source='subject'))
        candidates.extend(self._collect_candidates(text, source='content'))

        best = select_best_date(candidates)
        if best is None:
            return None

        logger.debug("Date resolved", extra={
            "date": best.value.isoformat(),
            "confidence": best.confidence,
            "source": best.source,
            "pattern": best.pattern_name,
            "candidate_count": len(candidates),
        })
        return DateMatch(value=best.value, confidence=best.confidence, source=best.source)

    def _collect_candidates(self, text: str, source: str) -> List[DateCandidate]:
        candidates: List[DateCandidate] = []

        for spec in DATE_PATTERNS:
            for match in spec.compiled.finditer(text):
                value = self.parse(match.group(1))
                if value is None:
                    continue

                candidates.append(create_date_candidate(
                    value=value,
                    pattern_name=spec.name,
                    match_span=(match.start(), match.end()),
                    raw_text=match.group(0),
                    text=text,
                    source=source,
                    context_window=self.context_window,
                ))

        return candidates
