"""
Vendor resolution from receipt text.

Tiers, first success wins:
1. Platform - a delivery/marketplace name corroborated by a confirmation word
2. Store - known store/brand list (header first, then full text)
3. Domain - first email domain in the header, via the curated table
4. Generic - company-shaped phrases in the header, noise-filtered
"""

import re
import logging
from typing import Optional

from receiptsieve.config import settings
from receiptsieve.services.catalog import DEFAULT_CATALOG, PatternCatalog, any_match
from receiptsieve.utils.candidates import VendorMatch

logger = logging.getLogger(__name__)

DOMAIN_TOKEN = re.compile(r'@(?:[a-z0-9-]+\.)*([a-z0-9-]+)\.(?:com|net|org)\b', re.IGNORECASE)

VENDOR_SUFFIX = re.compile(
    r'\s+(?:Inc|LLC|Corp|Co|Store|Order|Confirmation|Restaurant|Cafe)\.?$',
    re.IGNORECASE,
)
VENDOR_PREFIX = re.compile(r'^(?:Order|Details|www\.|https?://)\s*', re.IGNORECASE)


class VendorResolver:
    """Tiered vendor resolver over a PatternCatalog."""

    def __init__(
        self,
        catalog: PatternCatalog = DEFAULT_CATALOG,
        header_lines: Optional[int] = None,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
    ):
        self.catalog = catalog
        self.header_lines = header_lines if header_lines is not None else settings.HEADER_LINES
        self.min_length = min_length if min_length is not None else settings.VENDOR_MIN_LENGTH
        self.max_length = max_length if max_length is not None else settings.VENDOR_MAX_LENGTH

    def resolve(self, text: Optional[str]) -> Optional[str]:
        """
        Extract the vendor name from receipt text.

        Args:
            text: Normalized receipt text

        Returns:
            Vendor name or None
        """
        match = self.resolve_with_tier(text)
        return match.name if match else None

    def resolve_with_tier(self, text: Optional[str]) -> Optional[VendorMatch]:
        """Same as resolve() but keeps the tier and pattern that produced the name."""
        if not text:
            return None

        try:
            header = '\n'.join(text.split('\n')[:self.header_lines])

            match = (
                self._platform_tier(text)
                or self._store_tier(header, text)
                or self._domain_tier(header)
                or self._generic_tier(header)
            )

            if match:
                logger.debug("Vendor resolved", extra={
                    "vendor": match.name,
                    "tier": match.tier,
                    "pattern": match.pattern_name,
                })
            return match

        except (re.error, AttributeError, IndexError):
            logger.warning("Error extracting vendor", exc_info=True)
            return None

    def _platform_tier(self, text: str) -> Optional[VendorMatch]:
        for profile in self.catalog.platform_profiles:
            for spec in profile.name_patterns:
                if not spec.matches(text):
                    continue
                # A bare name mention is not enough: require a corroborating word
                if any_match(profile.confirmation_patterns, text):
                    return VendorMatch(profile.name, 'platform', spec.name)
        return None

    def _store_tier(self, header: str, text: str) -> Optional[VendorMatch]:
        for section in (header, text):
            for store in self.catalog.stores:
                for spec in store.patterns:
                    if spec.matches(section):
                        return VendorMatch(store.name, 'store', spec.name)
        return None

    def _domain_tier(self, header: str) -> Optional[VendorMatch]:
        match = DOMAIN_TOKEN.search(header)
        if not match:
            return None

        vendor = self.catalog.domain_vendors.get(match.group(1).lower())
        if vendor:
            return VendorMatch(vendor, 'domain', match.group(1).lower())
        return None

    def _generic_tier(self, header: str) -> Optional[VendorMatch]:
        for spec in self.catalog.business_patterns:
            match = spec.search(header)
            if not match:
                continue

            name = self.clean_vendor_name(match.group(1))
            if name and self.is_plausible_vendor(name):
                return VendorMatch(name, 'generic', spec.name)

            logger.debug("Rejected generic vendor candidate", extra={
                "candidate": match.group(1),
                "pattern": spec.name,
            })
        return None

    def clean_vendor_name(self, name: str) -> str:
        """
        Normalize a free-form vendor phrase.

        Strips trailing corporate suffixes and leading boilerplate, collapses
        whitespace, then capitalizes the first letter and lowercases the rest.
        """
        name = re.sub(r'\s+', ' ', name).strip()
        name = VENDOR_SUFFIX.sub('', name)
        name = VENDOR_PREFIX.sub('', name)
        name = name.strip(" &'")

        if not name:
            return ''
        return name[0].upper() + name[1:].lower()

    def is_plausible_vendor(self, name: str) -> bool:
        """Length-bounded and free of product or status vocabulary."""
        if not (self.min_length <= len(name) <= self.max_length):
            return False
        return not any_match(self.catalog.vendor_noise_patterns, name)
