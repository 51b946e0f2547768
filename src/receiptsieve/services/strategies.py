"""
Fallback strategies used by the pipeline when the text resolvers come up
empty: vendor from sender or subject, fields from the filename, the Amazon
HTML date probe, business-context category and the suggested filename.
"""

import re
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from receiptsieve.services.catalog import PatternSpec
from receiptsieve.services.dates import parse_date_string
from receiptsieve.utils.money import format_money, parse_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilenameInfo:
    """Fields recovered from an uploaded file's name."""
    vendor: Optional[str] = None
    amount: Optional[Decimal] = None
    date: Optional[date] = None

    def is_empty(self) -> bool:
        return self.vendor is None and self.amount is None and self.date is None


FILE_AMOUNT = r'(?P<amount>\d[\d,]*\.\d{2})'
FILE_DATE = r'(?P<date>\d{4}-\d{2}-\d{2})'

# Most specific first; the first pattern that yields anything wins
FILENAME_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec('vendor_date_amount', rf'^(?P<vendor>[A-Za-z ]+?)_{FILE_DATE}_\${FILE_AMOUNT}', 'Amazon_2025-07-10_$29.99.pdf'),
    PatternSpec('vendor_amount_date', rf'^(?P<vendor>[A-Za-z ]+)[^$]{{0,80}}?\${FILE_AMOUNT}\D{{0,80}}?{FILE_DATE}', 'Starbucks Receipt $15.67 2025-07-15.pdf'),
    PatternSpec('vendor_amount', rf'^(?P<vendor>[A-Za-z ]+?)\s+\${FILE_AMOUNT}', 'Instacart $304.66.pdf'),
    PatternSpec('vendor_dash_amount', rf'^(?P<vendor>[A-Za-z ]+?)\s*-\s*\${FILE_AMOUNT}', 'Instacart - $172.51.pdf'),
    PatternSpec('receipt_date', rf'receipt\D{{0,40}}?{FILE_DATE}', 'Receipt_2025-07-15.pdf'),
    PatternSpec('vendor_only', r'^(?P<vendor>[A-Za-z ]+)', 'Starbucks.pdf'),
)

FILENAME_NOISE = re.compile(r'\s*\b(?:receipt|order|invoice)\b\s*', re.IGNORECASE)
DATE_LIKE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def parse_filename(filename: Optional[str]) -> FilenameInfo:
    """
    Recover vendor, amount and date from a receipt filename.

    Examples:
        >>> parse_filename('Instacart $304.66.pdf').amount
        Decimal('304.66')
    """
    if not filename:
        return FilenameInfo()

    for spec in FILENAME_PATTERNS:
        match = spec.search(filename)
        if not match:
            continue

        groups = match.groupdict()
        info = FilenameInfo(
            vendor=_clean_filename_vendor(groups.get('vendor')),
            amount=parse_money(groups['amount']) if groups.get('amount') else None,
            date=parse_date_string(groups['date']) if groups.get('date') else None,
        )

        if not info.is_empty():
            logger.debug("Parsed filename", extra={
                "pattern": spec.name,
                "vendor": info.vendor,
                "amount": str(info.amount) if info.amount else None,
            })
            return info

    return FilenameInfo()


def _clean_filename_vendor(raw: Optional[str]) -> Optional[str]:
    if not raw:
        return None
    vendor = FILENAME_NOISE.sub(' ', raw)
    vendor = re.sub(r'\s+', ' ', vendor).strip()
    if not vendor or DATE_LIKE.match(vendor):
        return None
    return vendor


SENDER_BRANDS: Tuple[PatternSpec, ...] = tuple(
    PatternSpec(f'sender_{brand}', rf'\b{brand}\b', brand)
    for brand in ('amazon', 'instacart', 'doordash', 'uber', 'grubhub', 'target', 'walmart', 'starbucks', 'costco')
)

SUBJECT_VENDOR_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec('your_x_order', r'\bYour ([A-Za-z]+) order\b', 'Your Instacart order'),
    PatternSpec('x_order_confirmation', r'\b([A-Za-z]+) order confirmation\b', 'Target order confirmation'),
    PatternSpec('shopping_at_x', r'\bThank you for shopping at ([A-Za-z]+)', 'Thank you for shopping at Costco'),
    PatternSpec('your_x_delivery', r'\bYour ([A-Za-z]+) delivery\b', 'Your Grubhub delivery'),
    PatternSpec('x_receipt', r'\b([A-Za-z]+) receipt\b', 'Starbucks receipt'),
)

# Words the subject patterns capture that are not vendors
SUBJECT_STOPWORDS = frozenset({'your', 'the', 'a', 'an', 'my', 'our', 'new', 'this', 'order', 'email', 'payment'})


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def vendor_from_sender(sender: Optional[str]) -> Optional[str]:
    """
    Vendor from a known sender brand.

    Uses the first word of the display name when there is one
    ("Amazon.com <auto-confirm@amazon.com>" -> "Amazon"), otherwise the
    brand itself.
    """
    if not sender:
        return None

    for spec in SENDER_BRANDS:
        if not spec.matches(sender):
            continue

        display = sender.split('<', 1)[0] if '<' in sender else ''
        word = re.search(r'[A-Za-z]+', display)
        return _capitalize(word.group(0) if word else spec.example)

    return None


def vendor_from_subject(subject: Optional[str]) -> Optional[str]:
    """Vendor named in common receipt subject lines."""
    if not subject:
        return None

    for spec in SUBJECT_VENDOR_PATTERNS:
        for match in spec.compiled.finditer(subject):
            word = match.group(1)
            if word.lower() not in SUBJECT_STOPWORDS:
                return _capitalize(word)

    return None


AMAZON_HTML_DATE = PatternSpec(
    name='amazon_html_date',
    pattern=r'(?:arriving|delivered|shipped)[^\n]{0,200}?\b([A-Za-z]+\.?\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4})',
    example='Arriving <b>July 15, 2025</b>',
)


def amazon_html_dates(sender: Optional[str], html_source: Optional[str]):
    """
    Yield date strings near delivery vocabulary in an Amazon HTML body.

    Amazon's plain-text rendering often drops the delivery date, so the
    raw HTML is probed first.
    """
    if not sender or not html_source or 'amazon' not in sender.lower():
        return

    for match in AMAZON_HTML_DATE.compiled.finditer(html_source):
        yield match.group(1)


CONTEXT_CATEGORIES: Tuple[Tuple[str, Tuple[PatternSpec, ...]], ...] = (
    ('Groceries', (
        PatternSpec('shopper_picked', r'shopper picked items', 'Your shopper picked items'),
        PatternSpec('replacements', r'replacements you approved', 'Replacements you approved'),
        PatternSpec('delivered_order', r'delivered your order', 'We delivered your order'),
        PatternSpec('farmers_market', r'farmers market', 'Farmers Market'),
        PatternSpec('grocery', r'grocery', 'grocery'),
        PatternSpec('produce', r'produce', 'Produce'),
        PatternSpec('organic', r'organic', 'Organic'),
    )),
    ('Food Delivery', (
        PatternSpec('driver', r'driver', 'driver'),
        PatternSpec('restaurant', r'restaurant', 'restaurant'),
        PatternSpec('delivered_food', r'delivered[^\n]{0,80}food', 'delivered your food'),
        PatternSpec('pickup_ready', r'pickup[^\n]{0,80}ready', 'pickup is ready'),
        PatternSpec('estimated_delivery', r'estimated delivery', 'Estimated delivery'),
    )),
    ('Coffee', (
        PatternSpec('barista', r'barista', 'barista'),
        PatternSpec('latte', r'latte', 'Latte'),
        PatternSpec('cappuccino', r'cappuccino', 'Cappuccino'),
        PatternSpec('espresso', r'espresso', 'Espresso'),
        PatternSpec('coffee', r'coffee', 'coffee'),
        PatternSpec('frappuccino', r'frappuccino', 'Frappuccino'),
    )),
    ('Retail', (
        PatternSpec('order_confirmation', r'order confirmation', 'Order confirmation'),
        PatternSpec('shipped', r'shipped', 'shipped'),
        PatternSpec('tracking', r'tracking', 'tracking'),
        PatternSpec('warehouse', r'warehouse', 'warehouse'),
        PatternSpec('retail', r'retail', 'retail'),
    )),
)

CATEGORY_MIN_MATCHES = 2


def analyze_context(text: Optional[str]) -> Optional[str]:
    """
    Business category from context vocabulary.

    A category needs at least two of its patterns to match; categories are
    checked in declaration order.
    """
    if not text:
        return None

    for category, patterns in CONTEXT_CATEGORIES:
        hits = sum(1 for spec in patterns if spec.matches(text))
        if hits >= CATEGORY_MIN_MATCHES:
            return category

    return None


def suggested_filename(
    vendor: Optional[str],
    receipt_date: Optional[date],
    amount: Optional[Decimal],
    today: Optional[date] = None,
) -> str:
    """
    Output filename for a rendered receipt.

    Examples:
        >>> suggested_filename('Target', date(2025, 6, 23), Decimal('52.30'))
        'Target 2025-06-23 $52.30.pdf'
    """
    date_str = (receipt_date or today or date.today()).isoformat()

    if vendor and amount is not None:
        return f"{vendor} {date_str} {format_money(amount)}.pdf"

    return f"Email Receipt {date_str}.pdf"
