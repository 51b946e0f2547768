"""
Pattern catalog: the static configuration every resolver and the
classifier read from.

Vendor profiles, store brands, the domain table and the negative lists
are plain frozen data. Extending coverage means building a new
PatternCatalog with extra profiles; the resolution algorithms stay put.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class PatternSpec:
    """A named regex pattern with example and notes for documentation."""
    name: str
    pattern: str
    example: str = ""
    notes: Optional[str] = None
    priority: Optional[int] = None
    flags: int = re.IGNORECASE
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))

    def search(self, text: Optional[str]) -> Optional[re.Match]:
        """Stateless search; a missing text never matches."""
        if not text:
            return None
        return self.compiled.search(text)

    def matches(self, text: Optional[str]) -> bool:
        return self.search(text) is not None


Patterns = Tuple[PatternSpec, ...]


def any_match(patterns: Patterns, text: Optional[str]) -> bool:
    """True if any pattern hits the text."""
    return any(spec.matches(text) for spec in patterns)


@dataclass(frozen=True)
class VendorProfile:
    """
    Named bundle of patterns used to recognize one merchant.

    Classification reads sender_domains / subject_patterns / body_patterns
    and the negatives. Vendor resolution reads name_patterns and
    confirmation_patterns: a name hit only counts when a confirmation
    pattern corroborates it.
    """
    name: str
    sender_domains: Patterns = ()
    subject_patterns: Patterns = ()
    body_patterns: Patterns = ()
    negative_subject_patterns: Patterns = ()
    negative_body_patterns: Patterns = ()
    name_patterns: Patterns = ()
    confirmation_patterns: Patterns = ()

    @property
    def classifies(self) -> bool:
        return bool(self.sender_domains or self.subject_patterns or self.body_patterns)

    @property
    def resolves(self) -> bool:
        return bool(self.name_patterns)

    def sender_matches(self, address: Optional[str]) -> bool:
        return any_match(self.sender_domains, address)


@dataclass(frozen=True)
class StoreBrand:
    """Known store/brand name with the patterns that identify it."""
    name: str
    patterns: Patterns


@dataclass(frozen=True)
class PatternCatalog:
    """Immutable bundle of every pattern list the core consults."""
    profiles: Tuple[VendorProfile, ...]
    generic_profile: VendorProfile
    global_negative_patterns: Patterns
    stores: Tuple[StoreBrand, ...]
    domain_vendors: Mapping[str, str]
    business_patterns: Patterns
    vendor_noise_patterns: Patterns

    @property
    def classifier_profiles(self) -> Tuple[VendorProfile, ...]:
        """Named classifier profiles in declaration order, generic last."""
        return tuple(p for p in self.profiles if p.classifies) + (self.generic_profile,)

    @property
    def platform_profiles(self) -> Tuple[VendorProfile, ...]:
        return tuple(p for p in self.profiles if p.resolves)


def _specs(prefix: str, *pairs) -> Patterns:
    """Build PatternSpecs named '<prefix>_<n>' from (pattern, example) pairs."""
    return tuple(
        PatternSpec(name=f'{prefix}_{i}', pattern=pattern, example=example)
        for i, (pattern, example) in enumerate(pairs, start=1)
    )


def _sender(domain_regex: str, example: str) -> Patterns:
    """Match a bare sender address on the given registrable domain."""
    return (
        PatternSpec(
            name='sender_domain',
            pattern=rf'@(?:[\w-]+\.)*{domain_regex}$',
            example=example,
        ),
    )


MONEY = r'\$[\d,]+\.\d{2}'

AMAZON = VendorProfile(
    name='Amazon',
    sender_domains=_sender(r'amazon\.(?:com|ca|co\.uk|de|fr|es|it|in|com\.au|co\.jp)', 'auto-confirm@amazon.com'),
    subject_patterns=(
        PatternSpec('order_shipped', r'your order.{0,60}shipped', 'Your order has shipped'),
        PatternSpec('order_confirmation', r'order confirmation', 'Order Confirmation'),
        PatternSpec('amazon_receipt', r'your receipt.{0,60}amazon', 'Your receipt from Amazon'),
        PatternSpec('order_delivered', r'order.{0,60}has been delivered', 'Your order has been delivered'),
        PatternSpec('amazon_order', r'amazon\.com order', 'Your Amazon.com order #123'),
        PatternSpec('shipment_delivered', r'shipment.{0,60}delivered', 'Shipment delivered'),
    ),
    body_patterns=(
        PatternSpec('order_total', rf'order total:?\s*{MONEY}', 'Order Total: $52.30'),
        PatternSpec('shipment_delivered', r'shipment delivered', 'Shipment delivered'),
        PatternSpec('order_number', r'order #[A-Z0-9-]{10,}', 'Order #112-1234567-1234567'),
        PatternSpec('billing_address', r'billing address', 'Billing address'),
        PatternSpec('card_ending', r'payment method.{0,60}ending in \d{4}', 'Payment method: Visa ending in 1234'),
    ),
    negative_subject_patterns=_specs(
        'amazon_negative_subject',
        (r'recommendations for you', 'Recommendations for you'),
        (r'deals of the day', 'Deals of the Day'),
        (r'lightning deals', 'Lightning Deals'),
        (r'amazon prime video', 'New on Amazon Prime Video'),
        (r'kindle unlimited', 'Try Kindle Unlimited'),
        (r'subscribe.{0,30}save', 'Subscribe & Save'),
        (r'abandoned.{0,30}cart', 'Your abandoned cart'),
    ),
    negative_body_patterns=_specs(
        'amazon_negative_body',
        (r'unsubscribe', 'Unsubscribe'),
        (r'promotional', 'promotional email'),
        (r'this is not a bill', 'This is not a bill'),
        (r'marketing communication', 'marketing communication'),
    ),
    name_patterns=_specs(
        'amazon_name',
        (r'amazon\.com', 'amazon.com'),
        (r'amazon', 'Amazon'),
        (r'your order.{0,60}delivered', 'Your order was delivered'),
    ),
    confirmation_patterns=_specs(
        'amazon_confirmation',
        (r'order', 'order'),
        (r'shipped', 'shipped'),
        (r'prime', 'Prime'),
        (r'fulfillment', 'Fulfillment by Amazon'),
    ),
)

UBER = VendorProfile(
    name='Uber',
    sender_domains=_sender(r'uber\.(?:com|info)', 'noreply@uber.com'),
    subject_patterns=(
        PatternSpec('trip_receipt', r'your.{0,40}trip.{0,40}receipt', 'Your Tuesday trip receipt'),
        PatternSpec('ride_with_uber', r'ride with.{0,20}uber', 'Your ride with Uber'),
        PatternSpec('uber_eats_receipt', r'your uber eats receipt', 'Your Uber Eats receipt'),
        PatternSpec('trip_completed', r'trip completed', 'Trip completed'),
        PatternSpec('uber_receipt', r'uber.{0,40}receipt', 'Uber receipt'),
    ),
    body_patterns=(
        PatternSpec('trip_fare', rf'trip fare:?\s*{MONEY}', 'Trip Fare: $12.50'),
        PatternSpec('total', rf'total.{{0,40}}{MONEY}', 'Total $14.13'),
        PatternSpec('driver_rating', r'driver.{0,40}rating', 'Rate your driver'),
        PatternSpec('pickup_dropoff', r'pickup.{0,200}drop.?off', 'Pickup ... Drop-off'),
        PatternSpec('card_ending', r'payment method.{0,40}\*\d{4}', 'Payment method ****1234'),
        PatternSpec('order_total', rf'order total.{{0,40}}{MONEY}', 'Order total $31.20'),
    ),
    negative_subject_patterns=_specs(
        'uber_negative_subject',
        (r'invite.{0,30}friends', 'Invite your friends'),
        (r'promo.{0,20}code', 'Your promo code'),
        (r'ride.{0,20}credits', 'Ride credits'),
        (r'driver.{0,20}update', 'Driver update'),
    ),
    negative_body_patterns=_specs(
        'uber_negative_body',
        (r'promotional offer', 'promotional offer'),
        (r'invite friends', 'Invite friends'),
        (r'marketing', 'marketing'),
    ),
)

DOORDASH = VendorProfile(
    name='DoorDash',
    sender_domains=_sender(r'doordash\.com', 'no-reply@doordash.com'),
    subject_patterns=(
        PatternSpec('order_delivered', r'your.{0,40}order.{0,40}delivered', 'Your order has been delivered'),
        PatternSpec('order_receipt', r'order.{0,40}receipt', 'Order receipt'),
        PatternSpec('doordash_receipt', r'doordash.{0,40}receipt', 'DoorDash receipt'),
        PatternSpec('order_completed', r'order.{0,40}completed', 'Order completed'),
        PatternSpec('delivery_complete', r'delivery.{0,40}complete', 'Delivery complete'),
    ),
    body_patterns=(
        PatternSpec('order_total', rf'order total:?\s*{MONEY}', 'Order Total: $28.75'),
        PatternSpec('subtotal', rf'subtotal.{{0,40}}{MONEY}', 'Subtotal $22.00'),
        PatternSpec('delivery_fee', rf'delivery fee.{{0,40}}{MONEY}', 'Delivery Fee $2.99'),
        PatternSpec('dasher_tip', r'dasher.{0,20}tip', 'Dasher Tip'),
        PatternSpec('card_ending', r'payment method.{0,40}ending.{0,20}\d{4}', 'Payment method ending in 1234'),
        PatternSpec('order_number', r'order #\d{7,}', 'Order #1234567'),
    ),
    negative_subject_patterns=_specs(
        'doordash_negative_subject',
        (r'dashpass', 'Try DashPass'),
        (r'special.{0,20}offer', 'Special offer'),
        (r'free.{0,20}delivery', 'Free delivery this weekend'),
        (r'recommended.{0,20}you', 'Recommended for you'),
    ),
    negative_body_patterns=_specs(
        'doordash_negative_body',
        (r'promotional', 'promotional'),
        (r'marketing', 'marketing'),
        (r'unsubscribe', 'unsubscribe'),
    ),
    name_patterns=_specs(
        'doordash_name',
        (r'doordash', 'DoorDash'),
        (r'door\s*dash', 'Door Dash'),
        (r'dasher', 'Dasher'),
    ),
    confirmation_patterns=_specs(
        'doordash_confirmation',
        (r'restaurant', 'restaurant'),
        (r'delivery', 'delivery'),
        (r'dasher', 'Dasher'),
    ),
)

INSTACART = VendorProfile(
    name='Instacart',
    name_patterns=_specs(
        'instacart_name',
        (r'instacart', 'Instacart'),
        (r'your shopper', 'Your shopper'),
        (r'shopper.{0,40}picked', 'Your shopper picked items'),
    ),
    confirmation_patterns=_specs(
        'instacart_confirmation',
        (r'shopper', 'shopper'),
        (r'delivery', 'delivery'),
        (r'groceries', 'groceries'),
        (r'replacement', 'replacement'),
    ),
)

UBER_EATS = VendorProfile(
    name='Uber Eats',
    name_patterns=_specs(
        'uber_eats_name',
        (r'uber\s*eats', 'Uber Eats'),
    ),
    confirmation_patterns=_specs(
        'uber_eats_confirmation',
        (r'delivery', 'delivery'),
        (r'restaurant', 'restaurant'),
        (r'driver', 'driver'),
    ),
)

GRUBHUB = VendorProfile(
    name='Grubhub',
    name_patterns=_specs(
        'grubhub_name',
        (r'grub\s*hub', 'Grubhub'),
    ),
    confirmation_patterns=_specs(
        'grubhub_confirmation',
        (r'delivery', 'delivery'),
        (r'restaurant', 'restaurant'),
        (r'driver', 'driver'),
    ),
)

PAYPAL = VendorProfile(
    name='PayPal',
    name_patterns=_specs(
        'paypal_name',
        (r'paypal', 'PayPal'),
        (r'you sent a payment', 'You sent a payment'),
        (r'payment sent', 'Payment sent'),
    ),
    confirmation_patterns=_specs(
        'paypal_confirmation',
        (r'payment', 'payment'),
        (r'transaction', 'transaction'),
        (r'sent', 'sent'),
        (r'merchant', 'merchant'),
    ),
)

APPLE = VendorProfile(
    name='Apple',
    name_patterns=_specs(
        'apple_name',
        (r'apple.{0,30}store', 'Apple Store'),
        (r'apple.{0,30}receipt', 'Your receipt from Apple'),
        (r'app store', 'App Store'),
        (r'itunes', 'iTunes'),
    ),
    confirmation_patterns=_specs(
        'apple_confirmation',
        (r'purchase', 'purchase'),
        (r'receipt', 'receipt'),
        (r'\bapp\b', 'app'),
        (r'store', 'store'),
    ),
)

GENERIC = VendorProfile(
    name='generic',
    subject_patterns=(
        PatternSpec('receipt', r'receipt', 'Your receipt'),
        PatternSpec('order_confirmation', r'order.{0,40}confirmation', 'Order confirmation'),
        PatternSpec('payment_confirmation', r'payment.{0,40}confirmation', 'Payment confirmation'),
        PatternSpec('purchase_confirmation', r'purchase.{0,40}confirmation', 'Purchase confirmation'),
        PatternSpec('transaction_complete', r'transaction.{0,40}complete', 'Transaction complete'),
        PatternSpec('invoice', r'invoice', 'Invoice #1001'),
    ),
    body_patterns=(
        PatternSpec('total_paid', rf'total.{{0,40}}paid:?\s*{MONEY}', 'Total paid: $20.00'),
        PatternSpec('amount_charged', rf'amount.{{0,40}}charged:?\s*{MONEY}', 'Amount charged: $20.00'),
        PatternSpec('transaction_amount', rf'transaction.{{0,40}}amount:?\s*{MONEY}', 'Transaction amount: $20.00'),
        PatternSpec('order_total', rf'order.{{0,40}}total:?\s*{MONEY}', 'Order Total: $20.00'),
        PatternSpec('card_ending', r'payment.{0,40}method.{0,40}\*\d{4}', 'Payment method ****4242'),
        PatternSpec('transaction_id', r'transaction.{0,40}id:?\s*[A-Za-z0-9]{8,}', 'Transaction ID: 8F3K2L9Q'),
        PatternSpec('confirmation_number', r'confirmation.{0,40}number:?\s*[A-Za-z0-9]{6,}', 'Confirmation number: ABC123'),
    ),
    negative_subject_patterns=_specs(
        'generic_negative_subject',
        (r'newsletter', 'Our monthly newsletter'),
        (r'promotion', 'Spring promotion'),
        (r'\bdeals?\b', 'Deals for you'),
        (r'\bsale\b', 'Summer sale'),
        (r'marketing', 'marketing'),
        (r'unsubscribe', 'unsubscribe'),
        (r'survey', 'Quick survey'),
        (r'welcome', 'Welcome to the club'),
        (r'account.{0,30}created', 'Your account was created'),
        (r'password.{0,30}reset', 'Password reset'),
    ),
    negative_body_patterns=_specs(
        'generic_negative_body',
        (r'this.{0,20}not.{0,20}bill', 'This is not a bill'),
        (r'promotional.{0,20}purpose', 'for promotional purposes'),
        (r'marketing.{0,20}communication', 'marketing communication'),
        (r'unsubscribe', 'unsubscribe'),
        (r'survey', 'survey'),
        (r'account.{0,30}verification', 'account verification'),
        (r'password.{0,30}reset', 'password reset'),
    ),
)

GLOBAL_NEGATIVE_PATTERNS: Patterns = (
    PatternSpec('unsubscribe', r'unsubscribe', 'unsubscribe anytime'),
    PatternSpec('marketing', r'marketing', 'marketing preferences'),
    PatternSpec('newsletter', r'newsletter', 'Weekly newsletter'),
    PatternSpec('promotion', r'promotion', 'Holiday promotion'),
    PatternSpec('survey', r'survey', 'Take our survey'),
    PatternSpec('password_reset', r'password.{0,30}reset', 'Password reset request'),
    PatternSpec('account_suspended', r'account.{0,30}suspended', 'Your account has been suspended'),
    PatternSpec('verify_email', r'verify.{0,30}email', 'Verify your email address'),
    PatternSpec('account_verification', r'account.{0,30}verification', 'Account verification required'),
)


def _store(name: str, *patterns: str) -> StoreBrand:
    slug = re.sub(r'\W+', '_', name.lower()).strip('_')
    return StoreBrand(
        name=name,
        patterns=tuple(
            PatternSpec(name=f'store_{slug}_{i}', pattern=pattern, example=name)
            for i, pattern in enumerate(patterns, start=1)
        ),
    )


STORES: Tuple[StoreBrand, ...] = (
    # Coffee shops
    _store('Starbucks', r'starbucks', r'\bsbux\b'),
    _store('Dunkin', r'dunkin'),
    _store('Tim Hortons', r'tim\s*hortons'),

    # Grocery stores
    _store('Walmart', r'wal[\s-]?mart'),
    _store('Target', r'\btarget\b'),
    _store('Costco', r'costco'),
    _store('Safeway', r'safeway'),
    _store('Whole Foods', r'whole\s*foods'),
    _store('Kroger', r'kroger'),
    _store('Publix', r'publix'),
    _store('Trader Joes', r'trader\s*joe'),

    # Fast food
    _store('McDonalds', r'mcdonald'),
    _store('Subway', r'\bsubway\b'),
    _store('Chipotle', r'chipotle'),
    _store('KFC', r'\bkfc\b', r'kentucky\s+fried'),
    _store('Burger King', r'burger\s*king'),
    _store('Taco Bell', r'taco\s*bell'),
    _store('Chick-fil-A', r'chick[\s-]?fil[\s-]?a\b'),

    # Retail
    _store('Home Depot', r'home\s*depot'),
    _store('Best Buy', r'best\s*buy'),
    _store('Lowes', r"\blowe'?s\b"),
    _store('CVS', r'\bcvs\b'),
    _store('Walgreens', r'walgreens'),
    _store('Rite Aid', r'rite\s*aid'),

    # Gas stations
    _store('Shell', r'\bshell\b'),
    _store('Exxon', r'exxon'),
    _store('BP', r'\bbp\b'),
    _store('Chevron', r'chevron'),

    # Tech companies
    _store('Apple Store', r'apple\s*store', r'apple\s+retail'),
    _store('Microsoft Store', r'microsoft\s*store'),

    # Clothing/Department stores
    _store('Macys', r"\bmacy'?s\b"),
    _store('Nordstrom', r'nordstrom'),
    _store('TJ Maxx', r'tj\s*maxx'),
)

DOMAIN_VENDORS: Mapping[str, str] = MappingProxyType({
    'amazon': 'Amazon',
    'instacart': 'Instacart',
    'doordash': 'DoorDash',
    'uber': 'Uber Eats',
    'grubhub': 'Grubhub',
    'starbucks': 'Starbucks',
    'target': 'Target',
    'walmart': 'Walmart',
    'costco': 'Costco',
    'lyft': 'Lyft',
    'paypal': 'PayPal',
    'bestbuy': 'Best Buy',
    'homedepot': 'Home Depot',
})

# Company name followed by a business word; header lines only
BUSINESS_PATTERNS: Patterns = (
    PatternSpec(
        name='business_suffix',
        pattern=r"([A-Za-z][A-Za-z &']{0,40}?)[ \t]+(?:Store|Inc|LLC|Corp|Co\.|Restaurant|Cafe)(?![A-Za-z])",
        example="Joe's Pizza Restaurant",
    ),
    PatternSpec(
        name='order_confirmation_heading',
        pattern=r"([A-Za-z][A-Za-z &']{0,40}?)[ \t]+Order[ \t]+Confirmation",
        example='Bloom Order Confirmation',
    ),
    PatternSpec(
        name='thanks_for_shopping',
        pattern=r"Thank you for shopping at[ \t]+([A-Za-z0-9][A-Za-z0-9 &']{0,40})",
        example='Thank you for shopping at Corner Market',
    ),
)

# Words that mean the generic tier grabbed a product or status line, not a company
VENDOR_NOISE_PATTERNS: Patterns = _specs(
    'vendor_noise',
    (r'\bapple', 'Apple (product)'),
    (r'\bbanana', 'Bananas'),
    (r'\borange', 'Oranges'),
    (r'\bchicken\b', 'Chicken'),
    (r'\bbeef\b', 'Beef'),
    (r'\bpork\b', 'Pork'),
    (r'\bfish\b', 'Fish'),
    (r'\bbread\b', 'Bread'),
    (r'\bmilk\b', 'Milk'),
    (r'\bcheese\b', 'Cheese'),
    (r'\barriving\b', 'Arriving'),
    (r'\bpackage\b', 'Package'),
    (r'\bdelivered\b', 'Delivered'),
    (r'\bshipping\b', 'Shipping'),
    (r'\btracking\b', 'Tracking'),
    (r'\bpayment\b', 'Payment'),
    (r'\btotal\b', 'Total'),
    (r'\bsubtotal\b', 'Subtotal'),
    (r'\btax\b', 'Tax'),
    (r'\bfees?\b', 'Fee'),
    (r'\btips?\b', 'Tip'),
)


DEFAULT_CATALOG = PatternCatalog(
    profiles=(INSTACART, AMAZON, UBER, DOORDASH, UBER_EATS, GRUBHUB, PAYPAL, APPLE),
    generic_profile=GENERIC,
    global_negative_patterns=GLOBAL_NEGATIVE_PATTERNS,
    stores=STORES,
    domain_vendors=DOMAIN_VENDORS,
    business_patterns=BUSINESS_PATTERNS,
    vendor_noise_patterns=VENDOR_NOISE_PATTERNS,
)
