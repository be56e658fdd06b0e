from decimal import Decimal
from collections import namedtuple

Currency = namedtuple('Currency', ['symbol', 'code', 'label'])

# Shared by detection and formatting, order is the detection tie-break
CURRENCIES = [
    Currency('¥', 'JPY', '¥ (Yen)'),
    Currency('$', 'USD', '$ (Dollar)'),
    Currency('€', 'EUR', '€ (Euro)'),
    Currency('£', 'GBP', '£ (Pound)'),
    Currency('₩', 'KRW', '₩ (Won)'),
    Currency('₱', 'PHP', '₱ (Peso)'),
    Currency('฿', 'THB', '฿ (Baht)'),
]

YEN_SYMBOL = '¥'

# Variant glyphs folded into one currency when counting
CURRENCY_GLYPHS = {
    '¥': r'[¥￥]',
    '$': r'\$',
    '€': r'€',
    '£': r'£',
    '₩': r'₩',
    '₱': r'₱',
    '฿': r'฿',
}

# Textual markers that count towards a currency
CURRENCY_TEXT_MARKERS = {
    '¥': r'円',
}

PERSON_COLORS = [
    'hsl(187, 85%, 43%)',
    'hsl(16, 85%, 60%)',
    'hsl(262, 70%, 60%)',
    'hsl(152, 60%, 45%)',
    'hsl(32, 90%, 55%)',
    'hsl(340, 75%, 55%)',
    'hsl(200, 80%, 50%)',
    'hsl(45, 90%, 50%)',
]

TIP_PERCENTAGE = 'percentage'
TIP_FIXED = 'fixed'
TIP_TYPES = (TIP_PERCENTAGE, TIP_FIXED)

SPLIT_PROPORTIONAL = 'proportional'
SPLIT_EQUAL = 'equal'
SPLIT_MODES = (SPLIT_PROPORTIONAL, SPLIT_EQUAL)

ROUNDING_EXACT = 'exact'
ROUNDING_NEAREST_1 = 'nearest-1'
ROUNDING_NEAREST_5 = 'nearest-5'
ROUNDING_NEAREST_10 = 'nearest-10'
ROUNDING_MODES = (ROUNDING_EXACT, ROUNDING_NEAREST_1, ROUNDING_NEAREST_5, ROUNDING_NEAREST_10)

DECIMAL_QUANTIZE = Decimal("0.01")
ROUNDING_STEPS = {
    ROUNDING_NEAREST_1: Decimal("1"),
    ROUNDING_NEAREST_5: Decimal("5"),
    ROUNDING_NEAREST_10: Decimal("10"),
}

PRICE_NUMBER = r'\d{1,3}(?:,?\d{3})*(?:\.\d{2})?'

PATTERNS = {
    # Item line shapes
    'name_price': r'^(.+?)\s+[¥￥$]?\s*(' + PRICE_NUMBER + r')\s*$',
    'name_price_yen_suffix': r'^(.+?)\s+(' + PRICE_NUMBER + r')\s*円?\s*$',
    'currency_price_name': r'[¥￥$]\s*(' + PRICE_NUMBER + r')\s+(.+)',

    # Non-item lines
    'non_item_keyword': (
        r'^(?:subtotal|sub-total|合計|小計|total|税|tax|tip|チップ|change|お釣り|'
        r'cash|現金|card|カード|visa|mastercard|thank|ありがとう|receipt|レシート|'
        r'date|日付|\d{1,2}[/\-]\d{1,2})'
    ),
    'numeric_only': r'^\d{2,}$',

    # Store name
    'leading_date': r'^\d{1,2}[/\-]\d{1,2}',
    'currency_amount': r'[¥￥$€£₩₱฿]\s*\d',
    'header_keyword': r'^(?:subtotal|total|tax|tip|receipt|date|time|thank|ありがとう|領収書|レシート)',

    # Date and time
    'date_day_first': r'(?<!\d)(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})(?!\d)',
    'date_year_first': r'(?<!\d)(\d{4}[/\-]\d{1,2}[/\-]\d{1,2})(?!\d)',
    'date_ideographic': r'(?<!\d)(\d{4})年\s*(\d{1,2})月\s*(\d{1,2})日',
    'time': r'(?<!\d)(\d{1,2}:\d{2}(?::\d{2})?(?:\s*(?:AM|PM|午前|午後))?)(?![\d:])',

    # Price cleanup
    'price_separators': r'[,\s]',
    'leading_number': r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)',
    'name_edges': r'^[\s\-\*\.•・]+|[\s\-\*\.•・]+$',
}
