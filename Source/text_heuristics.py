"""
Text heuristics for SplitRight
Line classification, price parsing and item name cleanup for OCR text
"""

import re
from decimal import Decimal

import config
from constants import PATTERNS
from money_utils import ZERO, to_decimal

_NON_ITEM_KEYWORD = re.compile(PATTERNS['non_item_keyword'], re.IGNORECASE)
_NUMERIC_ONLY = re.compile(PATTERNS['numeric_only'])
_PRICE_SEPARATORS = re.compile(PATTERNS['price_separators'])
_LEADING_NUMBER = re.compile(PATTERNS['leading_number'])
_NAME_EDGES = re.compile(PATTERNS['name_edges'])


def has_letter(text: str) -> bool:
    """True if the text holds at least one letter or ideograph"""
    return any(char.isalpha() for char in text)


def is_non_item_line(line: str) -> bool:
    """Check if a line is a header, footer or total rather than an item"""
    if not isinstance(line, str):
        return True

    line = line.strip()
    if not line:
        return True

    if _NON_ITEM_KEYWORD.match(line):
        return True

    if _NUMERIC_ONLY.match(line):
        return True

    return not has_letter(line)


def parse_price(text: str) -> Decimal:
    """Parse a price string, returning 0 when no number is found"""
    if not isinstance(text, str):
        return ZERO

    cleaned = _PRICE_SEPARATORS.sub('', text)
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return ZERO

    return to_decimal(match.group(0))


def clean_item_name(text: str) -> str:
    if not isinstance(text, str):
        return ""

    name = _NAME_EDGES.sub('', text)
    name = ' '.join(name.split())
    return name[:config.ITEM_NAME_MAX_LENGTH].rstrip()
