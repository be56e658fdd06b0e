"""
Receipt Parser module for SplitRight
Parses OCR text to extract candidate items, currency, store name and date/time.

Parsing is best effort: malformed text produces fewer or empty results,
never an exception.
"""

import re
import uuid
import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional

import config
from constants import CURRENCIES, CURRENCY_GLYPHS, CURRENCY_TEXT_MARKERS, PATTERNS
from data_models import ExtractionResult, ReceiptItem
from text_heuristics import clean_item_name, has_letter, is_non_item_line, parse_price

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinePattern:
    """A line shape with the groups that hold the name and the price"""
    name: str
    regex: re.Pattern
    name_group: int
    price_group: int


# Tried in order, the first one producing a valid item wins
LINE_PATTERNS = (
    LinePattern('name_price', re.compile(PATTERNS['name_price']), 1, 2),
    LinePattern('name_price_yen_suffix', re.compile(PATTERNS['name_price_yen_suffix']), 1, 2),
    LinePattern('currency_price_name', re.compile(PATTERNS['currency_price_name']), 2, 1),
)

DATE_PATTERNS = (
    re.compile(PATTERNS['date_day_first']),
    re.compile(PATTERNS['date_year_first']),
)
IDEOGRAPHIC_DATE = re.compile(PATTERNS['date_ideographic'])
TIME_PATTERN = re.compile(PATTERNS['time'], re.IGNORECASE)

_LEADING_DATE = re.compile(PATTERNS['leading_date'])
_CURRENCY_AMOUNT = re.compile(PATTERNS['currency_amount'])
_HEADER_KEYWORD = re.compile(PATTERNS['header_keyword'], re.IGNORECASE)


def _split_lines(text) -> List[str]:
    """Non-blank, stripped lines of the text"""
    if not isinstance(text, str):
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


class ReceiptParser:
    """Parses OCR text into an ExtractionResult"""

    def _generate_item_id(self) -> str:
        """Generate unique item ID"""
        return f"item_{uuid.uuid4().hex}"

    def _item_from_line(self, line: str) -> Optional[ReceiptItem]:
        """Try each line shape in order and build the first valid item"""
        for pattern in LINE_PATTERNS:
            match = pattern.regex.search(line)
            if not match:
                continue

            raw_name = match.group(pattern.name_group).strip()
            price = parse_price(match.group(pattern.price_group))
            name = clean_item_name(raw_name)

            if price > 0 and 0 < len(raw_name) < config.ITEM_RAW_NAME_LIMIT and name:
                logger.debug("  %s matched %r -> %s = %s", pattern.name, line, name, price)
                return ReceiptItem(
                    id=self._generate_item_id(),
                    name=name,
                    price=price,
                    quantity=1,
                )

        return None

    def parse_items(self, text: str) -> List[ReceiptItem]:
        """Extract candidate items, one at most per line"""
        items = []

        for line in _split_lines(text):
            if is_non_item_line(line):
                logger.debug("  Skipping non-item line: %r", line)
                continue

            item = self._item_from_line(line)
            if item:
                items.append(item)

        return items

    def detect_currency(self, text: str) -> Optional[str]:
        """Most frequent currency symbol in the text, None when there is none"""
        if not isinstance(text, str):
            return None

        counts = Counter()
        for currency in CURRENCIES:
            symbol = currency.symbol
            glyphs = CURRENCY_GLYPHS.get(symbol, re.escape(symbol))
            counts[symbol] = len(re.findall(glyphs, text))

            marker = CURRENCY_TEXT_MARKERS.get(symbol)
            if marker:
                counts[symbol] += len(re.findall(marker, text))

        detected = None
        best = 0
        for currency in CURRENCIES:
            if counts[currency.symbol] > best:
                best = counts[currency.symbol]
                detected = currency.symbol

        return detected

    def extract_store_name(self, text: str) -> Optional[str]:
        """First plausible store name among the top lines"""
        for line in _split_lines(text)[:config.STORE_NAME_SCAN_LINES]:
            if (
                _LEADING_DATE.match(line)
                or _CURRENCY_AMOUNT.search(line)
                or _HEADER_KEYWORD.match(line)
                or len(line) > config.STORE_NAME_MAX_LENGTH
                or len(line) < 2
            ):
                continue

            if has_letter(line):
                return line[:config.STORE_NAME_MAX_LENGTH]

        return None

    def _find_date(self, line: str) -> Optional[str]:
        """Date on a line, ideographic dates normalized to YYYY-MM-DD"""
        for pattern in DATE_PATTERNS:
            match = pattern.search(line)
            if match:
                return match.group(1)

        match = IDEOGRAPHIC_DATE.search(line)
        if match:
            year, month, day = match.groups()
            return f"{year}-{int(month):02d}-{int(day):02d}"

        return None

    def _find_time(self, line: str) -> Optional[str]:
        match = TIME_PATTERN.search(line)
        return match.group(1) if match else None

    def extract_date_time(self, text: str) -> Optional[str]:
        """Date and time from the top lines as "date time", date, or time"""
        lines = _split_lines(text)

        for index, line in enumerate(lines[:config.DATE_SCAN_LINES]):
            date_str = self._find_date(line)
            if date_str:
                time_str = self._find_time(line)
                if not time_str and index + 1 < len(lines):
                    time_str = self._find_time(lines[index + 1])
                return f"{date_str} {time_str}" if time_str else date_str

            time_str = self._find_time(line)
            if time_str:
                radius = config.DATE_SEARCH_RADIUS
                start = max(0, index - radius)
                end = min(len(lines) - 1, index + radius)
                for nearby in lines[start:end + 1]:
                    date_str = self._find_date(nearby)
                    if date_str:
                        return f"{date_str} {time_str}"
                return time_str

        return None

    def parse(self, ocr_text: str) -> ExtractionResult:
        """Parse OCR text to extract receipt items and metadata"""
        if not isinstance(ocr_text, str):
            logger.warning("Expected OCR text, got %s", type(ocr_text).__name__)
            return ExtractionResult()

        logger.debug("Starting receipt parsing, %d characters", len(ocr_text))

        result = ExtractionResult(
            items=self.parse_items(ocr_text),
            detected_currency=self.detect_currency(ocr_text),
            store_name=self.extract_store_name(ocr_text),
            date_time=self.extract_date_time(ocr_text),
        )

        logger.info(
            "Parsed %d items (currency=%s, store=%s, date=%s)",
            len(result.items), result.detected_currency, result.store_name, result.date_time,
        )
        return result
