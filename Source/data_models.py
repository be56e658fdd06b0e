"""
Data models for SplitRight - Receipt splitting and text extraction
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

import config
from constants import TIP_PERCENTAGE, SPLIT_PROPORTIONAL, ROUNDING_EXACT
from money_utils import to_decimal


@dataclass
class Person:
    """A participant in the split"""
    id: str
    name: str
    color: str = ""


@dataclass
class ReceiptItem:
    """Represents a single line item on a receipt"""
    id: str
    name: str
    price: Decimal = Decimal("0")
    quantity: int = 1
    assigned_to: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.price = to_decimal(self.price)
        # Person ids keep their first-seen order, duplicates dropped
        self.assigned_to = list(dict.fromkeys(self.assigned_to))

    @property
    def total_price(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class SplitData:
    """The whole receipt as the caller owns it"""
    people: List[Person] = field(default_factory=list)
    items: List[ReceiptItem] = field(default_factory=list)
    tax: Decimal = Decimal("0")
    tip_type: str = TIP_PERCENTAGE
    tip_value: Decimal = Decimal("0")
    tax_tip_split_mode: str = SPLIT_PROPORTIONAL
    rounding_mode: str = ROUNDING_EXACT
    currency: str = config.CURRENCY_DEFAULT

    def __post_init__(self):
        self.tax = to_decimal(self.tax)
        self.tip_value = to_decimal(self.tip_value)

    def get_person(self, person_id: str) -> Optional[Person]:
        """Find a person by id"""
        for person in self.people:
            if person.id == person_id:
                return person
        return None

    def get_item(self, item_id: str) -> Optional[ReceiptItem]:
        """Find an item by id"""
        for item in self.items:
            if item.id == item_id:
                return item
        return None


@dataclass
class ExtractionResult:
    """Candidate items and metadata pulled from OCR text"""
    items: List[ReceiptItem] = field(default_factory=list)
    detected_currency: Optional[str] = None
    store_name: Optional[str] = None
    date_time: Optional[str] = None


@dataclass
class OCRProgress:
    """A single progress update from the OCR phase"""
    status: str
    progress: float = 0.0


@dataclass
class ProcessingMetrics:
    """Metrics for parallel processing performance"""
    workers_used: int = 0
    processing_time: float = 0.0
    items_detected: int = 0
    regions_processed: int = 0
