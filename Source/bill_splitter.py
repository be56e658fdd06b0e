"""
Bill Splitter module for SplitRight
Computes each person's share of a receipt so the shares add up to the rounded total
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from constants import SPLIT_EQUAL
from data_models import Person, SplitData
from money_utils import (
    ZERO, apply_rounding, calculate_subtotal, calculate_tip, safe_divide, to_decimal,
)

logger = logging.getLogger(__name__)


@dataclass
class ItemShare:
    """One item's contribution to a person's subtotal"""
    item_id: str
    name: str
    share: Decimal
    split_count: int


@dataclass
class PersonBreakdown:
    """How a person's final share was put together"""
    person: Person
    items: List[ItemShare] = field(default_factory=list)
    subtotal: Decimal = ZERO
    tax_share: Decimal = ZERO
    tip_share: Decimal = ZERO
    final_share: Decimal = ZERO


@dataclass
class SplitSummary:
    """Receipt-level totals next to the sum of the allocated shares"""
    subtotal: Decimal
    tax: Decimal
    tip: Decimal
    total: Decimal
    rounded_total: Decimal
    shares_total: Decimal


class BillSplitter:
    """Allocates a receipt between its people

    The splitter reads a caller-owned SplitData and never modifies it.
    Raw shares split every item equally among its assignees and add a
    tax and tip share, either evenly per person or in proportion to the
    person's item subtotal. Final shares are rounded per person in id
    order, and the last person takes whatever is needed to make the
    shares sum to the rounded total.
    """

    def __init__(self, data: SplitData):
        self.data = data

    @property
    def subtotal(self) -> Decimal:
        return calculate_subtotal(self.data.items)

    @property
    def tip(self) -> Decimal:
        return calculate_tip(self.subtotal, self.data.tip_type, self.data.tip_value)

    @property
    def tax(self) -> Decimal:
        return to_decimal(self.data.tax)

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax + self.tip

    def ordered_people(self) -> List[Person]:
        """People in the order used for rounding, by id"""
        return sorted(self.data.people, key=lambda person: person.id)

    def remainder_holder(self) -> Optional[str]:
        """Id of the person who absorbs the rounding residual"""
        ordered = self.ordered_people()
        return ordered[-1].id if ordered else None

    def calculate_person_subtotal(self, person_id: str) -> Decimal:
        """Sum of the person's equal part of every item assigned to them"""
        subtotal = ZERO
        for item in self.data.items:
            if person_id in item.assigned_to:
                subtotal += safe_divide(item.total_price, len(item.assigned_to))
        return subtotal

    def _tax_tip_shares(self, person_subtotal: Decimal) -> Tuple[Decimal, Decimal]:
        """Tax and tip owed on top of a person's items"""
        if self.data.tax_tip_split_mode == SPLIT_EQUAL:
            people_count = len(self.data.people)
            return safe_divide(self.tax, people_count), safe_divide(self.tip, people_count)

        proportion = safe_divide(person_subtotal, self.subtotal)
        return self.tax * proportion, self.tip * proportion

    def calculate_person_share(self, person_id: str) -> Decimal:
        """Raw share before rounding"""
        if self.subtotal == 0:
            return ZERO

        person_subtotal = self.calculate_person_subtotal(person_id)
        tax_share, tip_share = self._tax_tip_shares(person_subtotal)
        return to_decimal(person_subtotal + tax_share + tip_share)

    def calculate_final_shares(self) -> Dict[str, Decimal]:
        """Rounded share per person id, summing to the rounded total"""
        mode = self.data.rounding_mode
        ordered = self.ordered_people()
        shares: Dict[str, Decimal] = {}

        if not ordered:
            return shares

        running_total = ZERO
        for person in ordered[:-1]:
            rounded_share = apply_rounding(self.calculate_person_share(person.id), mode)
            shares[person.id] = rounded_share
            running_total += rounded_share

        last = ordered[-1]
        remainder = apply_rounding(self.total, mode) - apply_rounding(running_total, mode)
        if remainder < 0:
            logger.warning(
                "Rounding residual %s for %s is negative, clamping to 0", remainder, last.id
            )
            remainder = apply_rounding(ZERO, mode)
        shares[last.id] = remainder

        logger.debug("Final shares (%s): %s", mode, shares)
        return shares

    def person_breakdown(self) -> List[PersonBreakdown]:
        """Per-person item lines, tax, tip and final share in people order"""
        shares = self.calculate_final_shares()
        breakdowns = []

        for person in self.data.people:
            breakdown = PersonBreakdown(person=person)

            for item in self.data.items:
                if person.id in item.assigned_to:
                    split_count = len(item.assigned_to)
                    breakdown.items.append(ItemShare(
                        item_id=item.id,
                        name=item.name,
                        share=safe_divide(item.total_price, split_count),
                        split_count=split_count,
                    ))

            breakdown.subtotal = self.calculate_person_subtotal(person.id)
            if self.subtotal != 0:
                breakdown.tax_share, breakdown.tip_share = self._tax_tip_shares(breakdown.subtotal)
            breakdown.final_share = shares.get(person.id, ZERO)
            breakdowns.append(breakdown)

        return breakdowns

    def summary(self) -> SplitSummary:
        """Totals for the receipt and for the allocated shares"""
        shares = self.calculate_final_shares()
        return SplitSummary(
            subtotal=self.subtotal,
            tax=self.tax,
            tip=self.tip,
            total=self.total,
            rounded_total=apply_rounding(self.total, self.data.rounding_mode),
            shares_total=sum(shares.values(), ZERO),
        )


def calculate_final_shares(data: SplitData) -> Dict[str, Decimal]:
    """Shortcut for BillSplitter(data).calculate_final_shares()"""
    return BillSplitter(data).calculate_final_shares()
