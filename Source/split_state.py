"""
Receipt state operations for SplitRight
Every function takes a SplitData and returns an updated copy; the input is left untouched.
"""

import uuid
from dataclasses import replace
from typing import Iterable, List

import config
from constants import PERSON_COLORS, TIP_TYPES, SPLIT_MODES, ROUNDING_MODES
from data_models import Person, ReceiptItem, SplitData
from money_utils import to_decimal


def generate_id(prefix: str) -> str:
    """Generate a unique id, never reused"""
    return f"{prefix}_{uuid.uuid4().hex}"


def default_split_data() -> SplitData:
    """A fresh, empty receipt"""
    return SplitData(currency=config.CURRENCY_DEFAULT)


def _copy_item(item: ReceiptItem, **changes) -> ReceiptItem:
    changes.setdefault('assigned_to', list(item.assigned_to))
    return replace(item, **changes)


def _copy_items(data: SplitData) -> List[ReceiptItem]:
    return [_copy_item(item) for item in data.items]


# ---- People ----

def add_person(data: SplitData, name: str) -> SplitData:
    """Add a person with the next color in the palette"""
    name = name.strip()
    if not name:
        raise ValueError("Person name cannot be empty")

    person = Person(
        id=generate_id("person"),
        name=name,
        color=PERSON_COLORS[len(data.people) % len(PERSON_COLORS)],
    )
    return replace(data, people=list(data.people) + [person], items=_copy_items(data))


def update_person(data: SplitData, person_id: str, name: str) -> SplitData:
    """Rename a person"""
    people = [
        replace(person, name=name.strip()) if person.id == person_id else person
        for person in data.people
    ]
    return replace(data, people=people, items=_copy_items(data))


def remove_person(data: SplitData, person_id: str) -> SplitData:
    """Remove a person and unassign them from every item"""
    people = [person for person in data.people if person.id != person_id]
    items = [
        _copy_item(item, assigned_to=[pid for pid in item.assigned_to if pid != person_id])
        for item in data.items
    ]
    return replace(data, people=people, items=items)


# ---- Items ----

def add_item(data: SplitData, name: str, price, quantity: int = 1) -> SplitData:
    """Add an unassigned item"""
    if quantity < 1:
        raise ValueError("Quantity must be a positive integer")
    price = to_decimal(price)
    if price < 0:
        raise ValueError("Price cannot be negative")

    item = ReceiptItem(id=generate_id("item"), name=name.strip(), price=price, quantity=quantity)
    return replace(data, items=_copy_items(data) + [item])


def add_items(data: SplitData, items: Iterable[ReceiptItem]) -> SplitData:
    """Add candidate items, e.g. from extraction, with fresh ids and no assignment"""
    new_items = [
        ReceiptItem(
            id=generate_id("item"),
            name=item.name,
            price=item.price,
            quantity=item.quantity,
        )
        for item in items
    ]
    return replace(data, items=_copy_items(data) + new_items)


def update_item(data: SplitData, item_id: str, **changes) -> SplitData:
    """Change name, price or quantity of an item"""
    allowed = {'name', 'price', 'quantity'}
    unknown = set(changes) - allowed
    if unknown:
        raise ValueError(f"Cannot update item fields: {', '.join(sorted(unknown))}")
    if 'quantity' in changes and changes['quantity'] < 1:
        raise ValueError("Quantity must be a positive integer")
    if 'price' in changes:
        changes['price'] = to_decimal(changes['price'])
        if changes['price'] < 0:
            raise ValueError("Price cannot be negative")

    items = [
        _copy_item(item, **changes) if item.id == item_id else _copy_item(item)
        for item in data.items
    ]
    return replace(data, items=items)


def remove_item(data: SplitData, item_id: str) -> SplitData:
    items = [_copy_item(item) for item in data.items if item.id != item_id]
    return replace(data, items=items)


# ---- Assignment ----

def _known_people(data: SplitData, person_ids: Iterable[str]) -> List[str]:
    known = {person.id for person in data.people}
    return [pid for pid in dict.fromkeys(person_ids) if pid in known]


def assign_item(data: SplitData, item_id: str, person_ids: Iterable[str]) -> SplitData:
    """Replace an item's assignment"""
    return assign_items(data, [item_id], person_ids)


def assign_items(data: SplitData, item_ids: Iterable[str], person_ids: Iterable[str]) -> SplitData:
    """Replace the assignment of several items at once"""
    targets = set(item_ids)
    assigned = _known_people(data, person_ids)
    items = [
        _copy_item(item, assigned_to=list(assigned)) if item.id in targets else _copy_item(item)
        for item in data.items
    ]
    return replace(data, items=items)


def assign_unassigned_to_everyone(data: SplitData) -> SplitData:
    """Assign unassigned items equally to all people"""
    everyone = [person.id for person in data.people]
    items = [
        _copy_item(item) if item.assigned_to else _copy_item(item, assigned_to=list(everyone))
        for item in data.items
    ]
    return replace(data, items=items)


def unassigned_items(data: SplitData) -> List[ReceiptItem]:
    return [item for item in data.items if not item.assigned_to]


# ---- Tax, tip, rounding, currency ----

def set_tax(data: SplitData, amount) -> SplitData:
    amount = to_decimal(amount)
    if amount < 0:
        raise ValueError("Tax cannot be negative")
    return replace(data, tax=amount, items=_copy_items(data))


def set_tip(data: SplitData, tip_type: str, value) -> SplitData:
    if tip_type not in TIP_TYPES:
        raise ValueError(f"Unknown tip type: {tip_type}")
    value = to_decimal(value)
    if value < 0:
        raise ValueError("Tip cannot be negative")
    return replace(data, tip_type=tip_type, tip_value=value, items=_copy_items(data))


def set_tax_tip_split_mode(data: SplitData, mode: str) -> SplitData:
    if mode not in SPLIT_MODES:
        raise ValueError(f"Unknown tax/tip split mode: {mode}")
    return replace(data, tax_tip_split_mode=mode, items=_copy_items(data))


def set_rounding_mode(data: SplitData, mode: str) -> SplitData:
    if mode not in ROUNDING_MODES:
        raise ValueError(f"Unknown rounding mode: {mode}")
    return replace(data, rounding_mode=mode, items=_copy_items(data))


def set_currency(data: SplitData, currency: str) -> SplitData:
    return replace(data, currency=currency, items=_copy_items(data))
