"""
CLI Interface module for SplitRight
Command-line interface for receipt scanning and bill splitting
"""

from typing import List, Optional

import split_state
from bill_splitter import BillSplitter
from constants import (
    CURRENCIES, ROUNDING_MODES, SPLIT_MODES, TIP_FIXED, TIP_PERCENTAGE,
)
from data_models import ExtractionResult, SplitData
from money_utils import format_currency
from ocr_processor import OCRError, extract_receipt_items
from utils import (
    clean_text_for_display, create_progress_callback, try_parse_decimal, try_parse_int,
    validate_image_path, validate_menu_choice,
)


def print_extraction(result: ExtractionResult, currency: str):
    """Show what was read from a receipt"""
    if result.store_name:
        print(f"🏪 Store: {clean_text_for_display(result.store_name, 50)}")
    if result.date_time:
        print(f"🕒 Date:  {result.date_time}")
    if result.detected_currency:
        print(f"💱 Currency: {result.detected_currency}")

    if not result.items:
        print("\n⚠ No items found in receipt")
        return

    print(f"\n📋 Found {len(result.items)} items:")
    for i, item in enumerate(result.items, 1):
        print(f"  {i:2}. {item.name[:40]:40} {format_currency(item.price, currency):>12}")


class SplitRightCLI:
    """Command-line interface for SplitRight"""

    def __init__(self, num_workers: Optional[int] = None):
        self.data: SplitData = split_state.default_split_data()
        self.num_workers = num_workers

    def display_banner(self):
        """Display application banner"""
        print("\n" + "="*60)
        print("🧾  SPLITRIGHT - Receipt Splitter")
        print("Scan, assign and split to the exact cent")
        print("="*60)

    def _money(self, amount) -> str:
        return format_currency(amount, self.data.currency)

    def _select_people(self, prompt: str) -> Optional[List[str]]:
        """Ask for comma-separated person numbers, None if the input is invalid"""
        for i, person in enumerate(self.data.people, 1):
            print(f"{i}. {person.name}")
        selections = input(prompt).strip()

        indices = [try_parse_int(part) for part in selections.split(',')]
        if not indices or any(idx is None or not 1 <= idx <= len(self.data.people) for idx in indices):
            return None
        return [self.data.people[idx - 1].id for idx in indices]

    def process_receipt(self, image_path: str):
        """Scan a receipt image and add the detected items"""
        print(f"\n📸 Processing receipt: {image_path}")

        try:
            result = extract_receipt_items(
                image_path,
                on_progress=create_progress_callback("Scanning"),
                num_workers=self.num_workers,
            )
        except OCRError as e:
            print(f"\n❌ Could not read receipt: {e}")
            return

        if result.detected_currency:
            self.data = split_state.set_currency(self.data, result.detected_currency)

        print_extraction(result, self.data.currency)
        self.data = split_state.add_items(self.data, result.items)

    def display_items(self):
        """Display current items"""
        if not self.data.items:
            print("\n⚠ No items yet")
            return

        print("\n" + "="*50)
        print("📋 RECEIPT ITEMS")
        print("="*50)

        for i, item in enumerate(self.data.items, 1):
            names = [self.data.get_person(pid).name for pid in item.assigned_to]
            assigned = ', '.join(names) if names else 'Unassigned'
            print(f"{i:2}. {item.name[:30]:30} {item.quantity:2}x {self._money(item.price):>10} [{assigned}]")

    def manage_people(self):
        """Manage people for bill splitting"""
        print("\n" + "="*50)
        print("👥 PEOPLE MANAGEMENT")
        print("="*50)

        while True:
            names = ', '.join(person.name for person in self.data.people)
            print(f"\nCurrent people: {names or 'None'}")
            print("\n1. Add person")
            print("2. Rename person")
            print("3. Remove person")
            print("4. Done")

            choice = validate_menu_choice(input("\nChoice: "), ['1', '2', '3', '4']) or ''
            print("-"*50)

            if choice == '1':
                name = input("Enter name: ").strip()
                if name:
                    self.data = split_state.add_person(self.data, name)
                    print(f"✓ Added {name}")
            elif choice in ('2', '3'):
                if not self.data.people:
                    print("⚠ No people added yet")
                    continue
                selected = self._select_people("Select person number: ")
                if not selected or len(selected) != 1:
                    print("Invalid selection")
                    continue
                if choice == '2':
                    name = input("New name: ").strip()
                    if name:
                        self.data = split_state.update_person(self.data, selected[0], name)
                        print(f"✓ Renamed to {name}")
                else:
                    removed = self.data.get_person(selected[0])
                    self.data = split_state.remove_person(self.data, selected[0])
                    print(f"✓ Removed {removed.name}")
            elif choice == '4':
                break

    def manage_items(self):
        """Add, edit and delete items by hand"""
        while True:
            self.display_items()
            print("\n1. Add item")
            print("2. Edit item price")
            print("3. Delete item")
            print("4. Done")

            choice = validate_menu_choice(input("\nChoice: "), ['1', '2', '3', '4']) or ''
            print("-"*50)

            if choice == '1':
                name = input("Item name: ").strip()
                price = try_parse_decimal(input("Unit price: "))
                quantity = try_parse_int(input("Quantity [1]: ") or "1")
                if not name or price is None or price < 0 or quantity is None or quantity < 1:
                    print("Invalid item")
                    continue
                self.data = split_state.add_item(self.data, name, price, quantity)
                print(f"✓ Added {name}")
            elif choice in ('2', '3'):
                idx = try_parse_int(input("Item number: "))
                if idx is None or not 1 <= idx <= len(self.data.items):
                    print("Invalid selection")
                    continue
                item = self.data.items[idx - 1]
                if choice == '2':
                    price = try_parse_decimal(input("New unit price: "))
                    if price is None or price < 0:
                        print("Invalid amount")
                        continue
                    self.data = split_state.update_item(self.data, item.id, price=price)
                    print(f"✓ Updated {item.name}")
                else:
                    self.data = split_state.remove_item(self.data, item.id)
                    print(f"✓ Deleted {item.name}")
            elif choice == '4':
                break

    def assign_items(self):
        """Assign items to people"""
        if not self.data.items:
            print("\n⚠ No receipt items to assign")
            return

        if not self.data.people:
            print("\n⚠ No people added yet")
            return

        print("\n" + "="*50)
        print("🔍 ITEM ASSIGNMENT")
        print("="*50)

        for item in list(self.data.items):
            print(f"\n{item.name} - {self._money(item.total_price)}")

            print("\n1. Assign to everyone")
            print("2. Assign to specific people")
            print("3. Skip")

            choice = validate_menu_choice(input("Choice: "), ['1', '2', '3']) or ''
            print("-"*50)

            if choice == '1':
                everyone = [person.id for person in self.data.people]
                self.data = split_state.assign_item(self.data, item.id, everyone)
                print("✓ Assigned to everyone")
            elif choice == '2':
                selected = self._select_people("Enter person numbers (comma-separated): ")
                if selected is None:
                    print("Invalid selection")
                    continue
                self.data = split_state.assign_item(self.data, item.id, selected)
                names = ', '.join(self.data.get_person(pid).name for pid in selected)
                print(f"✓ Assigned to {names}")

    def set_tax_and_tip(self):
        """Set tax, tip and how they are split"""
        tax = try_parse_decimal(input("\nTax amount: "))
        if tax is None or tax < 0:
            print("Invalid amount")
            return
        self.data = split_state.set_tax(self.data, tax)

        kind = validate_menu_choice(input("Tip as 1) percentage or 2) fixed amount: "), ['1', '2'])
        value = try_parse_decimal(input("Tip value: "))
        if kind is None or value is None or value < 0:
            print("Invalid tip")
            return
        tip_type = TIP_PERCENTAGE if kind == '1' else TIP_FIXED
        self.data = split_state.set_tip(self.data, tip_type, value)

        for i, mode in enumerate(SPLIT_MODES, 1):
            print(f"{i}. Split tax & tip {mode}")
        mode = validate_menu_choice(input("Choice: "), [str(i) for i in range(1, len(SPLIT_MODES) + 1)])
        if mode:
            self.data = split_state.set_tax_tip_split_mode(self.data, SPLIT_MODES[int(mode) - 1])

        splitter = BillSplitter(self.data)
        print(f"✓ Tax: {self._money(splitter.tax)}  Tip: {self._money(splitter.tip)}")
        print(f"New total: {self._money(splitter.total)}")

    def set_rounding(self):
        for i, mode in enumerate(ROUNDING_MODES, 1):
            print(f"{i}. {mode}")
        choice = validate_menu_choice(input("Rounding: "), [str(i) for i in range(1, len(ROUNDING_MODES) + 1)])
        if choice is None:
            print("Invalid selection")
            return
        self.data = split_state.set_rounding_mode(self.data, ROUNDING_MODES[int(choice) - 1])
        print(f"✓ Rounding: {self.data.rounding_mode}")

    def set_currency(self):
        for i, currency in enumerate(CURRENCIES, 1):
            print(f"{i}. {currency.label}")
        choice = validate_menu_choice(input("Currency: "), [str(i) for i in range(1, len(CURRENCIES) + 1)])
        if choice is None:
            print("Invalid selection")
            return
        self.data = split_state.set_currency(self.data, CURRENCIES[int(choice) - 1].symbol)
        print(f"✓ Currency: {self.data.currency}")

    def show_summary(self):
        """Calculate and display each person's share"""
        if not self.data.people or not self.data.items:
            print("\n⚠ Need people and items to split")
            return

        unassigned = split_state.unassigned_items(self.data)
        if unassigned:
            print(f"\n⚠ {len(unassigned)} items are unassigned. Splitting equally among all people.")
            self.data = split_state.assign_unassigned_to_everyone(self.data)

        splitter = BillSplitter(self.data)
        summary = splitter.summary()

        print("\n" + "="*50)
        print("💰 INDIVIDUAL SHARES")
        print("="*50)

        for breakdown in splitter.person_breakdown():
            print(f"\n{breakdown.person.name:20} {self._money(breakdown.final_share):>12}")
            for line in breakdown.items:
                split_text = f" (÷{line.split_count})" if line.split_count > 1 else ""
                print(f"  • {line.name}{split_text}: {self._money(line.share)}")
            if summary.tax > 0:
                print(f"  • Tax: {self._money(breakdown.tax_share)}")
            if summary.tip > 0:
                print(f"  • Tip: {self._money(breakdown.tip_share)}")

        print("\n" + "-"*50)
        print(f"{'SUBTOTAL:':30} {self._money(summary.subtotal):>12}")
        print(f"{'TAX:':30} {self._money(summary.tax):>12}")
        print(f"{'TIP:':30} {self._money(summary.tip):>12}")
        print(f"{'TOTAL:':30} {self._money(summary.total):>12}")
        print(f"{'SHARES (' + self.data.rounding_mode + '):':30} {self._money(summary.shares_total):>12}")

        holder = self.data.get_person(splitter.remainder_holder())
        if summary.shares_total != summary.total:
            print(f"Rounding difference absorbed by {holder.name}")

    def run(self):
        """Run the CLI application"""
        self.display_banner()

        while True:
            print("\n" + "="*50)
            print("MAIN MENU")
            print("="*50)
            print("1. Scan receipt image")
            print("2. Manage people")
            print("3. Manage items")
            print("4. Assign items to people")
            print("5. Tax & tip")
            print("6. Rounding")
            print("7. Currency")
            print("8. Show split")
            print("9. Exit")

            choice = input("\nChoice: ").strip()

            if choice == '1':
                image_path = input("Enter image path: ").strip()
                if validate_image_path(image_path):
                    self.process_receipt(image_path)
                else:
                    print("⚠ Invalid or unsupported image")
            elif choice == '2':
                self.manage_people()
            elif choice == '3':
                self.manage_items()
            elif choice == '4':
                self.assign_items()
            elif choice == '5':
                self.set_tax_and_tip()
            elif choice == '6':
                self.set_rounding()
            elif choice == '7':
                self.set_currency()
            elif choice == '8':
                self.show_summary()
            elif choice == '9':
                print("\n👋 Thank you for using SplitRight!")
                break

