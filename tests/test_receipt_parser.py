from decimal import Decimal

import pytest

from data_models import ExtractionResult
from receipt_parser import LINE_PATTERNS, ReceiptParser

JAPANESE_RECEIPT = """
すし処 まる
東京都渋谷区1-2-3
2024年3月5日 19:42
---------------------
マグロ握り ¥1,200
サーモン 800円
味噌汁 300
小計 ¥2,300
税 ¥230
合計 ¥2,530
ありがとうございました
"""

ENGLISH_RECEIPT = """
BLUE BOTTLE CAFE
123 Market St
Date: 04/18/2024
Time: 8:15 AM
Coffee 4.50
$3.25 Croissant
Avocado Toast 12.00
Subtotal 19.75
Tax 1.58
Total $21.33
VISA ****4242
"""


@pytest.fixture
def parser():
    return ReceiptParser()


def names_and_prices(items):
    return [(item.name, item.price) for item in items]


def test_coffee_line_without_currency(parser):
    items = parser.parse_items("Coffee 450")

    assert len(items) == 1
    assert (items[0].name, items[0].price, items[0].quantity) == ("Coffee", Decimal("450"), 1)
    assert items[0].assigned_to == []


def test_subtotal_line_is_discarded(parser):
    assert parser.parse_items("subtotal 3200") == []


def test_japanese_receipt_items(parser):
    items = parser.parse_items(JAPANESE_RECEIPT)

    assert names_and_prices(items) == [
        ("マグロ握り", Decimal("1200")),
        ("サーモン", Decimal("800")),
        ("味噌汁", Decimal("300")),
    ]


def test_english_receipt_items(parser):
    items = parser.parse_items(ENGLISH_RECEIPT)

    assert names_and_prices(items) == [
        ("Coffee", Decimal("4.50")),
        ("Croissant", Decimal("3.25")),
        ("Avocado Toast", Decimal("12.00")),
    ]


def test_item_ids_are_unique(parser):
    items = parser.parse_items("Tea 300\nTea 300\nTea 300")

    assert len(items) == 3
    assert len({item.id for item in items}) == 3


def test_line_patterns_order_is_fixed():
    assert [pattern.name for pattern in LINE_PATTERNS] == [
        "name_price", "name_price_yen_suffix", "currency_price_name",
    ]


def test_zero_price_and_overlong_names_are_dropped(parser):
    long_name = "Z" * 60
    text = f"Free refill 0\n{long_name} 500\nWater 0.00"

    assert parser.parse_items(text) == []


def test_long_name_is_truncated_to_forty(parser):
    name = "Extra Large Seasonal Fruit Parfait With Cream"
    items = parser.parse_items(f"{name} 1,500")

    assert items[0].name == name[:40].rstrip()


def test_falls_through_to_later_shape(parser):
    # First shape cannot match a name after the price, the leading-currency shape can
    items = parser.parse_items("¥1,500 Katsu Curry")

    assert names_and_prices(items) == [("Katsu Curry", Decimal("1500"))]


def test_detect_currency_folds_yen_variants(parser):
    assert parser.detect_currency("￥500 ¥300 $1") == "¥"
    assert parser.detect_currency("ラーメン 800円\nTotal $9") == "¥"


def test_detect_currency_highest_count_wins(parser):
    assert parser.detect_currency("€3 €4 £5") == "€"
    assert parser.detect_currency("₩1000 ₩2000 ฿50") == "₩"


def test_detect_currency_tie_keeps_table_order(parser):
    assert parser.detect_currency("£5 $5") == "$"
    assert parser.detect_currency("฿5 ₱5") == "₱"


def test_detect_currency_none_without_marks(parser):
    assert parser.detect_currency("Coffee 450\nTea 300") is None
    assert parser.detect_currency("") is None


def test_store_name_skips_dates_and_prices(parser):
    text = "04/18/2024\n$5.00 coupon\nRECEIPT\nGreen Leaf Deli\nCoffee 3.00"

    assert parser.extract_store_name(text) == "Green Leaf Deli"


def test_store_name_only_looks_at_first_five_lines(parser):
    text = "\n".join(["12345", "----", "==", "**", "$1"] + ["Late Name"])

    assert parser.extract_store_name(text) is None


def test_store_name_japanese(parser):
    assert parser.extract_store_name(JAPANESE_RECEIPT) == "すし処 まる"


def test_store_name_length_limit(parser):
    name = "N" * 50
    assert parser.extract_store_name(name) == name
    assert parser.extract_store_name("N" * 51) is None


def test_date_time_same_line(parser):
    assert parser.extract_date_time("Tokyo\n2024/03/05 19:42:10") == "2024/03/05 19:42:10"


def test_date_time_ideographic_is_normalized(parser):
    assert parser.extract_date_time(JAPANESE_RECEIPT) == "2024-03-05 19:42"


def test_date_with_time_on_next_line(parser):
    assert parser.extract_date_time(ENGLISH_RECEIPT) == "04/18/2024 8:15 AM"


def test_time_with_nearby_date(parser):
    text = "Shop\nTable 4\n14:05\nServer: Kim\n18-04-2024"

    assert parser.extract_date_time(text) == "18-04-2024 14:05"


def test_time_only(parser):
    assert parser.extract_date_time("Shop\nOpened 午後 9:30\nBeer 500") == "9:30"


def test_date_only(parser):
    assert parser.extract_date_time("Shop\n2024-12-31\nBeer 500") == "2024-12-31"


def test_date_time_none(parser):
    assert parser.extract_date_time("Shop\nBeer 500") is None


def test_date_time_only_scans_ten_lines(parser):
    text = "\n".join(f"Line {i}" for i in range(10)) + "\n2024-01-01"

    assert parser.extract_date_time(text) is None


def test_parse_builds_full_result(parser):
    result = parser.parse(JAPANESE_RECEIPT)

    assert isinstance(result, ExtractionResult)
    assert len(result.items) == 3
    assert result.detected_currency == "¥"
    assert result.store_name == "すし処 まる"
    assert result.date_time == "2024-03-05 19:42"


def test_parse_english_result(parser):
    result = parser.parse(ENGLISH_RECEIPT)

    assert result.detected_currency == "$"
    assert result.store_name == "BLUE BOTTLE CAFE"


@pytest.mark.parametrize("garbage", [None, 42, "", "\n\n\n", "%%%\n$$$\n¥¥¥"])
def test_parse_never_raises(parser, garbage):
    result = parser.parse(garbage)

    assert result.items == []
    assert result.store_name is None
    assert result.date_time is None
