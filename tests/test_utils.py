from decimal import Decimal

import pytest
from PIL import Image

from data_models import OCRProgress
from utils import (
    clean_text_for_display, create_progress_callback, try_parse_decimal, try_parse_int,
    validate_image_path, validate_menu_choice,
)


def test_validate_image_path(tmp_path):
    image = tmp_path / "receipt.png"
    Image.new("RGB", (10, 10)).save(image)
    text = tmp_path / "notes.txt"
    text.write_text("not an image")

    assert validate_image_path(str(image))
    assert not validate_image_path(str(text))
    assert not validate_image_path(str(tmp_path / "missing.png"))
    assert not validate_image_path(str(tmp_path))
    assert not validate_image_path(None)


def test_validate_image_path_rejects_parent_traversal(tmp_path):
    assert not validate_image_path(str(tmp_path / ".." / "receipt.png"))


@pytest.mark.parametrize("value, expected", [
    ("12", Decimal("12")),
    (" 12.50 ", Decimal("12.50")),
    ("12,5", Decimal("12.5")),
    ("0", Decimal("0")),
    ("abc", None),
    ("", None),
    (None, None),
])
def test_try_parse_decimal(value, expected):
    assert try_parse_decimal(value) == expected


def test_try_parse_int():
    assert try_parse_int(" 3 ") == 3
    assert try_parse_int("three") is None
    assert try_parse_int(None) is None


def test_validate_menu_choice():
    assert validate_menu_choice(" 2 ", ["1", "2"]) == "2"
    assert validate_menu_choice("5", ["1", "2"]) is None
    assert validate_menu_choice(None, ["1"]) is None


def test_progress_callback_draws_bar(capsys):
    callback = create_progress_callback("Scanning")

    callback(OCRProgress(status="recognizing text", progress=0.5))
    callback(OCRProgress(status="done", progress=1.0))

    out = capsys.readouterr().out
    assert "50.0%" in out
    assert "100.0%" in out
    assert out.endswith("\n")


def test_clean_text_for_display():
    assert clean_text_for_display("  Corner   Bistro\x07 ") == "Corner Bistro"
    assert clean_text_for_display("x" * 20, max_length=10) == "x" * 7 + "..."
    assert clean_text_for_display(None) == ""
