#!/usr/bin/env python3
"""
Utility functions for SplitRight
"""

import logging
import mimetypes
from decimal import Decimal
from pathlib import Path
from typing import Optional

from config import MAX_IMAGE_SIZE_BYTES, PROGRESS_BAR_LENGTH
from data_models import OCRProgress
from money_utils import to_decimal

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.tiff', '.tif', '.gif', '.webp'}


def validate_image_path(image_path: str) -> bool:
    """Image path validation with basic security checks"""
    if not isinstance(image_path, str):
        logger.warning("Image path must be a string")
        return False

    path = Path(image_path)

    if '..' in path.parts:
        logger.warning("Security risk: Invalid path pattern: %s", image_path)
        return False

    if not path.exists():
        logger.warning("File not found: %s", image_path)
        return False

    if not path.is_file():
        logger.warning("Path is not a file: %s", image_path)
        return False

    size = path.stat().st_size
    if size > MAX_IMAGE_SIZE_BYTES:
        logger.warning("File too large: %d bytes (max: %d)", size, MAX_IMAGE_SIZE_BYTES)
        return False

    if path.suffix.lower() not in IMAGE_EXTENSIONS:
        logger.warning("Unsupported file extension: %s", path.suffix)
        return False

    mime_type, _ = mimetypes.guess_type(str(path))
    if mime_type and not mime_type.startswith('image/'):
        logger.warning("Invalid MIME type: %s", mime_type)
        return False

    return True


def try_parse_int(value: str) -> Optional[int]:
    """Safely parse integer from string"""
    try:
        return int(value.strip())
    except (AttributeError, ValueError):
        return None


def try_parse_decimal(value: str) -> Optional[Decimal]:
    """Safely parse an amount, accepting a comma as decimal separator"""
    if not isinstance(value, str) or not value.strip():
        return None

    cleaned = value.strip().replace(',', '.')
    amount = to_decimal(cleaned)
    # to_decimal maps garbage to 0, tell the two apart
    if amount == 0 and cleaned.strip('0.+-') != '':
        return None
    return amount


def validate_menu_choice(choice: str, valid_choices: list[str]) -> Optional[str]:
    """Validate a menu choice against allowed options"""
    if not isinstance(choice, str):
        return None
    choice = choice.strip()
    return choice if choice in set(valid_choices) else None


def create_progress_callback(description: str = "Scanning"):
    """Create a progress callback that draws OCRProgress updates as a bar"""
    def progress_callback(update: OCRProgress):
        bar_length = PROGRESS_BAR_LENGTH
        filled_length = int(bar_length * update.progress)
        bar = '█' * filled_length + '░' * (bar_length - filled_length)

        status_text = f" - {update.status}" if update.status else ""
        print(f"\r{description}: [{bar}] {update.progress * 100:5.1f}%{status_text:<24}", end='', flush=True)

        if update.progress >= 1.0:
            print()

    return progress_callback


def clean_text_for_display(text: str, max_length: int = 100) -> str:
    """Clean text for safe display in the terminal"""
    if not isinstance(text, str):
        return ""

    text = ''.join(char for char in text if char.isprintable())
    text = ' '.join(text.split())

    if len(text) > max_length:
        text = text[:max_length - 3] + "..."

    return text
