"""
Centralized configuration for SplitRight with environment
"""

import os

# OCR settings
OCR_PSM = int(os.getenv("SPLITRIGHT_OCR_PSM", "6"))
OCR_LANGUAGES = os.getenv("SPLITRIGHT_OCR_LANGUAGES", "eng+jpn")
OCR_FALLBACK_LANGUAGE = os.getenv("SPLITRIGHT_OCR_FALLBACK_LANGUAGE", "eng")

# Runtime settings
DEFAULT_MAX_WORKERS = int(os.getenv("SPLITRIGHT_MAX_WORKERS", "4"))
CURRENCY_DEFAULT = os.getenv("SPLITRIGHT_DEFAULT_CURRENCY", "¥")
LOG_LEVEL = os.getenv("SPLITRIGHT_LOG_LEVEL", "WARNING").upper()

# Thresholds
DUPLICATE_SIMILARITY_THRESHOLD = float(os.getenv("SPLITRIGHT_DUP_SIMILARITY", "0.95"))
IMAGE_REGION_OVERLAP_PX = int(os.getenv("SPLITRIGHT_IMAGE_OVERLAP", "50"))
MAX_IMAGE_SIZE_BYTES = int(os.getenv("SPLITRIGHT_MAX_IMAGE_SIZE_BYTES", str(50 * 1024 * 1024)))
PROGRESS_BAR_LENGTH = int(os.getenv("SPLITRIGHT_PROGRESS_BAR_LENGTH", "30"))

# Text extraction limits
ITEM_NAME_MAX_LENGTH = int(os.getenv("SPLITRIGHT_ITEM_NAME_MAX_LENGTH", "40"))
ITEM_RAW_NAME_LIMIT = int(os.getenv("SPLITRIGHT_ITEM_RAW_NAME_LIMIT", "50"))
STORE_NAME_SCAN_LINES = int(os.getenv("SPLITRIGHT_STORE_NAME_SCAN_LINES", "5"))
STORE_NAME_MAX_LENGTH = int(os.getenv("SPLITRIGHT_STORE_NAME_MAX_LENGTH", "50"))
DATE_SCAN_LINES = int(os.getenv("SPLITRIGHT_DATE_SCAN_LINES", "10"))
DATE_SEARCH_RADIUS = int(os.getenv("SPLITRIGHT_DATE_SEARCH_RADIUS", "2"))

# Workers bounds
WORKERS_MIN = int(os.getenv("SPLITRIGHT_WORKERS_MIN", "1"))
WORKERS_MAX = int(os.getenv("SPLITRIGHT_WORKERS_MAX", "16"))
