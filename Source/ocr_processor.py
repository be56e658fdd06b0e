"""
OCR Processing module for SplitRight
Runs Tesseract over receipt images in parallel regions and hands the text to the parser
"""

import time
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from difflib import SequenceMatcher
from typing import Callable, List, Optional, Tuple

import cv2
import numpy as np
import pytesseract
from PIL import Image, ImageEnhance, ImageFilter, UnidentifiedImageError

import config
from data_models import ExtractionResult, OCRProgress, ProcessingMetrics
from receipt_parser import ReceiptParser

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[OCRProgress], None]

# Lines at the end of the previous region compared against a new region
SEAM_LOOKBACK_LINES = 5


class OCRError(Exception):
    """Raised when the image cannot be recognized"""


class ProgressTracker:
    """Forwards progress updates, never letting the fraction go backwards"""

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self.progress = 0.0

    def update(self, status: str, progress: float):
        progress = min(1.0, max(self.progress, progress))
        self.progress = progress
        if self.callback:
            self.callback(OCRProgress(status=status, progress=progress))


class ParallelOCRProcessor:
    """Parallel OCR processing of receipt images"""

    def __init__(self, num_workers: int = config.DEFAULT_MAX_WORKERS):
        self.num_workers = max(config.WORKERS_MIN, min(config.WORKERS_MAX, num_workers))
        self.metrics = ProcessingMetrics()
        self.available_languages = self._check_languages()

    def _check_languages(self) -> List[str]:
        """Available Tesseract languages"""
        try:
            languages = pytesseract.get_languages(config='')
            logger.info("Available OCR languages: %s", ', '.join(languages))
            return languages
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
            logger.warning("Could not check languages: %s", e)
            return [config.OCR_FALLBACK_LANGUAGE]

    def _get_ocr_language(self) -> str:
        """Configured languages that Tesseract actually has"""
        wanted = [lang for lang in config.OCR_LANGUAGES.split('+') if lang]
        usable = [lang for lang in wanted if lang in self.available_languages]
        return '+'.join(usable) if usable else config.OCR_FALLBACK_LANGUAGE

    def preprocess_image(self, image: Image.Image) -> Image.Image:
        """Preprocess image to improve OCR accuracy"""
        # Grayscale
        if image.mode != 'L':
            image = image.convert('L')

        image = ImageEnhance.Contrast(image).enhance(2.0)
        image = image.filter(ImageFilter.SHARPEN)

        # Remove noise with bilateral filter (using OpenCV)
        img_array = np.array(image)
        img_array = cv2.bilateralFilter(img_array, 9, 75, 75)
        return Image.fromarray(img_array)

    def split_image_into_regions(self, image: Image.Image) -> List[Tuple[int, Image.Image]]:
        """Split image into overlapping horizontal regions"""
        width, height = image.size
        region_count = max(1, min(self.num_workers, height))
        region_height = height // region_count
        regions = []

        for i in range(region_count):
            y_start = i * region_height
            if i == region_count - 1:
                y_end = height
            else:
                y_end = min(height, (i + 1) * region_height + config.IMAGE_REGION_OVERLAP_PX)

            regions.append((i, image.crop((0, y_start, width, y_end))))

        return regions

    def process_region(self, region_data: Tuple[int, Image.Image]) -> str:
        """Process a single region with OCR"""
        region_id, region_image = region_data
        logger.debug("Worker %d: Processing region...", region_id + 1)

        text = pytesseract.image_to_string(
            region_image,
            lang=self._get_ocr_language(),
            config=f'--psm {config.OCR_PSM}'
        )

        logger.debug("Worker %d: Complete", region_id + 1)
        return text

    @staticmethod
    def merge_region_texts(texts: List[str]) -> str:
        """Join region texts, dropping lines repeated across a region seam"""
        merged: List[str] = []

        for text in texts:
            lines = [line for line in text.splitlines() if line.strip()]
            tail = merged[-SEAM_LOOKBACK_LINES:]

            # Lines at the top of a region may repeat the bottom of the previous one
            skip = 0
            for line in lines:
                if any(
                    SequenceMatcher(None, line.strip(), seen.strip()).ratio()
                    > config.DUPLICATE_SIMILARITY_THRESHOLD
                    for seen in tail
                ):
                    skip += 1
                else:
                    break

            if skip:
                logger.debug("Dropped %d overlapping line(s) at region seam", skip)
            merged.extend(lines[skip:])

        return '\n'.join(merged)

    def process_image_parallel(self, image_path: str,
                               on_progress: Optional[ProgressCallback] = None) -> str:
        """Process image with parallel OCR workers"""
        tracker = ProgressTracker(on_progress)
        start_time = time.time()

        tracker.update("loading image", 0.0)
        try:
            image = Image.open(image_path)
            image.load()
        except (OSError, UnidentifiedImageError) as e:
            raise OCRError(f"Could not open image {image_path}: {e}") from e
        logger.info("Image loaded: %dx%d pixels", image.size[0], image.size[1])

        tracker.update("preprocessing image", 0.05)
        processed_image = self.preprocess_image(image)

        regions = self.split_image_into_regions(processed_image)
        self.metrics.regions_processed = len(regions)

        tracker.update("recognizing text", 0.1)
        texts = [''] * len(regions)
        completed = 0
        try:
            with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
                futures = {
                    executor.submit(self.process_region, region): region[0]
                    for region in regions
                }
                for future in as_completed(futures):
                    region_id = futures[future]
                    texts[region_id] = future.result()
                    completed += 1
                    tracker.update("recognizing text", 0.1 + 0.85 * completed / len(regions))
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
            raise OCRError(f"Text recognition failed: {e}") from e

        combined_text = self.merge_region_texts(texts)

        self.metrics.workers_used = self.num_workers
        self.metrics.processing_time = time.time() - start_time
        tracker.update("done", 1.0)

        logger.info("OCR complete in %.2fs", self.metrics.processing_time)
        return combined_text


def extract_receipt_items(image_path: str,
                          on_progress: Optional[ProgressCallback] = None,
                          num_workers: Optional[int] = None) -> ExtractionResult:
    """Recognize a receipt image and extract candidate items and metadata"""
    processor = ParallelOCRProcessor(num_workers=num_workers or config.DEFAULT_MAX_WORKERS)
    text = processor.process_image_parallel(image_path, on_progress=on_progress)
    return ReceiptParser().parse(text)
