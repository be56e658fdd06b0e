import pytest
import pytesseract
from PIL import Image

from data_models import ExtractionResult, OCRProgress
from ocr_processor import OCRError, ParallelOCRProcessor, ProgressTracker, extract_receipt_items

TOP_TEXT = "Corner Bistro\n2024-05-01 20:15\nBurger 12.50\nFries 4.00\n"
BOTTOM_TEXT = "Fries 4.00\nShake 5.25\nTotal $21.75\n"


@pytest.fixture
def receipt_image(tmp_path):
    path = tmp_path / "receipt.png"
    Image.new("RGB", (120, 400), "white").save(path)
    return str(path)


@pytest.fixture
def fake_tesseract(monkeypatch):
    calls = []

    def image_to_string(image, lang=None, config=None):
        calls.append({"size": image.size, "lang": lang, "config": config})
        # With two workers only the top region carries the overlap
        return TOP_TEXT if image.size[1] > 200 else BOTTOM_TEXT

    monkeypatch.setattr(pytesseract, "get_languages", lambda config='': ["eng", "jpn", "osd"])
    monkeypatch.setattr(pytesseract, "image_to_string", image_to_string)
    return calls


def test_progress_tracker_never_goes_backwards():
    updates = []
    tracker = ProgressTracker(updates.append)

    tracker.update("a", 0.4)
    tracker.update("b", 0.2)
    tracker.update("c", 1.7)

    assert [u.progress for u in updates] == [0.4, 0.4, 1.0]
    assert [u.status for u in updates] == ["a", "b", "c"]


def test_progress_tracker_without_callback():
    tracker = ProgressTracker()
    tracker.update("loading image", 0.3)
    assert tracker.progress == 0.3


def test_language_selection(fake_tesseract, monkeypatch):
    assert ParallelOCRProcessor()._get_ocr_language() == "eng+jpn"

    monkeypatch.setattr(pytesseract, "get_languages", lambda config='': ["eng", "osd"])
    assert ParallelOCRProcessor()._get_ocr_language() == "eng"


def test_language_fallback_when_tesseract_is_missing(monkeypatch):
    def missing(config=''):
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "get_languages", missing)

    processor = ParallelOCRProcessor()
    assert processor.available_languages == ["eng"]
    assert processor._get_ocr_language() == "eng"


def test_workers_are_clamped(fake_tesseract):
    assert ParallelOCRProcessor(num_workers=0).num_workers == 1
    assert ParallelOCRProcessor(num_workers=99).num_workers == 16


def test_regions_overlap(fake_tesseract):
    processor = ParallelOCRProcessor(num_workers=2)
    regions = processor.split_image_into_regions(Image.new("L", (120, 400)))

    assert [region_id for region_id, _ in regions] == [0, 1]
    assert regions[0][1].size == (120, 250)
    assert regions[1][1].size == (120, 200)


def test_merge_region_texts_drops_seam_duplicates():
    merged = ParallelOCRProcessor.merge_region_texts([
        "Coffee 450\nTea 300\n",
        "Tea 300\nCake 500",
        "",
        "Juice 250",
    ])

    assert merged.splitlines() == ["Coffee 450", "Tea 300", "Cake 500", "Juice 250"]


def test_process_image_reports_progress(fake_tesseract, receipt_image):
    updates = []
    processor = ParallelOCRProcessor(num_workers=2)

    text = processor.process_image_parallel(receipt_image, on_progress=updates.append)

    assert text.splitlines() == [
        "Corner Bistro", "2024-05-01 20:15", "Burger 12.50", "Fries 4.00",
        "Shake 5.25", "Total $21.75",
    ]
    progress = [u.progress for u in updates]
    assert progress == sorted(progress)
    assert updates[0] == OCRProgress(status="loading image", progress=0.0)
    assert updates[-1] == OCRProgress(status="done", progress=1.0)
    assert {u.status for u in updates} >= {"preprocessing image", "recognizing text"}
    assert processor.metrics.regions_processed == 2
    assert all(call["lang"] == "eng+jpn" and call["config"] == "--psm 6" for call in fake_tesseract)


def test_missing_image_raises_ocr_error(fake_tesseract, tmp_path):
    with pytest.raises(OCRError):
        ParallelOCRProcessor().process_image_parallel(str(tmp_path / "nope.png"))


def test_unreadable_image_raises_ocr_error(fake_tesseract, tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not a png")

    with pytest.raises(OCRError):
        ParallelOCRProcessor().process_image_parallel(str(path))


def test_tesseract_failure_raises_ocr_error(fake_tesseract, monkeypatch, receipt_image):
    def failing(image, lang=None, config=None):
        raise pytesseract.TesseractError(1, "boom")

    monkeypatch.setattr(pytesseract, "image_to_string", failing)

    with pytest.raises(OCRError) as excinfo:
        ParallelOCRProcessor(num_workers=2).process_image_parallel(receipt_image)

    assert isinstance(excinfo.value.__cause__, pytesseract.TesseractError)


def test_extract_receipt_items_end_to_end(fake_tesseract, receipt_image):
    updates = []

    result = extract_receipt_items(receipt_image, on_progress=updates.append, num_workers=2)

    assert isinstance(result, ExtractionResult)
    assert [item.name for item in result.items] == ["Burger", "Fries", "Shake"]
    assert result.detected_currency == "$"
    assert result.store_name == "Corner Bistro"
    assert result.date_time == "2024-05-01 20:15"
    assert updates[-1].progress == 1.0
