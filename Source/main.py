"""
SplitRight - Receipt Splitter with OCR

splitright                          # Interactive CLI mode
splitright receipt.jpg              # Scan image and start CLI
splitright receipt.jpg --quick      # Quick mode - just show extraction results
splitright --help                   # Show help
"""

import sys
import logging
import argparse

import config
from cli_interface import SplitRightCLI, print_extraction
from ocr_processor import OCRError, extract_receipt_items
from utils import create_progress_callback, validate_image_path

VERSION = "1.0.0"


def quick_process(image_path: str, workers: int = config.DEFAULT_MAX_WORKERS) -> int:
    """Quick processing mode - just show results"""
    print(f"🚀 Quick processing: {image_path}")

    try:
        result = extract_receipt_items(
            image_path,
            on_progress=create_progress_callback("Scanning"),
            num_workers=workers,
        )
    except OCRError as e:
        print(f"❌ Could not read receipt: {e}")
        return 1

    print_extraction(result, result.detected_currency or config.CURRENCY_DEFAULT)
    if not result.items:
        print("Try:")
        print("  • Better image quality/lighting")
        print("  • Manual item entry in interactive mode")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='splitright',
        description='SplitRight - Split a shared receipt to the exact cent',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  splitright                      # Interactive mode
  splitright receipt.jpg          # Scan image then interactive
  splitright receipt.jpg --quick  # Quick mode - show results only
  splitright --workers 8          # Use 8 parallel OCR workers
        """
    )

    parser.add_argument(
        'image',
        nargs='?',
        help='Receipt image to scan'
    )
    parser.add_argument(
        '--workers',
        type=int,
        default=config.DEFAULT_MAX_WORKERS,
        help=f'Number of parallel OCR workers (default: {config.DEFAULT_MAX_WORKERS})'
    )
    parser.add_argument(
        '--quick',
        action='store_true',
        help='Quick mode - scan image and show results only'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'SplitRight {VERSION}'
    )
    return parser


def main(argv=None) -> int:
    """Main entry point"""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.WARNING),
        format='%(levelname)s:%(name)s:%(message)s'
    )

    args = build_parser().parse_args(argv)

    if not config.WORKERS_MIN <= args.workers <= config.WORKERS_MAX:
        print(f"⚠ Workers must be between {config.WORKERS_MIN} and {config.WORKERS_MAX}")
        args.workers = max(config.WORKERS_MIN, min(config.WORKERS_MAX, args.workers))

    if args.quick:
        if not args.image or not validate_image_path(args.image):
            print(f"❌ Invalid or missing image: {args.image}")
            return 1
        return quick_process(args.image, args.workers)

    cli = SplitRightCLI(num_workers=args.workers)

    if args.image:
        if validate_image_path(args.image):
            cli.process_receipt(args.image)
        else:
            print(f"⚠ Invalid or unsupported image: {args.image}")

    cli.run()
    return 0


def run():
    """Console script wrapper"""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\n👋 Goodbye!")
        sys.exit(0)


if __name__ == "__main__":
    run()
