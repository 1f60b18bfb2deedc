"""
ID Card Extraction Command-Line Tool.

Validates a front/back image pair and prints the extracted fields as JSON.

Usage:
    # Run OCR on both images
    python scripts/extract_id_card.py --front front.jpg --back back.jpg

    # Use transcripts that were already recognized
    python scripts/extract_id_card.py --front front.txt --back back.txt --text

    # Custom configuration
    python scripts/extract_id_card.py --front front.jpg --back back.jpg --config my.yaml

Exit code is 0 when the pair passes and 1 when it is rejected.
"""

import argparse
import json
import logging
import mimetypes
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.idcard import IdCardProcessor, IdCardResult, ImageUpload  # noqa: E402

logger = logging.getLogger(__name__)


def build_upload(path: Path) -> ImageUpload:
    """Describe a local image file the way the upload layer would."""
    mime_type, _ = mimetypes.guess_type(path.name)
    return ImageUpload(
        path=str(path),
        filename=path.name,
        mime_type=mime_type or "application/octet-stream",
        size_bytes=path.stat().st_size,
    )


def result_to_dict(result: IdCardResult) -> dict:
    """Convert a pipeline result into a JSON-serializable dictionary."""
    output = {
        "decision": result.decision.value,
        "processing_time_ms": round(result.processing_time_ms, 1),
        "warnings": result.warnings,
    }

    if result.is_pass():
        output["data"] = result.fields.to_dict()
    else:
        reason = result.rejection_reason
        output["error"] = {
            "code": reason.code,
            "constant": reason.constant,
            "message": reason.message,
            "stage": reason.stage,
            "category": reason.category.value,
            "http_status": reason.http_status,
        }

    if result.validation is not None:
        output["sides"] = {
            "front": result.validation.front_side.value,
            "back": result.validation.back_side.value,
        }

    return output


def main():
    """Main entry point for the extraction tool."""
    parser = argparse.ArgumentParser(
        description="Validate an ID card image pair and extract its fields"
    )
    parser.add_argument("--front", type=Path, help="Front image (or transcript with --text)")
    parser.add_argument("--back", type=Path, help="Back image (or transcript with --text)")
    parser.add_argument(
        "--text",
        action="store_true",
        help="Treat --front/--back as transcript text files and skip OCR",
    )
    parser.add_argument("--config", type=Path, help="Path to configuration YAML")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    processor = IdCardProcessor(config_path=args.config)

    if args.text:
        if args.front is None or args.back is None:
            parser.error("--text requires both --front and --back")
        result = processor.process_transcripts(
            args.front.read_text(encoding="utf-8"),
            args.back.read_text(encoding="utf-8"),
        )
    else:
        front = build_upload(args.front) if args.front and args.front.exists() else None
        back = build_upload(args.back) if args.back and args.back.exists() else None
        result = processor.process(front, back)

    print(json.dumps(result_to_dict(result), indent=2))
    sys.exit(0 if result.is_pass() else 1)


if __name__ == "__main__":
    main()
