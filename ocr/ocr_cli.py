from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import date
from typing import Any, Dict, List, Optional

from cards.card_type import ImageSide, parse_category
from ocr import config
from ocr.card_text_parser import CardTextParser, ParserOptions
from ocr.formatters import mask_fields


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Extract card fields from recognizer text dumps and print one JSON line per file")
    parser.add_argument("paths", nargs="+", help="Text file paths ('-' reads stdin)")
    parser.add_argument("--category", default="credit", help="Card category key (default: credit)")
    parser.add_argument("--custom-name", default=None, help="Display name when --category custom")
    parser.add_argument("--side", choices=[s.value for s in ImageSide], default=ImageSide.FRONT.value)
    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=config.STRICT_VALIDATION,
        help="Drop card numbers that fail the Luhn check (default from CV_OCR_STRICT_VALIDATION)",
    )
    parser.add_argument("--allow-expired", action="store_true", help="Keep expiry dates in the past (flagged with a warning)")
    parser.add_argument("--today", default=None, help="Reference date for expiry checks, YYYY-MM-DD")
    parser.add_argument("--mask", action="store_true", help="Mask card number and security code in the output")
    args = parser.parse_args(argv)

    try:
        category = parse_category(args.category, args.custom_name)
    except ValueError as e:
        parser.error(str(e))

    today = None
    if args.today:
        try:
            today = date.fromisoformat(args.today)
        except ValueError:
            parser.error(f"invalid --today value: {args.today!r}")

    options = ParserOptions(
        strict_validation=args.strict,
        reject_expired=config.REJECT_EXPIRED and not args.allow_expired,
        today=today,
    )
    card_parser = CardTextParser(options)
    side = ImageSide(args.side)

    failures = 0
    for path in args.paths:
        if path != "-" and not os.path.exists(path):
            print(json.dumps({"file": path, "error": "not_found"}))
            failures += 1
            continue
        try:
            report = card_parser.parse_report(_read_text(path), category, side)
            fields = mask_fields(report.fields) if args.mask else report.fields
            summary: Dict[str, Any] = {
                "file": path,
                "side": side.value,
                "fields": fields,
                "warnings": report.warnings,
                "lines": len(report.lines),
            }
            print(json.dumps(summary))
        except OSError as e:
            print(json.dumps({"file": path, "error": str(e)}))
            failures += 1
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
