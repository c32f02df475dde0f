from __future__ import annotations

import re
from typing import Dict, Optional

from ocr.patterns import FIELD_CARD_NUMBER, FIELD_CVV, ROMAN_SUFFIXES


def format_card_number(digits: str) -> str:
    """15-digit numbers use the 4-6-5 layout; all other lengths are grouped in fours."""
    if len(digits) == 15:
        return f"{digits[:4]} {digits[4:10]} {digits[10:]}"
    return " ".join(digits[i:i + 4] for i in range(0, len(digits), 4))


def format_expiry_date(year: int, month: int) -> str:
    return f"{month:02d}/{year % 100:02d}"


def _title_word(word: str) -> str:
    if word.rstrip(".").upper() in ROMAN_SUFFIXES:
        return word.upper()
    return "-".join(part[:1].upper() + part[1:].lower() for part in word.split("-"))


def format_cardholder_name(name: str) -> str:
    return " ".join(_title_word(w) for w in name.strip().split())


def mask_card_number(value: Optional[str]) -> Optional[str]:
    """Keep the last four digits, star the rest, preserve grouping."""
    if not value:
        return value
    total = sum(1 for ch in value if ch.isdigit())
    keep_from = total - 4
    seen = 0
    out = []
    for ch in value:
        if ch.isdigit():
            out.append(ch if seen >= keep_from else "*")
            seen += 1
        else:
            out.append(ch)
    return "".join(out)


def mask_fields(fields: Dict[str, str]) -> Dict[str, str]:
    masked = dict(fields)
    if FIELD_CARD_NUMBER in masked:
        masked[FIELD_CARD_NUMBER] = mask_card_number(masked[FIELD_CARD_NUMBER]) or ""
    if FIELD_CVV in masked:
        masked[FIELD_CVV] = re.sub(r"\d", "*", masked[FIELD_CVV])
    return masked
