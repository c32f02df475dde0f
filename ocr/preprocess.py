from __future__ import annotations

from typing import List

from ocr import config
from ocr.patterns import (
    CLEAN_TEXT_RE,
    CONFUSABLE_DIGITS,
    DIGIT_GROUP_RE,
    DIGIT_RE,
    DIGIT_TOKEN_SEPARATORS,
    MIN_MISREAD_GROUP_LENGTH,
    WHITESPACE_RE,
)


def correct_digit_token(token: str) -> str:
    """
    Map letters the recognizer confuses with digits back to digits.

    Only tokens that already hold a digit and are otherwise made of digits,
    separators or confusable letters are touched: ``41ll`` becomes ``4111``
    and ``O1/2S`` becomes ``01/25``, while ``JOHN`` or ``SMITH2`` are kept.
    """
    if not DIGIT_RE.search(token):
        return token
    for ch in token:
        if not (ch.isdigit() or ch in DIGIT_TOKEN_SEPARATORS or ch in CONFUSABLE_DIGITS):
            return token
    return "".join(CONFUSABLE_DIGITS.get(ch, ch) for ch in token)


def _is_misread_group(token: str) -> bool:
    return len(token) >= MIN_MISREAD_GROUP_LENGTH and all(ch in CONFUSABLE_DIGITS for ch in token)


def correct_digit_groups(tokens: List[str]) -> List[str]:
    """
    Read letter-only tokens as digits when they sit next to a digit group,
    so a whole group misread as letters (``4111 IIII 1111``) is repaired.
    Repairs can chain along a run: ``IIII IIII 1111``.
    """
    out = list(tokens)
    changed = True
    while changed:
        changed = False
        for i, tok in enumerate(out):
            if not _is_misread_group(tok):
                continue
            neighbours = out[max(i - 1, 0):i] + out[i + 1:i + 2]
            if any(DIGIT_GROUP_RE.match(n) for n in neighbours):
                out[i] = "".join(CONFUSABLE_DIGITS[ch] for ch in tok)
                changed = True
    return out


def normalize_line(line: str) -> str:
    cleaned = CLEAN_TEXT_RE.sub(" ", line.strip())
    tokens = [correct_digit_token(tok) for tok in WHITESPACE_RE.split(cleaned) if tok]
    return " ".join(correct_digit_groups(tokens))


def normalize_text(raw_text: str, min_line_length: int = config.MIN_LINE_LENGTH) -> List[str]:
    """
    Split recognizer output into cleaned lines, top to bottom.

    Lines shorter than ``min_line_length`` after cleaning are dropped as
    recognizer noise. Order is preserved because line position is used as a
    tie-break by the field selectors.
    """
    if not raw_text:
        return []
    lines: List[str] = []
    for raw_line in raw_text.splitlines():
        line = normalize_line(raw_line)
        if len(line) < min_line_length:
            continue
        lines.append(line)
    return lines
