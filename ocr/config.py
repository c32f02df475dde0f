from __future__ import annotations

import os


def getenv_int(name: str, default: int) -> int:
    v = os.getenv(name)
    try:
        return int(v) if v is not None else default
    except ValueError:
        return default


def getenv_float(name: str, default: float) -> float:
    v = os.getenv(name)
    try:
        return float(v) if v is not None else default
    except ValueError:
        return default


def getenv_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


# Selection policy
# Strict mode drops card numbers that fail the Luhn check instead of returning a best guess
STRICT_VALIDATION = getenv_bool("CV_OCR_STRICT_VALIDATION", False)
REJECT_EXPIRED = getenv_bool("CV_OCR_REJECT_EXPIRED", True)

# Preprocessing limits
MIN_LINE_LENGTH = getenv_int("CV_OCR_MIN_LINE_LENGTH", 2)
MAX_RAW_TEXT_CHARS = getenv_int("CV_OCR_MAX_RAW_TEXT_CHARS", 10000)

# Result quality gate
CONFIDENCE_THRESHOLD = getenv_float("CV_OCR_CONFIDENCE_THRESHOLD", 0.7)

# Debug: log candidate counts per field (values are never logged in clear)
LOG_CANDIDATES = getenv_bool("CV_OCR_LOG_CANDIDATES", False)
