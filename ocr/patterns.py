from __future__ import annotations

import re
from typing import Dict, FrozenSet, List, Tuple

# Result keys
FIELD_CARD_NUMBER = "cardNumber"
FIELD_EXPIRY_DATE = "expiryDate"
FIELD_CARDHOLDER_NAME = "cardholderName"
FIELD_CVV = "cvv"

# Card number
MIN_CARD_NUMBER_LENGTH = 13
MAX_CARD_NUMBER_LENGTH = 19
PREFERRED_CARD_NUMBER_LENGTH = 16

# Optional group separator: space, hyphen or period, possibly padded by one space
_SEP = r"(?: ?[\-.]? ?)"

# Ordered strongest first; every pattern is anchored on digit boundaries
CARD_NUMBER_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("grouped_4_4_4_4", re.compile(rf"(?<!\d)\d{{4}}{_SEP}\d{{4}}{_SEP}\d{{4}}{_SEP}\d{{4}}(?:{_SEP}\d{{3}})?(?!\d)", re.ASCII)),
    ("grouped_4_6_5", re.compile(rf"(?<!\d)\d{{4}}{_SEP}\d{{6}}{_SEP}\d{{5}}(?!\d)", re.ASCII)),
    ("grouped_4_6_4", re.compile(rf"(?<!\d)\d{{4}}{_SEP}\d{{6}}{_SEP}\d{{4}}(?!\d)", re.ASCII)),
    ("continuous", re.compile(r"(?<!\d)\d{13,19}(?!\d)", re.ASCII)),
]
CARD_NUMBER_CLEAN_RE = re.compile(r"[\s\-.]")

# Expiry date
_EXPIRY_LABEL = r"\b(?:VALID\s*THRU|VALID\s*THROUGH|GOOD\s*THRU|EXPIRES|EXPIRY|EXP)\.?\s*:?\s*"
_MONTH = r"(?P<month>\d{2})"
_YEAR_LONG = r"(?P<year>\d{4})"
_YEAR_SHORT = r"(?P<year>\d{2})"
# Bare dates must not sit inside a longer digit/slash run such as DD/MM/YYYY
_LEFT = r"(?<![\d/\-])"
_RIGHT = r"(?![\d/\-])"

EXPIRY_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("labelled", re.compile(rf"{_EXPIRY_LABEL}{_MONTH}\s?[/\- ]\s?(?P<year>\d{{4}}|\d{{2}}){_RIGHT}", re.IGNORECASE | re.ASCII)),
    ("slash_long", re.compile(rf"{_LEFT}{_MONTH}/{_YEAR_LONG}{_RIGHT}", re.ASCII)),
    ("slash_short", re.compile(rf"{_LEFT}{_MONTH}/{_YEAR_SHORT}{_RIGHT}", re.ASCII)),
    ("hyphen_short", re.compile(rf"{_LEFT}{_MONTH}-{_YEAR_SHORT}{_RIGHT}", re.ASCII)),
    ("space_short", re.compile(rf"(?<![\d/\-] ){_LEFT}{_MONTH} {_YEAR_SHORT}{_RIGHT}(?! \d)", re.ASCII)),
]

# Cardholder name
EXCLUDED_NAME_WORDS: FrozenSet[str] = frozenset({
    # issuer / network / product
    "BANK", "CARD", "CREDIT", "DEBIT", "VISA", "MASTERCARD", "MAESTRO", "ELECTRON",
    "AMERICAN", "EXPRESS", "AMEX", "DISCOVER", "DINERS", "CLUB", "JCB", "UNIONPAY", "RUPAY",
    "PLATINUM", "GOLD", "SILVER", "CLASSIC", "SIGNATURE", "INFINITE", "WORLD", "ELITE",
    "PREFERRED", "REWARDS", "BUSINESS", "CORPORATE", "PREPAID", "INTERNATIONAL", "CONTACTLESS",
    # date labels
    "VALID", "THRU", "THROUGH", "GOOD", "EXPIRES", "EXPIRY", "EXP", "MEMBER", "SINCE",
    "MONTH", "YEAR", "FROM", "UNTIL",
    # back-of-card boilerplate that sometimes bleeds into front captures
    "AUTHORIZED", "CUSTOMER", "SERVICE", "CALL", "PROPERTY", "ISSUED", "ISSUER",
})
NAME_SUFFIXES: FrozenSet[str] = frozenset({"JR", "SR", "II", "III", "IV", "V"})
ROMAN_SUFFIXES: FrozenSet[str] = frozenset({"II", "III", "IV", "V"})
NAME_LETTER_RATIO = 0.9
MIN_NAME_WORDS = 2
MAX_NAME_WORDS = 4

# Security code
CVV_TOKEN_RE = re.compile(r"^\d{3,4}$", re.ASCII)
CVV_LABEL_RE = re.compile(r"\b(?:CVV2?|CVC2?|CID|CSC|SECURITY\s+CODE)\b\s*", re.IGNORECASE | re.ASCII)

# Preprocessing
# Non-ASCII digits are blanked too; only 0-9 count as card digits
CLEAN_TEXT_RE = re.compile(r"[^\w /\-.*]|[^\D0-9]")
WHITESPACE_RE = re.compile(r"\s+")
DIGIT_RE = re.compile(r"\d", re.ASCII)

# Lossy corrections for characters the recognizer confuses with digits on embossed fonts
CONFUSABLE_DIGITS: Dict[str, str] = {
    "O": "0", "o": "0", "Q": "0", "D": "0",
    "I": "1", "l": "1",
    "S": "5", "s": "5",
    "B": "8",
    "G": "6",
    "Z": "2",
}
DIGIT_TOKEN_SEPARATORS = frozenset("/-.")
# A letter-only token next to a run of 3+ digits is read as a misread digit group
DIGIT_GROUP_RE = re.compile(r"^\d{3,}$", re.ASCII)
MIN_MISREAD_GROUP_LENGTH = 3
