from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

from ocr.candidates import FieldCandidate, FieldSelection
from ocr.formatters import format_card_number, format_cardholder_name, format_expiry_date
from ocr.patterns import (
    EXCLUDED_NAME_WORDS,
    FIELD_CARD_NUMBER,
    FIELD_CARDHOLDER_NAME,
    FIELD_CVV,
    FIELD_EXPIRY_DATE,
    MAX_CARD_NUMBER_LENGTH,
    MAX_NAME_WORDS,
    MIN_CARD_NUMBER_LENGTH,
    MIN_NAME_WORDS,
    NAME_LETTER_RATIO,
    NAME_SUFFIXES,
    PREFERRED_CARD_NUMBER_LENGTH,
)

WARNING_CHECKSUM_FAILED = "card_number_checksum_failed"
WARNING_EXPIRY_IN_PAST = "expiry_in_past"


# ---------------------------------------------
# Card number
# ---------------------------------------------
def luhn_check(digits: str) -> bool:
    """Mod-10 check: double every second digit from the right, fold results above 9."""
    if not digits or not digits.isascii() or not digits.isdigit():
        return False
    total = 0
    for idx, ch in enumerate(reversed(digits)):
        n = ord(ch) - 48
        if idx % 2 == 1:
            n *= 2
            if n > 9:
                n -= 9
        total += n
    return (total % 10) == 0


def is_well_formed_card_number(digits: str) -> bool:
    return digits.isascii() and digits.isdigit() and MIN_CARD_NUMBER_LENGTH <= len(digits) <= MAX_CARD_NUMBER_LENGTH


# ---------------------------------------------
# Expiry date
# ---------------------------------------------
def expand_two_digit_year(yy: int, today: date) -> int:
    # Years below the current two-digit year roll over into the next century
    century = (today.year // 100) * 100
    year = century + yy
    if yy < today.year % 100:
        year += 100
    return year


def resolve_expiry(month_text: str, year_text: str, today: date) -> Optional[Tuple[int, int]]:
    """Return ``(year, month)`` for a matched expiry, or None when the month is out of range."""
    try:
        month = int(month_text)
        year = int(year_text)
    except ValueError:
        return None
    if not 1 <= month <= 12:
        return None
    if len(year_text) == 2:
        year = expand_two_digit_year(year, today)
    return year, month


def is_expired(year: int, month: int, today: date) -> bool:
    return (year, month) < (today.year, today.month)


# ---------------------------------------------
# Cardholder name
# ---------------------------------------------
@dataclass(frozen=True)
class NameScoringWeights:
    """Tunable weights for the cardholder-name heuristic."""

    word_count_scores: Dict[int, int] = field(default_factory=lambda: {2: 30, 3: 20, 4: 10})
    length_sweet_spot: Tuple[int, int] = (8, 20)
    length_sweet_spot_score: int = 20
    all_caps_score: int = 25
    word_length_range: Tuple[int, int] = (2, 12)
    word_length_score: int = 5
    word_length_penalty: int = -10
    min_score: int = 40


NAME_SCORING = NameScoringWeights()


def name_words(line: str) -> List[str]:
    return [w for w in line.split(" ") if w]


def _bare(word: str) -> str:
    return word.rstrip(".").upper()


def is_name_candidate_line(line: str) -> bool:
    """Structural filters applied before scoring."""
    words = name_words(line)
    if not MIN_NAME_WORDS <= len(words) <= MAX_NAME_WORDS:
        return False
    if any(_bare(w) in EXCLUDED_NAME_WORDS for w in words):
        return False
    if any(ch.isdigit() for ch in line):
        return False
    letters_and_spaces = sum(1 for ch in line if ch.isalpha() or ch == " ")
    return letters_and_spaces >= len(line) * NAME_LETTER_RATIO


def score_name(line: str, weights: NameScoringWeights = NAME_SCORING) -> int:
    words = name_words(line)
    score = weights.word_count_scores.get(len(words), 0)

    lo, hi = weights.length_sweet_spot
    if lo <= len(line) <= hi:
        score += weights.length_sweet_spot_score

    letters = [ch for ch in line if ch.isalpha()]
    if letters and all(ch.isupper() for ch in letters):
        score += weights.all_caps_score

    wlo, whi = weights.word_length_range
    for word in words:
        if _bare(word) in NAME_SUFFIXES:
            continue
        if wlo <= len(word.rstrip(".")) <= whi:
            score += weights.word_length_score
        else:
            score += weights.word_length_penalty
    return score


# ---------------------------------------------
# Selection: one winner per field
# ---------------------------------------------
def select_card_number(candidates: List[FieldCandidate], strict_validation: bool) -> Optional[FieldSelection]:
    """
    Prefer Luhn-valid numbers, then 16-digit numbers, then the earliest line.

    Without ``strict_validation`` a well-formed number that fails the
    checksum is still returned, flagged as unverified.
    """
    well_formed = [c for c in candidates if is_well_formed_card_number(c.normalized)]
    if not well_formed:
        return None

    def sort_key(c: FieldCandidate) -> Tuple[bool, int, int, int]:
        return (len(c.normalized) != PREFERRED_CARD_NUMBER_LENGTH, c.line_index, c.position, c.priority)

    valid = sorted((c for c in well_formed if luhn_check(c.normalized)), key=sort_key)
    if valid:
        best = valid[0]
        return FieldSelection(FIELD_CARD_NUMBER, format_card_number(best.normalized), best)
    if strict_validation:
        return None
    best = sorted(well_formed, key=sort_key)[0]
    return FieldSelection(
        FIELD_CARD_NUMBER,
        format_card_number(best.normalized),
        best,
        verified=False,
        warnings=(WARNING_CHECKSUM_FAILED,),
    )


def select_expiry_date(candidates: List[FieldCandidate], today: date, reject_expired: bool) -> Optional[FieldSelection]:
    """
    First calendar-valid, not-yet-expired date by (pattern rank, line, offset).

    When ``reject_expired`` is off and only past dates were seen, the first
    of those is returned and flagged instead of dropped.
    """
    ordered = sorted(candidates, key=lambda c: (c.priority, c.line_index, c.position))
    first_expired: Optional[Tuple[FieldCandidate, int, int]] = None
    for cand in ordered:
        month_text, _, year_text = cand.normalized.partition("/")
        resolved = resolve_expiry(month_text, year_text, today)
        if resolved is None:
            continue
        year, month = resolved
        if is_expired(year, month, today):
            if first_expired is None:
                first_expired = (cand, year, month)
            continue
        return FieldSelection(FIELD_EXPIRY_DATE, format_expiry_date(year, month), cand)

    if first_expired is None or reject_expired:
        return None
    cand, year, month = first_expired
    return FieldSelection(
        FIELD_EXPIRY_DATE,
        format_expiry_date(year, month),
        cand,
        verified=False,
        warnings=(WARNING_EXPIRY_IN_PAST,),
    )


def select_cardholder_name(candidates: List[FieldCandidate], weights: NameScoringWeights = NAME_SCORING) -> Optional[FieldSelection]:
    scored = [c for c in candidates if c.score >= weights.min_score]
    if not scored:
        return None
    # Highest score first; ties go to the earliest line
    best = sorted(scored, key=lambda c: (-c.score, c.line_index))[0]
    return FieldSelection(FIELD_CARDHOLDER_NAME, format_cardholder_name(best.normalized), best)


def select_cvv(candidates: List[FieldCandidate]) -> Optional[FieldSelection]:
    if not candidates:
        return None
    best = sorted(candidates, key=lambda c: (c.priority, c.line_index, c.position))[0]
    return FieldSelection(FIELD_CVV, best.normalized, best)
