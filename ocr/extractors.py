from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from ocr.candidates import FieldCandidate
from ocr.patterns import (
    CARD_NUMBER_CLEAN_RE,
    CARD_NUMBER_PATTERNS,
    CVV_LABEL_RE,
    CVV_TOKEN_RE,
    EXPIRY_PATTERNS,
    FIELD_CARD_NUMBER,
    FIELD_CARDHOLDER_NAME,
    FIELD_CVV,
    FIELD_EXPIRY_DATE,
    MAX_CARD_NUMBER_LENGTH,
    MIN_CARD_NUMBER_LENGTH,
)
from ocr.validators import (
    NAME_SCORING,
    NameScoringWeights,
    is_name_candidate_line,
    score_name,
    select_card_number,
    select_cardholder_name,
    select_cvv,
    select_expiry_date,
)


# ---------------------------------------------
# Candidate discovery
# ---------------------------------------------
def find_card_number_candidates(lines: List[str]) -> List[FieldCandidate]:
    """All 13-19 digit runs matched by the number patterns, one per distinct digit string."""
    seen: Dict[str, FieldCandidate] = {}
    for line_index, line in enumerate(lines):
        for priority, (_name, pattern) in enumerate(CARD_NUMBER_PATTERNS):
            for m in pattern.finditer(line):
                digits = CARD_NUMBER_CLEAN_RE.sub("", m.group(0))
                if not (MIN_CARD_NUMBER_LENGTH <= len(digits) <= MAX_CARD_NUMBER_LENGTH):
                    continue
                if digits in seen:
                    continue
                seen[digits] = FieldCandidate(
                    field=FIELD_CARD_NUMBER,
                    raw=m.group(0),
                    line_index=line_index,
                    normalized=digits,
                    position=m.start(),
                    priority=priority,
                )
    return list(seen.values())


def find_expiry_candidates(lines: List[str]) -> List[FieldCandidate]:
    candidates: List[FieldCandidate] = []
    for line_index, line in enumerate(lines):
        for priority, (_name, pattern) in enumerate(EXPIRY_PATTERNS):
            for m in pattern.finditer(line):
                candidates.append(FieldCandidate(
                    field=FIELD_EXPIRY_DATE,
                    raw=m.group(0),
                    line_index=line_index,
                    normalized=f"{m.group('month')}/{m.group('year')}",
                    position=m.start("month"),
                    priority=priority,
                ))
    return candidates


def find_name_candidates(lines: List[str], weights: NameScoringWeights = NAME_SCORING) -> List[FieldCandidate]:
    return [
        FieldCandidate(
            field=FIELD_CARDHOLDER_NAME,
            raw=line,
            line_index=line_index,
            normalized=line.strip(),
            score=score_name(line, weights),
        )
        for line_index, line in enumerate(lines)
        if is_name_candidate_line(line)
    ]


def _blank_card_numbers(line: str) -> str:
    for _name, pattern in CARD_NUMBER_PATTERNS:
        line = pattern.sub(lambda m: " " * len(m.group(0)), line)
    return line


def find_cvv_candidates(lines: List[str]) -> List[FieldCandidate]:
    """
    Isolated 3-4 digit tokens. Number-shaped spans leaking onto the back
    image are blanked first; a token right after a CVV/CVC label ranks first.
    """
    candidates: List[FieldCandidate] = []
    for line_index, line in enumerate(lines):
        scrubbed = _blank_card_numbers(line)
        labelled_at = {m.end() for m in CVV_LABEL_RE.finditer(scrubbed)}
        offset = 0
        for token in scrubbed.split(" "):
            position = offset
            offset += len(token) + 1
            if not CVV_TOKEN_RE.match(token):
                continue
            candidates.append(FieldCandidate(
                field=FIELD_CVV,
                raw=token,
                line_index=line_index,
                normalized=token,
                position=position,
                priority=0 if position in labelled_at else 1,
            ))
    return candidates


# ---------------------------------------------
# Per-field extraction (discover -> validate/select -> format)
# ---------------------------------------------
def extract_card_number(lines: List[str], strict_validation: bool = False) -> Optional[str]:
    selection = select_card_number(find_card_number_candidates(lines), strict_validation)
    return selection.value if selection else None


def extract_expiry_date(lines: List[str], today: Optional[date] = None, reject_expired: bool = True) -> Optional[str]:
    selection = select_expiry_date(find_expiry_candidates(lines), today or date.today(), reject_expired)
    return selection.value if selection else None


def extract_cardholder_name(lines: List[str], weights: NameScoringWeights = NAME_SCORING) -> Optional[str]:
    selection = select_cardholder_name(find_name_candidates(lines, weights), weights)
    return selection.value if selection else None


def extract_cvv(lines: List[str]) -> Optional[str]:
    selection = select_cvv(find_cvv_candidates(lines))
    return selection.value if selection else None
