from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from cards.card_type import CardCategory, ImageSide, category_key, supports_extraction
from ocr import config
from ocr.candidates import FieldSelection
from ocr.extractors import (
    find_card_number_candidates,
    find_cvv_candidates,
    find_expiry_candidates,
    find_name_candidates,
)
from ocr.formatters import mask_card_number
from ocr.json_logger import get_json_logger
from ocr.patterns import FIELD_CARD_NUMBER, FIELD_CARDHOLDER_NAME, FIELD_CVV, FIELD_EXPIRY_DATE
from ocr.preprocess import normalize_text
from ocr.validators import (
    NAME_SCORING,
    NameScoringWeights,
    select_card_number,
    select_cardholder_name,
    select_cvv,
    select_expiry_date,
)


logger = get_json_logger("card_text_parser")


class ParseStage(str, Enum):
    IDLE = "idle"
    PREPROCESSING = "preprocessing"
    EXTRACTING = "extracting"
    VALIDATING = "validating"
    DONE = "done"


@dataclass(frozen=True)
class ParserOptions:
    """
    Policy knobs for a parse.

    - strict_validation: drop card numbers failing Luhn instead of returning a best guess
    - reject_expired: drop expiry dates before the current month instead of flagging them
    - today: reference date for expiry checks; None means ``date.today()`` at parse time
    """

    strict_validation: bool = config.STRICT_VALIDATION
    reject_expired: bool = config.REJECT_EXPIRED
    min_line_length: int = config.MIN_LINE_LENGTH
    today: Optional[date] = None
    name_weights: NameScoringWeights = NAME_SCORING


@dataclass
class ParseReport:
    """Everything one parse produced, for callers that need more than the field map."""

    side: ImageSide
    eligible: bool
    lines: List[str] = field(default_factory=list)
    selections: Dict[str, FieldSelection] = field(default_factory=dict)
    candidate_counts: Dict[str, int] = field(default_factory=dict)
    stages: List[ParseStage] = field(default_factory=lambda: [ParseStage.IDLE])
    truncated: bool = False

    @property
    def fields(self) -> Dict[str, str]:
        return {k: s.value for k, s in self.selections.items() if s.value}

    @property
    def warnings(self) -> List[str]:
        out: List[str] = []
        for selection in self.selections.values():
            out.extend(selection.warnings)
        return out

    def is_verified(self, field_key: str) -> bool:
        selection = self.selections.get(field_key)
        return bool(selection and selection.verified)

    def advance(self, stage: ParseStage) -> None:
        self.stages.append(stage)


class CardTextParser:
    """
    Turns recognizer text from one card side into validated, display-ready fields.

    Stateless apart from its options: the same (text, category, side) always
    yields the same result, and one instance may be shared across threads.
    """

    def __init__(self, options: Optional[ParserOptions] = None) -> None:
        self.options = options or ParserOptions()

    def parse(self, raw_text: str, category: CardCategory, side: ImageSide) -> Dict[str, str]:
        return self.parse_report(raw_text, category, side).fields

    def parse_report(self, raw_text: str, category: CardCategory, side: ImageSide) -> ParseReport:
        if not isinstance(side, ImageSide):
            raise TypeError(f"side must be an ImageSide, got {type(side).__name__}")

        report = ParseReport(side=side, eligible=supports_extraction(category))
        if not report.eligible:
            report.advance(ParseStage.DONE)
            return report

        text = raw_text or ""
        if len(text) > config.MAX_RAW_TEXT_CHARS:
            logger.warning(
                "raw_text_truncated",
                extra={"extra": {"chars": len(text), "max_chars": config.MAX_RAW_TEXT_CHARS}},
            )
            text = text[: config.MAX_RAW_TEXT_CHARS]
            report.truncated = True

        report.advance(ParseStage.PREPROCESSING)
        report.lines = normalize_text(text, self.options.min_line_length)

        report.advance(ParseStage.EXTRACTING)
        if side is ImageSide.FRONT:
            number_candidates = find_card_number_candidates(report.lines)
            expiry_candidates = find_expiry_candidates(report.lines)
            name_candidates = find_name_candidates(report.lines, self.options.name_weights)
            report.candidate_counts = {
                FIELD_CARD_NUMBER: len(number_candidates),
                FIELD_EXPIRY_DATE: len(expiry_candidates),
                FIELD_CARDHOLDER_NAME: len(name_candidates),
            }
        else:
            cvv_candidates = find_cvv_candidates(report.lines)
            report.candidate_counts = {FIELD_CVV: len(cvv_candidates)}

        report.advance(ParseStage.VALIDATING)
        if side is ImageSide.FRONT:
            today = self.options.today or date.today()
            selected = [
                select_card_number(number_candidates, self.options.strict_validation),
                select_expiry_date(expiry_candidates, today, self.options.reject_expired),
                select_cardholder_name(name_candidates, self.options.name_weights),
            ]
        else:
            selected = [select_cvv(cvv_candidates)]
        for selection in selected:
            if selection is not None and selection.value:
                report.selections[selection.field] = selection

        report.advance(ParseStage.DONE)
        self._log_report(report, category)
        return report

    def _log_report(self, report: ParseReport, category: CardCategory) -> None:
        payload: Dict[str, object] = {
            "category": category_key(category),
            "side": report.side.value,
            "lines": len(report.lines),
            "found": sorted(report.fields.keys()),
            "warnings": report.warnings,
        }
        number = report.fields.get(FIELD_CARD_NUMBER)
        if number:
            payload["card_number"] = mask_card_number(number)
        if config.LOG_CANDIDATES:
            payload["candidates"] = report.candidate_counts
        logger.info("card_text_parsed", extra={"extra": payload})


_default_parser = CardTextParser()


def parse_card_text(raw_text: str, category: CardCategory, side: ImageSide) -> Dict[str, str]:
    """Extract ``cardNumber``/``expiryDate``/``cardholderName`` (front) or ``cvv`` (back)."""
    return _default_parser.parse(raw_text, category, side)
