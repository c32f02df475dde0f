from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from cards.card_type import CardCategory, ImageSide, category_key, supports_extraction
from ocr.card_text_parser import CardTextParser, ParseReport
from ocr.json_logger import get_json_logger
from ocr.patterns import FIELD_CARD_NUMBER, FIELD_CARDHOLDER_NAME, FIELD_CVV, FIELD_EXPIRY_DATE
from schemas.ocr_result import OCRResult


logger = get_json_logger("ocr_service")

# Field weights for the confidence score; card number matters most
BASE_CONFIDENCE = 0.30
FIELD_CONFIDENCE = {
    FIELD_CARD_NUMBER: 0.35,
    FIELD_EXPIRY_DATE: 0.15,
    FIELD_CARDHOLDER_NAME: 0.10,
    FIELD_CVV: 0.10,
}
CHECKSUM_BONUS = 0.15
EXPIRY_VALID_BONUS = 0.05


@dataclass
class RecognizedText:
    """Output of the on-device recognizer: full text plus optional per-block confidences."""

    text: str
    block_confidences: List[float] = field(default_factory=list)


class TextRecognizer(Protocol):
    async def recognize(self, image: bytes) -> RecognizedText:
        ...


def compute_confidence(report: ParseReport, block_confidences: Optional[List[float]] = None) -> float:
    fields = report.fields
    if not fields:
        score = 0.0
    else:
        score = BASE_CONFIDENCE + sum(FIELD_CONFIDENCE.get(k, 0.0) for k in fields)
        if report.is_verified(FIELD_CARD_NUMBER):
            score += CHECKSUM_BONUS
        if report.is_verified(FIELD_EXPIRY_DATE):
            score += EXPIRY_VALID_BONUS
        score = min(score, 1.0)
    # Non-finite values from a misbehaving recognizer are ignored
    blocks = [min(max(float(c), 0.0), 1.0) for c in (block_confidences or []) if math.isfinite(c)]
    if blocks:
        score = (score + sum(blocks) / len(blocks)) / 2.0
    return round(score, 4)


class OCRService:
    """
    Runs the card text parser over recognizer output and packages an OCRResult.

    Recognizer failures are reported through ``OCRResult.failed`` and never
    raised, so a capture screen can always fall back to manual entry.
    """

    def __init__(self, recognizer: Optional[TextRecognizer] = None, parser: Optional[CardTextParser] = None) -> None:
        self.recognizer = recognizer
        self.parser = parser or CardTextParser()

    def process_text(
        self,
        raw_text: str,
        category: CardCategory,
        side: ImageSide,
        block_confidences: Optional[List[float]] = None,
    ) -> OCRResult:
        started = time.perf_counter()
        if not supports_extraction(category):
            return OCRResult.empty()
        report = self.parser.parse_report(raw_text, category, side)
        return OCRResult(
            success=True,
            extracted_data=report.fields,
            raw_text=raw_text,
            confidence=compute_confidence(report, block_confidences),
            processing_time_ms=int((time.perf_counter() - started) * 1000),
            warnings=report.warnings,
        )

    async def process_image_side(self, image_data: bytes, category: CardCategory, side: ImageSide) -> OCRResult:
        if not supports_extraction(category):
            return OCRResult.empty()
        if not image_data:
            return OCRResult.failed("Invalid image data")
        if self.recognizer is None:
            return OCRResult.failed("No text recognizer configured")

        started = time.perf_counter()
        try:
            recognized = await self.recognizer.recognize(image_data)
        except Exception as exc:
            logger.warning(
                "ocr_recognizer_failed",
                extra={"extra": {"category": category_key(category), "side": side.value, "error": str(exc)}},
            )
            return OCRResult.failed(str(exc) or exc.__class__.__name__)

        result = self.process_text(recognized.text, category, side, recognized.block_confidences)
        result.processing_time_ms = int((time.perf_counter() - started) * 1000)
        return result

    async def process_image(self, image_data: bytes, category: CardCategory) -> OCRResult:
        """Single-image capture flow: treated as the front side."""
        return await self.process_image_side(image_data, category, ImageSide.FRONT)
