from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ocr import config
from ocr.patterns import FIELD_CARD_NUMBER, FIELD_CARDHOLDER_NAME, FIELD_CVV, FIELD_EXPIRY_DATE


class OCRResult(BaseModel):
    success: bool
    extracted_data: Dict[str, str] = Field(default_factory=dict)
    raw_text: str = ""
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    error_message: Optional[str] = None
    processing_time_ms: int = 0
    warnings: List[str] = Field(default_factory=list)
    # False when the category is not extraction-eligible and nothing was attempted
    extraction_attempted: bool = True

    def has_valid_data(self) -> bool:
        return self.success and bool(self.extracted_data)

    def is_confidence_acceptable(self, threshold: float = config.CONFIDENCE_THRESHOLD) -> bool:
        return self.confidence >= threshold

    @property
    def requires_manual_entry(self) -> bool:
        """Extraction ran for an eligible card but found nothing; the UI should offer manual entry."""
        return self.success and self.extraction_attempted and not self.extracted_data

    @property
    def card_number(self) -> Optional[str]:
        return self.extracted_data.get(FIELD_CARD_NUMBER)

    @property
    def expiry_date(self) -> Optional[str]:
        return self.extracted_data.get(FIELD_EXPIRY_DATE)

    @property
    def cardholder_name(self) -> Optional[str]:
        return self.extracted_data.get(FIELD_CARDHOLDER_NAME)

    @property
    def cvv(self) -> Optional[str]:
        return self.extracted_data.get(FIELD_CVV)

    @classmethod
    def failed(cls, error_message: Optional[str] = None) -> "OCRResult":
        return cls(success=False, confidence=0.0, error_message=error_message)

    @classmethod
    def empty(cls) -> "OCRResult":
        """Successful no-op result for categories that are stored as images only."""
        return cls(success=True, confidence=1.0, extraction_attempted=False)
