from __future__ import annotations

from typing import Annotated, List, Optional, Dict
from pydantic import BaseModel, Field

from cards.card_type import ImageSide


class ExtractRequest(BaseModel):
    raw_text: str = Field("", description="Recognizer output for one card side")
    category: str = Field(..., description="Category key, e.g. credit, debit, loyalty or custom")
    side: ImageSide = ImageSide.FRONT
    custom_name: Optional[str] = None
    custom_color: Optional[str] = None
    # Per-request policy overrides; None keeps the configured default
    strict_validation: Optional[bool] = None
    reject_expired: Optional[bool] = None
    block_confidences: List[Annotated[float, Field(ge=0.0, le=1.0, allow_inf_nan=False)]] = Field(default_factory=list)


class ExtractResponse(BaseModel):
    fields: Dict[str, str] = Field(default_factory=dict)
    found: bool
    manual_entry_required: bool
    confidence: float
    warnings: List[str] = Field(default_factory=list)
    processing_time_ms: int = 0
    raw_text: Optional[str] = None


class CategoryInfo(BaseModel):
    key: str
    display_name: str
    default_color: str
    supports_extraction: bool
    requires_back_image: bool
