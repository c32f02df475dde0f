from __future__ import annotations

import logging
from dataclasses import replace
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from cards.card_type import (
    category_key,
    default_color,
    display_name,
    parse_category,
    predefined_categories,
    requires_back_image,
    supports_extraction,
)
from ocr.card_text_parser import CardTextParser, ParserOptions
from schemas.extraction import CategoryInfo, ExtractRequest, ExtractResponse
from services.ocr_service import OCRService
from settings.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ocr", tags=["ocr"])

_default_options = ParserOptions()


def get_default_options() -> ParserOptions:
    return _default_options


@router.post("/extract", response_model=ExtractResponse)
async def extract_card_text(
    payload: ExtractRequest,
    defaults: ParserOptions = Depends(get_default_options),
) -> ExtractResponse:
    """Extract card fields from recognizer text for one card side."""
    if len(payload.raw_text) > settings.MAX_REQUEST_TEXT_CHARS:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"raw_text exceeds {settings.MAX_REQUEST_TEXT_CHARS} characters",
        )
    try:
        category = parse_category(payload.category, payload.custom_name, payload.custom_color)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    options = replace(
        defaults,
        strict_validation=defaults.strict_validation if payload.strict_validation is None else payload.strict_validation,
        reject_expired=defaults.reject_expired if payload.reject_expired is None else payload.reject_expired,
    )
    service = OCRService(parser=CardTextParser(options))
    result = service.process_text(payload.raw_text, category, payload.side, payload.block_confidences)
    logger.info("OCR extract category=%s side=%s fields=%d", category_key(category), payload.side.value, len(result.extracted_data))

    return ExtractResponse(
        fields=result.extracted_data,
        found=result.has_valid_data(),
        manual_entry_required=result.requires_manual_entry,
        confidence=result.confidence,
        warnings=result.warnings,
        processing_time_ms=result.processing_time_ms,
        raw_text=payload.raw_text if settings.ECHO_RAW_TEXT else None,
    )


@router.get("/categories", response_model=List[CategoryInfo])
async def list_categories() -> List[CategoryInfo]:
    return [
        CategoryInfo(
            key=category_key(c),
            display_name=display_name(c),
            default_color=default_color(c),
            supports_extraction=supports_extraction(c),
            requires_back_image=requires_back_image(c),
        )
        for c in predefined_categories()
    ]
