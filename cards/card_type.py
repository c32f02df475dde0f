from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union, assert_never

DEFAULT_CUSTOM_COLOR = "#757575"


class CardType(str, Enum):
    """Predefined card categories. Only CREDIT and DEBIT carry extractable text."""

    CREDIT = "credit"
    DEBIT = "debit"
    TRANSPORT = "transport"
    GIFT = "gift"
    LOYALTY = "loyalty"
    MEMBERSHIP = "membership"
    INSURANCE = "insurance"
    IDENTIFICATION = "identification"
    VOUCHER = "voucher"
    EVENT = "event"
    BUSINESS = "business"
    LIBRARY = "library"
    HOTEL = "hotel"
    STUDENT = "student"
    ACCESS = "access"


@dataclass(frozen=True)
class CustomCardType:
    """User-defined category with its own display name and color."""

    name: str
    color_hex: str = DEFAULT_CUSTOM_COLOR


CardCategory = Union[CardType, CustomCardType]


class ImageSide(str, Enum):
    FRONT = "front"
    BACK = "back"


_DISPLAY_NAMES = {
    CardType.CREDIT: "Credit Card",
    CardType.DEBIT: "Debit Card",
    CardType.TRANSPORT: "Transport Card",
    CardType.GIFT: "Gift Card",
    CardType.LOYALTY: "Loyalty Card",
    CardType.MEMBERSHIP: "Membership Card",
    CardType.INSURANCE: "Insurance Card",
    CardType.IDENTIFICATION: "ID Card",
    CardType.VOUCHER: "Voucher",
    CardType.EVENT: "Event Ticket",
    CardType.BUSINESS: "Business Card",
    CardType.LIBRARY: "Library Card",
    CardType.HOTEL: "Hotel Card",
    CardType.STUDENT: "Student Card",
    CardType.ACCESS: "Access Card",
}

_DEFAULT_COLORS = {
    CardType.CREDIT: "#1976D2",
    CardType.DEBIT: "#388E3C",
    CardType.TRANSPORT: "#00BCD4",
    CardType.GIFT: "#E91E63",
    CardType.LOYALTY: "#FF9800",
    CardType.MEMBERSHIP: "#9C27B0",
    CardType.INSURANCE: "#795548",
    CardType.IDENTIFICATION: "#424242",
    CardType.VOUCHER: "#FF5722",
    CardType.EVENT: "#673AB7",
    CardType.BUSINESS: "#37474F",
    CardType.LIBRARY: "#4CAF50",
    CardType.HOTEL: "#FF5722",
    CardType.STUDENT: "#3F51B5",
    CardType.ACCESS: "#757575",
}


def supports_extraction(category: CardCategory) -> bool:
    match category:
        case CardType.CREDIT | CardType.DEBIT:
            return True
        case CardType():
            return False
        case CustomCardType():
            return False
        case _:
            assert_never(category)


def requires_back_image(category: CardCategory) -> bool:
    # Payment cards carry the security code on the back
    return supports_extraction(category)


def display_name(category: CardCategory) -> str:
    match category:
        case CardType():
            return _DISPLAY_NAMES[category]
        case CustomCardType(name=name):
            return name
        case _:
            assert_never(category)


def default_color(category: CardCategory) -> str:
    match category:
        case CardType():
            return _DEFAULT_COLORS[category]
        case CustomCardType(color_hex=color_hex):
            return color_hex
        case _:
            assert_never(category)


def category_key(category: CardCategory) -> str:
    match category:
        case CardType():
            return category.value
        case CustomCardType():
            return "custom"
        case _:
            assert_never(category)


def predefined_categories() -> List[CardType]:
    return list(CardType)


def parse_category(value: str, custom_name: Optional[str] = None, custom_color: Optional[str] = None) -> CardCategory:
    """
    Resolve a category from its key (``credit``), enum name (``CREDIT``) or
    ``custom`` plus a display name. Raises ValueError for anything else.
    """
    key = (value or "").strip().lower()
    if key == "custom":
        if not custom_name or not custom_name.strip():
            raise ValueError("custom category requires a name")
        return CustomCardType(custom_name.strip(), custom_color or DEFAULT_CUSTOM_COLOR)
    try:
        return CardType(key)
    except ValueError:
        raise ValueError(f"unknown card category: {value!r}") from None
