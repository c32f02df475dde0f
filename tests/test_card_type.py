import re

import pytest

from cards.card_type import (
    CardType,
    CustomCardType,
    DEFAULT_CUSTOM_COLOR,
    category_key,
    default_color,
    display_name,
    parse_category,
    predefined_categories,
    requires_back_image,
    supports_extraction,
)

HEX_COLOR = re.compile(r"^#[0-9A-F]{6}$")


def test_every_predefined_category_has_name_and_color():
    categories = predefined_categories()
    assert len(categories) == 15
    for category in categories:
        assert display_name(category)
        assert HEX_COLOR.match(default_color(category))


def test_only_payment_cards_are_extraction_eligible():
    eligible = {c for c in CardType if supports_extraction(c)}
    assert eligible == {CardType.CREDIT, CardType.DEBIT}
    assert requires_back_image(CardType.CREDIT)
    assert not requires_back_image(CardType.LOYALTY)


def test_custom_category():
    custom = CustomCardType("Gym")
    assert not supports_extraction(custom)
    assert display_name(custom) == "Gym"
    assert default_color(custom) == DEFAULT_CUSTOM_COLOR
    assert category_key(custom) == "custom"


@pytest.mark.parametrize("value", ["credit", "CREDIT", " Credit "])
def test_parse_category_predefined(value):
    assert parse_category(value) is CardType.CREDIT


def test_parse_category_custom():
    category = parse_category("custom", "Gym", "#123456")
    assert category == CustomCardType("Gym", "#123456")


@pytest.mark.parametrize("value,name", [("platinum", None), ("", None), ("custom", None), ("custom", "  ")])
def test_parse_category_rejects(value, name):
    with pytest.raises(ValueError):
        parse_category(value, name)
