import pytest

from ocr.candidates import FieldCandidate
from ocr.patterns import FIELD_CARD_NUMBER, FIELD_CARDHOLDER_NAME, FIELD_EXPIRY_DATE
from ocr.validators import (
    NAME_SCORING,
    NameScoringWeights,
    WARNING_CHECKSUM_FAILED,
    WARNING_EXPIRY_IN_PAST,
    expand_two_digit_year,
    is_expired,
    is_name_candidate_line,
    luhn_check,
    resolve_expiry,
    score_name,
    select_card_number,
    select_cardholder_name,
    select_expiry_date,
)


@pytest.mark.parametrize(
    "digits,expected",
    [
        ("4111111111111111", True),
        ("5555555555554444", True),
        ("378282246310005", True),
        ("4111111111111112", False),
        ("", False),
        ("4111a11111111111", False),
    ],
)
def test_luhn_check(digits, expected):
    assert luhn_check(digits) is expected


def test_two_digit_year_rollover(today):
    assert expand_two_digit_year(20, today) == 2120
    assert expand_two_digit_year(30, today) == 2130
    assert expand_two_digit_year(31, today) == 2031
    assert expand_two_digit_year(32, today) == 2032


def test_resolve_expiry_rejects_bad_month(today):
    assert resolve_expiry("13", "25", today) is None
    assert resolve_expiry("00", "25", today) is None
    assert resolve_expiry("12", "2033", today) == (2033, 12)


def test_is_expired_boundary(today):
    assert is_expired(2031, 5, today)
    assert not is_expired(2031, 6, today)
    assert not is_expired(2031, 7, today)


def _number(digits, line_index=0, position=0):
    return FieldCandidate(FIELD_CARD_NUMBER, digits, line_index, digits, position)


def test_select_card_number_prefers_valid_over_earlier_invalid():
    selection = select_card_number([_number("4111111111111112"), _number("4111111111111111", 1)], False)
    assert selection.value == "4111 1111 1111 1111"
    assert selection.verified
    assert selection.warnings == ()


def test_select_card_number_prefers_sixteen_digits():
    selection = select_card_number([_number("378282246310005"), _number("4111111111111111", 2)], False)
    assert selection.value == "4111 1111 1111 1111"


def test_select_card_number_fallback_flagged():
    selection = select_card_number([_number("4111111111111112")], strict_validation=False)
    assert selection.value == "4111 1111 1111 1112"
    assert not selection.verified
    assert selection.warnings == (WARNING_CHECKSUM_FAILED,)


def test_select_card_number_strict_drops_invalid():
    assert select_card_number([_number("4111111111111112")], strict_validation=True) is None


def _expiry(value, line_index=0, priority=1):
    return FieldCandidate(FIELD_EXPIRY_DATE, value, line_index, value, priority=priority)


def test_select_expiry_skips_past_date_for_future_one(today):
    selection = select_expiry_date([_expiry("05/31"), _expiry("09/33", 1)], today, reject_expired=True)
    assert selection.value == "09/33"


def test_select_expiry_reject_expired_both_ways(today):
    past = [_expiry("05/31")]
    assert select_expiry_date(past, today, reject_expired=True) is None
    selection = select_expiry_date(past, today, reject_expired=False)
    assert selection.value == "05/31"
    assert not selection.verified
    assert selection.warnings == (WARNING_EXPIRY_IN_PAST,)


def test_select_expiry_current_month_is_valid(today):
    assert select_expiry_date([_expiry("06/31")], today, reject_expired=True).value == "06/31"


def test_select_expiry_labelled_ranks_first(today):
    selection = select_expiry_date(
        [_expiry("01/40", line_index=0, priority=2), _expiry("03/35", line_index=3, priority=0)],
        today,
        reject_expired=True,
    )
    assert selection.value == "03/35"


@pytest.mark.parametrize(
    "line,expected",
    [
        ("JOHN SMITH", True),
        ("CHASE BANK", False),
        ("VALID THRU", False),
        ("JOHN", False),
        ("A B C D E", False),
        ("JOHN SMITH 2", False),
        ("CARDIGAN SMITH", True),
    ],
)
def test_is_name_candidate_line(line, expected):
    assert is_name_candidate_line(line) is expected


def test_score_name_table():
    # 2 words (30) + length 8..20 (20) + all caps (25) + two words in range (5 + 5)
    assert score_name("JOHN SMITH") == 85
    # 3 words (20) + length (20) + all caps (25) + 3 * 5
    assert score_name("MARY ANN LEE") == 20 + 20 + 25 + 15
    # mixed case loses the caps bonus
    assert score_name("John Smith") == 60
    # single-letter word is penalised
    assert score_name("J SMITH") == 30 + 25 - 10 + 5


def test_score_name_suffix_not_penalised():
    assert score_name("JOHN SMITH JR") == 20 + 20 + 25 + 10


def test_custom_weights():
    weights = NameScoringWeights(all_caps_score=0, min_score=80)
    assert score_name("JOHN SMITH", weights) == 60
    candidate = FieldCandidate(FIELD_CARDHOLDER_NAME, "JOHN SMITH", 0, "JOHN SMITH", score=60)
    assert select_cardholder_name([candidate], weights) is None


def test_select_name_tie_goes_to_earliest_line():
    first = FieldCandidate(FIELD_CARDHOLDER_NAME, "JANE DOE", 1, "JANE DOE", score=85)
    second = FieldCandidate(FIELD_CARDHOLDER_NAME, "JOHN SMITH", 2, "JOHN SMITH", score=85)
    assert select_cardholder_name([second, first], NAME_SCORING).value == "Jane Doe"


def test_luhn_rejects_non_ascii_digits():
    assert not luhn_check("４１１１１１１１１１１１１１１１")
    assert select_card_number([_number("４１１１１１１１１１１１１１１１")], False) is None
