from ocr.extractors import (
    extract_card_number,
    extract_cardholder_name,
    extract_cvv,
    extract_expiry_date,
    find_card_number_candidates,
    find_cvv_candidates,
    find_expiry_candidates,
)
from ocr.preprocess import normalize_text


def test_card_number_separators():
    assert extract_card_number(["4111-1111-1111-1111"]) == "4111 1111 1111 1111"
    assert extract_card_number(["4111.1111.1111.1111"]) == "4111 1111 1111 1111"
    assert extract_card_number(["4111111111111111"]) == "4111 1111 1111 1111"


def test_fifteen_digit_number_grouped_4_6_5():
    assert extract_card_number(["3782 822463 10005"]) == "3782 822463 10005"
    assert extract_card_number(["378282246310005"]) == "3782 822463 10005"


def test_nineteen_digit_number():
    candidates = find_card_number_candidates(["6011 0000 0000 0000 004"])
    assert [c.normalized for c in candidates] == ["6011000000000000004"]


def test_same_number_found_by_several_patterns_is_deduplicated():
    candidates = find_card_number_candidates(["4111 1111 1111 1111", "4111111111111111"])
    assert len(candidates) == 1
    assert candidates[0].line_index == 0


def test_strict_validation_both_ways():
    lines = ["4111 1111 1111 1112"]
    assert extract_card_number(lines, strict_validation=False) == "4111 1111 1111 1112"
    assert extract_card_number(lines, strict_validation=True) is None


def test_short_digit_runs_are_not_card_numbers():
    assert extract_card_number(["1234 5678", "PHONE 555 0100"]) is None


def test_expiry_formats(today):
    assert extract_expiry_date(["12/33"], today) == "12/33"
    assert extract_expiry_date(["12/2033"], today) == "12/33"
    assert extract_expiry_date(["12-33"], today) == "12/33"
    assert extract_expiry_date(["VALID THRU 12 33"], today) == "12/33"
    assert extract_expiry_date(["EXP 0933"], today) is None


def test_expiry_ignores_full_dates(today):
    assert find_expiry_candidates(["ISSUED 01/02/2033"]) == []


def test_expiry_labelled_beats_earlier_bare_date(today):
    lines = ["MEMBER SINCE 09/34", "GOOD THRU 03/35"]
    assert extract_expiry_date(lines, today) == "03/35"


def test_expiry_rollover_and_rejection(today):
    # today is 2031-06-15: "20" rolls over to 2120, "31" stays 2031
    assert extract_expiry_date(["01/20"], today) == "01/20"
    assert extract_expiry_date(["07/31"], today) == "07/31"
    assert extract_expiry_date(["05/31"], today) is None
    assert extract_expiry_date(["05/31"], today, reject_expired=False) == "05/31"


def test_name_skips_issuer_line():
    assert extract_cardholder_name(["CHASE BANK", "JOHN SMITH"]) == "John Smith"


def test_name_formatting():
    assert extract_cardholder_name(["MARY-JANE O CONNOR"]) == "Mary-Jane O Connor"
    assert extract_cardholder_name(["JOHN SMITH III"]) == "John Smith III"


def test_name_none_when_nothing_scores():
    assert extract_cardholder_name(["VISA PLATINUM", "4111 1111 1111 1111"]) is None


def test_cvv_isolated_from_long_digit_runs():
    lines = normalize_text("123456789012345\n321")
    assert extract_cvv(lines) == "321"


def test_cvv_ignores_grouped_card_number_on_back():
    lines = normalize_text("4111 1111 1111 1111\n987")
    assert extract_cvv(lines) == "987"


def test_labelled_cvv_wins():
    lines = normalize_text("CALL 800 555\nCVV: 4821")
    candidates = find_cvv_candidates(lines)
    assert extract_cvv(lines) == "4821"
    assert [c.priority for c in candidates if c.normalized == "4821"] == [0]


def test_cvv_none_without_candidates():
    assert extract_cvv(["AUTHORIZED SIGNATURE"]) is None
