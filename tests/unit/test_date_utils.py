"""Unit tests for calendar month helpers"""

from datetime import date, datetime
from domus.utils.date_utils import is_valid_month, month_key, months_between, round_half_up


def test_month_key_pads():
    assert month_key(date(2024, 3, 10)) == "2024-03"
    assert month_key(datetime(2023, 12, 31, 23, 59)) == "2023-12"


def test_month_keys_sort_chronologically():
    """String comparison of month keys matches calendar order"""
    assert month_key(date(2023, 12, 1)) < month_key(date(2024, 1, 1))
    assert month_key(date(2024, 9, 1)) < month_key(date(2024, 10, 1))


def test_is_valid_month():
    assert is_valid_month("2024-01")
    assert is_valid_month("2024-12")
    assert not is_valid_month("2024-13")
    assert not is_valid_month("2024-1")
    assert not is_valid_month("2024-03-01")
    assert not is_valid_month("march")


def test_months_between_ignores_day():
    assert months_between(date(2024, 1, 31), date(2024, 2, 1)) == 1
    assert months_between(date(2024, 3, 1), date(2024, 3, 31)) == 0
    assert months_between(datetime(2023, 11, 20), datetime(2024, 2, 1)) == 3
    assert months_between(date(2024, 5, 1), date(2024, 3, 1)) == -2


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert round_half_up(0) == 0
