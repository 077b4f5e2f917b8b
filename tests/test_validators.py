"""Validation helpers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from expense_index.exceptions import ValidationError
from expense_index.validators import (
    parse_amount,
    validate_category,
    validate_count,
    validate_date,
    validate_position,
)


@pytest.mark.parametrize(
    "raw, expected",
    [("12.5", Decimal("12.50")), (3, Decimal("3.00")), ("0", Decimal("0.00")), ("1.005", Decimal("1.01"))],
)
def test_parse_amount_quantizes(raw: object, expected: Decimal) -> None:
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "ten", "-0.01", "NaN", "Infinity", None, True])
def test_parse_amount_rejects(raw: object) -> None:
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_validate_category_trims_and_limits_length() -> None:
    assert validate_category("  Food ") == "Food"
    with pytest.raises(ValidationError):
        validate_category("x" * 51)
    with pytest.raises(ValidationError):
        validate_category(42)


def test_validate_date_accepts_iso_dates() -> None:
    assert validate_date(" 2024-01-05 ") == "2024-01-05"
    assert validate_date(date(2024, 2, 29)) == "2024-02-29"


@pytest.mark.parametrize("raw", ["2024-1-5", "05-01-2024", "2023-02-29", "", 20240105])
def test_validate_date_rejects(raw: object) -> None:
    with pytest.raises(ValidationError):
        validate_date(raw)


def test_validate_count_and_position() -> None:
    assert validate_count("3") == 3
    assert validate_position("-2") == -2
    with pytest.raises(ValidationError):
        validate_count("-1")
    with pytest.raises(ValidationError):
        validate_position("1.5")
