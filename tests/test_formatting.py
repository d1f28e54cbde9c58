"""Tests for label formatting and parsing."""

import pytest

from fitness_tracker.services.formatting import (
    format_duration,
    format_value,
    parse_numeric_value,
    parse_unit_suffix,
)


@pytest.mark.parametrize(
    ("value", "unit", "expected"),
    [
        (100, "g", "100 g"),
        (2.5, "g", "2.5 g"),
        (1000, "mg", "1000 mg"),
        (250, "mL", "250mL"),
        (1.5, "L", "1.5L"),
        (1850, "kcal", "1850kcal"),
        (45, "%", "45%"),
        (99.96, "g", "100 g"),
        (12, "", "12"),
    ],
)
def test_format_value(value: float, unit: str, expected: str) -> None:
    assert format_value(value, unit) == expected


@pytest.mark.parametrize(
    ("value", "unit"),
    [(0, "g"), (12.3, "mg"), (250, "mL"), (7.5, "m2"), (10000, "steps")],
)
def test_formatted_labels_parse_back(value: float, unit: str) -> None:
    label = format_value(value, unit)

    assert parse_numeric_value(label) == pytest.approx(value, abs=0.05)
    assert parse_unit_suffix(label) == unit


def test_parse_numeric_value_without_digits_returns_none() -> None:
    assert parse_numeric_value("mg") is None
    assert parse_numeric_value("") is None
    assert parse_numeric_value(".") is None


def test_parse_numeric_value_stops_at_second_point() -> None:
    assert parse_numeric_value("1.2.3 g") == pytest.approx(1.2)
    assert parse_numeric_value(".5g") == pytest.approx(0.5)


def test_parse_unit_suffix_strips_whitespace() -> None:
    assert parse_unit_suffix("  30   mg ") == "mg"
    assert parse_unit_suffix("42") == ""


def test_format_duration() -> None:
    assert format_duration(5.5) == "05h 30m"
    assert format_duration(16) == "16h 00m"
    assert format_duration(-2) == "00h 00m"
