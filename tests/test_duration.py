from __future__ import annotations

from datetime import timedelta

import pytest

from micasa.config import ParseError, coerce_duration, format_duration, parse_duration


def test_day_suffix() -> None:
    assert parse_duration("30d") == timedelta(hours=720)
    assert parse_duration("7d") == timedelta(days=7)
    assert parse_duration(" 2 d ") == timedelta(days=2)


def test_unit_syntax() -> None:
    assert parse_duration("720h") == timedelta(hours=720)
    assert parse_duration("10s") == timedelta(seconds=10)
    assert parse_duration("90m") == timedelta(minutes=90)
    assert parse_duration("1h30m") == timedelta(hours=1, minutes=30)
    assert parse_duration("500ms") == timedelta(milliseconds=500)
    assert parse_duration("1.5h") == timedelta(minutes=90)
    assert parse_duration("2m3s250us") == timedelta(minutes=2, seconds=3, microseconds=250)


def test_bare_integer_is_seconds() -> None:
    assert parse_duration("3600") == timedelta(hours=1)


@pytest.mark.parametrize("text", ["0", "0s", "0d", "0h0m"])
def test_zero_is_accepted(text: str) -> None:
    assert parse_duration(text) == timedelta(0)


def test_negative_values_are_not_rejected() -> None:
    assert parse_duration("-1s") == timedelta(seconds=-1)
    assert parse_duration("-5") == timedelta(seconds=-5)


def test_nanoseconds_round_to_microseconds() -> None:
    assert parse_duration("1500ns") == timedelta(microseconds=2)


@pytest.mark.parametrize("text", ["", "   ", "abc", "30x", "1d2h", "1.5d", "h", "10 s"])
def test_rejects_invalid(text: str) -> None:
    with pytest.raises(ParseError):
        parse_duration(text)


def test_error_names_input() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_duration("30x")
    assert "30x" in str(excinfo.value)
    assert "invalid duration" in str(excinfo.value)


def test_out_of_range_is_a_parse_error() -> None:
    with pytest.raises(ParseError):
        parse_duration("9999999999d")
    with pytest.raises(ParseError):
        parse_duration("99999999999999999999999999h")


def test_coerce_integer_is_seconds() -> None:
    assert coerce_duration(86400, field="documents.cache_ttl") == timedelta(days=1)


def test_coerce_string_is_parsed() -> None:
    assert coerce_duration("7d", field="documents.cache_ttl") == timedelta(days=7)


@pytest.mark.parametrize("value", [3.14, False, ["7d"]])
def test_coerce_rejects_other_types(value: object) -> None:
    with pytest.raises(ParseError) as excinfo:
        coerce_duration(value, field="documents.cache_ttl")
    assert "documents.cache_ttl" in str(excinfo.value)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (timedelta(0), "0s"),
        (timedelta(days=30), "30d"),
        (timedelta(seconds=5), "5s"),
        (timedelta(hours=1, minutes=30), "1h30m"),
        (timedelta(milliseconds=500), "500ms"),
        (timedelta(seconds=-90), "-1m30s"),
    ],
)
def test_format_duration(value: timedelta, expected: str) -> None:
    assert format_duration(value) == expected
    assert parse_duration(expected) == value
