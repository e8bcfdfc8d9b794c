from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from fastapi_sparql.core.escaping import (
    escape,
    escape_boolean,
    escape_date,
    escape_number,
    escape_string,
    to_iso_utc,
)
from fastapi_sparql.core.exceptions import UnsupportedTypeError, UnsupportedValueError
from fastapi_sparql.core.types import ParamType, TypeDescriptor


def test_escape_plain_string():
    """Strings without specials are just quoted"""
    assert escape("foo", ParamType.PLAIN_STRING) == '"foo"'
    assert escape("", ParamType.PLAIN_STRING) == '""'
    assert escape("<foo bar>", ParamType.PLAIN_STRING) == '"<foo bar>"'


def test_escape_string_backslash_and_quotes():
    assert escape_string('"foo\\"') == '"\\"foo\\\\\\""'
    assert escape_string("fo\\o") == '"fo\\\\o"'
    assert escape_string('"""foo"""bar') == '"\\"\\"\\"foo\\"\\"\\"bar"'


def test_escape_string_every_special_gets_one_backslash():
    value = 'a"b\\c"d'
    escaped = escape_string(value)
    assert escaped.startswith('"') and escaped.endswith('"')
    inner = escaped[1:-1]
    assert inner == 'a\\"b\\\\c\\"d'
    assert inner.replace('\\"', "").replace("\\\\", "") == "abcd"


def test_escape_string_newline_and_carriage_return():
    assert escape_string("foo\n\rbar") == '"foo\\n\\rbar"'
    assert escape_string("foo\nbar\rbaz") == '"foo\\nbar\\rbaz"'


def test_escape_string_only_first_newline_is_escaped():
    """Later newlines / carriage returns are left raw"""
    assert escape_string("a\nb\nc") == '"a\\nb\nc"'
    assert escape_string("a\rb\rc\nd\ne") == '"a\\rb\rc\\nd\ne"'


def test_escape_string_rejects_non_strings():
    with pytest.raises(UnsupportedValueError):
        escape_string(42)


def test_escape_uri_is_passthrough():
    assert escape("foo", ParamType.URI_REFERENCE) == "<foo>"
    assert escape("http://example.org", ParamType.URI_REFERENCE) == "<http://example.org>"
    # No validation of any kind
    assert escape("f>oo<", ParamType.URI_REFERENCE) == "<f>oo<>"
    assert escape('a"b\\c', ParamType.URI_REFERENCE) == '<a"b\\c>'


def test_escape_booleans():
    assert escape(True, ParamType.BOOLEAN) == "true"
    assert escape(False, ParamType.BOOLEAN) == "false"


@pytest.mark.parametrize("value", ["false", "true", 0, 1, None])
def test_escape_boolean_rejects_non_booleans(value):
    """The string "false" must never turn into true"""
    with pytest.raises(UnsupportedValueError):
        escape_boolean(value)


@pytest.mark.parametrize(
    "value, expected",
    [
        (42, "42"),
        (3.14159265358979, "3.14159265358979"),
        (1267.43233e12, "1267432330000000"),
        (12.78e-2, "0.1278"),
        (1e-7, "0.0000001"),
        (-5.0, "-5"),
        (42.0, "42"),
        (-0.0, "0"),
        (1e23, "1" + "0" * 23),
        (1.5e300, "15" + "0" * 299),
        (Decimal("1.50"), "1.5"),
        (Decimal("1E+3"), "1000"),
    ],
)
def test_escape_numbers(value, expected):
    assert escape(value, ParamType.NUMBER) == expected


def test_escape_number_keeps_booleans():
    assert escape_number(True) == "true"
    assert escape_number(False) == "false"


@pytest.mark.parametrize("value", [float("nan"), float("inf"), Decimal("NaN"), "42"])
def test_escape_number_rejects_values_without_literal(value):
    with pytest.raises(UnsupportedValueError):
        escape_number(value)


def test_escape_date_value():
    moment = datetime(2020, 1, 1, 12, 30, 15, 123456, tzinfo=timezone.utc)
    assert (
        escape(moment, ParamType.DATETIME_VALUE)
        == '"2020-01-01T12:30:15.123Z"^^xsd:dateTime'
    )


def test_escape_date_converts_to_utc():
    moment = datetime(2020, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=3)))
    assert escape_date(moment) == '"2019-12-31T23:00:00.000Z"^^xsd:dateTime'


def test_naive_datetime_and_date_are_utc():
    assert to_iso_utc(datetime(2021, 6, 1, 8, 0)) == "2021-06-01T08:00:00.000Z"
    assert to_iso_utc(date(2021, 6, 1)) == "2021-06-01T00:00:00.000Z"


def test_escape_date_string_is_not_reformatted():
    assert (
        escape("2020-01-01T00:00:00Z", ParamType.DATETIME_STRING)
        == '"2020-01-01T00:00:00Z"^^xsd:dateTime'
    )
    assert escape("foo", ParamType.DATETIME_STRING) == '"foo"^^xsd:dateTime'


def test_escape_is_deterministic():
    descriptor = TypeDescriptor.of(ParamType.PLAIN_STRING)
    assert escape('x"y', descriptor) == escape('x"y', descriptor)


def test_escape_unsupported_type_fails():
    with pytest.raises(UnsupportedTypeError) as exc_info:
        escape({"a": 1}, TypeDescriptor(ParamType.UNSUPPORTED, "dict"))
    assert exc_info.value.type_name == "dict"
    assert "dict" in str(exc_info.value)


def test_escape_unsupported_kind_without_name():
    with pytest.raises(UnsupportedTypeError) as exc_info:
        escape(["foo"], ParamType.UNSUPPORTED)
    assert exc_info.value.type_name == "unsupported"
