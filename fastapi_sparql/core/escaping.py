"""
ESCAPING MODULE - Turn one typed value into SPARQL literal text

Purpose:
    1. Quote and escape strings
    2. Wrap URI references in angle brackets
    3. Render date-times as xsd:dateTime typed literals
    4. Render booleans and numbers as bare tokens

Every function here is pure: same (value, type) in, same text out.

Data Flow:
    (value, TypeDescriptor) → escape() → escape_<kind>() → literal
"""

import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Union

from fastapi_sparql.core.exceptions import UnsupportedTypeError, UnsupportedValueError
from fastapi_sparql.core.types import ParamType, TypeDescriptor

XSD_DATETIME = "xsd:dateTime"

_STRING_SPECIALS = re.compile(r'[\\"]')


# ============================================================================
# STRINGS AND URIS
# ============================================================================


def escape_string(value: str) -> str:
    """
    Quote a plain string.

    Backslashes and double quotes are escaped everywhere. Only the FIRST
    newline and the FIRST carriage return become \\n and \\r, any later ones
    stay raw. Existing queries depend on that output so it is kept as is.

    Example:
        'say "hi"'      -> '"say \\"hi\\""'
        'foo\\nbar\\rbaz' -> '"foo\\\\nbar\\\\rbaz"'
    """
    if not isinstance(value, str):
        raise UnsupportedValueError(value, ParamType.PLAIN_STRING.value)

    escaped = _STRING_SPECIALS.sub(lambda match: "\\" + match.group(0), value)
    # TODO: escape every newline once deployed routes stop relying on first-only output
    escaped = escaped.replace("\n", "\\n", 1).replace("\r", "\\r", 1)
    return f'"{escaped}"'


def escape_uri(value: str) -> str:
    """Wrap a URI reference in angle brackets, nothing inside is touched."""
    if not isinstance(value, str):
        raise UnsupportedValueError(value, ParamType.URI_REFERENCE.value)
    return f"<{value}>"


# ============================================================================
# DATES
# ============================================================================


def to_iso_utc(value: Union[datetime, date]) -> str:
    """
    Canonical UTC form with millisecond precision, e.g. 2020-01-01T00:00:00.000Z

    Naive datetimes are taken as UTC. A plain date is midnight UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        utc = value.astimezone(timezone.utc)
    else:
        utc = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    return utc.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def escape_date(value: Union[datetime, date]) -> str:
    if not isinstance(value, date):
        raise UnsupportedValueError(value, ParamType.DATETIME_VALUE.value)
    return f'"{to_iso_utc(value)}"^^{XSD_DATETIME}'


def escape_date_string(value: str) -> str:
    # The string is already ISO-8601, it is typed but never reformatted
    if not isinstance(value, str):
        raise UnsupportedValueError(value, ParamType.DATETIME_STRING.value)
    return f'"{value}"^^{XSD_DATETIME}'


# ============================================================================
# BOOLEANS AND NUMBERS
# ============================================================================


def escape_boolean(value: bool) -> str:
    if not isinstance(value, bool):
        raise UnsupportedValueError(value, ParamType.BOOLEAN.value)
    return "true" if value else "false"


def escape_number(value: Union[int, float, Decimal]) -> str:
    """
    Render a number in plain decimal form, never in exponent notation.

    Floats use the shortest text that round-trips (repr), expanded out of
    exponent form with trailing zeros dropped, so 42.0 renders as "42".

    Example:
        42               -> "42"
        1267.43233e12    -> "1267432330000000"
        12.78e-2         -> "0.1278"
        1e-7             -> "0.0000001"
        1e23             -> "100000000000000000000000"
    """
    # bool is an int subclass, keep true/false rather than 1/0
    if isinstance(value, bool):
        return escape_boolean(value)

    if isinstance(value, int):
        return str(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            raise UnsupportedValueError(value, ParamType.NUMBER.value)
        # -0.0 would otherwise render as "-0"
        if value == 0:
            return "0"
        return format(Decimal(repr(value)).normalize(), "f")

    if isinstance(value, Decimal):
        if not value.is_finite():
            raise UnsupportedValueError(value, ParamType.NUMBER.value)
        return format(value.normalize(), "f")

    raise UnsupportedValueError(value, ParamType.NUMBER.value)


# ============================================================================
# DISPATCH
# ============================================================================

ESCAPERS: Dict[ParamType, Callable[[Any], str]] = {
    ParamType.PLAIN_STRING: escape_string,
    ParamType.URI_REFERENCE: escape_uri,
    ParamType.DATETIME_STRING: escape_date_string,
    ParamType.DATETIME_VALUE: escape_date,
    ParamType.BOOLEAN: escape_boolean,
    ParamType.NUMBER: escape_number,
}


def escape(value: Any, descriptor: Union[TypeDescriptor, ParamType]) -> str:
    """
    Escape a value according to its resolved type.

    Args:
        value: Raw parameter value (never None, callers skip absent values)
        descriptor: Resolved type, a TypeDescriptor or a bare ParamType

    Returns:
        Literal text ready to be spliced into a query

    Raises:
        UnsupportedTypeError: the type has no escaping rule
        UnsupportedValueError: the value does not fit its declared type
    """
    if not isinstance(descriptor, TypeDescriptor):
        descriptor = TypeDescriptor.of(descriptor)

    escaper = ESCAPERS.get(descriptor.kind)
    if escaper is None:
        raise UnsupportedTypeError(descriptor.type_name or descriptor.kind.value)

    return escaper(value)
