from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator


# =========================
# Enums
# =========================
class ParamType(str, Enum):
    PLAIN_STRING = "plain-string"
    URI_REFERENCE = "uri-reference"
    DATETIME_STRING = "date-time-string"
    DATETIME_VALUE = "date-time-value"
    BOOLEAN = "boolean"
    NUMBER = "number"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class TypeDescriptor:
    """Resolved semantic kind of one parameter plus the name it was declared with."""

    kind: ParamType
    type_name: str = ""

    @classmethod
    def of(cls, kind: ParamType) -> "TypeDescriptor":
        kind = ParamType(kind)
        return cls(kind=kind, type_name=kind.value)


# =========================
# Annotation markers
# =========================
# Pydantic keeps unknown Annotated metadata on the field, the resolver reads it back
@dataclass(frozen=True)
class UriReference:
    kind: ParamType = ParamType.URI_REFERENCE


@dataclass(frozen=True)
class IsoDateTime:
    kind: ParamType = ParamType.DATETIME_STRING


def check_iso_datetime(value: str) -> str:
    # The text is sent as is and xsd:dateTime only allows an upper-case Z
    if value.endswith("z"):
        raise ValueError(f"'{value}' must use an upper-case Z for UTC")
    try:
        datetime.fromisoformat(value)
    except ValueError:
        raise ValueError(f"'{value}' is not an ISO-8601 date-time")
    return value


# Ready-made field types for params models
UriRef = Annotated[str, UriReference()]
IsoDateTimeStr = Annotated[str, AfterValidator(check_iso_datetime), IsoDateTime()]
