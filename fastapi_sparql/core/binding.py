"""
BINDING MODULE - Substitute escaped parameters into a query template

Purpose:
    1. Find every ?name placeholder token in a template
    2. Escape the parameter value for its declared type
    3. Replace the tokens, one parameter at a time

Data Flow:
    template + params + resolver → bind_all() → bind step per param → query text

A template is kept as a sequence of parts: raw template text and literals
that were already substituted. Later steps only ever search the raw text,
so a value that looks like "?other" can never be picked up as a placeholder.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Tuple, Union

from fastapi_sparql.core.escaping import escape
from fastapi_sparql.core.resolver import TypeResolver
from fastapi_sparql.core.types import ParamType, TypeDescriptor

_IDENTIFIER = re.compile(r"\w+")


def placeholder_pattern(name: str) -> "re.Pattern[str]":
    """Regex for the whole token ?name (not a prefix of ?name2)."""
    if not isinstance(name, str) or not _IDENTIFIER.fullmatch(name):
        raise ValueError(f"Invalid parameter name: {name!r}")
    return re.compile(rf"\?{re.escape(name)}\b")


class _Part(NamedTuple):
    text: str
    bound: bool


@dataclass(frozen=True)
class QueryTemplate:
    """Immutable template text, tracking which spans are substituted literals."""

    parts: Tuple[_Part, ...]

    @classmethod
    def from_text(cls, text: str) -> "QueryTemplate":
        return cls((_Part(text, False),))

    def substitute(self, name: str, literal: str) -> "QueryTemplate":
        """Return a new template with every ?name token replaced by literal."""
        pattern = placeholder_pattern(name)
        parts: List[_Part] = []

        for part in self.parts:
            if part.bound:
                parts.append(part)
                continue

            for index, piece in enumerate(pattern.split(part.text)):
                if index:
                    parts.append(_Part(literal, True))
                if piece:
                    parts.append(_Part(piece, False))

        return QueryTemplate(tuple(parts))

    def bind(
        self, name: str, value: Any, descriptor: Union[TypeDescriptor, ParamType]
    ) -> "QueryTemplate":
        if value is None:
            raise ValueError(f"Parameter '{name}' has no value to bind")
        return self.substitute(name, escape(value, descriptor))

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.parts)

    def __str__(self) -> str:
        return self.text


# ============================================================================
# PUBLIC API
# ============================================================================


def bind(
    template: str,
    name: str,
    value: Any,
    descriptor: Union[TypeDescriptor, ParamType],
) -> str:
    """
    Bind a single parameter into a template.

    Args:
        template: Query text containing ?name tokens
        name: Parameter name, word characters only
        value: Raw value, must not be None
        descriptor: Declared type of the value

    Returns:
        New query text, the input is never modified

    Example:
        bind("?x", "x", "foo", ParamType.PLAIN_STRING) -> '"foo"'
    """
    return QueryTemplate.from_text(template).bind(name, value, descriptor).text


def bind_all(
    template: str,
    params: Mapping[str, Any],
    resolver: TypeResolver,
    placeholders: Optional[Iterable[str]] = None,
) -> str:
    """
    Bind every defined parameter into a template.

    Args:
        template: Query text containing ?name tokens
        params: name -> raw value, None means "not supplied"
        resolver: Gives the declared type for each parameter name
        placeholders: Restrict binding to these names (default: all params)

    Returns:
        Fully bound query text

    Raises:
        UnsupportedTypeError: a parameter has no usable type, nothing is returned
    """
    names = list(params) if placeholders is None else list(placeholders)
    bound = QueryTemplate.from_text(template)

    for name in names:
        value = params.get(name)
        if value is None:
            continue

        descriptor = resolver.resolve(name)
        if descriptor is None:
            descriptor = TypeDescriptor(ParamType.UNSUPPORTED, "undeclared")

        bound = bound.bind(name, value, descriptor)

    return bound.text
