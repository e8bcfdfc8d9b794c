import types
from datetime import date, datetime
from decimal import Decimal
from typing import (
    Annotated,
    Any,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Type,
    Union,
    get_args,
    get_origin,
)

from pydantic import BaseModel, create_model

from fastapi_sparql.core.types import (
    IsoDateTime,
    IsoDateTimeStr,
    ParamType,
    TypeDescriptor,
    UriRef,
    UriReference,
)

_NUMBER_TYPES = (int, float, Decimal)
_UNION_TYPES = (Union, types.UnionType)


class TypeResolver(Protocol):
    """Gives the declared type of a parameter, or None when it is not declared."""

    def resolve(self, name: str) -> Optional[TypeDescriptor]: ...


class MappingTypeResolver:
    """Resolver backed by a plain name -> kind mapping."""

    def __init__(self, kinds: Mapping[str, Union[ParamType, TypeDescriptor, str]]):
        self._descriptors: Dict[str, TypeDescriptor] = {
            name: kind if isinstance(kind, TypeDescriptor) else TypeDescriptor.of(kind)
            for name, kind in kinds.items()
        }

    def resolve(self, name: str) -> Optional[TypeDescriptor]:
        return self._descriptors.get(name)


class ModelTypeResolver:
    """
    Resolver reading the field annotations of a pydantic params model.

    str fields are plain strings unless annotated with UriReference or
    IsoDateTime. Optional[X] resolves as X. Every descriptor is computed
    once, when the resolver is built.
    """

    def __init__(self, model: Type[BaseModel]):
        self.model = model
        self._descriptors: Dict[str, TypeDescriptor] = {
            name: descriptor_for(field.annotation, field.metadata)
            for name, field in model.model_fields.items()
        }

    def resolve(self, name: str) -> Optional[TypeDescriptor]:
        return self._descriptors.get(name)


def _type_name(annotation: Any) -> str:
    return getattr(annotation, "__name__", None) or repr(annotation)


def descriptor_for(annotation: Any, metadata: Any = ()) -> TypeDescriptor:
    """Map one field annotation (and its Annotated metadata) to a descriptor."""
    for marker in metadata:
        if isinstance(marker, (UriReference, IsoDateTime)):
            return TypeDescriptor(marker.kind, _type_name(annotation))

    origin = get_origin(annotation)

    if origin is Annotated:
        inner, *extra = get_args(annotation)
        return descriptor_for(inner, [*extra, *metadata])

    if origin in _UNION_TYPES:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return descriptor_for(members[0], metadata)
        # int | float and friends
        if all(member in _NUMBER_TYPES for member in members):
            return TypeDescriptor(ParamType.NUMBER, _type_name(annotation))
        return TypeDescriptor(ParamType.UNSUPPORTED, repr(annotation))

    # bool first, it is an int subclass
    if annotation is bool:
        kind = ParamType.BOOLEAN
    elif annotation is str:
        kind = ParamType.PLAIN_STRING
    elif isinstance(annotation, type) and issubclass(annotation, _NUMBER_TYPES):
        kind = ParamType.NUMBER
    elif isinstance(annotation, type) and issubclass(annotation, (datetime, date)):
        kind = ParamType.DATETIME_VALUE
    else:
        kind = ParamType.UNSUPPORTED

    return TypeDescriptor(kind, _type_name(annotation))


# =========================
# Models from declared kinds
# =========================
KIND_ANNOTATIONS: Dict[ParamType, Any] = {
    ParamType.PLAIN_STRING: str,
    ParamType.URI_REFERENCE: UriRef,
    ParamType.DATETIME_STRING: IsoDateTimeStr,
    ParamType.DATETIME_VALUE: datetime,
    ParamType.BOOLEAN: bool,
    ParamType.NUMBER: Union[int, float],
}


def params_model_from_kinds(
    model_name: str, kinds: Mapping[str, ParamType]
) -> Type[BaseModel]:
    """
    Build a params model whose fields are all optional and typed per kind.

    An UNSUPPORTED kind becomes an untyped field, binding a value for it
    raises UnsupportedTypeError.

    Raises:
        ValueError: a name starts with "_", pydantic would not make it a field
    """
    for name in kinds:
        if name.startswith("_"):
            raise ValueError(f"Invalid parameter name: {name!r}")

    fields = {
        name: (Optional[KIND_ANNOTATIONS.get(ParamType(kind), Any)], None)
        for name, kind in kinds.items()
    }
    return create_model(model_name, **fields)
