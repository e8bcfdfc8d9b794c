class SparqlBindingError(Exception):
    """Base error for failures while turning parameters into query text."""


class UnsupportedTypeError(SparqlBindingError, TypeError):
    """Raised when a parameter's declared type has no escaping rule."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Unsupported parameter type: {type_name}")


class UnsupportedValueError(SparqlBindingError, ValueError):
    """Raised when a value of a supported type has no literal form (NaN, inf)."""

    def __init__(self, value, type_name: str):
        self.value = value
        self.type_name = type_name
        super().__init__(f"Cannot escape {value!r} as {type_name}")
