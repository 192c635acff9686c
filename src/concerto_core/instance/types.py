"""Typed instances bound to a resolved declaration."""

from __future__ import annotations

from typing import Any

from ..errors import UnknownFieldError
from ..model.resolver import ResolvedType


def _normalize(value: Any) -> Any:
    # Array values are held as lists, matching what JSON decoding produces
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return value


class Instance:
    """
    An object of a registered type.

    bound_type is the fully-qualified name built from the registry's canonical
    namespace key and never changes. Declared fields are readable and writable
    as attributes; undeclared names raise. Tuple values are stored as lists.

    Instances are created by Factory, not directly.
    """

    __slots__ = ("_type", "_values")

    def __init__(self, resolved: ResolvedType):
        object.__setattr__(self, "_type", resolved)
        object.__setattr__(self, "_values", {})

    @property
    def bound_type(self) -> str:
        return self._type.fqn

    @property
    def resolved_type(self) -> ResolvedType:
        return self._type

    @property
    def namespace(self) -> str:
        return self._type.model_file.key

    @property
    def type_name(self) -> str:
        return self._type.declaration.name

    @property
    def field_values(self) -> dict[str, Any]:
        """Set field values in declaration order."""
        return {
            name: self._values[name]
            for name in self._type.field_names
            if name in self._values
        }

    def has_field(self, name: str) -> bool:
        """Check if a declared field currently has a value."""
        return name in self._values

    def get_field(self, name: str, default: Any = None) -> Any:
        if self._type.get_field(name) is None:
            raise UnknownFieldError(name, self.bound_type)
        return self._values.get(name, default)

    def set_field(self, name: str, value: Any) -> None:
        """
        Assign a declared field.

        Raises:
            UnknownFieldError: The type declares no such field
        """
        if self._type.get_field(name) is None:
            raise UnknownFieldError(name, self.bound_type)
        self._values[name] = _normalize(value)

    def get_identifier(self) -> Any:
        """Value of the identifying field, or None for unidentified types."""
        if self._type.identified_by is None:
            return None
        return self._values.get(self._type.identified_by)

    def get_fully_qualified_identifier(self) -> str | None:
        """'namespace.Type#identifier', or None for unidentified types."""
        identifier = self.get_identifier()
        if identifier is None:
            return None
        return f"{self.bound_type}#{identifier}"

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal attribute lookup fails
        resolved = object.__getattribute__(self, "_type")
        if resolved.get_field(name) is None:
            raise AttributeError(f"'{resolved.fqn}' has no field '{name}'")
        return object.__getattribute__(self, "_values").get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if self._type.get_field(name) is None:
            raise AttributeError(f"Cannot set '{name}' on '{self.bound_type}': not a declared field")
        self._values[name] = _normalize(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instance):
            return NotImplemented
        return self.bound_type == other.bound_type and self.field_values == other.field_values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.field_values.items())
        return f"Instance({self.bound_type}, {fields})"
