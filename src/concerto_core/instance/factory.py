"""Factory - constructs instances bound to resolved declarations."""

from __future__ import annotations

from typing import Any

from ..errors import ArityMismatchError, InvalidModelError, UnknownFieldError
from ..model.registry import ModelRegistry
from ..model.resolver import ResolvedType
from ..namespace.types import NamespaceKey
from .types import Instance


class Factory:
    """
    Creates Instances of registered types.

    Positional arguments fill the identifying field first, then the remaining
    effective fields in declaration order (inherited fields before own
    fields). Keyword arguments set fields by name.

    Arity is an upper bound, not an exact count: trailing fields may be left
    unset, so an identified type can be built from its identifier alone (as
    Serializer.from_json does). Passing more positional arguments than there
    are fields raises ArityMismatchError.
    """

    def __init__(self, registry: ModelRegistry):
        self._registry = registry

    @property
    def registry(self) -> ModelRegistry:
        return self._registry

    def new_concept(
        self,
        namespace: str | NamespaceKey,
        type_name: str,
        *args: Any,
        **fields: Any,
    ) -> Instance:
        """
        Create an instance of namespace.type_name.

        The bound type is built from the registry's canonical key, not from
        the namespace string passed in.

        Raises:
            NamespaceNotDefinedError: The namespace cannot be resolved
            TypeNotFoundError: The namespace has no such declaration
            ArityMismatchError: Too many positional arguments, or a field
                given both positionally and by name
            UnknownFieldError: A keyword names an undeclared field
            InvalidModelError: The declaration is abstract
        """
        return self.new_instance(f"{namespace}.{type_name}", *args, **fields)

    def new_resource(
        self,
        namespace: str | NamespaceKey,
        type_name: str,
        identifier: Any,
        **fields: Any,
    ) -> Instance:
        """Create an instance of an identified type from its identifier."""
        resolved = self._registry.resolve_type(f"{namespace}.{type_name}")
        if resolved.identified_by is None:
            raise ArityMismatchError(resolved.fqn, "type has no identifying field")
        return self.instantiate(resolved, identifier, **fields)

    def new_instance(self, fqn: str, *args: Any, **fields: Any) -> Instance:
        """Create an instance addressed by fully-qualified name."""
        return self.instantiate(self._registry.resolve_type(fqn), *args, **fields)

    def instantiate(self, resolved: ResolvedType, *args: Any, **fields: Any) -> Instance:
        """Create an instance of an already resolved type."""
        if resolved.declaration.is_abstract:
            raise InvalidModelError(f"Cannot instantiate abstract type '{resolved.fqn}'", resolved.fqn)

        order = self.positional_fields(resolved)
        if len(args) > len(order):
            raise ArityMismatchError(
                resolved.fqn,
                f"Expected at most {len(order)} positional arguments "
                f"({', '.join(order)}), got {len(args)}",
            )

        instance = Instance(resolved)
        for name, value in zip(order, args):
            instance.set_field(name, value)

        for name, value in fields.items():
            if resolved.get_field(name) is None:
                raise UnknownFieldError(name, resolved.fqn)
            if instance.has_field(name):
                raise ArityMismatchError(
                    resolved.fqn, f"Field '{name}' given both positionally and by name"
                )
            instance.set_field(name, value)

        return instance

    @staticmethod
    def positional_fields(resolved: ResolvedType) -> list[str]:
        """Field names in positional-argument order."""
        names = list(resolved.field_names)
        if resolved.identified_by is not None:
            names.remove(resolved.identified_by)
            names.insert(0, resolved.identified_by)
        return names
