"""Serializer - converts instances to and from canonical JSON."""

from __future__ import annotations

import json
from typing import Any, Mapping

from ..errors import MalformedDiscriminatorError, ModelParseError, UnknownFieldError
from ..model.registry import ModelRegistry
from ..namespace.parser import split_fqn
from .factory import Factory
from .types import Instance


CLASS_KEY = "$class"


class Serializer:
    """
    Converts Instances to JSON-ready dicts and back.

    Wire format:
    ```json
    {"$class": "person@1.0.0.Person", "email": "john.doe@example.com"}
    ```

    $class comes first, then each set field in declaration order. Nested
    instances are objects with their own $class; lists are converted
    element by element; scalars pass through unchanged.

    Decoding resolves $class against the registry before touching any other
    key, so it always yields either a validated Instance or a typed error.
    Keys that name no declared field are rejected.
    """

    def __init__(self, factory: Factory, registry: ModelRegistry | None = None):
        self._factory = factory
        self._registry = registry if registry is not None else factory.registry

    def to_json(self, instance: Instance) -> dict[str, Any]:
        """Serialize an Instance to a dictionary."""
        if not isinstance(instance, Instance):
            raise TypeError(f"Expected an Instance, got {type(instance).__name__}")

        result: dict[str, Any] = {CLASS_KEY: instance.bound_type}
        for name, value in instance.field_values.items():
            result[name] = self._encode_value(value)
        return result

    def from_json(self, payload: Mapping[str, Any]) -> Instance:
        """
        Deserialize a dictionary into an Instance.

        Raises:
            MalformedDiscriminatorError: $class is missing, not a string, or
                not a qualified name
            NamespaceNotDefinedError: The namespace part cannot be resolved
            TypeNotFoundError: The namespace has no such declaration
            UnknownFieldError: A key names no declared field
        """
        if not isinstance(payload, Mapping):
            raise MalformedDiscriminatorError(payload)

        discriminator = payload.get(CLASS_KEY)
        if not isinstance(discriminator, str):
            raise MalformedDiscriminatorError(discriminator)
        try:
            split_fqn(discriminator)
        except ModelParseError as e:
            raise MalformedDiscriminatorError(discriminator) from e

        resolved = self._registry.resolve_type(discriminator)

        args: tuple[Any, ...] = ()
        identified_by = resolved.identified_by
        if identified_by is not None and identified_by in payload:
            args = (self._decode_value(payload[identified_by]),)
        instance = self._factory.instantiate(resolved, *args)

        for key, value in payload.items():
            if key == CLASS_KEY or key == identified_by:
                continue
            if resolved.get_field(key) is None:
                raise UnknownFieldError(key, resolved.fqn)
            instance.set_field(key, self._decode_value(value))

        return instance

    def dumps(self, instance: Instance, **kwargs: Any) -> str:
        """Serialize an Instance to a JSON string."""
        return json.dumps(self.to_json(instance), **kwargs)

    def loads(self, text: str | bytes) -> Instance:
        """Deserialize a JSON string into an Instance."""
        return self.from_json(json.loads(text))

    def _encode_value(self, value: Any) -> Any:
        if isinstance(value, Instance):
            return self.to_json(value)
        if isinstance(value, (list, tuple)):
            return [self._encode_value(v) for v in value]
        return value

    def _decode_value(self, value: Any) -> Any:
        if isinstance(value, Mapping) and CLASS_KEY in value:
            return self.from_json(value)
        if isinstance(value, list):
            return [self._decode_value(v) for v in value]
        return value
