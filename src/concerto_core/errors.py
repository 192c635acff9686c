"""Error taxonomy for the model registry, factory and serializer.

Every error carries the values that caused it as attributes so callers can
match on them without parsing messages. Message text is still part of the
observable contract: policy errors are surfaced verbatim to users.
"""

from __future__ import annotations


class ConcertoError(Exception):
    """Base class for all registry, factory and serializer errors."""
    pass


class ModelParseError(ConcertoError, ValueError):
    """Raised when a namespace, version, import string or model document is malformed."""
    pass


class UnversionedNamespaceError(ConcertoError):
    """Raised when a strict registry is given a namespace without a version."""

    def __init__(self, namespace: str):
        self.namespace = namespace
        super().__init__(
            f"Cannot add an unversioned namespace '{namespace}' when "
            "versioned namespaces are strict"
        )


class UnversionedImportError(ConcertoError):
    """Raised when a strict registry encounters an import without a version."""

    def __init__(self, import_text: str, namespace: str):
        self.import_text = import_text
        self.namespace = namespace
        super().__init__(
            f"Cannot use an unversioned import '{import_text}' in namespace "
            f"'{namespace}' when versioned namespaces are strict"
        )


class DuplicateNamespaceError(ConcertoError):
    """Raised when a canonical namespace key is registered twice."""

    def __init__(self, namespace: str):
        self.namespace = namespace
        super().__init__(f"Namespace '{namespace}' is already registered")


class NamespaceNotDefinedError(ConcertoError):
    """Raised when the namespace part of a type or import cannot be resolved."""

    def __init__(self, namespace: str, reference: str | None = None):
        self.namespace = namespace
        self.reference = reference
        if reference:
            msg = f"Namespace is not defined for '{reference}' (namespace '{namespace}')"
        else:
            msg = f"Namespace is not defined: '{namespace}'"
        super().__init__(msg)


class TypeNotFoundError(ConcertoError):
    """Raised when a namespace resolves but the declaration does not."""

    def __init__(self, type_name: str, namespace: str):
        self.type_name = type_name
        self.namespace = namespace
        super().__init__(f"Type '{type_name}' not found in namespace '{namespace}'")


class MalformedDiscriminatorError(ConcertoError, ValueError):
    """Raised when a payload's $class is missing, not a string, or not a qualified name."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Invalid or missing $class discriminator: {value!r}. "
            "Expected a string of the form 'namespace[@version].TypeName'."
        )


class ArityMismatchError(ConcertoError, TypeError):
    """Raised when factory arguments do not fit the declaration's field list."""

    def __init__(self, fqn: str, message: str):
        self.fqn = fqn
        super().__init__(f"{fqn}: {message}")


class UnknownFieldError(ConcertoError):
    """Raised when a field name is not declared on the resolved type."""

    def __init__(self, field_name: str, fqn: str):
        self.field_name = field_name
        self.fqn = fqn
        super().__init__(f"Field '{field_name}' is not declared on type '{fqn}'")


class InvalidModelError(ConcertoError):
    """Raised for structural model problems such as supertype cycles."""

    def __init__(self, message: str, fqn: str | None = None):
        self.fqn = fqn
        super().__init__(message)
