"""
Model file data types.

A ModelFile is the unit of registration: one namespace with its imports and
declarations. The external parser produces a ParsedModel; the registry turns
it into an immutable ModelFile bound to its canonical NamespaceKey.

    ParsedModel (parser output)  →  ModelFile (registered)  →  Declaration (resolved by FQN)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from ..namespace.parser import parse_import_statement, parse_namespace
from ..namespace.types import NamespaceKey


# Names starting with '$' belong to system properties such as '$class'
SYSTEM_PROPERTY_PREFIX = "$"

# Attribute names an Instance already uses; a field with one of these names
# could not be read back as an attribute
RESERVED_FIELD_NAMES = frozenset({
    "_type",
    "_values",
    "bound_type",
    "resolved_type",
    "namespace",
    "type_name",
    "field_values",
    "has_field",
    "get_field",
    "set_field",
    "get_identifier",
    "get_fully_qualified_identifier",
})


class DeclarationKind(str, Enum):
    """Kinds of field-bearing declarations."""
    CONCEPT = "concept"
    ASSET = "asset"
    PARTICIPANT = "participant"
    TRANSACTION = "transaction"
    EVENT = "event"


@dataclass(frozen=True, slots=True)
class Field:
    """A declared field. Value validation against type_name is out of scope."""
    name: str
    type_name: str = "String"
    is_array: bool = False
    is_optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "type": self.type_name}
        if self.is_array:
            result["array"] = True
        if self.is_optional:
            result["optional"] = True
        return result


@dataclass(frozen=True, slots=True)
class Declaration:
    """
    A named, field-bearing type definition.

    super_type may be a short name (resolved through the owning model file's
    declarations and imports) or a fully-qualified name. Fields here are the
    declaration's own fields; inherited fields are resolved by TypeResolver.
    """
    name: str
    kind: DeclarationKind = DeclarationKind.CONCEPT
    fields: tuple[Field, ...] = ()

    # Field whose value identifies instances (e.g. "email")
    identified_by: str | None = None

    super_type: str | None = None
    is_abstract: bool = False

    # Owning namespace, bound at registration
    namespace: NamespaceKey | None = None

    @property
    def fully_qualified_name(self) -> str:
        if self.namespace is None:
            return self.name
        return self.namespace.qualify(self.name)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get_field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def bind(self, namespace: NamespaceKey) -> Declaration:
        """Return a copy owned by the given namespace."""
        return replace(self, namespace=namespace)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "kind": self.kind.value}
        if self.is_abstract:
            result["abstract"] = True
        if self.super_type:
            result["extends"] = self.super_type
        if self.identified_by:
            result["identified_by"] = self.identified_by
        if self.fields:
            result["fields"] = [f.to_dict() for f in self.fields]
        return result


@dataclass(frozen=True, slots=True)
class Import:
    """
    An import of a whole namespace (target_type is None) or of one declaration.

    Examples:
        Import("org.acme")                          import org.acme.*
        Import("concerto", "1.0.0", "Event")        import {Event} from concerto@1.0.0
    """
    target_name: str
    target_version: str | None = None
    target_type: str | None = None

    def __str__(self) -> str:
        namespace = str(self.namespace)
        if self.target_type is None:
            return f"{namespace}.*"
        if self.target_version:
            return f"{{{self.target_type}}} from {namespace}"
        return f"{namespace}.{self.target_type}"

    @property
    def namespace(self) -> NamespaceKey:
        return NamespaceKey(self.target_name, self.target_version)

    @property
    def is_versioned(self) -> bool:
        return bool(self.target_version)

    @property
    def is_wildcard(self) -> bool:
        return self.target_type is None

    @classmethod
    def parse(cls, text: str) -> list[Import]:
        """Parse an import statement; braced forms may yield several imports."""
        return [
            cls(key.name, key.version, type_name)
            for key, type_name in parse_import_statement(text)
        ]


@dataclass(frozen=True, slots=True)
class ParsedModel:
    """Output of the external model parser for one source file."""
    namespace_name: str
    namespace_version: str | None = None
    imports: tuple[Import, ...] = ()
    declarations: tuple[Declaration, ...] = ()

    @property
    def namespace(self) -> NamespaceKey:
        return NamespaceKey(self.namespace_name, self.namespace_version)

    @classmethod
    def create(
        cls,
        namespace: str,
        *,
        imports: list[str | Import] | tuple = (),
        declarations: list[Declaration] | tuple = (),
    ) -> ParsedModel:
        """
        Build a ParsedModel from a namespace string and import statements.

        Args:
            namespace: 'name' or 'name@semver'
            imports: Import objects or import statement strings
            declarations: Declarations (unbound)
        """
        key = parse_namespace(namespace)
        parsed_imports: list[Import] = []
        for imp in imports:
            if isinstance(imp, Import):
                parsed_imports.append(imp)
            else:
                parsed_imports.extend(Import.parse(imp))
        return cls(
            namespace_name=key.name,
            namespace_version=key.version,
            imports=tuple(parsed_imports),
            declarations=tuple(declarations),
        )


@dataclass(frozen=True, slots=True)
class ModelFile:
    """A registered model file. Immutable once registered."""
    namespace: NamespaceKey
    declarations: tuple[Declaration, ...] = ()
    imports: tuple[Import, ...] = ()

    # Opaque origin supplied by the caller (file name, source text, ...)
    origin: Any = field(default=None, compare=False)

    is_system: bool = False

    @property
    def key(self) -> str:
        """Canonical registry key."""
        return str(self.namespace)

    def get_declaration(self, name: str) -> Declaration | None:
        for decl in self.declarations:
            if decl.name == name:
                return decl
        return None

    def declaration_names(self) -> list[str]:
        return [d.name for d in self.declarations]

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"namespace": self.key}
        if self.imports:
            result["imports"] = [str(imp) for imp in self.imports]
        if self.declarations:
            result["declarations"] = [d.to_dict() for d in self.declarations]
        return result

    @classmethod
    def from_parsed(cls, parsed: ParsedModel, origin: Any = None, *, is_system: bool = False) -> ModelFile:
        """Bind a parsed model's declarations to its namespace."""
        key = parsed.namespace
        return cls(
            namespace=key,
            declarations=tuple(d.bind(key) for d in parsed.declarations),
            imports=tuple(parsed.imports),
            origin=origin,
            is_system=is_system,
        )
