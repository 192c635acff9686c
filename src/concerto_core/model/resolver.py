"""Type resolution - fully-qualified names to declarations and inherited fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import InvalidModelError, NamespaceNotDefinedError, TypeNotFoundError
from .imports import ImportResolver
from .types import Declaration, Field, ModelFile

if TYPE_CHECKING:
    from .registry import ModelRegistry


@dataclass(frozen=True, slots=True)
class ResolvedType:
    """
    A declaration with its supertype chain resolved.

    fields holds the effective field list: supertype fields first (root
    first), then the declaration's own. A field redeclared by a subtype keeps
    its inherited position.
    """
    declaration: Declaration
    model_file: ModelFile
    fields: tuple[Field, ...]
    identified_by: str | None = None

    # Supertype FQNs, nearest first
    supertypes: tuple[str, ...] = ()

    @property
    def fqn(self) -> str:
        return self.declaration.fully_qualified_name

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get_field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


class TypeResolver:
    """
    Resolves fully-qualified names against the current registry contents.

    Resolution is a pure function of registry state: nothing is cached here.
    """

    def __init__(self, registry: ModelRegistry, import_resolver: ImportResolver):
        self._registry = registry
        self._imports = import_resolver

    def resolve_namespace(self, namespace: str, reference: str | None = None) -> ModelFile:
        """
        Look up the namespace part of a qualified name.

        Exact canonical match first. A bare namespace that does not match
        exactly is unresolvable; under strict policy a bare namespace is never
        resolvable, whatever versioned siblings are registered. There is no
        latest-version fallback.

        Raises:
            NamespaceNotDefinedError: No model file matches
        """
        if self._registry.strict and "@" not in namespace:
            raise NamespaceNotDefinedError(namespace, reference)

        model_file = self._registry.get_model_file(namespace)
        if model_file is None:
            raise NamespaceNotDefinedError(namespace, reference)
        return model_file

    def lookup(self, fqn: str) -> tuple[ModelFile, Declaration]:
        """
        Find the model file and declaration named by a fully-qualified name.

        The namespace part is everything up to the last '.', so
        'person@1.0.0.Person' looks up 'Person' in 'person@1.0.0'.
        """
        if not fqn or "." not in fqn:
            raise NamespaceNotDefinedError("", fqn)

        namespace, type_name = fqn.rsplit(".", 1)
        model_file = self.resolve_namespace(namespace, fqn)
        decl = model_file.get_declaration(type_name)
        if decl is None:
            raise TypeNotFoundError(type_name, model_file.key)
        return model_file, decl

    def get_type(self, fqn: str) -> Declaration:
        """Get the declaration for a fully-qualified name."""
        return self.lookup(fqn)[1]

    def resolve(self, fqn: str) -> ResolvedType:
        """Resolve a fully-qualified name including its supertype chain."""
        model_file, decl = self.lookup(fqn)
        return self.resolve_declaration(model_file, decl)

    def resolve_reference(self, model_file: ModelFile, reference: str) -> str:
        """
        Turn a type reference written inside a model file into an FQN.

        Qualified references are returned as-is; short names go through the
        file's declarations and imports.

        Raises:
            TypeNotFoundError: No declaration in scope has the short name
        """
        if "." in reference:
            return reference
        fqn = self._imports.resolve_type_name(model_file, reference)
        if fqn is None:
            raise TypeNotFoundError(reference, model_file.key)
        return fqn

    def resolve_declaration(self, model_file: ModelFile, decl: Declaration) -> ResolvedType:
        """
        Walk the supertype chain of a declaration.

        Raises:
            InvalidModelError: The chain is cyclic, or the identifying field
                is not among the effective fields
        """
        chain: list[Declaration] = [decl]
        visited: list[str] = [decl.fully_qualified_name]

        current_file, current = model_file, decl
        while current.super_type:
            super_fqn = self.resolve_reference(current_file, current.super_type)
            current_file, current = self.lookup(super_fqn)
            super_fqn = current.fully_qualified_name
            if super_fqn in visited:
                cycle = " -> ".join(visited + [super_fqn])
                raise InvalidModelError(
                    f"Circular supertype chain: {cycle}", decl.fully_qualified_name
                )
            visited.append(super_fqn)
            chain.append(current)

        effective: dict[str, Field] = {}
        for d in reversed(chain):
            for f in d.fields:
                effective[f.name] = f

        identified_by = next((d.identified_by for d in chain if d.identified_by), None)
        if identified_by is not None and identified_by not in effective:
            raise InvalidModelError(
                f"Identifying field '{identified_by}' is not declared on "
                f"{decl.fully_qualified_name}",
                decl.fully_qualified_name,
            )

        return ResolvedType(
            declaration=decl,
            model_file=model_file,
            fields=tuple(effective.values()),
            identified_by=identified_by,
            supertypes=tuple(visited[1:]),
        )

    def is_subtype_of(self, fqn: str, super_fqn: str) -> bool:
        """Check if a type is, or inherits from, another type."""
        resolved = self.resolve(fqn)
        return super_fqn == resolved.fqn or super_fqn in resolved.supertypes
