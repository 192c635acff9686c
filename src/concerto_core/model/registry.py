"""
Namespace registry - owns the registered model files and the versioning policy.

Model files are keyed by canonical namespace string ('test', 'person@1.0.0').
Registration validates the policy and the file's structure before any state
changes, so a failed add leaves the registry exactly as it was. Imports and
supertypes are resolved lazily, which lets callers register model files in any
order.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Iterable, Iterator

from ..config import RegistryConfig
from ..errors import (
    DuplicateNamespaceError,
    InvalidModelError,
    ModelParseError,
    NamespaceNotDefinedError,
    UnversionedImportError,
    UnversionedNamespaceError,
)
from ..namespace.parser import is_identifier, parse_namespace
from ..namespace.types import NamespaceKey
from .imports import ImportResolver
from .resolver import ResolvedType, TypeResolver
from .types import (
    RESERVED_FIELD_NAMES,
    SYSTEM_PROPERTY_PREFIX,
    Declaration,
    DeclarationKind,
    ModelFile,
    ParsedModel,
)

logger = logging.getLogger(__name__)


SYSTEM_NAMESPACE = "concerto"
SYSTEM_VERSION = "1.0.0"


def system_model(version: str | None = SYSTEM_VERSION) -> ParsedModel:
    """The built-in root namespace declaring the abstract base types."""
    return ParsedModel(
        namespace_name=SYSTEM_NAMESPACE,
        namespace_version=version,
        declarations=tuple(
            Declaration(name=kind.value.capitalize(), kind=kind, is_abstract=True)
            for kind in DeclarationKind
        ),
    )


class ModelRegistry:
    """
    Registry of model files keyed by canonical namespace.

    Features:
    - Optional strict policy requiring name@semver namespaces and imports
    - Atomic single and batch registration
    - Lazy, cached import resolution (see ImportResolver)
    - Type lookup by fully-qualified name (see TypeResolver)

    Each independent model-management session should own its own registry.
    Mutations are serialized with a re-entrant lock; callers must not run
    registrations concurrently with resolutions that depend on them.
    """

    def __init__(
        self,
        config: RegistryConfig | None = None,
        *,
        versioned_namespaces_strict: bool | None = None,
    ):
        config = config or RegistryConfig()
        if versioned_namespaces_strict is not None:
            config = replace(config, versioned_namespaces_strict=versioned_namespaces_strict)

        self._config = config
        self._model_files: dict[str, ModelFile] = {}
        self._lock = threading.RLock()

        self.import_resolver = ImportResolver(self)
        self.type_resolver = TypeResolver(self, self.import_resolver)

        if config.system_models:
            self._add_system_models()

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def strict(self) -> bool:
        """True when versioned namespaces are strict."""
        return self._config.versioned_namespaces_strict

    # =========================================================================
    # Registration
    # =========================================================================

    def add_model(self, parsed: ParsedModel, origin: Any = None) -> ModelFile:
        """
        Register a parsed model file.

        Args:
            parsed: Parser output for one model file
            origin: Opaque origin kept on the ModelFile (e.g. file name)

        Returns:
            The registered ModelFile

        Raises:
            UnversionedNamespaceError: Strict registry, namespace has no version
            UnversionedImportError: Strict registry, an import has no version
            DuplicateNamespaceError: The canonical key is already registered
            InvalidModelError: The file's declarations are malformed
        """
        with self._lock:
            model_file = self._prepare(parsed, origin)
            if model_file.key in self._model_files:
                raise DuplicateNamespaceError(model_file.key)
            self._model_files[model_file.key] = model_file

        logger.debug(f"Registered namespace {model_file.key} ({len(model_file.declarations)} declarations)")
        return model_file

    def add_models(self, models: Iterable[ParsedModel | tuple[ParsedModel, Any]]) -> list[ModelFile]:
        """
        Register several model files atomically.

        Every model is validated before any is committed; if one fails the
        registry is unchanged. Items may be ParsedModel or (ParsedModel, origin).
        """
        with self._lock:
            prepared: list[ModelFile] = []
            seen: set[str] = set()
            for item in models:
                if isinstance(item, tuple):
                    parsed, origin = item
                else:
                    parsed, origin = item, None
                model_file = self._prepare(parsed, origin)
                if model_file.key in self._model_files or model_file.key in seen:
                    raise DuplicateNamespaceError(model_file.key)
                seen.add(model_file.key)
                prepared.append(model_file)

            for model_file in prepared:
                self._model_files[model_file.key] = model_file

        logger.debug(f"Registered {len(prepared)} namespaces")
        return prepared

    def update_model(self, parsed: ParsedModel, origin: Any = None) -> ModelFile:
        """
        Replace an existing registration under the same canonical key.

        Raises:
            NamespaceNotDefinedError: Nothing is registered under the key
            InvalidModelError: The key belongs to a system namespace
        """
        with self._lock:
            model_file = self._prepare(parsed, origin)
            existing = self._model_files.get(model_file.key)
            if existing is None:
                raise NamespaceNotDefinedError(model_file.key)
            if existing.is_system:
                raise InvalidModelError(f"Cannot update system namespace '{model_file.key}'")
            self._model_files[model_file.key] = model_file
            self.import_resolver.invalidate(model_file.key)

        logger.debug(f"Updated namespace {model_file.key}")
        return model_file

    def delete_model_file(self, namespace: str | NamespaceKey) -> bool:
        """
        Remove a model file.

        Returns:
            True if the model file was deleted, False if it didn't exist

        Raises:
            InvalidModelError: The key belongs to a system namespace
        """
        key = str(namespace)
        with self._lock:
            existing = self._model_files.get(key)
            if existing is None:
                return False
            if existing.is_system:
                raise InvalidModelError(f"Cannot delete system namespace '{key}'")
            del self._model_files[key]
            self.import_resolver.invalidate(key)

        logger.debug(f"Deleted namespace {key}")
        return True

    def clear(self) -> None:
        """Remove all user model files, keeping system namespaces."""
        with self._lock:
            self._model_files = {
                k: mf for k, mf in self._model_files.items() if mf.is_system
            }
            self.import_resolver.invalidate()

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_model_file(self, namespace: str | NamespaceKey) -> ModelFile | None:
        """
        Get a model file by canonical key.

        Only exact matches are returned: 'person' never finds 'person@1.0.0'.
        """
        with self._lock:
            return self._model_files.get(str(namespace))

    def get_model_files(self, include_system: bool = False) -> list[ModelFile]:
        """Get registered model files in registration order."""
        with self._lock:
            return [
                mf for mf in self._model_files.values()
                if include_system or not mf.is_system
            ]

    def get_namespaces(self, include_system: bool = False) -> list[str]:
        """Get canonical keys of registered namespaces in registration order."""
        return [mf.key for mf in self.get_model_files(include_system)]

    def get_type(self, fqn: str) -> Declaration:
        """
        Get a declaration by fully-qualified name.

        Raises:
            NamespaceNotDefinedError: The namespace part cannot be resolved
            TypeNotFoundError: The namespace has no such declaration
        """
        return self.type_resolver.get_type(fqn)

    def resolve_type(self, fqn: str) -> ResolvedType:
        """Resolve a type together with its inherited fields."""
        return self.type_resolver.resolve(fqn)

    def validate(self) -> None:
        """
        Eagerly resolve every import and supertype chain of every user model file.

        Raises the first resolution error encountered.
        """
        for model_file in self.get_model_files():
            self.import_resolver.resolve_all(model_file)
            for decl in model_file.declarations:
                self.type_resolver.resolve_declaration(model_file, decl)

    # =========================================================================
    # Internals
    # =========================================================================

    def _prepare(self, parsed: ParsedModel, origin: Any) -> ModelFile:
        """Check policy and structure, returning the ModelFile to commit."""
        try:
            key = parse_namespace(str(parsed.namespace))
        except ModelParseError as e:
            raise InvalidModelError(str(e)) from e

        if self.strict and not key.is_versioned:
            raise UnversionedNamespaceError(str(key))

        for imp in parsed.imports:
            if self.strict and not imp.is_versioned:
                raise UnversionedImportError(str(imp), str(key))
            try:
                parse_namespace(str(imp.namespace))
            except ModelParseError as e:
                raise InvalidModelError(f"Invalid import '{imp}' in {key}: {e}") from e

        model_file = ModelFile.from_parsed(parsed, origin)
        self._check_declarations(model_file)
        return model_file

    @staticmethod
    def _check_declarations(model_file: ModelFile) -> None:
        names: set[str] = set()
        for decl in model_file.declarations:
            fqn = decl.fully_qualified_name
            if not is_identifier(decl.name):
                raise InvalidModelError(f"Invalid declaration name '{decl.name}' in {model_file.key}", fqn)
            if decl.name in names:
                raise InvalidModelError(f"Duplicate declaration '{decl.name}' in {model_file.key}", fqn)
            names.add(decl.name)

            field_names: set[str] = set()
            for f in decl.fields:
                if not is_identifier(f.name):
                    raise InvalidModelError(f"Invalid field name '{f.name}' on {fqn}", fqn)
                if f.name.startswith(SYSTEM_PROPERTY_PREFIX):
                    raise InvalidModelError(
                        f"Field name '{f.name}' on {fqn} is reserved: "
                        f"'{SYSTEM_PROPERTY_PREFIX}' names belong to system properties",
                        fqn,
                    )
                if f.name in RESERVED_FIELD_NAMES or f.name.startswith("__"):
                    raise InvalidModelError(
                        f"Field name '{f.name}' on {fqn} clashes with an instance attribute", fqn
                    )
                if f.name in field_names:
                    raise InvalidModelError(f"Duplicate field '{f.name}' on {fqn}", fqn)
                field_names.add(f.name)

            # Inherited identifiers are checked when the supertype is resolved
            if decl.identified_by and decl.super_type is None and decl.identified_by not in field_names:
                raise InvalidModelError(
                    f"Identifying field '{decl.identified_by}' is not declared on {fqn}", fqn
                )

    def _add_system_models(self) -> None:
        versions: list[str | None] = [SYSTEM_VERSION]
        if not self.strict:
            versions.append(None)
        for version in versions:
            model_file = ModelFile.from_parsed(system_model(version), origin="<system>", is_system=True)
            self._model_files[model_file.key] = model_file

    # =========================================================================
    # Dunder methods
    # =========================================================================

    def __len__(self) -> int:
        return len(self.get_model_files())

    def __contains__(self, namespace: str | NamespaceKey) -> bool:
        return self.get_model_file(namespace) is not None

    def __iter__(self) -> Iterator[ModelFile]:
        return iter(self.get_model_files())
