"""
Import resolution - maps a model file's imports to registered namespaces.

Resolution is lazy: it happens when a cross-namespace reference is first
dereferenced, not when the model file is registered. Successful results are
cached per (model file, import); failures are not, so registering a missing
target later lets the next attempt succeed.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from ..errors import NamespaceNotDefinedError, TypeNotFoundError, UnversionedImportError
from ..namespace.types import NamespaceKey
from .types import Import, ModelFile

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from .registry import ModelRegistry


class ImportResolver:
    """Resolves imports against a registry, honoring its versioning policy."""

    def __init__(self, registry: ModelRegistry):
        self._registry = registry
        self._cache: dict[tuple[str, Import], NamespaceKey] = {}
        self._lock = threading.RLock()

    def resolve(self, model_file: ModelFile, imp: Import) -> NamespaceKey:
        """
        Resolve one import of a model file to a registered namespace key.

        Unversioned imports resolve by exact bare-name lookup and are refused
        outright by a strict registry. Versioned imports resolve by exact
        canonical key in either mode.

        Raises:
            UnversionedImportError: Strict registry, import has no version
            NamespaceNotDefinedError: Target namespace is not registered
            TypeNotFoundError: Single-type import names a missing declaration
        """
        cache_key = (model_file.key, imp)
        with self._lock:
            cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        if not imp.is_versioned and self._registry.strict:
            raise UnversionedImportError(str(imp), model_file.key)

        target = self._registry.get_model_file(imp.namespace)
        if target is None:
            raise NamespaceNotDefinedError(str(imp.namespace), str(imp))

        if imp.target_type is not None and target.get_declaration(imp.target_type) is None:
            raise TypeNotFoundError(imp.target_type, target.key)

        with self._lock:
            self._cache[cache_key] = target.namespace
        logger.debug(f"Resolved import '{imp}' of {model_file.key} to {target.key}")
        return target.namespace

    def resolve_all(self, model_file: ModelFile) -> list[NamespaceKey]:
        """Resolve every import of a model file, in declaration order."""
        return [self.resolve(model_file, imp) for imp in model_file.imports]

    def resolve_type_name(self, model_file: ModelFile, name: str) -> str | None:
        """
        Resolve a short type name as seen from inside a model file.

        Lookup order: the file's own declarations, then single-type imports,
        then wildcard imports in the order they are declared.

        Returns:
            The fully-qualified name, or None if nothing in scope declares it
        """
        if model_file.get_declaration(name) is not None:
            return model_file.namespace.qualify(name)

        for imp in model_file.imports:
            if imp.target_type == name:
                return self.resolve(model_file, imp).qualify(name)

        for imp in model_file.imports:
            if not imp.is_wildcard:
                continue
            key = self.resolve(model_file, imp)
            target = self._registry.get_model_file(key)
            if target is not None and target.get_declaration(name) is not None:
                return key.qualify(name)

        return None

    def invalidate(self, namespace: str | NamespaceKey | None = None) -> None:
        """
        Drop cached resolutions.

        Args:
            namespace: Only drop entries owned by or pointing at this
                namespace; None drops everything
        """
        with self._lock:
            if namespace is None:
                self._cache.clear()
                return
            key = str(namespace)
            self._cache = {
                k: v for k, v in self._cache.items()
                if k[0] != key and str(v) != key
            }

    def cached_count(self) -> int:
        """Number of cached import resolutions."""
        with self._lock:
            return len(self._cache)
