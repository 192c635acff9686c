"""Namespace key types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SemanticVersion:
    """
    A semantic version (https://semver.org).

    Examples:
        1.0.0
        2.1.0-beta.1
        1.0.0+build.5
    """
    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None

    def __str__(self) -> str:
        result = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            result += f"-{self.prerelease}"
        if self.build:
            result += f"+{self.build}"
        return result


@dataclass(frozen=True, slots=True)
class NamespaceKey:
    """
    Identity of a registered namespace: a name and an optional version.

    The canonical string is ``name`` when unversioned and ``name@version``
    otherwise. It is the registry lookup key and the namespace part of every
    fully-qualified type name.

    Examples:
        test
        org.acme
        person@1.0.0
    """
    name: str
    version: str | None = None

    def __str__(self) -> str:
        if self.version:
            return f"{self.name}@{self.version}"
        return self.name

    @property
    def canonical(self) -> str:
        """Canonical string form, used as the registry key."""
        return str(self)

    @property
    def is_versioned(self) -> bool:
        return bool(self.version)

    def qualify(self, type_name: str) -> str:
        """Build the fully-qualified name of a declaration in this namespace."""
        return f"{self}.{type_name}"

    def unversioned(self) -> NamespaceKey:
        """The bare-name key for the same namespace."""
        return NamespaceKey(self.name)

    @classmethod
    def parse(cls, text: str) -> NamespaceKey:
        """Parse ``name`` or ``name@version``, validating both parts."""
        from .parser import parse_namespace
        return parse_namespace(text)
