"""Namespace, version and qualified-name parsing utilities."""

from __future__ import annotations

import re

from ..errors import ModelParseError
from .types import NamespaceKey, SemanticVersion


# Namespace name: dot-separated identifiers (e.g. "org.acme.hr")
NAMESPACE_NAME_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")

# Declaration / field identifier
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")

# Semantic version 2.0.0 (regex published on semver.org)
SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

# Import with explicit type list: {Person, Address} from org.acme@1.0.0
BRACED_IMPORT_PATTERN = re.compile(r"^\{\s*(?P<types>[^}]*)\}\s+from\s+(?P<namespace>\S+)$")


def parse_semver(version: str) -> SemanticVersion:
    """
    Parse a semantic version string.

    Raises:
        ModelParseError: If the string is not a valid semantic version
    """
    match = SEMVER_PATTERN.match(version or "")
    if not match:
        raise ModelParseError(
            f"Invalid semantic version: '{version}'. Expected MAJOR.MINOR.PATCH "
            "with optional -prerelease and +build suffixes."
        )
    major, minor, patch, prerelease, build = match.groups()
    return SemanticVersion(int(major), int(minor), int(patch), prerelease, build)


def is_identifier(name: str) -> bool:
    """Check if a string is a valid declaration or field name."""
    return bool(name) and bool(IDENTIFIER_PATTERN.match(name))


def parse_namespace(text: str) -> NamespaceKey:
    """
    Parse a namespace string into a NamespaceKey.

    Format: name[@semver]

    Examples:
        test
        org.acme.hr
        person@1.0.0

    Raises:
        ModelParseError: If the name or the version is invalid
    """
    if not text:
        raise ModelParseError("Empty namespace")

    text = text.strip()
    name, sep, version = text.partition("@")

    if not NAMESPACE_NAME_PATTERN.match(name):
        raise ModelParseError(
            f"Invalid namespace: '{name}'. Namespaces are dot-separated identifiers."
        )

    if sep:
        parse_semver(version)
        return NamespaceKey(name, version)
    return NamespaceKey(name)


def split_fqn(fqn: str) -> tuple[str, str]:
    """
    Split a fully-qualified name into (namespace part, declaration name).

    The namespace part is everything up to the last '.', so versioned
    namespaces keep their dots: 'person@1.0.0.Person' -> ('person@1.0.0', 'Person').

    Raises:
        ModelParseError: If there is no namespace part or the trailing segment
            is not an identifier
    """
    if not fqn or "." not in fqn:
        raise ModelParseError(f"Not a fully-qualified type name: '{fqn}'")

    namespace, type_name = fqn.rsplit(".", 1)
    if not namespace or not is_identifier(type_name):
        raise ModelParseError(f"Not a fully-qualified type name: '{fqn}'")
    return namespace, type_name


def parse_import_statement(text: str) -> list[tuple[NamespaceKey, str | None]]:
    """
    Parse an import statement into (target namespace, target type) pairs.

    A target type of None means a wildcard import of the whole namespace.

    Supported forms (the leading 'import' keyword is optional):
        org.acme.*                      wildcard, unversioned
        org.acme@1.0.0.*                wildcard, versioned
        org.acme.Person                 single type, unversioned
        org.acme@1.0.0.Person           single type, versioned
        {Person, Address} from org.acme@1.0.0
        test                            wildcard (single-segment namespace)
        concerto@1.0.0                  wildcard (no type segment)

    Raises:
        ModelParseError: If the statement is malformed
    """
    if not text or not text.strip():
        raise ModelParseError("Empty import statement")

    body = text.strip()
    if body.startswith("import "):
        body = body[len("import "):].strip()

    braced = BRACED_IMPORT_PATTERN.match(body)
    if braced:
        namespace = parse_namespace(braced.group("namespace"))
        type_names = [t.strip() for t in braced.group("types").split(",") if t.strip()]
        if not type_names:
            raise ModelParseError(f"Import lists no types: '{text}'")
        for type_name in type_names:
            if not is_identifier(type_name):
                raise ModelParseError(f"Invalid type name '{type_name}' in import '{text}'")
        return [(namespace, type_name) for type_name in type_names]

    if body.endswith(".*"):
        return [(parse_namespace(body[:-2]), None)]

    try:
        namespace_part, type_name = split_fqn(body)
    except ModelParseError:
        # No type segment: the whole statement names a namespace
        return [(parse_namespace(body), None)]
    return [(parse_namespace(namespace_part), type_name)]
