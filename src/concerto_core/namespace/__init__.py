"""Namespace keys and name parsing."""

from .types import NamespaceKey, SemanticVersion
from .parser import (
    is_identifier,
    parse_import_statement,
    parse_namespace,
    parse_semver,
    split_fqn,
)

__all__ = [
    "NamespaceKey",
    "SemanticVersion",
    "is_identifier",
    "parse_import_statement",
    "parse_namespace",
    "parse_semver",
    "split_fqn",
]
