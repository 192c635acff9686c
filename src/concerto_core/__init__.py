"""
Concerto Core - Namespace/Type Registry and Serializer

A runtime registry for declarative business-object models providing:
- Namespace registration with optional semantic versions (name@1.0.0)
- A strict policy that forbids unversioned namespaces and imports
- Lazy import and type resolution across namespaces
- A factory for typed instances and a lossless JSON codec using $class
"""

from .config import Config, LoaderConfig, RegistryConfig
from .errors import (
    ArityMismatchError,
    ConcertoError,
    DuplicateNamespaceError,
    InvalidModelError,
    MalformedDiscriminatorError,
    ModelParseError,
    NamespaceNotDefinedError,
    TypeNotFoundError,
    UnknownFieldError,
    UnversionedImportError,
    UnversionedNamespaceError,
)
from .instance import Factory, Instance, Serializer
from .model import ModelFile, ModelRegistry, ParsedModel, load_models
from .namespace import NamespaceKey

__version__ = "0.1.0"

__all__ = [
    "Config",
    "LoaderConfig",
    "RegistryConfig",
    "ArityMismatchError",
    "ConcertoError",
    "DuplicateNamespaceError",
    "InvalidModelError",
    "MalformedDiscriminatorError",
    "ModelParseError",
    "NamespaceNotDefinedError",
    "TypeNotFoundError",
    "UnknownFieldError",
    "UnversionedImportError",
    "UnversionedNamespaceError",
    "Factory",
    "Instance",
    "Serializer",
    "ModelFile",
    "ModelRegistry",
    "ParsedModel",
    "load_models",
    "NamespaceKey",
]
