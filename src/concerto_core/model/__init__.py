"""
Model Registry Layer

Registers model files under canonical namespace keys and resolves types and
imports against them:

    ParsedModel  →  ModelRegistry.add_model  →  ModelFile
                                  ↓
       TypeResolver (FQN → Declaration)  ←  ImportResolver (Import → NamespaceKey)
"""

from .types import Declaration, DeclarationKind, Field, Import, ModelFile, ParsedModel
from .imports import ImportResolver
from .resolver import ResolvedType, TypeResolver
from .registry import ModelRegistry
from .loader import ModelLoader, load_models

__all__ = [
    "Declaration",
    "DeclarationKind",
    "Field",
    "Import",
    "ModelFile",
    "ParsedModel",
    "ImportResolver",
    "ResolvedType",
    "TypeResolver",
    "ModelRegistry",
    "ModelLoader",
    "load_models",
]
