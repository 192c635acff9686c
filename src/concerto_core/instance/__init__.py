"""Typed instances, the factory that creates them, and the JSON serializer."""

from .types import Instance
from .factory import Factory
from .serializer import CLASS_KEY, Serializer

__all__ = [
    "Instance",
    "Factory",
    "CLASS_KEY",
    "Serializer",
]
