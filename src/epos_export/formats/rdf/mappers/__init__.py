"""
Versioned entity-to-RDF mapping strategies.

Each module groups the strategies of related entity types and exposes them
in a ``STRATEGIES`` tuple; ``MapperRegistry.default()`` collects them all.
"""

from .base import MappingStrategy, VersionFunction
from .dataset import split_keywords
from .registry import MapperRegistry

__all__ = [
    "MapperRegistry",
    "MappingStrategy",
    "VersionFunction",
    "split_keywords",
]
