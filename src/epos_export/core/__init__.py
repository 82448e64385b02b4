"""
Core services: entity repositories, linked-entity collection, the metadata
exporter and the triple stores behind the OAI-PMH provider.
"""

from .collector import EntityCollector
from .exporter import ExportError, MetadataExporter
from .repository import (
    EntityRepository,
    InMemoryEntityStore,
    InMemoryRepository,
    ReferenceResolver,
    RepositoryError,
    RepositoryProvider,
)

__all__ = [
    "EntityCollector",
    "EntityRepository",
    "ExportError",
    "InMemoryEntityStore",
    "InMemoryRepository",
    "MetadataExporter",
    "ReferenceResolver",
    "RepositoryError",
    "RepositoryProvider",
]
