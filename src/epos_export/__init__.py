"""
EPOS metadata export.

Maps EPOS data-model entities to EPOS-DCAT-AP RDF (Turtle or JSON-LD) and
publishes the resulting dataset through an OAI-PMH 2.0 provider.
"""

from .config import AppConfig, ExportConfig, OaiPmhConfig, SparqlConfig
from .core import ExportError, InMemoryEntityStore, MetadataExporter
from .shared.models import EntityType, Version

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "EntityType",
    "ExportConfig",
    "ExportError",
    "InMemoryEntityStore",
    "MetadataExporter",
    "OaiPmhConfig",
    "SparqlConfig",
    "Version",
]
