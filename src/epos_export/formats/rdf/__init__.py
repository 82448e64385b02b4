"""
RDF output: namespaces, graph building, entity mappers and serialization.
"""

from .graph_builder import GraphBuilder, MappingContext
from .mappers import MapperRegistry, MappingStrategy
from .namespaces import PREFIXES, new_graph
from .serializer import cleanup_prefixes, normalize_format, serialize

__all__ = [
    "GraphBuilder",
    "MappingContext",
    "MapperRegistry",
    "MappingStrategy",
    "PREFIXES",
    "new_graph",
    "cleanup_prefixes",
    "normalize_format",
    "serialize",
]
