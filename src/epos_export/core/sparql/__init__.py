"""
Triple stores queried by the OAI-PMH provider.
"""

from .remote import RemoteSparqlStore, SparqlEndpointError, TransientEndpointError, binding_to_node
from .store import GraphStore, Row, SparqlService, StoreProvider, TripleStore

__all__ = [
    "GraphStore",
    "RemoteSparqlStore",
    "Row",
    "SparqlEndpointError",
    "SparqlService",
    "StoreProvider",
    "TransientEndpointError",
    "TripleStore",
    "binding_to_node",
]
