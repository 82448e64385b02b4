"""
Graph assembly helpers for the entity mappers.

``GraphBuilder`` wraps an rdflib graph with helpers that silently skip
``None`` and blank input, so no empty-valued triple is ever emitted.
``MappingContext`` carries one export's state (builder, entity lookup,
resource cache, version and registry) through the recursive mapper calls.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Protocol, Union

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.term import Node

from ...shared.models import (
    Entity,
    EntityType,
    LinkedEntity,
    Version,
    to_local_datetime,
    to_utc_instant,
)
from .namespaces import RDF_TYPE, XSD, new_graph


logger = logging.getLogger(__name__)

Subject = Union[URIRef, BNode]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class GraphBuilder:
    """Typed-literal helpers over a single rdflib graph."""

    def __init__(self, graph: Optional[Graph] = None):
        self.graph: Graph = graph if graph is not None else new_graph()

    def __len__(self) -> int:
        return len(self.graph)

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def resource(self, uri: str) -> URIRef:
        return URIRef(uri)

    def blank_node(self) -> BNode:
        return BNode()

    def add_type(self, subject: Subject, rdf_class: URIRef) -> None:
        self.graph.add((subject, RDF_TYPE, rdf_class))

    def add_reference(self, subject: Subject, predicate: URIRef, node: Optional[Node]) -> None:
        """Link an existing node; a None node (e.g. a rejected entity) adds nothing."""
        if node is not None:
            self.graph.add((subject, predicate, node))

    def add_uri(self, subject: Subject, predicate: URIRef, uri: Optional[str]) -> None:
        """Link a named resource by IRI without describing it."""
        if not _is_blank(uri):
            self.graph.add((subject, predicate, URIRef(uri)))

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    def add_literal(self, subject: Subject, predicate: URIRef, value: Optional[str]) -> None:
        """Plain (untyped) literal."""
        if not _is_blank(value):
            self.graph.add((subject, predicate, Literal(value)))

    def add_string(self, subject: Subject, predicate: URIRef, value: Optional[str]) -> None:
        if not _is_blank(value):
            self.graph.add((subject, predicate, Literal(value, datatype=XSD.string)))

    def add_string_allow_empty(self, subject: Subject, predicate: URIRef, value: Optional[str]) -> None:
        """Like ``add_string`` but keeps the empty string; only None is skipped."""
        if value is not None:
            self.graph.add((subject, predicate, Literal(value, datatype=XSD.string)))

    def add_boolean(self, subject: Subject, predicate: URIRef, value: Optional[bool]) -> None:
        if value is not None:
            self.graph.add((subject, predicate, Literal(bool(value), datatype=XSD.boolean)))

    def add_date(self, subject: Subject, predicate: URIRef, value: Union[date, datetime, str, None]) -> None:
        """``xsd:date`` literal in ``YYYY-MM-DD`` form; date-times are truncated."""
        if _is_blank(value):
            return
        if isinstance(value, datetime):
            lexical = value.date().isoformat()
        elif isinstance(value, date):
            lexical = value.isoformat()
        else:
            lexical = str(value)
        self.graph.add((subject, predicate, Literal(lexical, datatype=XSD.date)))

    def add_datetime(
        self,
        subject: Subject,
        predicate: URIRef,
        value: Union[datetime, str, None],
        utc: bool = True,
    ) -> None:
        """
        ``xsd:dateTime`` literal.

        Args:
            value: The date-time; strings are written unchanged.
            utc: When True the value is written as a UTC instant (``...Z``),
                otherwise as a local date-time without zone.
        """
        if _is_blank(value):
            return
        if isinstance(value, datetime):
            lexical = to_utc_instant(value) if utc else to_local_datetime(value)
        else:
            lexical = str(value)
        self.graph.add((subject, predicate, Literal(lexical, datatype=XSD.dateTime)))

    def add_int(self, subject: Subject, predicate: URIRef, value: Optional[int]) -> None:
        if value is not None:
            self.graph.add((subject, predicate, Literal(str(int(value)), datatype=XSD.int)))

    def add_typed(self, subject: Subject, predicate: URIRef, value: Any, datatype: URIRef) -> None:
        if not _is_blank(value):
            self.graph.add((subject, predicate, Literal(str(value), datatype=datatype)))

    def add_uri_literal(self, subject: Subject, predicate: URIRef, uri: Optional[str]) -> None:
        """URI as an ``xsd:anyURI`` literal rather than a node."""
        if not _is_blank(uri):
            self.graph.add((subject, predicate, Literal(uri, datatype=XSD.anyURI)))

    # Multi-valued variants

    def add_literals(self, subject: Subject, predicate: URIRef, values: Optional[Iterable[str]]) -> None:
        for value in values or ():
            self.add_literal(subject, predicate, value)

    def add_strings(self, subject: Subject, predicate: URIRef, values: Optional[Iterable[str]]) -> None:
        for value in values or ():
            self.add_string(subject, predicate, value)

    def add_uri_literals(self, subject: Subject, predicate: URIRef, values: Optional[Iterable[str]]) -> None:
        for value in values or ():
            self.add_uri_literal(subject, predicate, value)

    def add_uris(self, subject: Subject, predicate: URIRef, refs: Optional[Iterable[LinkedEntity]]) -> None:
        for ref in refs or ():
            if ref is not None:
                self.add_uri(subject, predicate, ref.uid)


class EntityMapper(Protocol):
    """Anything that can map an entity within a context (the registry)."""

    def map(self, entity: Entity, ctx: "MappingContext") -> Optional[Node]:
        ...


class MappingContext:
    """
    State shared by every mapper call of one export.

    Attributes:
        builder: Graph builder receiving the triples.
        entities: uid -> entity lookup used to resolve references.
        version: Vocabulary version being produced.
        registry: Dispatches entities to their mapping strategy.
        cache: uid -> node for named resources already emitted.
    """

    def __init__(
        self,
        builder: GraphBuilder,
        entities: Dict[str, Entity],
        version: Version,
        registry: EntityMapper,
    ):
        self.builder = builder
        self.entities = entities
        self.version = version
        self.registry = registry
        self.cache: Dict[str, Node] = {}

    def lookup(self, ref: Optional[LinkedEntity], *expected_types: EntityType) -> Optional[Entity]:
        """Resolve a reference, returning None when missing or of an unexpected type."""
        if ref is None:
            return None
        entity = self.entities.get(ref.uid)
        if entity is None:
            logger.debug(f"Referenced entity {ref.uid} is not part of this export")
            return None
        if expected_types and entity.entity_type not in expected_types:
            logger.debug(
                f"Referenced entity {ref.uid} is a {entity.entity_type.value}, "
                f"expected {', '.join(t.value for t in expected_types)}"
            )
            return None
        return entity

    def map(self, entity: Entity) -> Optional[Node]:
        return self.registry.map(entity, self)

    def link(
        self,
        subject: Subject,
        predicate: URIRef,
        ref: Optional[LinkedEntity],
        *expected_types: EntityType,
    ) -> Optional[Node]:
        """
        Map the referenced entity and link it from ``subject``.

        The edge is only added when the referenced entity resolves and its
        mapper returns a node.
        """
        entity = self.lookup(ref, *expected_types)
        if entity is None:
            return None
        node = self.map(entity)
        self.builder.add_reference(subject, predicate, node)
        return node

    def link_all(
        self,
        subject: Subject,
        predicate: URIRef,
        refs: Optional[Iterable[LinkedEntity]],
        *expected_types: EntityType,
    ) -> None:
        for ref in refs or ():
            self.link(subject, predicate, ref, *expected_types)

    def link_or_uri(
        self,
        subject: Subject,
        predicate: URIRef,
        ref: Optional[LinkedEntity],
        *expected_types: EntityType,
    ) -> None:
        """Like ``link`` but falls back to a bare named reference when unresolvable."""
        if ref is None:
            return
        if self.link(subject, predicate, ref, *expected_types) is None and self.lookup(ref, *expected_types) is None:
            self.builder.add_uri(subject, predicate, ref.uid)
