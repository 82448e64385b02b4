"""
Tests for the RDF mapping layer (formats/rdf).

This module tests:
- GraphBuilder literal helpers
- Mapping strategies: caching, embedding, compliance and version differences
- Reference linking through MappingContext
- Serializer format handling and prefix cleanup
"""

import logging
from datetime import date, datetime, timedelta, timezone

import pytest
from rdflib import BNode, Literal, URIRef
from rdflib.namespace import RDF, RDFS

from epos_export.formats.rdf.graph_builder import GraphBuilder, MappingContext
from epos_export.formats.rdf.mappers import MapperRegistry
from epos_export.formats.rdf.namespaces import DCAT, DCT, HYDRA, SCHEMA, SKOS, XSD
from epos_export.formats.rdf.serializer import cleanup_prefixes, normalize_format
from epos_export.shared.models import EntityType, LinkedEntity, Version, entity_from_dict

EX = "https://example.org/"
SUBJECT = URIRef(EX + "s")


def _context(entities, version=Version.V1, registry=None):
    lookup = {entity.uid: entity for entity in entities}
    registry = registry if registry is not None else MapperRegistry.default()
    return MappingContext(GraphBuilder(), lookup, version, registry)


def _entity(entity_type, **values):
    return entity_from_dict(entity_type, values)


@pytest.mark.unit
class TestGraphBuilder:
    """Tests for GraphBuilder helpers."""

    def test_blank_values_are_skipped(self):
        """None and empty strings never produce triples."""
        builder = GraphBuilder()
        builder.add_string(SUBJECT, DCT["title"], None)
        builder.add_string(SUBJECT, DCT["title"], "")
        builder.add_literal(SUBJECT, DCT.identifier, None)
        builder.add_uri(SUBJECT, DCT.relation, "")
        builder.add_literals(SUBJECT, DCAT.keyword, None)
        builder.add_reference(SUBJECT, DCT.publisher, None)
        assert len(builder) == 0

    def test_allow_empty_keeps_empty_string(self):
        """add_string_allow_empty only skips None."""
        builder = GraphBuilder()
        builder.add_string_allow_empty(SUBJECT, DCT.description, "")
        builder.add_string_allow_empty(SUBJECT, DCT.description, None)
        assert list(builder.graph.objects(SUBJECT, DCT.description)) == [Literal("", datatype=XSD.string)]

    def test_string_and_plain_literals(self):
        """add_string types as xsd:string; add_literal leaves the literal plain."""
        builder = GraphBuilder()
        builder.add_string(SUBJECT, DCT["title"], "Title")
        builder.add_literal(SUBJECT, DCT.identifier, "id-1")
        assert (SUBJECT, DCT["title"], Literal("Title", datatype=XSD.string)) in builder.graph
        assert (SUBJECT, DCT.identifier, Literal("id-1")) in builder.graph

    def test_date_truncates_datetimes(self):
        """xsd:date keeps only the calendar date."""
        builder = GraphBuilder()
        builder.add_date(SUBJECT, DCT.modified, datetime(2023, 6, 15, 10, 30, tzinfo=timezone.utc))
        builder.add_date(SUBJECT, DCT.issued, date(2021, 3, 1))
        assert (SUBJECT, DCT.modified, Literal("2023-06-15", datatype=XSD.date)) in builder.graph
        assert (SUBJECT, DCT.issued, Literal("2021-03-01", datatype=XSD.date)) in builder.graph

    def test_datetime_forms(self):
        """Date-times are written as UTC instants or as local wall-clock time."""
        value = datetime(2024, 1, 15, 10, 30, tzinfo=timezone(timedelta(hours=2)))
        builder = GraphBuilder()
        builder.add_datetime(SUBJECT, DCT.issued, value)
        builder.add_datetime(SUBJECT, DCT.modified, value, utc=False)
        assert (SUBJECT, DCT.issued, Literal("2024-01-15T08:30:00Z", datatype=XSD.dateTime)) in builder.graph
        assert (SUBJECT, DCT.modified, Literal("2024-01-15T10:30:00", datatype=XSD.dateTime)) in builder.graph

    def test_int(self):
        """Integers are typed xsd:int."""
        builder = GraphBuilder()
        builder.add_int(SUBJECT, DCAT.byteSize, 42)
        assert (SUBJECT, DCAT.byteSize, Literal("42", datatype=XSD.int)) in builder.graph


@pytest.mark.unit
class TestMappingStrategies:
    """Tests for the shared mapping rules."""

    def test_named_resources_are_cached(self):
        """Mapping the same named entity twice returns the same node and adds nothing."""
        organization = _entity("ORGANIZATION", uid=EX + "org", legalName=["Org"])
        ctx = _context([organization])

        first = ctx.map(organization)
        size = len(ctx.builder)
        second = ctx.map(organization)

        assert first == second == URIRef(EX + "org")
        assert len(ctx.builder) == size

    def test_embedded_entities_get_fresh_blank_nodes(self):
        """Value entities become a new blank node per use."""
        period = _entity("PERIOD_OF_TIME", uid="_:p", startDate="1985-01-01T00:00:00Z")
        ctx = _context([period])

        first = ctx.map(period)
        second = ctx.map(period)

        assert isinstance(first, BNode) and isinstance(second, BNode)
        assert first != second

    def test_period_of_time_per_version(self):
        """V1 uses schema:startDate, V3 dcat:startDate."""
        period = _entity("PERIOD_OF_TIME", uid="_:p", startDate="1985-01-01T00:00:00Z")
        expected = Literal("1985-01-01T00:00:00Z", datatype=XSD.dateTime)

        v1 = _context([period], Version.V1)
        node = v1.map(period)
        assert (node, SCHEMA.startDate, expected) in v1.builder.graph
        assert (node, RDF.type, DCT.PeriodOfTime) in v1.builder.graph

        v3 = _context([period], Version.V3)
        node = v3.map(period)
        assert (node, DCAT.startDate, expected) in v3.builder.graph
        assert (node, SCHEMA.startDate, None) not in v3.builder.graph

    def test_class_depends_on_version(self):
        """Documentation is hydra:ApiDocumentation in V1 and dct:Standard in V3."""
        documentation = _entity("DOCUMENTATION", uid=EX + "doc", title="API")

        v1 = _context([documentation], Version.V1)
        v1.map(documentation)
        assert (URIRef(EX + "doc"), RDF.type, HYDRA.ApiDocumentation) in v1.builder.graph

        v3 = _context([documentation], Version.V3)
        v3.map(documentation)
        assert (URIRef(EX + "doc"), RDF.type, DCT.Standard) in v3.builder.graph

    def test_compliance_gate(self, caplog):
        """V1 source code needs an identifier; V3 falls back to the uid."""
        code = _entity("SOFTWARE_SOURCE_CODE", uid=EX + "code", name="Tool")

        v1 = _context([code], Version.V1)
        with caplog.at_level(logging.WARNING):
            assert v1.map(code) is None
        assert len(v1.builder) == 0
        assert "identifier" in caplog.text

        v3 = _context([code], Version.V3)
        node = v3.map(code)
        assert (node, SCHEMA.identifier, Literal(EX + "code")) in v3.builder.graph

    def test_output_mapping_is_described_by_its_payload(self):
        """A standalone output mapping is only typed; the payload carries its fields."""
        output = _entity("OUTPUT_MAPPING", uid=EX + "out", output_variable="lat",
                         output_property="schema:latitude", output_required="true")
        payload = _entity("PAYLOAD", uid=EX + "payload", output_mapping=[{"uid": EX + "out"}])

        v1 = _context([output, payload], Version.V1)
        v1.map(output)
        assert list(v1.builder.graph.predicate_objects(URIRef(EX + "out"))) == [(RDF.type, SCHEMA.PropertyValue)]

        v1.map(payload)
        prop = v1.builder.graph.value(URIRef(EX + "payload"), HYDRA.supportedProperty)
        assert (prop, RDF.type, HYDRA.SupportedProperty) in v1.builder.graph
        assert (prop, HYDRA.variable, Literal("lat", datatype=XSD.string)) in v1.builder.graph
        assert (prop, HYDRA.required, Literal(True)) in v1.builder.graph

        v3 = _context([output], Version.V3)
        v3.map(output)
        assert (URIRef(EX + "out"), RDF.type, RDFS.Resource) in v3.builder.graph

    def test_rejected_entities_are_not_linked(self):
        """A link to a non-compliant entity adds no edge."""
        rejected = _entity("DATA_PRODUCT", uid=EX + "dp2", title=["No description"])
        ctx = _context([rejected])
        assert ctx.link(SUBJECT, DCT.relation, LinkedEntity(uid=EX + "dp2"), EntityType.DATA_PRODUCT) is None
        assert len(ctx.builder) == 0


@pytest.mark.unit
class TestLinking:
    """Tests for MappingContext reference handling."""

    def test_missing_reference_adds_nothing(self):
        """References outside the export are skipped."""
        product = _entity("DATA_PRODUCT", uid=EX + "dp", title=["T"], description=["D"],
                          publisher=[{"uid": EX + "missing", "entityType": "ORGANIZATION"}])
        ctx = _context([product])
        ctx.map(product)
        assert (URIRef(EX + "dp"), DCT.publisher, None) not in ctx.builder.graph

    def test_unexpected_type_adds_nothing(self):
        """A reference resolving to the wrong entity type is skipped."""
        person = _entity("PERSON", uid=EX + "person", givenName="Ada")
        product = _entity("DATA_PRODUCT", uid=EX + "dp", title=["T"], description=["D"],
                          publisher=[{"uid": EX + "person"}])
        ctx = _context([product, person])
        ctx.map(product)
        assert (URIRef(EX + "dp"), DCT.publisher, None) not in ctx.builder.graph

    def test_mutual_references_map_each_node_once(self):
        """Entities referencing each other terminate and are typed exactly once."""
        broader = _entity("CATEGORY", uid=EX + "a", name="Geoscience", narrower=[{"uid": EX + "b"}])
        narrower = _entity("CATEGORY", uid=EX + "b", name="Seismology", broader=[{"uid": EX + "a"}])
        ctx = _context([broader, narrower])

        for entity in (broader, narrower):
            ctx.map(entity)

        graph = ctx.builder.graph
        typed = sorted(str(s) for s, o in graph.subject_objects(RDF.type))
        assert typed == [EX + "a", EX + "b"]
        assert (URIRef(EX + "a"), SKOS.narrower, URIRef(EX + "b")) in graph
        assert (URIRef(EX + "b"), SKOS.broader, URIRef(EX + "a")) in graph
        assert len(list(graph.objects(URIRef(EX + "a"), SKOS.prefLabel))) == 1

    def test_unresolvable_access_service_is_a_bare_link(self):
        """A distribution still points at an access service it cannot describe."""
        distribution = _entity("DISTRIBUTION", uid=EX + "dist",
                               accessService=[{"uid": EX + "remote-service", "entityType": "WEB_SERVICE"}])
        ctx = _context([distribution])
        ctx.map(distribution)
        assert (URIRef(EX + "dist"), DCAT.accessService, URIRef(EX + "remote-service")) in ctx.builder.graph
        assert (URIRef(EX + "remote-service"), RDF.type, None) not in ctx.builder.graph


@pytest.mark.unit
class TestMapperRegistry:
    """Tests for MapperRegistry."""

    def test_default_registry_covers_catalogue_types(self):
        """The default registry maps the catalogue's core types."""
        registry = MapperRegistry.default()
        for entity_type in (EntityType.DATA_PRODUCT, EntityType.DISTRIBUTION, EntityType.WEB_SERVICE,
                            EntityType.ORGANIZATION, EntityType.CATEGORY):
            assert entity_type in registry

    def test_missing_mapper(self, caplog):
        """Entities without a strategy produce nothing and are logged."""
        person = _entity("PERSON", uid=EX + "person")
        ctx = _context([person], registry=MapperRegistry())
        with caplog.at_level(logging.WARNING):
            assert ctx.map(person) is None
        assert "No mapper registered for Person" in caplog.text


@pytest.mark.unit
class TestSerializer:
    """Tests for format normalization and prefix cleanup."""

    @pytest.mark.parametrize("value,expected", [
        (None, "turtle"),
        ("", "turtle"),
        ("  ", "turtle"),
        ("TURTLE", "turtle"),
        (" JSON-LD ", "json-ld"),
    ])
    def test_normalize_format(self, value, expected):
        """Blank selects Turtle; matching ignores case and surrounding space."""
        assert normalize_format(value) == expected

    def test_unsupported_format(self):
        """Other serializations are rejected."""
        with pytest.raises(ValueError, match="turtle, json-ld"):
            normalize_format("n-triples")

    def test_sparql_prefixes_become_turtle(self):
        """Leading PREFIX lines are rewritten; the body is untouched."""
        content = (
            "PREFIX dcat: <http://www.w3.org/ns/dcat#>\n"
            "PREFIX dct: <http://purl.org/dc/terms/>\n"
            "\n"
            "<https://example.org/d> dct:title \"PREFIX in a literal\" .\n"
        )
        cleaned = cleanup_prefixes(content).split("\n")
        assert cleaned[0] == "@prefix dcat: <http://www.w3.org/ns/dcat#> ."
        assert cleaned[1] == "@prefix dct: <http://purl.org/dc/terms/> ."
        assert cleaned[3] == "<https://example.org/d> dct:title \"PREFIX in a literal\" ."

    def test_content_without_prefixes(self):
        """Documents without prefix declarations are returned unchanged."""
        content = "<https://example.org/d> <https://example.org/p> \"x\" .\n"
        assert cleanup_prefixes(content) == content
