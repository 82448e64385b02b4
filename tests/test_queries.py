"""
Tests for the harvesting query templates (formats/oaipmh/queries.py).

The templates are executed against a small rdflib graph so that the date
normalization and the record filters are checked with a real SPARQL engine.
"""

import pytest
from rdflib import BNode, Graph, Literal, URIRef
from rdflib.namespace import RDF, XSD

from epos_export.formats.oaipmh import format_datestamp, queries
from epos_export.formats.rdf.namespaces import DCAT, DCT, SCHEMA, SKOS

EX = "https://example.org/"


@pytest.fixture
def graph():
    g = Graph()
    dated_date = URIRef(EX + "dated-date")
    dated_time = URIRef(EX + "dated-time")
    undated = URIRef(EX + "undated")
    g.add((dated_date, RDF.type, DCAT.Dataset))
    g.add((dated_date, DCT.modified, Literal("2020-06-01", datatype=XSD.date)))
    g.add((dated_date, DCAT.theme, URIRef(EX + "category")))
    g.add((dated_time, RDF.type, DCAT.Dataset))
    g.add((dated_time, DCT.issued, Literal("2021-01-01T08:00:00Z", datatype=XSD.dateTime)))
    g.add((undated, RDF.type, SCHEMA.Organization))
    # Blank nodes of harvestable types are never records
    g.add((BNode(), RDF.type, DCT.Location))
    g.add((URIRef(EX + "category"), RDF.type, SKOS.Concept))
    g.add((URIRef(EX + "category"), SKOS.definition, Literal("A category")))
    return g


def _subjects(graph, query):
    return [str(row[0]) for row in graph.query(query)]


def _count(graph, query):
    return int(next(iter(graph.query(query)))[0])


@pytest.mark.unit
class TestTypeNames:
    """Tests for prefixed type name helpers."""

    def test_expand(self):
        """Known prefixes expand to full URIs."""
        assert queries.expand_type_uri("dcat:Dataset") == "http://www.w3.org/ns/dcat#Dataset"
        assert queries.expand_type_uri("owl:Thing") == "owl:Thing"
        assert queries.expand_type_uri(None) is None

    def test_compact(self):
        """Full URIs compact back to their prefixed form."""
        assert queries.compact_type_uri("http://schema.org/Person") == "schema:Person"
        assert queries.compact_type_uri("https://example.org/Other") == "https://example.org/Other"

    @pytest.mark.parametrize("value,expected", [
        ("https://example.org/a", True),
        ("https://example.org/a b", False),
        ("https://example.org/a>", False),
        ("", False),
        (None, False),
    ])
    def test_is_safe_iri(self, value, expected):
        """Whitespace and IRI delimiters make a value unsafe."""
        assert queries.is_safe_iri(value) is expected

    def test_unsafe_iri_in_template(self):
        """Builders refuse identifiers that would break out of <...>."""
        with pytest.raises(ValueError, match="Not a valid IRI"):
            queries.get_record("https://example.org/> ?p ?o . <x")

    def test_unnormalized_bound(self):
        """Date bounds must already be normalized."""
        with pytest.raises(ValueError, match="YYYY-MM-DDThh:mm:ss"):
            queries.count_records(None, None, "2020-01-01", None)


@pytest.mark.unit
class TestRecordQueries:
    """Tests for the record listing templates against a real graph."""

    def test_only_named_harvestable_resources(self, graph):
        """Blank nodes never appear as records."""
        query = queries.list_records(None, None, None, None, 0, 10)
        assert "FILTER(isIRI(?subject))" in query
        assert _subjects(graph, query) == [EX + "category", EX + "dated-date", EX + "dated-time", EX + "undated"]
        assert _count(graph, queries.count_records(None, None, None, None)) == 4

    def test_type_filter(self, graph):
        """A type filter selects that type only."""
        query = queries.list_records("dcat:Dataset", None, None, None, 0, 10)
        assert _subjects(graph, query) == [EX + "dated-date", EX + "dated-time"]

    def test_category_filter(self, graph):
        """A category filter selects resources themed with it."""
        query = queries.list_records(None, EX + "category", None, None, 0, 10)
        assert _subjects(graph, query) == [EX + "dated-date"]

    def test_dates_compare_across_datatypes(self, graph):
        """xsd:date and xsd:dateTime values are compared in normalized form."""
        query = queries.list_records("dcat:Dataset", None, "2020-06-01T00:00:00", "2020-12-31T23:59:59", 0, 10)
        assert _subjects(graph, query) == [EX + "dated-date"]

        query = queries.list_records("dcat:Dataset", None, "2021-01-01T08:00:00", None, 0, 10)
        assert _subjects(graph, query) == [EX + "dated-time"]

    def test_zone_offsets_compare_as_wall_clock(self):
        """Offsets are dropped in the filter exactly as in the published datestamp."""
        g = Graph()
        subject = URIRef(EX + "offset")
        g.add((subject, RDF.type, DCAT.Dataset))
        g.add((subject, DCT.modified, Literal("2021-03-01T23:30:00+02:00", datatype=XSD.dateTime)))

        published = format_datestamp("2021-03-01T23:30:00+02:00")
        assert published == "2021-03-01T23:30:00Z"

        bound = published[:19]
        assert _subjects(g, queries.list_records(None, None, bound, bound, 0, 10)) == [EX + "offset"]
        assert _subjects(g, queries.list_records(None, None, "2021-03-01T23:30:01", None, 0, 10)) == []

    def test_undated_records_pass_date_filters(self, graph):
        """Resources without any date are never excluded by dates."""
        query = queries.count_records("schema:Organization", None, "2099-01-01T00:00:00", None)
        assert _count(graph, query) == 1

    def test_paging(self, graph):
        """OFFSET and LIMIT select a stable slice."""
        first = _subjects(graph, queries.list_records(None, None, None, None, 0, 2))
        second = _subjects(graph, queries.list_records(None, None, None, None, 2, 2))
        assert len(first) == 2 and len(second) == 2
        assert not set(first) & set(second)

    def test_record_type_is_bound(self, graph):
        """Each row carries the record's harvestable type."""
        result = graph.query(queries.list_records("dcat:Dataset", None, None, None, 0, 10))
        assert "recordType" in [str(v) for v in result.vars]
        types = {str(row.recordType) for row in result}
        assert types == {str(DCAT.Dataset)}

    def test_get_record(self, graph):
        """get_record finds harvestable resources only."""
        rows = list(graph.query(queries.get_record(EX + "dated-date")))
        assert len(rows) == 1
        assert str(rows[0].modified) == "2020-06-01"
        assert list(graph.query(queries.get_record(EX + "nothing"))) == []


@pytest.mark.unit
class TestCatalogueQueries:
    """Tests for sets and record detail templates."""

    def test_entity_types_with_counts(self, graph):
        """Types present are listed with their record counts."""
        counts = {str(row["type"]): int(row["count"]) for row in graph.query(queries.list_entity_types())}
        assert counts[str(DCAT.Dataset)] == 2
        assert counts[str(SCHEMA.Organization)] == 1
        assert str(DCT.Location) not in counts

    def test_categories(self, graph):
        """Category descriptions also come from skos:definition."""
        rows = list(graph.query(queries.list_categories()))
        assert [str(row.category) for row in rows] == [EX + "category"]
        assert str(rows[0].description) == "A category"

    def test_construct_record_includes_blank_nodes(self):
        """Attached blank nodes are part of the record's subgraph."""
        g = Graph()
        subject = URIRef(EX + "d")
        location = BNode()
        g.add((subject, DCT.spatial, location))
        g.add((location, RDF.type, DCT.Location))
        g.add((URIRef(EX + "other"), DCT["title"], Literal("not included")))

        result = g.query(queries.construct_record(EX + "d")).graph
        assert (subject, DCT.spatial, None) in result
        assert (None, RDF.type, DCT.Location) in result
        assert (URIRef(EX + "other"), None, None) not in result

    def test_record_categories(self, graph):
        """Themes of a record are listed."""
        rows = list(graph.query(queries.get_record_categories(EX + "dated-date")))
        assert [str(row.category) for row in rows] == [EX + "category"]
