"""
SPARQL query templates of the harvesting protocol.

Only named resources (``isIRI``) of the types listed in ``HARVESTABLE_TYPES``
are records. When no type is requested the type constraint is a UNION over
that list.

Date filtering compares the first available of dct:modified, dct:issued,
dct:created, schema:dateModified and schema:datePublished, normalized to a
``YYYY-MM-DDThh:mm:ss`` string so that ``xsd:date`` and ``xsd:dateTime``
values compare alike. Records without any date always pass. The bounds given
to the builders must already be in that normalized form.
"""

import re
from typing import Dict, Optional, Sequence

from ..rdf.namespaces import DCAT, DCT, EPOS, FOAF, HYDRA, SCHEMA, SKOS


PREFIXES = """PREFIX rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#>
PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
PREFIX dcat: <http://www.w3.org/ns/dcat#>
PREFIX dct: <http://purl.org/dc/terms/>
PREFIX schema: <http://schema.org/>
PREFIX skos: <http://www.w3.org/2004/02/skos/core#>
PREFIX epos: <https://www.epos-eu.org/epos-dcat-ap#>
PREFIX hydra: <http://www.w3.org/ns/hydra/core#>
PREFIX foaf: <http://xmlns.com/foaf/0.1/>
PREFIX xsd: <http://www.w3.org/2001/XMLSchema#>
"""

HARVESTABLE_TYPES = (
    "dcat:Dataset",
    "dcat:Distribution",
    "dcat:Catalog",
    "dcat:CatalogRecord",
    "dcat:DataService",
    "schema:Organization",
    "schema:Person",
    "schema:ContactPoint",
    "schema:PostalAddress",
    "schema:SoftwareApplication",
    "schema:SoftwareSourceCode",
    "epos:WebService",
    "epos:Equipment",
    "epos:Facility",
    "hydra:Operation",
    "hydra:IriTemplate",
    "hydra:IriTemplateMapping",
    "skos:Concept",
    "skos:ConceptScheme",
    "foaf:Project",
    "dct:Location",
    "dct:PeriodOfTime",
)
"""RDF types exposed as records."""

TYPE_PREFIXES: Dict[str, str] = {
    "dcat": str(DCAT),
    "schema": str(SCHEMA),
    "epos": str(EPOS),
    "hydra": str(HYDRA),
    "skos": str(SKOS),
    "foaf": str(FOAF),
    "dct": str(DCT),
}

_UNSAFE_IRI = re.compile(r'[\s<>"{}|\\^`]')
_STAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$")


def expand_type_uri(prefixed_type: Optional[str]) -> Optional[str]:
    """``dcat:Dataset`` -> ``http://www.w3.org/ns/dcat#Dataset``; unknown prefixes are returned as is."""
    if prefixed_type is None:
        return None
    prefix, sep, local = prefixed_type.partition(":")
    if sep and prefix in TYPE_PREFIXES:
        return TYPE_PREFIXES[prefix] + local
    return prefixed_type


def compact_type_uri(full_uri: Optional[str]) -> Optional[str]:
    """Inverse of ``expand_type_uri``."""
    if full_uri is None:
        return None
    for prefix, namespace in TYPE_PREFIXES.items():
        if full_uri.startswith(namespace):
            return f"{prefix}:{full_uri[len(namespace):]}"
    return full_uri


def is_safe_iri(value: Optional[str]) -> bool:
    """True when ``value`` can be written inside ``<...>`` in a query."""
    return bool(value) and not _UNSAFE_IRI.search(value)


def _iri(value: str) -> str:
    if not is_safe_iri(value):
        raise ValueError(f"Not a valid IRI: {value!r}")
    return f"<{value}>"


def _stamp(value: str) -> str:
    if not _STAMP.match(value):
        raise ValueError(f"Date bound must be YYYY-MM-DDThh:mm:ss, got {value!r}")
    return value


def _type_pattern(type_filter: Optional[str], bind_type: bool) -> str:
    types: Sequence[str] = (type_filter,) if type_filter else HARVESTABLE_TYPES
    if bind_type:
        branches = [f"{{ ?subject a {t} . BIND({t} AS ?type) }}" for t in types]
    else:
        branches = [f"{{ ?subject a {t} }}" for t in types]
    return "  " + " UNION ".join(branches) + "\n"


def _date_patterns(from_date: Optional[str], until_date: Optional[str]) -> str:
    patterns = (
        "  OPTIONAL { ?subject dct:modified ?modifiedValue }\n"
        "  OPTIONAL { ?subject dct:issued ?issuedValue }\n"
        "  OPTIONAL { ?subject dct:created ?createdValue }\n"
        "  OPTIONAL { ?subject schema:dateModified ?schemaModifiedValue }\n"
        "  OPTIONAL { ?subject schema:datePublished ?schemaPublishedValue }\n"
    )
    if from_date is None and until_date is None:
        return patterns

    # Zone offsets are dropped, not applied: stamps compare as wall-clock time,
    # matching record.format_datestamp. Exported instants are already UTC.
    patterns += (
        "  BIND(COALESCE(?modifiedValue, ?issuedValue, ?createdValue, "
        "?schemaModifiedValue, ?schemaPublishedValue) AS ?effectiveDate)\n"
        "  BIND(IF(STRLEN(STR(?effectiveDate)) = 10, CONCAT(STR(?effectiveDate), \"T00:00:00\"), "
        "SUBSTR(STR(?effectiveDate), 1, 19)) AS ?stamp)\n"
    )
    if from_date is not None:
        patterns += f"  FILTER(!BOUND(?effectiveDate) || ?stamp >= \"{_stamp(from_date)}\")\n"
    if until_date is not None:
        patterns += f"  FILTER(!BOUND(?effectiveDate) || ?stamp <= \"{_stamp(until_date)}\")\n"
    return patterns


def _where(
    type_filter: Optional[str],
    category_uri: Optional[str],
    from_date: Optional[str],
    until_date: Optional[str],
    bind_type: bool,
) -> str:
    where = _type_pattern(type_filter, bind_type)
    where += "  FILTER(isIRI(?subject))\n"
    if category_uri:
        where += f"  ?subject dcat:theme {_iri(category_uri)} .\n"
    where += _date_patterns(from_date, until_date)
    return where


def list_records(
    type_filter: Optional[str],
    category_uri: Optional[str],
    from_date: Optional[str],
    until_date: Optional[str],
    offset: int,
    limit: int,
) -> str:
    """
    One page of records with their type and dates.

    Rows are grouped by subject so that multi-valued dates or types never
    produce more than one row per record.

    Args:
        type_filter: Prefixed type (``dcat:Dataset``), or None for all harvestable types.
        category_uri: Restrict to resources with this ``dcat:theme``.
        from_date: Inclusive lower bound (``YYYY-MM-DDThh:mm:ss``).
        until_date: Inclusive upper bound (``YYYY-MM-DDThh:mm:ss``).
        offset: Records to skip.
        limit: Page size.
    """
    return (
        PREFIXES
        + "SELECT ?subject (SAMPLE(?type) AS ?recordType) "
        "(SAMPLE(?modifiedValue) AS ?modified) (SAMPLE(?issuedValue) AS ?issued) "
        "(SAMPLE(?createdValue) AS ?created) (SAMPLE(?schemaModifiedValue) AS ?schemaModified) "
        "(SAMPLE(?schemaPublishedValue) AS ?schemaPublished) WHERE {\n"
        + _where(type_filter, category_uri, from_date, until_date, bind_type=True)
        + "}\n"
        "GROUP BY ?subject\n"
        "ORDER BY ?subject\n"
        f"OFFSET {int(offset)}\n"
        f"LIMIT {int(limit)}\n"
    )


def count_records(
    type_filter: Optional[str],
    category_uri: Optional[str],
    from_date: Optional[str],
    until_date: Optional[str],
) -> str:
    """Number of records matching the same filters as ``list_records``."""
    return (
        PREFIXES
        + "SELECT (COUNT(DISTINCT ?subject) AS ?count) WHERE {\n"
        + _where(type_filter, category_uri, from_date, until_date, bind_type=False)
        + "}\n"
    )


def get_record(identifier: str) -> str:
    """Harvestable type and dates of a single resource."""
    subject = _iri(identifier)
    return (
        PREFIXES
        + "SELECT ?type ?modified ?issued ?created ?schemaModified ?schemaPublished WHERE {\n"
        f"  VALUES ?type {{ {' '.join(HARVESTABLE_TYPES)} }}\n"
        f"  {subject} a ?type .\n"
        f"  OPTIONAL {{ {subject} dct:modified ?modified }}\n"
        f"  OPTIONAL {{ {subject} dct:issued ?issued }}\n"
        f"  OPTIONAL {{ {subject} dct:created ?created }}\n"
        f"  OPTIONAL {{ {subject} schema:dateModified ?schemaModified }}\n"
        f"  OPTIONAL {{ {subject} schema:datePublished ?schemaPublished }}\n"
        "}\n"
        "LIMIT 1\n"
    )


def construct_record(identifier: str) -> str:
    """The resource's own triples plus two levels of attached blank nodes."""
    subject = _iri(identifier)
    return (
        PREFIXES
        + "CONSTRUCT {\n"
        f"  {subject} ?p ?o .\n"
        "  ?o ?p2 ?o2 .\n"
        "  ?o2 ?p3 ?o3 .\n"
        "} WHERE {\n"
        f"  {subject} ?p ?o .\n"
        "  OPTIONAL {\n"
        "    ?o ?p2 ?o2 .\n"
        "    FILTER(isBlank(?o))\n"
        "    OPTIONAL {\n"
        "      ?o2 ?p3 ?o3 .\n"
        "      FILTER(isBlank(?o2))\n"
        "    }\n"
        "  }\n"
        "}\n"
    )


def get_record_categories(identifier: str) -> str:
    return (
        PREFIXES
        + "SELECT ?category WHERE {\n"
        f"  {_iri(identifier)} dcat:theme ?category .\n"
        "}\n"
    )


def list_entity_types() -> str:
    """Harvestable types present in the dataset with their record counts."""
    return (
        PREFIXES
        + "SELECT ?type (COUNT(DISTINCT ?subject) AS ?count) WHERE {\n"
        + _type_pattern(None, bind_type=True)
        + "  FILTER(isIRI(?subject))\n"
        "}\n"
        "GROUP BY ?type\n"
        "ORDER BY ?type\n"
    )


def list_categories() -> str:
    return (
        PREFIXES
        + "SELECT ?category ?label ?description ?broader ?inScheme WHERE {\n"
        "  { ?category a skos:Concept } UNION { ?category a skos:ConceptScheme }\n"
        "  FILTER(isIRI(?category))\n"
        "  OPTIONAL { ?category skos:prefLabel ?label }\n"
        "  OPTIONAL { { ?category dct:description ?description } UNION { ?category skos:definition ?description } }\n"
        "  OPTIONAL { ?category skos:broader ?broader }\n"
        "  OPTIONAL { ?category skos:inScheme ?inScheme }\n"
        "}\n"
        "ORDER BY ?category\n"
    )
