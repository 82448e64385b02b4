"""
XML rendering of OAI-PMH responses.

Responses are built as ``xml.etree.ElementTree`` trees. Record metadata is
rendered in one of three formats:

- ``oai_dc``: Dublin Core elements filled from fixed lists of source predicates.
- ``dcat``: a curated set of DCAT/DCT literals and resource references.
- ``epos_dcat_ap``: the record's RDF subgraph embedded as RDF/XML.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from rdflib import Graph, Literal, URIRef

from ..rdf.namespaces import DCAT, DCT, PREFIXES, RDF_NS, RDFS, SCHEMA
from .record import CategoryInfo, OaiPmhRecord, current_timestamp


logger = logging.getLogger(__name__)

OAI_NS = "http://www.openarchives.org/OAI/2.0/"
OAI_DC_NS = "http://www.openarchives.org/OAI/2.0/oai_dc/"
OAI_IDENTIFIER_NS = "http://www.openarchives.org/OAI/2.0/oai-identifier"
DC_NS = "http://purl.org/dc/elements/1.1/"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
RDF_XML_NS = str(RDF_NS)

OAI_SCHEMA_LOCATION = f"{OAI_NS} http://www.openarchives.org/OAI/2.0/OAI-PMH.xsd"
OAI_DC_SCHEMA_LOCATION = f"{OAI_DC_NS} http://www.openarchives.org/OAI/2.0/oai_dc.xsd"
OAI_IDENTIFIER_SCHEMA_LOCATION = f"{OAI_IDENTIFIER_NS} http://www.openarchives.org/OAI/2.0/oai-identifier.xsd"

ET.register_namespace("", OAI_NS)
ET.register_namespace("oai_dc", OAI_DC_NS)
ET.register_namespace("oai-identifier", OAI_IDENTIFIER_NS)
ET.register_namespace("dc", DC_NS)
ET.register_namespace("xsi", XSI_NS)
ET.register_namespace("rdf", RDF_XML_NS)
for _prefix, _namespace in PREFIXES.items():
    ET.register_namespace(_prefix, str(_namespace))


def _q(namespace: str, local: str) -> str:
    return f"{{{namespace}}}{local}"


def _sub(parent: ET.Element, namespace: str, local: str, text: Optional[str] = None, **attrib) -> ET.Element:
    element = ET.SubElement(parent, _q(namespace, local), attrib)
    if text is not None:
        element.text = text
    return element


def oai(parent: ET.Element, local: str, text: Optional[str] = None, **attrib) -> ET.Element:
    """Child element in the OAI-PMH namespace."""
    return _sub(parent, OAI_NS, local, text, **attrib)


# ============================================================================
# Envelope
# ============================================================================

def response_root(base_url: str, verb: Optional[str] = None, arguments: Optional[Dict[str, str]] = None) -> ET.Element:
    """
    ``<OAI-PMH>`` root with ``responseDate`` and ``request``.

    Args:
        base_url: Text of the ``request`` element.
        verb: Echoed as the ``verb`` attribute; omitted for error responses.
        arguments: Further request arguments echoed as attributes.
    """
    root = ET.Element(_q(OAI_NS, "OAI-PMH"), {_q(XSI_NS, "schemaLocation"): OAI_SCHEMA_LOCATION})
    oai(root, "responseDate", current_timestamp())
    attrib = {}
    if verb:
        attrib["verb"] = verb
        attrib.update({k: v for k, v in (arguments or {}).items() if v})
    oai(root, "request", base_url, **attrib)
    return root


def error_document(base_url: str, code: str, message: str) -> ET.Element:
    root = response_root(base_url)
    oai(root, "error", message, code=code)
    return root


def to_xml(root: ET.Element) -> str:
    ET.indent(root, space="  ")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding="unicode") + "\n"


# ============================================================================
# Verb bodies
# ============================================================================

def render_identify(
    parent: ET.Element,
    repository_name: str,
    base_url: str,
    protocol_version: str,
    admin_email: str,
    earliest_datestamp: str,
    deleted_record: str,
    granularity: str,
    repository_identifier: str,
    sample_identifier: str,
) -> ET.Element:
    identify = oai(parent, "Identify")
    oai(identify, "repositoryName", repository_name)
    oai(identify, "baseURL", base_url)
    oai(identify, "protocolVersion", protocol_version)
    oai(identify, "adminEmail", admin_email)
    oai(identify, "earliestDatestamp", earliest_datestamp)
    oai(identify, "deletedRecord", deleted_record)
    oai(identify, "granularity", granularity)

    description = oai(identify, "description")
    identifier = _sub(
        description, OAI_IDENTIFIER_NS, "oai-identifier",
        **{_q(XSI_NS, "schemaLocation"): OAI_IDENTIFIER_SCHEMA_LOCATION},
    )
    _sub(identifier, OAI_IDENTIFIER_NS, "scheme", "uri")
    _sub(identifier, OAI_IDENTIFIER_NS, "repositoryIdentifier", repository_identifier)
    _sub(identifier, OAI_IDENTIFIER_NS, "delimiter", "/")
    _sub(identifier, OAI_IDENTIFIER_NS, "sampleIdentifier", sample_identifier)
    return identify


def render_metadata_formats(parent: ET.Element) -> ET.Element:
    formats = oai(parent, "ListMetadataFormats")
    for metadata_format in METADATA_FORMATS.values():
        element = oai(formats, "metadataFormat")
        oai(element, "metadataPrefix", metadata_format.prefix)
        oai(element, "schema", metadata_format.schema)
        oai(element, "metadataNamespace", metadata_format.namespace)
    return formats


def _set_description(parent: ET.Element, text: str) -> None:
    description = oai(parent, "setDescription")
    dc = _sub(description, OAI_DC_NS, "dc")
    _sub(dc, DC_NS, "description", text)


def render_sets(
    parent: ET.Element,
    type_sets: Iterable[Tuple[str, str, int]],
    category_sets: Iterable[Tuple[str, CategoryInfo]],
) -> ET.Element:
    """
    ``ListSets`` body.

    Args:
        type_sets: (setSpec, prefixed type name, record count) per type.
        category_sets: (setSpec, category) per category.
    """
    sets = oai(parent, "ListSets")
    for spec, type_name, count in type_sets:
        element = oai(sets, "set")
        oai(element, "setSpec", spec)
        oai(element, "setName", f"{type_name} ({count} records)")
        _set_description(element, f"All resources of type {type_name}")
    for spec, category in category_sets:
        element = oai(sets, "set")
        oai(element, "setSpec", spec)
        oai(element, "setName", category.label or category.uri)
        if category.description:
            _set_description(element, category.description)
    return sets


def render_header(parent: ET.Element, record: OaiPmhRecord) -> ET.Element:
    header = oai(parent, "header")
    oai(header, "identifier", record.identifier)
    oai(header, "datestamp", record.datestamp)
    for spec in record.set_specs:
        oai(header, "setSpec", spec)
    return header


def render_record(parent: ET.Element, record: OaiPmhRecord, metadata_prefix: str) -> ET.Element:
    element = oai(parent, "record")
    render_header(element, record)
    metadata = oai(element, "metadata")
    metadata_format = METADATA_FORMATS.get(metadata_prefix, METADATA_FORMATS["oai_dc"])
    metadata.append(metadata_format.render(record))
    return element


def render_resumption_token(
    parent: ET.Element,
    token: Optional[str],
    complete_list_size: int,
    cursor: int,
) -> ET.Element:
    """Resumption token element; an empty ``token`` marks the end of the list."""
    element = oai(
        parent, "resumptionToken",
        completeListSize=str(complete_list_size),
        cursor=str(cursor),
    )
    if token:
        element.text = token
    return element


# ============================================================================
# Metadata formats
# ============================================================================

def _values(graph: Graph, subject: URIRef, predicates: Sequence[URIRef]) -> List[str]:
    """Distinct literal and IRI values of ``predicates``, in predicate order."""
    seen: Dict[str, None] = {}
    for predicate in predicates:
        for obj in graph.objects(subject, predicate):
            if not isinstance(obj, (Literal, URIRef)):
                continue
            value = str(obj)
            if value:
                seen.setdefault(value, None)
    return list(seen)


DC_ELEMENTS: Tuple[Tuple[str, Tuple[URIRef, ...]], ...] = (
    ("title", (DCT["title"], SCHEMA.name, RDFS.label)),
    ("creator", (DCT.creator, SCHEMA.provider, SCHEMA.manufacturer)),
    ("subject", (DCAT.theme, DCAT.keyword, SCHEMA.keywords)),
    ("description", (DCT.description, SCHEMA.description)),
    ("publisher", (DCT.publisher,)),
    ("date", (DCT.issued, DCT.modified, DCT.created, SCHEMA.datePublished, SCHEMA.dateModified)),
)
"""Dublin Core elements rendered before dc:type, with their source predicates."""

DC_TRAILING_ELEMENTS: Tuple[Tuple[str, Tuple[URIRef, ...]], ...] = (
    ("rights", (DCT.rights, DCT.accessRights, DCT.license)),
    ("format", (DCT["format"],)),
    ("language", (DCT.language,)),
)


def render_oai_dc(record: OaiPmhRecord) -> ET.Element:
    dc = ET.Element(_q(OAI_DC_NS, "dc"), {_q(XSI_NS, "schemaLocation"): OAI_DC_SCHEMA_LOCATION})
    graph = record.metadata
    if graph is None:
        _sub(dc, DC_NS, "identifier", record.identifier)
        _sub(dc, DC_NS, "type", record.type_local_name)
        return dc

    subject = URIRef(record.identifier)
    for name, predicates in DC_ELEMENTS:
        for value in _values(graph, subject, predicates):
            _sub(dc, DC_NS, name, value)

    _sub(dc, DC_NS, "type", record.type_local_name)
    _sub(dc, DC_NS, "identifier", record.identifier)
    for value in _values(graph, subject, (DCT.identifier, SCHEMA.identifier)):
        if value != record.identifier:
            _sub(dc, DC_NS, "identifier", value)

    for name, predicates in DC_TRAILING_ELEMENTS:
        for value in _values(graph, subject, predicates):
            _sub(dc, DC_NS, name, value)
    return dc


DCAT_LITERALS = (
    ("dct", "identifier", DCT.identifier),
    ("dct", "title", DCT["title"]),
    ("dct", "description", DCT.description),
    ("dcat", "keyword", DCAT.keyword),
    ("dct", "issued", DCT.issued),
    ("dct", "modified", DCT.modified),
)

DCAT_REFERENCES = (
    ("dcat", "theme", DCAT.theme),
    ("dct", "publisher", DCT.publisher),
    ("dcat", "distribution", DCAT.distribution),
    ("dcat", "contactPoint", DCAT.contactPoint),
)


def render_dcat(record: OaiPmhRecord) -> ET.Element:
    root = ET.Element(_q(str(DCAT), record.type_local_name), {_q(RDF_XML_NS, "about"): record.identifier})
    graph = record.metadata
    if graph is None:
        return root

    subject = URIRef(record.identifier)
    for prefix, local, predicate in DCAT_LITERALS:
        for obj in graph.objects(subject, predicate):
            if isinstance(obj, Literal):
                _sub(root, str(PREFIXES[prefix]), local, str(obj))
    for prefix, local, predicate in DCAT_REFERENCES:
        for obj in graph.objects(subject, predicate):
            if isinstance(obj, URIRef):
                _sub(root, str(PREFIXES[prefix]), local, **{_q(RDF_XML_NS, "resource"): str(obj)})
    return root


def render_epos_dcat_ap(record: OaiPmhRecord) -> ET.Element:
    rdf = ET.Element(_q(RDF_XML_NS, "RDF"))
    graph = record.metadata
    if graph is not None and len(graph) > 0:
        serialized = graph.serialize(format="xml", encoding="utf-8")
        for child in ET.fromstring(serialized):
            rdf.append(child)
        return rdf

    description = _sub(rdf, RDF_XML_NS, "Description", **{_q(RDF_XML_NS, "about"): record.identifier})
    _sub(description, RDF_XML_NS, "type", **{_q(RDF_XML_NS, "resource"): record.rdf_type or ""})
    return rdf


@dataclass(frozen=True)
class MetadataFormat:
    """A disseminated metadata format."""
    prefix: str
    schema: str
    namespace: str
    render: Callable[[OaiPmhRecord], ET.Element]


METADATA_FORMATS: Dict[str, MetadataFormat] = {
    "oai_dc": MetadataFormat(
        prefix="oai_dc",
        schema="http://www.openarchives.org/OAI/2.0/oai_dc.xsd",
        namespace=OAI_DC_NS,
        render=render_oai_dc,
    ),
    "dcat": MetadataFormat(
        prefix="dcat",
        schema="http://www.w3.org/ns/dcat#",
        namespace=str(DCAT),
        render=render_dcat,
    ),
    "epos_dcat_ap": MetadataFormat(
        prefix="epos_dcat_ap",
        schema="https://raw.githubusercontent.com/epos-eu/EPOS-DCAT-AP/EPOS-DCAT-AP-shapes/epos-dcat-ap_shapes.ttl",
        namespace="https://www.epos-eu.org/epos-dcat-ap#",
        render=render_epos_dcat_ap,
    ),
}
"""Supported formats by metadataPrefix, in ListMetadataFormats order."""
