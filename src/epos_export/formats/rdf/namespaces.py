"""
Namespace table of the EPOS-DCAT-AP export.

One fixed prefix set is bound on every exported graph. ``rdf`` is deliberately
absent from the table; rdf:type is written with the Turtle ``a`` keyword.
"""

from typing import Dict

from rdflib import Graph, Namespace, URIRef


ADMS = Namespace("http://www.w3.org/ns/adms#")
DASH = Namespace("http://datashapes.org/dash#")
DC = Namespace("http://purl.org/dc/elements/1.1/")
DCAT = Namespace("http://www.w3.org/ns/dcat#")
DCT = Namespace("http://purl.org/dc/terms/")
EPOS = Namespace("https://www.epos-eu.org/epos-dcat-ap#")
FOAF = Namespace("http://xmlns.com/foaf/0.1/")
CNT = Namespace("http://www.w3.org/2011/content#")
OA = Namespace("http://www.w3.org/ns/oa#")
ORG = Namespace("http://www.w3.org/ns/org#")
OWL = Namespace("http://www.w3.org/2002/07/owl#")
RDFS = Namespace("http://www.w3.org/2000/01/rdf-schema#")
SCHEMA = Namespace("http://schema.org/")
SH = Namespace("http://www.w3.org/ns/shacl#")
SKOS = Namespace("http://www.w3.org/2004/02/skos/core#")
SPDX = Namespace("http://spdx.org/rdf/terms#")
VCARD = Namespace("http://www.w3.org/2006/vcard/ns#")
HYDRA = Namespace("http://www.w3.org/ns/hydra/core#")
XSD = Namespace("http://www.w3.org/2001/XMLSchema#")
GEO = Namespace("http://www.w3.org/2003/01/geo/wgs84_pos#")
HTTP = Namespace("http://www.w3.org/2006/http#")
LOCN = Namespace("http://www.w3.org/ns/locn#")
GSP = Namespace("http://www.opengis.net/ont/geosparql#")
DQV = Namespace("http://www.w3.org/ns/dqv#")
PROV = Namespace("http://www.w3.org/ns/prov#")

RDF_NS = Namespace("http://www.w3.org/1999/02/22-rdf-syntax-ns#")
RDF_TYPE = RDF_NS.type

GSP_WKT_LITERAL: URIRef = GSP.wktLiteral

PREFIXES: Dict[str, Namespace] = {
    "adms": ADMS,
    "dash": DASH,
    "dc": DC,
    "dcat": DCAT,
    "dct": DCT,
    "epos": EPOS,
    "foaf": FOAF,
    "cnt": CNT,
    "oa": OA,
    "org": ORG,
    "owl": OWL,
    "rdfs": RDFS,
    "schema": SCHEMA,
    "sh": SH,
    "skos": SKOS,
    "spdx": SPDX,
    "vcard": VCARD,
    "hydra": HYDRA,
    "xsd": XSD,
    "geo": GEO,
    "http": HTTP,
    "locn": LOCN,
    "gsp": GSP,
    "dqv": DQV,
    "prov": PROV,
}


def new_graph() -> Graph:
    """Create an empty graph carrying only the export prefix table."""
    graph = Graph(bind_namespaces="none")
    for prefix, namespace in PREFIXES.items():
        graph.bind(prefix, namespace, override=True, replace=True)
    return graph
