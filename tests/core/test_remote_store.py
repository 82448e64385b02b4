"""
Tests for the remote SPARQL endpoint client (core/sparql/remote.py).

The HTTP session is mocked and backoff waits are set to zero so retries run
instantly.
"""

import json
from typing import Any, Dict
from unittest.mock import MagicMock, Mock

import pytest
import requests
from rdflib import BNode, Literal, URIRef
from rdflib.namespace import XSD

from epos_export.core.sparql import RemoteSparqlStore, SparqlEndpointError, binding_to_node
from epos_export.shared.models import Version

ENDPOINT = "https://sparql.example.org/query"

SELECT_RESULT = {
    "head": {"vars": ["subject", "modified", "label"]},
    "results": {
        "bindings": [
            {
                "subject": {"type": "uri", "value": "https://example.org/d1"},
                "modified": {"type": "literal", "value": "2023-06-15", "datatype": str(XSD.date)},
                "label": {"type": "literal", "value": "Eins", "xml:lang": "de"},
            },
            {
                "subject": {"type": "uri", "value": "https://example.org/d2"},
            },
        ],
    },
}


def create_mock_response(
    status_code: int,
    json_data: Dict[str, Any] = None,
    text: str = "",
    headers: Dict[str, str] = None,
) -> Mock:
    """Create a mock requests.Response object."""
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    response.reason = "Error" if status_code >= 400 else "OK"
    if json_data is not None:
        response.json.return_value = json_data
        response.text = json.dumps(json_data)
    else:
        response.json.side_effect = ValueError("No JSON")
        response.text = text
    return response


def _store(*responses, max_retries=3):
    session = MagicMock()
    session.post.side_effect = list(responses)
    store = RemoteSparqlStore(ENDPOINT, timeout=5, max_retries=max_retries, min_wait=0, max_wait=0, session=session)
    return store, session


@pytest.mark.unit
class TestBindings:
    """Tests for binding_to_node."""

    def test_uri(self):
        """URI bindings become URIRefs."""
        assert binding_to_node({"type": "uri", "value": "https://example.org/a"}) == URIRef("https://example.org/a")

    def test_typed_literal(self):
        """Datatypes are kept, including the legacy typed-literal kind."""
        node = binding_to_node({"type": "typed-literal", "value": "5", "datatype": str(XSD.integer)})
        assert node == Literal("5", datatype=XSD.integer)

    def test_language_literal(self):
        """Language tags are kept."""
        assert binding_to_node({"type": "literal", "value": "x", "xml:lang": "en"}) == Literal("x", lang="en")

    def test_bnode(self):
        """Blank node bindings become BNodes."""
        assert isinstance(binding_to_node({"type": "bnode", "value": "b0"}), BNode)

    def test_unbound(self):
        """Missing bindings are None."""
        assert binding_to_node(None) is None

    def test_unknown_kind(self):
        """Unknown binding kinds are rejected."""
        with pytest.raises(ValueError):
            binding_to_node({"type": "triple", "value": ""})


@pytest.mark.unit
class TestRemoteSparqlStore:
    """Tests for successful requests."""

    def test_requires_endpoint(self):
        """An endpoint URL is mandatory."""
        with pytest.raises(ValueError):
            RemoteSparqlStore("")

    def test_select(self):
        """SELECT results are parsed into rows of rdflib terms."""
        store, session = _store(create_mock_response(200, SELECT_RESULT))
        rows = store.select("SELECT * WHERE { ?s ?p ?o }")

        assert rows[0]["subject"] == URIRef("https://example.org/d1")
        assert rows[0]["modified"] == Literal("2023-06-15", datatype=XSD.date)
        assert rows[0]["label"] == Literal("Eins", lang="de")
        assert rows[1] == {"subject": URIRef("https://example.org/d2"), "modified": None, "label": None}

    def test_request_shape(self):
        """Queries are POSTed as form data with the JSON results Accept header."""
        store, session = _store(create_mock_response(200, SELECT_RESULT))
        store.select("SELECT * WHERE { ?s ?p ?o }")

        args, kwargs = session.post.call_args
        assert args[0] == ENDPOINT
        assert kwargs["data"] == {"query": "SELECT * WHERE { ?s ?p ?o }"}
        assert kwargs["headers"]["Accept"] == "application/sparql-results+json"
        assert kwargs["timeout"] == 5

    def test_construct(self):
        """CONSTRUCT responses are parsed as Turtle."""
        turtle = "<https://example.org/d1> <http://purl.org/dc/terms/title> \"One\" ."
        store, session = _store(create_mock_response(200, text=turtle))
        graph = store.construct("CONSTRUCT { ?s ?p ?o } WHERE { ?s ?p ?o }")
        assert len(graph) == 1
        assert session.post.call_args[1]["headers"]["Accept"] == "text/turtle"

    def test_store_ignores_version(self):
        """An endpoint serves every version."""
        store, _ = _store()
        assert store.store(Version.V1) is store

    def test_invalid_json(self):
        """Unparseable SELECT results raise SparqlEndpointError."""
        store, _ = _store(create_mock_response(200, text="<html>"))
        with pytest.raises(SparqlEndpointError, match="invalid JSON"):
            store.select("SELECT * WHERE { ?s ?p ?o }")

    def test_invalid_turtle(self):
        """Unparseable CONSTRUCT results raise SparqlEndpointError."""
        store, _ = _store(create_mock_response(200, text="this is not turtle"))
        with pytest.raises(SparqlEndpointError, match="invalid Turtle"):
            store.construct("CONSTRUCT { ?s ?p ?o } WHERE { ?s ?p ?o }")


@pytest.mark.resilience
class TestRemoteSparqlStoreRetries:
    """Tests for retry behaviour."""

    @pytest.mark.parametrize("status_code", [429, 503])
    def test_transient_status_is_retried(self, status_code):
        """429 and 503 are retried and the later success is returned."""
        store, session = _store(
            create_mock_response(status_code, headers={"Retry-After": "1"}),
            create_mock_response(200, SELECT_RESULT),
        )
        rows = store.select("SELECT * WHERE { ?s ?p ?o }")
        assert len(rows) == 2
        assert session.post.call_count == 2

    def test_timeout_is_retried(self):
        """Timeouts are retried."""
        store, session = _store(requests.exceptions.Timeout("slow"), create_mock_response(200, SELECT_RESULT))
        assert len(store.select("SELECT * WHERE { ?s ?p ?o }")) == 2
        assert session.post.call_count == 2

    def test_retries_exhausted(self):
        """The last transient error surfaces once attempts run out."""
        store, session = _store(*[create_mock_response(503) for _ in range(3)])
        with pytest.raises(SparqlEndpointError) as excinfo:
            store.select("SELECT * WHERE { ?s ?p ?o }")
        assert excinfo.value.status_code == 503
        assert session.post.call_count == 3

    def test_persistent_timeout(self):
        """Timeouts that never clear are reported as HTTP 408."""
        store, _ = _store(*[requests.exceptions.Timeout("slow") for _ in range(2)], max_retries=2)
        with pytest.raises(SparqlEndpointError) as excinfo:
            store.select("SELECT * WHERE { ?s ?p ?o }")
        assert excinfo.value.status_code == 408

    def test_connection_error(self):
        """Connection failures are reported as HTTP 503."""
        store, _ = _store(requests.exceptions.ConnectionError("refused"), max_retries=1)
        with pytest.raises(SparqlEndpointError) as excinfo:
            store.select("SELECT * WHERE { ?s ?p ?o }")
        assert excinfo.value.status_code == 503

    def test_client_error_is_not_retried(self):
        """A 400 raises immediately with the endpoint's message."""
        store, session = _store(create_mock_response(400, text="Parse error at line 1"))
        with pytest.raises(SparqlEndpointError, match="Parse error"):
            store.select("SELECT nonsense")
        assert session.post.call_count == 1

    def test_invalid_retry_count(self):
        """At least one attempt is required."""
        with pytest.raises(ValueError):
            RemoteSparqlStore(ENDPOINT, max_retries=0)
