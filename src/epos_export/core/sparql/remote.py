"""
Remote SPARQL endpoint client.

Queries are POSTed as form data (SPARQL 1.1 Protocol). Timeouts, connection
errors, HTTP 429 and HTTP 503 are retried with exponential backoff; every
other failure raises ``SparqlEndpointError``.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import requests
from rdflib import BNode, Graph, Literal, URIRef
from rdflib.term import Node
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ...constants import SparqlDefaults
from ...formats.rdf.namespaces import new_graph
from ...shared.models import Version
from .store import Row


logger = logging.getLogger(__name__)


class SparqlEndpointError(Exception):
    """Exception raised for SPARQL endpoint errors."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"SPARQL endpoint error (HTTP {status_code}): {message}")


class TransientEndpointError(SparqlEndpointError):
    """Endpoint errors (429, 503) that should be retried."""

    def __init__(self, status_code: int, message: str = "", retry_after: int = 5):
        self.retry_after = retry_after
        super().__init__(status_code, message)


def _is_transient_error(exception: BaseException) -> bool:
    """Check if exception is a transient error that should be retried."""
    if isinstance(exception, TransientEndpointError):
        return True
    if isinstance(exception, (requests.exceptions.Timeout, requests.exceptions.ConnectionError)):
        return True
    return False


def _retry_after(response: requests.Response, default: int) -> int:
    try:
        return int(response.headers.get("Retry-After", default))
    except (TypeError, ValueError):
        return default


def binding_to_node(binding: Optional[Dict[str, Any]]) -> Optional[Node]:
    """Convert one SPARQL JSON results binding to an rdflib term."""
    if binding is None:
        return None
    kind = binding.get("type")
    value = binding.get("value", "")
    if kind == "uri":
        return URIRef(value)
    if kind == "bnode":
        return BNode(value)
    if kind in ("literal", "typed-literal"):
        datatype = binding.get("datatype")
        if datatype:
            return Literal(value, datatype=URIRef(datatype))
        return Literal(value, lang=binding.get("xml:lang"))
    raise ValueError(f"Unknown binding type: {kind}")


class RemoteSparqlStore:
    """
    Triple store backed by an HTTP SPARQL endpoint.

    Args:
        endpoint: Query endpoint URL.
        timeout: Request timeout in seconds.
        max_retries: Attempts for transient failures.
        min_wait: Minimum backoff between attempts, in seconds.
        max_wait: Maximum backoff between attempts, in seconds.
        session: Optional ``requests.Session`` to reuse connections.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: int = SparqlDefaults.DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = SparqlDefaults.MAX_RETRY_ATTEMPTS,
        min_wait: float = SparqlDefaults.RETRY_MIN_WAIT_SECONDS,
        max_wait: float = SparqlDefaults.RETRY_MAX_WAIT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        if not endpoint:
            raise ValueError("endpoint is required")
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {max_retries}")
        self.endpoint = endpoint
        self.timeout = timeout
        self.max_retries = max_retries
        self.min_wait = min_wait
        self.max_wait = max_wait
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # TripleStore
    # ------------------------------------------------------------------

    def select(self, query: str) -> List[Row]:
        response = self._query(query, SparqlDefaults.SELECT_ACCEPT, "SPARQL SELECT")
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise SparqlEndpointError(response.status_code, f"Endpoint returned invalid JSON: {e}")

        names = data.get("head", {}).get("vars", [])
        rows = []
        for bindings in data.get("results", {}).get("bindings", []):
            rows.append({name: binding_to_node(bindings.get(name)) for name in names})
        logger.debug(f"SPARQL SELECT returned {len(rows)} rows")
        return rows

    def construct(self, query: str) -> Graph:
        response = self._query(query, SparqlDefaults.CONSTRUCT_ACCEPT, "SPARQL CONSTRUCT")
        graph = new_graph()
        if response.text:
            try:
                graph.parse(data=response.text, format="turtle")
            except Exception as e:
                raise SparqlEndpointError(response.status_code, f"Endpoint returned invalid Turtle: {e}")
        return graph

    def store(self, version: Version) -> "RemoteSparqlStore":
        """An endpoint serves a single dataset whatever the version."""
        return self

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=self.min_wait, max=self.max_wait),
            retry=retry_if_exception(_is_transient_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def _query(self, query: str, accept: str, operation_name: str) -> requests.Response:
        try:
            return self._retrying()(self._post, query, accept, operation_name)
        except requests.exceptions.Timeout:
            logger.error(f"{operation_name}: Request timeout after {self.timeout}s")
            raise SparqlEndpointError(408, f"{operation_name} timed out after {self.timeout} seconds")
        except requests.exceptions.ConnectionError as e:
            logger.error(f"{operation_name}: Connection error: {e}")
            raise SparqlEndpointError(503, f"{operation_name} failed to connect to {self.endpoint}: {e}")
        except requests.exceptions.RequestException as e:
            logger.error(f"{operation_name}: Request error: {e}")
            raise SparqlEndpointError(500, f"{operation_name} request failed: {e}")

    def _post(self, query: str, accept: str, operation_name: str) -> requests.Response:
        logger.debug(f"{operation_name}: POST {self.endpoint}")
        response = self.session.post(
            self.endpoint,
            data={"query": query},
            headers={"Accept": accept},
            timeout=self.timeout,
        )
        return self._handle_response(response)

    def _handle_response(self, response: requests.Response) -> requests.Response:
        """Return successful responses; raise on errors."""
        if response.status_code == 200:
            return response

        if response.status_code == 429:
            retry_after = _retry_after(response, 30)
            logger.warning(f"Rate limited (429). Retry after {retry_after}s")
            raise TransientEndpointError(429, "Rate limit exceeded", retry_after)

        if response.status_code == 503:
            retry_after = _retry_after(response, 10)
            logger.warning(f"Service unavailable (503). Retry after {retry_after}s")
            raise TransientEndpointError(503, "Service temporarily unavailable", retry_after)

        raise SparqlEndpointError(response.status_code, response.text[:500] or response.reason or "")
