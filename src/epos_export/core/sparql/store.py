"""
Triple stores backing the OAI-PMH provider.

``GraphStore`` answers SPARQL queries from an in-process rdflib graph.
``SparqlService`` owns one such graph per vocabulary version, rebuilt from
the metadata export on ``refresh()`` and optionally on a background timer.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Protocol

from rdflib import Graph
from rdflib.term import Node

from ...constants import SparqlDefaults
from ...formats.rdf.namespaces import new_graph
from ...shared.models import Version


logger = logging.getLogger(__name__)

Row = Dict[str, Optional[Node]]
"""One SELECT solution: variable name -> bound node, None when unbound."""


class TripleStore(Protocol):
    """Executes SELECT and CONSTRUCT queries."""

    def select(self, query: str) -> List[Row]:
        ...

    def construct(self, query: str) -> Graph:
        ...


class StoreProvider(Protocol):
    """Hands out the triple store holding a vocabulary version's dataset."""

    def store(self, version: Version) -> TripleStore:
        ...


class GraphStore:
    """Triple store over an rdflib graph."""

    def __init__(self, graph: Graph):
        self.graph = graph

    def select(self, query: str) -> List[Row]:
        result = self.graph.query(query)
        names = [str(var) for var in result.vars or ()]
        return [dict(zip(names, row)) for row in result]

    def construct(self, query: str) -> Graph:
        result = self.graph.query(query)
        constructed = new_graph()
        for triple in result.graph or ():
            constructed.add(triple)
        return constructed

    def store(self, version: Version) -> "GraphStore":
        """A bare graph holds a single dataset whatever the version."""
        return self

    def __len__(self) -> int:
        return len(self.graph)


class DatasetExporter(Protocol):
    """Source of the serialized dataset (``MetadataExporter``)."""

    def export(self, entity_type: Any = None, fmt: Optional[str] = None, ids: Any = None,
               version: Any = None) -> str:
        ...


class SparqlService:
    """
    Versioned dataset snapshots for harvesting.

    Each refresh exports every entity as Turtle, parses it into a new graph
    and swaps the graph reference under a lock; readers keep the graph they
    already obtained. A failed build never replaces a working snapshot. When
    the very first build fails the service stays available with empty graphs,
    ``ready`` False and ``initialization_error`` set, and the next refresh
    tries again.

    Args:
        exporter: Produces the dataset serialization.
        versions: Vocabulary versions to materialize.
    """

    def __init__(self, exporter: DatasetExporter, versions: Iterable[Version] = (Version.V1,)):
        self.exporter = exporter
        self.versions = tuple(versions)
        self._lock = threading.Lock()
        self._graphs: Dict[Version, Graph] = {version: new_graph() for version in self.versions}
        self.ready = False
        self.initialization_error: Optional[str] = None
        self.last_error: Optional[str] = None
        self.last_refresh: Optional[datetime] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def initialize(self) -> bool:
        """Build the first snapshot; returns readiness."""
        if not self.refresh():
            logger.warning(f"Dataset not available, starting with an empty graph: {self.initialization_error}")
        return self.ready

    def refresh(self) -> bool:
        """
        Rebuild every version's graph.

        Returns:
            True when the new snapshot was swapped in.
        """
        started = datetime.now(timezone.utc)
        try:
            graphs = {version: self._build(version) for version in self.versions}
        except Exception as e:
            logger.error(f"Dataset refresh failed: {e}")
            with self._lock:
                self.last_error = str(e)
                if not self.ready:
                    self.initialization_error = str(e)
            return False

        with self._lock:
            self._graphs = graphs
            self.ready = True
            self.initialization_error = None
            self.last_error = None
            self.last_refresh = started
        elapsed = (datetime.now(timezone.utc) - started).total_seconds()
        sizes = ", ".join(f"{v.value}: {len(g)} triples" for v, g in graphs.items())
        logger.info(f"Dataset refreshed in {elapsed:.1f}s ({sizes})")
        return True

    def _build(self, version: Version) -> Graph:
        content = self.exporter.export(None, "turtle", None, version)
        graph = new_graph()
        if content:
            graph.parse(data=content, format="turtle")
        return graph

    def graph(self, version: Version) -> Graph:
        """Current snapshot of ``version``."""
        with self._lock:
            if version not in self._graphs:
                raise ValueError(f"Version {version.value} is not materialized")
            return self._graphs[version]

    def store(self, version: Version) -> GraphStore:
        return GraphStore(self.graph(version))

    def status(self) -> Dict[str, Any]:
        """Readiness information for health checks."""
        with self._lock:
            return {
                "ready": self.ready,
                "initialization_error": self.initialization_error,
                "last_error": self.last_error,
                "last_refresh": self.last_refresh.isoformat() if self.last_refresh else None,
                "triples": {version.value: len(graph) for version, graph in self._graphs.items()},
            }

    # ------------------------------------------------------------------
    # Periodic refresh
    # ------------------------------------------------------------------

    def start_periodic_refresh(self, interval: float = SparqlDefaults.REFRESH_INTERVAL_SECONDS) -> None:
        """Refresh every ``interval`` seconds on a daemon thread until ``stop()``."""
        if self._thread is not None and self._thread.is_alive():
            logger.debug("Periodic refresh already running")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._refresh_loop,
            args=(interval,),
            name="sparql-refresh",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Scheduled dataset refresh every {interval}s")

    def _refresh_loop(self, interval: float) -> None:
        while not self._stop_event.wait(interval):
            self.refresh()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
