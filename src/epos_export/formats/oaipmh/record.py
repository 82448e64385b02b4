"""
Harvestable record and datestamp helpers.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping, Optional, Tuple

from rdflib import Graph, Literal
from rdflib.term import Node

from ...constants import OaiPmhDefaults


OAI_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

DATE_VARIABLES = ("modified", "issued", "created", "schemaModified", "schemaPublished")
"""Result variables holding record dates, in datestamp priority order."""


def local_name(uri: Optional[str]) -> str:
    """Part of ``uri`` after the last ``#`` or ``/``."""
    if not uri:
        return ""
    index = max(uri.rfind("#"), uri.rfind("/"))
    return uri[index + 1:] if index >= 0 else uri


def current_timestamp() -> str:
    return datetime.now(timezone.utc).strftime(OAI_DATE_FORMAT)


def format_datestamp(value: Optional[str]) -> str:
    """
    Convert an ``xsd:date`` or ``xsd:dateTime`` lexical form to OAI granularity.

    Date-times keep their first 19 characters (zone information is dropped);
    dates get midnight. Unparseable values fall back to the current time.
    """
    if not value:
        return current_timestamp()
    if "T" in value:
        try:
            parsed = datetime.strptime(value[:19], "%Y-%m-%dT%H:%M:%S")
        except ValueError:
            return current_timestamp()
        return parsed.strftime(OAI_DATE_FORMAT)
    return f"{value}T00:00:00Z"


def extract_datestamp(row: Mapping[str, Optional[Node]]) -> str:
    """Datestamp of a query result row: the first bound date literal in priority order."""
    for name in DATE_VARIABLES:
        node = row.get(name)
        if isinstance(node, Literal):
            return format_datestamp(str(node))
    return current_timestamp()


@dataclass(frozen=True)
class OaiPmhRecord:
    """
    One harvestable resource.

    Attributes:
        identifier: Resource URI, also the OAI identifier.
        datestamp: Last change in ``YYYY-MM-DDThh:mm:ssZ`` form.
        set_specs: Sets the record belongs to.
        rdf_type: Full URI of the record's harvestable type.
        metadata: The record's subgraph, when fetched.
    """
    identifier: str
    datestamp: str
    set_specs: Tuple[str, ...] = ()
    rdf_type: Optional[str] = None
    metadata: Optional[Graph] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if not self.identifier or not self.identifier.strip():
            raise ValueError("Record identifier is required")
        if not self.datestamp or not self.datestamp.strip():
            raise ValueError("Record datestamp is required")
        object.__setattr__(self, "set_specs", tuple(self.set_specs))

    @property
    def type_local_name(self) -> str:
        if not self.rdf_type:
            return OaiPmhDefaults.DEFAULT_TYPE_LOCAL_NAME
        name = local_name(self.rdf_type)
        return name or self.rdf_type

    def with_metadata(self, metadata: Optional[Graph]) -> "OaiPmhRecord":
        return OaiPmhRecord(
            identifier=self.identifier,
            datestamp=self.datestamp,
            set_specs=self.set_specs,
            rdf_type=self.rdf_type,
            metadata=metadata,
        )


@dataclass(frozen=True)
class CategoryInfo:
    """Category or concept scheme advertised as a set."""
    uri: str
    label: Optional[str] = None
    description: Optional[str] = None
