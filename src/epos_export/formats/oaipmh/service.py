"""
OAI-PMH 2.0 request handling.

``OaiPmhService.handle_request`` validates the verb and its arguments, runs
the SPARQL templates of ``queries`` against the configured triple store and
renders the XML response. Protocol errors are reported as ``<error>``
responses, never raised to the caller.
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from rdflib import Literal

from ...config import OaiPmhConfig
from ...constants import OaiPmhDefaults
from ...core.sparql.store import Row, StoreProvider, TripleStore
from ...shared.models import Version
from . import queries
from .errors import (
    BadArgumentError,
    BadResumptionTokenError,
    BadVerbError,
    CannotDisseminateFormatError,
    IdDoesNotExistError,
    NoRecordsMatchError,
    OaiPmhError,
)
from .record import CategoryInfo, OaiPmhRecord, extract_datestamp, local_name
from .renderers import (
    METADATA_FORMATS,
    error_document,
    oai,
    render_header,
    render_identify,
    render_metadata_formats,
    render_record,
    render_resumption_token,
    render_sets,
    response_root,
    to_xml,
)
from .token import ResumptionToken, decode_set_spec, encode_set_spec


logger = logging.getLogger(__name__)

TYPE_SET_PREFIX = "type:"
CATEGORY_SET_PREFIX = "category:"

_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SECOND = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


@dataclass
class OaiPmhRequest:
    """Arguments of one request, after resumption token expansion."""
    verb: str
    identifier: Optional[str] = None
    metadata_prefix: Optional[str] = None
    set_spec: Optional[str] = None
    from_date: Optional[str] = None
    until_date: Optional[str] = None
    resumption_token: Optional[str] = None

    def arguments(self) -> Dict[str, Optional[str]]:
        """Arguments echoed on the response's ``request`` element."""
        return {
            'identifier': self.identifier,
            'metadataPrefix': self.metadata_prefix,
            'set': self.set_spec,
            'from': self.from_date,
            'until': self.until_date,
            'resumptionToken': self.resumption_token,
        }


@dataclass(frozen=True)
class SetFilter:
    """Query restriction derived from a setSpec."""
    type_filter: Optional[str] = None
    category_uri: Optional[str] = None


def parse_set_spec(set_spec: Optional[str]) -> SetFilter:
    """
    Translate a setSpec into a type or category restriction.

    ``type:Dataset`` and ``type:dcat:Dataset`` select a harvestable type;
    ``category:<base64url uri>`` selects resources themed with that category.

    Raises:
        NoRecordsMatchError: If the set is unknown or malformed.
    """
    if not set_spec:
        return SetFilter()

    if set_spec.startswith(TYPE_SET_PREFIX):
        name = set_spec[len(TYPE_SET_PREFIX):]
        if ":" in name:
            prefix = name.split(":", 1)[0]
            if prefix in queries.TYPE_PREFIXES and name in queries.HARVESTABLE_TYPES:
                return SetFilter(type_filter=name)
        else:
            for prefixed in queries.HARVESTABLE_TYPES:
                if prefixed.split(":", 1)[1] == name:
                    return SetFilter(type_filter=prefixed)
        logger.debug(f"Unknown type set: {set_spec}")
        raise NoRecordsMatchError("No records match the request criteria")

    if set_spec.startswith(CATEGORY_SET_PREFIX):
        try:
            uri = decode_set_spec(set_spec[len(CATEGORY_SET_PREFIX):])
        except ValueError:
            raise NoRecordsMatchError("No records match the request criteria")
        if not queries.is_safe_iri(uri):
            raise NoRecordsMatchError("No records match the request criteria")
        return SetFilter(category_uri=uri)

    raise NoRecordsMatchError("No records match the request criteria")


def parse_date_bound(value: Optional[str], argument: str, end_of_day: bool = False) -> Optional[str]:
    """
    Normalize a ``from``/``until`` argument to ``YYYY-MM-DDThh:mm:ss``.

    Day granularity covers the whole day: midnight for ``from``, the last
    second for ``until``.

    Raises:
        BadArgumentError: If the value is not ``YYYY-MM-DD`` or ``YYYY-MM-DDThh:mm:ssZ``.
    """
    if value is None or value == "":
        return None
    if _DAY.match(value):
        stamp = value + ("T23:59:59" if end_of_day else "T00:00:00")
    elif _SECOND.match(value):
        stamp = value[:19]
    else:
        raise BadArgumentError(f"Illegal date format for '{argument}': {value}")
    try:
        datetime.strptime(stamp, "%Y-%m-%dT%H:%M:%S")
    except ValueError:
        raise BadArgumentError(f"Illegal date for '{argument}': {value}")
    return stamp


def _text(node) -> Optional[str]:
    return str(node) if node is not None else None


class OaiPmhService:
    """
    OAI-PMH 2.0 data provider over an EPOS-DCAT-AP dataset.

    Args:
        stores: Source of the triple store holding the harvested dataset.
        config: Repository settings; defaults when None.
    """

    def __init__(self, stores: StoreProvider, config: Optional[OaiPmhConfig] = None):
        self.stores = stores
        self.config = config or OaiPmhConfig()
        self.version = self._resolve_version(self.config.epos_version)
        self._handlers: Dict[str, Callable[[ET.Element, OaiPmhRequest, str], None]] = {
            'Identify': self._identify,
            'ListMetadataFormats': self._list_metadata_formats,
            'ListSets': self._list_sets,
            'ListIdentifiers': self._list_identifiers,
            'ListRecords': self._list_records,
            'GetRecord': self._get_record,
        }

    @staticmethod
    def _resolve_version(value: str) -> Version:
        try:
            version = Version.parse(value, default=Version.V1)
        except ValueError:
            logger.warning(f"Invalid dataset version '{value}', using V1")
            return Version.V1
        if version != Version.V1:
            logger.warning(f"Dataset version {version.value} is not harvestable, using V1")
            return Version.V1
        return version

    @property
    def store(self) -> TripleStore:
        return self.stores.store(self.version)

    def base_url(self, request_url: Optional[str] = None) -> str:
        """Configured base URL, else the request URL without its query string."""
        if self.config.base_url:
            return self.config.base_url
        if request_url:
            return request_url.split("?", 1)[0]
        return ""

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def handle_request(
        self,
        verb: Optional[str] = None,
        identifier: Optional[str] = None,
        metadata_prefix: Optional[str] = None,
        set_spec: Optional[str] = None,
        from_date: Optional[str] = None,
        until_date: Optional[str] = None,
        resumption_token: Optional[str] = None,
        request_url: Optional[str] = None,
    ) -> str:
        """
        Handle one OAI-PMH request.

        Returns:
            The XML response document; protocol errors are ``<error>`` responses.
        """
        base_url = self.base_url(request_url)
        try:
            if not verb:
                raise BadVerbError("Verb argument is required")
            handler = self._handlers.get(verb)
            if handler is None:
                raise BadVerbError(f"Illegal verb: {verb}")

            request = OaiPmhRequest(
                verb=verb,
                identifier=identifier,
                metadata_prefix=metadata_prefix,
                set_spec=set_spec,
                from_date=from_date,
                until_date=until_date,
                resumption_token=resumption_token,
            )
            root = response_root(base_url, verb, request.arguments())
            handler(root, request, base_url)
            return to_xml(root)
        except OaiPmhError as e:
            logger.info(f"OAI-PMH {verb or '-'}: {e}")
            return to_xml(error_document(base_url, e.code, e.message))
        except Exception as e:
            logger.error(f"OAI-PMH {verb} failed: {e}", exc_info=True)
            return to_xml(error_document(base_url, BadArgumentError.code, f"Internal error: {e}"))

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def _identify(self, root: ET.Element, request: OaiPmhRequest, base_url: str) -> None:
        render_identify(
            root,
            repository_name=self.config.repository_name,
            base_url=base_url,
            protocol_version=OaiPmhDefaults.PROTOCOL_VERSION,
            admin_email=self.config.admin_email,
            earliest_datestamp=OaiPmhDefaults.EARLIEST_DATESTAMP,
            deleted_record=OaiPmhDefaults.DELETED_RECORD,
            granularity=OaiPmhDefaults.GRANULARITY,
            repository_identifier=OaiPmhDefaults.REPOSITORY_IDENTIFIER,
            sample_identifier=OaiPmhDefaults.SAMPLE_IDENTIFIER,
        )

    def _list_metadata_formats(self, root: ET.Element, request: OaiPmhRequest, base_url: str) -> None:
        if request.identifier:
            self._find_record(request.identifier)
        render_metadata_formats(root)

    def _list_sets(self, root: ET.Element, request: OaiPmhRequest, base_url: str) -> None:
        store = self.store
        type_sets: List[Tuple[str, str, int]] = []
        for row in store.select(queries.list_entity_types()):
            type_uri = _text(row.get("type"))
            if not type_uri:
                continue
            count = row.get("count")
            type_sets.append((
                TYPE_SET_PREFIX + local_name(type_uri),
                queries.compact_type_uri(type_uri),
                int(count.toPython()) if isinstance(count, Literal) else 0,
            ))

        category_sets: Dict[str, Tuple[str, CategoryInfo]] = {}
        for row in store.select(queries.list_categories()):
            uri = _text(row.get("category"))
            if not uri or uri in category_sets:
                continue
            category_sets[uri] = (
                CATEGORY_SET_PREFIX + encode_set_spec(uri),
                CategoryInfo(uri=uri, label=_text(row.get("label")), description=_text(row.get("description"))),
            )
        render_sets(root, type_sets, category_sets.values())

    def _list_identifiers(self, root: ET.Element, request: OaiPmhRequest, base_url: str) -> None:
        container = oai(root, "ListIdentifiers")
        records, token = self._page(request)
        for record in records:
            render_header(container, record)
        if token is not None:
            render_resumption_token(container, *token)

    def _list_records(self, root: ET.Element, request: OaiPmhRequest, base_url: str) -> None:
        container = oai(root, "ListRecords")
        records, token = self._page(request)
        for record in records:
            render_record(container, self._with_metadata(record), request.metadata_prefix)
        if token is not None:
            render_resumption_token(container, *token)

    def _get_record(self, root: ET.Element, request: OaiPmhRequest, base_url: str) -> None:
        if not request.identifier:
            raise BadArgumentError("identifier is a required argument")
        self._require_format(request.metadata_prefix)
        record = self._find_record(request.identifier)
        container = oai(root, "GetRecord")
        render_record(container, self._with_metadata(record), request.metadata_prefix)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_format(metadata_prefix: Optional[str]) -> None:
        if not metadata_prefix:
            raise BadArgumentError("metadataPrefix is a required argument")
        if metadata_prefix not in METADATA_FORMATS:
            raise CannotDisseminateFormatError(f"Metadata format '{metadata_prefix}' is not supported")

    def _page(self, request: OaiPmhRequest) -> Tuple[List[OaiPmhRecord], Optional[Tuple[Optional[str], int, int]]]:
        """
        Records of the requested page and the resumption token to emit.

        Token arguments fill only the arguments missing from the request.
        The second element is (token, completeListSize, cursor), or None
        when no token element is due.
        """
        offset = 0
        via_token = bool(request.resumption_token)
        if via_token:
            token = ResumptionToken.decode(request.resumption_token)
            offset = token.offset
            request.metadata_prefix = request.metadata_prefix or token.metadata_prefix
            request.set_spec = request.set_spec or token.set_spec
            request.from_date = request.from_date or token.from_date
            request.until_date = request.until_date or token.until_date

        self._require_format(request.metadata_prefix)
        from_stamp = parse_date_bound(request.from_date, "from")
        until_stamp = parse_date_bound(request.until_date, "until", end_of_day=True)
        set_filter = parse_set_spec(request.set_spec)

        store = self.store
        total = self._count(store, set_filter, from_stamp, until_stamp)
        if total == 0:
            raise NoRecordsMatchError("No records match the request criteria")
        if offset >= total:
            raise BadResumptionTokenError("Invalid resumption token")

        page_size = self.config.page_size
        rows = store.select(queries.list_records(
            set_filter.type_filter, set_filter.category_uri, from_stamp, until_stamp, offset, page_size,
        ))
        records = [self._record(store, row) for row in rows if row.get("subject") is not None]
        logger.debug(f"{request.verb}: {len(records)} records at offset {offset} of {total}")

        if offset + len(records) < total:
            next_token = ResumptionToken(
                offset=offset + page_size,
                metadata_prefix=request.metadata_prefix,
                set_spec=request.set_spec,
                from_date=request.from_date,
                until_date=request.until_date,
            )
            return records, (next_token.encode(), total, offset)
        if via_token:
            return records, (None, total, offset)
        return records, None

    @staticmethod
    def _count(store: TripleStore, set_filter: SetFilter, from_stamp: Optional[str],
               until_stamp: Optional[str]) -> int:
        rows = store.select(queries.count_records(
            set_filter.type_filter, set_filter.category_uri, from_stamp, until_stamp,
        ))
        if not rows:
            return 0
        count = rows[0].get("count")
        return int(count.toPython()) if isinstance(count, Literal) else 0

    def _record(self, store: TripleStore, row: Row) -> OaiPmhRecord:
        identifier = str(row["subject"])
        rdf_type = _text(row.get("recordType") or row.get("type"))
        return OaiPmhRecord(
            identifier=identifier,
            datestamp=extract_datestamp(row),
            set_specs=self._set_specs(store, identifier, rdf_type),
            rdf_type=rdf_type,
        )

    @staticmethod
    def _set_specs(store: TripleStore, identifier: str, rdf_type: Optional[str]) -> List[str]:
        specs = []
        if rdf_type:
            specs.append(TYPE_SET_PREFIX + local_name(rdf_type))
        for row in store.select(queries.get_record_categories(identifier)):
            category = _text(row.get("category"))
            if category:
                spec = CATEGORY_SET_PREFIX + encode_set_spec(category)
                if spec not in specs:
                    specs.append(spec)
        return specs

    def _find_record(self, identifier: str) -> OaiPmhRecord:
        """
        Header data of one record.

        Raises:
            IdDoesNotExistError: If the identifier is not a harvestable resource.
        """
        if not queries.is_safe_iri(identifier):
            raise IdDoesNotExistError(f"No matching identifier: {identifier}")
        store = self.store
        rows = store.select(queries.get_record(identifier))
        if not rows:
            raise IdDoesNotExistError(f"No matching identifier: {identifier}")
        row = dict(rows[0])
        row["subject"] = identifier
        return self._record(store, row)

    def _with_metadata(self, record: OaiPmhRecord) -> OaiPmhRecord:
        return record.with_metadata(self.store.construct(queries.construct_record(record.identifier)))
