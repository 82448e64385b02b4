"""
OAI-PMH 2.0 data provider over the exported dataset.
"""

from .errors import (
    BadArgumentError,
    BadResumptionTokenError,
    BadVerbError,
    CannotDisseminateFormatError,
    IdDoesNotExistError,
    NoRecordsMatchError,
    OaiPmhError,
)
from .record import CategoryInfo, OaiPmhRecord, format_datestamp
from .renderers import METADATA_FORMATS, MetadataFormat
from .service import OaiPmhService, parse_date_bound, parse_set_spec
from .token import ResumptionToken, decode_set_spec, encode_set_spec

__all__ = [
    "BadArgumentError",
    "BadResumptionTokenError",
    "BadVerbError",
    "CannotDisseminateFormatError",
    "CategoryInfo",
    "IdDoesNotExistError",
    "METADATA_FORMATS",
    "MetadataFormat",
    "NoRecordsMatchError",
    "OaiPmhError",
    "OaiPmhRecord",
    "OaiPmhService",
    "ResumptionToken",
    "decode_set_spec",
    "encode_set_spec",
    "format_datestamp",
    "parse_date_bound",
    "parse_set_spec",
]
