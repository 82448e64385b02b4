"""
Wire encodings of the harvesting protocol.

Resumption tokens are the pipe-joined fields ``offset|prefix|set|from|until``
(absent fields as empty strings), UTF-8 encoded and base64url-encoded without
padding. Category set specs carry the category URI in the same base64url
form so that any URI fits in a single query-string value.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional

from ...constants import OaiPmhDefaults
from .errors import BadResumptionTokenError


logger = logging.getLogger(__name__)


def b64url_encode(text: str) -> str:
    """base64url without padding."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def b64url_decode(value: str) -> str:
    """
    Inverse of ``b64url_encode``; padding is optional.

    Raises:
        ValueError: If the value is not base64url or not UTF-8 once decoded.
    """
    padded = value + "=" * (-len(value) % 4)
    try:
        raw = base64.b64decode(padded, altchars=b"-_", validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid base64url value: {e}") from e


def encode_set_spec(uri: str) -> str:
    return b64url_encode(uri)


def decode_set_spec(value: str) -> str:
    return b64url_decode(value)


@dataclass(frozen=True)
class ResumptionToken:
    """
    Pagination state of a ListIdentifiers/ListRecords sequence.

    Attributes:
        offset: Index of the first record of the next page.
        metadata_prefix: Echoed metadataPrefix.
        set_spec: Echoed set argument.
        from_date: Echoed from argument.
        until_date: Echoed until argument.
    """
    offset: int
    metadata_prefix: Optional[str] = None
    set_spec: Optional[str] = None
    from_date: Optional[str] = None
    until_date: Optional[str] = None

    def encode(self) -> str:
        fields = (
            str(self.offset),
            self.metadata_prefix or "",
            self.set_spec or "",
            self.from_date or "",
            self.until_date or "",
        )
        return b64url_encode(OaiPmhDefaults.TOKEN_SEPARATOR.join(fields))

    @classmethod
    def decode(cls, token: str) -> "ResumptionToken":
        """
        Parse a token produced by ``encode``.

        Raises:
            BadResumptionTokenError: If the token is not base64url, has fewer
                than five fields or a non-integer or negative offset.
        """
        try:
            decoded = b64url_decode(token.strip())
        except ValueError as e:
            logger.warning(f"Failed to decode resumption token: {e}")
            raise BadResumptionTokenError("Invalid resumption token") from e

        parts = decoded.split(OaiPmhDefaults.TOKEN_SEPARATOR)
        if len(parts) < OaiPmhDefaults.TOKEN_FIELD_COUNT:
            logger.warning(f"Resumption token has {len(parts)} fields, expected {OaiPmhDefaults.TOKEN_FIELD_COUNT}")
            raise BadResumptionTokenError("Invalid resumption token")
        try:
            offset = int(parts[0])
        except ValueError as e:
            logger.warning(f"Resumption token offset is not an integer: {parts[0]!r}")
            raise BadResumptionTokenError("Invalid resumption token") from e
        if offset < 0:
            raise BadResumptionTokenError("Invalid resumption token")

        return cls(
            offset=offset,
            metadata_prefix=parts[1] or None,
            set_spec=parts[2] or None,
            from_date=parts[3] or None,
            until_date=parts[4] or None,
        )
