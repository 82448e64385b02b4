"""
Centralized configuration constants for the EPOS metadata exporter.

This module provides a single source of truth for all configuration constants,
default values, and limits used throughout the application.
"""

from enum import IntEnum
from typing import Final

# ============================================================================
# Exit Codes
# ============================================================================

class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Following Unix conventions:
    - 0: Success
    - 1: General error
    - 2: Validation/syntax error
    - 3+: Specific error categories
    """
    SUCCESS = 0
    ERROR = 1
    VALIDATION_ERROR = 2
    CONFIG_ERROR = 3
    ENDPOINT_ERROR = 4
    FILE_NOT_FOUND = 5
    NO_CONTENT = 6


# ============================================================================
# Export Limits
# ============================================================================

class ExportLimits:
    """Traversal limits applied when collecting linked entities."""

    MAX_DEPTH: Final[int] = 20
    """Maximum number of BFS levels followed from the root entities."""

    MAX_ENTITIES: Final[int] = 1000
    """Maximum number of entities collected for a single export."""


class ExportDefaults:
    """Defaults of the export operation."""

    DEFAULT_FORMAT: Final[str] = "turtle"
    """Serialization used when no format is requested."""

    SUPPORTED_FORMATS: Final[tuple[str, ...]] = ("turtle", "json-ld")
    """Formats accepted by the exporter (case-insensitive)."""

    DEFAULT_VERSION: Final[str] = "V3"
    """Vocabulary version used when the caller does not choose one."""

    KEYWORD_SEPARATOR: Final[str] = ","


# ============================================================================
# OAI-PMH
# ============================================================================

class OaiPmhDefaults:
    """OAI-PMH repository defaults."""

    REPOSITORY_NAME: Final[str] = "EPOS Metadata Repository"
    ADMIN_EMAIL: Final[str] = "info@epos-eu.org"
    PAGE_SIZE: Final[int] = 100
    """Records per ListIdentifiers/ListRecords page."""

    EPOS_VERSION: Final[str] = "V1"
    """Vocabulary version of the harvested dataset."""

    PROTOCOL_VERSION: Final[str] = "2.0"
    EARLIEST_DATESTAMP: Final[str] = "2020-01-01T00:00:00Z"
    GRANULARITY: Final[str] = "YYYY-MM-DDThh:mm:ssZ"
    DELETED_RECORD: Final[str] = "no"

    REPOSITORY_IDENTIFIER: Final[str] = "epos-eu.org"
    SAMPLE_IDENTIFIER: Final[str] = "https://www.epos-eu.org/epos-dcat-ap/Dataset/001"

    TOKEN_SEPARATOR: Final[str] = "|"
    TOKEN_FIELD_COUNT: Final[int] = 5
    """offset, metadataPrefix, set, from, until."""

    DEFAULT_TYPE_LOCAL_NAME: Final[str] = "Resource"


# ============================================================================
# SPARQL
# ============================================================================

class SparqlDefaults:
    """Settings of the dataset snapshot and remote endpoint client."""

    REFRESH_INTERVAL_SECONDS: Final[int] = 3600
    """Period of the full dataset rebuild."""

    DEFAULT_TIMEOUT_SECONDS: Final[int] = 30
    """Default HTTP timeout for remote SPARQL endpoints."""

    MAX_RETRY_ATTEMPTS: Final[int] = 3
    """Attempts made for transient endpoint failures."""

    RETRY_MIN_WAIT_SECONDS: Final[int] = 1
    RETRY_MAX_WAIT_SECONDS: Final[int] = 10

    SELECT_ACCEPT: Final[str] = "application/sparql-results+json"
    CONSTRUCT_ACCEPT: Final[str] = "text/turtle"


# ============================================================================
# Logging
# ============================================================================

class LoggingConfig:
    """Logging configuration."""

    DEFAULT_LOG_LEVEL: Final[str] = "INFO"
    """Default logging level."""

    LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    """Default log format string."""

    DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
    """Default date format for logs."""

    DEFAULT_FORMAT_STYLE: Final[str] = "text"
    """Human-readable formatter style."""

    JSON_DATE_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S.%fZ"
    """ISO-8601 timestamp format for structured logs."""

    SUPPORTED_FORMATS: Final[tuple[str, ...]] = ("text", "json")
    """Supported formatter styles."""

    DEFAULT_LOG_FILENAME: Final[str] = "epos_export.log"

    MAX_LOG_FILE_MB: Final[int] = 10
    """Maximum log file size before rotation (MB)."""

    LOG_BACKUP_COUNT: Final[int] = 5
    """Number of backup log files to keep."""

    ROTATION_ENABLED: Final[bool] = True
    """Enable log rotation by default when a file handler is configured."""
