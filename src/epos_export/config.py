"""
Application configuration.

Configuration is read from a JSON file with one block per concern::

    {
        "export": {"entities_file": "entities.json", "default_version": "V3"},
        "oaipmh": {"base_url": "https://example.org/oai", "page_size": 100},
        "sparql": {"endpoint": null, "refresh_interval": 3600},
        "logging": {"level": "INFO", "file": "epos_export.log"}
    }

Every block and key is optional; defaults come from ``constants``.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .constants import ExportDefaults, ExportLimits, OaiPmhDefaults, SparqlDefaults


logger = logging.getLogger(__name__)


@dataclass
class ExportConfig:
    """Settings of the metadata export."""
    entities_file: Optional[str] = None
    default_format: str = ExportDefaults.DEFAULT_FORMAT
    default_version: str = ExportDefaults.DEFAULT_VERSION
    max_depth: int = ExportLimits.MAX_DEPTH
    max_entities: int = ExportLimits.MAX_ENTITIES

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ExportConfig':
        return cls(
            entities_file=config_dict.get('entities_file'),
            default_format=config_dict.get('default_format', ExportDefaults.DEFAULT_FORMAT),
            default_version=config_dict.get('default_version', ExportDefaults.DEFAULT_VERSION),
            max_depth=int(config_dict.get('max_depth', ExportLimits.MAX_DEPTH)),
            max_entities=int(config_dict.get('max_entities', ExportLimits.MAX_ENTITIES)),
        )


@dataclass
class OaiPmhConfig:
    """Settings of the OAI-PMH provider."""
    repository_name: str = OaiPmhDefaults.REPOSITORY_NAME
    admin_email: str = OaiPmhDefaults.ADMIN_EMAIL
    base_url: str = ""
    page_size: int = OaiPmhDefaults.PAGE_SIZE
    epos_version: str = OaiPmhDefaults.EPOS_VERSION

    def __post_init__(self):
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'OaiPmhConfig':
        return cls(
            repository_name=config_dict.get('repository_name', OaiPmhDefaults.REPOSITORY_NAME),
            admin_email=config_dict.get('admin_email', OaiPmhDefaults.ADMIN_EMAIL),
            base_url=config_dict.get('base_url') or "",
            page_size=int(config_dict.get('page_size', OaiPmhDefaults.PAGE_SIZE)),
            epos_version=config_dict.get('epos_version', OaiPmhDefaults.EPOS_VERSION),
        )


@dataclass
class SparqlConfig:
    """
    Settings of the triple store behind the OAI-PMH provider.

    Without an ``endpoint`` the provider queries an in-process snapshot built
    from the export; with one it queries that SPARQL endpoint over HTTP.
    """
    endpoint: Optional[str] = None
    timeout: int = SparqlDefaults.DEFAULT_TIMEOUT_SECONDS
    max_retries: int = SparqlDefaults.MAX_RETRY_ATTEMPTS
    refresh_interval: int = SparqlDefaults.REFRESH_INTERVAL_SECONDS

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SparqlConfig':
        return cls(
            endpoint=config_dict.get('endpoint') or None,
            timeout=int(config_dict.get('timeout', SparqlDefaults.DEFAULT_TIMEOUT_SECONDS)),
            max_retries=int(config_dict.get('max_retries', SparqlDefaults.MAX_RETRY_ATTEMPTS)),
            refresh_interval=int(config_dict.get('refresh_interval', SparqlDefaults.REFRESH_INTERVAL_SECONDS)),
        )


@dataclass
class AppConfig:
    """Complete application configuration."""
    export: ExportConfig = field(default_factory=ExportConfig)
    oaipmh: OaiPmhConfig = field(default_factory=OaiPmhConfig)
    sparql: SparqlConfig = field(default_factory=SparqlConfig)
    logging: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'AppConfig':
        """Create AppConfig from a dictionary."""
        return cls(
            export=ExportConfig.from_dict(config_dict.get('export') or {}),
            oaipmh=OaiPmhConfig.from_dict(config_dict.get('oaipmh') or {}),
            sparql=SparqlConfig.from_dict(config_dict.get('sparql') or {}),
            logging=dict(config_dict.get('logging') or {}),
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'AppConfig':
        """
        Load configuration from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not a valid JSON object.
        """
        if not config_path:
            raise ValueError("config_path cannot be empty")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_dict = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")
        except UnicodeDecodeError as e:
            raise ValueError(f"Encoding error reading {config_path}: {e}")

        if not isinstance(config_dict, dict):
            raise ValueError(f"Configuration file must contain a JSON object, got {type(config_dict).__name__}")

        logger.debug(f"Loaded configuration from {config_path}")
        return cls.from_dict(config_dict)
