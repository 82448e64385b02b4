"""
CLI command implementations.

Each command loads the configuration, sets up logging and returns an
``ExitCode``. Collaborators (exporter, triple store provider) can be injected
for testing.
"""

import argparse
import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ...config import AppConfig
from ...constants import ExitCode
from ...core import ExportError, InMemoryEntityStore, MetadataExporter, RepositoryError
from ...core.sparql import (
    RemoteSparqlStore,
    SparqlEndpointError,
    SparqlService,
    StoreProvider,
)
from ...formats.rdf.serializer import serialize
from ...shared.models import Version
from ...formats.oaipmh import OaiPmhService
from .helpers import load_config, print_header, setup_logging, write_output


logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for CLI commands.

    Args:
        config: Preloaded configuration; read from ``--config`` when None.
        exporter: Exporter override.
        stores: Triple store provider override.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        exporter: Optional[MetadataExporter] = None,
        stores: Optional[StoreProvider] = None,
    ):
        self._config = config
        self._exporter = exporter
        self._stores = stores

    def run(self, args: argparse.Namespace) -> int:
        """Load configuration and logging, then execute."""
        try:
            if self._config is None:
                self._config = load_config(getattr(args, 'config', None))
        except FileNotFoundError as e:
            print(f"✗ {e}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR
        except ValueError as e:
            print(f"✗ Configuration error: {e}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        setup_logging(config=self._config.logging)
        if getattr(args, 'verbose', False):
            logging.getLogger().setLevel(logging.DEBUG)
        return self.execute(args)

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            self._config = AppConfig()
        return self._config

    @abstractmethod
    def execute(self, args: argparse.Namespace) -> int:
        ...

    def get_exporter(self, args: argparse.Namespace, show_progress: bool = False) -> MetadataExporter:
        """
        Exporter over the entity file from ``--entities`` or the configuration.

        Raises:
            ValueError: If no entity file is configured.
            FileNotFoundError: If the entity file does not exist.
            RepositoryError: If the entity file is invalid.
        """
        if self._exporter is None:
            entities_file = getattr(args, 'entities', None) or self.config.export.entities_file
            if not entities_file:
                raise ValueError("No entity file given; use --entities or set export.entities_file")
            self._exporter = MetadataExporter(
                InMemoryEntityStore.from_file(entities_file),
                max_depth=self.config.export.max_depth,
                max_entities=self.config.export.max_entities,
                show_progress=show_progress,
            )
        return self._exporter

    def get_stores(self, args: argparse.Namespace) -> StoreProvider:
        """
        Triple store provider: the SPARQL endpoint when one is configured,
        else an in-process snapshot built from the export.
        """
        if self._stores is None:
            sparql = self.config.sparql
            endpoint = getattr(args, 'endpoint', None) or sparql.endpoint
            if endpoint:
                logger.info(f"Using SPARQL endpoint {endpoint}")
                self._stores = RemoteSparqlStore(endpoint, timeout=sparql.timeout, max_retries=sparql.max_retries)
            else:
                service = SparqlService(self.get_exporter(args), versions=(Version.V1,))
                if not service.initialize():
                    logger.warning("Answering from an empty dataset")
                self._stores = service
        return self._stores


class ExportCommand(BaseCommand):
    """
    Export entities as EPOS-DCAT-AP RDF.

    Usage:
        export [--type T] [--id UID ...] [--format F] [--version V] [--output O]
    """

    def execute(self, args: argparse.Namespace) -> int:
        export_config = self.config.export
        try:
            exporter = self.get_exporter(args, show_progress=True)
        except FileNotFoundError as e:
            print(f"✗ {e}", file=sys.stderr)
            return ExitCode.FILE_NOT_FOUND
        except (ValueError, RepositoryError) as e:
            print(f"✗ {e}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        try:
            content = exporter.export(
                args.entity_type,
                args.fmt or export_config.default_format,
                args.ids,
                args.epos_version or export_config.default_version,
            )
        except ValueError as e:
            print(f"✗ {e}", file=sys.stderr)
            return ExitCode.VALIDATION_ERROR
        except ExportError as e:
            print(f"✗ {e}", file=sys.stderr)
            return ExitCode.ERROR

        if not content:
            logger.warning("Nothing to export")
            return ExitCode.NO_CONTENT

        write_output(content, args.output)
        if args.output:
            print_header("Export complete")
            print(f"✓ Exported to: {args.output}")
        return ExitCode.SUCCESS


class OaiCommand(BaseCommand):
    """
    Answer a single OAI-PMH request.

    Protocol errors are part of the XML response and still exit with SUCCESS.
    """

    def execute(self, args: argparse.Namespace) -> int:
        oai_config = self.config.oaipmh
        if args.base_url:
            oai_config.base_url = args.base_url
        try:
            stores = self.get_stores(args)
        except FileNotFoundError as e:
            print(f"✗ {e}", file=sys.stderr)
            return ExitCode.FILE_NOT_FOUND
        except (ValueError, RepositoryError) as e:
            print(f"✗ {e}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        service = OaiPmhService(stores, oai_config)
        response = service.handle_request(
            verb=args.verb,
            identifier=args.identifier,
            metadata_prefix=args.metadata_prefix,
            set_spec=args.set_spec,
            from_date=args.from_date,
            until_date=args.until_date,
            resumption_token=args.resumption_token,
        )
        write_output(response, args.output)
        return ExitCode.SUCCESS


class QueryCommand(BaseCommand):
    """Run a SPARQL query against the harvested dataset."""

    def execute(self, args: argparse.Namespace) -> int:
        query = args.query
        if query.startswith("@"):
            path = Path(query[1:])
            if not path.exists():
                print(f"✗ Query file not found: {path}", file=sys.stderr)
                return ExitCode.FILE_NOT_FOUND
            query = path.read_text(encoding='utf-8')

        try:
            store = self.get_stores(args).store(Version.V1)
        except FileNotFoundError as e:
            print(f"✗ {e}", file=sys.stderr)
            return ExitCode.FILE_NOT_FOUND
        except (ValueError, RepositoryError) as e:
            print(f"✗ {e}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        try:
            if args.construct:
                content = serialize(store.construct(query), "turtle")
            else:
                rows = store.select(query)
                names = list(rows[0].keys()) if rows else []
                lines = ["\t".join(names)]
                for row in rows:
                    lines.append("\t".join("" if row.get(name) is None else str(row[name]) for name in names))
                content = "\n".join(lines) + "\n"
        except SparqlEndpointError as e:
            print(f"✗ {e}", file=sys.stderr)
            return ExitCode.ENDPOINT_ERROR
        except Exception as e:
            print(f"✗ Query failed: {e}", file=sys.stderr)
            return ExitCode.VALIDATION_ERROR

        write_output(content, args.output)
        return ExitCode.SUCCESS


COMMANDS = {
    'export': ExportCommand,
    'oai': OaiCommand,
    'query': QueryCommand,
}
