"""
CLI argument parser configuration.

Command Structure:
    - export  [--type T] [--id UID ...] [--format F] [--version V]
    - oai     <verb> [--identifier ...] [--metadata-prefix ...] [--set ...]
    - query   <query or @file> [--construct]
"""

import argparse

from ...constants import ExportDefaults
from ...formats.oaipmh.renderers import METADATA_FORMATS


# ============================================================================
# Shared Flag Group Builders
# ============================================================================

def add_config_flags(parser: argparse.ArgumentParser) -> None:
    """Add configuration flags."""
    parser.add_argument(
        '--config', '-c',
        help='Path to configuration file (default: ./config.json when present)'
    )
    parser.add_argument(
        '--entities', '-e',
        help='JSON file with the entities to export (overrides export.entities_file)'
    )


def add_output_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--output', '-o',
        help='Output file path (default: stdout)'
    )


def add_store_flags(parser: argparse.ArgumentParser) -> None:
    """Add triple store selection flags."""
    parser.add_argument(
        '--endpoint',
        help='SPARQL endpoint to query instead of the in-process dataset'
    )


# ============================================================================
# Main Parser Factory
# ============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the main argument parser.

    Returns:
        Configured ArgumentParser with all subcommands.
    """
    parser = argparse.ArgumentParser(
        prog='epos-export',
        description="EPOS metadata export to EPOS-DCAT-AP RDF with an OAI-PMH provider",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Export every entity as Turtle
    %(prog)s export --entities entities.json --output epos.ttl

    # Export one data product and what it links to, as JSON-LD in V1 vocabulary
    %(prog)s export --type DataProduct --id dp-001 --format json-ld --version V1

    # Answer OAI-PMH requests
    %(prog)s oai Identify --base-url https://example.org/oai
    %(prog)s oai ListRecords --metadata-prefix oai_dc --set type:Dataset

    # Query the harvested dataset
    %(prog)s query "SELECT ?s WHERE { ?s a <http://www.w3.org/ns/dcat#Dataset> }"
    %(prog)s query @construct.rq --construct
        """,
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    _add_export_parser(subparsers)
    _add_oai_parser(subparsers)
    _add_query_parser(subparsers)
    return parser


def _add_export_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        'export',
        help='Export entities as EPOS-DCAT-AP RDF'
    )
    add_config_flags(parser)
    add_output_flags(parser)
    parser.add_argument(
        '--type', '-t',
        dest='entity_type',
        help='Entity type to export with its linked entities (default: all types)'
    )
    parser.add_argument(
        '--id',
        dest='ids',
        action='append',
        help='Entity uid to export (repeatable; requires --type)'
    )
    parser.add_argument(
        '--format', '-f',
        dest='fmt',
        choices=list(ExportDefaults.SUPPORTED_FORMATS),
        help=f'Output serialization (default: {ExportDefaults.DEFAULT_FORMAT})'
    )
    parser.add_argument(
        '--version',
        dest='epos_version',
        choices=['V1', 'V3'],
        help=f'Vocabulary version (default: {ExportDefaults.DEFAULT_VERSION})'
    )


def _add_oai_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        'oai',
        help='Answer one OAI-PMH request and print the XML response'
    )
    parser.add_argument('verb', nargs='?', help='OAI-PMH verb (Identify, ListRecords, ...)')
    add_config_flags(parser)
    add_output_flags(parser)
    add_store_flags(parser)
    parser.add_argument('--identifier', '-i', help='Record identifier')
    parser.add_argument(
        '--metadata-prefix', '-m',
        help=f"Metadata format ({', '.join(METADATA_FORMATS)})"
    )
    parser.add_argument('--set', dest='set_spec', help='Set to harvest (type:<Name> or category:<id>)')
    parser.add_argument('--from', dest='from_date', help='Lower datestamp bound')
    parser.add_argument('--until', dest='until_date', help='Upper datestamp bound')
    parser.add_argument('--resumption-token', '-r', help='Token of the next page')
    parser.add_argument('--base-url', help='Base URL reported in responses')


def _add_query_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        'query',
        help='Run a SPARQL query against the harvested dataset'
    )
    parser.add_argument('query', help='SPARQL query text, or @path to read it from a file')
    add_config_flags(parser)
    add_output_flags(parser)
    add_store_flags(parser)
    parser.add_argument(
        '--construct',
        action='store_true',
        help='Run as CONSTRUCT and print Turtle instead of a result table'
    )
