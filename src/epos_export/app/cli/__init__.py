"""
Command-line interface of the EPOS metadata export.
"""

from .commands import BaseCommand, COMMANDS, ExportCommand, OaiCommand, QueryCommand
from .helpers import JSONFormatter, load_config, setup_logging
from .parsers import create_argument_parser

__all__ = [
    "BaseCommand",
    "COMMANDS",
    "ExportCommand",
    "JSONFormatter",
    "OaiCommand",
    "QueryCommand",
    "create_argument_parser",
    "load_config",
    "setup_logging",
]
