#!/usr/bin/env python3
"""
EPOS metadata export entry point.

Usage:
    epos-export export [--type T] [--id UID ...] [--format F] [--version V]
    epos-export oai <verb> [--metadata-prefix P] [--set S] [--resumption-token T]
    epos-export query <query or @file> [--construct]
"""

import sys
from typing import List, Optional

from .app.cli import COMMANDS, create_argument_parser
from .constants import ExitCode


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    command_class = COMMANDS.get(args.command)
    if command_class is None:
        parser.print_help()
        return ExitCode.SUCCESS
    return int(command_class().run(args))


if __name__ == '__main__':
    sys.exit(main())
