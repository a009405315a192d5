"""Main CLI entry point for substituter."""

import argparse
import sys
from typing import Optional

from .commands import check_template, render_template


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        'template',
        type=str,
        help='Path to template file'
    )
    parser.add_argument(
        '--vars',
        type=str,
        metavar='FILE',
        help='YAML or JSON file mapping variable names to values'
    )
    parser.add_argument(
        '--var',
        action='append',
        metavar='KEY=VALUE',
        help='Variable value (can be specified multiple times)'
    )
    parser.add_argument(
        '--env',
        action='append',
        metavar='NAME',
        help='Define NAME as a live reference to an environment variable'
    )
    parser.add_argument(
        '--lenient',
        action='store_true',
        help='Keep malformed or undefined references literal instead of failing'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warning', 'error'],
        default='warning',
        help='Set log level'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the substitute CLI."""
    parser = argparse.ArgumentParser(
        prog='substitute',
        description='Expand @-variable templates'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    render_parser = subparsers.add_parser('render', help='Expand a template')
    add_common_arguments(render_parser)
    render_parser.add_argument(
        '--out',
        type=str,
        metavar='FILE',
        help='Write output to FILE instead of stdout'
    )

    check_parser = subparsers.add_parser('check', help='Parse a template and list its variables')
    add_common_arguments(check_parser)

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'render':
        return render_template(parsed_args)
    elif parsed_args.command == 'check':
        return check_template(parsed_args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
