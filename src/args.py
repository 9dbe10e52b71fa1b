"""Argument parsing functionality for the flakeref command line."""

import argparse
from typing import List, Optional


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="flakeref",
        description="Parse and resolve indirect flake references",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    parse_cmd = subparsers.add_parser(
        "parse",
        help="Parse a flake:<id> reference and print its JSON form",
    )
    parse_cmd.add_argument("REFERENCE",
                           help="Indirect flake reference, e.g. flake:nixpkgs?ref=nixos-23.05")
    _add_common_options(parse_cmd)

    resolve_cmd = subparsers.add_parser(
        "resolve",
        help="Resolve a flake:<id> reference through the flake registries",
    )
    resolve_cmd.add_argument("REFERENCE",
                             help="Indirect flake reference, e.g. flake:nixpkgs")
    resolve_cmd.add_argument("--parser-util",
                             dest="PARSER_UTIL",
                             help="Path to the parser-util helper program",
                             action="store",
                             type=str)
    resolve_cmd.add_argument("--timeout",
                             dest="TIMEOUT",
                             help="Seconds to wait for parser-util",
                             action="store",
                             type=int)
    _add_common_options(resolve_cmd)

    return parser.parse_args(argv)
