"""Argument parsing for wtf."""

import argparse
import sys
from typing import List, Optional, Sequence

from wtf.constants import Constants

EXEC_COMMAND = "exec"

# global options that consume the next argument
_GLOBAL_VALUE_OPTIONS = {"--loglevel", "--logfile", "-c", "--config"}


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with one subparser per command."""
    parser = argparse.ArgumentParser(
        prog=Constants.PROGRAM_NAME,
        description="Wrapper for Terraform: transparently work with multiple terraform versions",
        add_help=True,
    )
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

    sub = parser.add_subparsers(dest="action", metavar="COMMAND")
    sub.required = True

    # arguments after "exec" are split off in parse_args, never parsed here
    sub.add_parser(EXEC_COMMAND, add_help=False,
                   help="Run the terraform version matching the project's constraint")

    install = sub.add_parser("install", help="Install one or more terraform versions")
    install.add_argument("VERSIONS",
                         nargs="+",
                         metavar="VERSION",
                         help="Version to install, e.g. 1.6.2")

    sub.add_parser("list-versions", help="List available terraform versions")
    sub.add_parser("list-installed", help="List installed terraform versions")
    sub.add_parser("config", help="Print the effective configuration")
    sub.add_parser("version", help="Print version info")
    return parser


def _command_index(argv: Sequence[str]) -> Optional[int]:
    """Index of the subcommand in ``argv``, skipping global options and their values."""
    skip_value = False
    for idx, arg in enumerate(argv):
        if skip_value:
            skip_value = False
            continue
        if arg in _GLOBAL_VALUE_OPTIONS:
            skip_value = True
            continue
        if arg.startswith("-"):
            continue
        return idx
    return None


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse ``argv``; everything after ``exec`` is passed to terraform verbatim."""
    argv = list(sys.argv[1:] if argv is None else argv)
    run_args: List[str] = []
    idx = _command_index(argv)
    if idx is not None and argv[idx] == EXEC_COMMAND:
        argv, run_args = argv[:idx + 1], argv[idx + 1:]

    ns = build_parser().parse_args(argv)
    ns.RUN_ARGS = run_args
    return ns
