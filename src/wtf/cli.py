"""Command-line entry point for wtf.

Commands are held in an explicit ``CommandTable`` built at startup and handed
to ``dispatch``. When the program is invoked under the name ``terraform``
(e.g. through a symlink) it skips argument parsing and runs terraform
directly with all arguments.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from importlib import metadata
from typing import Callable, Dict, List, Optional, Sequence

from wtf import __version__
from wtf.args import parse_args
from wtf.common.logging_utils import configure_logging, extra_context, is_debug_enabled
from wtf.config import Configuration, load_configuration
from wtf.constants import Constants, ExitCodes
from wtf.constraint_file import read_constraint
from wtf.errors import EmptyStoreError, NoMatchError, ResolutionError, WtfError
from wtf.executor import exit_status_to_code, run
from wtf.installer import Installer, install_versions
from wtf.releases import ReleaseCatalog
from wtf.store import VersionStore, find_latest
from wtf.versioning.constraint import Constraint
from wtf.versioning.models import Version, format_version
from wtf.wrapper import ScriptWrapper

logger = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, Configuration], int]
CommandTable = Dict[str, Handler]

DISTRIBUTION_NAME = "wtf-terraform"


def resolve_version(store: VersionStore, constraint: Constraint, config: Configuration) -> Version:
    """Pick the installed version for ``constraint``, installing one if allowed.

    With ``auto_install`` enabled, a failed local resolution falls back to the
    newest release satisfying the constraint, which is installed first.
    """
    try:
        return find_latest(store, constraint)
    except (EmptyStoreError, NoMatchError) as exc:
        if not config.auto_install:
            raise
        logger.info("%s; looking for a matching release", exc)
        candidates = [v for v in ReleaseCatalog().list_available() if constraint.check(v)]
        if not candidates:
            raise
        Installer(store).ensure(candidates[-1])
        return find_latest(store, constraint)


def run_terraform(run_args: Sequence[str], config: Configuration, verbose: bool) -> int:
    """Scan, resolve, wrap and execute; return the exit code for the caller."""
    store = VersionStore.load(config.binary_store_path)
    constraint = read_constraint(os.getcwd(), config)
    if verbose:
        logger.info("Version constraint: %s", str(constraint) or "(none)")

    version = resolve_version(store, constraint, config)
    if verbose:
        logger.info("Version used: %s", format_version(version))

    wrapper = ScriptWrapper(config.wrapper.script_template)
    returncode = run(store, version, run_args, wrapper, verbose)
    return exit_status_to_code(returncode)


def cmd_exec(args: argparse.Namespace, config: Configuration) -> int:
    return run_terraform(getattr(args, "RUN_ARGS", []), config, verbose=True)


def cmd_install(args: argparse.Namespace, config: Configuration) -> int:
    installer = Installer(VersionStore.load(config.binary_store_path))
    report = install_versions(installer, args.VERSIONS)
    for text, path in report.installed.items():
        print(f"version '{text}' installed at '{path}'")
    if not report.ok:
        logger.error("%d error(s) occurred", report.error_count)
        return ExitCodes.FAILURE.value
    return ExitCodes.SUCCESS.value


def cmd_list_versions(args: argparse.Namespace, config: Configuration) -> int:
    store = VersionStore.load(config.binary_store_path)
    for version in ReleaseCatalog().list_available():
        line = format_version(version)
        if store.contains(version):
            line = f"{line} [installed]"
        print(line)
    return ExitCodes.SUCCESS.value


def cmd_list_installed(args: argparse.Namespace, config: Configuration) -> int:
    store = VersionStore.load(config.binary_store_path)
    if len(store):
        print(str(store))
    return ExitCodes.SUCCESS.value


def cmd_config(args: argparse.Namespace, config: Configuration) -> int:
    print("---\n" + config.to_yaml(), end="")
    return ExitCodes.SUCCESS.value


def get_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return __version__


def cmd_version(args: argparse.Namespace, config: Configuration) -> int:
    print(f"{Constants.PROGRAM_NAME} {get_version()}")
    return ExitCodes.SUCCESS.value


def build_command_table() -> CommandTable:
    """Map each subcommand name to its handler."""
    return {
        "exec": cmd_exec,
        "install": cmd_install,
        "list-versions": cmd_list_versions,
        "list-installed": cmd_list_installed,
        "config": cmd_config,
        "version": cmd_version,
    }


def _report_error(exc: WtfError) -> None:
    logger.error("%s", exc)
    if isinstance(exc, EmptyStoreError):
        logger.error("Install a version first, e.g. '%s install <version>'", Constants.PROGRAM_NAME)
    elif isinstance(exc, ResolutionError):
        logger.error("Run '%s list-versions' to see what can be installed", Constants.PROGRAM_NAME)


def dispatch(table: CommandTable, args: argparse.Namespace) -> int:
    """Run the handler for ``args.action`` and return its exit code."""
    handler = table.get(args.action)
    if handler is None:
        logger.error("Unknown command: %s", args.action)
        return ExitCodes.USAGE.value

    if is_debug_enabled(logger):
        logger.debug(
            "Dispatching command",
            extra=extra_context(event="dispatch", component="cli", action=args.action),
        )
    try:
        config = load_configuration(getattr(args, "CONFIG", None))
        return handler(args, config)
    except WtfError as exc:
        _report_error(exc)
        return ExitCodes.FAILURE.value


def run_as_terraform(argv: List[str]) -> int:
    """Behave like terraform itself: no wtf options, quiet resolution."""
    configure_logging(os.environ.get(Constants.ENV_LOG_LEVEL) or "WARNING")
    try:
        return run_terraform(argv, load_configuration(), verbose=False)
    except WtfError as exc:
        _report_error(exc)
        return ExitCodes.FAILURE.value


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Console script entry point."""
    prog = os.path.basename(sys.argv[0])
    if argv is None and os.path.splitext(prog)[0] == Constants.TOOL_NAME:
        sys.exit(run_as_terraform(sys.argv[1:]))

    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)
    sys.exit(dispatch(build_command_table(), args))


if __name__ == "__main__":
    main()
