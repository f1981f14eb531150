"""Run the resolved terraform binary as a child process."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from wtf.constants import Constants
from wtf.errors import SpawnError, WrapperError
from wtf.store import VersionStore
from wtf.versioning.models import Version, format_version
from wtf.wrapper import ScriptWrapper

logger = logging.getLogger(__name__)


def _wait(proc: subprocess.Popen) -> int:
    while True:
        try:
            return proc.wait()
        except KeyboardInterrupt:
            # the child shares the terminal and got the same SIGINT
            logger.debug("Interrupted; waiting for terraform to exit")


def _cleanup(wrapper: ScriptWrapper) -> None:
    try:
        wrapper.cleanup()
    except OSError as exc:
        raise WrapperError(f"could not remove wrapper script: {exc}") from exc


def run(store: VersionStore, version: Version, args: Sequence[str],
        wrapper: ScriptWrapper, verbose: bool = False) -> int:
    """Execute ``version`` with ``args`` and return the child's exit status.

    The child inherits stdin, stdout, stderr and the working directory; its
    ``argv[0]`` is ``terraform`` whatever the binary's file name. The wrapper
    script, if any, is removed before returning, including when wrapping
    itself fails. A cleanup failure is raised only when wrapping, spawning
    and waiting succeeded.

    Raises:
        TemplateError: If the wrapper template cannot be rendered.
        WrapperError: If the wrapper script cannot be written or removed.
        SpawnError: If the child process cannot be started.
    """
    binary = store.binary_path(version)

    try:
        command, command_args = wrapper.wrap(binary, list(args), verbose)
        argv = [Constants.TOOL_NAME, *command_args]
        logger.debug("Running %s (terraform %s)", command, format_version(version))
        try:
            proc = subprocess.Popen(argv, executable=command)  # noqa: S603
        except OSError as exc:
            raise SpawnError(f"could not start {command}: {exc}") from exc
        returncode = _wait(proc)
    except BaseException:
        try:
            _cleanup(wrapper)
        except WrapperError as cleanup_exc:
            logger.warning("%s", cleanup_exc)
        raise

    _cleanup(wrapper)
    return returncode


def exit_status_to_code(returncode: int) -> int:
    """Map a ``Popen.returncode`` to a shell exit code (signals become 128+N)."""
    if returncode < 0:
        return 128 + abs(returncode)
    return returncode
