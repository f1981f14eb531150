"""Optional script wrapper around the terraform invocation.

When a script template is configured, ``wrap`` renders it with Jinja2 into a
temporary executable script and returns that script as the command to run.
The template sees:

- ``command`` (alias ``Command``): the binary path and arguments joined with
  spaces
- ``binary``: the binary path alone
- ``verbose`` (alias ``Verbose``): whether wtf runs in verbose mode

Templates written for the Go text/template syntax of earlier wtf releases
work once the leading dot is dropped: ``{{.Command}}`` becomes
``{{ Command }}``. Undefined variables are errors, never blanks. Example
template::

    #!/bin/sh
    {% if verbose %}set -x{% endif %}
    exec {{ command }}
"""

from __future__ import annotations

import logging
import os
import tempfile
from typing import List, Optional, Sequence, Tuple

import jinja2

from wtf.constants import Constants
from wtf.errors import TemplateError, WrapperError

logger = logging.getLogger(__name__)


class ScriptWrapper:
    """Renders the configured template; owns at most one temporary script."""

    def __init__(self, script_template: str = ""):
        self.script_template = script_template or ""
        self._script_path: Optional[str] = None
        self._env = jinja2.Environment(
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    @property
    def script_path(self) -> Optional[str]:
        """Path of the temporary script created by the last ``wrap``, if any."""
        return self._script_path

    def render(self, command: str, args: Sequence[str], verbose: bool) -> str:
        """Render the template for ``command args``.

        Raises:
            TemplateError: On a syntax error or an undefined variable.
        """
        command_line = " ".join([command, *args])
        context = {
            "command": command_line,
            "Command": command_line,
            "binary": command,
            "verbose": verbose,
            "Verbose": verbose,
        }
        try:
            return self._env.from_string(self.script_template).render(**context)
        except jinja2.TemplateError as exc:
            raise TemplateError(f"wrapper template could not be rendered: {exc}") from exc

    def wrap(self, command: str, args: Sequence[str], verbose: bool = False) -> Tuple[str, List[str]]:
        """Return the command and arguments to execute.

        Without a template the input is returned unchanged. Otherwise the
        rendered script path is returned with an empty argument list.

        Raises:
            TemplateError: If the template cannot be rendered.
            WrapperError: If the script cannot be written; nothing is left behind.
        """
        if not self.script_template:
            return command, list(args)

        content = self.render(command, args, verbose)

        # a previous script is released before taking ownership of a new one
        self.cleanup()
        try:
            fd, path = tempfile.mkstemp(
                prefix=Constants.WRAPPER_TEMP_PREFIX, suffix=Constants.WRAPPER_TEMP_SUFFIX
            )
        except OSError as exc:
            raise WrapperError(f"could not create wrapper script: {exc}") from exc

        self._script_path = path
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(path, Constants.BINARY_MODE)
        except OSError as exc:
            self.cleanup()
            raise WrapperError(f"could not write wrapper script {path}: {exc}") from exc

        logger.debug("Wrapped %s in script %s", command, path)
        return path, []

    def cleanup(self) -> None:
        """Remove the temporary script, if one was created. Safe to call repeatedly.

        Raises:
            WrapperError: If the script exists but cannot be removed.
        """
        path, self._script_path = self._script_path, None
        if path is None:
            return
        try:
            os.unlink(path)
        except FileNotFoundError:
            logger.debug("Wrapper script already removed: %s", path)
        except OSError as exc:
            raise WrapperError(f"could not remove wrapper script {path}: {exc}") from exc
