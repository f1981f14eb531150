"""Path helpers for user-supplied locations."""

import os
import re

_ENV_RE = re.compile(r"\$(?:\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|(?P<plain>[A-Za-z_][A-Za-z0-9_]*))")


def expand_env(path: str) -> str:
    """Replace ``$VAR`` and ``${VAR}`` with their values; unset variables become empty."""
    return _ENV_RE.sub(lambda m: os.environ.get(m.group("braced") or m.group("plain"), ""), path)


def expand_path(path: str) -> str:
    """Expand a leading ``~`` and environment variables in ``path``.

    Only ``~`` alone or ``~/`` at the start is treated as the home directory;
    a tilde anywhere else is left untouched.
    """
    if path == "~" or path.startswith("~/"):
        home = os.path.expanduser("~")
        path = home if path == "~" else os.path.join(home, path[2:])
    return expand_env(path)
