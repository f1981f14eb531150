"""Version parsing and constraint matching."""

from .models import (
    Version,
    compare_versions,
    format_version,
    parse_version,
    sort_versions,
    try_parse_version,
    version_key,
)
from .constraint import Clause, Constraint

__all__ = [
    "Version",
    "Clause",
    "Constraint",
    "compare_versions",
    "format_version",
    "parse_version",
    "sort_versions",
    "try_parse_version",
    "version_key",
]
