"""Version parsing on top of ``semantic_version``.

Store entries and release index keys are plain version strings. They are
normalised into ``semantic_version.Version`` values so that ``1.2``, ``v1.2.0``
and ``01.02.0`` all compare equal, and so pre-releases order before their
release (``2.0.0-alpha < 2.0.0``).
"""

import functools
import re
from typing import Iterable, List, Optional, Tuple

import semantic_version

from wtf.errors import VersionParseError

Version = semantic_version.Version

_VERSION_RE = re.compile(
    r"""^\s*v?
    (?P<major>\d+)
    (?:\.(?P<minor>\d+))?
    (?:\.(?P<patch>\d+))?
    (?:-(?P<prerelease>[0-9A-Za-z.-]+))?
    (?:\+(?P<build>[0-9A-Za-z.-]+))?
    \s*$""",
    re.VERBOSE,
)


def _identifiers(part: Optional[str]) -> Tuple[str, ...]:
    if not part:
        return ()
    return tuple(part.split("."))


def parse_version(text: str) -> Version:
    """Parse ``text`` into a normalised Version.

    Raises:
        VersionParseError: If ``text`` is not a version string.
    """
    if not isinstance(text, str):
        raise VersionParseError(f"version must be a string, got {type(text).__name__}")
    m = _VERSION_RE.match(text)
    if not m:
        raise VersionParseError(f"malformed version: {text!r}")
    try:
        return Version(
            major=int(m.group("major")),
            minor=int(m.group("minor") or 0),
            patch=int(m.group("patch") or 0),
            prerelease=_identifiers(m.group("prerelease")),
            build=_identifiers(m.group("build")),
        )
    except ValueError as exc:
        # semantic_version rejects empty or zero-padded numeric identifiers
        raise VersionParseError(f"malformed version: {text!r}: {exc}") from exc


def try_parse_version(text: str) -> Optional[Version]:
    """Like ``parse_version`` but return None for non-version strings."""
    try:
        return parse_version(text)
    except VersionParseError:
        return None


def format_version(version: Version) -> str:
    """Canonical string form, used as the store entry name."""
    return str(version)


def is_prerelease(version: Version) -> bool:
    return bool(version.prerelease)


def compare_versions(a: Version, b: Version) -> int:
    """Total order over versions.

    Semver precedence first; build metadata, which precedence ignores, breaks
    ties so that ``1.0.0+a`` and ``1.0.0+b`` still sort deterministically.
    """
    if a < b:
        return -1
    if b < a:
        return 1
    return (a.build > b.build) - (a.build < b.build)


version_key = functools.cmp_to_key(compare_versions)


def sort_versions(versions: Iterable[Version]) -> List[Version]:
    """Return ``versions`` deduplicated and sorted ascending."""
    return sorted(set(versions), key=version_key)
