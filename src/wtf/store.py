"""Local store of installed terraform binaries.

The store is a directory whose immediate children are named after the
version they hold (``1.6.2``). Anything whose name is not a version, such as
``.DS_Store``, is ignored. The directory is scanned once per invocation; the
installer registers new entries with ``add`` so they are visible for the rest
of the run.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional

from wtf.common.logging_utils import extra_context, is_debug_enabled
from wtf.common.paths import expand_path
from wtf.errors import EmptyStoreError, FilesystemError, NoMatchError
from wtf.versioning.constraint import Constraint
from wtf.versioning.models import Version, format_version, try_parse_version, version_key

logger = logging.getLogger(__name__)


class VersionStore:
    """Inventory of installed versions keyed by Version."""

    def __init__(self, location: str, versions: Optional[Dict[Version, str]] = None):
        self.location = location.rstrip("/") or "/"
        self._versions: Dict[Version, str] = dict(versions or {})

    @classmethod
    def load(cls, path: str) -> "VersionStore":
        """Create the store directory if needed and scan it.

        Raises:
            FilesystemError: If the directory cannot be created or listed.
        """
        location = os.path.abspath(expand_path(path))
        try:
            os.makedirs(location, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"could not create store directory {location}: {exc}") from exc

        store = cls(location)
        try:
            with os.scandir(store.location) as entries:
                for entry in entries:
                    version = try_parse_version(entry.name)
                    if version is None:
                        if is_debug_enabled(logger):
                            logger.debug(
                                "Skipping non-version store entry",
                                extra=extra_context(
                                    event="skip",
                                    component="store",
                                    action="scan",
                                    target=entry.name,
                                ),
                            )
                        continue
                    store._versions[version] = entry.path
        except OSError as exc:
            raise FilesystemError(f"could not read store directory {store.location}: {exc}") from exc

        logger.debug("Loaded %d version(s) from %s", len(store._versions), store.location)
        return store

    def list_installed(self) -> List[Version]:
        return sorted(self._versions, key=version_key)

    def contains(self, version: Version) -> bool:
        return version in self._versions

    def __contains__(self, version: Version) -> bool:
        return self.contains(version)

    def __len__(self) -> int:
        return len(self._versions)

    def binary_path(self, version: Version) -> str:
        """Absolute path of the binary for ``version``, installed or not."""
        return self._versions.get(version) or os.path.join(self.location, format_version(version))

    def add(self, version: Version, path: Optional[str] = None) -> str:
        """Register an installed binary so it is visible within this run."""
        path = path or os.path.join(self.location, format_version(version))
        self._versions[version] = path
        return path

    def __str__(self) -> str:
        return "\n".join(format_version(v) for v in self.list_installed())


def find_latest(store: VersionStore, constraint: Constraint) -> Version:
    """Return the greatest installed version satisfying ``constraint``.

    Raises:
        EmptyStoreError: If the store holds no versions.
        NoMatchError: If no installed version satisfies the constraint.
    """
    installed = store.list_installed()
    if not installed:
        raise EmptyStoreError(store.location)

    matches = [version for version in installed if constraint.check(version)]
    if not matches:
        raise NoMatchError(str(constraint) or "(any version)")
    return max(matches, key=version_key)
