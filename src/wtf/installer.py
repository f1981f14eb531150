"""Download, verify and install terraform release binaries.

Installation order matters: the published SHA256SUMS manifest is fetched
first, then the archive, and the archive digest is checked before anything is
written. A rejected or interrupted download therefore never occupies a store
entry. Each version installs to its own path (``<store>/<version>``).
"""

from __future__ import annotations

import hashlib
import io
import logging
import os
import zipfile
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from wtf.common.http_client import get_bytes, get_text
from wtf.common.logging_utils import Timer, extra_context, is_debug_enabled
from wtf.common.platform_info import HostPlatform, current_platform
from wtf.constants import Constants
from wtf.errors import (
    ChecksumMismatchError,
    ChecksumNotFoundError,
    ExecutableNotFoundError,
    InstallError,
    WtfError,
)
from wtf.store import VersionStore
from wtf.versioning.models import Version, format_version, parse_version

logger = logging.getLogger(__name__)


def find_checksum(manifest: str, filename: str) -> str:
    """Return the hex digest listed for ``filename`` in a SHA256SUMS manifest.

    Each manifest line reads ``<sha256>  <filename>``; lines with any other
    shape are ignored.

    Raises:
        ChecksumNotFoundError: If no line names ``filename``.
    """
    for line in manifest.splitlines():
        parts = line.split()
        if len(parts) != 2:
            continue
        if parts[1] == filename:
            return parts[0]
    raise ChecksumNotFoundError(filename)


def verify_checksum(body: bytes, expected: str, filename: str) -> str:
    """Compare the SHA-256 of ``body`` with ``expected`` (hex, any case).

    Raises:
        ChecksumMismatchError: If the digests differ.
    """
    actual = hashlib.sha256(body).hexdigest()
    if actual != expected.strip().lower():
        raise ChecksumMismatchError(filename, expected, actual)
    return actual


def extract_member(body: bytes, member: str) -> bytes:
    """Read the entry named exactly ``member`` from a zip archive held in memory.

    Raises:
        ExecutableNotFoundError: If the archive has no such entry.
        InstallError: If ``body`` is not a readable zip archive.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(body)) as archive:
            for info in archive.infolist():
                if info.filename == member and not info.is_dir():
                    return archive.read(info)
    except zipfile.BadZipFile as exc:
        raise InstallError(f"downloaded archive is not a valid zip file: {exc}") from exc
    raise ExecutableNotFoundError(member)


def write_binary(path: str, data: bytes) -> None:
    """Write ``data`` to ``path``, flush it to disk and make it owner-executable."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, Constants.BINARY_MODE)
    with os.fdopen(fd, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    os.chmod(path, Constants.BINARY_MODE)


class Installer:
    """Installs release binaries into a ``VersionStore``."""

    def __init__(self, store: VersionStore, host: Optional[HostPlatform] = None,
                 base_url: str = Constants.RELEASES_BASE_URL):
        self.store = store
        self.host = host or current_platform()
        self.base_url = base_url.rstrip("/")

    def archive_name(self, version: Version) -> str:
        return Constants.ARCHIVE_NAME_TEMPLATE.format(
            tool=Constants.TOOL_NAME,
            version=format_version(version),
            os=self.host.os,
            arch=self.host.arch,
        )

    def archive_url(self, version: Version) -> str:
        return f"{self.base_url}/{format_version(version)}/{self.archive_name(version)}"

    def checksums_url(self, version: Version) -> str:
        name = Constants.CHECKSUMS_NAME_TEMPLATE.format(
            tool=Constants.TOOL_NAME, version=format_version(version)
        )
        return f"{self.base_url}/{format_version(version)}/{name}"

    def fetch_expected_checksum(self, version: Version, archive_name: str) -> str:
        manifest = get_text(self.checksums_url(version), context="checksums")
        return find_checksum(manifest, archive_name)

    def download_version(self, version: Version) -> str:
        """Fetch, verify and install ``version``; return the installed path.

        Raises:
            NetworkError: If the manifest or archive cannot be fetched.
            ChecksumNotFoundError: If the manifest lacks the archive.
            ChecksumMismatchError: If the archive digest is wrong.
            ExecutableNotFoundError: If the archive lacks the executable.
            InstallError: If the archive is corrupt or cannot be written.
        """
        archive_name = self.archive_name(version)
        destination = os.path.join(self.store.location, format_version(version))

        with Timer() as t:
            expected = self.fetch_expected_checksum(version, archive_name)
            body = get_bytes(self.archive_url(version), context="archive")
            verify_checksum(body, expected, archive_name)

            data = extract_member(body, self.host.executable_name())
            try:
                write_binary(destination, data)
            except OSError as exc:
                raise InstallError(f"could not write {destination}: {exc}") from exc

        self.store.add(version, destination)
        if is_debug_enabled(logger):
            logger.debug(
                "Installed binary",
                extra=extra_context(
                    event="install",
                    component="installer",
                    action="download_version",
                    outcome="success",
                    duration_ms=t.duration_ms(),
                    target=destination,
                ),
            )
        logger.info("Installed terraform %s at %s", format_version(version), destination)
        return destination

    def ensure(self, version: Version) -> str:
        """Return the binary path for ``version``, installing it when missing."""
        if self.store.contains(version):
            return self.store.binary_path(version)
        return self.download_version(version)


@dataclass
class InstallFailure:
    """One failed item of a batch install."""

    version: str
    kind: str
    message: str


@dataclass
class InstallReport:
    """Outcome of ``install_versions``."""

    installed: Dict[str, str] = field(default_factory=dict)
    failures: List[InstallFailure] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


def install_versions(installer: Installer, version_strings: Iterable[str]) -> InstallReport:
    """Install each requested version, continuing past individual failures."""
    report = InstallReport()
    for text in version_strings:
        logger.info("Processing %s...", text)
        try:
            version = parse_version(text)
            path = installer.download_version(version)
        except WtfError as exc:
            logger.error("version '%s' could not be installed: %s", text, exc)
            report.failures.append(InstallFailure(text, type(exc).__name__, str(exc)))
            continue
        report.installed[text] = path
    return report
