"""Exception hierarchy shared by the store, installer, wrapper and executor."""

from __future__ import annotations

from typing import Optional


class WtfError(Exception):
    """Base class for every error raised by wtf."""


class FilesystemError(WtfError):
    """The binary store directory could not be created or read."""


class VersionParseError(WtfError, ValueError):
    """A string could not be parsed as a version."""


class ConstraintError(WtfError, ValueError):
    """A constraint string could not be parsed."""


class ResolutionError(WtfError):
    """No installed version could be selected."""


class EmptyStoreError(ResolutionError):
    """The store holds no versions at all."""

    def __init__(self, location: str):
        super().__init__(f"no binaries available in {location}")
        self.location = location


class NoMatchError(ResolutionError):
    """The store holds versions but none satisfies the constraint."""

    def __init__(self, constraint: str):
        super().__init__(f"no matching version found for {constraint}")
        self.constraint = constraint


class NetworkError(WtfError):
    """A remote fetch failed at the transport level or with a non-2xx status."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"could not download {url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class InstallError(WtfError):
    """A downloaded archive could not be turned into an installed binary."""


class IntegrityError(InstallError):
    """Checksum verification of a download failed."""


class ChecksumNotFoundError(IntegrityError):
    """The checksum manifest has no entry for the platform archive."""

    def __init__(self, filename: str):
        super().__init__(f"checksum not found for {filename}")
        self.filename = filename


class ChecksumMismatchError(IntegrityError):
    """The archive digest differs from the published one."""

    def __init__(self, filename: str, expected: str, actual: str):
        super().__init__(
            f"checksum mismatch for {filename}: expected {expected}, got {actual}"
        )
        self.filename = filename
        self.expected = expected
        self.actual = actual


class ExecutableNotFoundError(InstallError):
    """The archive does not contain the platform executable."""

    def __init__(self, member: str):
        super().__init__(f"could not find file `{member}` in downloaded zip")
        self.member = member


class WrapperError(WtfError):
    """The wrapper script could not be written or removed."""


class TemplateError(WrapperError):
    """The wrapper script template could not be rendered."""


class SpawnError(WtfError):
    """The child process could not be started."""


class ConfigError(WtfError):
    """The configuration file could not be read or parsed."""


class ConstraintFileError(WtfError):
    """A project constraint file could not be parsed."""
