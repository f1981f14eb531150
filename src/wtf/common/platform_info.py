"""Host platform names in the vocabulary used by the terraform release index."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Optional

from wtf.constants import Constants

_OS_MAP = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "sunos": "solaris",
}

_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "arm": "arm",
}


@dataclass(frozen=True)
class HostPlatform:
    """An (os, arch) pair such as ("linux", "amd64")."""

    os: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def executable_name(self, tool: str = Constants.TOOL_NAME) -> str:
        """Name of the tool's executable inside a release archive."""
        return f"{tool}.exe" if self.is_windows else tool

    def matches(self, os_name: Optional[str], arch: Optional[str]) -> bool:
        return os_name == self.os and arch == self.arch


def current_platform() -> HostPlatform:
    """Detect the running host's platform."""
    system = platform.system().lower()
    machine = platform.machine().lower()
    return HostPlatform(
        os=_OS_MAP.get(system, system),
        arch=_ARCH_MAP.get(machine, machine),
    )
