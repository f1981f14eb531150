"""Remote terraform release index.

The index is fetched fresh on every call and never cached. Only versions
with a build for the running host's OS and architecture are reported.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from wtf.common.http_client import safe_get
from wtf.common.logging_utils import extra_context, is_debug_enabled
from wtf.common.platform_info import HostPlatform, current_platform
from wtf.constants import Constants
from wtf.errors import NetworkError
from wtf.versioning.models import Version, sort_versions, try_parse_version

logger = logging.getLogger(__name__)


class ReleaseCatalog:
    """Client for the release index at ``Constants.RELEASE_INDEX_URL``."""

    def __init__(self, index_url: str = Constants.RELEASE_INDEX_URL,
                 host: Optional[HostPlatform] = None):
        self.index_url = index_url
        self.host = host or current_platform()

    def list_available(self) -> List[Version]:
        """Return versions with a build for this host, sorted ascending.

        Raises:
            NetworkError: On transport failure, a non-2xx status or a body
                that is not the expected JSON document.
        """
        res = safe_get(self.index_url, context="release index")
        try:
            payload = json.loads(res.text)
        except ValueError as exc:
            raise NetworkError(self.index_url, f"invalid JSON: {exc}") from exc
        return self._parse_index(payload)

    def _parse_index(self, payload: Any) -> List[Version]:
        if not isinstance(payload, dict) or not isinstance(payload.get("versions", {}), dict):
            raise NetworkError(self.index_url, "unexpected release index format")

        found = []
        for key, entry in payload.get("versions", {}).items():
            version = try_parse_version(key)
            if version is None:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Skipping unparseable release key",
                        extra=extra_context(
                            event="skip",
                            component="releases",
                            action="parse_index",
                            target=key,
                        ),
                    )
                continue
            builds = entry.get("builds") if isinstance(entry, dict) else None
            for build in builds or []:
                if isinstance(build, dict) and self.host.matches(build.get("os"), build.get("arch")):
                    found.append(version)
                    break

        logger.debug(
            "Release index lists %d version(s) for %s/%s",
            len(found), self.host.os, self.host.arch,
        )
        return sort_versions(found)
