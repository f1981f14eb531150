"""Shared HTTP helpers used by the release catalog and the installer.

Every remote fetch goes through one ``requests.Session`` with a bounded
timeout. Transport failures and non-2xx responses are raised as
``NetworkError`` so callers decide how to report them.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from wtf.common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from wtf.constants import Constants
from wtf.errors import NetworkError

logger = logging.getLogger(__name__)

_session: Optional[requests.Session] = None


def get_session() -> requests.Session:
    """Return the process-wide session, creating it on first use."""
    global _session  # pylint: disable=global-statement
    if _session is None:
        _session = requests.Session()
        _session.headers.update({"User-Agent": Constants.USER_AGENT})
    return _session


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "release index").
        **kwargs: Passed through to ``Session.get``.

    Returns:
        requests.Response: A response with a 2xx status.

    Raises:
        NetworkError: On timeout, connection failure or a non-2xx status.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            res = get_session().get(url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
        except requests.Timeout as exc:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            raise NetworkError(url, f"timed out after {Constants.REQUEST_TIMEOUT} seconds") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise NetworkError(url, str(exc)) from exc

    if not 200 <= res.status_code <= 299:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response not ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="http_error",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )
        status = f"{res.status_code} {res.reason or ''}".strip()
        raise NetworkError(url, status, status_code=res.status_code)

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response ok",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="success",
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context,
            ),
        )
    return res


def get_bytes(url: str, *, context: str) -> bytes:
    """GET ``url`` and return the full response body."""
    return safe_get(url, context=context).content


def get_text(url: str, *, context: str) -> str:
    """GET ``url`` and return the body decoded as text."""
    return safe_get(url, context=context).text
