"""
api_logging.py
~~~~~~~~~~~~~~
Emit **one concise log line** per outbound HTTP request (event feeds, remote
reference datasets) and optionally raise for server-side errors.

Usage example
-------------
>>> async with httpx.AsyncClient() as cli:
...     resp = await logged_request_async(cli, "get", "https://example.org/events.json")
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

LOG = logging.getLogger("extapi")


def _log_response(verb: str, url: str, response: httpx.Response, t0: float) -> None:
    latency_ms = (time.perf_counter() - t0) * 1000.0
    code = response.status_code
    if code >= 500:
        LOG.warning("%s %s → %s (%.0f ms)", verb, url, code, latency_ms)
    else:
        # 404 included: a missing dated snapshot is routine
        LOG.info("%s %s → %s (%.0f ms)", verb, url, code, latency_ms)


def _log_failure(verb: str, url: str, exc: Exception, t0: float) -> None:
    latency_ms = (time.perf_counter() - t0) * 1000.0
    LOG.warning("FAIL %s %s %.0f ms %s", verb, url, latency_ms, exc)


def logged_request(
    client: httpx.Client,
    method: str,
    url: str,
    *args: Any,
    raise_for_status: bool = True,
    **kwargs: Any,
) -> httpx.Response:
    """
    Issue one request through *client* **and** log it.

    Parameters
    ----------
    client:
        ``httpx.Client`` instance.
    method:
        HTTP verb – ``"get"``, ``"post"`` … (any case).
    url:
        Absolute URL.
    raise_for_status:
        *True* ⇒ propagate 5xx via :pymeth:`httpx.Response.raise_for_status`.
        *False* ⇒ never raise; the caller decides.
    """
    verb = method.upper()
    t0 = time.perf_counter()
    try:
        response = getattr(client, method.lower())(url, *args, **kwargs)
    except Exception as exc:  # network error before we get a response
        _log_failure(verb, url, exc, t0)
        raise

    _log_response(verb, url, response, t0)
    if raise_for_status and response.status_code >= 500:
        response.raise_for_status()
    return response


async def logged_request_async(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *args: Any,
    raise_for_status: bool = True,
    **kwargs: Any,
) -> httpx.Response:
    """Async twin of :func:`logged_request` for ``httpx.AsyncClient``."""
    verb = method.upper()
    t0 = time.perf_counter()
    try:
        response = await getattr(client, method.lower())(url, *args, **kwargs)
    except Exception as exc:
        _log_failure(verb, url, exc, t0)
        raise

    _log_response(verb, url, response, t0)
    if raise_for_status and response.status_code >= 500:
        response.raise_for_status()
    return response


__all__ = ["logged_request", "logged_request_async"]
