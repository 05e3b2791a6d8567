"""
Single HTTP GET used by every exchange adapter.

Returns the decoded JSON body together with the status code so adapters can
inspect exchange error payloads (often sent with HTTP 400) before deciding
whether a non-2xx status is a transport failure.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .proxy import ProxyConfig

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_S = 15.0
USER_AGENT = "quote-refresh/0.3"


class TransportFailure(Exception):
    """Network or HTTP level failure that the exchange body does not explain."""


class BodyDecodeError(Exception):
    """Response body was not JSON."""


@dataclass(frozen=True)
class JsonResponse:
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def get_json(
    url: str,
    params: Dict[str, str],
    *,
    proxy: Optional[ProxyConfig] = None,
    timeout: float = HTTP_TIMEOUT_S,
) -> JsonResponse:
    """
    Issue one GET and decode the body as JSON.

    Raises TransportFailure on connection/timeout errors and BodyDecodeError
    when the body is not JSON. HTTP status is reported, not raised.
    """
    proxies = proxy.as_requests_proxies() if proxy is not None else None
    logger.debug("GET %s params=%s proxy=%s", url, params, "yes" if proxy else "no")
    try:
        resp = requests.get(
            url,
            params=params,
            proxies=proxies,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )
    except requests.RequestException as exc:
        raise TransportFailure(f"{type(exc).__name__}: {exc}") from exc

    try:
        body = resp.json()
    except ValueError as exc:
        if resp.status_code >= 400:
            raise TransportFailure(f"HTTP {resp.status_code}") from exc
        raise BodyDecodeError(f"HTTP {resp.status_code}: body is not JSON") from exc
    return JsonResponse(status_code=resp.status_code, body=body)
