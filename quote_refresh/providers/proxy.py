"""
Outbound proxy settings shared by every exchange adapter.

A ProxyConfig exists only when a proxy URL was supplied. Credentials are
optional and only meaningful together with a URL; they are embedded into the
URL handed to requests and never shown in repr().
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import quote, urlsplit, urlunsplit


@dataclass(frozen=True)
class ProxyConfig:
    url: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    @property
    def has_credential(self) -> bool:
        return self.username is not None

    def authenticated_url(self) -> str:
        """Proxy URL with user:secret inserted into the netloc when a credential is set."""
        if not self.has_credential:
            return self.url
        parts = urlsplit(self.url)
        host = parts.netloc.rsplit("@", 1)[-1]
        userinfo = quote(self.username or "", safe="")
        if self.password is not None:
            userinfo += ":" + quote(self.password, safe="")
        return urlunsplit(parts._replace(netloc=f"{userinfo}@{host}"))

    def as_requests_proxies(self) -> Dict[str, str]:
        url = self.authenticated_url()
        return {"http": url, "https": url}


def build_proxy_config(
    url: Optional[str],
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> Optional[ProxyConfig]:
    """
    Build a ProxyConfig, or None when no proxy URL is given.

    A URL without a scheme is treated as http://host:port. A password without
    a username is rejected; a credential without a URL is ignored.
    """
    url = (url or "").strip()
    if not url:
        return None
    if "://" not in url:
        url = "http://" + url
    parts = urlsplit(url)
    if not parts.hostname:
        raise ValueError(f"Proxy URL has no host: {url!r}")

    username = (username or "").strip() or None
    if password and username is None:
        raise ValueError("Proxy password given without a username")
    return ProxyConfig(url=url, username=username, password=password if username else None)
