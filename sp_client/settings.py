from __future__ import annotations

import os
from typing import Optional, Tuple

from http_utils.http_utils import new_session, RobustHTTP

from .auth import TokenProvider
from .sp_client import SPClient

__all__ = ["Settings", "client_from_settings"]

ENV = {
    "site_url": "SP_SITE_URL",
    "tenant": "SP_TENANT_ID",
    "client_id": "SP_CLIENT_ID",
    "client_secret": "SP_CLIENT_SECRET",
    "timeout": "SP_TIMEOUT",
}


def _timeout(value) -> Tuple[float, float]:
    """'10,300' / '30' / (10, 300) -> (connect, read)."""
    if isinstance(value, (tuple, list)):
        c, r = value
        return float(c), float(r)
    if isinstance(value, (int, float)):
        return float(value), float(value)
    parts = [p.strip() for p in str(value).split(",") if p.strip()]
    if len(parts) == 1:
        return float(parts[0]), float(parts[0])
    if len(parts) == 2:
        return float(parts[0]), float(parts[1])
    raise ValueError(f"Invalid timeout: {value!r}")


class Settings:
    """Connection settings. Keyword arguments win over SP_* environment variables."""

    def __init__(self, site_url: Optional[str] = None, tenant: Optional[str] = None,
                 client_id: Optional[str] = None, client_secret: Optional[str] = None,
                 timeout=None, environ=None):
        env = os.environ if environ is None else environ
        self.site_url = site_url or env.get(ENV["site_url"], "")
        self.tenant = tenant or env.get(ENV["tenant"], "")
        self.client_id = client_id or env.get(ENV["client_id"], "")
        self.client_secret = client_secret or env.get(ENV["client_secret"], "")
        self.timeout = _timeout(timeout or env.get(ENV["timeout"]) or (10, 300))

    def missing(self):
        return [k for k in ("site_url", "tenant", "client_id", "client_secret") if not getattr(self, k)]

    def require(self):
        miss = self.missing()
        if miss:
            names = ", ".join(ENV[k] for k in miss)
            raise ValueError(f"Missing SharePoint settings: {names}")
        return self


def client_from_settings(settings: Settings, log=None, on_throttle=None):
    settings.require()
    tokens = TokenProvider(settings.tenant, settings.client_id, settings.client_secret, settings.site_url)
    http = RobustHTTP(
        new_session(),
        get_auth_hdr=tokens.auth_header,
        timeout=settings.timeout,
        refresh_cb_default=tokens.refresh,
        on_throttle=on_throttle,
        log=log,
    )
    return SPClient(settings.site_url, http=http, log=log)
