from __future__ import annotations

import json

import msal

from .sp_common import parse_site_url


class TokenProvider:
    """App-only tokens for a SharePoint host, cached until refresh() is called."""

    def __init__(self, tenant, client_id, client_credential, site_url, *, app_factory=None):
        self.TENANT = tenant
        self.CLIENT = client_id
        self.CREDENTIAL = client_credential
        host, _ = parse_site_url(site_url)
        self.scopes = [f"https://{host}/.default"]
        self._app_factory = app_factory or msal.ConfidentialClientApplication
        self._app = None
        self._T = None

    def _application(self):
        if self._app is None:
            self._app = self._app_factory(
                self.CLIENT,
                authority=f"https://login.microsoftonline.com/{self.TENANT}",
                client_credential=self.CREDENTIAL,
            )
        return self._app

    def token(self):
        if self._T is None:
            r = self._application().acquire_token_for_client(scopes=self.scopes)
            if "access_token" not in r:
                raise RuntimeError(json.dumps(r, indent=2))
            self._T = r["access_token"]
        return self._T

    def refresh(self):
        self._T = None
        return self.token()

    def auth_header(self):
        return {"Authorization": f"Bearer {self.token()}"}
