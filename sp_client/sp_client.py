from __future__ import annotations

from .batch import SPBatch
from .queryable import SharePointQueryable, SharePointQueryableCollection
from .search import SearchSuggest
from .site_groups import WebGroups
from .webs import Web


class SPClient:
    """Entry point: hands out configured queryables rooted at one site."""

    def __init__(self, site_url, *, http, log=None, headers=None):
        self.site_url = site_url.rstrip("/")
        self.RH = http
        self.log = log
        self.headers = dict(headers or {})

    def _configure(self, node):
        return node.configure(http=self.RH, log=self.log, headers=self.headers)

    def web(self) -> Web:
        return self._configure(Web(self.site_url))

    def cross_site_web(self, target_url: str) -> Web:
        """Web of another site, addressed through SP.AppContextSite(@target)."""
        w = self._configure(Web(self.site_url, "_api/SP.AppContextSite(@target)/web"))
        w.query.set("@target", f"'{target_url}'")
        return w

    def queryable(self, path: str, factory=SharePointQueryable):
        return self._configure(factory(self.site_url, path))

    def collection(self, path: str):
        return self.queryable(path, SharePointQueryableCollection)

    def batch(self) -> SPBatch:
        return SPBatch(base_url=self.site_url, http=self.RH, log=self.log)

    def groups(self, web=None) -> WebGroups:
        return WebGroups(web or self.web())

    def suggest(self, query):
        return self._configure(SearchSuggest(self.site_url)).execute(query)
