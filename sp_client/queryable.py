from __future__ import annotations

from typing import Callable, Iterable, Optional

from .aliasing import serialize
from .errors import CompositionError
from .operations import metadata, sp_get, sp_post, then
from .query_store import QueryStore
from .sp_common import combine, derive_urls

__all__ = [
    "SharePointQueryable",
    "SharePointQueryableCollection",
    "SharePointQueryableInstance",
]


class SharePointQueryable:
    """
    One addressable REST resource.

    Built either from a string (absolute url, server relative path or
    "collection(id)" style address) or from another queryable, in which case
    the new node is rooted at that node's url and inherits its transport,
    headers, log callback, batch and @target.
    """

    DEFAULT_PATH: Optional[str] = None

    def __init__(self, base_url, path: Optional[str] = None):
        if path is None:
            path = self.DEFAULT_PATH

        self.query = QueryStore()
        self.headers = {}
        self.http = None
        self.batch = None
        self.log = None

        if isinstance(base_url, SharePointQueryable):
            if path is not None and not isinstance(path, str):
                raise CompositionError(f"path must be a string, got {type(path).__name__}")
            self.parent_url = base_url.to_url()
            self.url = combine(self.parent_url, path or "")
            base_url.query.copy_propagated_to(self.query)
            self.configure_from(base_url)
        else:
            self.url, self.parent_url = derive_urls(base_url, path)

    def __repr__(self):
        return f"{type(self).__name__}({self.url!r})"

    # configuration
    def configure(self, *, headers=None, http=None, log=None):
        if headers:
            self.headers.update(headers)
        if http is not None:
            self.http = http
        if log is not None:
            self.log = log
        return self

    def configure_from(self, other: "SharePointQueryable"):
        self.http = other.http
        self.headers = dict(other.headers)
        self.log = other.log
        self.batch = other.batch
        return self

    def in_batch(self, batch):
        self.batch = batch
        return self

    # urls
    def to_url(self) -> str:
        return self.url

    def to_url_and_query(self) -> str:
        return serialize(self.to_url(), self.query, self.log)

    # odata
    def select(self, *selects: str):
        if selects:
            self.query.set("$select", ",".join(selects))
        return self

    def expand(self, *expands: str):
        if expands:
            self.query.set("$expand", ",".join(expands))
        return self

    # actions
    def get(self, headers=None):
        return sp_get(self, headers=headers)

    def default_action(self, headers=None):
        return self.get(headers=headers)

    def __call__(self, headers=None):
        return self.default_action(headers=headers)

    # derivation
    def clone(self, factory: Callable, additional_path: Optional[str] = None, include_batch: bool = True):
        """New node of `factory`'s shape rooted at this node. The source store is untouched."""
        clone = factory(self, additional_path or "")
        if not include_batch:
            clone.batch = None
        self.query.copy_propagated_to(clone.query)
        return clone

    def get_parent(self, factory: Callable, base_url=None, path: Optional[str] = None, batch=None):
        if base_url is None:
            base_url = self.parent_url
        parent = factory(base_url, path).configure_from(self)
        self.query.copy_propagated_to(parent.query)
        if batch is not None:
            parent.in_batch(batch)
        return parent


class SharePointQueryableCollection(SharePointQueryable):
    """A REST collection which can be filtered, paged, ordered and selected."""

    def filter(self, filter: str):
        self.query.set("$filter", filter)
        return self

    def order_by(self, order_by: str, ascending: bool = True):
        # repeated fields are appended again, not deduplicated
        self.query.append("$orderby", f"{order_by} {'asc' if ascending else 'desc'}")
        return self

    def skip(self, skip: int):
        self.query.set("$skip", int(skip))
        return self

    def top(self, top: int):
        self.query.set("$top", int(top))
        return self


class SharePointQueryableInstance(SharePointQueryable):
    """A single REST entity."""

    def _update(self, type_name: str, mapper: Optional[Callable] = None,
                allowed: Optional[Iterable[str]] = None):
        """
        Curries a MERGE update for this entity.

        The returned function takes the changed properties, checks them
        against `allowed` (when given), posts them with the `type_name`
        discriminator and returns mapper(data, props).
        """
        if not type_name:
            raise CompositionError("update needs a type discriminator")
        allowed = frozenset(allowed) if allowed is not None else None

        def _do(props):
            props = dict(props or {})
            if "__metadata" in props:
                raise CompositionError("__metadata is set from the type discriminator")
            if allowed is not None:
                unknown = sorted(set(props) - allowed)
                if unknown:
                    raise CompositionError(f"unknown properties for {type_name}: {', '.join(unknown)}")
            body = metadata(type_name)
            body.update(props)
            res = sp_post(self, body=body, headers={"X-HTTP-Method": "MERGE", "IF-Match": "*"})
            return then(res, lambda d: mapper(d, props) if mapper else d)

        return _do

    def delete(self, etag: str = "*"):
        return sp_post(self, headers={"X-HTTP-Method": "DELETE", "IF-Match": etag})
