from __future__ import annotations

import re
from urllib.parse import quote, urlparse

from .errors import CompositionError

_ABSOLUTE = re.compile(r"^https?://|^//", re.I)
_EDGE_SEP = re.compile(r"^[\\/]+|[\\/]+$")
_ALIAS_PREFIX = re.compile(r"^!(@.*?)::(.*)$", re.I)


def is_url_absolute(url: str) -> bool:
    return bool(_ABSOLUTE.match(url or ""))


def combine(*paths) -> str:
    """Joins url parts with exactly one "/" between them, skipping empty parts."""
    parts = []
    for p in paths:
        if not p:
            continue
        p = _EDGE_SEP.sub("", str(p))
        if p:
            parts.append(p)
    return "/".join(parts).replace("\\", "/")


def derive_urls(base: str, path: str | None = None):
    """
    Returns (url, parent_url) for a string base.
      https://x/sites/a          -> parent is the base itself
      .../items(19)/fields       -> parent is everything before the last "/"
      .../items(19)              -> parent is everything before the last "("
    """
    if not isinstance(base, str):
        raise CompositionError(f"base url must be a string, got {type(base).__name__}")
    if path is not None and not isinstance(path, str):
        raise CompositionError(f"path must be a string, got {type(path).__name__}")

    slash = base.rfind("/")
    group = base.rfind("(")

    if is_url_absolute(base) or slash < 0:
        return combine(base, path), base

    if slash > group:
        parent = base[:slash]
        return combine(parent, combine(base[slash:], path)), parent

    if base.find(")", group) < 0:
        raise CompositionError(f"unclosed group in base url: {base!r}")
    return combine(base, path), base[:group]


def extract_web_url(url: str) -> str:
    """Web url of a REST address: everything before /_api/ or /_vti_bin/."""
    if not url:
        return ""
    lowered = url.lower()
    for marker in ("/_api/", "/_vti_bin/"):
        i = lowered.find(marker)
        if i > -1:
            return url[:i]
    for marker in ("/_api", "/_vti_bin"):
        if lowered.endswith(marker):
            return url[:-len(marker)]
    return url


def escape_query_str_value(value) -> str:
    """Doubles single quotes and percent-encodes; an alias prefix is preserved."""
    if value is None or value == "":
        return ""
    value = str(value)
    m = _ALIAS_PREFIX.match(value)
    if m:
        label, inner = m.groups()
        inner = quote(inner.replace("'", "''"), safe="")
        return f"!{label}::{inner}"
    return quote(value.replace("'", "''"), safe="")


def alias_token(label: str, value) -> str:
    """'!@label::value' with the value escaped, ready to embed in a path segment."""
    if not label.startswith("@"):
        label = "@" + label
    return f"'!{label}::{escape_query_str_value(value)}'"


def parse_site_url(url: str):
    u = urlparse(url)
    host = u.netloc
    path = u.path or "/"
    if not host:
        raise CompositionError("Invalid SharePoint site URL (missing host)")
    return host, path.rstrip("/")
