from __future__ import annotations

import re

from .query_store import QueryStore

ALIAS_TOKEN = re.compile(r"'!(@.*?)::(.*?)'", re.I)


def serialize(raw_url: str, query: QueryStore, log=None) -> str:
    """
    Final url for a request. Alias tokens ('!@label::value') are replaced by
    their bare label and re-added as label='value' query parameters, merged
    after the node's own parameters. One left-to-right pass; replacement
    text is never scanned again. `query` is not modified.
    """
    aliased = query.copy()

    def _rewrite(m):
        label, value = m.group(1), m.group(2)
        if log:
            log(f"[ALIAS] rewriting {m.group(0)} to label: {label} value: {value}")
        aliased.set(label, f"'{value}'")
        return label

    url = ALIAS_TOKEN.sub(_rewrite, raw_url)

    if len(aliased) > 0:
        sep = "&" if "?" in url else "?"
        url += sep + aliased.to_query_string()
    return url
