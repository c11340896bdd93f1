from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

__all__ = ["QueryStore", "ODATA_PARAMS", "PROPAGATED_PARAMS"]

# passed through literally, caller escapes the values
ODATA_PARAMS = ("$select", "$expand", "$filter", "$orderby", "$skip", "$top")

# cross-cutting keys copied onto clones and derived parents
PROPAGATED_PARAMS = ("@target",)


class QueryStore:
    """Query parameters of one node: unique name -> literal string value."""

    def __init__(self, items=None):
        self._items: Dict[str, str] = {}
        if items:
            for k, v in dict(items).items():
                self.set(k, v)

    def set(self, name: str, value) -> "QueryStore":
        self._items[name] = str(value)
        return self

    def get(self, name: str) -> Optional[str]:
        return self._items.get(name)

    def has(self, name: str) -> bool:
        return name in self._items

    def append(self, name: str, value: str, sep: str = ",") -> "QueryStore":
        current = self._items.get(name)
        self._items[name] = f"{current}{sep}{value}" if current else str(value)
        return self

    def copy(self) -> "QueryStore":
        return QueryStore(self._items)

    def copy_propagated_to(self, other: "QueryStore") -> "QueryStore":
        for k in PROPAGATED_PARAMS:
            if k in self._items:
                other.set(k, self._items[k])
        return other

    def to_query_string(self) -> str:
        return "&".join(f"{k}={v}" for k, v in self._items.items())

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._items.items()))

    def __iter__(self):
        return iter(list(self._items))

    def __len__(self):
        return len(self._items)

    def __contains__(self, name):
        return name in self._items

    def __eq__(self, other):
        if isinstance(other, QueryStore):
            return self._items == other._items
        if isinstance(other, dict):
            return self._items == other
        return NotImplemented

    def __repr__(self):
        return f"QueryStore({self._items!r})"
