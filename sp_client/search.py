from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional

from .operations import then
from .queryable import SharePointQueryableInstance

# SuggestQuery field -> query string parameter
SUGGEST_PARAMS = (
    ("count", "inumberofquerysuggestions"),
    ("personal_count", "inumberofresultsuggestions"),
    ("pre_query", "fprequerysuggestions"),
    ("hit_highlighting", "fhithighlighting"),
    ("capitalize", "fcapitalizefirstletters"),
    ("culture", "culture"),
    ("stemming", "enablestemming"),
    ("include_people", "showpeoplenamesuggestions"),
    ("query_rules", "enablequeryrules"),
    ("prefix_match", "fprefixmatchallterms"),
)
SUGGEST_KEYS = ("PeopleNames", "PersonalResults", "Queries")


@dataclass
class SuggestQuery:
    querytext: str
    count: Optional[int] = None
    personal_count: Optional[int] = None
    pre_query: Optional[bool] = None
    hit_highlighting: Optional[bool] = None
    capitalize: Optional[bool] = None
    culture: Optional[str] = None
    stemming: Optional[bool] = None
    include_people: Optional[bool] = None
    query_rules: Optional[bool] = None
    prefix_match: Optional[bool] = None

    @classmethod
    def from_dict(cls, d):
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"unknown suggest options: {', '.join(unknown)}")
        return cls(**d)


def _qs_value(v):
    if isinstance(v, bool):
        return "true" if v else "false"
    return str(v)


class SearchSuggest(SharePointQueryableInstance):
    DEFAULT_PATH = "_api/search/suggest"

    def execute(self, query):
        if isinstance(query, dict):
            query = SuggestQuery.from_dict(query)
        self._map_query(query)
        return then(self.get(), self._map_result)

    def _map_query(self, query: SuggestQuery):
        self.query.set("querytext", f"'{query.querytext}'")
        for attr, param in SUGGEST_PARAMS:
            v = getattr(query, attr)
            if v is not None:
                self.query.set(param, _qs_value(v))

    @staticmethod
    def _map_result(response):
        # verbose payloads nest every list under suggest.<key>.results
        if isinstance(response, dict) and "suggest" in response:
            return {k: (response["suggest"].get(k) or {}).get("results", []) for k in SUGGEST_KEYS}
        return {k: (response or {}).get(k, []) for k in SUGGEST_KEYS}
