from sp_client.aliasing import serialize
from sp_client.query_store import QueryStore


def test_two_aliases_become_labels_and_one_query_string():
    q = QueryStore({"$select": "Id"})
    url = serialize("https://x/_api/web/siteusers/getByLoginName('!@u::jo')/groups/getByName('!@v::Owners')", q)
    assert url == "https://x/_api/web/siteusers/getByLoginName(@u)/groups/getByName(@v)?$select=Id&@u='jo'&@v='Owners'"


def test_existing_query_marker_uses_ampersand():
    url = serialize("u/getByName('!@v::a')?$top=1", QueryStore())
    assert url == "u/getByName(@v)?$top=1&@v='a'"


def test_no_aliases_no_params_leaves_url():
    assert serialize("https://x/_api/web", QueryStore()) == "https://x/_api/web"


def test_store_is_not_mutated():
    q = QueryStore({"$top": "1"})
    serialize("u('!@v::a')", q)
    assert q == {"$top": "1"}


def test_replacement_text_is_not_rescanned():
    # the value looks like another token once unwrapped; it must stay as data
    url = serialize("u('!@a::!@b::c')", QueryStore())
    assert url == "u(@a)?@a='!@b::c'"


def test_log_receives_diagnostic():
    seen = []
    serialize("u('!@v::a')", QueryStore(), seen.append)
    assert len(seen) == 1
    assert seen[0].startswith("[ALIAS]")
    assert "@v" in seen[0]
