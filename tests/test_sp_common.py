import pytest

from sp_client.errors import CompositionError
from sp_client.sp_common import (
    alias_token,
    combine,
    derive_urls,
    escape_query_str_value,
    extract_web_url,
    is_url_absolute,
    parse_site_url,
)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://contoso.sharepoint.com", True),
        ("HTTP://contoso.sharepoint.com/sites/a", True),
        ("//contoso.sharepoint.com", True),
        ("/sites/a", False),
        ("_api/web", False),
        ("", False),
    ],
)
def test_is_url_absolute(url, expected):
    assert is_url_absolute(url) is expected


def test_combine_normalizes_separators():
    assert combine("https://x/sites/a/", "/_api/web/", "lists") == "https://x/sites/a/_api/web/lists"
    assert combine("a//", "//b") == "a/b"
    assert combine("a\\b", "c") == "a/b/c"


def test_combine_skips_empty_segments():
    assert combine("https://x/sites/a", "") == "https://x/sites/a"
    assert combine("https://x/sites/a", None) == "https://x/sites/a"
    assert combine("", "_api/web") == "_api/web"


def test_derive_absolute_base_is_its_own_parent():
    url, parent = derive_urls("https://x/sites/a", "_api/web")
    assert parent == "https://x/sites/a"
    assert url == "https://x/sites/a/_api/web"


def test_derive_base_without_separator():
    url, parent = derive_urls("web", "lists")
    assert (url, parent) == ("web/lists", "web")
    assert derive_urls("", "_api/search/suggest") == ("_api/search/suggest", "")


def test_derive_grouped_identifier_with_tail():
    base = "_api/web/lists/getByTitle('Docs')/items(19)/fields"
    url, parent = derive_urls(base, "getByInternalNameOrTitle('Title')")
    assert parent == "_api/web/lists/getByTitle('Docs')/items(19)"
    assert url == "_api/web/lists/getByTitle('Docs')/items(19)/fields/getByInternalNameOrTitle('Title')"


def test_derive_grouped_identifier_without_tail():
    base = "_api/web/lists/getByTitle('Docs')/items(19)"
    url, parent = derive_urls(base, "fields")
    assert parent == "_api/web/lists/getByTitle('Docs')/items"
    assert url == "_api/web/lists/getByTitle('Docs')/items(19)/fields"


def test_derive_unclosed_group_fails_at_construction():
    with pytest.raises(CompositionError):
        derive_urls("_api/web/items(19", "fields")


def test_derive_rejects_non_string_base():
    with pytest.raises(CompositionError):
        derive_urls(42, "x")


def test_escape_query_str_value():
    assert escape_query_str_value("O'Brien") == "O%27%27Brien"
    assert escape_query_str_value("a b/c") == "a%20b%2Fc"
    assert escape_query_str_value("") == ""
    assert escape_query_str_value(None) == ""


def test_escape_keeps_alias_prefix():
    assert escape_query_str_value("!@v::i:0#.f") == "!@v::i%3A0%23.f"


def test_alias_token():
    assert alias_token("@v", "jo@contoso.com") == "'!@v::jo%40contoso.com'"
    assert alias_token("n", "Owners") == "'!@n::Owners'"


def test_extract_web_url():
    assert extract_web_url("https://x/sites/a/_api/web/lists?$top=1") == "https://x/sites/a"
    assert extract_web_url("https://x/sites/a/_vti_bin/client.svc") == "https://x/sites/a"
    assert extract_web_url("https://x/sites/a/_api") == "https://x/sites/a"
    assert extract_web_url("https://x/sites/a") == "https://x/sites/a"


def test_parse_site_url():
    assert parse_site_url("https://contoso.sharepoint.com/sites/dev/") == ("contoso.sharepoint.com", "/sites/dev")
    with pytest.raises(CompositionError):
        parse_site_url("sites/dev")
