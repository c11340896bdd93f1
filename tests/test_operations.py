from concurrent.futures import Future

import pytest

from sp_client.operations import metadata, parse_payload, then


@pytest.mark.parametrize(
    "status,text,expected",
    [
        (204, "", {}),
        (200, "", {}),
        (200, '{"d": {"results": [1, 2]}}', [1, 2]),
        (200, '{"d": {"Title": "x"}}', {"Title": "x"}),
        (200, '{"value": [{"a": 1}]}', [{"a": 1}]),
        (200, '{"a": 1}', {"a": 1}),
        (200, "plain text", "plain text"),
    ],
)
def test_parse_payload(status, text, expected):
    assert parse_payload(status, text) == expected


def test_then_applies_immediately_for_plain_values():
    assert then(2, lambda x: x * 10) == 20


def test_then_chains_futures():
    src = Future()
    out = then(src, lambda x: x + 1)
    assert not out.done()
    src.set_result(1)
    assert out.result() == 2


def test_then_forwards_errors():
    src = Future()
    out = then(src, lambda x: x)
    err = RuntimeError("boom")
    src.set_exception(err)
    assert out.exception() is err


def test_then_captures_mapper_errors():
    src = Future()
    out = then(src, lambda x: x["missing"])
    src.set_result({})
    assert isinstance(out.exception(), KeyError)


def test_metadata():
    assert metadata("SP.Group") == {"__metadata": {"type": "SP.Group"}}


def test_then_follows_future_returned_by_mapper():
    first, second = Future(), Future()
    out = then(first, lambda _: second)
    first.set_result("ignored")
    assert not out.done()
    second.set_result({"ok": True})
    assert out.result() == {"ok": True}


def test_then_forwards_error_of_followed_future():
    first, second = Future(), Future()
    out = then(first, lambda _: second)
    first.set_result(None)
    err = RuntimeError("second failed")
    second.set_exception(err)
    assert out.exception() is err
