from __future__ import annotations

import json
from concurrent.futures import Future

from .errors import CompositionError

DEFAULT_HEADERS = {
    "Accept": "application/json;odata=verbose",
}
JSON_CONTENT_TYPE = "application/json;odata=verbose;charset=utf-8"


def parse_payload(status, text):
    """odata payload -> python: d.results, d, value, or the json itself."""
    if status == 204 or not text or not text.strip():
        return {}
    try:
        j = json.loads(text)
    except ValueError:
        return text
    if isinstance(j, dict):
        if "d" in j:
            d = j["d"]
            if isinstance(d, dict) and "results" in d:
                return d["results"]
            return d
        if "value" in j:
            return j["value"]
    return j


def parse_response(r):
    return parse_payload(r.status_code, r.text)


def then(result, fn):
    """Applies fn now, or once a batched Future settles. A Future returned by fn is followed."""
    if not isinstance(result, Future):
        return fn(result)
    out = Future()
    out.set_running_or_notify_cancel()

    def _done(f):
        err = f.exception()
        if err is not None:
            out.set_exception(err)
            return
        try:
            value = fn(f.result())
        except Exception as e:
            out.set_exception(e)
            return
        if isinstance(value, Future):
            value.add_done_callback(_forward)
        else:
            out.set_result(value)

    def _forward(f):
        err = f.exception()
        if err is not None:
            out.set_exception(err)
        else:
            out.set_result(f.result())

    result.add_done_callback(_done)
    return out


def _send(node, method, headers=None, body=None):
    url = node.to_url_and_query()
    hdrs = dict(DEFAULT_HEADERS)
    hdrs.update(node.headers)
    if body is not None:
        hdrs["Content-Type"] = JSON_CONTENT_TYPE
        if not isinstance(body, (str, bytes)):
            body = json.dumps(body)
    if headers:
        hdrs.update(headers)

    if node.batch is not None:
        return node.batch.add(url, method, headers=hdrs, body=body, parser=parse_payload, http=node.http)

    if node.http is None:
        raise CompositionError(f"no transport configured for {url}")
    r = node.http.send(method, url, headers=hdrs, body=body)
    return parse_response(r)


def sp_get(node, headers=None):
    return _send(node, "GET", headers=headers)


def sp_post(node, body=None, headers=None):
    return _send(node, "POST", headers=headers, body=body)


def metadata(type_name: str) -> dict:
    return {"__metadata": {"type": type_name}}
