from __future__ import annotations

import re
import uuid
from concurrent.futures import Future

from .errors import BatchMisuseError, BatchResponseError, HttpStatusError
from .operations import parse_payload
from .sp_common import combine, extract_web_url, is_url_absolute

OPEN = "open"
EXECUTING = "executing"
COMPLETED = "completed"
FAILED = "failed"

_STATUS_LINE = re.compile(r"^HTTP/[0-9.]+ +([0-9]+) *(.*)$", re.I)
_RESPONSE_BOUNDARY = re.compile(r"^--(batchresponse|changesetresponse)_", re.I)


class BatchRequest:
    __slots__ = ("index", "url", "method", "headers", "body", "parser", "future")

    def __init__(self, index, url, method, headers, body, parser, future):
        self.index = index
        self.url = url
        self.method = method.upper()
        self.headers = dict(headers or {})
        self.body = body
        self.parser = parser or parse_payload
        self.future = future


class SPBatch:
    """
    Collects requests and sends them as one $batch call.

    add() hands back a Future per request; execute() (only once) posts the
    multipart body and settles every Future in registration order.
    """

    def __init__(self, base_url=None, http=None, log=None):
        self.base_url = base_url
        self.http = http
        self.log = log or (lambda msg: None)
        self.batch_id = str(uuid.uuid4())
        self.state = OPEN
        self._requests = []

    def __len__(self):
        return len(self._requests)

    @property
    def requests(self):
        return tuple(self._requests)

    def add(self, url, method="GET", headers=None, body=None, parser=None, http=None) -> Future:
        if self.state != OPEN:
            raise BatchMisuseError(f"batch {self.batch_id} is {self.state}; no more requests can be added")
        if self.http is None:
            self.http = http
        fut = Future()
        fut.set_running_or_notify_cancel()
        self._requests.append(BatchRequest(len(self._requests), url, method, headers, body, parser, fut))
        return fut

    def execute(self):
        if self.state != OPEN:
            raise BatchMisuseError(f"batch {self.batch_id} already {self.state}")
        self.state = EXECUTING
        pending = list(self._requests)
        if not pending:
            self.log(f"[BATCH] {self.batch_id} has no requests")
            self.state = COMPLETED
            return

        try:
            if self.http is None:
                raise BatchMisuseError(f"batch {self.batch_id} has no transport")
            base = self.base_url or extract_web_url(pending[0].url)
            self.log(f"[BATCH] executing {self.batch_id} with {len(pending)} requests against {base}")
            r = self.http.send(
                "POST", combine(base, "_api/$batch"),
                headers={"Content-Type": f"multipart/mixed; boundary=batch_{self.batch_id}"},
                body=self.build_body(pending, base),
            )
            parts = parse_batch_response(r.text, len(pending))
        except Exception as e:
            self.state = FAILED
            self.log(f"[BATCH] {self.batch_id} failed: {type(e).__name__}: {e}")
            for req in pending:
                req.future.set_exception(e)
            raise

        for req, (status, reason, text) in zip(pending, parts):
            if status >= 400:
                req.future.set_exception(HttpStatusError(status, text, req.url, reason))
            else:
                req.future.set_result(req.parser(status, text))
        self.state = COMPLETED
        self.log(f"[BATCH] {self.batch_id} completed")

    def build_body(self, pending, base):
        out = []
        changeset = None
        for req in pending:
            if req.method == "GET":
                if changeset:
                    out.append(f"--changeset_{changeset}--\r\n\r\n")
                    changeset = None
                out.append(f"--batch_{self.batch_id}\r\n")
            else:
                if not changeset:
                    changeset = str(uuid.uuid4())
                    out.append(f"--batch_{self.batch_id}\r\n")
                    out.append(f'Content-Type: multipart/mixed; boundary="changeset_{changeset}"\r\n\r\n')
                out.append(f"--changeset_{changeset}\r\n")

            out.append("Content-Type: application/http\r\n")
            out.append("Content-Transfer-Encoding: binary\r\n")
            out.append(f"Content-ID: {req.index + 1}\r\n\r\n")

            url = req.url if is_url_absolute(req.url) else combine(base, req.url)
            method = req.method
            headers = {"Accept": "application/json;"}
            for k, v in req.headers.items():
                if k.lower() == "x-http-method":
                    if method != "GET":
                        method = v
                    continue
                headers[k] = v
            if method != "GET" and req.body is not None:
                headers.setdefault("Content-Type", "application/json;odata=verbose;charset=utf-8")

            out.append(f"{method} {url} HTTP/1.1\r\n")
            for k, v in headers.items():
                out.append(f"{k}: {v}\r\n")
            out.append("\r\n")
            if req.body is not None:
                body = req.body.decode("utf-8") if isinstance(req.body, bytes) else req.body
                out.append(f"{body}\r\n\r\n")

        if changeset:
            out.append(f"--changeset_{changeset}--\r\n\r\n")
        out.append(f"--batch_{self.batch_id}--\r\n")
        return "".join(out)


def _header(line):
    name, _, value = line.partition(":")
    return name.strip().lower(), value.strip()


def parse_batch_response(text, expected):
    """
    Splits a $batch response into [(status, reason, body)], one per request.
    Parts carrying a Content-ID are placed at that (1-based) index.
    """
    parts = []
    state = "boundary"
    cur = None

    def _finish():
        cur["body"] = "\n".join(cur["lines"]).strip()
        parts.append(cur)

    for i, raw in enumerate((text or "").split("\n")):
        line = raw.rstrip("\r")

        if state == "body":
            if _RESPONSE_BOUNDARY.match(line):
                _finish()
                state = "boundary"
            else:
                cur["lines"].append(line)
                continue

        if state == "boundary":
            if _RESPONSE_BOUNDARY.match(line):
                if line.rstrip().endswith("--"):
                    continue
                cur = {"content_id": None, "container": False, "lines": []}
                state = "part_headers"
            elif line.strip():
                raise BatchResponseError(f"Invalid batch response, line {i}: {line[:120]!r}")
        elif state == "part_headers":
            if not line.strip():
                state = "boundary" if cur["container"] else "status"
                continue
            name, value = _header(line)
            if name == "content-type" and value.lower().startswith("multipart/"):
                cur["container"] = True
            elif name == "content-id":
                cur["content_id"] = value
        elif state == "status":
            if not line.strip():
                continue
            m = _STATUS_LINE.match(line)
            if not m:
                raise BatchResponseError(f"Invalid status line in batch response, line {i}: {line[:120]!r}")
            cur["status"] = int(m.group(1))
            cur["reason"] = m.group(2).strip()
            state = "http_headers"
        elif state == "http_headers":
            if not line.strip():
                state = "body"
                continue
            name, value = _header(line)
            if name == "content-id" and cur["content_id"] is None:
                cur["content_id"] = value

    if state == "body":
        _finish()

    if len(parts) != expected:
        raise BatchResponseError(
            f"Could not match batch responses to requests: got {len(parts)} responses for {expected} requests"
        )

    ids = [p["content_id"] for p in parts]
    if all(x is not None and x.isdigit() for x in ids) and sorted(int(x) for x in ids) == list(range(1, expected + 1)):
        parts.sort(key=lambda p: int(p["content_id"]))

    return [(p["status"], p["reason"], p["body"]) for p in parts]
