import pytest

from sp_client import Web

SITE = "https://contoso.sharepoint.com/sites/dev"


class FakeResponse:
    def __init__(self, status_code=200, text="", headers=None, url="", reason="OK"):
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}
        self.url = url
        self.reason = reason


class FakeHTTP:
    """Records send() calls and replays queued responses (or raises queued errors)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)
        return self

    def send(self, method, url, headers=None, body=None):
        self.calls.append({"method": method, "url": url, "headers": dict(headers or {}), "body": body})
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


def batch_response(*parts, boundary="batchresponse_8ad6e0e3"):
    """parts: (status, reason, body[, content_id])"""
    lines = []
    for part in parts:
        status, reason, body = part[:3]
        cid = part[3] if len(part) > 3 else None
        lines.append(f"--{boundary}")
        lines.append("Content-Type: application/http")
        lines.append("Content-Transfer-Encoding: binary")
        if cid is not None:
            lines.append(f"Content-ID: {cid}")
        lines.append("")
        lines.append(f"HTTP/1.1 {status} {reason}")
        lines.append("CONTENT-TYPE: application/json;odata=verbose;charset=utf-8")
        lines.append("")
        lines.append(body)
    lines.append(f"--{boundary}--")
    return "\r\n".join(lines) + "\r\n"


@pytest.fixture
def http():
    return FakeHTTP()


@pytest.fixture
def web(http):
    return Web(SITE).configure(http=http)
