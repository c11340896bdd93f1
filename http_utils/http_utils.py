import time, random, email.utils, requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from datetime import datetime, timezone

#status class
CODES = {
    "OK":    {200, 201, 202, 204, 206},
    "RETRY": {408, 425, 429, 500, 502, 503, 504},
    "AUTH":  {401, 403},
}
def is_ok(s): return s in CODES["OK"]
def is_retry(s): return s in CODES["RETRY"]
def is_auth(s): return s in CODES["AUTH"]
def is_success(s): return 200 <= s < 300


class HttpStatusError(RuntimeError):
    """Non-success HTTP status, either for a whole request or a batch part."""

    def __init__(self, status, body="", url="", reason=""):
        self.status = status
        self.body = body or ""
        self.url = url
        self.reason = reason
        snippet = self.body[:512].replace("\n", " ")
        super().__init__(f"HTTP {status} for {url or '<batch part>'}: {snippet!r}")


#Backoff helpers
def _sleep(attempt: int):
    time.sleep((attempt + 1) * 0.8 + random.random() * 0.3)

def _parse_retry_after(header_val):
    if header_val is None:
        return None
    try:
        return float(header_val)  # seconds
    except (TypeError, ValueError):
        try:
            dt = email.utils.parsedate_to_datetime(header_val)
        except (TypeError, ValueError):
            return None
        if dt is None:
            return None
        now = datetime.now(dt.tzinfo or timezone.utc)
        return max(0.0, (dt - now).total_seconds())

def _sleep_with_retry_after(resp, attempt: int):
    ra = _parse_retry_after(resp.headers.get("Retry-After"))
    if ra and ra > 0:
        time.sleep(ra)
    else:
        _sleep(attempt)

# Session factory
def new_session(user_agent="SPQueryable/RestClient"):
    s = requests.Session()
    # connection/read errors only; status codes are handled by RobustHTTP
    retry = Retry(
        total=5,
        connect=5,
        read=5,
        backoff_factor=0.6,
        allowed_methods=None,
        raise_on_status=False,
        respect_retry_after_header=True,
    )
    ad = HTTPAdapter(max_retries=retry, pool_connections=20, pool_maxsize=20)
    s.mount("https://", ad); s.mount("http://", ad)
    s.headers.update({"User-Agent": user_agent})
    return s


class RobustHTTP:
    """Transport used by every queryable: send(method, url, headers, body)."""

    def __init__(self, session, get_auth_hdr=None, timeout=(10, 300), refresh_cb_default=None,
                 on_throttle=None, log=None, max_tries=6):
        self.S = session
        self.get_auth_hdr = get_auth_hdr or (lambda: {})
        self.timeout = timeout
        self.refresh_cb_default = refresh_cb_default
        self.on_throttle = on_throttle
        self.log = log or (lambda msg: None)
        self.max_tries = max_tries

    def _merged_headers(self, headers):
        base = dict(self.get_auth_hdr() or {})
        if headers:
            base.update(headers)
        return base

    def _throttled(self, r):
        code = r.status_code
        self.log(f"[HTTP] throttled status={code} {r.url}")
        if self.on_throttle and code in (429, 502, 503, 504):
            self.on_throttle(code, _parse_retry_after(r.headers.get("Retry-After")))

    def _attempts(self, once, tries):
        """
        Runs up to `tries` attempts. Returns (response, needs_refresh).
        Raises HttpStatusError for a final non-retryable status.
        """
        r = None
        for a in range(tries):
            try:
                r = once()
            except requests.RequestException as e:
                self.log(f"[HTTP] attempt {a + 1} failed: {type(e).__name__}: {e}")
                _sleep(a)
                continue
            code = r.status_code
            if is_ok(code):
                return r, False
            if is_retry(code):
                self._throttled(r)
                _sleep_with_retry_after(r, a)
                continue
            if is_auth(code):
                return r, True
            if is_success(code):
                return r, False  # 2xx outside the OK set
            raise HttpStatusError(code, r.text, r.url, r.reason or "")
        return r, False

    def send(self, method, url, headers=None, body=None, *, refresh_cb=None, max_tries=None):
        """
        Two-phase retry:
          Phase A: try max_tries with current token
          If AUTH encountered: run refresh_cb once
          Phase B: try max_tries with refreshed token
        Anything not OK at the end raises HttpStatusError.
        """
        if refresh_cb is None:
            refresh_cb = self.refresh_cb_default
        tries = max_tries or self.max_tries

        def _once():
            return self.S.request(
                method, url,
                headers=self._merged_headers(headers),
                data=body.encode("utf-8") if isinstance(body, str) else body,
                timeout=self.timeout,
            )

        # Phase A
        r, needs_refresh = self._attempts(_once, tries)
        if r is not None and not needs_refresh and is_success(r.status_code):
            return r

        # Refresh once (if provided)
        if needs_refresh and refresh_cb:
            self.log(f"[HTTP] status={r.status_code}, refreshing token")
            refresh_cb()
            # Phase B
            r, needs_refresh = self._attempts(_once, tries)
            if r is not None and not needs_refresh and is_success(r.status_code):
                return r

        if r is None:
            raise HttpStatusError(0, "", url, f"{method} failed after retries")
        raise HttpStatusError(r.status_code, r.text, url, r.reason or "")

