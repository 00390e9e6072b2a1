"""
Tests for utils/http.py — retrying sessions and CSV downloads

No network access: fetch_text is exercised against a stub session.
"""
import sys
import threading
import time
from pathlib import Path

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.http import RetryStrategy, SessionManager, fetch_text, is_remote


class _StubResponse:
    def __init__(self, content: bytes, status: int = 200):
        self.content = content
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class _StubSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def get(self, url, timeout):
        self.calls.append((url, timeout))
        return self.response


# ── RetryStrategy ─────────────────────────────────────────────────────────────

class TestRetryStrategy:
    def test_defaults(self):
        rs = RetryStrategy()
        assert rs.max_retries == 3
        assert rs.backoff_factor == 0.5
        assert 429 in rs.status_forcelist

    def test_retry_object(self):
        retry = RetryStrategy(max_retries=5, backoff_factor=1.0).get_retry_object()
        assert retry.total == 5
        assert retry.backoff_factor == 1.0
        assert "GET" in retry.allowed_methods
        assert 503 in retry.status_forcelist


# ── SessionManager ────────────────────────────────────────────────────────────

class TestSessionManager:
    def test_session_is_cached(self):
        with SessionManager() as sm:
            assert sm.session is sm.session

    def test_adapters_retry(self):
        with SessionManager(RetryStrategy(max_retries=2)) as sm:
            adapter = sm.session.get_adapter("https://example.org/Begroting.csv")
            assert adapter.max_retries.total == 2

    def test_concurrent_first_access_builds_one_session(self, monkeypatch):
        created = []
        original_init = requests.Session.__init__

        def slow_init(session, *args, **kwargs):
            created.append(session)
            time.sleep(0.05)
            original_init(session, *args, **kwargs)

        monkeypatch.setattr(requests.Session, "__init__", slow_init)
        sm = SessionManager()
        barrier = threading.Barrier(3)
        seen = []

        def worker():
            barrier.wait()
            seen.append(sm.session)

        threads = [threading.Thread(target=worker) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        sm.close()
        assert len(created) == 1
        assert len({id(s) for s in seen}) == 1

    def test_close_resets(self):
        sm = SessionManager()
        first = sm.session
        sm.close()
        assert sm.session is not first
        sm.close()


# ── helpers ───────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("location,expected", [
    ("https://example.org/data/Begroting.csv", True),
    ("HTTP://example.org/x.csv", True),
    ("data/Begroting.csv", False),
    ("/srv/data/Misdrijven.csv", False),
])
def test_is_remote(location, expected):
    assert is_remote(location) is expected


def test_fetch_text_strips_bom():
    session = _StubSession(_StubResponse("\ufeffJaar,Begroting\n".encode("utf-8")))
    assert fetch_text(session, "https://example.org/b.csv", timeout=5) == "Jaar,Begroting\n"
    assert session.calls == [("https://example.org/b.csv", 5)]


def test_fetch_text_raises_on_error_status():
    session = _StubSession(_StubResponse(b"", status=404))
    with pytest.raises(requests.HTTPError):
        fetch_text(session, "https://example.org/missing.csv")
