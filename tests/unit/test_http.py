from __future__ import annotations

import pytest
import requests

from ipintel.common.errors import SourceUnavailableError
from ipintel.common.http import HttpClient, HttpRequestError, RetryConfig, RetryableHttpError, TimeoutConfig


class FakeResponse:
    def __init__(self, status_code: int, payload=None, raises_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._raises_json = raises_json

    def json(self):
        if self._raises_json:
            raise ValueError("bad json")
        return self._payload


def test_http_get_json_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    calls = []

    def fake_request(**kwargs):
        calls.append(kwargs)
        return FakeResponse(200, {"ok": True})

    monkeypatch.setattr(client.session, "request", fake_request)
    payload = client.get_json(
        "https://example.com",
        params={"fields": "query"},
        timeout=TimeoutConfig(connect=1, read=2),
    )

    assert payload == {"ok": True}
    assert calls[0]["timeout"] == (1, 2)
    assert calls[0]["params"] == {"fields": "query"}
    assert calls[0]["headers"]["Accept"] == "application/json"


def test_http_retryable_status_raises_retryable_error(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503, {"x": 1}))

    with pytest.raises(RetryableHttpError):
        client.get_json("https://example.com")


def test_http_client_error_is_source_unavailable(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(404, {}))

    with pytest.raises(SourceUnavailableError):
        client.get_json("https://example.com")


def test_http_invalid_json_raises(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, raises_json=True))

    with pytest.raises(HttpRequestError):
        client.get_json("https://example.com")


def test_http_timeout_is_wrapped(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))

    def time_out(**_kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr(client.session, "request", time_out)

    with pytest.raises(RetryableHttpError):
        client.get_json("https://example.com")


def test_http_single_attempt_by_default(monkeypatch):
    client = HttpClient()
    attempts = []

    def flaky(**_kwargs):
        attempts.append(1)
        return FakeResponse(503)

    monkeypatch.setattr(client.session, "request", flaky)

    with pytest.raises(RetryableHttpError):
        client.get_json("https://example.com")
    assert len(attempts) == 1


def test_http_retries_when_configured(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=2, multiplier=0.0, max_wait=0.0))
    responses = [FakeResponse(503), FakeResponse(200, {"ok": True})]
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: responses.pop(0))

    assert client.get_json("https://example.com") == {"ok": True}
