from __future__ import annotations

from typing import Any

import pytest

from mcp_servers.brave import probe as probe_module
from mcp_servers.brave.http_client import HttpClientError
from mcp_servers.brave.probe import ProbeResult, probe


class DummyConn:
    def __init__(self, ws_url: str, timeout: float) -> None:
        self.ws_url = ws_url
        self.timeout = timeout


def test_probe_connects_to_first_page_target(monkeypatch: pytest.MonkeyPatch) -> None:
    urls: list[str] = []

    def fake_get(url: str, timeout: float = 2.0, *, method: str = "GET") -> Any:
        urls.append(url)
        return [
            {"id": "sw", "type": "service_worker", "webSocketDebuggerUrl": "ws://x/sw"},
            {"id": "ext", "type": "page", "url": "chrome-extension://abc/bg.html", "webSocketDebuggerUrl": "ws://x/e"},
            {"id": "p1", "type": "page", "url": "https://example.com", "webSocketDebuggerUrl": "ws://x/p1"},
        ]

    monkeypatch.setattr(probe_module, "http_get_json", fake_get)
    result = probe(9222, timeout=1.5, connect=DummyConn)

    assert result.ok
    assert result.port == 9222
    assert result.target_id == "p1"
    assert result.connection.ws_url == "ws://x/p1"
    assert result.connection.timeout == 1.5
    assert urls == ["http://127.0.0.1:9222/json/list"]


def test_probe_opens_blank_tab_when_no_page(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, str]] = []

    def fake_get(url: str, timeout: float = 2.0, *, method: str = "GET") -> Any:
        calls.append((method, url))
        if url.endswith("/json/list"):
            return []
        return {"id": "new", "type": "page", "webSocketDebuggerUrl": "ws://x/new"}

    monkeypatch.setattr(probe_module, "http_get_json", fake_get)
    result = probe(9333, host="localhost", connect=DummyConn)

    assert result.ok
    assert result.target_id == "new"
    assert calls[1] == ("PUT", "http://localhost:9333/json/new?about:blank")


def test_probe_nothing_listening_is_failure_value(monkeypatch: pytest.MonkeyPatch) -> None:
    def refused(url: str, timeout: float = 2.0, *, method: str = "GET") -> Any:
        raise HttpClientError("<urlopen error [Errno 111] Connection refused>")

    monkeypatch.setattr(probe_module, "http_get_json", refused)
    result = probe(9222, connect=DummyConn)

    assert result == ProbeResult.failure(9222, "<urlopen error [Errno 111] Connection refused>")
    assert not result.ok
    assert result.connection is None


def test_probe_websocket_failure_is_failure_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        probe_module,
        "http_get_json",
        lambda url, timeout=2.0, method="GET": [{"id": "p", "type": "page", "webSocketDebuggerUrl": "ws://x/p"}],
    )

    def broken_connect(ws_url: str, timeout: float) -> Any:
        raise ConnectionResetError()

    result = probe(9222, connect=broken_connect)
    assert not result.ok
    assert result.error == "ConnectionResetError"


def test_probe_without_debugger_url_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(probe_module, "http_get_json", lambda url, timeout=2.0, method="GET": {})
    result = probe(9222, connect=DummyConn)
    assert not result.ok
    assert "No debuggable page target" in (result.error or "")
