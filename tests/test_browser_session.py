from __future__ import annotations

from typing import Any

import pytest

from mcp_servers.brave.browser_session import BrowserSession, JavaScriptError
from mcp_servers.brave.http_client import HttpClientError


class DummyConn:
    closed = False

    def __init__(self, replies: dict[str, Any] | None = None) -> None:
        self.replies = replies or {}
        self.calls: list[tuple[str, dict[str, Any] | None]] = []
        self.discarded: list[str] = []
        self.load_event: dict[str, Any] | None = {"timestamp": 1.0}

    def send(self, method: str, params: dict[str, Any] | None = None, *, timeout: float | None = None) -> Any:
        self.calls.append((method, params))
        reply = self.replies.get(method, {})
        if isinstance(reply, Exception):
            raise reply
        return reply(params) if callable(reply) else reply

    def discard_events(self, name: str) -> int:
        self.discarded.append(name)
        return 0

    def wait_for_event(self, name: str, timeout: float = 10.0) -> dict[str, Any] | None:
        return self.load_event

    def methods(self) -> list[str]:
        return [m for m, _ in self.calls]


def test_eval_js_awaits_promises_by_value() -> None:
    conn = DummyConn({"Runtime.evaluate": {"result": {"type": "number", "value": 123}}})
    session = BrowserSession(conn, port=9222)
    assert session.eval_js("1 + 2") == 123
    params = conn.calls[0][1] or {}
    assert params.get("awaitPromise") is True
    assert params.get("returnByValue") is True


def test_eval_js_maps_undefined_and_null_to_none() -> None:
    session = BrowserSession(DummyConn({"Runtime.evaluate": {"result": {"type": "undefined"}}}), port=9222)
    assert session.eval_js("void 0") is None
    session = BrowserSession(DummyConn({"Runtime.evaluate": {"result": {"type": "object", "subtype": "null"}}}), port=9222)
    assert session.eval_js("null") is None


def test_eval_js_raises_on_page_exception() -> None:
    reply = {
        "result": {"type": "object", "subtype": "error"},
        "exceptionDetails": {"text": "Uncaught", "exception": {"description": "ReferenceError: nope is not defined"}},
    }
    session = BrowserSession(DummyConn({"Runtime.evaluate": reply}), port=9222)
    with pytest.raises(JavaScriptError, match="ReferenceError"):
        session.eval_js("nope")


def test_enable_domains_once_and_lenient_mode() -> None:
    conn = DummyConn({"Network.enable": HttpClientError("not supported")})
    session = BrowserSession(conn, port=9222)
    session.enable_domains("Runtime", "Network", strict=False)
    session.enable_domains("Runtime")
    assert conn.methods() == ["Runtime.enable", "Network.enable"]
    with pytest.raises(HttpClientError, match="Network.enable"):
        session.enable_domains("Network")


def test_navigate_waits_for_fresh_load_event() -> None:
    conn = DummyConn({"Page.navigate": {"frameId": "f"}})
    session = BrowserSession(conn, port=9222)
    assert session.navigate("https://example.com") is True
    assert conn.discarded == ["Page.loadEventFired"]
    assert ("Page.navigate", {"url": "https://example.com"}) in conn.calls

    conn.load_event = None
    assert session.navigate("https://example.com/slow") is False


def test_navigate_error_text_raises() -> None:
    conn = DummyConn({"Page.navigate": {"errorText": "net::ERR_NAME_NOT_RESOLVED"}})
    with pytest.raises(HttpClientError, match="ERR_NAME_NOT_RESOLVED"):
        BrowserSession(conn, port=9222).navigate("https://nope.invalid")


def test_history_step_uses_navigation_history() -> None:
    conn = DummyConn(
        {
            "Page.getNavigationHistory": {
                "currentIndex": 1,
                "entries": [{"id": 10, "url": "https://a.test/"}, {"id": 11, "url": "https://b.test/"}],
            },
            "Runtime.evaluate": {"result": {"type": "string", "value": "https://a.test/"}},
        }
    )
    assert BrowserSession(conn, port=9222).go_back() == "https://a.test/"
    assert ("Page.navigateToHistoryEntry", {"entryId": 10}) in conn.calls


def test_click_moves_then_presses_and_releases() -> None:
    conn = DummyConn()
    BrowserSession(conn, port=9222).click(10, 20)
    types = [p["type"] for m, p in conn.calls if m == "Input.dispatchMouseEvent"]
    assert types == ["mouseMoved", "mousePressed", "mouseReleased"]


def test_type_text_falls_back_to_char_events() -> None:
    conn = DummyConn({"Input.insertText": HttpClientError("'Input.insertText' wasn't found")})
    BrowserSession(conn, port=9222).type_text("hi")
    chars = [p["text"] for m, p in conn.calls if m == "Input.dispatchKeyEvent"]
    assert chars == ["h", "i"]


def test_full_page_screenshot_clips_to_content_size() -> None:
    conn = DummyConn(
        {
            "Page.getLayoutMetrics": {"cssContentSize": {"width": 800, "height": 3000}},
            "Page.captureScreenshot": {"data": "iVBORw0KGgo="},
        }
    )
    assert BrowserSession(conn, port=9222).screenshot(full_page=True) == "iVBORw0KGgo="
    params = conn.calls[-1][1] or {}
    assert params["captureBeyondViewport"] is True
    assert params["clip"] == {"x": 0, "y": 0, "width": 800, "height": 3000, "scale": 1}
