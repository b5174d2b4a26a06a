from __future__ import annotations

import json
import queue
import threading
from collections.abc import Callable
from typing import Any

import pytest
import websocket

from mcp_servers.brave import session_cdp
from mcp_servers.brave.http_client import HttpClientError
from mcp_servers.brave.session_cdp import CdpConnection


class FakeWebSocket:
    """In-memory stand-in for a websocket-client connection."""

    sock = None

    def __init__(self) -> None:
        self.inbox: queue.Queue[str | None] = queue.Queue()
        self.sent: list[dict[str, Any]] = []
        self.connected = True
        self.responder: Callable[[dict[str, Any]], list[dict[str, Any] | None]] | None = None
        self.connect_kwargs: dict[str, Any] = {}

    def settimeout(self, timeout: float) -> None:
        self.poll = timeout

    def send(self, data: str) -> None:
        msg = json.loads(data)
        self.sent.append(msg)
        if self.responder is not None:
            for reply in self.responder(msg):
                self.push(reply)

    def push(self, message: dict[str, Any] | None) -> None:
        self.inbox.put(None if message is None else json.dumps(message))

    def recv(self) -> str:
        try:
            item = self.inbox.get(timeout=0.05)
        except queue.Empty:
            raise websocket.WebSocketTimeoutException("timed out") from None
        if item is None:
            self.connected = False
            return ""
        return item


@pytest.fixture()
def fake_ws(monkeypatch: pytest.MonkeyPatch) -> FakeWebSocket:
    ws = FakeWebSocket()

    def create_connection(url: str, **kwargs: Any) -> FakeWebSocket:
        ws.connect_kwargs = kwargs
        return ws

    monkeypatch.setattr(session_cdp.websocket, "create_connection", create_connection)
    return ws


@pytest.fixture()
def conn(fake_ws: FakeWebSocket):
    connection = CdpConnection("ws://127.0.0.1:9222/devtools/page/1", timeout=2.0)
    yield connection
    connection.close()


def test_send_matches_response_by_id(fake_ws: FakeWebSocket, conn: CdpConnection) -> None:
    def responder(msg: dict[str, Any]) -> list[dict[str, Any] | None]:
        return [
            {"method": "Runtime.consoleAPICalled", "params": {"type": "log", "args": []}},
            {"id": msg["id"] + 100, "result": {"value": "someone else"}},
            {"id": msg["id"], "result": {"value": msg["method"]}},
        ]

    fake_ws.responder = responder
    assert conn.send("Page.enable") == {"value": "Page.enable"}
    assert conn.send("Runtime.enable", {"x": 1}) == {"value": "Runtime.enable"}
    assert [m["id"] for m in fake_ws.sent] == [1, 2]
    assert "params" not in fake_ws.sent[0]
    assert fake_ws.sent[1]["params"] == {"x": 1}


def test_send_raises_on_cdp_error(fake_ws: FakeWebSocket, conn: CdpConnection) -> None:
    fake_ws.responder = lambda msg: [{"id": msg["id"], "error": {"code": -32000, "message": "Cannot navigate"}}]
    with pytest.raises(HttpClientError, match="Cannot navigate"):
        conn.send("Page.navigate", {"url": "bogus"})


def test_send_times_out(fake_ws: FakeWebSocket, conn: CdpConnection) -> None:
    with pytest.raises(HttpClientError, match=r"timed out \(Runtime.evaluate\)"):
        conn.send("Runtime.evaluate", {"expression": "1"}, timeout=0.1)


def test_subscribers_receive_events_on_reader_thread(fake_ws: FakeWebSocket, conn: CdpConnection) -> None:
    got: list[dict[str, Any]] = []
    wildcard: list[dict[str, Any]] = []
    done = threading.Event()

    def on_console(params: dict[str, Any]) -> None:
        got.append(params)
        done.set()

    unsubscribe = conn.subscribe("Runtime.consoleAPICalled", on_console)
    conn.subscribe("*", wildcard.append)
    # A failing subscriber must not stop delivery.
    conn.subscribe("Runtime.consoleAPICalled", lambda params: 1 / 0)

    fake_ws.push({"method": "Runtime.consoleAPICalled", "params": {"type": "log"}})
    assert done.wait(2.0)
    assert got == [{"type": "log"}]
    assert wildcard[0]["method"] == "Runtime.consoleAPICalled"

    unsubscribe()
    fake_ws.push({"method": "Runtime.consoleAPICalled", "params": {"type": "error"}})
    assert conn.wait_for_event("Runtime.consoleAPICalled", timeout=2.0) == {"type": "log"}
    assert conn.wait_for_event("Runtime.consoleAPICalled", timeout=2.0) == {"type": "error"}
    assert got == [{"type": "log"}]


def test_wait_for_event_and_discard(fake_ws: FakeWebSocket, conn: CdpConnection) -> None:
    fake_ws.push({"method": "Page.loadEventFired", "params": {"timestamp": 1}})
    assert conn.wait_for_event("Page.loadEventFired", timeout=2.0) == {"timestamp": 1}

    fake_ws.push({"method": "Page.loadEventFired", "params": {"timestamp": 2}})
    fake_ws.push({"method": "Page.frameNavigated", "params": {}})
    assert conn.wait_for_event("Page.frameNavigated", timeout=2.0) == {}
    assert conn.discard_events("Page.loadEventFired") == 1
    assert conn.wait_for_event("Page.loadEventFired", timeout=0.1) is None


def test_peer_close_fails_pending_and_later_calls(fake_ws: FakeWebSocket, conn: CdpConnection) -> None:
    fake_ws.responder = lambda msg: [None]
    with pytest.raises(HttpClientError, match="CDP connection closed"):
        conn.send("Runtime.evaluate", {"expression": "1"})
    assert conn.closed
    with pytest.raises(HttpClientError, match="CDP connection closed"):
        conn.send("Runtime.evaluate", {"expression": "1"})


def test_close_stops_reader_and_listeners(fake_ws: FakeWebSocket) -> None:
    connection = CdpConnection("ws://127.0.0.1:9222/devtools/page/1")
    got: list[dict[str, Any]] = []
    connection.subscribe("Runtime.consoleAPICalled", got.append)

    connection.close()

    assert connection.closed
    assert not connection._reader.is_alive()
    fake_ws.push({"method": "Runtime.consoleAPICalled", "params": {"type": "log"}})
    assert got == []
    with pytest.raises(HttpClientError, match="closed by client"):
        connection.send("Runtime.enable")


def test_handshake_omits_origin_header(fake_ws: FakeWebSocket, conn: CdpConnection) -> None:
    assert fake_ws.connect_kwargs == {"timeout": 2.0, "suppress_origin": True}
