"""Low-level CDP WebSocket connection.

One daemon reader thread owns `recv()`. Command responses are matched to
their waiting caller by id; events are queued for `wait_for_event` and fanned
out to subscribers on the reader thread, so console/network capture keeps
running between tool calls.
"""

from __future__ import annotations

import itertools
import json
import socket
import threading
from collections import deque
from collections.abc import Callable
from contextlib import suppress
from typing import Any

import websocket

from .http_client import HttpClientError

EventCallback = Callable[[dict[str, Any]], None]

# Reader wake-up interval; bounds how long close() waits for the thread.
_RECV_POLL = 0.5


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (TimeoutError, websocket.WebSocketTimeoutException)):
        return True
    return "timed out" in str(exc).lower()


class _PendingCall:
    __slots__ = ("done", "error", "result")

    def __init__(self) -> None:
        self.done = threading.Event()
        self.result: dict[str, Any] | None = None
        self.error: str | None = None


class CdpConnection:
    """CDP WebSocket connection with asynchronous event delivery."""

    def __init__(self, ws_url: str, timeout: float = 5.0, *, max_event_queue: int = 2000):
        # Chromium rejects handshakes carrying an Origin not listed in --remote-allow-origins.
        self.ws = websocket.create_connection(ws_url, timeout=timeout, suppress_origin=True)
        self.ws_url = ws_url
        self.timeout = float(timeout)
        self._ids = itertools.count(1)
        self._send_lock = threading.Lock()
        self._pending: dict[int, _PendingCall] = {}
        self._pending_lock = threading.Lock()
        self._listeners: dict[str, list[EventCallback]] = {}
        self._listeners_lock = threading.Lock()
        # Events are kept (bounded) so waits issued after the event still see it.
        self._events: deque[dict[str, Any]] = deque(maxlen=max(1, int(max_event_queue)))
        self._events_cond = threading.Condition()
        self._closed = threading.Event()
        self._close_reason: str | None = None

        with suppress(Exception):
            self.ws.settimeout(_RECV_POLL)
        self._reader = threading.Thread(target=self._read_loop, name="cdp-reader", daemon=True)
        self._reader.start()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    # ─────────────────────────────────────────────────────────────────────────
    # Commands
    # ─────────────────────────────────────────────────────────────────────────

    def send(self, method: str, params: dict[str, Any] | None = None, *, timeout: float | None = None) -> dict[str, Any]:
        """Send a CDP command and wait for its response."""
        if self.closed:
            raise HttpClientError(f"CDP connection closed: {self._close_reason or 'closed'}")

        msg_id = next(self._ids)
        msg: dict[str, Any] = {"id": msg_id, "method": method}
        if params:
            msg["params"] = params

        call = _PendingCall()
        with self._pending_lock:
            self._pending[msg_id] = call
        try:
            try:
                with self._send_lock:
                    self.ws.send(json.dumps(msg))
            except Exception as exc:  # noqa: BLE001
                raise HttpClientError(str(exc)) from exc

            wait = self.timeout if timeout is None else max(0.0, float(timeout))
            if not call.done.wait(wait):
                raise HttpClientError(f"CDP response timed out ({method})")
        finally:
            with self._pending_lock:
                self._pending.pop(msg_id, None)

        if call.error is not None:
            raise HttpClientError(call.error)
        return call.result or {}

    # ─────────────────────────────────────────────────────────────────────────
    # Events
    # ─────────────────────────────────────────────────────────────────────────

    def subscribe(self, method: str, callback: EventCallback) -> Callable[[], None]:
        """Call `callback(params)` on the reader thread for every `method` event.

        `method="*"` receives the full event message instead of params.
        Returns an unsubscribe function.
        """
        with self._listeners_lock:
            self._listeners.setdefault(method, []).append(callback)

        def _unsubscribe() -> None:
            with self._listeners_lock:
                callbacks = self._listeners.get(method) or []
                with suppress(ValueError):
                    callbacks.remove(callback)

        return _unsubscribe

    def discard_events(self, event_name: str) -> int:
        """Drop queued events of one kind (e.g. stale load events before a navigation)."""
        with self._events_cond:
            keep = [ev for ev in self._events if ev.get("method") != event_name]
            dropped = len(self._events) - len(keep)
            self._events.clear()
            self._events.extend(keep)
            return dropped

    def wait_for_event(self, event_name: str, timeout: float = 10.0) -> dict[str, Any] | None:
        """Wait for a specific CDP event; None on timeout or close."""
        with self._events_cond:
            found = self._events_cond.wait_for(
                lambda: self.closed or any(ev.get("method") == event_name for ev in self._events),
                timeout=max(0.0, float(timeout)),
            )
            if not found:
                return None
            return self._pop_locked(event_name)

    def _pop_locked(self, event_name: str) -> dict[str, Any] | None:
        for i, ev in enumerate(self._events):
            if ev.get("method") == event_name:
                del self._events[i]
                params = ev.get("params")
                return params if isinstance(params, dict) else {}
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Reader
    # ─────────────────────────────────────────────────────────────────────────

    def _read_loop(self) -> None:
        reason = "reader stopped"
        while not self._closed.is_set():
            try:
                raw = self.ws.recv()
            except Exception as exc:  # noqa: BLE001
                if _is_timeout(exc):
                    continue
                reason = str(exc) or type(exc).__name__
                break

            if not raw:
                # websocket-client returns an empty frame once the peer has closed.
                if not getattr(self.ws, "connected", True):
                    reason = "connection closed by browser"
                    break
                continue

            try:
                data = json.loads(raw)
            except (TypeError, ValueError):
                continue
            if not isinstance(data, dict):
                continue

            if "id" in data:
                self._resolve(data)
            elif isinstance(data.get("method"), str):
                self._dispatch(data)

        self._shutdown(reason)

    def _resolve(self, data: dict[str, Any]) -> None:
        with self._pending_lock:
            call = self._pending.get(data.get("id"))  # type: ignore[arg-type]
        if call is None:
            return
        if "error" in data:
            err = data["error"]
            call.error = str(err.get("message") or err) if isinstance(err, dict) else str(err)
        else:
            result = data.get("result")
            call.result = result if isinstance(result, dict) else {}
        call.done.set()

    def _dispatch(self, event: dict[str, Any]) -> None:
        with self._events_cond:
            self._events.append(event)
            self._events_cond.notify_all()

        method = event["method"]
        params = event.get("params")
        params = params if isinstance(params, dict) else {}
        with self._listeners_lock:
            specific = list(self._listeners.get(method) or ())
            wildcard = list(self._listeners.get("*") or ())
        for callback in specific:
            with suppress(Exception):
                # Subscribers must never break the reader.
                callback(params)
        for callback in wildcard:
            with suppress(Exception):
                callback(event)

    def _shutdown(self, reason: str) -> None:
        if self._close_reason is None:
            self._close_reason = reason
        self._closed.set()
        with self._pending_lock:
            pending = list(self._pending.values())
        for call in pending:
            if not call.done.is_set():
                call.error = f"CDP connection closed: {self._close_reason}"
                call.done.set()
        with self._events_cond:
            self._events_cond.notify_all()

    # ─────────────────────────────────────────────────────────────────────────
    # Teardown
    # ─────────────────────────────────────────────────────────────────────────

    def abort(self) -> None:
        """Hard break of the underlying socket.

        websocket-client close() takes internal locks and can hang against a
        wedged browser; shutting down the raw socket does not.
        """
        sock = getattr(self.ws, "sock", None)
        if sock is not None:
            with suppress(Exception):
                sock.shutdown(socket.SHUT_RDWR)
            with suppress(Exception):
                sock.close()

    def close(self) -> None:
        """Close the connection; subscribers stop receiving events."""
        if self._close_reason is None:
            self._close_reason = "closed by client"
        self._closed.set()
        with self._listeners_lock:
            self._listeners.clear()
        self.abort()
        if threading.current_thread() is not self._reader:
            self._reader.join(timeout=_RECV_POLL * 2)
        self._shutdown(self._close_reason)


__all__ = ["CdpConnection", "EventCallback"]
