"""Console and network capture buffers.

Both buffers are written from the CDP reader thread and read from the tool
thread, so every access goes through a lock. Each buffer carries an epoch:
the session manager bumps it whenever the session is replaced, and writes
tagged with an older epoch are dropped. A late callback from a discarded
connection therefore can never leak into the next session's history.
"""

from __future__ import annotations

import threading
from collections import OrderedDict, deque
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

CONSOLE_LEVELS = ("log", "info", "warn", "error", "debug", "other")

_CDP_LEVELS = {
    "log": "log",
    "info": "info",
    "warning": "warn",
    "warn": "warn",
    "error": "error",
    "debug": "debug",
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def _str(x: Any, *, max_len: int = 2000) -> str:
    try:
        s = str(x)
    except Exception:
        s = "<unstringifiable>"
    if len(s) <= max_len:
        return s
    return s[:max_len] + f"… <truncated len={len(s)}>"


def _remote_obj_to_str(obj: Any) -> str:
    """Best-effort conversion of CDP RemoteObject to short string."""
    if not isinstance(obj, dict):
        return _str(obj)
    for k in ("value", "unserializableValue", "description"):
        if k in obj and obj.get(k) is not None:
            return _str(obj.get(k))
    if obj.get("type") == "undefined":
        return "undefined"
    typ = obj.get("type")
    subtype = obj.get("subtype")
    if subtype == "null":
        return "null"
    return _str(f"<{typ}{('/' + subtype) if subtype else ''}>")


def normalize_level(raw: Any) -> str:
    return _CDP_LEVELS.get(str(raw or "").strip().lower(), "other")


@dataclass(frozen=True, slots=True)
class ConsoleEvent:
    level: str
    text: str
    timestamp: str

    @classmethod
    def from_cdp(cls, params: dict[str, Any]) -> ConsoleEvent:
        """Build from `Runtime.consoleAPICalled` params."""
        args = params.get("args")
        parts = [_remote_obj_to_str(a) for a in args] if isinstance(args, list) else []
        return cls(level=normalize_level(params.get("type")), text=" ".join(parts), timestamp=_now_iso())

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ConsoleBuffer:
    """Bounded, epoch-scoped console log (oldest entries dropped first)."""

    def __init__(self, max_events: int = 1000) -> None:
        self._lock = threading.Lock()
        self._events: deque[ConsoleEvent] = deque(maxlen=max(1, int(max_events)))
        self._epoch = 0

    def record(self, params: dict[str, Any], *, epoch: int) -> bool:
        """Append one console message; returns False when the epoch is stale."""
        event = ConsoleEvent.from_cdp(params if isinstance(params, dict) else {})
        return self.append(event, epoch=epoch)

    def append(self, event: ConsoleEvent, *, epoch: int) -> bool:
        with self._lock:
            if epoch != self._epoch:
                return False
            self._events.append(event)
            return True

    def snapshot(self, level: str | None = None) -> list[ConsoleEvent]:
        with self._lock:
            events = list(self._events)
        if level and level != "all":
            events = [ev for ev in events if ev.level == level]
        return events

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def reset(self, epoch: int) -> None:
        """Empty the buffer and accept writes only for `epoch` from now on."""
        with self._lock:
            self._events.clear()
            self._epoch = epoch

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


@dataclass(slots=True)
class NetworkExchange:
    id: str
    url: str
    method: str
    type: str
    timestamp: str
    request_headers: dict[str, Any] = field(default_factory=dict)
    status: int | None = None
    status_text: str | None = None
    mime_type: str | None = None
    response_headers: dict[str, Any] | None = None
    size: int | None = None
    finished: bool = False
    failed: bool = False
    error_text: str | None = None

    def copy(self) -> NetworkExchange:
        return replace(
            self,
            request_headers=dict(self.request_headers),
            response_headers=dict(self.response_headers) if self.response_headers is not None else None,
        )

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "method": self.method,
            "type": self.type,
            "status": self.status,
            "size": self.size,
            **({"failed": True, "error": self.error_text} if self.failed else {}),
        }


class NetworkLog:
    """Bounded, epoch-scoped log of network exchanges keyed by CDP request id."""

    def __init__(self, max_entries: int = 500) -> None:
        self._lock = threading.Lock()
        self._entries: OrderedDict[str, NetworkExchange] = OrderedDict()
        self._max = max(1, int(max_entries))
        self._epoch = 0

    def ingest(self, event: dict[str, Any], *, epoch: int) -> bool:
        """Apply one raw CDP `Network.*` event message."""
        method = event.get("method") if isinstance(event, dict) else None
        params = event.get("params") if isinstance(event, dict) else None
        if not isinstance(method, str) or not method.startswith("Network.") or not isinstance(params, dict):
            return False
        request_id = params.get("requestId")
        if not isinstance(request_id, str) or not request_id:
            return False

        with self._lock:
            if epoch != self._epoch:
                return False
            if method == "Network.requestWillBeSent":
                self._on_request(request_id, params)
                return True
            entry = self._entries.get(request_id)
            if entry is None:
                return False
            if method == "Network.responseReceived":
                resp = params.get("response") if isinstance(params.get("response"), dict) else {}
                status = resp.get("status")
                entry.status = int(status) if isinstance(status, (int, float)) else None
                entry.status_text = resp.get("statusText") or None
                entry.mime_type = resp.get("mimeType") or None
                headers = resp.get("headers")
                entry.response_headers = dict(headers) if isinstance(headers, dict) else {}
                if isinstance(params.get("type"), str):
                    entry.type = params["type"].lower()
            elif method == "Network.loadingFinished":
                size = params.get("encodedDataLength")
                entry.size = int(size) if isinstance(size, (int, float)) else entry.size
                entry.finished = True
            elif method == "Network.loadingFailed":
                entry.failed = True
                entry.finished = True
                entry.error_text = _str(params.get("errorText") or "failed", max_len=300)
            else:
                return False
            return True

    def _on_request(self, request_id: str, params: dict[str, Any]) -> None:
        req = params.get("request") if isinstance(params.get("request"), dict) else {}
        headers = req.get("headers")
        existing = self._entries.get(request_id)
        if existing is not None and isinstance(params.get("redirectResponse"), dict):
            # Redirect hop: the request id is reused; keep the log ordered by latest hop.
            self._entries.pop(request_id, None)
        self._entries[request_id] = NetworkExchange(
            id=request_id,
            url=_str(req.get("url") or "", max_len=4000),
            method=str(req.get("method") or "GET"),
            type=str(params.get("type") or "other").lower(),
            timestamp=_now_iso(),
            request_headers=dict(headers) if isinstance(headers, dict) else {},
        )
        while len(self._entries) > self._max:
            self._entries.popitem(last=False)

    def snapshot(self, resource_type: str | None = None) -> list[NetworkExchange]:
        with self._lock:
            entries = [e.copy() for e in self._entries.values()]
        if resource_type:
            want = resource_type.strip().lower()
            entries = [e for e in entries if e.type == want]
        return entries

    def get(self, request_id: str) -> NetworkExchange | None:
        with self._lock:
            entry = self._entries.get(request_id)
            return entry.copy() if entry is not None else None

    def pending_count(self) -> int:
        with self._lock:
            return sum(1 for e in self._entries.values() if not e.finished)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def reset(self, epoch: int) -> None:
        with self._lock:
            self._entries.clear()
            self._epoch = epoch

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = [
    "CONSOLE_LEVELS",
    "ConsoleBuffer",
    "ConsoleEvent",
    "NetworkExchange",
    "NetworkLog",
    "normalize_level",
]
