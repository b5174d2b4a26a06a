"""Single-attempt connection probe against a CDP debugging port.

Probe failures are expected (nothing listening yet, browser still starting),
so they come back as a `ProbeResult` value instead of an exception. The
session manager's retry loop branches on `result.ok`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from .http_client import http_get_json
from .session_cdp import CdpConnection

ConnectFunc = Callable[[str, float], Any]


@dataclass(frozen=True)
class ProbeResult:
    port: int
    ok: bool
    connection: Any | None = None
    target_id: str = ""
    error: str | None = None

    @classmethod
    def success(cls, port: int, connection: Any, target_id: str = "") -> ProbeResult:
        return cls(port=port, ok=True, connection=connection, target_id=target_id)

    @classmethod
    def failure(cls, port: int, error: str) -> ProbeResult:
        return cls(port=port, ok=False, error=error)


def _pick_page_target(targets: Any) -> dict[str, Any] | None:
    if not isinstance(targets, list):
        return None
    for target in targets:
        if not isinstance(target, dict) or target.get("type") != "page":
            continue
        url = str(target.get("url") or "")
        # Internal pages (settings, new-tab extension pages) reject most page-level commands.
        if url.startswith(("devtools://", "chrome-extension://")):
            continue
        if target.get("webSocketDebuggerUrl"):
            return target
    return None


def _default_connect(ws_url: str, timeout: float) -> CdpConnection:
    return CdpConnection(ws_url, timeout=timeout)


def probe(
    port: int,
    *,
    host: str = "127.0.0.1",
    timeout: float = 2.0,
    connect: ConnectFunc | None = None,
) -> ProbeResult:
    """Try exactly once to open a page-level CDP connection on `port`."""
    connect = connect or _default_connect
    base = f"http://{host}:{port}"
    try:
        target = _pick_page_target(http_get_json(f"{base}/json/list", timeout=timeout))
        if target is None:
            created = http_get_json(f"{base}/json/new?{quote('about:blank', safe=':')}", timeout=timeout, method="PUT")
            target = created if isinstance(created, dict) else None
        ws_url = (target or {}).get("webSocketDebuggerUrl")
        if not ws_url:
            return ProbeResult.failure(port, f"No debuggable page target on port {port}")
        connection = connect(str(ws_url), timeout)
    except Exception as exc:  # noqa: BLE001
        return ProbeResult.failure(port, str(exc) or type(exc).__name__)
    return ProbeResult.success(port, connection, str(target.get("id") or ""))


__all__ = ["ProbeResult", "probe"]
