"""
Diagnostic tools: captured console output, network exchanges and page
performance metrics.

Console and network data come from the session manager's capture buffers;
they cover the current session only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..http_client import HttpClientError
from ..telemetry import CONSOLE_LEVELS
from .base import SmartToolError

if TYPE_CHECKING:
    from ..browser_session import BrowserSession
    from ..session_manager import SessionManager

BODY_PREVIEW_CHARS = 1000

_PERFORMANCE_JS = """
(() => {
    const perf = performance;
    const timing = perf.timing;
    const paint = (name) => { const e = perf.getEntriesByName(name)[0]; return e ? e.startTime : null; };
    return {
        loadTime: timing.loadEventEnd - timing.navigationStart,
        domContentLoaded: timing.domContentLoadedEventEnd - timing.navigationStart,
        firstPaint: paint('first-paint'),
        firstContentfulPaint: paint('first-contentful-paint'),
        domInteractive: timing.domInteractive - timing.navigationStart,
        resourceCount: perf.getEntriesByType('resource').length,
        memory: perf.memory ? {
            usedJSHeapSize: perf.memory.usedJSHeapSize,
            totalJSHeapSize: perf.memory.totalJSHeapSize
        } : null
    };
})()
"""


def console_logs(manager: SessionManager, *, level: str = "all", clear: bool = False) -> dict[str, Any]:
    level = str(level or "all").strip().lower()
    if level != "all" and level not in CONSOLE_LEVELS:
        raise SmartToolError(
            tool="get_console_logs",
            action="validate",
            reason=f"Invalid level: {level}",
            suggestion="Use one of: all, " + ", ".join(CONSOLE_LEVELS),
        )
    logs = [ev.to_dict() for ev in manager.events(None if level == "all" else level)]
    if clear:
        manager.clear_events()
    return {"logs": logs, "count": len(logs)}


def network_requests(manager: SessionManager, *, resource_type: str | None = None) -> dict[str, Any]:
    requests = [ex.summary() for ex in manager.network_exchanges(resource_type or None)]
    return {"requests": requests, "count": len(requests)}


def request_details(session: BrowserSession, manager: SessionManager, request_id: str) -> dict[str, Any]:
    exchange = manager.network_exchange(str(request_id or ""))
    if exchange is None:
        raise SmartToolError(
            tool="get_request_details",
            action="find",
            reason=f"Request not found: {request_id}",
            suggestion="Use an id returned by get_network_requests",
        )

    body_preview: str | None = None
    if exchange.finished and not exchange.failed:
        try:
            body = session.send("Network.getResponseBody", {"requestId": exchange.id})
        except HttpClientError:
            # Bodies are evicted from the browser cache; headers are still useful.
            body = {}
        if body.get("base64Encoded"):
            body_preview = "<binary body>"
        elif isinstance(body.get("body"), str):
            body_preview = body["body"][:BODY_PREVIEW_CHARS]

    return {
        "request": {
            "url": exchange.url,
            "method": exchange.method,
            "headers": exchange.request_headers,
        },
        "response": {
            "status": exchange.status,
            "headers": exchange.response_headers,
            "body_preview": body_preview,
            **({"error": exchange.error_text} if exchange.failed else {}),
        },
    }


def performance_metrics(session: BrowserSession) -> dict[str, Any]:
    return {"metrics": session.eval_js(_PERFORMANCE_JS)}
