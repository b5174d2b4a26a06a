"""
Navigation and JavaScript tools.

Provides:
- navigate_to / reload_page / go_back / go_forward / current_url
- evaluate: run a script in the page
- wait_for_selector / wait_for_navigation: bounded polling waits
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Any

from ..browser_session import BrowserSession, JavaScriptError
from ..http_client import HttpClientError
from .base import SmartToolError, clamp_int, require_selector

POLL_INTERVAL = 0.1
# Network must stay quiet this long before a navigation counts as settled.
IDLE_WINDOW = 0.5


def navigate_to(session: BrowserSession, url: str, *, timeout: float = 10.0) -> dict[str, Any]:
    """Navigate to a URL and report where the page ended up.

    Lingering connections after the load event (extensions, realtime
    sockets) do not fail the navigation.
    """
    if not isinstance(url, str) or not url.strip():
        raise SmartToolError(
            tool="navigate",
            action="validate",
            reason="url must be a non-empty string",
            suggestion='Provide url="https://example.com"',
        )
    try:
        loaded = session.navigate(url.strip(), timeout=timeout)
    except HttpClientError as e:
        raise SmartToolError(
            tool="navigate",
            action="navigate",
            reason=str(e),
            suggestion="Check URL is valid and accessible",
        ) from e
    return {"success": True, "url": session.get_url(), "loaded": loaded}


def reload_page(session: BrowserSession, *, ignore_cache: bool = False) -> dict[str, Any]:
    session.reload(ignore_cache=ignore_cache)
    return {"success": True, "url": session.get_url()}


def go_back(session: BrowserSession) -> dict[str, Any]:
    return {"success": True, "url": session.go_back()}


def go_forward(session: BrowserSession) -> dict[str, Any]:
    return {"success": True, "url": session.go_forward()}


def current_url(session: BrowserSession) -> dict[str, Any]:
    return {"url": session.get_url()}


def evaluate(session: BrowserSession, script: str) -> dict[str, Any]:
    """Evaluate JavaScript in the page; page exceptions become an error field."""
    if not isinstance(script, str) or not script.strip():
        raise SmartToolError(
            tool="evaluate",
            action="validate",
            reason="script must be a non-empty string",
            suggestion='Provide script="document.title"',
        )
    try:
        return {"result": session.eval_js(script)}
    except JavaScriptError as e:
        return {"error": str(e)}


def _poll(check: Callable[[], bool], timeout: float, *, sleep: Callable[[float], None] = time.sleep) -> bool:
    deadline = time.monotonic() + max(0.0, timeout)
    while True:
        if check():
            return True
        if time.monotonic() >= deadline:
            return False
        sleep(POLL_INTERVAL)


def wait_for_selector(session: BrowserSession, selector: str, *, timeout_ms: Any = 5000) -> dict[str, Any]:
    selector = require_selector("wait_for_selector", selector)
    timeout = clamp_int(timeout_ms, default=5000, min_v=0, max_v=120_000) / 1000.0
    js = f"!!document.querySelector({json.dumps(selector)})"

    def _found() -> bool:
        try:
            return bool(session.eval_js(js))
        except JavaScriptError:
            return False

    if _poll(_found, timeout):
        return {"success": True, "found": True}
    return {"success": False, "found": False, "error": f"Element not found within timeout: {selector}"}


def wait_for_navigation(
    session: BrowserSession,
    pending_requests: Callable[[], int],
    *,
    timeout_ms: Any = 5000,
) -> dict[str, Any]:
    """Wait until the document is complete and the network has gone quiet."""
    timeout = clamp_int(timeout_ms, default=5000, min_v=0, max_v=120_000) / 1000.0
    # Give a just-triggered navigation a moment to start.
    time.sleep(min(0.5, timeout))
    quiet_since: list[float | None] = [None]

    def _settled() -> bool:
        try:
            ready = session.eval_js("document.readyState") == "complete"
        except HttpClientError:
            # The old document is being torn down; keep waiting.
            ready = False
        if not ready or pending_requests() > 0:
            quiet_since[0] = None
            return False
        now = time.monotonic()
        if quiet_since[0] is None:
            quiet_since[0] = now
        return now - quiet_since[0] >= IDLE_WINDOW

    if _poll(_settled, timeout):
        return {"success": True, "url": session.get_url()}
    return {"success": False, "error": "Navigation timeout"}
