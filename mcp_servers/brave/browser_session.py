"""High-level handle for the managed browser page.

Wraps a CdpConnection with the browser operations the tools need. The
session manager creates and owns instances; tools receive them from
`SessionManager.acquire()` and must not keep them around.
"""

from __future__ import annotations

import json
import time
from contextlib import suppress
from typing import TYPE_CHECKING, Any

from .http_client import HttpClientError

if TYPE_CHECKING:
    from .launcher import LaunchRecord
    from .session_cdp import CdpConnection


class JavaScriptError(HttpClientError):
    """An exception was thrown inside the page during evaluation."""


class BrowserSession:
    def __init__(
        self,
        connection: CdpConnection,
        *,
        port: int,
        target_id: str = "",
        launch: LaunchRecord | None = None,
    ):
        self.conn = connection
        self.port = port
        self.target_id = target_id
        self.launch = launch
        self._enabled: set[str] = set()

    def close(self) -> None:
        """Close the session connection."""
        self.conn.close()

    @property
    def closed(self) -> bool:
        return bool(getattr(self.conn, "closed", False))

    def enable_domains(self, *domains: str, strict: bool = True) -> None:
        """Enable CDP domains once per connection (e.g. "Page", "Runtime")."""
        failures: list[str] = []
        for domain in domains:
            if domain in self._enabled:
                continue
            try:
                self.conn.send(f"{domain}.enable")
            except HttpClientError as exc:
                failures.append(f"{domain}.enable: {exc}")
                continue
            self._enabled.add(domain)
        if strict and failures:
            raise HttpClientError("Failed to enable CDP domain(s): " + "; ".join(failures))

    def send(self, method: str, params: dict[str, Any] | None = None, *, timeout: float | None = None) -> dict[str, Any]:
        """Send raw CDP command."""
        return self.conn.send(method, params, timeout=timeout)

    # ─────────────────────────────────────────────────────────────────────────
    # Navigation
    # ─────────────────────────────────────────────────────────────────────────

    def navigate(self, url: str, *, wait_load: bool = True, timeout: float = 10.0) -> bool:
        """Navigate to URL. Returns True if the load event fired within `timeout`.

        A missing load event is not an error: pages with long-polling or
        extension traffic often never go fully idle.
        """
        self.enable_domains("Page")
        self.conn.discard_events("Page.loadEventFired")
        result = self.conn.send("Page.navigate", {"url": url})
        error_text = result.get("errorText")
        if error_text:
            raise HttpClientError(f"Navigation failed: {error_text}")
        if not wait_load:
            return False
        return self.wait_load(timeout)

    def wait_load(self, timeout: float = 10.0) -> bool:
        """Wait for page load event."""
        return self.conn.wait_for_event("Page.loadEventFired", timeout) is not None

    def reload(self, *, ignore_cache: bool = False, timeout: float = 10.0) -> bool:
        self.enable_domains("Page")
        self.conn.discard_events("Page.loadEventFired")
        self.conn.send("Page.reload", {"ignoreCache": bool(ignore_cache)})
        return self.wait_load(timeout)

    def go_back(self) -> str:
        return self._history_step(-1)

    def go_forward(self) -> str:
        return self._history_step(1)

    def _history_step(self, delta: int) -> str:
        history = self.conn.send("Page.getNavigationHistory")
        entries = history.get("entries") or []
        index = int(history.get("currentIndex") or 0) + delta
        if 0 <= index < len(entries):
            self.conn.discard_events("Page.loadEventFired")
            self.conn.send("Page.navigateToHistoryEntry", {"entryId": entries[index]["id"]})
            self.wait_load(5.0)
        else:
            time.sleep(0.1)
        return self.get_url()

    # ─────────────────────────────────────────────────────────────────────────
    # JavaScript
    # ─────────────────────────────────────────────────────────────────────────

    def eval_js(self, expression: str, *, timeout: float | None = None) -> Any:
        """Evaluate JavaScript and return its JSON value (undefined/null map to None)."""
        result = self.conn.send(
            "Runtime.evaluate",
            {
                "expression": expression,
                "returnByValue": True,
                "awaitPromise": True,
            },
            timeout=timeout,
        )
        details = result.get("exceptionDetails")
        if isinstance(details, dict):
            exc = details.get("exception") if isinstance(details.get("exception"), dict) else {}
            message = exc.get("description") or details.get("text") or "JavaScript error"
            raise JavaScriptError(str(message))

        if "result" not in result:
            return None
        value = result["result"]
        if isinstance(value, dict) and value.get("type") == "undefined":
            return None
        if isinstance(value, dict) and value.get("type") == "object" and value.get("subtype") == "null":
            return None
        if isinstance(value, dict):
            return value.get("value", value.get("description"))
        return value

    def get_url(self) -> str:
        return self.eval_js("window.location.href") or ""

    def get_title(self) -> str:
        return self.eval_js("document.title") or ""

    # ─────────────────────────────────────────────────────────────────────────
    # Input
    # ─────────────────────────────────────────────────────────────────────────

    def click(self, x: float, y: float, button: str = "left", click_count: int = 1) -> None:
        self.move_mouse(x, y)
        for event_type in ("mousePressed", "mouseReleased"):
            self._mouse_event(event_type, x, y, button, click_count)

    def move_mouse(self, x: float, y: float) -> None:
        self._mouse_event("mouseMoved", x, y, "none", 0)

    def _mouse_event(self, event_type: str, x: float, y: float, button: str, click_count: int) -> None:
        self.conn.send(
            "Input.dispatchMouseEvent",
            {"type": event_type, "x": x, "y": y, "button": button, "clickCount": click_count},
        )

    def type_text(self, text: str) -> None:
        """Insert text into the focused element."""
        if not text:
            return
        try:
            self.conn.send("Input.insertText", {"text": str(text)})
            return
        except HttpClientError:
            pass
        # Older builds without Input.insertText: per-character events.
        for ch in text:
            self.conn.send("Input.dispatchKeyEvent", {"type": "char", "text": ch})

    # ─────────────────────────────────────────────────────────────────────────
    # Screenshots & DOM
    # ─────────────────────────────────────────────────────────────────────────

    def screenshot(self, *, clip: dict[str, Any] | None = None, full_page: bool = False) -> str:
        """Capture a PNG screenshot, return base64 data."""
        params: dict[str, Any] = {"format": "png", "fromSurface": True}
        if full_page and clip is None:
            with suppress(HttpClientError):
                metrics = self.conn.send("Page.getLayoutMetrics")
                size = metrics.get("cssContentSize") or metrics.get("contentSize") or {}
                if size.get("width") and size.get("height"):
                    clip = {"x": 0, "y": 0, "width": size["width"], "height": size["height"], "scale": 1}
            params["captureBeyondViewport"] = True
        if clip:
            params["clip"] = clip
        result = self.conn.send("Page.captureScreenshot", params)
        return result.get("data", "")

    def get_dom(self, selector: str | None = None) -> str | None:
        """outerHTML of the document or of the first element matching `selector` (None if absent)."""
        if selector:
            js = f"(() => {{ const el = document.querySelector({json.dumps(selector)}); return el ? el.outerHTML : null; }})()"
            return self.eval_js(js)
        return self.eval_js("document.documentElement.outerHTML") or ""


__all__ = ["BrowserSession", "JavaScriptError"]
