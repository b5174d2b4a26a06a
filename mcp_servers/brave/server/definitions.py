"""Tool schema definitions advertised by tools/list."""

from __future__ import annotations

from typing import Any

_SELECTOR = {"type": "string", "description": "CSS selector"}
_OPTIONAL_SELECTOR = {"type": "string", "description": "CSS selector (optional; whole page when omitted)"}


def _tool(
    name: str, description: str, properties: dict[str, Any] | None = None, required: list[str] | None = None
) -> dict[str, Any]:
    schema: dict[str, Any] = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "properties": properties or {},
    }
    if required:
        schema["required"] = required
    return {"name": name, "description": description, "inputSchema": schema}


NAVIGATION_TOOLS: list[dict[str, Any]] = [
    _tool(
        "navigate",
        """Navigate the current tab to a URL and wait for the load event.
USAGE:
- navigate(url="https://example.com")

RESPONSE EXAMPLE:
{"success": true, "url": "https://example.com/", "loaded": true}""",
        {"url": {"type": "string", "description": "Absolute URL to open"}},
        ["url"],
    ),
    _tool(
        "reload",
        "Reload the current page.",
        {"ignore_cache": {"type": "boolean", "default": False, "description": "Bypass the HTTP cache"}},
    ),
    _tool("back", "Go back one entry in the tab history."),
    _tool("forward", "Go forward one entry in the tab history."),
    _tool("get_url", "Return the current page URL."),
]

JAVASCRIPT_TOOLS: list[dict[str, Any]] = [
    _tool(
        "evaluate",
        """Evaluate JavaScript in the page and return the value.
Promises are awaited. Page exceptions are returned as {"error": "..."}.
USAGE:
- evaluate(script="document.querySelectorAll('a').length")""",
        {"script": {"type": "string", "description": "JavaScript expression"}},
        ["script"],
    ),
    _tool(
        "wait_for_selector",
        "Wait until an element matching the selector exists.",
        {
            "selector": _SELECTOR,
            "timeout": {"type": "integer", "default": 5000, "description": "Timeout in milliseconds"},
        },
        ["selector"],
    ),
    _tool(
        "wait_for_navigation",
        "Wait until the document is complete and no network requests are in flight.",
        {"timeout": {"type": "integer", "default": 5000, "description": "Timeout in milliseconds"}},
    ),
]

CONTENT_TOOLS: list[dict[str, Any]] = [
    _tool("get_html", "Return the outer HTML of the page or of one element.", {"selector": _OPTIONAL_SELECTOR}),
    _tool("get_text", "Return the visible text of the page or of one element.", {"selector": _OPTIONAL_SELECTOR}),
    _tool("get_title", "Return the document title."),
    _tool(
        "screenshot",
        "Capture a PNG screenshot of the viewport, the full page, or one element.",
        {
            "selector": _OPTIONAL_SELECTOR,
            "full_page": {"type": "boolean", "default": False, "description": "Capture beyond the viewport"},
        },
    ),
]

AUTOMATION_TOOLS: list[dict[str, Any]] = [
    _tool("click", "Click the center of an element.", {"selector": _SELECTOR}, ["selector"]),
    _tool(
        "fill",
        "Replace the value of an input or textarea.",
        {"selector": _SELECTOR, "value": {"type": "string", "description": "New value"}},
        ["selector", "value"],
    ),
    _tool(
        "select",
        "Choose an option of a <select> element by value or visible text.",
        {
            "selector": _SELECTOR,
            "value": {"type": "string", "description": "Option value"},
            "text": {"type": "string", "description": "Option text"},
        },
        ["selector"],
    ),
    _tool("hover", "Move the mouse over an element.", {"selector": _SELECTOR}, ["selector"]),
    _tool("focus", "Focus an element.", {"selector": _SELECTOR}, ["selector"]),
    _tool(
        "type",
        "Type text into the focused element.",
        {"text": {"type": "string", "description": "Text to type"}},
        ["text"],
    ),
    _tool(
        "scroll",
        "Scroll an element into view, or scroll the window by x/y pixels.",
        {
            "selector": _OPTIONAL_SELECTOR,
            "x": {"type": "integer", "description": "Horizontal pixels"},
            "y": {"type": "integer", "description": "Vertical pixels"},
        },
    ),
]

INSPECTION_TOOLS: list[dict[str, Any]] = [
    _tool(
        "get_element_info",
        "Describe an element: tag, text, attributes, visibility and bounds.",
        {"selector": _SELECTOR},
        ["selector"],
    ),
    _tool(
        "query_selector_all",
        "List elements matching a selector.",
        {"selector": _SELECTOR, "limit": {"type": "integer", "default": 10, "description": "Max elements"}},
        ["selector"],
    ),
]

DEVTOOLS_TOOLS: list[dict[str, Any]] = [
    _tool(
        "get_console_logs",
        "Return console messages captured since the session started.",
        {
            "level": {
                "type": "string",
                "enum": ["all", "log", "info", "warn", "error", "debug", "other"],
                "default": "all",
            },
            "clear": {"type": "boolean", "default": False, "description": "Clear after reading"},
        },
    ),
    _tool("clear_console", "Discard captured console messages."),
    _tool(
        "get_network_requests",
        "List captured network requests.",
        {"filter": {"type": "string", "description": "Resource type, e.g. XHR, Fetch, Document"}},
    ),
    _tool(
        "get_request_details",
        "Return headers, status and a body preview for one captured request.",
        {"request_id": {"type": "string", "description": "Id from get_network_requests"}},
        ["request_id"],
    ),
    _tool("clear_network", "Discard captured network requests."),
    _tool("get_performance_metrics", "Return page timing and memory metrics."),
]

STORAGE_TOOLS: list[dict[str, Any]] = [
    _tool(
        "get_cookies",
        "Return cookies of the current page, or one cookie by name.",
        {"name": {"type": "string", "description": "Cookie name"}},
    ),
    _tool(
        "set_cookie",
        "Set a cookie; defaults to the current page's URL when no domain is given.",
        {
            "name": {"type": "string"},
            "value": {"type": "string"},
            "domain": {"type": "string"},
            "path": {"type": "string"},
            "expires": {"type": "integer", "description": "Unix timestamp (seconds)"},
            "http_only": {"type": "boolean"},
            "secure": {"type": "boolean"},
        },
        ["name", "value"],
    ),
    _tool(
        "delete_cookies",
        "Delete one cookie of the current page, or all browser cookies when name is omitted.",
        {"name": {"type": "string", "description": "Cookie name"}},
    ),
    _tool(
        "get_local_storage",
        "Read localStorage: one key, or everything when key is omitted.",
        {"key": {"type": "string"}},
    ),
    _tool(
        "set_local_storage",
        "Write a localStorage entry.",
        {"key": {"type": "string"}, "value": {"type": "string"}},
        ["key", "value"],
    ),
]

LIFECYCLE_TOOLS: list[dict[str, Any]] = [
    _tool("browser_status", "Report the debugging port, executable, profile and connection state."),
    _tool(
        "browser_reset",
        "Drop the current browser session. The next tool call reconnects (or launches) the browser.",
    ),
]

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    *NAVIGATION_TOOLS,
    *JAVASCRIPT_TOOLS,
    *CONTENT_TOOLS,
    *AUTOMATION_TOOLS,
    *INSPECTION_TOOLS,
    *DEVTOOLS_TOOLS,
    *STORAGE_TOOLS,
    *LIFECYCLE_TOOLS,
]
