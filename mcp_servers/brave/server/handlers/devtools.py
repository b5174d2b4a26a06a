"""
Diagnostic handlers - console, network, performance and browser lifecycle.

Console and network reads work from the capture buffers and do not need a
live browser; a fresh session starts with empty buffers anyway.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools as smart_tools
from ..types import ToolResult

if TYPE_CHECKING:
    from ...browser_session import BrowserSession
    from ...session_manager import SessionManager


def handle_get_console_logs(manager: SessionManager, session: BrowserSession | None, args: dict[str, Any]) -> ToolResult:
    result = smart_tools.console_logs(
        manager,
        level=args.get("level", "all"),
        clear=bool(args.get("clear", False)),
    )
    return ToolResult.json(result)


def handle_clear_console(manager: SessionManager, session: BrowserSession | None, args: dict[str, Any]) -> ToolResult:
    manager.clear_events()
    return ToolResult.json({"success": True})


def handle_get_network_requests(
    manager: SessionManager, session: BrowserSession | None, args: dict[str, Any]
) -> ToolResult:
    return ToolResult.json(smart_tools.network_requests(manager, resource_type=args.get("filter")))


def handle_get_request_details(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.request_details(session, manager, args.get("request_id", "")))


def handle_clear_network(manager: SessionManager, session: BrowserSession | None, args: dict[str, Any]) -> ToolResult:
    manager.clear_network()
    return ToolResult.json({"success": True})


def handle_get_performance_metrics(
    manager: SessionManager, session: BrowserSession, args: dict[str, Any]
) -> ToolResult:
    return ToolResult.json(smart_tools.performance_metrics(session))


def handle_browser_status(manager: SessionManager, session: BrowserSession | None, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(manager.status())


def handle_browser_reset(manager: SessionManager, session: BrowserSession | None, args: dict[str, Any]) -> ToolResult:
    manager.reset()
    return ToolResult.json({"success": True, "connected": False})


DEVTOOLS_HANDLERS: dict[str, tuple] = {
    "get_console_logs": (handle_get_console_logs, False),
    "clear_console": (handle_clear_console, False),
    "get_network_requests": (handle_get_network_requests, False),
    "get_request_details": (handle_get_request_details, True),
    "clear_network": (handle_clear_network, False),
    "get_performance_metrics": (handle_get_performance_metrics, True),
    "browser_status": (handle_browser_status, False),
    "browser_reset": (handle_browser_reset, False),
}
