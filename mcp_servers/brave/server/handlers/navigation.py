"""
Navigation tool handlers - page navigation, history and script evaluation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools as smart_tools
from ..types import ToolResult

if TYPE_CHECKING:
    from ...browser_session import BrowserSession
    from ...session_manager import SessionManager


def handle_navigate(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.navigate_to(session, args.get("url", "")))


def handle_reload(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    result = smart_tools.reload_page(session, ignore_cache=bool(args.get("ignore_cache", False)))
    return ToolResult.json(result)


def handle_back(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.go_back(session))


def handle_forward(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.go_forward(session))


def handle_get_url(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.current_url(session))


def handle_evaluate(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.evaluate(session, args.get("script", "")))


def handle_wait_for_selector(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    result = smart_tools.wait_for_selector(
        session,
        args.get("selector", ""),
        timeout_ms=args.get("timeout", 5000),
    )
    return ToolResult.json(result)


def handle_wait_for_navigation(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    result = smart_tools.wait_for_navigation(
        session,
        manager.pending_requests,
        timeout_ms=args.get("timeout", 5000),
    )
    return ToolResult.json(result)


NAVIGATION_HANDLERS: dict[str, tuple] = {
    "navigate": (handle_navigate, True),
    "reload": (handle_reload, True),
    "back": (handle_back, True),
    "forward": (handle_forward, True),
    "get_url": (handle_get_url, True),
    "evaluate": (handle_evaluate, True),
    "wait_for_selector": (handle_wait_for_selector, True),
    "wait_for_navigation": (handle_wait_for_navigation, True),
}
