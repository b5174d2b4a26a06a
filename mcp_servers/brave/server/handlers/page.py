"""
Page content and inspection handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools as smart_tools
from ..types import ToolResult

if TYPE_CHECKING:
    from ...browser_session import BrowserSession
    from ...session_manager import SessionManager


def handle_get_html(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.get_html(session, args.get("selector")))


def handle_get_text(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.get_text(session, args.get("selector")))


def handle_get_title(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.get_title(session))


def handle_screenshot(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    selector = args.get("selector")
    full_page = bool(args.get("full_page", False))
    result = smart_tools.take_screenshot(session, selector, full_page=full_page)
    caption = {"format": result["format"], "fullPage": full_page}
    if selector:
        caption["selector"] = selector
    return ToolResult.with_image(result["image"], "image/png", data=caption)


def handle_get_element_info(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.get_element_info(session, args.get("selector", "")))


def handle_query_selector_all(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    result = smart_tools.query_selector_all(session, args.get("selector", ""), limit=args.get("limit", 10))
    return ToolResult.json(result)


PAGE_HANDLERS: dict[str, tuple] = {
    "get_html": (handle_get_html, True),
    "get_text": (handle_get_text, True),
    "get_title": (handle_get_title, True),
    "screenshot": (handle_screenshot, True),
    "get_element_info": (handle_get_element_info, True),
    "query_selector_all": (handle_query_selector_all, True),
}
