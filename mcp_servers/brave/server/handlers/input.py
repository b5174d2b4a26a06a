"""
Input tool handlers - click, fill, select, hover, focus, type, scroll.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools as smart_tools
from ..types import ToolResult

if TYPE_CHECKING:
    from ...browser_session import BrowserSession
    from ...session_manager import SessionManager


def handle_click(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.click_element(session, args.get("selector", "")))


def handle_fill(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.fill_field(session, args.get("selector", ""), args.get("value", "")))


def handle_select(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    result = smart_tools.select_option(
        session,
        args.get("selector", ""),
        value=args.get("value"),
        text=args.get("text"),
    )
    return ToolResult.json(result)


def handle_hover(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.hover_element(session, args.get("selector", "")))


def handle_focus(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.focus_element(session, args.get("selector", "")))


def handle_type(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.type_text(session, args.get("text")))


def handle_scroll(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    result = smart_tools.scroll(session, selector=args.get("selector"), x=args.get("x"), y=args.get("y"))
    return ToolResult.json(result)


INPUT_HANDLERS: dict[str, tuple] = {
    "click": (handle_click, True),
    "fill": (handle_fill, True),
    "select": (handle_select, True),
    "hover": (handle_hover, True),
    "focus": (handle_focus, True),
    "type": (handle_type, True),
    "scroll": (handle_scroll, True),
}
