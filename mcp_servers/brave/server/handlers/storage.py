"""
Cookie and localStorage handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ... import tools as smart_tools
from ..types import ToolResult

if TYPE_CHECKING:
    from ...browser_session import BrowserSession
    from ...session_manager import SessionManager


def handle_get_cookies(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.get_cookies(session, args.get("name")))


def handle_set_cookie(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    result = smart_tools.set_cookie(
        session,
        args.get("name", ""),
        args.get("value", ""),
        domain=args.get("domain"),
        path=args.get("path"),
        expires=args.get("expires"),
        http_only=args.get("http_only"),
        secure=args.get("secure"),
    )
    return ToolResult.json(result)


def handle_delete_cookies(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.delete_cookies(session, args.get("name")))


def handle_get_local_storage(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    return ToolResult.json(smart_tools.get_local_storage(session, args.get("key")))


def handle_set_local_storage(manager: SessionManager, session: BrowserSession, args: dict[str, Any]) -> ToolResult:
    result = smart_tools.set_local_storage(session, args.get("key", ""), args.get("value", ""))
    return ToolResult.json(result)


STORAGE_HANDLERS: dict[str, tuple] = {
    "get_cookies": (handle_get_cookies, True),
    "set_cookie": (handle_set_cookie, True),
    "delete_cookies": (handle_delete_cookies, True),
    "get_local_storage": (handle_get_local_storage, True),
    "set_local_storage": (handle_set_local_storage, True),
}
