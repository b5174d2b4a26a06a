"""
Tool registry with dispatch table for MCP server.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .types import ToolHandler, ToolResult

if TYPE_CHECKING:
    from ..session_manager import SessionManager

logger = logging.getLogger("mcp.brave.registry")


class ToolRegistry:
    """Registry for tool handlers; acquires the browser session for handlers that need one."""

    def __init__(self) -> None:
        # name -> (handler, requires_browser)
        self._handlers: dict[str, tuple[ToolHandler, bool]] = {}

    def register(self, name: str, handler: ToolHandler, requires_browser: bool = True) -> None:
        """Register a tool handler."""
        self._handlers[name] = (handler, requires_browser)

    def register_many(self, handlers: dict[str, tuple[ToolHandler, bool]]) -> None:
        """Register multiple handlers at once."""
        self._handlers.update(handlers)

    def has(self, name: str) -> bool:
        """Check if handler exists."""
        return name in self._handlers

    def dispatch(self, name: str, manager: SessionManager, arguments: dict[str, Any]) -> ToolResult:
        """Dispatch tool call to appropriate handler.

        Raises BrowserConnectionError when the browser is unreachable; the
        server turns it into an error result.
        """
        handler_info = self._handlers.get(name)
        if handler_info is None:
            raise KeyError(f"Unknown tool: {name}")

        handler, requires_browser = handler_info
        session = manager.acquire() if requires_browser else None
        return handler(manager, session, arguments)

    @property
    def tool_names(self) -> list[str]:
        """Get list of registered tool names."""
        return list(self._handlers.keys())


def create_default_registry() -> ToolRegistry:
    from .handlers import HANDLERS

    registry = ToolRegistry()
    registry.register_many(HANDLERS)
    logger.debug("registered %d tools", len(HANDLERS))
    return registry
