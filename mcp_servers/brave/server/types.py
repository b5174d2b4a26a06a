"""
Type definitions for MCP server responses and handlers.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..browser_session import BrowserSession
    from ..session_manager import SessionManager


@dataclass(slots=True)
class ToolContent:
    """Single content item in tool response."""

    type: str  # "text" or "image"
    text: str | None = None
    data: str | None = None  # base64 for images
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP content format."""
        if self.type == "image":
            return {"type": "image", "data": self.data, "mimeType": self.mime_type}
        return {"type": "text", "text": self.text}


def _dumps(data: Any) -> str:
    return _json.dumps(data, ensure_ascii=False, indent=2, default=str)


@dataclass(slots=True)
class ToolResult:
    """Result of a tool execution."""

    content: list[ToolContent] = field(default_factory=list)
    is_error: bool = False
    # Raw payload for in-process callers and tests; not part of the wire format.
    data: Any | None = None

    @classmethod
    def json(cls, data: Any) -> ToolResult:
        """Create result with the payload rendered as JSON text."""
        return cls(content=[ToolContent(type="text", text=_dumps(data))], data=data)

    @classmethod
    def error(
        cls,
        message: str,
        *,
        tool: str | None = None,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> ToolResult:
        payload: dict[str, Any] = {"ok": False, "error": message}
        if tool:
            payload["tool"] = tool
        if suggestion:
            payload["suggestion"] = suggestion
        if details:
            payload["details"] = details
        return cls(content=[ToolContent(type="text", text=_dumps(payload))], is_error=True, data=payload)

    @classmethod
    def with_image(cls, data_b64: str, mime_type: str = "image/png", data: Any | None = None) -> ToolResult:
        """Image content plus a short JSON caption; falls back to an error if empty."""
        if not data_b64:
            return cls.error("Screenshot data is empty")
        caption = data if data is not None else {"format": mime_type.split("/")[-1]}
        return cls(
            content=[
                ToolContent(type="text", text=_dumps(caption)),
                ToolContent(type="image", data=data_b64, mime_type=mime_type),
            ],
            data=caption,
        )

    def to_content_list(self) -> list[dict[str, Any]]:
        """Convert to MCP content list format."""
        return [c.to_dict() for c in self.content]


class ToolHandler(Protocol):
    """Protocol for tool handler functions.

    `session` is None for tools registered with requires_browser=False.
    """

    def __call__(
        self,
        manager: SessionManager,
        session: BrowserSession | None,
        arguments: dict[str, Any],
    ) -> ToolResult: ...
