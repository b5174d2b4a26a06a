"""
Base utilities for browser tools.

Provides:
- SmartToolError: Structured errors for AI agents
- element_center: selector lookup shared by input tools
- clamp_int / require_selector: tolerant argument coercion and validation
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from ..browser_session import BrowserSession


@dataclass
class SmartToolError(Exception):
    """Structured error with context for AI agents."""

    tool: str
    action: str
    reason: str
    suggestion: str
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.tool}] {self.action} failed: {self.reason}. Suggestion: {self.suggestion}"


def clamp_int(value: Any, *, default: int, min_v: int, max_v: int) -> int:
    try:
        v = int(value)
    except (TypeError, ValueError):
        v = default
    return max(min_v, min(v, max_v))


def require_selector(tool: str, selector: Any) -> str:
    if not isinstance(selector, str) or not selector.strip():
        raise SmartToolError(
            tool=tool,
            action="validate",
            reason="selector must be a non-empty CSS selector",
            suggestion='Provide selector="#id" or selector=".class"',
        )
    return selector


def not_found(tool: str, selector: str) -> SmartToolError:
    return SmartToolError(
        tool=tool,
        action="find",
        reason=f"Element not found: {selector}",
        suggestion="Check the selector with query_selector_all or wait_for_selector first",
        details={"selector": selector},
    )


def element_center(session: BrowserSession, tool: str, selector: str) -> tuple[float, float]:
    """Scroll the element into view and return its viewport center."""
    js = f"""
    (() => {{
        const el = document.querySelector({json.dumps(selector)});
        if (!el) return null;
        el.scrollIntoView({{block: 'center', inline: 'center'}});
        const r = el.getBoundingClientRect();
        return {{x: r.left + r.width / 2, y: r.top + r.height / 2, width: r.width, height: r.height}};
    }})()
    """
    box = session.eval_js(js)
    if not isinstance(box, dict):
        raise not_found(tool, selector)
    if not box.get("width") and not box.get("height"):
        raise SmartToolError(
            tool=tool,
            action="interact",
            reason=f"Element not interactable ({selector}): it has no visible size",
            suggestion="Make sure the element is displayed before interacting",
            details={"selector": selector},
        )
    return float(box["x"]), float(box["y"])
