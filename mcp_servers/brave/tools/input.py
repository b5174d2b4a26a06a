"""
Input tools: mouse and keyboard interaction addressed by CSS selector.
"""

from __future__ import annotations

import json
from typing import Any

from ..browser_session import BrowserSession
from .base import SmartToolError, element_center, not_found, require_selector


def _focus(session: BrowserSession, tool: str, selector: str, *, clear: bool = False) -> None:
    js = f"""
    (() => {{
        const el = document.querySelector({json.dumps(selector)});
        if (!el) return false;
        el.scrollIntoView({{block: 'center'}});
        el.focus();
        if ({'true' if clear else 'false'}) {{
            if ('value' in el) {{
                el.value = '';
                el.dispatchEvent(new Event('input', {{bubbles: true}}));
            }} else if (el.isContentEditable) {{
                el.textContent = '';
            }}
        }}
        return true;
    }})()
    """
    if not session.eval_js(js):
        raise not_found(tool, selector)


def click_element(session: BrowserSession, selector: str) -> dict[str, Any]:
    selector = require_selector("click", selector)
    x, y = element_center(session, "click", selector)
    session.click(x, y)
    return {"success": True}


def hover_element(session: BrowserSession, selector: str) -> dict[str, Any]:
    selector = require_selector("hover", selector)
    x, y = element_center(session, "hover", selector)
    session.move_mouse(x, y)
    return {"success": True}


def focus_element(session: BrowserSession, selector: str) -> dict[str, Any]:
    selector = require_selector("focus", selector)
    _focus(session, "focus", selector)
    return {"success": True}


def type_text(session: BrowserSession, text: str) -> dict[str, Any]:
    """Type into whatever element currently has focus."""
    if not isinstance(text, str):
        raise SmartToolError(
            tool="type",
            action="validate",
            reason="text must be a string",
            suggestion='Provide text="hello"',
        )
    session.type_text(text)
    return {"success": True}


def fill_field(session: BrowserSession, selector: str, value: str) -> dict[str, Any]:
    """Replace the field's current value with `value`."""
    selector = require_selector("fill", selector)
    _focus(session, "fill", selector, clear=True)
    session.type_text(str(value or ""))
    return {"success": True}


def select_option(
    session: BrowserSession,
    selector: str,
    *,
    value: str | None = None,
    text: str | None = None,
) -> dict[str, Any]:
    selector = require_selector("select", selector)
    if value is None and text is None:
        raise SmartToolError(
            tool="select",
            action="validate",
            reason="Must provide either value or text",
            suggestion='Provide value="us" or text="United States"',
        )
    by_value = value is not None
    wanted = value if by_value else text
    js = f"""
    (() => {{
        const el = document.querySelector({json.dumps(selector)});
        if (!el) return {{found: false}};
        if (!el.options) return {{found: true, isSelect: false}};
        const wanted = {json.dumps(wanted)};
        const opt = Array.from(el.options).find(o => {'o.value' if by_value else 'o.text.trim()'} === wanted);
        if (!opt) return {{found: true, isSelect: true, matched: false}};
        el.value = opt.value;
        el.dispatchEvent(new Event('input', {{bubbles: true}}));
        el.dispatchEvent(new Event('change', {{bubbles: true}}));
        return {{found: true, isSelect: true, matched: true, value: opt.value}};
    }})()
    """
    res = session.eval_js(js) or {}
    if not res.get("found"):
        raise not_found("select", selector)
    if not res.get("isSelect"):
        raise SmartToolError(
            tool="select",
            action="select",
            reason=f"Element is not a <select>: {selector}",
            suggestion="Use click for custom dropdowns",
        )
    if not res.get("matched"):
        raise SmartToolError(
            tool="select",
            action="select",
            reason=f"No option with {'value' if by_value else 'text'} {wanted!r}",
            suggestion="List options with query_selector_all(selector + ' option')",
            details={"selector": selector},
        )
    return {"success": True, "value": res.get("value")}


def scroll(
    session: BrowserSession,
    *,
    selector: str | None = None,
    x: Any = None,
    y: Any = None,
) -> dict[str, Any]:
    if selector:
        js = f"""
        (() => {{
            const el = document.querySelector({json.dumps(selector)});
            if (!el) return false;
            el.scrollIntoView({{block: 'center'}});
            return true;
        }})()
        """
        if not session.eval_js(js):
            raise not_found("scroll", selector)
        return {"success": True}
    if x is None and y is None:
        raise SmartToolError(
            tool="scroll",
            action="validate",
            reason="Must provide selector or x/y coordinates",
            suggestion='Provide selector="#footer" or y=500',
        )
    try:
        dx, dy = int(x or 0), int(y or 0)
    except (TypeError, ValueError) as e:
        raise SmartToolError(
            tool="scroll",
            action="validate",
            reason="x and y must be integers",
            suggestion="Provide pixel amounts like y=500",
        ) from e
    session.eval_js(f"window.scrollBy({dx}, {dy})")
    return {"success": True}
