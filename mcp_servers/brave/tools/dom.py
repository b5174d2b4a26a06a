"""
DOM tools for browser automation.

Provides:
- get_html / get_text / get_title: page or element content
- take_screenshot: viewport, full page or single element
- get_element_info: tag, text, attributes, visibility and bounds
- query_selector_all: bounded listing of matching elements
"""

from __future__ import annotations

import json
from typing import Any

from ..browser_session import BrowserSession
from .base import SmartToolError, clamp_int, not_found, require_selector

ELEMENT_TEXT_LIMIT = 200
LIST_TEXT_LIMIT = 100


def get_html(session: BrowserSession, selector: str | None = None) -> dict[str, Any]:
    if selector:
        html = session.get_dom(selector)
        if html is None:
            raise not_found("get_html", selector)
        return {"content": html}
    return {"content": session.get_dom()}


def get_text(session: BrowserSession, selector: str | None = None) -> dict[str, Any]:
    target = json.dumps(selector) if selector else "'body'"
    js = f"(() => {{ const el = document.querySelector({target}); return el ? el.innerText : null; }})()"
    text = session.eval_js(js)
    if text is None:
        if selector:
            raise not_found("get_text", selector)
        text = ""
    return {"content": text}


def get_title(session: BrowserSession) -> dict[str, Any]:
    return {"title": session.get_title()}


def take_screenshot(session: BrowserSession, selector: str | None = None, *, full_page: bool = False) -> dict[str, Any]:
    """Capture a PNG; with a selector, clip to that element's box."""
    clip: dict[str, Any] | None = None
    if selector:
        js = f"""
        (() => {{
            const el = document.querySelector({json.dumps(selector)});
            if (!el) return null;
            el.scrollIntoView({{block: 'nearest'}});
            const r = el.getBoundingClientRect();
            return {{x: r.left + window.scrollX, y: r.top + window.scrollY, width: r.width, height: r.height}};
        }})()
        """
        box = session.eval_js(js)
        if not isinstance(box, dict):
            raise not_found("screenshot", selector)
        if not box.get("width") or not box.get("height"):
            raise SmartToolError(
                tool="screenshot",
                action="capture",
                reason=f"Element has no visible size: {selector}",
                suggestion="Screenshot a visible element or the whole page",
            )
        clip = {**box, "scale": 1}
    data = session.screenshot(clip=clip, full_page=full_page)
    if not data:
        raise SmartToolError(
            tool="screenshot",
            action="capture",
            reason="Screenshot data is empty",
            suggestion="Bring the browser window to the foreground and retry",
        )
    return {"image": data, "format": "png"}


_ELEMENT_INFO_JS = """
(() => {
    const el = document.querySelector(%s);
    if (!el) return null;
    const attrs = {};
    for (const a of Array.from(el.attributes)) attrs[a.name] = a.value;
    const r = el.getBoundingClientRect();
    const style = getComputedStyle(el);
    return {
        tag: el.tagName.toLowerCase(),
        text: (el.innerText || el.textContent || '').trim(),
        attributes: attrs,
        visible: (el.offsetParent !== null || style.position === 'fixed') && style.display !== 'none' && style.visibility !== 'hidden',
        bounds: {x: r.x, y: r.y, width: r.width, height: r.height, top: r.top, right: r.right, bottom: r.bottom, left: r.left},
    };
})()
"""


def get_element_info(session: BrowserSession, selector: str) -> dict[str, Any]:
    selector = require_selector("get_element_info", selector)
    info = session.eval_js(_ELEMENT_INFO_JS % json.dumps(selector))
    if not isinstance(info, dict):
        raise not_found("get_element_info", selector)
    info["text"] = str(info.get("text") or "")[:ELEMENT_TEXT_LIMIT]
    return info


def query_selector_all(session: BrowserSession, selector: str, *, limit: Any = 10) -> dict[str, Any]:
    selector = require_selector("query_selector_all", selector)
    limit_i = clamp_int(limit, default=10, min_v=0, max_v=500)
    js = f"""
    (() => {{
        const nodes = Array.from(document.querySelectorAll({json.dumps(selector)}));
        return {{
            count: nodes.length,
            elements: nodes.slice(0, {limit_i}).map((el, i) => ({{
                index: i,
                tag: el.tagName.toLowerCase(),
                text: (el.innerText || el.textContent || '').trim().slice(0, {LIST_TEXT_LIMIT}),
                id: el.getAttribute('id'),
                class: el.getAttribute('class'),
            }})),
        }};
    }})()
    """
    found = session.eval_js(js) or {}
    elements = found.get("elements") or []
    return {"count": int(found.get("count") or 0), "showing": len(elements), "elements": elements}
