"""Cookie and localStorage tools for the current page."""

from __future__ import annotations

import json
from typing import Any

from ..browser_session import BrowserSession
from .base import SmartToolError


def _page_cookies(session: BrowserSession) -> list[dict[str, Any]]:
    url = session.get_url()
    params = {"urls": [url]} if url.startswith(("http://", "https://")) else None
    result = session.send("Network.getCookies", params)
    cookies = result.get("cookies")
    return [c for c in cookies if isinstance(c, dict)] if isinstance(cookies, list) else []


def get_cookies(session: BrowserSession, name: str | None = None) -> dict[str, Any]:
    cookies = _page_cookies(session)
    if name:
        for cookie in cookies:
            if cookie.get("name") == name:
                return {"cookie": cookie}
        raise SmartToolError(
            tool="get_cookies",
            action="find",
            reason=f"Cookie not found: {name}",
            suggestion="Call get_cookies without name to list all cookies",
        )
    return {"cookies": {c.get("name"): c for c in cookies}}


def set_cookie(
    session: BrowserSession,
    name: str,
    value: str,
    *,
    domain: str | None = None,
    path: str | None = None,
    expires: int | None = None,
    http_only: bool | None = None,
    secure: bool | None = None,
) -> dict[str, Any]:
    if not name:
        raise SmartToolError(
            tool="set_cookie",
            action="validate",
            reason="name is required",
            suggestion='Provide name="session" value="..."',
        )
    params: dict[str, Any] = {"name": name, "value": "" if value is None else str(value)}
    if domain:
        params["domain"] = domain
    else:
        # Without a domain CDP needs a URL to scope the cookie.
        params["url"] = session.get_url()
    if path:
        params["path"] = path
    if expires is not None:
        params["expires"] = expires
    if http_only is not None:
        params["httpOnly"] = bool(http_only)
    if secure is not None:
        params["secure"] = bool(secure)

    result = session.send("Network.setCookie", params)
    if result.get("success") is False:
        raise SmartToolError(
            tool="set_cookie",
            action="set",
            reason=f"Browser rejected cookie: {name}",
            suggestion="Check domain/path match the current page, or navigate to the site first",
            details={"params": {k: v for k, v in params.items() if k != "value"}},
        )
    return {"success": True}


def delete_cookies(session: BrowserSession, name: str | None = None) -> dict[str, Any]:
    """Delete one cookie of the current page, or every browser cookie when name is omitted."""
    if name:
        session.send("Network.deleteCookies", {"name": name, "url": session.get_url()})
    else:
        session.send("Network.clearBrowserCookies")
    return {"success": True}


def get_local_storage(session: BrowserSession, key: str | None = None) -> dict[str, Any]:
    if key:
        return {"key": key, "value": session.eval_js(f"localStorage.getItem({json.dumps(key)})")}
    return {"data": session.eval_js("Object.fromEntries(Object.entries(localStorage))") or {}}


def set_local_storage(session: BrowserSession, key: str, value: str) -> dict[str, Any]:
    if not key:
        raise SmartToolError(
            tool="set_local_storage",
            action="validate",
            reason="key is required",
            suggestion='Provide key="theme" value="dark"',
        )
    session.eval_js(f"localStorage.setItem({json.dumps(key)}, {json.dumps(str(value))})")
    return {"success": True}
