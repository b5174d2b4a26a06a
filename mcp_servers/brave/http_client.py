from __future__ import annotations

import json
from typing import Any
from urllib.error import URLError
from urllib.request import Request, urlopen


class HttpClientError(Exception):
    pass


def http_get_json(url: str, timeout: float = 2.0, *, method: str = "GET") -> Any:
    """Fetch a JSON document from a CDP discovery endpoint.

    Newer Chromium builds reject GET on `/json/new`, so callers pass
    method="PUT" there.
    """
    req = Request(url, method=method, headers={"User-Agent": "brave-mcp"})
    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read()
    except (OSError, TimeoutError, URLError) as exc:
        raise HttpClientError(str(exc)) from exc
    try:
        return json.loads(raw.decode("utf-8", errors="replace"))
    except json.JSONDecodeError as exc:
        raise HttpClientError(f"Invalid JSON from {url}: {exc}") from exc


__all__ = ["HttpClientError", "http_get_json"]
