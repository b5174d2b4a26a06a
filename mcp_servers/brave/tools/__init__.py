"""
Browser tools organized by domain.

Each module operates on an already-acquired BrowserSession:
- base: errors and shared selector helpers
- navigation: page navigation, history, script evaluation and waits
- dom: content extraction, screenshots and element inspection
- input: selector-addressed mouse and keyboard interaction
- devtools: console/network capture and performance metrics
- storage: cookies and localStorage
"""

from .base import SmartToolError
from .devtools import console_logs, network_requests, performance_metrics, request_details
from .dom import get_element_info, get_html, get_text, get_title, query_selector_all, take_screenshot
from .input import click_element, fill_field, focus_element, hover_element, scroll, select_option, type_text
from .navigation import (
    current_url,
    evaluate,
    go_back,
    go_forward,
    navigate_to,
    reload_page,
    wait_for_navigation,
    wait_for_selector,
)
from .storage import delete_cookies, get_cookies, get_local_storage, set_cookie, set_local_storage

__all__ = [
    "SmartToolError",
    "click_element",
    "console_logs",
    "current_url",
    "delete_cookies",
    "evaluate",
    "fill_field",
    "focus_element",
    "get_cookies",
    "get_element_info",
    "get_html",
    "get_local_storage",
    "get_text",
    "get_title",
    "go_back",
    "go_forward",
    "hover_element",
    "navigate_to",
    "network_requests",
    "performance_metrics",
    "query_selector_all",
    "reload_page",
    "request_details",
    "scroll",
    "select_option",
    "set_cookie",
    "set_local_storage",
    "take_screenshot",
    "type_text",
    "wait_for_navigation",
    "wait_for_selector",
]
