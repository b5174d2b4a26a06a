"""
Tool handlers organized by domain.

All handlers follow the signature: (manager, session, arguments) -> ToolResult
where `session` is None for handlers registered with requires_browser=False.
"""

from .devtools import DEVTOOLS_HANDLERS
from .input import INPUT_HANDLERS
from .navigation import NAVIGATION_HANDLERS
from .page import PAGE_HANDLERS
from .storage import STORAGE_HANDLERS

# Aggregate all handlers
HANDLERS: dict[str, tuple] = {
    **NAVIGATION_HANDLERS,
    **PAGE_HANDLERS,
    **INPUT_HANDLERS,
    **DEVTOOLS_HANDLERS,
    **STORAGE_HANDLERS,
}

__all__ = [
    "HANDLERS",
    "DEVTOOLS_HANDLERS",
    "INPUT_HANDLERS",
    "NAVIGATION_HANDLERS",
    "PAGE_HANDLERS",
    "STORAGE_HANDLERS",
]
