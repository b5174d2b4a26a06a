from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .browser_session import BrowserSession

LIVENESS_EXPRESSION = "1 + 1"
LIVENESS_EXPECTED = 2


def is_alive(session: BrowserSession, *, timeout: float = 2.0) -> bool:
    """Round-trip a trivial evaluation; any failure or mismatch means dead.

    Never raises.
    """
    try:
        if session.closed:
            return False
        return session.eval_js(LIVENESS_EXPRESSION, timeout=timeout) == LIVENESS_EXPECTED
    except Exception:  # noqa: BLE001
        return False


__all__ = ["LIVENESS_EXPECTED", "LIVENESS_EXPRESSION", "is_alive"]
