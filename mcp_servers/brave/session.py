"""Session subsystem.

Split into focused submodules:
- session_cdp.py: CDP WebSocket connection with background event delivery
- probe.py / liveness.py: connection probe and liveness round-trip
- launcher.py: detached browser launch
- browser_session.py: BrowserSession handle
- session_manager.py: SessionManager lifecycle and capture buffers

`session.py` remains the stable import surface (re-exports).
"""

from __future__ import annotations

from .browser_session import BrowserSession, JavaScriptError
from .launcher import LaunchError, LaunchRecord
from .liveness import is_alive
from .probe import ProbeResult, probe
from .session_cdp import CdpConnection
from .session_manager import BrowserConnectionError, SessionManager
from .telemetry import ConsoleEvent, NetworkExchange

__all__ = [
    "BrowserConnectionError",
    "BrowserSession",
    "CdpConnection",
    "ConsoleEvent",
    "JavaScriptError",
    "LaunchError",
    "LaunchRecord",
    "NetworkExchange",
    "ProbeResult",
    "SessionManager",
    "is_alive",
    "probe",
]
