"""Lifecycle manager for the single managed browser session.

acquire() hands out the cached session while it still answers a liveness
round-trip. Otherwise it discards it and runs connect-or-launch: probe the
configured port, and if nothing answers, launch a detached browser once and
re-probe a bounded number of times. acquire() and reset() share one lock, so
two callers that both see a dead session cannot launch two browsers.

Every new session gets the console/network subscriptions installed on its
connection, tagged with a fresh epoch; buffers reject writes from any older
epoch.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
import threading
import time
from collections.abc import Callable
from contextlib import suppress
from typing import Any

from .browser_session import BrowserSession
from .config import BrowserConfig
from .launcher import BrowserLauncher, LaunchError, LaunchRecord
from .liveness import is_alive
from .probe import ProbeResult, probe
from .telemetry import ConsoleBuffer, ConsoleEvent, NetworkExchange, NetworkLog

logger = logging.getLogger("mcp.brave.session")

ProbeFunc = Callable[..., ProbeResult]
LivenessFunc = Callable[..., bool]

_NETWORK_EVENTS = (
    "Network.requestWillBeSent",
    "Network.responseReceived",
    "Network.loadingFinished",
    "Network.loadingFailed",
)


class BrowserConnectionError(ConnectionError):
    """No browser could be reached or started on the configured port."""

    def __init__(self, port: int, binary_path: str, reason: str | None = None) -> None:
        self.port = port
        self.binary_path = binary_path
        self.reason = reason
        message = (
            f"Cannot connect to Brave on port {port}. "
            f"Launch Brave with: {remediation_command(binary_path, port)}"
        )
        if reason:
            message += f" (last error: {reason})"
        super().__init__(message)


def remediation_command(binary_path: str, port: int) -> str:
    """Copy-paste command line that starts a browser this server can attach to."""
    argv = [binary_path, f"--remote-debugging-port={port}", "--remote-allow-origins=*"]
    if sys.platform.startswith("win"):
        return subprocess.list2cmdline(argv)
    return shlex.join(argv)


class SessionManager:
    """Owns the current BrowserSession, its launch record and capture buffers."""

    def __init__(
        self,
        config: BrowserConfig | None = None,
        launcher: BrowserLauncher | None = None,
        *,
        probe_func: ProbeFunc = probe,
        liveness_func: LivenessFunc = is_alive,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or BrowserConfig.from_env()
        self.launcher = launcher or BrowserLauncher(self.config)
        self._probe = probe_func
        self._is_alive = liveness_func
        self._sleep = sleep
        self._lock = threading.RLock()
        self._session: BrowserSession | None = None
        self._launch: LaunchRecord | None = None
        self._epoch = 0
        self._console = ConsoleBuffer(max_events=self.config.max_console_events)
        self._network = NetworkLog(max_entries=self.config.max_network_exchanges)

    @property
    def session(self) -> BrowserSession | None:
        """The cached session, without a liveness check."""
        return self._session

    @property
    def launch_record(self) -> LaunchRecord | None:
        return self._launch

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def acquire(self) -> BrowserSession:
        """Return a live session, reconnecting or launching a browser if needed.

        Raises:
            BrowserConnectionError: launch failed, or the browser never became
                reachable within the configured attempts.
        """
        with self._lock:
            session = self._session
            if session is not None:
                if self._is_alive(session, timeout=self.config.liveness_timeout):
                    return session
                logger.info("session on port %s stopped responding; reconnecting", session.port)
            self._discard()
            return self._connect_or_launch()

    def reset(self) -> None:
        """Close the cached connection and clear all session state. Idempotent."""
        with self._lock:
            self._discard()

    def _discard(self) -> None:
        session = self._session
        self._session = None
        self._launch = None
        self._advance_epoch()
        if session is not None:
            with suppress(Exception):
                session.close()

    def _advance_epoch(self) -> int:
        self._epoch += 1
        self._console.reset(self._epoch)
        self._network.reset(self._epoch)
        return self._epoch

    def _connect_or_launch(self) -> BrowserSession:
        port = self.config.cdp_port
        result = self._run_probe(port)
        if result.ok:
            return self._install(result, launch=None)

        logger.info("no browser on port %s (%s); launching %s", port, result.error, self.config.binary_path)
        try:
            record = self.launcher.launch()
        except LaunchError as exc:
            raise BrowserConnectionError(port, self.config.binary_path, str(exc)) from exc

        attempts = max(1, int(self.config.connect_attempts))
        for attempt in range(1, attempts + 1):
            self._sleep(self.config.connect_delay)
            result = self._run_probe(port)
            if result.ok:
                logger.info("connected to launched browser pid=%s after %d attempt(s)", record.pid, attempt)
                return self._install(result, launch=record)

        raise BrowserConnectionError(port, self.config.binary_path, result.error)

    def _run_probe(self, port: int) -> ProbeResult:
        return self._probe(port, host=self.config.host, timeout=self.config.probe_timeout)

    def _install(self, result: ProbeResult, *, launch: LaunchRecord | None) -> BrowserSession:
        conn = result.connection
        if conn is not None and hasattr(conn, "timeout"):
            conn.timeout = self.config.cdp_timeout

        epoch = self._advance_epoch()
        console = self._console
        network = self._network
        try:
            conn.subscribe("Runtime.consoleAPICalled", lambda params: console.record(params, epoch=epoch))
            for method in _NETWORK_EVENTS:
                conn.subscribe(method, lambda params, m=method: network.ingest({"method": m, "params": params}, epoch=epoch))

            session = BrowserSession(conn, port=result.port, target_id=result.target_id, launch=launch)
            # Console events only flow once Runtime is enabled on this connection.
            session.enable_domains("Runtime", "Page", "Network", strict=False)
        except Exception:
            with suppress(Exception):
                conn.close()
            raise

        self._session = session
        self._launch = launch
        return session

    # ─────────────────────────────────────────────────────────────────────────
    # Diagnostics
    # ─────────────────────────────────────────────────────────────────────────

    def events(self, level: str | None = None) -> list[ConsoleEvent]:
        """Console messages captured for the current session, in capture order."""
        return self._console.snapshot(level)

    def clear_events(self) -> None:
        self._console.clear()

    def network_exchanges(self, resource_type: str | None = None) -> list[NetworkExchange]:
        return self._network.snapshot(resource_type)

    def network_exchange(self, request_id: str) -> NetworkExchange | None:
        return self._network.get(request_id)

    def pending_requests(self) -> int:
        return self._network.pending_count()

    def clear_network(self) -> None:
        self._network.clear()

    def status(self) -> dict[str, Any]:
        session = self._session
        launch = self._launch
        return {
            "port": self.config.cdp_port,
            "binary": self.config.binary_path,
            "profile": self.config.profile_path,
            "connected": session is not None and not session.closed,
            "targetId": session.target_id if session is not None else None,
            "launched": launch.to_dict() if launch is not None else None,
            "consoleEvents": len(self._console),
            "networkExchanges": len(self._network),
        }


__all__ = ["BrowserConnectionError", "SessionManager"]
