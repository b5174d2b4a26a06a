from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CDP_PORT = 9222
DEFAULT_PROFILE_PATH = "~/.brave-mcp/profile"

# Post-launch probe policy: fixed attempts with a fixed pause, no backoff growth.
DEFAULT_CONNECT_ATTEMPTS = 10
DEFAULT_CONNECT_DELAY = 1.0

MACOS_BINARY = "/Applications/Brave Browser.app/Contents/MacOS/Brave Browser"
LINUX_BINARY = "/usr/bin/brave-browser"
WINDOWS_BINARY = "C:\\Program Files\\BraveSoftware\\Brave-Browser\\Application\\brave.exe"

DEFAULT_BINARY_CANDIDATES: list[str] = [
    MACOS_BINARY,
    LINUX_BINARY,
    "/usr/bin/brave",
    "/usr/bin/brave-browser-stable",
    "/opt/brave.com/brave/brave",
    "/opt/brave.com/brave/brave-browser",
    WINDOWS_BINARY,
    "C:\\Program Files (x86)\\BraveSoftware\\Brave-Browser\\Application\\brave.exe",
    # Snap last: it ignores --user-data-dir outside the snap home.
    "/snap/bin/brave",
]

PATH_NAMES = ("brave-browser", "brave")


def expand_path(raw: str) -> str:
    return str(Path(raw).expanduser())


def platform_default_binary() -> str:
    """The documented executable location for the running platform."""
    if sys.platform == "darwin":
        return MACOS_BINARY
    if sys.platform.startswith("win"):
        return WINDOWS_BINARY
    return LINUX_BINARY


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(minimum, int(raw))
    except ValueError:
        return default


def _env_float(name: str, default: float, *, minimum: float = 0.0) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(minimum, float(raw))
    except ValueError:
        return default


@dataclass
class BrowserConfig:
    binary_path: str
    profile_path: str
    cdp_port: int = DEFAULT_CDP_PORT
    host: str = "127.0.0.1"
    headless: bool = False
    extra_flags: list[str] = field(default_factory=list)
    connect_attempts: int = DEFAULT_CONNECT_ATTEMPTS
    connect_delay: float = DEFAULT_CONNECT_DELAY
    probe_timeout: float = 2.0
    liveness_timeout: float = 2.0
    cdp_timeout: float = 10.0
    max_console_events: int = 1000
    max_network_exchanges: int = 500

    @classmethod
    def detect_binary(cls) -> str:
        env_path = os.environ.get("MCP_BROWSER_BINARY")
        if env_path:
            return expand_path(env_path)
        for candidate in DEFAULT_BINARY_CANDIDATES:
            path = Path(candidate)
            # A present but non-executable file would only fail later at spawn time.
            if path.exists() and os.access(str(path), os.X_OK):
                return str(path)
        for name in PATH_NAMES:
            found = shutil.which(name)
            if found:
                return found
        return platform_default_binary()

    @classmethod
    def from_env(cls) -> BrowserConfig:
        profile = expand_path(os.environ.get("MCP_BROWSER_PROFILE") or DEFAULT_PROFILE_PATH)
        flags_raw = os.environ.get("MCP_BROWSER_FLAGS", "")
        extra_flags = [flag.strip() for flag in flags_raw.split(",") if flag.strip()]
        return cls(
            binary_path=cls.detect_binary(),
            profile_path=profile,
            cdp_port=_env_int("MCP_BROWSER_PORT", DEFAULT_CDP_PORT, minimum=1),
            host=(os.environ.get("MCP_BROWSER_HOST") or "127.0.0.1").strip(),
            headless=os.environ.get("MCP_HEADLESS", "0") == "1",
            extra_flags=extra_flags,
            connect_attempts=_env_int("MCP_CONNECT_ATTEMPTS", DEFAULT_CONNECT_ATTEMPTS, minimum=1),
            connect_delay=_env_float("MCP_CONNECT_DELAY", DEFAULT_CONNECT_DELAY),
            probe_timeout=_env_float("MCP_PROBE_TIMEOUT", 2.0, minimum=0.1),
            liveness_timeout=_env_float("MCP_LIVENESS_TIMEOUT", 2.0, minimum=0.1),
            cdp_timeout=_env_float("MCP_CDP_TIMEOUT", 10.0, minimum=0.5),
            max_console_events=_env_int("MCP_CONSOLE_MAX", 1000, minimum=1),
            max_network_exchanges=_env_int("MCP_NETWORK_MAX", 500, minimum=1),
        )

    @property
    def endpoint(self) -> str:
        return f"http://{self.host}:{self.cdp_port}"
