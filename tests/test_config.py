from __future__ import annotations

from pathlib import Path

import pytest

from mcp_servers.brave import config as config_module
from mcp_servers.brave.config import (
    DEFAULT_CDP_PORT,
    DEFAULT_CONNECT_ATTEMPTS,
    DEFAULT_CONNECT_DELAY,
    BrowserConfig,
)

_ENV_VARS = (
    "MCP_BROWSER_PORT",
    "MCP_BROWSER_PROFILE",
    "MCP_BROWSER_BINARY",
    "MCP_BROWSER_HOST",
    "MCP_BROWSER_FLAGS",
    "MCP_HEADLESS",
    "MCP_CONNECT_ATTEMPTS",
    "MCP_CONNECT_DELAY",
    "MCP_PROBE_TIMEOUT",
    "MCP_LIVENESS_TIMEOUT",
    "MCP_CDP_TIMEOUT",
    "MCP_CONSOLE_MAX",
    "MCP_NETWORK_MAX",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_BROWSER_BINARY", "/opt/brave/brave")
    cfg = BrowserConfig.from_env()
    assert cfg.cdp_port == DEFAULT_CDP_PORT == 9222
    assert cfg.host == "127.0.0.1"
    assert cfg.headless is False
    assert cfg.extra_flags == []
    assert cfg.connect_attempts == DEFAULT_CONNECT_ATTEMPTS == 10
    assert cfg.connect_delay == DEFAULT_CONNECT_DELAY == 1.0
    assert cfg.profile_path == str(Path("~/.brave-mcp/profile").expanduser())
    assert cfg.endpoint == "http://127.0.0.1:9222"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_BROWSER_PORT", "9333")
    monkeypatch.setenv("MCP_BROWSER_PROFILE", "/tmp/brave-profile")
    monkeypatch.setenv("MCP_BROWSER_BINARY", "/usr/local/bin/brave")
    monkeypatch.setenv("MCP_BROWSER_FLAGS", "--mute-audio, --window-size=800,600")
    monkeypatch.setenv("MCP_HEADLESS", "1")
    monkeypatch.setenv("MCP_CONNECT_ATTEMPTS", "3")
    monkeypatch.setenv("MCP_CONNECT_DELAY", "0.25")
    monkeypatch.setenv("MCP_CONSOLE_MAX", "50")
    cfg = BrowserConfig.from_env()
    assert cfg.cdp_port == 9333
    assert cfg.profile_path == "/tmp/brave-profile"
    assert cfg.binary_path == "/usr/local/bin/brave"
    # Comma separated; a flag value cannot itself contain a comma.
    assert cfg.extra_flags == ["--mute-audio", "--window-size=800", "600"]
    assert cfg.headless is True
    assert cfg.connect_attempts == 3
    assert cfg.connect_delay == 0.25
    assert cfg.max_console_events == 50


def test_malformed_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_BROWSER_BINARY", "/opt/brave/brave")
    monkeypatch.setenv("MCP_BROWSER_PORT", "not-a-port")
    monkeypatch.setenv("MCP_CONNECT_ATTEMPTS", "ten")
    monkeypatch.setenv("MCP_CONNECT_DELAY", "")
    cfg = BrowserConfig.from_env()
    assert cfg.cdp_port == 9222
    assert cfg.connect_attempts == 10
    assert cfg.connect_delay == 1.0


def test_connect_attempts_has_floor_of_one(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_BROWSER_BINARY", "/opt/brave/brave")
    monkeypatch.setenv("MCP_CONNECT_ATTEMPTS", "0")
    assert BrowserConfig.from_env().connect_attempts == 1


def test_detect_binary_prefers_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MCP_BROWSER_BINARY", "~/bin/brave")
    assert BrowserConfig.detect_binary() == str(Path("~/bin/brave").expanduser())


def test_detect_binary_uses_existing_candidate(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    binary = tmp_path / "brave"
    binary.write_text("#!/bin/sh\n")
    binary.chmod(0o755)
    monkeypatch.setattr(config_module, "DEFAULT_BINARY_CANDIDATES", [str(tmp_path / "missing"), str(binary)])
    assert BrowserConfig.detect_binary() == str(binary)


def test_detect_binary_falls_back_to_path_then_platform(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "DEFAULT_BINARY_CANDIDATES", [])
    monkeypatch.setattr(config_module.shutil, "which", lambda name: "/usr/bin/brave" if name == "brave" else None)
    assert BrowserConfig.detect_binary() == "/usr/bin/brave"

    monkeypatch.setattr(config_module.shutil, "which", lambda name: None)
    assert BrowserConfig.detect_binary() == config_module.platform_default_binary()
