from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from mcp_servers.brave import launcher as launcher_module
from mcp_servers.brave.config import BrowserConfig
from mcp_servers.brave.launcher import BrowserLauncher, LaunchError


def _config(tmp_path: Path, **overrides: Any) -> BrowserConfig:
    binary = tmp_path / "brave"
    binary.write_text("#!/bin/sh\n")
    values: dict[str, Any] = {
        "binary_path": str(binary),
        "profile_path": str(tmp_path / "profile"),
        "cdp_port": 9555,
    }
    values.update(overrides)
    return BrowserConfig(**values)


def test_launch_command_carries_port_and_profile(tmp_path: Path) -> None:
    cfg = _config(tmp_path, extra_flags=["--mute-audio"])
    cmd = BrowserLauncher(cfg).build_launch_command(["--window-size=800,600"])
    assert cmd[0] == cfg.binary_path
    assert "--remote-debugging-port=9555" in cmd
    assert f"--user-data-dir={tmp_path / 'profile'}" in cmd
    assert "--no-first-run" in cmd
    assert "--headless=new" not in cmd
    assert cmd[-2:] == ["--mute-audio", "--window-size=800,600"]


def test_launch_command_headless(tmp_path: Path) -> None:
    cmd = BrowserLauncher(_config(tmp_path, headless=True)).build_launch_command()
    assert "--headless=new" in cmd


def test_launch_detaches_and_records_pid(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    captured: dict[str, Any] = {}

    class FakePopen:
        def __init__(self, cmd: list[str], **kwargs: Any) -> None:
            captured["cmd"] = cmd
            captured["kwargs"] = kwargs
            self.pid = 4242

    monkeypatch.setattr(launcher_module.subprocess, "Popen", FakePopen)
    monkeypatch.setattr(launcher_module.sys, "platform", "linux")
    cfg = _config(tmp_path)

    record = BrowserLauncher(cfg).launch()

    assert record.pid == 4242
    assert record.port == 9555
    assert Path(record.profile_path).is_dir()
    assert record.to_dict() == {"pid": 4242, "profilePath": str(tmp_path / "profile"), "port": 9555}
    kwargs = captured["kwargs"]
    assert kwargs["start_new_session"] is True
    assert kwargs["stdout"] is launcher_module.subprocess.DEVNULL
    assert "--remote-debugging-port=9555" in captured["cmd"]


def test_detach_kwargs_on_windows(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(launcher_module.sys, "platform", "win32")
    kwargs = BrowserLauncher._detach_kwargs()
    assert "start_new_session" not in kwargs
    assert kwargs["creationflags"] & 0x00000008
    assert kwargs["creationflags"] & 0x00000200


def test_launch_missing_binary_raises(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fail_popen(*args: Any, **kwargs: Any) -> None:
        raise AssertionError("Popen must not be called")

    monkeypatch.setattr(launcher_module.subprocess, "Popen", fail_popen)
    cfg = _config(tmp_path, binary_path=str(tmp_path / "nope" / "brave"))
    with pytest.raises(LaunchError, match="not found"):
        BrowserLauncher(cfg).launch()


def test_launch_spawn_failure_raises(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def broken_popen(*args: Any, **kwargs: Any) -> None:
        raise PermissionError("permission denied")

    monkeypatch.setattr(launcher_module.subprocess, "Popen", broken_popen)
    with pytest.raises(LaunchError, match="Failed to start"):
        BrowserLauncher(_config(tmp_path)).launch()
