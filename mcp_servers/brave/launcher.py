from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .config import BrowserConfig, expand_path


class LaunchError(Exception):
    """The browser executable could not be started."""


@dataclass
class LaunchRecord:
    pid: int
    profile_path: str
    port: int
    command: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {"pid": self.pid, "profilePath": self.profile_path, "port": self.port}


class BrowserLauncher:
    def __init__(self, config: BrowserConfig | None = None) -> None:
        self.config = config or BrowserConfig.from_env()

    def _build_common_flags(self) -> list[str]:
        flags = [
            f"--remote-debugging-port={self.config.cdp_port}",
            f"--user-data-dir={expand_path(self.config.profile_path)}",
            "--remote-allow-origins=*",
            "--no-first-run",
            "--no-default-browser-check",
        ]
        if self.config.headless:
            flags.append("--headless=new")
        return flags

    def build_launch_command(self, extra: list[str] | None = None) -> list[str]:
        flags = self._build_common_flags() + list(self.config.extra_flags)
        if extra:
            flags.extend(extra)
        return [self.config.binary_path, *flags]

    @staticmethod
    def _detach_kwargs() -> dict[str, object]:
        kwargs: dict[str, object] = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
            "close_fds": True,
        }
        if sys.platform.startswith("win"):
            kwargs["creationflags"] = getattr(subprocess, "DETACHED_PROCESS", 0x00000008) | getattr(
                subprocess, "CREATE_NEW_PROCESS_GROUP", 0x00000200
            )
        else:
            # New session: the browser survives the server exiting or being signalled.
            kwargs["start_new_session"] = True
        return kwargs

    def launch(self) -> LaunchRecord:
        """Start a detached browser on the configured port and profile.

        Reachability is not checked here; the caller probes afterwards.
        """
        profile = Path(expand_path(self.config.profile_path))
        try:
            profile.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise LaunchError(f"Cannot create profile directory {profile}: {exc}") from exc

        binary = self.config.binary_path
        if os.path.isabs(binary) and not os.path.exists(binary):
            raise LaunchError(f"Browser executable not found: {binary}")

        cmd = self.build_launch_command()
        try:
            proc = subprocess.Popen(cmd, **self._detach_kwargs())  # type: ignore[call-overload]
        except OSError as exc:
            raise LaunchError(f"Failed to start {binary}: {exc}") from exc

        # Only the pid is kept; the child is never waited on.
        return LaunchRecord(pid=proc.pid, profile_path=str(profile), port=self.config.cdp_port, command=cmd)


__all__ = ["BrowserLauncher", "LaunchError", "LaunchRecord"]
