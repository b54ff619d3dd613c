"""Operating-system detection and per-platform configuration roots."""

import os
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PlatformInfo:
    platform: str
    is_windows: bool
    is_mac: bool
    is_linux: bool


def detect_platform(platform: str | None = None) -> PlatformInfo:
    name = platform or sys.platform
    return PlatformInfo(
        platform=name,
        is_windows=name == "win32",
        is_mac=name == "darwin",
        is_linux=name.startswith("linux"),
    )


def application_support_root(info: PlatformInfo) -> Path:
    home = Path.home()
    if info.is_windows:
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else home / "AppData" / "Roaming"
    if info.is_mac:
        return home / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else home / ".config"


def temp_root() -> Path:
    return Path(tempfile.gettempdir())


def os_label(info: PlatformInfo) -> str:
    if info.is_windows:
        return "Windows"
    if info.is_mac:
        return "macOS"
    if info.is_linux:
        return "Linux"
    return info.platform
