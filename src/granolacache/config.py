"""Application configuration defaults."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

DEFAULT_LIMIT = 50
UNDATED_POLICIES = ("now", "last")


def _get_default_app_data_dir() -> Path:
    """Get the per-user application data directory the desktop app writes to."""
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


@dataclass(slots=True)
class AppConfig:
    app_data_dir: Path | None = None
    vendor_dir: str = "Granola"
    cache_filename: str = "cache-v3.json"
    default_limit: int = DEFAULT_LIMIT
    # "now" stamps unparseable created_at values with the current time,
    # "last" stamps them with 0 so they sort after every dated document.
    undated_policy: str = "now"

    def __post_init__(self) -> None:
        if self.app_data_dir is None:
            self.app_data_dir = _get_default_app_data_dir()
        self.app_data_dir = Path(self.app_data_dir)
        if self.undated_policy not in UNDATED_POLICIES:
            raise ValueError(
                f"undated_policy must be one of {', '.join(UNDATED_POLICIES)}, got {self.undated_policy!r}"
            )

    def vendor_path(self) -> Path:
        """Directory whose existence marks the desktop app as installed."""
        return Path(self.app_data_dir) / self.vendor_dir

    def cache_path(self) -> Path:
        return self.vendor_path() / self.cache_filename
