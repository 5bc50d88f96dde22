from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import sys

APP_NAME = "StockFlow"
HOME_ENV = "STOCKFLOW_HOME"


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    db_path: Path
    logs_dir: Path


def _platform_base(app_name: str) -> Path:
    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming"))) / app_name
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / app_name
    return Path.home() / f".{app_name.lower()}"


def get_app_paths(app_name: str = APP_NAME) -> AppPaths:
    """Where the store and logs live.

    ``STOCKFLOW_HOME`` wins over the per-platform default. Directories are
    created on the way out.
    """
    override = os.environ.get(HOME_ENV, "").strip()
    base = Path(override).expanduser() if override else _platform_base(app_name)

    paths = AppPaths(base_dir=base, db_path=base / "stockflow.db", logs_dir=base / "logs")
    paths.logs_dir.mkdir(parents=True, exist_ok=True)
    return paths
