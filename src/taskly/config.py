# src/taskly/config.py

"""Settings loaded from environment variables (+ optional .env).

- One Settings object for the whole app.
- Everything local lives under a gitignored data dir by default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_models import SortMode

ENV_PREFIX = "TASKLY"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path
    export_path: Path

    # ---- View defaults ----
    default_sort: SortMode

    @staticmethod
    def from_env() -> Settings:
        app_name = _first_env(_k("APP_NAME"), default="taskly") or "taskly"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskly"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.json")
        export_path = _env_path(_k("EXPORT_PATH"), Path("taskly-backup.json"))

        default_sort = SortMode.parse(_env(_k("DEFAULT_SORT"), "date-desc")) or SortMode.DATE_DESC

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            data_dir=data_dir,
            storage_path=storage_path,
            export_path=export_path,
            default_sort=default_sort,
        )


def get_settings() -> Settings:
    """Load .env (never overriding real env vars), then read settings."""
    load_dotenv(override=False)
    return Settings.from_env()
