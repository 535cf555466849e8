# taskman_app/config.py

"""File locations and timing constants, overridable through TASKMAN_* environment variables."""

import os
from pathlib import Path
from typing import Optional

ENV_PREFIX = "TASKMAN"


def _env_path(name: str, default: Optional[Path]) -> Optional[Path]:
    raw = os.getenv(f"{ENV_PREFIX}_{name}")
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


DATA_DIR = _env_path("DATA_DIR", Path.cwd())
TASKS_FILE = DATA_DIR / "tasks.txt"
SETTINGS_FILE = DATA_DIR / "settings.json"
LOG_DIR = _env_path("LOG_DIR", None)

# Overdue scan: first check one minute after start, then every five minutes.
NOTIFY_INITIAL_DELAY_MS = 60 * 1000
NOTIFY_INTERVAL_MS = 5 * 60 * 1000

# Dashboard badges (overdue / due soon) are re-evaluated on this interval.
REFRESH_INTERVAL_MS = 60 * 1000
