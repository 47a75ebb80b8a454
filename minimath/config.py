from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .sampling import DEFAULT_MAX_ATTEMPTS

STORE_PATH_ENV = "MINIMATH_STORE_PATH"
LOG_LEVEL_ENV = "MINIMATH_LOG_LEVEL"


@dataclass(frozen=True, slots=True)
class GameConfig:
    total_problems: int = 10
    max_attempts: int = 2
    sampling_attempts: int = DEFAULT_MAX_ATTEMPTS
    auto_hint: bool = True  # surface the hint right after a failed first attempt

    def __post_init__(self) -> None:
        if self.total_problems < 1:
            raise ValueError("total_problems must be >= 1")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.sampling_attempts < 1:
            raise ValueError("sampling_attempts must be >= 1")


def default_store_path() -> Path:
    explicit = os.environ.get(STORE_PATH_ENV)
    if explicit:
        return Path(explicit).expanduser()
    return Path.home() / ".minimath" / "store.sqlite3"


def log_level_from_env(default: int = logging.INFO) -> int:
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default
