"""Settings loaded from environment variables.

All keys use the ``TASKBOARD_`` prefix; ``SERVER_PORT`` is also read
unprefixed so existing deployment scripts keep working.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

ENV_PREFIX = "TASKBOARD"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _first_env(*names: str, default: Optional[str] = None) -> Optional[str]:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(*names: str, default: int) -> int:
    raw = _first_env(*names)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./tasks.db"
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 2022

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=_first_env(_k("DATABASE_URL"), default=cls.database_url),
            log_level=(_first_env(_k("LOG_LEVEL"), default=cls.log_level) or "INFO").upper(),
            log_dir=_env_path(_k("LOG_DIR")),
            cors_origins=_env_list(_k("CORS_ORIGINS"), ["*"]),
            host=_first_env(_k("HOST"), default=cls.host),
            port=_env_int(_k("SERVER_PORT"), "SERVER_PORT", default=cls.port),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
