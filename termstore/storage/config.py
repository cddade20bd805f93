"""Configuration helpers for the on-disk store layout."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .codec import encode

SESSIONS_DIRNAME = "sessions"
HOST_KEYS_FILENAME = "sshhostkeys"
SEED_FILENAME = "randomseed"


def _default_home() -> Path:
    return Path.home() / ".termstore"


@dataclass(frozen=True)
class StorageSettings:
    home: Path
    log_level: str = "WARNING"

    @property
    def sessions_dir(self) -> Path:
        return self.home / SESSIONS_DIRNAME

    @property
    def host_keys_path(self) -> Path:
        return self.home / HOST_KEYS_FILENAME

    @property
    def seed_path(self) -> Path:
        return self.home / SEED_FILENAME

    def session_path(self, name: str | None) -> Path:
        """Return the file backing session ``name`` (``None`` is the default session)."""
        return self.sessions_dir / encode(name)


def _log_level(raw: str) -> str:
    level = raw.strip().upper()
    if isinstance(logging.getLevelName(level), int):
        return level
    return "WARNING"


def load_settings() -> StorageSettings:
    home_raw = os.getenv("TERMSTORE_HOME")
    return StorageSettings(
        home=Path(home_raw).expanduser() if home_raw else _default_home(),
        log_level=_log_level(os.getenv("TERMSTORE_LOG_LEVEL", "WARNING")),
    )
