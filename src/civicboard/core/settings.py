"""Centralized application configuration using Pydantic Settings (v2).

This module exposes a cached `load_settings()` loader that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `CIVICBOARD_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    state_dir : Path
        Directory backing the durable key/value store; maps from
        `CIVICBOARD_STATE_DIR`.
    history_limit : int | None
        Maximum undo depth per store. ``None`` keeps history unbounded.
    search_max_length : int
        Longest accepted free-text search query.
    vote_cap : int | None
        Saturation point for local vote counters. ``None`` disables the cap.
    """

    environment: EnvName = Field(default="dev", alias="CIVICBOARD_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    state_dir: Path = Field(
        default_factory=lambda: Path.home() / ".civicboard",
        alias="CIVICBOARD_STATE_DIR",
    )
    history_limit: int | None = Field(default=None, ge=1, alias="CIVICBOARD_HISTORY_LIMIT")
    search_max_length: int = Field(default=100, ge=1, alias="CIVICBOARD_SEARCH_MAX_LENGTH")
    vote_cap: int | None = Field(default=None, ge=1, alias="CIVICBOARD_VOTE_CAP")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("CIVICBOARD_ENV", "dev")
    return Settings()


def get_logger(name: str = "civicboard") -> logging.Logger:
    """Return a process-global logger configured to the current log level.

    The level is read through `load_settings()` so a test that clears the
    cache and changes `LOG_LEVEL` sees the new value.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
