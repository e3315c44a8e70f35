"""
Settings and logging configuration for the truck loading dashboard.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from truckload.errors import ConfigError

DEFAULT_TABLE = "truck_loadings"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    """Application-level settings, read from the environment (and ``.env``)."""

    supabase_url: Optional[str]
    supabase_key: Optional[str]
    table: str = DEFAULT_TABLE
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        return cls(
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_key=os.getenv("SUPABASE_KEY") or None,
            table=os.getenv("TRUCKLOAD_TABLE") or DEFAULT_TABLE,
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )

    def require_credentials(self) -> tuple:
        if not self.supabase_url or not self.supabase_key:
            raise ConfigError("SUPABASE_URL and SUPABASE_KEY must be set (environment or .env).")
        return self.supabase_url, self.supabase_key


def init_logging(settings: Settings) -> None:
    """Configure basic console logging."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger(__name__).info("Logging initialized. Store table %s", settings.table)
