"""Environment settings loaded from ``.env``."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .models.job import DEFAULT_BATCH_SIZE

logger = logging.getLogger(__name__)

REQUIRED_VARIABLES = ("SOURCE_DB_URI", "TARGET_DB_URI", "DB_NAME")


def _parse_int(raw: Optional[str], fallback: int) -> int:
    if raw is None:
        return fallback
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning(f"Ignoring non-integer value {raw!r}, using {fallback}")
        return fallback
    return value if value > 0 else fallback


def _parse_bool(raw: Optional[str], fallback: bool) -> bool:
    if raw is None:
        return fallback
    return raw.strip().lower() in ("1", "true", "yes")


def _parse_str(raw: Optional[str]) -> str:
    return raw.strip() if raw else ""


@dataclass(frozen=True)
class Settings:
    """Connection defaults and flags taken from the environment."""
    source_uri: str = ""
    target_uri: str = ""
    db_name: str = ""
    batch_size: int = DEFAULT_BATCH_SIZE
    copy_indexes: bool = False
    debug: bool = False

    @property
    def missing(self) -> list:
        """Names of required variables that are unset or blank."""
        values = {
            "SOURCE_DB_URI": self.source_uri,
            "TARGET_DB_URI": self.target_uri,
            "DB_NAME": self.db_name,
        }
        return [name for name in REQUIRED_VARIABLES if not values[name]]


def load_settings(env_file: Optional[str] = None, override: bool = False) -> Settings:
    """
    Load settings from the process environment.

    Args:
        env_file: ``.env`` file to read first; defaults to the one found
            by searching upward from the working directory
        override: Let the file win over variables already set

    Returns:
        Settings with invalid numeric values replaced by defaults
    """
    path = env_file if env_file is not None else find_dotenv(usecwd=True)
    if path and Path(path).exists():
        load_dotenv(path, override=override)

    return Settings(
        source_uri=_parse_str(os.environ.get("SOURCE_DB_URI")),
        target_uri=_parse_str(os.environ.get("TARGET_DB_URI")),
        db_name=_parse_str(os.environ.get("DB_NAME")),
        batch_size=_parse_int(os.environ.get("BATCH_SIZE"), DEFAULT_BATCH_SIZE),
        copy_indexes=_parse_bool(os.environ.get("COPY_INDEXES"), False),
        debug=_parse_bool(os.environ.get("DEBUG"), False),
    )
