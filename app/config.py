"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}

DEFAULT_APP_TITLE = "AquaFootprint API"
DEFAULT_REPORT_TITLE = "AquaFootprint Copilot - Resultado de estudio"
DEFAULT_CSV_MAX_UPLOAD_BYTES = 1_048_576
DEFAULT_EXPORT_FILENAME_PREFIX = "afp"


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class AppSettings:
    """
    Runtime settings for the footprint API and its exports.
    """

    app_title: str = DEFAULT_APP_TITLE
    log_level: str = "INFO"
    csv_max_upload_bytes: int = DEFAULT_CSV_MAX_UPLOAD_BYTES
    export_filename_prefix: str = DEFAULT_EXPORT_FILENAME_PREFIX
    report_title: str = DEFAULT_REPORT_TITLE

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached application settings from environment variables.
    """

    log_level = _get_str_env("LOG_LEVEL", "INFO").upper()
    if log_level not in _VALID_LOG_LEVELS:
        log_level = "INFO"

    return AppSettings(
        app_title=_get_str_env("APP_TITLE", DEFAULT_APP_TITLE),
        log_level=log_level,
        csv_max_upload_bytes=max(1, _get_int_env("CSV_MAX_UPLOAD_BYTES", DEFAULT_CSV_MAX_UPLOAD_BYTES)),
        export_filename_prefix=_get_str_env("EXPORT_FILENAME_PREFIX", DEFAULT_EXPORT_FILENAME_PREFIX),
        report_title=_get_str_env("REPORT_TITLE", DEFAULT_REPORT_TITLE),
    )


def validate_env() -> list[str]:
    """
    Return one message per environment variable that is set but invalid.

    Unset variables fall back to defaults and are never reported.
    """

    _load_env_once()
    errors: list[str] = []

    log_level = os.getenv("LOG_LEVEL")
    if log_level is not None and log_level.strip() and log_level.strip().upper() not in _VALID_LOG_LEVELS:
        errors.append(
            f"LOG_LEVEL='{log_level.strip()}' is not valid. Allowed values: {sorted(_VALID_LOG_LEVELS)}."
        )

    max_bytes = os.getenv("CSV_MAX_UPLOAD_BYTES")
    if max_bytes is not None and max_bytes.strip():
        try:
            if int(max_bytes) < 1:
                errors.append("CSV_MAX_UPLOAD_BYTES must be a positive integer.")
        except ValueError:
            errors.append(f"CSV_MAX_UPLOAD_BYTES='{max_bytes.strip()}' is not an integer.")

    prefix = os.getenv("EXPORT_FILENAME_PREFIX")
    if prefix is not None and any(char in prefix for char in '/\\"'):
        errors.append("EXPORT_FILENAME_PREFIX must not contain path separators or quotes.")

    return errors
