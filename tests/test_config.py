"""
tests/test_config.py

Environment-driven settings and startup validation.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from app.config import (
    DEFAULT_CSV_MAX_UPLOAD_BYTES,
    DEFAULT_EXPORT_FILENAME_PREFIX,
    get_app_settings,
    validate_env,
)
from app.main import create_app

_ENV_VARS = (
    "APP_TITLE",
    "LOG_LEVEL",
    "CSV_MAX_UPLOAD_BYTES",
    "EXPORT_FILENAME_PREFIX",
    "REPORT_TITLE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_app_settings.cache_clear()
    yield
    get_app_settings.cache_clear()


def test_defaults() -> None:
    settings = get_app_settings()

    assert settings.log_level == "INFO"
    assert settings.csv_max_upload_bytes == DEFAULT_CSV_MAX_UPLOAD_BYTES
    assert settings.export_filename_prefix == DEFAULT_EXPORT_FILENAME_PREFIX
    assert validate_env() == []


def test_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_TITLE", "Huella Hidrica")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CSV_MAX_UPLOAD_BYTES", "2048")
    monkeypatch.setenv("EXPORT_FILENAME_PREFIX", "tomate")

    settings = get_app_settings()

    assert settings.app_title == "Huella Hidrica"
    assert settings.log_level == "DEBUG"
    assert settings.csv_max_upload_bytes == 2048
    assert settings.export_filename_prefix == "tomate"


def test_invalid_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    monkeypatch.setenv("CSV_MAX_UPLOAD_BYTES", "many")
    monkeypatch.setenv("APP_TITLE", "   ")

    settings = get_app_settings()

    assert settings.log_level == "INFO"
    assert settings.csv_max_upload_bytes == DEFAULT_CSV_MAX_UPLOAD_BYTES
    assert settings.app_title == "AquaFootprint API"


def test_validate_env_reports_every_invalid_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    monkeypatch.setenv("CSV_MAX_UPLOAD_BYTES", "0")
    monkeypatch.setenv("EXPORT_FILENAME_PREFIX", "../out")

    errors = validate_env()

    assert len(errors) == 3
    assert errors[0].startswith("LOG_LEVEL='LOUD'")


def test_create_app_refuses_invalid_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CSV_MAX_UPLOAD_BYTES", "lots")

    with pytest.raises(RuntimeError, match="CSV_MAX_UPLOAD_BYTES"):
        create_app()
