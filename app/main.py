from __future__ import annotations

import logging

from fastapi import FastAPI

from app.config import get_app_settings, validate_env
from app.schemas.study import HealthResponse


def _validate_env() -> None:
    """
    Validate environment variables at startup.

    Raises RuntimeError listing every invalid variable so the operator can
    fix all problems in one restart cycle. Unset variables use defaults.
    """

    errors = validate_env()
    if errors:
        raise RuntimeError(
            "Startup validation failed, invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=get_app_settings().log_level_value,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()
    settings = get_app_settings()

    application = FastAPI(
        title=settings.app_title,
        version="1.0.0",
    )

    from app.api.routers import calculate_router, csv_import_router, export_router

    application.include_router(calculate_router)
    application.include_router(csv_import_router)
    application.include_router(export_router)

    @application.get("/health")
    def healthcheck() -> HealthResponse:
        return HealthResponse(service=settings.app_title)

    logging.getLogger(__name__).info("Application created title=%r", settings.app_title)
    return application


app = create_app()
