"""
app/api/routers/csv_import.py

CSV study import endpoints.

POST /api/csv/validate   multipart ``file`` upload or form field ``csv``
GET  /api/csv/template   CSV template prefilled with the reference study
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, UploadFile, status
from fastapi.responses import JSONResponse, Response

from app.api.dependencies import get_optional_csv_upload, get_settings
from app.api.responses import NO_STORE_HEADERS, attachment_response
from app.config import AppSettings
from app.schemas.study import CSVValidationResponse, IssueResponse
from app.services.csv_study_service import (
    CSVStudyService,
    CSVUploadError,
    decode_csv_bytes,
    get_csv_study_service,
)
from footprint import has_blocking_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/csv", tags=["csv"])

MSG_CSV_FAILED = "No se pudo validar el CSV subido."


def _csv_failure() -> JSONResponse:
    response = CSVValidationResponse(
        ok=False,
        issues=[IssueResponse(field="csv", message=MSG_CSV_FAILED, severity="error")],
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=response.model_dump(),
        headers=NO_STORE_HEADERS,
    )


@router.post(
    "/validate",
    response_model=CSVValidationResponse,
    responses={400: {"model": CSVValidationResponse}},
)
def validate_csv(
    file: UploadFile | None = Depends(get_optional_csv_upload),
    csv: str | None = Form(default=None),
    settings: AppSettings = Depends(get_settings),
    service: CSVStudyService = Depends(get_csv_study_service),
) -> JSONResponse:
    """
    Validate an uploaded study CSV and preview its first data row.
    """

    try:
        if csv is not None:
            text = csv
        elif file is not None:
            max_bytes = settings.csv_max_upload_bytes
            text = decode_csv_bytes(file.file.read(max_bytes + 1), max_bytes=max_bytes)
        else:
            text = ""
        result = service.validate_csv_study(text)
    except CSVUploadError as exc:
        logger.info("CSV upload rejected: %s", exc)
        return _csv_failure()
    except Exception:  # noqa: BLE001
        logger.exception("CSV validation failed")
        return _csv_failure()
    finally:
        if file is not None:
            file.file.close()

    status_code = status.HTTP_400_BAD_REQUEST if has_blocking_errors(result.issues) else status.HTTP_200_OK
    response = CSVValidationResponse.model_validate(result.to_dict())
    return JSONResponse(status_code=status_code, content=response.model_dump(), headers=NO_STORE_HEADERS)


@router.get("/template")
def csv_template(
    settings: AppSettings = Depends(get_settings),
    service: CSVStudyService = Depends(get_csv_study_service),
) -> Response:
    """
    Download the CSV import template.
    """

    return attachment_response(
        service.build_csv_template(),
        media_type="text/csv; charset=utf-8",
        filename=f"{settings.export_filename_prefix}-template.csv",
    )
