"""
app/api/routers/export.py

Study result export endpoints.

POST /api/export/csv   -> <prefix>-results.csv
POST /api/export/pdf   -> <prefix>-results.pdf

Body: ``{"study": {...}, "result": {...}?}``. The study is always
re-normalized; a posted ``result`` is reused instead of recalculating.
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from pydantic import ValidationError

from app.api.dependencies import get_settings
from app.api.responses import (
    RequestBodyError,
    attachment_response,
    issues_response,
    read_json_body,
    single_issue_response,
)
from app.config import AppSettings
from app.schemas.study import ExportRequest, IssuesResponse
from app.services.export_service import build_results_csv
from app.services.pdf_report import build_study_pdf
from app.services.study_service import (
    StudyEvaluation,
    StudyRejectedError,
    StudyService,
    get_study_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["export"])


async def _export(
    request: Request,
    service: StudyService,
    *,
    error_field: str,
    error_message: str,
    render: Callable[[StudyEvaluation], Response],
) -> Response:
    try:
        payload = ExportRequest.model_validate(await read_json_body(request))
        precomputed = payload.result.to_result() if payload.result is not None else None
        evaluation = service.evaluate_with_result(payload.study, precomputed)
        response = render(evaluation)
    except (RequestBodyError, ValidationError) as exc:
        logger.info("Export request rejected field=%s: %s", error_field, exc)
        return single_issue_response(error_field, error_message)
    except StudyRejectedError as exc:
        return issues_response(exc.issues)
    except Exception:  # noqa: BLE001
        logger.exception("Export failed field=%s", error_field)
        return single_issue_response(error_field, error_message)

    logger.info(
        "Export generated field=%s total_l_per_kg=%.3f",
        error_field,
        evaluation.result.total_l_per_kg,
    )
    return response


@router.post("/csv", responses={400: {"model": IssuesResponse}})
async def export_csv(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    service: StudyService = Depends(get_study_service),
) -> Response:
    """
    Download the study inputs and footprint as a ``metric,value`` CSV.
    """

    return await _export(
        request,
        service,
        error_field="export.csv",
        error_message="No se pudo exportar el CSV.",
        render=lambda evaluation: attachment_response(
            build_results_csv(evaluation.study, evaluation.result),
            media_type="text/csv; charset=utf-8",
            filename=f"{settings.export_filename_prefix}-results.csv",
        ),
    )


@router.post("/pdf", responses={400: {"model": IssuesResponse}})
async def export_pdf(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    service: StudyService = Depends(get_study_service),
) -> Response:
    """
    Download the study report as PDF, including any warnings.
    """

    return await _export(
        request,
        service,
        error_field="export.pdf",
        error_message="No se pudo exportar el PDF.",
        render=lambda evaluation: attachment_response(
            build_study_pdf(
                evaluation.study,
                evaluation.result,
                evaluation.warnings,
                title=settings.report_title,
            ),
            media_type="application/pdf",
            filename=f"{settings.export_filename_prefix}-results.pdf",
        ),
    )
