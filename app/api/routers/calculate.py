"""
app/api/routers/calculate.py

Footprint calculation endpoints.

POST /api/calculate

Body is either a study object or ``{"study": {...}}``. A study with any
blocking issue is answered with HTTP 400 ``{"ok": false, "issues": [...]}``;
otherwise the normalized study, its footprint and the warnings are returned.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.responses import (
    NO_STORE_HEADERS,
    RequestBodyError,
    issues_response,
    read_json_body,
    single_issue_response,
)
from app.schemas.study import (
    CalculateResponse,
    ExampleResponse,
    FootprintResultPayload,
    IssueResponse,
    IssuesResponse,
    StudyResponse,
)
from app.services.study_document import extract_study_candidate
from app.services.study_service import StudyRejectedError, StudyService, get_study_service
from footprint import REFERENCE_STUDY

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["footprint"])

MSG_CALCULATE_FAILED = "No se pudo procesar la solicitud de calculo."


@router.post(
    "/calculate",
    response_model=CalculateResponse,
    responses={400: {"model": IssuesResponse}},
)
async def calculate_study(
    request: Request,
    service: StudyService = Depends(get_study_service),
) -> JSONResponse:
    """
    Validate one study and compute its blue, green and grey footprint.
    """

    try:
        payload = await read_json_body(request)
        evaluation = service.evaluate(extract_study_candidate(payload))
    except RequestBodyError:
        logger.info("Calculate request rejected: body is not JSON")
        return single_issue_response("request", MSG_CALCULATE_FAILED)
    except StudyRejectedError as exc:
        return issues_response(exc.issues)
    except Exception:  # noqa: BLE001
        logger.exception("Calculate request failed")
        return single_issue_response("request", MSG_CALCULATE_FAILED)

    response = CalculateResponse(
        study=StudyResponse.from_study(evaluation.study),
        result=FootprintResultPayload.from_result(evaluation.result),
        issues=[IssueResponse.from_issue(issue) for issue in evaluation.issues],
    )
    return JSONResponse(content=response.model_dump(), headers=NO_STORE_HEADERS)


@router.get("/example", response_model=ExampleResponse)
def reference_example(service: StudyService = Depends(get_study_service)) -> ExampleResponse:
    """
    Return the reference greenhouse study and its footprint (demo data).
    """

    evaluation = service.evaluate(REFERENCE_STUDY)
    return ExampleResponse(
        study=StudyResponse.from_study(evaluation.study),
        result=FootprintResultPayload.from_result(evaluation.result),
    )
