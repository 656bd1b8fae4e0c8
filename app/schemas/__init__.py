"""
app/schemas package marker.
"""

from app.schemas.study import (
    CalculateResponse,
    CSVValidationResponse,
    ExampleResponse,
    ExportRequest,
    FootprintResultPayload,
    HealthResponse,
    IssueResponse,
    IssuesResponse,
    StudyResponse,
)

__all__ = [
    "CalculateResponse",
    "CSVValidationResponse",
    "ExampleResponse",
    "ExportRequest",
    "FootprintResultPayload",
    "HealthResponse",
    "IssueResponse",
    "IssuesResponse",
    "StudyResponse",
]
