"""
app/services package marker.
"""

from app.services.csv_study_service import (
    CSVStudyService,
    CSVUploadError,
    CSVValidationResult,
    get_csv_study_service,
)
from app.services.study_service import (
    StudyEvaluation,
    StudyRejectedError,
    StudyService,
    get_study_service,
)

__all__ = [
    "CSVStudyService",
    "CSVUploadError",
    "CSVValidationResult",
    "get_csv_study_service",
    "StudyEvaluation",
    "StudyRejectedError",
    "StudyService",
    "get_study_service",
]
